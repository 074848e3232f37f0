"""
Repository-level pytest configuration.

Provides:
  - Command line options for the live UI journeys (--live, --ui-browser, --ui-headed)
  - Logger initialisation from config/config.yaml
  - Allure environment.properties for every run with --alluredir

Option values are exported as environment variables so that ConfigLoader
(BROWSER_NAME / BROWSER_HEADLESS overrides) sees them everywhere.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from trendyol_tools.common import get_config, init_logger
from trendyol_tools.report_tools.allure_utils import write_environment_properties


def pytest_addoption(parser):
    group = parser.getgroup("trendyol", "Trendyol UI automation")
    group.addoption(
        "--live",
        action="store_true",
        default=False,
        help="Run journeys against the live storefront (skipped otherwise)",
    )
    group.addoption(
        "--ui-browser",
        default=None,
        help="Browser for live journeys: chromium, chrome, edge, firefox, webkit",
    )
    group.addoption(
        "--ui-headed",
        action="store_true",
        default=False,
        help="Show the browser window during live journeys",
    )


def pytest_configure(config):
    browser = config.getoption("--ui-browser")
    if browser:
        os.environ["BROWSER_NAME"] = browser
    if config.getoption("--ui-headed"):
        os.environ["BROWSER_HEADLESS"] = "false"

    init_logger()


def pytest_sessionstart(session):
    """Describe the run in the Allure report's Environment widget."""
    results_dir = getattr(session.config.option, "allure_report_dir", None)
    if not results_dir:
        return

    write_environment_properties(
        results_dir,
        {
            "Browser": get_config("browser.name", "chromium"),
            "Headless": get_config("browser.headless", False),
            "Base.URL": get_config("app.base_url", "https://www.trendyol.com/"),
            "Locale": get_config("browser.locale", "tr-TR"),
            "Live": session.config.getoption("--live"),
        },
    )


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent
