"""
================================================================================
Suite Pytest Configuration
================================================================================

This module registers the project markers, tags tests by location, keeps the
live-site journeys opt-in and logs the lifecycle of every test.

================================================================================
"""

import pytest
from loguru import logger


MARKERS = [
    # Priority
    "P0: Release blocker; the storefront journey is unusable without it",
    "P1: Core shopping flow",
    "P2: Edge cases of a core flow",
    "P3: Cosmetic or exhaustive checks",
    # Run type
    "smoke: Fast sanity subset",
    "regression: Full regression run",
    "e2e: Multi-page customer journey",
    "live: Runs against the live storefront (needs --live)",
    # Location, added automatically
    "ui: Lives under ui_testing/",
    "unit: Browser-free test against Playwright fakes",
    # Feature
    "search: Product search and result listing",
    "navigation: Product detail tabs and listing navigation",
    "cart: Shopping cart",
]


def pytest_configure(config):
    for marker in MARKERS:
        config.addinivalue_line("markers", marker)


def pytest_collection_modifyitems(config, items):
    """
    Add location markers and skip live journeys unless --live is given.
    """
    run_live = config.getoption("--live")
    skip_live = pytest.mark.skip(reason="live storefront journey; run with --live")

    for item in items:
        parts = item.path.parts

        if "ui_testing" in parts:
            item.add_marker(pytest.mark.ui)

        if "unit" in parts:
            item.add_marker(pytest.mark.unit)

        if "live" in item.keywords and not run_live:
            item.add_marker(skip_live)


# ================================================================================
# Test Lifecycle Logging
# ================================================================================

def pytest_runtest_logstart(nodeid, location):
    logger.info(f"▶️ Test started: {nodeid}")


def pytest_runtest_logreport(report):
    """Log pass (with duration), failure (with error) and skip per test."""
    if report.when == "call":
        if report.passed:
            logger.info(f"✅ Test passed: {report.nodeid} ({report.duration:.2f}s)")
        elif report.failed:
            error = report.longreprtext.strip().splitlines()[-1:] or ["<no details>"]
            logger.error(f"❌ Test failed: {report.nodeid} - {error[0]}")
    elif report.skipped and report.when == "setup":
        reason = report.longrepr[2] if isinstance(report.longrepr, tuple) else ""
        logger.warning(f"⏭️ Test skipped: {report.nodeid} {reason}")
    elif report.failed:
        logger.error(f"❌ Test {report.when} error: {report.nodeid}")


def pytest_report_header(config):
    return [
        "",
        "=" * 60,
        "Trendyol UI Automation Suite",
        "=" * 60,
        "",
    ]
