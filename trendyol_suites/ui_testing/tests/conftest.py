"""
================================================================================
UI Testing Pytest Configuration
================================================================================

This module configures pytest for the live storefront journeys, providing
fixtures for browser management, page objects, and test setup/teardown.

Key Features:
- Browser, context and page lifecycle management (one browser per test)
- Page Object fixtures (home page opened with overlays dismissed)
- Screenshot capture on failure, attached to Allure with the failing URL
- Shared search test data

================================================================================
"""

from typing import AsyncGenerator

import pytest
from loguru import logger
from playwright.async_api import BrowserContext, Error as PlaywrightError, Page

from trendyol_suites.ui_testing.framework.browser_manager import BrowserManager
from trendyol_suites.ui_testing.framework.page_base import BasePage
from trendyol_suites.ui_testing.pages.home_page import HomePage
from trendyol_tools.common import get_config


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Expose each phase's report on the test item (item.rep_setup, item.rep_call).

    The page fixture reads ``rep_call`` during teardown to decide whether a
    failure screenshot is needed.
    """
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="function")
async def browser_manager() -> AsyncGenerator[BrowserManager, None]:
    """
    One browser per test, configured from the "browser" section.

    --ui-browser and --ui-headed override it through BROWSER_NAME and
    BROWSER_HEADLESS.
    """
    manager = BrowserManager.from_config()
    await manager.start()
    yield manager
    await manager.close()


@pytest.fixture(scope="function")
async def context(browser_manager: BrowserManager) -> AsyncGenerator[BrowserContext, None]:
    """Fresh Turkish-locale context per test; cookies and cart contents are not shared."""
    context = await browser_manager.new_context()
    yield context


@pytest.fixture(scope="function")
async def page(request, context: BrowserContext) -> AsyncGenerator[Page, None]:
    """
    First tab of the test context.

    On a failed test the active page is captured (full-page screenshot,
    URL and title) before the browser goes away.
    """
    page = await context.new_page()
    yield page

    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed and get_config("reporting.screenshot_on_failure", True):
        try:
            # Product tabs may have replaced the original page; capture the front-most one
            open_pages = [p for p in context.pages if not p.is_closed()]
            target = open_pages[-1] if open_pages else page
            if await BasePage(target).capture_failure(request.node.name):
                logger.info(f"Failure captured for {request.node.name}: {target.url}")
        except (PlaywrightError, OSError) as e:
            # Never turn a failed test into a teardown error
            logger.warning(f"⚠️ Failed to capture screenshot on failure: {e}")


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
async def home_page(page: Page) -> HomePage:
    """
    Provides HomePage, opened and verified, with overlays dismissed.

    Use this fixture as the entry point of every storefront journey.
    """
    return await HomePage(page).open()


# ================================================================================
# Utility Fixtures
# ================================================================================

@pytest.fixture
def test_data():
    """Search inputs shared by the journeys."""
    return {
        "search_keyword": get_config("test_data.search_keyword", "laptop"),
        "multi_word_keyword": "kablosuz kulaklık",
        "turkish_keyword": "çanta",
        "no_result_keyword": "xqzvbnmasdfgh123",
        "price_range": {"min": 10000, "max": 50000},
        "category": "Elektronik",
    }
