"""
================================================================================
Base Page Object
================================================================================

Foundation class for the Trendyol Page Object Model.

Provides:
    - Navigation and URL handling
    - Shared wait strategy, safe element actions and smart locators
    - Popup dismissal and tab switching
    - Screenshot and debugging utilities

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import base64
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from trendyol_tools.common import ensure_directory, get_config
from trendyol_tools.report_tools.allure_utils import attach_page_state, attach_png

from .element_actions import ElementActions, RetryConfig
from .exceptions import PageActionError
from .popup_handler import PopupHandler
from .smart_locator import SmartLocator
from .tab_manager import TabManager
from .timeouts import Timeouts, to_ms
from .urls import BASE_URL, page_url
from .wait_strategy import WaitStrategy


class BasePage:
    """
    Base class for all page objects.

    Every page object shares one WaitStrategy and one ElementActions, so a
    whole journey runs against the same timeout and retry budgets.

    Usage:
        class CartPage(BasePage):
            URL_MARKER = "/sepet"

            async def wait_until_loaded(self) -> "CartPage":
                await self.waits.for_page_load()
                return self
    """

    # Override in subclasses
    URL_MARKER: str = ""

    def __init__(
        self,
        page: Page,
        base_url: Optional[str] = None,
        timeouts: Optional[Timeouts] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        """
        Args:
            page: Tab this page object drives
            base_url: Storefront root URL (default: app.base_url)
            timeouts: Wait budgets (default: "timeouts" config section)
            retry_config: Retry behavior (default: "retry" config section)
        """
        self.page = page
        self.base_url = base_url or get_config("app.base_url", BASE_URL)
        self.timeouts = timeouts or Timeouts.from_config()
        self.retry_config = retry_config or RetryConfig.from_config()

        self.waits = WaitStrategy(page, self.timeouts)
        self.actions = ElementActions(page, self.waits, self.timeouts, self.retry_config)
        self.smart = SmartLocator(page)
        self.popups = PopupHandler(page, self.waits, self.actions, self.timeouts)
        self.tabs = TabManager(page, self.waits, self.timeouts)

    def smart_locator(
        self,
        primary: str,
        fallbacks: Optional[List[str]] = None,
        name: str = "custom_element",
    ) -> SmartLocator:
        """
        Single-element SmartLocator: ``primary`` first, then ``fallbacks`` in order.

        Page objects declare such locators as properties and resolve them
        later via ``await .locate()``.
        """
        locators: Dict[str, str] = {"primary": primary}
        for i, fb in enumerate(fallbacks or [], start=1):
            locators[f"fallback_{i}"] = fb
        return SmartLocator(self.page, element_name=name, locators=locators)

    def _sibling(self, page_class: type, page: Optional[Page] = None) -> Any:
        """Build another page object sharing this one's budgets."""
        return page_class(
            page or self.page,
            base_url=self.base_url,
            timeouts=self.timeouts,
            retry_config=self.retry_config,
        )

    # =========================================================================
    # Navigation
    # =========================================================================

    async def navigate(self, url: str, wait_until: str = "domcontentloaded") -> None:
        """
        Navigate to an absolute URL.

        Args:
            url: Target URL
            wait_until: Playwright load event - 'load', 'domcontentloaded', 'networkidle'
        """
        with allure.step(f"Navigate to {url}"):
            try:
                await self.page.goto(
                    url,
                    wait_until=wait_until,
                    timeout=to_ms(self.timeouts.page_load),
                )
            except PlaywrightError as e:
                raise PageActionError(f"Navigation to {url} failed: {e}") from e
            logger.info(f"Navigated to: {url}")

    async def navigate_to(self, path: str, wait_until: str = "domcontentloaded") -> None:
        """Navigate to a path relative to the base URL."""
        await self.navigate(page_url(path, self.base_url), wait_until)

    @property
    def current_url(self) -> str:
        return self.page.url

    async def get_page_title(self) -> str:
        return await self.page.title()

    async def refresh(self) -> None:
        with allure.step("Refresh page"):
            await self.page.reload(wait_until="domcontentloaded")
            await self.waits.for_page_load()

    async def go_back(self) -> None:
        with allure.step("Navigate back"):
            await self.page.go_back(wait_until="domcontentloaded")
            await self.waits.for_page_load()

    async def go_forward(self) -> None:
        with allure.step("Navigate forward"):
            await self.page.go_forward(wait_until="domcontentloaded")
            await self.waits.for_page_load()

    async def wait_for_page_ready(self) -> None:
        """Document ready, then pending AJAX drained. Both only warn on timeout."""
        await self.waits.for_page_load()
        await self.waits.for_ajax()

    def url_contains(self, fragment: str) -> bool:
        return fragment in self.page.url

    # =========================================================================
    # Popups and Tabs
    # =========================================================================

    async def handle_popups(self) -> Dict[str, bool]:
        return await self.popups.handle_popups()

    @property
    def tab_count(self) -> int:
        return self.tabs.tab_count

    async def switch_to_new_tab(self) -> Optional[Page]:
        return await self.tabs.switch_to_new_tab()

    async def switch_to_original_tab(self) -> Page:
        return await self.tabs.switch_to_original_tab()

    async def close_current_tab_and_switch_to_original(self) -> Page:
        return await self.tabs.close_current_tab_and_switch_to_original()

    async def close_other_tabs(self) -> int:
        return await self.tabs.close_other_tabs()

    async def open_in_new_tab(self, action: Callable[[], Awaitable[Any]]) -> Page:
        return await self.tabs.open_in_new_tab(action)

    # =========================================================================
    # Scrolling
    # =========================================================================

    async def scroll_to_top(self) -> None:
        await self.actions.scroll_to_top()

    async def scroll_to_bottom(self) -> None:
        await self.actions.scroll_to_bottom()

    async def scroll_by(self, pixels: int) -> None:
        await self.page.evaluate("(dy) => window.scrollBy(0, dy)", pixels)

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def screenshot(
        self,
        name: str,
        full_page: bool = False,
        attach_to_allure: bool = True,
    ) -> Path:
        """
        Save ``<name>_<timestamp>.png`` under reporting.screenshot_dir.

        The image is also attached to the current Allure step unless
        ``attach_to_allure`` is False.
        """
        directory = Path(ensure_directory(get_config("reporting.screenshot_dir", "./screenshots/")))
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        filepath = directory / f"{name}_{timestamp}.png"

        image = await self.page.screenshot(path=str(filepath), full_page=full_page)

        if attach_to_allure:
            attach_png(image, name=name)

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    async def screenshot_bytes(self, full_page: bool = False) -> bytes:
        return await self.page.screenshot(full_page=full_page)

    async def screenshot_base64(self, full_page: bool = False) -> str:
        return base64.b64encode(await self.screenshot_bytes(full_page)).decode("ascii")

    async def capture_failure(self, test_name: str) -> Optional[Path]:
        """
        Full-page screenshot plus URL and title, for a failed test.

        Best-effort: returns None when the tab was closed before teardown or
        the screenshot could not be taken, so the original failure stays the
        one reported.
        """
        if self.page.is_closed():
            logger.warning(f"Page already closed; no failure capture for {test_name}")
            return None

        try:
            with allure.step(f"Capture failure state: {test_name}"):
                path = await self.screenshot(f"failure_{test_name}", full_page=True)
                attach_page_state(self.page.url, await self.get_page_title(), name="Failure Page")
                return path
        except (PlaywrightError, OSError) as e:
            logger.warning(f"⚠️ Failed to capture screenshot on failure: {e}")
            return None

    def get_locator_health_report(self) -> str:
        return self.smart.get_health_report()


# Many page objects prefer the PageBase naming
PageBase = BasePage


__all__ = [
    "BasePage",
    "PageBase",
]
