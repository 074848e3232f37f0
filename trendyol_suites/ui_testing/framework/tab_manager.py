"""
================================================================================
Tab Manager
================================================================================

Tracks browser tabs opened by product navigation.

Trendyol opens every product card in a new tab. Playwright models each tab
as its own Page inside the same BrowserContext, so "switching" means choosing
which Page the next page object drives and bringing it to the front.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, List, Optional

import allure
from loguru import logger
from playwright.async_api import BrowserContext, Page

from .exceptions import PageActionError
from .timeouts import Timeouts
from .wait_strategy import WaitStrategy


class TabManager:
    """
    Tab bookkeeping for one browser context.

    The page the manager is created with is the *original* tab; it is never
    closed by the manager.

    Usage:
        tabs = TabManager(page)
        product_page = await tabs.open_in_new_tab(lambda: card.click())
        ...
        await tabs.close_current_tab_and_switch_to_original()
    """

    def __init__(
        self,
        page: Page,
        waits: Optional[WaitStrategy] = None,
        timeouts: Optional[Timeouts] = None,
    ):
        self.original = page
        self.current = page
        self.timeouts = timeouts or (waits.timeouts if waits else Timeouts())
        self.waits = waits or WaitStrategy(page, self.timeouts)

    @property
    def context(self) -> BrowserContext:
        return self.original.context

    @property
    def pages(self) -> List[Page]:
        """Open tabs in opening order."""
        return [page for page in self.context.pages if not page.is_closed()]

    @property
    def tab_count(self) -> int:
        return len(self.pages)

    @allure.step("Wait for new tab (currently {previous_count})")
    async def wait_for_new_tab(
        self,
        previous_count: int,
        timeout: Optional[float] = None,
    ) -> int:
        """
        Wait until more than ``previous_count`` tabs are open.

        Returns:
            The new tab count

        Raises:
            WaitTimeoutError: If no new tab opens within the budget
        """
        timeout = self.timeouts.new_tab if timeout is None else timeout

        def more_tabs() -> int:
            count = self.tab_count
            return count if count > previous_count else 0

        count = await self.waits.until(
            more_tabs,
            timeout=timeout,
            description=f"tab count > {previous_count}",
        )
        logger.info(f"New tab opened ({previous_count} -> {count})")
        return count

    @allure.step("Switch to new tab")
    async def switch_to_new_tab(self, original: Optional[Page] = None) -> Optional[Page]:
        """
        Switch to the most recently opened tab other than ``original``.

        Args:
            original: Tab to skip; defaults to the manager's original tab

        Returns:
            The activated page, or None if no other tab is open
        """
        original = original or self.original
        candidates = [page for page in self.pages if page is not original]
        if not candidates:
            logger.warning("No new tab to switch to")
            return None

        page = candidates[-1]
        await page.bring_to_front()
        await WaitStrategy(page, self.timeouts).for_load_state("domcontentloaded")
        self.current = page
        logger.info(f"Switched to new tab: {page.url}")
        return page

    @allure.step("Switch to original tab")
    async def switch_to_original_tab(self) -> Page:
        await self.original.bring_to_front()
        self.current = self.original
        logger.info("Switched to original tab")
        return self.original

    @allure.step("Close current tab and switch to original")
    async def close_current_tab_and_switch_to_original(self) -> Page:
        """Close the active tab (unless it is the original) and go back."""
        if self.current is self.original:
            logger.warning("Current tab is the original tab; not closing it")
        elif not self.current.is_closed():
            await self.current.close()
            logger.info("Current tab closed")
        return await self.switch_to_original_tab()

    @allure.step("Close all tabs except the original")
    async def close_other_tabs(self) -> int:
        """
        Close every tab except the original.

        Returns:
            Number of tabs closed
        """
        others = [page for page in self.pages if page is not self.original]
        for page in others:
            await page.close()
        if others:
            logger.info(f"Closed {len(others)} extra tab(s)")
        await self.switch_to_original_tab()
        return len(others)

    async def open_in_new_tab(
        self,
        action: Callable[[], Awaitable[Any]],
        timeout: Optional[float] = None,
    ) -> Page:
        """
        Run an action that opens a tab, then switch to that tab.

        Args:
            action: Async callable performing the click
            timeout: New-tab budget in seconds

        Returns:
            The newly opened page
        """
        before = self.tab_count
        await action()
        await self.wait_for_new_tab(before, timeout)

        page = await self.switch_to_new_tab()
        if page is None:
            raise PageActionError("New tab closed before it could be activated")
        return page


__all__ = [
    "TabManager",
]
