"""
================================================================================
Home Page Object
================================================================================

Trendyol landing page: header search, account/cart/favorites links and the
category bar.

Search submits through a script click on the magnifier icon, which is
rendered underneath the suggestion dropdown and rarely receives a real
pointer click.

================================================================================
"""

from __future__ import annotations

from typing import List

import allure
from loguru import logger
from playwright.async_api import Locator

from trendyol_suites.ui_testing.framework.exceptions import PageActionError
from trendyol_suites.ui_testing.framework.page_base import PageBase
from trendyol_suites.ui_testing.framework.urls import SEARCH_RESULTS_MARKER

from .search_results_page import SearchResultsPage


class HomePage(PageBase):
    """Page Object for the Trendyol home page."""

    # ============================================================
    # Page Elements
    # ============================================================

    SEARCH_BOX = "input[data-testid='suggestion']"
    SEARCH_ICON = "i[data-testid='search-icon']"
    LOGO = "a.logo"
    CATEGORY_LINKS = "a.category-header"

    def category_link(self, name: str) -> Locator:
        """Category bar entry whose label contains ``name``."""
        return self.page.locator(self.CATEGORY_LINKS).filter(has_text=name).first

    # ============================================================
    # Page Lifecycle
    # ============================================================

    @allure.step("Open home page")
    async def open(self) -> "HomePage":
        """
        Navigate to the storefront root, dismiss overlays and verify the page.

        Raises:
            ElementNotFoundError: If the header search box never shows up
            PageActionError: If the logo or search box is not displayed after
                overlays are dismissed
        """
        await self.navigate(self.base_url)
        await self.wait_until_loaded()
        await self.handle_popups()
        await self.verify_home_page()
        return self

    async def wait_until_loaded(self) -> "HomePage":
        await self.wait_for_page_ready()
        await self.smart.locate("search_box", timeout=self.timeouts.element_visible)
        return self

    @allure.step("Verify home page")
    async def verify_home_page(self) -> None:
        if not await self.is_home_page_loaded():
            raise PageActionError(f"Home page not loaded: {self.current_url}")
        logger.info("✅ Home page verified")

    async def is_home_page_loaded(self) -> bool:
        return await self.is_logo_displayed() and await self.is_search_box_displayed()

    async def is_logo_displayed(self) -> bool:
        return await self.smart.is_visible("logo", timeout=self.timeouts.action)

    async def is_search_box_displayed(self) -> bool:
        return await self.smart.is_visible("search_box", timeout=self.timeouts.action)

    # ============================================================
    # Search
    # ============================================================

    @allure.step("Search for: {keyword}")
    async def search_for(self, keyword: str) -> SearchResultsPage:
        """
        Type a keyword and submit the search.

        Returns:
            SearchResultsPage, already waited until loaded
        """
        logger.info(f"Searching for: {keyword}")
        await self.type_in_search_box(keyword)
        await self.click_search_icon()
        await self.waits.for_url_contains(SEARCH_RESULTS_MARKER)

        results = self._sibling(SearchResultsPage)
        return await results.wait_until_loaded()

    async def type_in_search_box(self, keyword: str) -> None:
        search_box = await self.smart.locate("search_box", timeout=self.timeouts.element_visible)
        await self.actions.safe_type(search_box, keyword, description="Search box")

    async def click_search_icon(self) -> None:
        icon = await self.smart.locate("search_icon", timeout=self.timeouts.element_visible)
        await self.actions.click_via_script(icon, description="Search icon")

    async def get_search_box_placeholder(self) -> str:
        return await self.actions.get_attribute(self.smart.primary("search_box"), "placeholder")

    # ============================================================
    # Categories
    # ============================================================

    @allure.step("Click category: {name}")
    async def click_category(self, name: str) -> None:
        await self.actions.safe_click(self.category_link(name), description=f"Category '{name}'")
        await self.wait_for_page_ready()
        logger.info(f"Category opened: {name}")

    async def is_category_displayed(self, name: str) -> bool:
        return await self.actions.is_displayed(self.category_link(name))

    async def get_all_category_names(self) -> List[str]:
        texts = await self.page.locator(self.CATEGORY_LINKS).all_text_contents()
        names = [text.strip() for text in texts if text.strip()]
        logger.debug(f"Categories found: {len(names)}")
        return names

    # ============================================================
    # Header Links
    # ============================================================

    async def click_login(self) -> None:
        await self._click_header("login_link", "Giriş Yap")

    async def click_cart(self) -> None:
        await self._click_header("cart_link", "Sepetim")

    async def click_favorites(self) -> None:
        await self._click_header("favorites_link", "Favorilerim")

    async def click_logo(self) -> None:
        await self._click_header("logo", "Logo")

    async def is_login_button_displayed(self) -> bool:
        return await self.smart.is_visible("login_link", timeout=self.timeouts.action)

    async def is_cart_icon_displayed(self) -> bool:
        return await self.smart.is_visible("cart_link", timeout=self.timeouts.action)

    async def is_favorites_icon_displayed(self) -> bool:
        return await self.smart.is_visible("favorites_link", timeout=self.timeouts.action)

    async def _click_header(self, element_name: str, description: str) -> None:
        link = await self.smart.locate(element_name, timeout=self.timeouts.element_visible)
        await self.actions.safe_click(link, description=description)
        await self.waits.for_page_load()


__all__ = [
    "HomePage",
]
