"""
================================================================================
Search Results Page Object
================================================================================

This module defines the Page Object for the Trendyol search results listing
("/sr?q=...").

Key Features:
- Result count and keyword parsing (Turkish number formats)
- Product card access by index (brand, name, price)
- Price range filter
- Infinite scroll handling
- Product navigation (every product card opens a new tab)

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from trendyol_suites.ui_testing.framework.exceptions import (
    PageActionError,
    UIAutomationError,
    WaitTimeoutError,
)
from trendyol_suites.ui_testing.framework.page_base import PageBase
from trendyol_suites.ui_testing.framework.timeouts import to_ms
from trendyol_suites.ui_testing.framework.turkish_text import parse_count, parse_turkish_number
from trendyol_suites.ui_testing.framework.urls import SEARCH_RESULTS_MARKER

from .product_detail_page import ProductDetailPage


class SearchResultsPage(PageBase):
    """
    Page Object for the search results listing.

    Product indexes are 0-based and refer to cards currently rendered in the
    DOM; scroll_to_load_more_products() renders more of them.
    """

    URL_MARKER = SEARCH_RESULTS_MARKER

    # ============================================================
    # Page Elements
    # ============================================================

    TITLE = "h1[data-testid='title']"
    RESULT_COUNT = "span[data-testid='result-count-info']"
    PRODUCT_CARDS = "a.product-card"
    PRODUCT_BRAND = ".product-brand"
    PRODUCT_NAME = ".product-name"
    PRODUCT_PRICE = ".discounted-price"
    PRODUCT_IMAGE = "img"

    PRICE_MIN_INPUT = "input[data-testid='price-range-input-min']"
    PRICE_MAX_INPUT = "input[data-testid='price-range-input-max']"
    PRICE_APPLY_BUTTON = "button[data-testid='price-range-button']"
    PRICE_FILTER_HEADER = "section[data-aggregationtype='Price'] button.expand-collapse-button"
    PRICE_FILTER_CONTAINER = "section[data-aggregationtype='Price'] .aggregation-container"

    NO_RESULTS_BANNER = ".did-you-mean .information-banner"
    EMPTY_RESULT = ".empty-result"
    SORT_DROPDOWN = "button.select-box"

    @property
    def product_cards(self) -> Locator:
        return self.page.locator(self.PRODUCT_CARDS)

    def product_card(self, index: int) -> Locator:
        return self.product_cards.nth(index)

    # ============================================================
    # Page Lifecycle
    # ============================================================

    async def wait_until_loaded(self) -> "SearchResultsPage":
        await self.wait_for_page_ready()
        await self.wait_for_products_to_load()
        return self

    @allure.step("Wait for products to load")
    async def wait_for_products_to_load(self) -> bool:
        """
        Wait for the first product card and its image source.

        Returns:
            False (after a warning) if products did not load in time
        """
        first_card = self.product_cards.first
        image = first_card.locator(self.PRODUCT_IMAGE).first

        async def image_has_source() -> bool:
            return bool(await image.get_attribute("src"))

        try:
            await self.waits.for_visible(first_card, self.timeouts.search_results_load)
            await self.waits.until(
                image_has_source,
                timeout=self.timeouts.product_image_load,
                description="first product image source",
            )
        except WaitTimeoutError as e:
            logger.warning(f"⚠️ Products not fully loaded - continuing anyway: {e}")
            return False

        logger.debug("Products loaded")
        return True

    @allure.step("Verify search results page")
    async def verify_search_results_page(self) -> bool:
        loaded = await self.waits.for_url_contains(self.URL_MARKER)
        if loaded:
            logger.info(f"✅ Search results page verified: {self.current_url}")
        else:
            logger.error(f"❌ Not a search results page: {self.current_url}")
        return loaded

    # ============================================================
    # Result Summary
    # ============================================================

    async def get_product_count(self) -> int:
        """
        Total result count from the header, e.g. "67049+ Ürün" -> 67049.

        Returns:
            0 when the count is missing or unparseable
        """
        text = await self.actions.safe_get_text(
            self.page.locator(self.RESULT_COUNT).first,
            timeout=self.timeouts.element_visible,
        )
        count = parse_count(text)
        if text and not count:
            logger.warning(f"Unable to parse product count from: '{text}'")
        logger.info(f"Product count: {count}")
        return count

    async def get_visible_product_count(self) -> int:
        """Number of product cards currently rendered (lazy loading)."""
        count = await self.actions.get_element_count(self.product_cards)
        logger.info(f"Visible product count: {count}")
        return count

    async def get_search_keyword(self) -> str:
        return await self.actions.safe_get_text(
            self.page.locator(self.TITLE).first,
            timeout=self.timeouts.element_visible,
        )

    async def are_products_displayed(self) -> bool:
        return await self.get_visible_product_count() > 0

    async def is_no_results_message_displayed(self) -> bool:
        """
        True for the "Aradığın ürün bulunamadı" banner or the empty state.

        The banner still lists recommended products below it.
        """
        if await self.actions.is_element_present(self.NO_RESULTS_BANNER):
            logger.info("No results banner detected")
            return True
        if await self.actions.is_element_present(self.EMPTY_RESULT):
            logger.info("Empty result state detected")
            return True
        return False

    # ============================================================
    # Product Selection
    # ============================================================

    @allure.step("Click product at index {index}")
    async def click_product_by_index(self, index: int) -> None:
        """
        Click a product card. Trendyol opens the product in a NEW TAB.

        Raises:
            IndexError: If ``index`` is outside the rendered cards
        """
        await self._check_index(index)
        await self.actions.safe_click(self.product_card(index), description=f"Product #{index}")
        logger.info(f"Product clicked at index: {index}")

    async def click_first_product(self) -> None:
        await self.click_product_by_index(0)

    async def open_product_in_new_tab(self, index: int = 0) -> Page:
        """
        Click a product and switch to the tab it opens.

        Returns:
            The product detail tab
        """
        await self._check_index(index)
        return await self.tabs.open_in_new_tab(lambda: self.click_product_by_index(index))

    async def open_product_detail(self, index: int = 0) -> ProductDetailPage:
        """Open a product in a new tab and return its page object, loaded."""
        page = await self.open_product_in_new_tab(index)
        return await self._product_detail(page)

    @allure.step("Switch to product detail tab")
    async def switch_to_product_detail(self) -> ProductDetailPage:
        """
        Activate the newest tab (after click_product_by_index) as a product page.

        Raises:
            PageActionError: If no product tab is open
        """
        page = await self.tabs.switch_to_new_tab()
        if page is None:
            raise PageActionError("No product tab to switch to")
        return await self._product_detail(page)

    async def _product_detail(self, page: Page) -> ProductDetailPage:
        # Shares tab bookkeeping so the detail page can close itself and return here
        detail = self._sibling(ProductDetailPage, page)
        detail.tabs = self.tabs
        return await detail.wait_until_loaded()

    async def wait_for_new_tab(self, previous_count: int, timeout: Optional[float] = None) -> int:
        return await self.tabs.wait_for_new_tab(previous_count, timeout)

    # ============================================================
    # Product Card Data
    # ============================================================

    async def get_product_name_by_index(self, index: int) -> str:
        """
        Full product name: "brand name", or just the name if there is no brand.

        Returns:
            "" for an index outside the rendered cards
        """
        if not await self._is_valid_index(index):
            return ""

        brand = await self.get_product_brand_by_index(index)
        name = await self._card_text(index, self.PRODUCT_NAME)
        if not name:
            logger.warning(f"No product name found at index {index}")

        full_name = f"{brand} {name}".strip() if brand else name
        logger.debug(f"Product name at index {index}: '{full_name}'")
        return full_name

    async def get_product_brand_by_index(self, index: int) -> str:
        """Brand label of a card; some products have none."""
        if not await self._is_valid_index(index):
            return ""
        return await self._card_text(index, self.PRODUCT_BRAND)

    async def get_product_price_by_index(self, index: int) -> str:
        """Raw price text, e.g. "140.000 TL"."""
        if not await self._is_valid_index(index):
            return ""
        return await self._card_text(index, self.PRODUCT_PRICE)

    async def get_product_price_as_float(self, index: int) -> float:
        return parse_turkish_number(await self.get_product_price_by_index(index))

    # ============================================================
    # Price Filter
    # ============================================================

    @allure.step("Expand price filter")
    async def expand_price_filter(self) -> bool:
        """
        Open the price filter section if it is collapsed.

        Returns:
            True if a click was needed
        """
        container = self.page.locator(self.PRICE_FILTER_CONTAINER).first
        try:
            hidden = await container.get_attribute("hidden", timeout=to_ms(self.timeouts.action))
        except PlaywrightError as e:
            raise PageActionError(f"Price filter not found: {e}") from e

        if hidden is None:
            logger.debug("Price filter already expanded - no action needed")
            return False

        await self.actions.safe_click(self.PRICE_FILTER_HEADER, description="Price filter header")
        await self.waits.for_visible(
            self.page.locator(self.PRICE_MIN_INPUT).first,
            self.timeouts.filter_application,
        )
        logger.info("Price filter expanded")
        return True

    @allure.step("Apply price filter: {min_price} - {max_price} TL")
    async def apply_price_filter(self, min_price: int, max_price: int) -> None:
        await self._apply_price(min_price=min_price, max_price=max_price)

    @allure.step("Apply min price filter: {min_price} TL")
    async def apply_min_price_filter(self, min_price: int) -> None:
        await self._apply_price(min_price=min_price)

    @allure.step("Apply max price filter: {max_price} TL")
    async def apply_max_price_filter(self, max_price: int) -> None:
        await self._apply_price(max_price=max_price)

    async def _apply_price(
        self,
        min_price: Optional[int] = None,
        max_price: Optional[int] = None,
    ) -> None:
        """
        Fill the price range and submit it.

        Raises:
            PageActionError: Wrapping whatever made the filter fail
        """
        logger.info(f"Applying price filter: min={min_price}, max={max_price}")
        try:
            await self.expand_price_filter()
            if min_price is not None:
                await self.actions.safe_type(self.PRICE_MIN_INPUT, str(min_price), description="Min price")
            if max_price is not None:
                await self.actions.safe_type(self.PRICE_MAX_INPUT, str(max_price), description="Max price")
            await self.actions.safe_click(self.PRICE_APPLY_BUTTON, description="Price filter apply")
        except (PlaywrightError, UIAutomationError) as e:
            logger.error(f"❌ Price filter failed: min={min_price}, max={max_price}")
            raise PageActionError(
                f"Failed to apply price filter (min={min_price}, max={max_price}): {e}"
            ) from e

        await self.wait_until_loaded()
        logger.info("✅ Price filter applied")

    # ============================================================
    # Infinite Scroll
    # ============================================================

    @allure.step("Scroll to load more products ({scroll_count} rounds)")
    async def scroll_to_load_more_products(self, scroll_count: int = 3) -> int:
        """
        Scroll to the bottom repeatedly so lazy loading renders more cards.

        Each round waits up to ``load_more`` seconds for the card count to
        grow; a round without growth means the end of the list was reached.

        Returns:
            Final number of rendered cards
        """
        for round_number in range(1, scroll_count + 1):
            before = await self.get_visible_product_count()
            await self.actions.scroll_to_bottom()
            grew = await self.waits.for_count_greater_than(
                self.product_cards, before, self.timeouts.load_more
            )
            if not grew:
                logger.debug(f"No new products after scroll {round_number} (may be at end)")

        final_count = await self.get_visible_product_count()
        logger.info(f"After {scroll_count} scrolls, visible products: {final_count}")
        return final_count

    async def scroll_to_product(self, index: int) -> None:
        """Bring a card into view, loading more cards first if needed."""
        if index >= await self.get_visible_product_count():
            logger.warning(f"Product index {index} not rendered yet; loading more")
            await self.scroll_to_load_more_products(3)
            if index >= await self.get_visible_product_count():
                raise IndexError(f"Product index {index} not available after scrolling")

        await self.actions.scroll_to_element(self.product_card(index), description=f"Product #{index}")

    # ============================================================
    # Internal
    # ============================================================

    async def _is_valid_index(self, index: int) -> bool:
        count = await self.actions.get_element_count(self.product_cards)
        if 0 <= index < count:
            return True
        logger.error(f"Invalid product index: {index}. Available: {count}")
        return False

    async def _check_index(self, index: int) -> None:
        count = await self.actions.get_element_count(self.product_cards)
        if not 0 <= index < count:
            message = f"Product index {index} out of bounds. Available products: {count}"
            logger.error(message)
            raise IndexError(message)

    async def _card_text(self, index: int, selector: str) -> str:
        element = self.product_card(index).locator(selector).first
        if not await self.actions.is_element_present(element):
            return ""
        return await self.actions.safe_get_text(element, timeout=self.timeouts.action)


__all__ = [
    "SearchResultsPage",
]
