"""
================================================================================
Product Detail Page Object
================================================================================

Product page ("/<brand>/<slug>-p-<id>") opened in its own tab from the
search results listing.

================================================================================
"""

from __future__ import annotations

import allure
from loguru import logger
from playwright.async_api import Locator, Page

from trendyol_suites.ui_testing.framework.exceptions import ElementNotFoundError, WaitTimeoutError
from trendyol_suites.ui_testing.framework.page_base import PageBase
from trendyol_suites.ui_testing.framework.turkish_text import parse_turkish_number
from trendyol_suites.ui_testing.framework.urls import CART_PATH, PRODUCT_DETAIL_MARKER

from .cart_page import CartPage


ADDED_TO_CART_TEXT = "Sepete Eklendi"
OUT_OF_STOCK_TEXT = "Tükendi"


class ProductDetailPage(PageBase):
    """Page Object for a single product."""

    URL_MARKER = PRODUCT_DETAIL_MARKER

    # ============================================================
    # Page Elements
    # ============================================================

    PRODUCT_TITLE = "h1[data-testid='product-title']"
    BRAND_NAME = "h1[data-testid='product-title'] strong"
    PRODUCT_PRICE = ".price-view .discounted"
    PRODUCT_IMAGE = "img[data-testid='image']"
    ADD_TO_CART_BUTTON = "button[data-testid='add-to-cart-button']"

    @property
    def add_to_cart_button(self) -> Locator:
        return self.page.locator(self.ADD_TO_CART_BUTTON).first

    # ============================================================
    # Page Lifecycle
    # ============================================================

    async def wait_until_loaded(self) -> "ProductDetailPage":
        """Title, price and image; a slow part only logs a warning."""
        await self.wait_for_page_ready()
        try:
            await self.smart.locate("product_title", timeout=self.timeouts.element_visible)
            await self.waits.for_visible(
                self.page.locator(self.PRODUCT_PRICE).first, self.timeouts.element_visible
            )
            await self.waits.for_visible(
                self.page.locator(self.PRODUCT_IMAGE).first, self.timeouts.product_image_load
            )
        except (WaitTimeoutError, ElementNotFoundError) as e:
            logger.warning(f"⚠️ Product details not fully loaded: {e}")
        return self

    @allure.step("Verify product detail page")
    async def verify_product_detail_page(self) -> bool:
        if not await self.waits.for_url_contains(self.URL_MARKER):
            logger.warning(f"Not on product detail page. URL: {self.current_url}")
            return False
        title_ok = await self.waits.appears(
            self.page.locator(self.PRODUCT_TITLE).first, self.timeouts.element_visible
        )
        button_ok = await self.waits.appears(self.add_to_cart_button, self.timeouts.element_visible)
        verified = title_ok and button_ok
        if verified:
            logger.info("✅ Product detail page verified")
        else:
            logger.error(f"❌ Product detail page incomplete (title={title_ok}, button={button_ok})")
        return verified

    async def is_product_detail_page_loaded(self) -> bool:
        return await self.actions.is_displayed(self.page.locator(self.PRODUCT_TITLE).first)

    # ============================================================
    # Product Information
    # ============================================================

    async def get_product_title(self) -> str:
        title = await self.actions.safe_get_text(self.page.locator(self.PRODUCT_TITLE).first)
        logger.debug(f"Product title: '{title}'")
        return title

    async def get_brand_name(self) -> str:
        return await self.actions.safe_get_text(self.page.locator(self.BRAND_NAME).first)

    async def get_product_price(self) -> str:
        """Raw price text, e.g. "1.299,99 TL"."""
        return await self.actions.safe_get_text(self.page.locator(self.PRODUCT_PRICE).first)

    async def get_product_price_as_float(self) -> float:
        return parse_turkish_number(await self.get_product_price())

    async def is_product_image_displayed(self) -> bool:
        return await self.actions.is_displayed(self.page.locator(self.PRODUCT_IMAGE).first)

    async def get_product_image_url(self) -> str:
        return await self.actions.get_attribute(self.page.locator(self.PRODUCT_IMAGE).first, "src")

    # ============================================================
    # Add to Cart
    # ============================================================

    @allure.step("Add product to cart")
    async def add_to_cart(self) -> bool:
        """
        Click "Sepete Ekle" and wait for the button to confirm.

        Returns:
            True once the button reads "Sepete Eklendi"; False (with a
            warning) if the confirmation never shows within cart_update
        """
        await self.actions.safe_click(self.add_to_cart_button, description="Sepete Ekle")
        await self.waits.for_ajax()

        confirmed = await self.waits.for_text_present(
            self.add_to_cart_button, ADDED_TO_CART_TEXT, self.timeouts.cart_update
        )
        if confirmed:
            logger.info("✅ Product added to cart")
        else:
            logger.warning(f"⚠️ Add-to-cart not confirmed: '{await self.get_add_to_cart_button_text()}'")
        return confirmed

    async def is_add_to_cart_button_enabled(self) -> bool:
        return await self.actions.is_enabled(self.add_to_cart_button)

    async def is_add_to_cart_button_displayed(self) -> bool:
        return await self.actions.is_displayed(self.add_to_cart_button)

    async def get_add_to_cart_button_text(self) -> str:
        """One of "Sepete Ekle", "Sepete Eklendi" or "Tükendi"."""
        return await self.actions.safe_get_text(self.add_to_cart_button, timeout=self.timeouts.action)

    async def is_product_added_to_cart(self) -> bool:
        return ADDED_TO_CART_TEXT in await self.get_add_to_cart_button_text()

    async def is_product_out_of_stock(self) -> bool:
        text = await self.get_add_to_cart_button_text()
        return OUT_OF_STOCK_TEXT in text or not await self.is_add_to_cart_button_enabled()

    # ============================================================
    # Navigation
    # ============================================================

    @allure.step("Go to cart")
    async def go_to_cart(self) -> CartPage:
        await self.navigate_to(CART_PATH)
        cart = self._sibling(CartPage)
        return await cart.wait_until_loaded()

    @allure.step("Close product tab and return to search results")
    async def close_and_return_to_search_results(self) -> Page:
        page = await self.tabs.close_current_tab_and_switch_to_original()
        logger.info("Returned to search results")
        return page


__all__ = [
    "ProductDetailPage",
    "ADDED_TO_CART_TEXT",
    "OUT_OF_STOCK_TEXT",
]
