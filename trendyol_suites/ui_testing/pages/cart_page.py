"""
================================================================================
Cart Page Object
================================================================================

Basket page ("/sepet"): line items, quantity steppers, removal, totals and
checkout.

Every basket mutation is confirmed by waiting for the DOM to reflect it
(quantity value changed, item count dropped) within the cart_update budget.

================================================================================
"""

from __future__ import annotations

import allure
from loguru import logger
from playwright.async_api import Locator

from trendyol_suites.ui_testing.framework.exceptions import PageActionError, WaitTimeoutError
from trendyol_suites.ui_testing.framework.page_base import PageBase
from trendyol_suites.ui_testing.framework.turkish_text import parse_count, parse_turkish_number
from trendyol_suites.ui_testing.framework.urls import CART_MARKER, CART_PATH


class CartPage(PageBase):
    """Page Object for the shopping cart."""

    URL_MARKER = CART_MARKER

    # ============================================================
    # Page Elements
    # ============================================================

    CART_ITEMS = ".merchant-item-container"
    ITEM_NAME = ".product-name"
    ITEM_BRAND = ".product-brand-name"
    ITEM_PRICE = ".basket-product-price-text"
    QUANTITY_INPUT = "input[data-testid='quantity-selector']"
    INCREMENT_BUTTON = "button[data-testid='quantity-button-increment']"
    DECREMENT_BUTTON = "button[data-testid='quantity-button-decrement']"
    REMOVE_BUTTON = ".remove-item-container"

    TOTAL_PRICE = ".order-total .price"
    SUBTOTAL = "[data-testid='basket-summary-subtotal-value']"
    CARGO_FEE = "[data-testid='basket-summary-cargo-value']"
    CHECKOUT_BUTTON = "button[data-testid='checkout-button']"
    EMPTY_CART_MESSAGE = ".empty-basket-container p"

    @property
    def cart_items(self) -> Locator:
        return self.page.locator(self.CART_ITEMS)

    def item_part(self, index: int, selector: str) -> Locator:
        """Element inside the ``index``-th line item."""
        return self.cart_items.nth(index).locator(selector).first

    # ============================================================
    # Page Lifecycle
    # ============================================================

    @allure.step("Open cart page")
    async def open(self) -> "CartPage":
        await self.navigate_to(CART_PATH)
        return await self.wait_until_loaded()

    async def wait_until_loaded(self) -> "CartPage":
        """Cart items or the empty-basket message, whichever renders."""
        await self.wait_for_page_ready()

        async def settled() -> bool:
            return (
                await self.cart_items.count() > 0
                or await self.page.locator(self.EMPTY_CART_MESSAGE).count() > 0
            )

        try:
            await self.waits.until(
                settled,
                timeout=self.timeouts.cart_update,
                description="cart items or empty message",
            )
        except WaitTimeoutError:
            logger.warning("⚠️ Cart state unclear after load")
        return self

    @allure.step("Verify cart page")
    async def verify_cart_page(self) -> bool:
        if not await self.waits.for_url_contains(self.URL_MARKER):
            logger.warning(f"Not on cart page. URL: {self.current_url}")
            return False

        count = await self.get_cart_item_count()
        if count:
            logger.info(f"✅ Cart page verified: {count} items in cart")
        else:
            logger.info("✅ Cart page verified: cart is empty")
        return True

    async def is_cart_page_loaded(self) -> bool:
        return self.url_contains(self.URL_MARKER)

    # ============================================================
    # Cart State
    # ============================================================

    async def is_cart_empty(self) -> bool:
        empty = (
            await self.get_cart_item_count() == 0
            or await self.actions.is_displayed(self.page.locator(self.EMPTY_CART_MESSAGE).first)
        )
        logger.debug(f"Cart is empty: {empty}")
        return empty

    async def get_cart_item_count(self) -> int:
        count = await self.actions.get_element_count(self.cart_items)
        logger.info(f"Cart item count: {count}")
        return count

    async def get_empty_cart_message(self) -> str:
        """E.g. "Sepetinde ürün bulunmamaktadır."; "" while the cart has items."""
        message = self.page.locator(self.EMPTY_CART_MESSAGE).first
        if not await self.actions.is_displayed(message):
            return ""
        return await self.actions.safe_get_text(message, timeout=self.timeouts.action)

    # ============================================================
    # Line Items
    # ============================================================

    async def get_product_name_by_index(self, index: int) -> str:
        return await self._item_text(index, self.ITEM_NAME)

    async def get_product_brand_by_index(self, index: int) -> str:
        return await self._item_text(index, self.ITEM_BRAND)

    async def get_product_price_by_index(self, index: int) -> str:
        return await self._item_text(index, self.ITEM_PRICE)

    async def get_product_price_as_float(self, index: int) -> float:
        return parse_turkish_number(await self.get_product_price_by_index(index))

    async def get_product_quantity_by_index(self, index: int) -> int:
        """Value of the quantity input; 0 for a bad index or unreadable value."""
        if not await self._is_valid_index(index):
            return 0
        value = await self.actions.get_attribute(self.item_part(index, self.QUANTITY_INPUT), "value")
        return parse_count(value)

    # ============================================================
    # Quantity Management
    # ============================================================

    @allure.step("Increase quantity of item {index}")
    async def increase_quantity(self, index: int) -> int:
        """
        Click "+" and wait for the quantity to change.

        Returns:
            The quantity shown afterwards

        Raises:
            IndexError: If ``index`` is outside the cart items
        """
        await self._check_index(index)
        current = await self.get_product_quantity_by_index(index)
        await self.actions.safe_click(
            self.item_part(index, self.INCREMENT_BUTTON), description=f"Increase item #{index}"
        )
        new_quantity = await self._wait_for_quantity_change(index, current)
        logger.info(f"Quantity increased from {current} to {new_quantity}")
        return new_quantity

    @allure.step("Decrease quantity of item {index}")
    async def decrease_quantity(self, index: int) -> int:
        """
        Click "-" and wait for the quantity to change.

        A quantity of 1 is never decreased (use remove_product_by_index).

        Returns:
            The quantity shown afterwards

        Raises:
            IndexError: If ``index`` is outside the cart items
        """
        await self._check_index(index)
        current = await self.get_product_quantity_by_index(index)
        if current <= 1:
            logger.warning(f"Cannot decrease quantity below 1. Current: {current}")
            return current

        await self.actions.safe_click(
            self.item_part(index, self.DECREMENT_BUTTON), description=f"Decrease item #{index}"
        )
        new_quantity = await self._wait_for_quantity_change(index, current)
        logger.info(f"Quantity decreased from {current} to {new_quantity}")
        return new_quantity

    @allure.step("Set quantity of item {index} to {quantity}")
    async def set_quantity(self, index: int, quantity: int) -> int:
        """
        Step the quantity up or down until it reaches ``quantity``.

        Raises:
            ValueError: If ``quantity`` is below 1
            IndexError: If ``index`` is outside the cart items
            PageActionError: If a step leaves the quantity unchanged
                (stock limit reached)
        """
        if quantity < 1:
            raise ValueError(f"Quantity must be at least 1, got {quantity}")
        await self._check_index(index)

        current = await self.get_product_quantity_by_index(index)
        if current == quantity:
            logger.info(f"Quantity already at target: {quantity}")
            return current

        step = self.increase_quantity if current < quantity else self.decrease_quantity
        for _ in range(abs(quantity - current)):
            updated = await step(index)
            if updated == current:
                raise PageActionError(
                    f"Quantity of item #{index} stuck at {current} (target {quantity})"
                )
            current = updated

        logger.info(f"Quantity set to: {current}")
        return current

    # ============================================================
    # Removing Items
    # ============================================================

    @allure.step("Remove item {index}")
    async def remove_product_by_index(self, index: int) -> int:
        """
        Remove a line item and wait for the item count to drop.

        Returns:
            Item count afterwards
        """
        await self._check_index(index)
        before = await self.get_cart_item_count()
        await self.actions.safe_click(
            self.item_part(index, self.REMOVE_BUTTON), description=f"Remove item #{index}"
        )

        async def dropped() -> bool:
            return await self.cart_items.count() < before

        try:
            await self.waits.until(
                dropped,
                timeout=self.timeouts.cart_update,
                description=f"cart item count < {before}",
            )
        except WaitTimeoutError:
            logger.warning(f"⚠️ Cart still shows {before} items after removal")

        after = await self.get_cart_item_count()
        logger.info(f"Product removed at index {index} ({before} -> {after} items)")
        return after

    async def remove_first_product(self) -> int:
        return await self.remove_product_by_index(0)

    @allure.step("Remove all items")
    async def remove_all_products(self) -> None:
        """Remove items one by one from the top; items shift after each removal."""
        for _ in range(await self.get_cart_item_count()):
            await self.remove_product_by_index(0)
        logger.info("All products removed from cart")

    # ============================================================
    # Totals
    # ============================================================

    async def get_subtotal(self) -> str:
        return await self._summary_text(self.SUBTOTAL)

    async def get_subtotal_as_float(self) -> float:
        return parse_turkish_number(await self.get_subtotal())

    async def get_cargo_fee(self) -> str:
        return await self._summary_text(self.CARGO_FEE)

    async def get_cargo_fee_as_float(self) -> float:
        return parse_turkish_number(await self.get_cargo_fee())

    async def get_total_price(self) -> str:
        return await self._summary_text(self.TOTAL_PRICE)

    async def get_total_price_as_float(self) -> float:
        return parse_turkish_number(await self.get_total_price())

    # ============================================================
    # Checkout
    # ============================================================

    @allure.step("Proceed to checkout")
    async def proceed_to_checkout(self) -> None:
        await self.actions.safe_click(self.CHECKOUT_BUTTON, description="Sepeti Onayla")
        await self.waits.for_page_load()
        logger.info("Proceeded to checkout")

    async def is_checkout_button_enabled(self) -> bool:
        return await self.actions.is_enabled(self.page.locator(self.CHECKOUT_BUTTON).first)

    async def is_checkout_button_displayed(self) -> bool:
        return await self.actions.is_displayed(self.page.locator(self.CHECKOUT_BUTTON).first)

    # ============================================================
    # Internal
    # ============================================================

    async def _wait_for_quantity_change(self, index: int, previous: int) -> int:
        async def changed() -> int:
            quantity = await self.get_product_quantity_by_index(index)
            return quantity if quantity != previous else 0

        try:
            return await self.waits.until(
                changed,
                timeout=self.timeouts.cart_update,
                description=f"quantity of item #{index} != {previous}",
            )
        except WaitTimeoutError:
            logger.warning(f"⚠️ Quantity of item #{index} still {previous}")
            return previous

    async def _is_valid_index(self, index: int) -> bool:
        count = await self.actions.get_element_count(self.cart_items)
        if 0 <= index < count:
            return True
        logger.error(f"Invalid cart item index: {index}. Available: {count}")
        return False

    async def _check_index(self, index: int) -> None:
        count = await self.actions.get_element_count(self.cart_items)
        if not 0 <= index < count:
            message = f"Cart item index {index} out of bounds. Items in cart: {count}"
            logger.error(message)
            raise IndexError(message)

    async def _item_text(self, index: int, selector: str) -> str:
        if not await self._is_valid_index(index):
            return ""
        return await self.actions.safe_get_text(
            self.item_part(index, selector), timeout=self.timeouts.action
        )

    async def _summary_text(self, selector: str) -> str:
        return await self.actions.safe_get_text(
            self.page.locator(selector).first, timeout=self.timeouts.element_visible
        )


__all__ = [
    "CartPage",
]
