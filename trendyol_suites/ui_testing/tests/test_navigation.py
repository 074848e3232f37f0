"""
================================================================================
Product Navigation UI Tests (Async / Playwright)
================================================================================

Live storefront journeys from the results listing into product pages.
Every product card opens in a NEW TAB; tests verify tab bookkeeping as well as
the product page content.

================================================================================
"""

import allure
import pytest

from trendyol_suites.ui_testing.framework.urls import PRODUCT_DETAIL_MARKER
from trendyol_suites.ui_testing.pages.home_page import HomePage


@allure.epic("UI Testing")
@allure.feature("Product Navigation")
@pytest.mark.live
@pytest.mark.navigation
class TestNavigation:
    """Results-to-product navigation test suite (async)."""

    @allure.story("New Tab")
    @allure.title("Clicking a product opens its detail page in a new tab")
    @allure.severity(allure.severity_level.BLOCKER)
    @pytest.mark.P0
    @pytest.mark.smoke
    @pytest.mark.asyncio
    async def test_click_product_opens_detail_page(self, home_page: HomePage, test_data):
        results = await home_page.search_for(test_data["search_keyword"])
        tabs_before = results.tab_count

        with allure.step("Click first product"):
            await results.click_first_product()
            tabs_after = await results.wait_for_new_tab(tabs_before)

        assert tabs_after == tabs_before + 1, "New tab should open"

        with allure.step("Switch to product tab"):
            detail = await results.switch_to_product_detail()

        assert PRODUCT_DETAIL_MARKER in detail.current_url
        assert await detail.is_product_detail_page_loaded(), "Product detail page should load"

        await detail.close_and_return_to_search_results()

    @allure.story("Detail Content")
    @allure.title("Product detail page shows title, brand, price and add-to-cart")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P0
    @pytest.mark.smoke
    @pytest.mark.asyncio
    async def test_product_detail_page_elements(self, home_page: HomePage, test_data):
        results = await home_page.search_for(test_data["search_keyword"])
        detail = await results.open_product_detail(0)

        title = await detail.get_product_title()
        brand = await detail.get_brand_name()
        price = await detail.get_product_price()

        allure.attach(
            f"title={title}\nbrand={brand}\nprice={price}",
            name="Product details",
            attachment_type=allure.attachment_type.TEXT,
        )
        assert title, "Product title should not be empty"
        assert brand, "Brand name should not be empty"
        assert "TL" in price, f"Price should contain TL: '{price}'"
        assert await detail.get_product_price_as_float() > 0
        assert await detail.is_add_to_cart_button_displayed(), "Add to cart button should be displayed"

        await detail.close_and_return_to_search_results()

    @allure.story("New Tab")
    @allure.title("Clicking three products opens three tabs")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    @pytest.mark.asyncio
    async def test_multiple_product_clicks(self, home_page: HomePage, test_data):
        results = await home_page.search_for(test_data["search_keyword"])
        tabs_before = results.tab_count

        for index in range(3):
            with allure.step(f"Click product {index + 1}"):
                await results.click_product_by_index(index)
                await results.wait_for_new_tab(tabs_before + index)

        assert results.tab_count == tabs_before + 3, "3 new tabs should open"

        closed = await results.close_other_tabs()
        assert closed == 3
        assert results.tab_count == tabs_before

    @allure.story("Return")
    @allure.title("Closing the product tab returns to unchanged search results")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    @pytest.mark.asyncio
    async def test_return_to_search_results(self, home_page: HomePage, test_data):
        results = await home_page.search_for(test_data["search_keyword"])
        count_before = await results.get_visible_product_count()

        detail = await results.open_product_detail(0)
        page = await detail.close_and_return_to_search_results()

        assert page is results.page
        assert await results.are_products_displayed(), "Search results should still be displayed"
        assert await results.get_visible_product_count() == count_before

    @allure.story("Infinite Scroll")
    @allure.title("Scrolling to the bottom loads more products")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression
    @pytest.mark.asyncio
    async def test_scroll_to_load_more(self, home_page: HomePage, test_data):
        results = await home_page.search_for(test_data["search_keyword"])
        initial = await results.get_visible_product_count()

        after = await results.scroll_to_load_more_products(3)

        # Lists of 100+ cards may already be fully rendered
        assert after > initial or initial >= 100, (
            f"Scroll did not load new products. Before: {initial}, After: {after}"
        )
