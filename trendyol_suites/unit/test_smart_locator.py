import pytest

from playwright_fakes import FakeElement, FakePage
from trendyol_suites.ui_testing.framework.exceptions import ElementNotFoundError
from trendyol_suites.ui_testing.framework.smart_locator import HEALTH_HISTORY_SIZE, SmartLocator


@pytest.fixture
def page():
    return FakePage()


async def test_primary_locator_is_preferred(page):
    page.add("input[data-testid='suggestion']", FakeElement(attrs={"placeholder": "Aradığınız ürün"}))
    page.add("input[placeholder*='Aradığınız']", FakeElement())
    smart = SmartLocator(page)

    locator = await smart.locate("search_box", timeout=0.01)

    assert await locator.get_attribute("placeholder") == "Aradığınız ürün"
    assert not smart.health_records[0].used_fallback
    assert "No maintenance needed" in smart.get_health_report()


async def test_fallback_is_used_and_reported(page):
    page.add("header a[href='/']", FakeElement("Trendyol"))
    smart = SmartLocator(page)

    locator = await smart.locate("logo", timeout=0.01)

    assert await locator.inner_text() == "Trendyol"
    health = smart.health_records[0]
    assert health.used_fallback
    assert health.fallback_name == "fallback_1"
    report = smart.get_health_report()
    assert "[logo]" in report
    assert "a.logo" in report


async def test_all_strategies_failing_raises(page):
    smart = SmartLocator(page)

    with pytest.raises(ElementNotFoundError, match="search_icon"):
        await smart.locate("search_icon", timeout=0.01)
    with pytest.raises(ElementNotFoundError, match="No locators defined"):
        await smart.locate("unknown_element", timeout=0.01)

    assert not await smart.is_visible("search_icon", timeout=0.01)


async def test_hidden_element_fails_visible_but_passes_attached(page):
    page.add("h1[data-testid='product-title']", FakeElement(visible=False))
    smart = SmartLocator(page)

    assert not await smart.is_visible("product_title", timeout=0.01)
    assert await smart.locate("product_title", timeout=0.01, state="attached")


async def test_element_mode_and_runtime_registration(page):
    page.add("button.sort", FakeElement("Önerilen"))
    element = SmartLocator(
        page,
        element_name="sort_dropdown",
        locators={"primary": "button.select-box", "fallback_1": "button.sort"},
    )

    located = await element.locate(timeout=0.01)
    assert await located.inner_text() == "Önerilen"

    smart = SmartLocator(page)
    smart.register_locator("sort", {"primary": "button.sort"})
    assert await smart.is_visible("sort", timeout=0.01)
    assert "sort" not in SmartLocator.LOCATORS


def test_primary_returns_locator_without_waiting(page):
    locator = SmartLocator(page).primary("checkout_button")
    assert "checkout-button" in locator.description


async def test_health_history_is_bounded(page):
    page.add("header a[href='/']", FakeElement("Trendyol"))
    page.add("input[data-testid='suggestion']", FakeElement())
    smart = SmartLocator(page)

    await smart.locate("logo", timeout=0.01)
    for _ in range(HEALTH_HISTORY_SIZE + 5):
        await smart.locate("search_box", timeout=0.01)

    records = smart.health_records
    assert len(records) == HEALTH_HISTORY_SIZE
    assert all(record.element_name == "search_box" for record in records)
    # Fallback hits outlive the rolling history
    assert "logo" in smart.get_health_report()
