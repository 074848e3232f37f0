import pytest
from playwright.async_api import Error as PlaywrightError

from playwright_fakes import FAST_TIMEOUTS, FakeElement, FakePage
from trendyol_suites.ui_testing.framework.exceptions import WaitTimeoutError
from trendyol_suites.ui_testing.framework.wait_strategy import WaitStrategy


@pytest.fixture
def page():
    return FakePage()


@pytest.fixture
def waits(page):
    return WaitStrategy(page, FAST_TIMEOUTS)


async def test_until_returns_first_truthy_value(waits):
    polls = []

    def condition():
        polls.append(1)
        return len(polls) if len(polls) >= 3 else 0

    assert await waits.until(condition, timeout=1, description="third poll") == 3


async def test_until_accepts_async_conditions(waits):
    async def condition():
        return "done"

    assert await waits.until(condition) == "done"


async def test_until_evaluates_once_with_zero_budget(waits):
    calls = []
    with pytest.raises(WaitTimeoutError):
        await waits.until(lambda: calls.append(1), timeout=0)
    assert calls == [1]


async def test_until_ignores_playwright_errors_and_reports_last_one(waits):
    def flaky():
        raise PlaywrightError("Execution context was destroyed")

    with pytest.raises(WaitTimeoutError) as excinfo:
        await waits.until(flaky, timeout=0.01, description="re-render")

    error = excinfo.value
    assert error.description == "re-render"
    assert error.timeout == 0.01
    assert isinstance(error.last_error, PlaywrightError)
    assert "last error" in str(error)


async def test_until_propagates_errors_that_are_not_ignored(waits):
    def broken():
        raise ValueError("bug")

    with pytest.raises(ValueError):
        await waits.until(broken, timeout=0.01)


async def test_element_waits_raise_on_timeout(page, waits):
    page.add(".hidden", FakeElement(visible=False))

    with pytest.raises(WaitTimeoutError):
        await waits.for_visible(page.locator(".hidden"))
    with pytest.raises(WaitTimeoutError):
        await waits.for_present(page.locator(".missing"))

    located = await waits.for_present(page.locator(".hidden"))
    assert located.description == ".hidden"


async def test_for_clickable_requires_enabled_element(page, waits):
    page.add("button.ok", FakeElement())
    page.add("button.disabled", FakeElement(enabled=False))

    assert await waits.for_clickable(page.locator("button.ok"))
    with pytest.raises(WaitTimeoutError):
        await waits.for_clickable(page.locator("button.disabled"))


async def test_for_all_visible_returns_one_locator_per_element(page, waits):
    page.add("a.product-card", FakeElement("a"), FakeElement("b"))

    locators = await waits.for_all_visible(page.locator("a.product-card"))

    assert [await loc.inner_text() for loc in locators] == ["a", "b"]


async def test_boolean_waits_never_raise(page, waits):
    spinner = page.add(".spinner", FakeElement())

    assert not await waits.for_invisible(page.locator(".spinner"))
    assert not await waits.appears(page.locator(".gender-modal-section"))
    spinner.visible = False
    assert await waits.for_invisible(page.locator(".spinner"))


async def test_text_and_count_waits(page, waits):
    button = page.add("button", FakeElement("Sepete Ekle"))
    cards = page.locator("a.product-card")

    assert not await waits.for_text_present(page.locator("button"), "Sepete Eklendi")
    button.text = "Sepete Eklendi"
    assert await waits.for_text_present(page.locator("button"), "Sepete Eklendi")

    assert not await waits.for_count_greater_than(cards, 0)
    page.add("a.product-card", FakeElement())
    assert await waits.for_count_greater_than(cards, 0)


async def test_url_wait(page, waits):
    assert not await waits.for_url_contains("/sr")
    page.url = "https://www.trendyol.com/sr?q=laptop"
    assert await waits.for_url_contains("/sr")


async def test_page_waits_warn_instead_of_raising(page, waits):
    assert await waits.for_page_load()
    assert await waits.for_ajax()
    assert await waits.for_load_state()

    page.ready_state = "loading"
    page.ajax_idle = False
    assert not await waits.for_page_load()
    assert not await waits.for_ajax()
    assert not await waits.for_load_state("domcontentloaded")
