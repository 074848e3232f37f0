import pytest

from playwright_fakes import FakeElement, FakePage, make_page_object
from trendyol_suites.ui_testing.framework.exceptions import ElementNotFoundError, PageActionError
from trendyol_suites.ui_testing.framework.popup_handler import PopupHandler
from trendyol_suites.ui_testing.pages.home_page import HomePage
from trendyol_suites.ui_testing.pages.search_results_page import SearchResultsPage

SEARCH_ICON = "i[data-testid='search-icon']"


@pytest.fixture
def page():
    page = FakePage("about:blank")
    page.add(HomePage.SEARCH_BOX, FakeElement(attrs={"placeholder": "Aradığınız ürün, kategori veya markayı yazınız"}))
    page.add(HomePage.LOGO, FakeElement("trendyol"))
    page.add(
        HomePage.CATEGORY_LINKS,
        FakeElement(" Kadın "),
        FakeElement("Erkek"),
        FakeElement("Elektronik"),
    )
    page.add("p:has-text('Sepetim')", FakeElement("Sepetim"))

    def submit_search():
        keyword = page.elements[HomePage.SEARCH_BOX][0].value
        page.url = f"https://www.trendyol.com/sr?q={keyword}"
        card = FakeElement(children={SearchResultsPage.PRODUCT_IMAGE: [FakeElement(attrs={"src": "1.jpg"})]})
        page.add(SearchResultsPage.PRODUCT_CARDS, card)

    page.add(SEARCH_ICON, FakeElement(on_click=submit_search))
    return page


@pytest.fixture
def home(page):
    return make_page_object(HomePage, page)


async def test_open_navigates_dismisses_popups_and_verifies(page, home):
    gender = page.add(PopupHandler.GENDER_POPUP, FakeElement())
    page.add(
        PopupHandler.GENDER_POPUP_CLOSE,
        FakeElement(on_click=lambda: setattr(gender, "visible", False)),
    )

    assert await home.open() is home

    assert page.visited == ["https://www.trendyol.com/"]
    assert not gender.visible
    assert await home.is_home_page_loaded()


async def test_open_without_header_raises(page, home):
    del page.elements[HomePage.LOGO]

    with pytest.raises(PageActionError, match="Home page not loaded"):
        await home.open()


async def test_open_without_search_box_raises_element_not_found(page, home):
    del page.elements[HomePage.SEARCH_BOX]

    with pytest.raises(ElementNotFoundError, match="search_box"):
        await home.open()


async def test_search_for_returns_loaded_results(page, home):
    results = await home.search_for("kablosuz kulaklık")

    assert isinstance(results, SearchResultsPage)
    assert results.timeouts is home.timeouts
    assert page.elements[SEARCH_ICON][0].script_clicks == 1
    assert "/sr?q=kablosuz kulaklık" in results.current_url
    assert await results.get_visible_product_count() == 1


async def test_search_box_helpers(page, home):
    assert await home.is_search_box_displayed()
    assert (await home.get_search_box_placeholder()).startswith("Aradığınız")

    await home.type_in_search_box("çanta")
    assert page.elements[HomePage.SEARCH_BOX][0].value == "çanta"


async def test_categories(page, home):
    assert await home.get_all_category_names() == ["Kadın", "Erkek", "Elektronik"]
    assert await home.is_category_displayed("Elektronik")
    assert not await home.is_category_displayed("Kitap")

    await home.click_category("Elektronik")
    assert page.elements[HomePage.CATEGORY_LINKS][2].clicks == 1


async def test_header_links(page, home):
    assert await home.is_cart_icon_displayed()
    assert not await home.is_login_button_displayed()

    await home.click_cart()
    assert page.elements["p:has-text('Sepetim')"][0].clicks == 1

    with pytest.raises(ElementNotFoundError, match="login_link"):
        await home.click_login()
