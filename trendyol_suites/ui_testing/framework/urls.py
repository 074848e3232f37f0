"""
Trendyol URL registry.

Page paths are relative to BASE_URL so that a different storefront host can be
injected through ``app.base_url``.
"""

from __future__ import annotations

from urllib.parse import quote, urljoin

BASE_URL = "https://www.trendyol.com/"

# Page paths
LOGIN_PATH = "giris"
REGISTER_PATH = "uye-ol"
CART_PATH = "sepet"
MY_ACCOUNT_PATH = "Hesabim"
MY_ORDERS_PATH = "Hesabim/Siparislerim"
MY_FAVORITES_PATH = "Hesabim/Favoriler"
MY_COUPONS_PATH = "Hesabim/IndirimKuponlari"
HELP_CENTER_PATH = "yardim"

# Category landing pages
CATEGORY_PATHS = {
    "elektronik": "butik/liste/5/elektronik",
    "kadin": "butik/liste/1/kadin",
    "erkek": "butik/liste/2/erkek",
    "ev": "butik/liste/12/ev--mobilya",
}

SEARCH_PATH = "sr?q="

# Fragments used to recognise pages from the current URL
SEARCH_RESULTS_MARKER = "/sr"
# Product slugs end in "-p-<id>", e.g. "/apple/macbook-air-m2-p-123456"
PRODUCT_DETAIL_MARKER = "-p-"
CART_MARKER = "/sepet"

LOGIN_PAGE = BASE_URL + LOGIN_PATH
REGISTER_PAGE = BASE_URL + REGISTER_PATH
CART_PAGE = BASE_URL + CART_PATH
MY_ACCOUNT = BASE_URL + MY_ACCOUNT_PATH
MY_ORDERS = BASE_URL + MY_ORDERS_PATH
MY_FAVORITES = BASE_URL + MY_FAVORITES_PATH
MY_COUPONS = BASE_URL + MY_COUPONS_PATH
HELP_CENTER = BASE_URL + HELP_CENTER_PATH


def page_url(path: str, base_url: str = BASE_URL) -> str:
    """Join a relative page path onto ``base_url``."""
    if not base_url.endswith("/"):
        base_url += "/"
    return urljoin(base_url, path.lstrip("/"))


def search_url(keyword: str, base_url: str = BASE_URL) -> str:
    """Build the search results URL with the keyword percent-encoded."""
    return page_url(SEARCH_PATH, base_url) + quote(keyword.strip())


def product_url(slug: str, base_url: str = BASE_URL) -> str:
    return page_url(slug, base_url)


def category_url(name: str, base_url: str = BASE_URL) -> str:
    """
    Category landing URL by short name.

    Raises:
        KeyError: For an unknown category name
    """
    return page_url(CATEGORY_PATHS[name.lower()], base_url)


__all__ = [
    "BASE_URL",
    "CART_PAGE",
    "LOGIN_PAGE",
    "REGISTER_PAGE",
    "MY_ACCOUNT",
    "MY_ORDERS",
    "MY_FAVORITES",
    "MY_COUPONS",
    "HELP_CENTER",
    "CART_PATH",
    "LOGIN_PATH",
    "SEARCH_RESULTS_MARKER",
    "PRODUCT_DETAIL_MARKER",
    "CART_MARKER",
    "page_url",
    "search_url",
    "product_url",
    "category_url",
]
