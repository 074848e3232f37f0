"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the Trendyol storefront.

Each page class encapsulates:
    - Element locators
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .cart_page import CartPage
from .home_page import HomePage
from .product_detail_page import ProductDetailPage
from .search_results_page import SearchResultsPage

__all__ = [
    "HomePage",
    "SearchResultsPage",
    "ProductDetailPage",
    "CartPage",
]
