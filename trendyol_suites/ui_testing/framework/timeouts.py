"""
================================================================================
Timeout Budgets
================================================================================

Centralized wait budgets (in seconds) for every synchronization point of the
Trendyol storefront, plus named scenarios that map onto them.

The storefront is JavaScript-heavy: search results, product images and cart
totals all arrive after the initial document load, so each has its own budget.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

from trendyol_tools.common import ConfigLoader


@dataclass(frozen=True)
class Timeouts:
    """
    Wait budgets in seconds.

    Attributes:
        element_visible: Element becomes visible
        element_clickable: Element becomes visible and enabled
        element_invisible: Overlay or spinner disappears
        page_load: document.readyState reaches "complete"
        ajax: jQuery.active drains to zero
        search_results_load: First product card rendered
        product_image_load: Product image src populated
        cart_update: Quantity or totals refresh after a cart change
        filter_application: Result list refresh after a filter
        modal_appear: Gender/promo modal shows up after page load
        promo_overlay: Cookie banner shows up after page load
        new_tab: New browser tab opened by a product click
        action: Single Playwright click/fill attempt
        polling_interval: Pause between polls of a custom condition
        micro_pause: Short settle pause used between chained UI gestures
        lazy_load_pause: Settle pause after scrolling to the bottom
        load_more: Infinite-scroll round waiting for new cards
    """
    element_visible: float = 15.0
    element_clickable: float = 15.0
    element_invisible: float = 10.0
    page_load: float = 30.0
    ajax: float = 20.0
    search_results_load: float = 15.0
    product_image_load: float = 10.0
    cart_update: float = 10.0
    filter_application: float = 15.0
    modal_appear: float = 5.0
    promo_overlay: float = 8.0
    new_tab: float = 10.0
    action: float = 5.0
    polling_interval: float = 0.5
    micro_pause: float = 0.2
    lazy_load_pause: float = 1.0
    load_more: float = 3.0

    @classmethod
    def from_dict(cls, values: Optional[Dict[str, Any]]) -> "Timeouts":
        """Build from a mapping, ignoring unknown keys and null values."""
        known = {f.name for f in fields(cls)}
        overrides = {
            key: float(value)
            for key, value in (values or {}).items()
            if key in known and value is not None
        }
        return cls(**overrides)

    @classmethod
    def from_config(cls, config: Any = None) -> "Timeouts":
        """
        Build from the ``timeouts`` configuration section.

        Args:
            config: Object with ``get(key, default)``; defaults to ConfigLoader
        """
        config = config or ConfigLoader()
        values = {
            f.name: config.get(f"timeouts.{f.name}", f.default)
            for f in fields(cls)
        }
        return cls.from_dict(values)

    def scaled(self, factor: float) -> "Timeouts":
        """Return a copy with every budget multiplied by ``factor``."""
        return replace(
            self,
            **{f.name: getattr(self, f.name) * factor for f in fields(self)},
        )


def to_ms(seconds: float) -> float:
    """Convert seconds to the millisecond timeouts Playwright expects."""
    return seconds * 1000


# Named wait scenarios -> Timeouts attribute
WAIT_SCENARIOS: Dict[str, str] = {
    "default": "element_visible",
    "visible": "element_visible",
    "clickable": "element_clickable",
    "invisible": "element_invisible",
    "page_load": "page_load",
    "ajax": "ajax",
    "search_results": "search_results_load",
    "product_image": "product_image_load",
    "cart_update": "cart_update",
    "filter": "filter_application",
    "modal": "modal_appear",
    "promo": "promo_overlay",
    "new_tab": "new_tab",
}


def get_timeout(scenario: str, timeouts: Optional[Timeouts] = None) -> float:
    """
    Get the wait budget for a named scenario.

    Args:
        scenario: Scenario name (e.g., "search_results", "cart_update")
        timeouts: Budgets to read from; defaults to built-in values

    Returns:
        Budget in seconds, or the default budget for an unknown scenario
    """
    timeouts = timeouts or Timeouts()
    attribute = WAIT_SCENARIOS.get(scenario, WAIT_SCENARIOS["default"])
    return getattr(timeouts, attribute)


__all__ = [
    "Timeouts",
    "WAIT_SCENARIOS",
    "get_timeout",
    "to_ms",
]
