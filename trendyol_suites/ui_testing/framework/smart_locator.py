"""
================================================================================
Smart Locator
================================================================================

Named storefront elements resolved through ordered selector strategies.

Trendyol ships hashed class names and A/B header variants, so a primary
data-testid selector is backed by attribute, text and class fallbacks. Every
fallback hit is recorded and summarised by get_health_report() so that
drifting selectors show up in test logs before the fallbacks run out too.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Tuple, Union

from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from .exceptions import ElementNotFoundError
from .timeouts import to_ms


# Successful resolutions kept per SmartLocator; fallback hits are kept separately
HEALTH_HISTORY_SIZE = 100


@dataclass
class LocatorHealth:
    """One successful resolution: which strategy matched for an element."""
    element_name: str
    primary_selector: str
    used_fallback: bool = False
    fallback_name: Optional[str] = None
    fallback_selector: Optional[str] = None


class SmartLocator:
    """
    Resolves named storefront elements through ordered selector strategies.

    Strategies are tried in map order, so each entry lists the most stable
    selector first: data-testid, then semantic attributes (placeholder, href),
    then visible Turkish text, and hashed CSS classes last.

    Usage:
        >>> smart = SmartLocator(page)
        >>> search_box = await smart.locate("search_box")
        >>> await search_box.fill("laptop")

        >>> button = SmartLocator(page, "buy", {"primary": "#buy", "fallback_1": ".buy"})
        >>> await button.locate()
    """

    # Format: element_name -> {strategy_name: selector}
    LOCATORS: Dict[str, Dict[str, str]] = {
        # Header
        "search_box": {
            "primary": "input[data-testid='suggestion']",
            "fallback_1": "input[placeholder*='Aradığınız']",
            "fallback_2": "header input[type='text']",
        },
        "search_icon": {
            "primary": "i[data-testid='search-icon']",
            "fallback_1": "[data-testid='search-icon']",
        },
        "logo": {
            "primary": "a.logo",
            "fallback_1": "header a[href='/']",
        },
        "login_link": {
            "primary": "p:has-text('Giriş Yap')",
            "fallback_1": "a[href*='giris']",
        },
        "cart_link": {
            "primary": "p:has-text('Sepetim')",
            "fallback_1": "a[href*='sepet']",
        },
        "favorites_link": {
            "primary": "p:has-text('Favorilerim')",
            "fallback_1": "a[href*='Favoriler']",
        },

        # Search results
        "results_title": {
            "primary": "h1[data-testid='title']",
            "fallback_1": ".srch-rslt-title h1",
        },
        "result_count": {
            "primary": "span[data-testid='result-count-info']",
            "fallback_1": ".dscrptn-V2 h2",
        },

        # Product detail
        "product_title": {
            "primary": "h1[data-testid='product-title']",
            "fallback_1": "h1.pr-new-br",
        },
        "add_to_cart_button": {
            "primary": "button[data-testid='add-to-cart-button']",
            "fallback_1": "button.add-to-basket",
        },

        # Cart
        "checkout_button": {
            "primary": "button[data-testid='checkout-button']",
            "fallback_1": "button:has-text('Sepeti Onayla')",
        },
    }

    def __init__(
        self,
        page: Page,
        element_name: Optional[str] = None,
        locators: Optional[Dict[str, str]] = None,
    ):
        # element_name/locators make this instance resolve a single element
        # when locate() is called without a target
        self.page = page
        self._element_name = element_name
        self._element_locators = locators
        self._health_records: Deque[LocatorHealth] = deque(maxlen=HEALTH_HISTORY_SIZE)
        self._fallback_used: Dict[str, LocatorHealth] = {}

    async def locate(
        self,
        target: Optional[Union[str, Dict[str, str]]] = None,
        timeout: float = 5.0,
        element_name: Optional[str] = None,
        state: str = "visible",
    ) -> Locator:
        """
        Resolve an element, trying each strategy until one reaches ``state``.

        Args:
            target: Element key in `LOCATORS`, a locator map, or None to use
                the instance's stored map (element mode)
            timeout: Budget in seconds for each strategy
            element_name: Human-readable name when `target` is a dict
            state: Playwright state to wait for ('visible' or 'attached')

        Returns:
            Locator (first match) for the found element

        Raises:
            ElementNotFoundError: When all strategies fail
        """
        locators, display_name = self._resolve(target, element_name)

        if not locators:
            raise ElementNotFoundError(
                f"No locators defined for element: {display_name}"
            )

        errors = []

        for strategy_name, selector in locators.items():
            try:
                locator = self.page.locator(selector).first
                await locator.wait_for(state=state, timeout=to_ms(timeout))
            except PlaywrightError as e:
                errors.append(f"{strategy_name}: {selector} -> {str(e)[:80]}")
                continue

            is_primary = strategy_name == "primary"
            health = LocatorHealth(
                element_name=display_name,
                primary_selector=locators.get("primary", selector),
                used_fallback=not is_primary,
                fallback_name=None if is_primary else strategy_name,
                fallback_selector=None if is_primary else selector,
            )
            self._health_records.append(health)

            if is_primary:
                logger.debug(f"✅ Element '{display_name}' found: {selector}")
            else:
                logger.warning(
                    f"⚠️ Element '{display_name}' used fallback: "
                    f"{strategy_name} -> {selector}"
                )
                self._fallback_used[display_name] = health

            return locator

        error_msg = (
            f"❌ All locators failed for '{display_name}':\n" +
            "\n".join(f"  - {err}" for err in errors)
        )
        logger.error(error_msg)
        raise ElementNotFoundError(error_msg)

    def primary(self, element_name: str) -> Locator:
        """
        Locator for the primary selector without waiting.

        Used for probes that must not block (is-displayed checks).
        """
        selector = self.LOCATORS[element_name]["primary"]
        return self.page.locator(selector).first

    async def is_visible(
        self,
        target: Union[str, Dict[str, str]],
        timeout: float = 2.0,
        element_name: Optional[str] = None,
    ) -> bool:
        """True when any strategy reaches a visible match within ``timeout``."""
        try:
            await self.locate(target, timeout=timeout, element_name=element_name)
            return True
        except ElementNotFoundError:
            return False

    def get_health_report(self) -> str:
        """Elements whose primary selector missed; candidates for a selector update."""
        if not self._fallback_used:
            return "✅ All elements used primary locators. No maintenance needed."

        lines = [f"⚠️ {len(self._fallback_used)} element(s) resolved through a fallback:"]
        for name, health in sorted(self._fallback_used.items()):
            lines.append(
                f"  [{name}] primary '{health.primary_selector}' missed, "
                f"{health.fallback_name} '{health.fallback_selector}' matched"
            )
        return "\n".join(lines)

    @property
    def health_records(self) -> List[LocatorHealth]:
        """Most recent resolutions, oldest first (at most HEALTH_HISTORY_SIZE)."""
        return list(self._health_records)

    def register_locator(self, element_name: str, locators: Dict[str, str]) -> None:
        """Add or replace a strategy map for this instance only."""
        self.LOCATORS = {**self.LOCATORS, element_name: locators}
        logger.debug(f"Registered locator '{element_name}' ({len(locators)} strategies)")

    def _resolve(
        self,
        target: Optional[Union[str, Dict[str, str]]],
        element_name: Optional[str],
    ) -> Tuple[Dict[str, str], str]:
        if isinstance(target, dict):
            return target, element_name or self._element_name or "custom_element"
        if isinstance(target, str):
            return self.LOCATORS.get(target, {}), target
        return (
            self._element_locators or {},
            element_name or self._element_name or "custom_element",
        )


__all__ = [
    "SmartLocator",
    "ElementNotFoundError",
    "LocatorHealth",
    "HEALTH_HISTORY_SIZE",
]
