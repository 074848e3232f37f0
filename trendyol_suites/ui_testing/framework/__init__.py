"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based reliability layer for the Trendyol storefront.

Components:
    - wait_strategy: Explicit, bounded waits
    - element_actions: Retrying click/type/read primitives with script fallback
    - smart_locator: Element location with fallback strategies
    - popup_handler: Gender modal and cookie banner dismissal
    - tab_manager: Tab tracking and switching for product navigation
    - turkish_text: Turkish case folding and number parsing
    - page_base: Base page object composing the above
    - browser_manager: Browser lifecycle management

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserManager
from .element_actions import ElementActions, RetryConfig, with_retry
from .exceptions import (
    BrowserSetupError,
    ElementInteractionError,
    ElementNotFoundError,
    PageActionError,
    UIAutomationError,
    WaitTimeoutError,
)
from .page_base import BasePage, PageBase
from .popup_handler import PopupHandler
from .smart_locator import SmartLocator
from .tab_manager import TabManager
from .timeouts import Timeouts
from .wait_strategy import WaitStrategy

__all__ = [
    "BrowserManager",
    "ElementActions",
    "RetryConfig",
    "with_retry",
    "BrowserSetupError",
    "ElementInteractionError",
    "ElementNotFoundError",
    "PageActionError",
    "UIAutomationError",
    "WaitTimeoutError",
    "BasePage",
    "PageBase",
    "PopupHandler",
    "SmartLocator",
    "TabManager",
    "Timeouts",
    "WaitStrategy",
]
