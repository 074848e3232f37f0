"""
================================================================================
UI Framework Exceptions
================================================================================

Exception hierarchy shared by the wait, action, locator and page layers.

Hierarchy:
    UIAutomationError
        - ElementNotFoundError: every locator strategy failed
        - WaitTimeoutError: a bounded wait expired
        - ElementInteractionError: click/type/select failed after retries
        - PageActionError: a page-level operation failed
        - BrowserSetupError: browser could not be launched

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Optional


class UIAutomationError(Exception):
    """Base exception for the UI automation framework."""
    pass


class ElementNotFoundError(UIAutomationError):
    """Raised when all locator strategies fail to find element."""
    pass


class WaitTimeoutError(UIAutomationError):
    """
    Raised when a wait operation times out.

    Attributes:
        description: What was being waited for
        timeout: Wait budget in seconds
        last_error: Last ignored error seen while polling, if any
    """

    def __init__(
        self,
        message: str,
        description: str = "",
        timeout: Optional[float] = None,
        last_error: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.description = description
        self.timeout = timeout
        self.last_error = last_error


class ElementInteractionError(UIAutomationError):
    """Raised when an interaction fails after the retry budget is spent."""
    pass


class PageActionError(UIAutomationError):
    """Raised when a page-level operation (filter, quantity, checkout) fails."""
    pass


class BrowserSetupError(UIAutomationError):
    """Raised when the browser or context cannot be created."""
    pass


__all__ = [
    "UIAutomationError",
    "ElementNotFoundError",
    "WaitTimeoutError",
    "ElementInteractionError",
    "PageActionError",
    "BrowserSetupError",
]
