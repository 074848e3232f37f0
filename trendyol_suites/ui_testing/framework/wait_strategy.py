# ================================================================================
# Wait Strategy Module
# ================================================================================
#
# Explicit, bounded wait strategies for a JavaScript-heavy storefront.
#
# Every wait polls a predicate until it holds or its budget (seconds) runs out.
# Element waits are built on Playwright's own locator.wait_for(); page-level
# waits (document ready, jQuery drained, custom conditions) poll through
# WaitStrategy.until().
#
# Key Features:
#   - Visibility / clickability / presence waits that raise WaitTimeoutError
#   - Invisibility / text / count / URL waits that return a bool
#   - Page load and AJAX waits that only warn on timeout
#   - Custom conditions (sync or async) with ignored exception types
#   - Allure step integration
#
# Usage:
#   waits = WaitStrategy(page)
#   await waits.for_visible(page.locator("a.product-card").first)
#   await waits.until(lambda: cart.item_count() > 0, description="cart filled")
#
# ================================================================================

import asyncio
import inspect
from typing import Any, Awaitable, Callable, List, Optional, Tuple, Type, Union

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .exceptions import WaitTimeoutError
from .timeouts import Timeouts, to_ms


Condition = Callable[[], Union[Any, Awaitable[Any]]]

# Errors raised by Playwright while the DOM is being re-rendered
DEFAULT_IGNORED: Tuple[Type[BaseException], ...] = (PlaywrightError,)

DOCUMENT_READY_SCRIPT = "() => document.readyState"
AJAX_IDLE_SCRIPT = (
    "() => (typeof window.jQuery === 'undefined') || window.jQuery.active === 0"
)


class WaitStrategy:
    """
    Explicit wait helpers bound to a single Playwright page.

    Timeouts are expressed in seconds; when omitted, the budget for the
    matching scenario in ``Timeouts`` is used.

    Example:
        waits = WaitStrategy(page, Timeouts.from_config())
        card = await waits.for_clickable(page.locator("a.product-card").first)
        gone = await waits.for_invisible(page.locator(".loading-overlay"))
    """

    def __init__(self, page: Page, timeouts: Optional[Timeouts] = None):
        """
        Initialize the wait strategy.

        Args:
            page: Playwright Page the waits evaluate against
            timeouts: Wait budgets; defaults to built-in values
        """
        self.page = page
        self.timeouts = timeouts or Timeouts()

    # =========================================================================
    # Custom Conditions
    # =========================================================================

    @allure.step("Wait until: {description}")
    async def until(
        self,
        condition: Condition,
        timeout: Optional[float] = None,
        description: str = "custom condition",
        ignored: Tuple[Type[BaseException], ...] = DEFAULT_IGNORED,
        poll_interval: Optional[float] = None,
    ) -> Any:
        """
        Poll a condition until it returns a truthy value.

        The condition is always evaluated at least once, even with a zero
        budget. Exceptions listed in ``ignored`` count as "not yet".

        Args:
            condition: Sync or async callable returning a truthy value when done
            timeout: Budget in seconds (default: element_visible)
            description: Human-readable description for logs and errors
            ignored: Exception types swallowed between polls
            poll_interval: Seconds between polls (default: polling_interval)

        Returns:
            The first truthy value returned by the condition

        Raises:
            WaitTimeoutError: If the budget runs out first
        """
        timeout = self.timeouts.element_visible if timeout is None else timeout
        interval = poll_interval or self.timeouts.polling_interval

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        last_error: Optional[BaseException] = None
        attempt = 0

        while True:
            attempt += 1
            try:
                result = condition()
                if inspect.isawaitable(result):
                    result = await result
                if result:
                    if attempt > 1:
                        logger.debug(f"Condition met after {attempt} polls: {description}")
                    return result
            except ignored as e:
                last_error = e
                logger.debug(f"Poll {attempt} for '{description}' raised: {e}")

            remaining = deadline - loop.time()
            if remaining <= 0:
                message = f"Timed out after {timeout}s waiting for: {description}"
                if last_error is not None:
                    message += f" (last error: {last_error})"
                raise WaitTimeoutError(
                    message,
                    description=description,
                    timeout=timeout,
                    last_error=last_error,
                )

            await asyncio.sleep(min(interval, remaining))

    # =========================================================================
    # Element Waits (raise on timeout)
    # =========================================================================

    async def for_visible(
        self,
        locator: Locator,
        timeout: Optional[float] = None,
    ) -> Locator:
        """
        Wait for the element to be visible.

        Raises:
            WaitTimeoutError: If the element stays hidden or absent
        """
        timeout = self.timeouts.element_visible if timeout is None else timeout
        try:
            await locator.wait_for(state="visible", timeout=to_ms(timeout))
        except PlaywrightTimeoutError as e:
            logger.error(f"Element not visible after {timeout}s: {locator}")
            raise WaitTimeoutError(
                f"Element not visible after {timeout}s: {locator}",
                description="visible",
                timeout=timeout,
                last_error=e,
            ) from e
        return locator

    async def for_present(
        self,
        locator: Locator,
        timeout: Optional[float] = None,
    ) -> Locator:
        """Wait for the element to be attached to the DOM, visible or not."""
        timeout = self.timeouts.element_visible if timeout is None else timeout
        try:
            await locator.wait_for(state="attached", timeout=to_ms(timeout))
        except PlaywrightTimeoutError as e:
            logger.error(f"Element not present after {timeout}s: {locator}")
            raise WaitTimeoutError(
                f"Element not present after {timeout}s: {locator}",
                description="present",
                timeout=timeout,
                last_error=e,
            ) from e
        return locator

    async def for_clickable(
        self,
        locator: Locator,
        timeout: Optional[float] = None,
    ) -> Locator:
        """
        Wait for the element to be visible and enabled.

        Raises:
            WaitTimeoutError: If the element never becomes clickable
        """
        timeout = self.timeouts.element_clickable if timeout is None else timeout
        try:
            await self.until(
                lambda: self._is_clickable(locator),
                timeout=timeout,
                description=f"clickable {locator}",
            )
        except WaitTimeoutError:
            logger.error(f"Element not clickable after {timeout}s: {locator}")
            raise
        return locator

    async def for_all_visible(
        self,
        locator: Locator,
        timeout: Optional[float] = None,
    ) -> List[Locator]:
        """
        Wait until the locator matches at least one element and all are visible.

        Returns:
            One locator per matched element
        """
        timeout = self.timeouts.element_visible if timeout is None else timeout

        async def all_visible() -> int:
            count = await locator.count()
            if count == 0:
                return 0
            for index in range(count):
                if not await locator.nth(index).is_visible():
                    return 0
            return count

        count = await self.until(
            all_visible,
            timeout=timeout,
            description=f"all visible {locator}",
        )
        return [locator.nth(index) for index in range(count)]

    # =========================================================================
    # Element Waits (return bool)
    # =========================================================================

    async def for_invisible(
        self,
        locator: Locator,
        timeout: Optional[float] = None,
    ) -> bool:
        """
        Wait for the element to be hidden or detached.

        Returns:
            True once hidden, False if still visible after the budget
        """
        timeout = self.timeouts.element_invisible if timeout is None else timeout
        try:
            await locator.wait_for(state="hidden", timeout=to_ms(timeout))
            return True
        except PlaywrightTimeoutError:
            logger.warning(f"Element still visible after {timeout}s: {locator}")
            return False

    async def appears(
        self,
        locator: Locator,
        timeout: Optional[float] = None,
    ) -> bool:
        """
        Check whether an optional element shows up within the budget.

        Unlike for_visible(), a missing element is an expected outcome here
        (promo modals, cookie banners) and is not logged as an error.
        """
        timeout = self.timeouts.element_visible if timeout is None else timeout
        try:
            await locator.wait_for(state="visible", timeout=to_ms(timeout))
            return True
        except PlaywrightTimeoutError:
            logger.debug(f"Element did not appear within {timeout}s: {locator}")
            return False

    async def for_text_present(
        self,
        locator: Locator,
        text: str,
        timeout: Optional[float] = None,
    ) -> bool:
        """Wait for any element matched by the locator to contain ``text``."""
        timeout = self.timeouts.element_visible if timeout is None else timeout

        async def has_text() -> bool:
            contents = await locator.all_text_contents()
            return any(text in content for content in contents)

        return await self._poll_bool(has_text, timeout, f"text '{text}' in {locator}")

    async def for_count_greater_than(
        self,
        locator: Locator,
        count: int,
        timeout: Optional[float] = None,
    ) -> bool:
        """Wait until the locator matches more than ``count`` elements."""
        timeout = self.timeouts.element_visible if timeout is None else timeout

        async def grew() -> bool:
            return await locator.count() > count

        return await self._poll_bool(grew, timeout, f"count > {count} for {locator}")

    async def for_url_contains(
        self,
        fragment: str,
        timeout: Optional[float] = None,
    ) -> bool:
        """Wait until the current page URL contains ``fragment``."""
        timeout = self.timeouts.page_load if timeout is None else timeout
        return await self._poll_bool(
            lambda: fragment in self.page.url,
            timeout,
            f"URL contains '{fragment}'",
        )

    # =========================================================================
    # Page Waits (warn on timeout)
    # =========================================================================

    async def for_page_load(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for ``document.readyState`` to be ``complete``.

        Returns:
            False (after logging a warning) if the page is still loading
        """
        timeout = self.timeouts.page_load if timeout is None else timeout

        async def ready() -> bool:
            return await self.page.evaluate(DOCUMENT_READY_SCRIPT) == "complete"

        loaded = await self._poll_bool(ready, timeout, "document ready")
        if not loaded:
            logger.warning(f"⚠️ Page did not finish loading within {timeout}s")
        return loaded

    async def for_ajax(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for pending jQuery requests to drain.

        Pages without jQuery pass immediately.
        """
        timeout = self.timeouts.ajax if timeout is None else timeout

        async def idle() -> bool:
            return bool(await self.page.evaluate(AJAX_IDLE_SCRIPT))

        drained = await self._poll_bool(idle, timeout, "AJAX idle")
        if not drained:
            logger.warning(f"⚠️ AJAX requests still active after {timeout}s")
        return drained

    async def for_load_state(
        self,
        state: str = "domcontentloaded",
        timeout: Optional[float] = None,
    ) -> bool:
        """Wait for a Playwright load state; returns False on timeout."""
        timeout = self.timeouts.page_load if timeout is None else timeout
        try:
            await self.page.wait_for_load_state(state, timeout=to_ms(timeout))
            return True
        except PlaywrightTimeoutError:
            logger.warning(f"⚠️ Load state '{state}' not reached within {timeout}s")
            return False

    # =========================================================================
    # Fixed Pauses
    # =========================================================================

    async def hard_wait(self, seconds: float) -> None:
        """Fixed sleep. Prefer an explicit wait; every call is logged."""
        logger.warning(f"Hard wait used: {seconds}s")
        await asyncio.sleep(seconds)

    async def micro_pause(self) -> None:
        """Short settle pause between chained gestures (e.g. animations)."""
        await asyncio.sleep(self.timeouts.micro_pause)

    # =========================================================================
    # Internal
    # =========================================================================

    async def _poll_bool(
        self,
        condition: Condition,
        timeout: float,
        description: str,
    ) -> bool:
        try:
            await self.until(condition, timeout=timeout, description=description)
            return True
        except WaitTimeoutError:
            return False

    async def _is_clickable(self, locator: Locator) -> bool:
        if not await locator.is_visible():
            return False
        return await locator.is_enabled(timeout=to_ms(self.timeouts.action))


__all__ = [
    "WaitStrategy",
    "Condition",
    "DEFAULT_IGNORED",
]
