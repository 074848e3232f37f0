# ================================================================================
# Element Actions Module
# ================================================================================
#
# Reliable UI element interactions for the Trendyol storefront, with built-in
# retry logic, explicit waits, a script-click fallback and Allure integration.
#
# Key Features:
#   - Failure classification of Playwright errors (intercepted / stale / fatal)
#   - Retry decorator for stale (detached) elements
#   - Safe click: wait clickable -> scroll into view -> click, falling back to
#     a script-dispatched click when overlays keep intercepting the pointer
#   - Safe type / safe text read with non-raising read semantics
#   - Hover, double/right click, native <select> handling, scrolling
#
# ================================================================================

import asyncio
from functools import wraps
from typing import Any, Callable, Optional, Tuple, Union

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from trendyol_tools.common import ConfigLoader

from .exceptions import ElementInteractionError, WaitTimeoutError
from .timeouts import Timeouts, to_ms
from .wait_strategy import WaitStrategy


Target = Union[str, Locator]

# Failure kinds
INTERCEPTED = "intercepted"
STALE = "stale"
FATAL = "fatal"

INTERCEPTED_MARKERS = (
    "intercepts pointer events",
    "would receive the click",
    "not receive pointer events",
)
STALE_MARKERS = (
    "not attached to the dom",
    "element is detached",
    "was detached",
    "execution context was destroyed",
)

SCROLL_INTO_VIEW_SCRIPT = (
    "(el, behavior) => el.scrollIntoView({block: 'center', inline: 'nearest', behavior})"
)
SCRIPT_CLICK = "el => el.click()"


def classify_error(error: BaseException) -> str:
    """
    Classify a Playwright failure by its message.

    Returns:
        INTERCEPTED when another element covers the target,
        STALE when the node was detached or the page re-rendered,
        FATAL for anything else
    """
    message = str(error).lower()
    if any(marker in message for marker in INTERCEPTED_MARKERS):
        return INTERCEPTED
    if any(marker in message for marker in STALE_MARKERS):
        return STALE
    return FATAL


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_attempts: int = 3,
        delay_seconds: float = 1.0,
        backoff_multiplier: float = 1.0,
        max_delay_seconds: float = 10.0
    ):
        """
        Initialize retry configuration.

        Args:
            max_attempts: Maximum number of attempts (first try included)
            delay_seconds: Delay between attempts
            backoff_multiplier: Multiplier applied to the delay after each retry
            max_delay_seconds: Maximum delay between retries
        """
        self.max_attempts = max(1, max_attempts)
        self.delay_seconds = delay_seconds
        self.backoff_multiplier = backoff_multiplier
        self.max_delay_seconds = max_delay_seconds

    def next_delay(self, delay: float) -> float:
        return min(delay * self.backoff_multiplier, self.max_delay_seconds)

    @classmethod
    def from_config(cls, config: Any = None) -> "RetryConfig":
        """Build from the ``retry`` configuration section."""
        config = config or ConfigLoader()
        return cls(
            max_attempts=int(config.get("retry.attempts", 3)),
            delay_seconds=float(config.get("retry.delay", 1.0)),
        )


def with_retry(
    config: Optional[RetryConfig] = None,
    retry_on: Tuple[str, ...] = (STALE,),
):
    """
    Decorator adding retry logic to async element actions.

    Only Playwright errors whose classification is in ``retry_on`` are
    retried; anything else propagates immediately. Once the attempts run
    out, ElementInteractionError is raised from the last failure.

    Args:
        config: RetryConfig to use; defaults to the instance's ``retry_config``
        retry_on: Failure kinds that trigger a retry
    """
    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            retry = config or getattr(args[0], "retry_config", None) or RetryConfig()
            delay = retry.delay_seconds

            for attempt in range(1, retry.max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except PlaywrightError as e:
                    kind = classify_error(e)
                    if kind not in retry_on:
                        raise
                    if attempt >= retry.max_attempts:
                        logger.error(
                            f"All {retry.max_attempts} attempts failed for "
                            f"{func.__name__} ({kind}): {e}"
                        )
                        raise ElementInteractionError(
                            f"{func.__name__} failed after {retry.max_attempts} attempts: {e}"
                        ) from e
                    logger.warning(
                        f"Attempt {attempt}/{retry.max_attempts} failed for "
                        f"{func.__name__} ({kind}): {e}. Retrying in {delay}s..."
                    )
                    await asyncio.sleep(delay)
                    delay = retry.next_delay(delay)

        return wrapper
    return decorator


class ElementActions:
    """
    Reliable element interaction methods on top of Playwright locators.

    Every target may be a CSS/Playwright selector string or a Locator.
    Waits come from a shared WaitStrategy so that page objects and actions
    use the same budgets.

    Example:
        actions = ElementActions(page)
        await actions.safe_type("input[data-testid='suggestion']", "laptop")
        await actions.safe_click("i[data-testid='search-icon']", description="Search icon")
    """

    def __init__(
        self,
        page: Page,
        waits: Optional[WaitStrategy] = None,
        timeouts: Optional[Timeouts] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        """
        Initialize ElementActions with a Playwright page.

        Args:
            page: Playwright Page object
            waits: Shared wait strategy (created from ``timeouts`` if omitted)
            timeouts: Wait budgets
            retry_config: Retry behavior for clicks, typing and selects
        """
        self.page = page
        self.timeouts = timeouts or (waits.timeouts if waits else Timeouts())
        self.waits = waits or WaitStrategy(page, self.timeouts)
        self.retry_config = retry_config or RetryConfig()

    # =========================================================================
    # Clicking
    # =========================================================================

    @allure.step("Click: {description}")
    async def safe_click(
        self,
        target: Target,
        description: str = "",
        timeout: Optional[float] = None,
    ) -> None:
        """
        Click with explicit wait, scroll and retry.

        Flow per attempt: wait clickable -> scroll into view -> click.
            - Intercepted (overlay on top): retry, then fall back to a
              script click after the last attempt.
            - Stale (detached/re-rendered): retry, then raise ElementInteractionError.
            - Anything else: re-raise immediately.

        Args:
            target: Selector or Locator
            description: Human-readable description for reporting
            timeout: Clickability budget in seconds

        Raises:
            WaitTimeoutError: If the element never becomes clickable
            ElementInteractionError: If the element stays stale
            playwright.async_api.Error: For fatal failures
        """
        locator = self._get_locator(target)
        name = description or str(target)
        attempts = self.retry_config.max_attempts
        delay = self.retry_config.delay_seconds

        for attempt in range(1, attempts + 1):
            try:
                await self.waits.for_clickable(locator, timeout)
                await self._scroll_into_view(locator)
                await locator.click(timeout=to_ms(self.timeouts.action))
                logger.debug(f"Clicked: {name}")
                return
            except PlaywrightError as e:
                kind = classify_error(e)
                if kind == INTERCEPTED:
                    logger.warning(
                        f"Click intercepted on {name} (attempt {attempt}/{attempts})"
                    )
                    if attempt >= attempts:
                        logger.warning(f"Falling back to script click: {name}")
                        await self.click_via_script(locator, description=name)
                        return
                elif kind == STALE:
                    logger.warning(
                        f"Stale element on {name} (attempt {attempt}/{attempts})"
                    )
                    if attempt >= attempts:
                        logger.error(f"Element stayed stale after {attempts} attempts: {name}")
                        raise ElementInteractionError(
                            f"Click on {name} failed after {attempts} attempts: {e}"
                        ) from e
                else:
                    logger.error(f"Click failed on {name}: {e}")
                    raise

            await asyncio.sleep(delay)
            delay = self.retry_config.next_delay(delay)

    @allure.step("Script click: {description}")
    async def click_via_script(self, target: Target, description: str = "") -> None:
        """Dispatch a click from page script, bypassing pointer hit-testing."""
        locator = self._get_locator(target)
        await locator.evaluate(SCRIPT_CLICK)
        logger.debug(f"Script-clicked: {description or target}")

    @with_retry(retry_on=(STALE, INTERCEPTED))
    @allure.step("Double click: {description}")
    async def double_click(self, target: Target, description: str = "") -> None:
        locator = self._get_locator(target)
        await self.waits.for_visible(locator)
        await locator.dblclick(timeout=to_ms(self.timeouts.action))

    @with_retry(retry_on=(STALE, INTERCEPTED))
    @allure.step("Right click: {description}")
    async def right_click(self, target: Target, description: str = "") -> None:
        locator = self._get_locator(target)
        await self.waits.for_visible(locator)
        await locator.click(button="right", timeout=to_ms(self.timeouts.action))

    @with_retry(retry_on=(STALE, INTERCEPTED))
    @allure.step("Hover: {description}")
    async def hover(self, target: Target, description: str = "") -> None:
        """Hover over an element (reveals menus and quick-view buttons)."""
        locator = self._get_locator(target)
        await self.waits.for_visible(locator)
        await locator.hover(timeout=to_ms(self.timeouts.action))

    # =========================================================================
    # Typing and Reading
    # =========================================================================

    @with_retry()
    @allure.step("Type into {description}: {text}")
    async def safe_type(
        self,
        target: Target,
        text: str,
        description: str = "",
        clear_first: bool = True,
    ) -> None:
        """
        Type text into an input once it is visible.

        Args:
            target: Selector or Locator
            text: Text to enter
            description: Human-readable description for reporting
            clear_first: Replace existing content; otherwise append keystrokes
        """
        locator = self._get_locator(target)
        await self.waits.for_visible(locator)

        if clear_first:
            await locator.fill(text, timeout=to_ms(self.timeouts.action))
        else:
            await locator.press_sequentially(text, timeout=to_ms(self.timeouts.action))

        logger.debug(f"Typed '{text}' into {description or target}")

    async def safe_get_text(
        self,
        target: Target,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Read the rendered text of an element.

        Falls back to textContent when innerText is empty (hidden children,
        CSS text-transform). Never raises.

        Returns:
            Trimmed text, or "" if the element could not be read
        """
        locator = self._get_locator(target)
        try:
            await self.waits.for_visible(locator, timeout)
            text = (await locator.inner_text(timeout=to_ms(self.timeouts.action))).strip()
            if not text:
                text = (await locator.text_content(timeout=to_ms(self.timeouts.action)) or "").strip()
            return text
        except (PlaywrightError, WaitTimeoutError) as e:
            logger.error(f"Could not read text from {target}: {e}")
            return ""

    async def get_attribute(
        self,
        target: Target,
        attribute: str,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Read an attribute value.

        Returns:
            Attribute value, or "" when missing or unreadable
        """
        locator = self._get_locator(target)
        try:
            await self.waits.for_present(locator, timeout)
            value = await locator.get_attribute(attribute, timeout=to_ms(self.timeouts.action))
            return value or ""
        except (PlaywrightError, WaitTimeoutError) as e:
            logger.error(f"Could not read attribute '{attribute}' from {target}: {e}")
            return ""

    @allure.step("Press key: {key}")
    async def press_key(self, key: str, target: Optional[Target] = None) -> None:
        """
        Press a keyboard key, optionally on a focused element.

        Args:
            key: Key to press (e.g., "Enter", "Escape")
            target: Optional element to receive the key press
        """
        if target is not None:
            await self._get_locator(target).press(key)
        else:
            await self.page.keyboard.press(key)
        logger.debug(f"Pressed key: {key}")

    # =========================================================================
    # State Probes (never raise)
    # =========================================================================

    async def is_displayed(self, target: Target) -> bool:
        try:
            return await self._get_locator(target).is_visible()
        except PlaywrightError:
            return False

    async def is_enabled(self, target: Target) -> bool:
        locator = self._get_locator(target)
        try:
            if await locator.count() == 0:
                return False
            return await locator.is_enabled(timeout=to_ms(self.timeouts.action))
        except PlaywrightError:
            return False

    async def is_element_present(self, target: Target) -> bool:
        return await self.get_element_count(target) > 0

    async def get_element_count(self, target: Target) -> int:
        try:
            return await self._get_locator(target).count()
        except PlaywrightError as e:
            logger.error(f"Could not count elements for {target}: {e}")
            return 0

    # =========================================================================
    # Native Select
    # =========================================================================

    @with_retry()
    @allure.step("Select option by text: {text}")
    async def select_by_text(self, target: Target, text: str) -> None:
        locator = self._get_locator(target)
        await self.waits.for_visible(locator)
        await locator.select_option(label=text, timeout=to_ms(self.timeouts.action))

    @with_retry()
    @allure.step("Select option by value: {value}")
    async def select_by_value(self, target: Target, value: str) -> None:
        locator = self._get_locator(target)
        await self.waits.for_visible(locator)
        await locator.select_option(value=value, timeout=to_ms(self.timeouts.action))

    @with_retry()
    @allure.step("Select option by index: {index}")
    async def select_by_index(self, target: Target, index: int) -> None:
        locator = self._get_locator(target)
        await self.waits.for_visible(locator)
        await locator.select_option(index=index, timeout=to_ms(self.timeouts.action))

    # =========================================================================
    # Scrolling
    # =========================================================================

    @allure.step("Scroll to element: {description}")
    async def scroll_to_element(
        self,
        target: Target,
        description: str = "",
        smooth: bool = True,
    ) -> None:
        """Scroll the element to the vertical center of the viewport."""
        locator = self._get_locator(target)
        await self._scroll_into_view(locator, "smooth" if smooth else "instant")
        if smooth:
            await self.waits.micro_pause()

    @allure.step("Scroll to top")
    async def scroll_to_top(self) -> None:
        await self.page.evaluate("() => window.scrollTo(0, 0)")

    @allure.step("Scroll to bottom")
    async def scroll_to_bottom(self) -> None:
        """Scroll to the bottom of the page and give lazy content time to load."""
        await self.page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")
        await asyncio.sleep(self.timeouts.lazy_load_pause)

    async def _scroll_into_view(self, locator: Locator, behavior: str = "instant") -> None:
        await locator.evaluate(SCROLL_INTO_VIEW_SCRIPT, behavior)

    def _get_locator(self, target: Target) -> Locator:
        """Convert selector to Locator if needed."""
        if isinstance(target, str):
            return self.page.locator(target)
        return target


__all__ = [
    "ElementActions",
    "RetryConfig",
    "with_retry",
    "classify_error",
    "INTERCEPTED",
    "STALE",
    "FATAL",
]
