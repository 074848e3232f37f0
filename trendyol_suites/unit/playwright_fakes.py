"""
In-memory stand-ins for Playwright's Page, Locator and BrowserContext.

The fake DOM is a mapping of selector -> list of FakeElement; nested selectors
live in each element's ``children``. Failures are raised as real
``playwright.async_api.Error`` / ``TimeoutError`` instances so the code under
test classifies them exactly as it would against a browser.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from trendyol_suites.ui_testing.framework.element_actions import RetryConfig
from trendyol_suites.ui_testing.framework.timeouts import Timeouts
from trendyol_suites.ui_testing.framework.wait_strategy import AJAX_IDLE_SCRIPT, DOCUMENT_READY_SCRIPT


# Small budgets so that expected timeouts cost milliseconds
FAST_TIMEOUTS = Timeouts().scaled(0.002)

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def make_page_object(page_class, page, base_url="https://www.trendyol.com/"):
    """Page object on a fake page with fast budgets and no retry delay."""
    return page_class(
        page,
        base_url=base_url,
        timeouts=FAST_TIMEOUTS,
        retry_config=RetryConfig(delay_seconds=0),
    )


def stale_error() -> PlaywrightError:
    return PlaywrightError("Element is not attached to the DOM")


def intercepted_error() -> PlaywrightError:
    return PlaywrightError(
        "<div class=\"overlay\"></div> intercepts pointer events\nretrying click action"
    )


class FakeElement:
    def __init__(
        self,
        text: str = "",
        visible: bool = True,
        enabled: bool = True,
        attrs: Optional[Dict[str, Optional[str]]] = None,
        children: Optional[Dict[str, List["FakeElement"]]] = None,
        on_click: Optional[Callable[[], None]] = None,
    ):
        self.text = text
        self.visible = visible
        self.enabled = enabled
        self.attrs = dict(attrs or {})
        self.children = children or {}
        self.on_click = on_click

        self.click_errors: List[BaseException] = []
        self.clicks = 0
        self.script_clicks = 0
        self.hovers = 0
        self.pressed: List[str] = []
        self.selected: List[Dict[str, object]] = []

    @property
    def value(self) -> str:
        return self.attrs.get("value") or ""

    def _activate(self) -> None:
        if self.on_click:
            self.on_click()


class FakeLocator:
    def __init__(self, resolve: Callable[[], List[FakeElement]], description: str):
        self._resolve = resolve
        self.description = description

    def __repr__(self) -> str:
        return f"<FakeLocator {self.description}>"

    # -- Chaining --------------------------------------------------------

    def locator(self, selector: str) -> "FakeLocator":
        def resolve() -> List[FakeElement]:
            return [child for el in self._resolve() for child in el.children.get(selector, [])]

        return FakeLocator(resolve, f"{self.description} >> {selector}")

    def nth(self, index: int) -> "FakeLocator":
        def resolve() -> List[FakeElement]:
            elements = self._resolve()
            return [elements[index]] if 0 <= index < len(elements) else []

        return FakeLocator(resolve, f"{self.description} >> nth={index}")

    @property
    def first(self) -> "FakeLocator":
        return self.nth(0)

    def filter(self, has_text: str) -> "FakeLocator":
        return FakeLocator(
            lambda: [el for el in self._resolve() if has_text in el.text],
            f"{self.description} >> has_text={has_text}",
        )

    # -- Queries ---------------------------------------------------------

    async def count(self) -> int:
        return len(self._resolve())

    async def is_visible(self) -> bool:
        elements = self._resolve()
        if not elements:
            return False
        return self._strict(elements).visible

    async def is_enabled(self, timeout: Optional[float] = None) -> bool:
        return self._single().enabled

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        elements = self._resolve()
        if elements:
            element = self._strict(elements)
            satisfied = {
                "visible": element.visible,
                "attached": True,
                "hidden": not element.visible,
                "detached": False,
            }[state]
        else:
            satisfied = state in ("hidden", "detached")
        if not satisfied:
            raise PlaywrightTimeoutError(
                f"Timeout {timeout}ms exceeded waiting for {self.description} to be {state}"
            )

    async def all_text_contents(self) -> List[str]:
        return [el.text for el in self._resolve()]

    async def inner_text(self, timeout: Optional[float] = None) -> str:
        return self._single().text

    async def text_content(self, timeout: Optional[float] = None) -> Optional[str]:
        return self._single().text

    async def get_attribute(self, name: str, timeout: Optional[float] = None) -> Optional[str]:
        return self._single().attrs.get(name)

    # -- Actions ---------------------------------------------------------

    async def evaluate(self, script: str, arg: object = None) -> None:
        element = self._single()
        if "click()" in script:
            element.script_clicks += 1
            element._activate()

    async def click(self, timeout: Optional[float] = None, button: str = "left") -> None:
        element = self._single()
        if element.click_errors:
            raise element.click_errors.pop(0)
        element.clicks += 1
        element._activate()

    async def dblclick(self, timeout: Optional[float] = None) -> None:
        await self.click(timeout)

    async def hover(self, timeout: Optional[float] = None) -> None:
        self._single().hovers += 1

    async def fill(self, value: str, timeout: Optional[float] = None) -> None:
        self._single().attrs["value"] = value

    async def press_sequentially(self, text: str, timeout: Optional[float] = None) -> None:
        element = self._single()
        element.attrs["value"] = element.value + text

    async def press(self, key: str) -> None:
        self._single().pressed.append(key)

    async def select_option(self, timeout: Optional[float] = None, **option: object) -> None:
        self._single().selected.append(option)

    # -- Internal --------------------------------------------------------

    def _single(self) -> FakeElement:
        elements = self._resolve()
        if not elements:
            raise PlaywrightTimeoutError(f"Timeout exceeded waiting for {self.description}")
        return self._strict(elements)

    def _strict(self, elements: List[FakeElement]) -> FakeElement:
        if len(elements) > 1:
            raise PlaywrightError(
                f"strict mode violation: {self.description} resolved to {len(elements)} elements"
            )
        return elements[0]


class FakeKeyboard:
    def __init__(self):
        self.pressed: List[str] = []

    async def press(self, key: str) -> None:
        self.pressed.append(key)


class FakeContext:
    def __init__(self):
        self.pages: List["FakePage"] = []
        self.front: Optional["FakePage"] = None

    def new_fake_page(self, url: str = "about:blank") -> "FakePage":
        """Open a tab, as a product card click does."""
        return FakePage(url=url, context=self)


class FakePage:
    def __init__(self, url: str = "https://www.trendyol.com/", context: Optional[FakeContext] = None):
        self.url = url
        self.context = context or FakeContext()
        self.context.pages.append(self)
        self.elements: Dict[str, List[FakeElement]] = {}
        self.keyboard = FakeKeyboard()

        self.ready_state = "complete"
        self.ajax_idle = True
        self.page_title = "Trendyol"
        self.goto_error: Optional[BaseException] = None
        self.screenshot_error: Optional[BaseException] = None
        self.on_scroll_bottom: Optional[Callable[[], None]] = None

        self.visited: List[str] = []
        self.scripts: List[str] = []
        self.locator_handlers: List[FakeLocator] = []
        self.screenshots: List[Dict[str, object]] = []
        self._closed = False

    def add(self, selector: str, *elements: FakeElement) -> FakeElement:
        """Place elements under ``selector``; returns the first one."""
        self.elements.setdefault(selector, []).extend(elements)
        return elements[0]

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(lambda: list(self.elements.get(selector, [])), selector)

    async def evaluate(self, script: str, arg: object = None) -> object:
        self.scripts.append(script)
        if script == DOCUMENT_READY_SCRIPT:
            return self.ready_state
        if script == AJAX_IDLE_SCRIPT:
            return self.ajax_idle
        if "scrollHeight" in script and self.on_scroll_bottom:
            self.on_scroll_bottom()
        return None

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[float] = None) -> None:
        if self.ready_state != "complete":
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {state}")

    async def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[float] = None) -> None:
        if self.goto_error is not None:
            raise self.goto_error
        self.url = url
        self.visited.append(url)

    async def reload(self, wait_until: Optional[str] = None) -> None:
        self.visited.append(self.url)

    async def go_back(self, wait_until: Optional[str] = None) -> None:
        self.visited.append("back")

    async def go_forward(self, wait_until: Optional[str] = None) -> None:
        self.visited.append("forward")

    async def title(self) -> str:
        return self.page_title

    async def screenshot(self, path: Optional[str] = None, full_page: bool = False) -> bytes:
        if self.screenshot_error is not None:
            raise self.screenshot_error
        if path:
            with open(path, "wb") as f:
                f.write(PNG_BYTES)
        self.screenshots.append({"path": path, "full_page": full_page})
        return PNG_BYTES

    async def add_locator_handler(self, locator: FakeLocator, handler: Callable) -> None:
        self.locator_handlers.append(locator)

    async def bring_to_front(self) -> None:
        self.context.front = self

    async def close(self) -> None:
        self._closed = True
        if self in self.context.pages:
            self.context.pages.remove(self)

    def is_closed(self) -> bool:
        return self._closed
