"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for the Trendyol UI suites.

Features:
    - chromium / chrome / edge / firefox / webkit selection
    - Turkish locale, timezone and Accept-Language for every context
    - Automation-detection flags disabled for Chromium
    - Context isolation per test
    - Configuration-driven presets (config/config.yaml "browser" section)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
)

from trendyol_tools.common import ConfigLoader

from .exceptions import BrowserSetupError
from .timeouts import to_ms


# Browser name -> (Playwright engine, Chromium channel)
BROWSER_ALIASES: Dict[str, Tuple[str, Optional[str]]] = {
    "chromium": ("chromium", None),
    "chrome": ("chromium", "chrome"),
    "edge": ("chromium", "msedge"),
    "msedge": ("chromium", "msedge"),
    "firefox": ("firefox", None),
    "webkit": ("webkit", None),
    "safari": ("webkit", None),
}

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def resolve_browser(name: str) -> Tuple[str, Optional[str]]:
    """
    Map a configured browser name to a Playwright engine and channel.

    Raises:
        BrowserSetupError: For an unsupported browser name
    """
    try:
        return BROWSER_ALIASES[name.strip().lower()]
    except KeyError:
        raise BrowserSetupError(
            f"Unsupported browser '{name}'. "
            f"Choose one of: {', '.join(sorted(BROWSER_ALIASES))}"
        ) from None


class BrowserManager:
    """
    Manages the browser instance and contexts for UI testing.

    Usage:
        async with BrowserManager(browser_name="chrome", headless=False) as manager:
            page = await manager.new_page()
            await page.goto("https://www.trendyol.com/")

        # Or from configuration (BROWSER_NAME / BROWSER_HEADLESS env overrides)
        async with BrowserManager.from_config() as manager:
            ...
    """

    # Chromium flags
    CHROMIUM_ARGS: List[str] = [
        "--disable-dev-shm-usage",
        "--no-sandbox",
        "--disable-gpu",
        "--disable-extensions",
        "--disable-notifications",
        "--disable-blink-features=AutomationControlled",
        "--lang=tr-TR",
    ]

    # Default context options
    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "locale": "tr-TR",
        "timezone_id": "Europe/Istanbul",
        "user_agent": DEFAULT_USER_AGENT,
        "extra_http_headers": {"Accept-Language": "tr-TR,tr;q=0.9"},
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        browser_name: str = "chromium",
        headless: bool = True,
        maximize: bool = False,
        viewport: Optional[Dict[str, int]] = None,
        locale: str = "tr-TR",
        timezone_id: str = "Europe/Istanbul",
        user_agent: str = DEFAULT_USER_AGENT,
        default_timeout: float = 10.0,
        navigation_timeout: float = 30.0,
    ):
        """
        Initialize browser manager.

        Args:
            browser_name: chromium, chrome, edge, firefox or webkit
            headless: Run browser in headless mode
            maximize: Start a headed Chromium window maximized instead of
                using a fixed viewport
            viewport: Window size; defaults to 1920x1080
            locale: Browser locale (drives Accept-Language and number formats)
            timezone_id: Browser timezone
            user_agent: User agent string for Chromium-based contexts
            default_timeout: Playwright action timeout in seconds
            navigation_timeout: Playwright navigation timeout in seconds
        """
        self.browser_name = browser_name
        self.engine, self.channel = resolve_browser(browser_name)
        self.headless = headless
        self.maximize = maximize
        self.viewport = viewport or dict(self.DEFAULT_CONTEXT_OPTIONS["viewport"])
        self.locale = locale
        self.timezone_id = timezone_id
        self.user_agent = user_agent
        self.default_timeout = default_timeout
        self.navigation_timeout = navigation_timeout

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    @classmethod
    def from_config(cls, config: Any = None) -> "BrowserManager":
        """
        Build a manager from the ``browser`` configuration section.

        CI mode (``execution.ci_mode``) always runs headless.
        """
        config = config or ConfigLoader()
        headless = bool(config.get("browser.headless", False))
        if config.get("execution.ci_mode", False):
            headless = True

        return cls(
            browser_name=config.get("browser.name", "chromium"),
            headless=headless,
            maximize=bool(config.get("browser.maximize", False)),
            viewport={
                "width": int(config.get("browser.window_width", 1920)),
                "height": int(config.get("browser.window_height", 1080)),
            },
            locale=config.get("browser.locale", "tr-TR"),
            timezone_id=config.get("browser.timezone", "Europe/Istanbul"),
            user_agent=config.get("browser.user_agent", DEFAULT_USER_AGENT),
            default_timeout=float(config.get("browser.default_timeout", 10)),
            navigation_timeout=float(config.get("browser.navigation_timeout", 30)),
        )

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def maximized(self) -> bool:
        """Maximizing only applies to a visible Chromium window."""
        return self.maximize and self.engine == "chromium" and not self.headless

    def launch_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``BrowserType.launch``."""
        options: Dict[str, Any] = {"headless": self.headless}
        if self.engine == "chromium":
            options["args"] = list(self.CHROMIUM_ARGS)
            options["ignore_default_args"] = ["--enable-automation"]
            if self.maximized:
                options["args"].append("--start-maximized")
            if self.channel:
                options["channel"] = self.channel
        elif self.engine == "firefox":
            options["firefox_user_prefs"] = {"intl.accept_languages": self.locale}
        return options

    def context_options(self, **overrides: Any) -> Dict[str, Any]:
        """Keyword arguments for ``Browser.new_context``."""
        options = {
            **self.DEFAULT_CONTEXT_OPTIONS,
            "viewport": dict(self.viewport),
            "locale": self.locale,
            "timezone_id": self.timezone_id,
            "extra_http_headers": {
                "Accept-Language": f"{self.locale},{self.locale.split('-')[0]};q=0.9"
            },
        }
        if self.engine == "chromium":
            options["user_agent"] = self.user_agent
        else:
            options.pop("user_agent", None)
        if self.maximized:
            # The window size drives the viewport
            options.pop("viewport")
            options["no_viewport"] = True
        options.update(overrides)
        return options

    async def start(self) -> None:
        """Launch the configured engine; a failed launch leaves nothing running."""
        self._playwright = await async_playwright().start()
        browser_launcher = getattr(self._playwright, self.engine)

        try:
            self._browser = await browser_launcher.launch(**self.launch_options())
        except PlaywrightError as e:
            await self._playwright.stop()
            self._playwright = None
            raise BrowserSetupError(
                f"Could not launch {self.browser_name}: {e}"
            ) from e

        logger.info(
            f"Browser started: {self.browser_name} "
            f"(engine={self.engine}, headless={self.headless})"
        )

    async def close(self) -> None:
        """Tear down contexts, browser and Playwright; safe to call twice."""
        while self._contexts:
            context = self._contexts.pop()
            try:
                await context.close()
            except PlaywrightError as e:
                logger.debug(f"Context already closed: {e}")

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    async def new_context(self, **options: Any) -> BrowserContext:
        """
        Open an isolated context (own cookies, storage and dismissed popups)
        with the Turkish locale, timezone and default timeouts applied.

        Args:
            **options: Context option overrides

        Returns:
            New BrowserContext with default timeouts applied
        """
        if not self._browser:
            raise BrowserSetupError("Browser not started. Call start() first.")

        context = await self._browser.new_context(**self.context_options(**options))
        context.set_default_timeout(to_ms(self.default_timeout))
        context.set_default_navigation_timeout(to_ms(self.navigation_timeout))
        self._contexts.append(context)

        return context

    async def new_page(
        self,
        context: Optional[BrowserContext] = None,
        **context_options: Any,
    ) -> Page:
        """Open a tab in ``context``, or in a fresh context built from ``context_options``."""
        context = context or await self.new_context(**context_options)
        return await context.new_page()

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser


__all__ = [
    "BrowserManager",
    "BROWSER_ALIASES",
    "resolve_browser",
]
