"""
================================================================================
Popup Handler
================================================================================

Detects and dismisses the transient overlays Trendyol shows on first visit:

    - Gender selection modal (".gender-modal-section")
    - OneTrust cookie consent banner ("#onetrust-banner-sdk")

Overlays are optional: they appear late, only on some visits, and only once
per session. Handling is therefore best-effort; a failure is logged and never
fails the calling test.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Dict, Optional

import allure
from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from .element_actions import ElementActions
from .exceptions import UIAutomationError
from .timeouts import Timeouts
from .wait_strategy import WaitStrategy


class PopupHandler:
    """
    Dismisses storefront overlays that intercept clicks.

    Usage:
        popups = PopupHandler(page)
        await popups.handle_popups()          # one-off after navigation
        await popups.install_auto_dismiss()   # keep dismissing late overlays
    """

    GENDER_POPUP = ".gender-modal-section"
    GENDER_POPUP_CLOSE = ".modal-section-close"
    COOKIE_BANNER = "#onetrust-banner-sdk"
    COOKIE_ACCEPT_BUTTON = "#onetrust-accept-btn-handler"
    COOKIE_REJECT_BUTTON = "#onetrust-reject-all-handler"

    def __init__(
        self,
        page: Page,
        waits: Optional[WaitStrategy] = None,
        actions: Optional[ElementActions] = None,
        timeouts: Optional[Timeouts] = None,
    ):
        self.page = page
        self.timeouts = timeouts or (waits.timeouts if waits else Timeouts())
        self.waits = waits or WaitStrategy(page, self.timeouts)
        self.actions = actions or ElementActions(page, self.waits, self.timeouts)

    @allure.step("Handle popups")
    async def handle_popups(self) -> Dict[str, bool]:
        """
        Dismiss the gender modal, then accept the cookie banner.

        Returns:
            Which overlays were dismissed, keyed by overlay name
        """
        results = {
            "gender_popup": await self.close_gender_popup(),
            "cookie_banner": await self.accept_cookies(),
        }
        logger.info(f"Popups handled: {results}")
        return results

    async def close_gender_popup(self) -> bool:
        return await self._dismiss(
            "Gender popup",
            self.GENDER_POPUP,
            self.GENDER_POPUP_CLOSE,
            self.timeouts.modal_appear,
        )

    async def accept_cookies(self) -> bool:
        return await self._dismiss(
            "Cookie banner",
            self.COOKIE_BANNER,
            self.COOKIE_ACCEPT_BUTTON,
            self.timeouts.promo_overlay,
        )

    async def reject_cookies(self) -> bool:
        return await self._dismiss(
            "Cookie banner",
            self.COOKIE_BANNER,
            self.COOKIE_REJECT_BUTTON,
            self.timeouts.promo_overlay,
        )

    async def is_overlay_present(self) -> bool:
        """True if any known overlay is currently visible."""
        for selector in (self.GENDER_POPUP, self.COOKIE_BANNER):
            if await self.actions.is_displayed(self.page.locator(selector).first):
                return True
        return False

    async def install_auto_dismiss(self) -> None:
        """
        Register Playwright locator handlers for both overlays.

        Playwright runs a handler whenever the overlay blocks an action,
        which covers overlays that show up long after page load.
        """
        gender_close = self.page.locator(self.GENDER_POPUP_CLOSE).first
        cookie_accept = self.page.locator(self.COOKIE_ACCEPT_BUTTON).first

        async def close_gender(overlay: Locator) -> None:
            logger.info("Auto-dismissing gender popup")
            await gender_close.click()

        async def accept_cookie_banner(overlay: Locator) -> None:
            logger.info("Auto-accepting cookie banner")
            await cookie_accept.click()

        await self.page.add_locator_handler(
            self.page.locator(self.GENDER_POPUP), close_gender
        )
        await self.page.add_locator_handler(
            self.page.locator(self.COOKIE_BANNER), accept_cookie_banner
        )
        logger.debug("Overlay auto-dismiss handlers installed")

    async def _dismiss(
        self,
        name: str,
        container_selector: str,
        button_selector: str,
        appear_timeout: float,
    ) -> bool:
        overlay = self.page.locator(container_selector).first

        if not await self.waits.appears(overlay, appear_timeout):
            logger.debug(f"{name} not displayed")
            return False

        try:
            await self.actions.safe_click(
                self.page.locator(button_selector).first,
                description=f"{name} dismiss button",
            )
            hidden = await self.waits.for_invisible(overlay)
        except (PlaywrightError, UIAutomationError) as e:
            logger.warning(f"⚠️ Could not dismiss {name}: {e}")
            return False

        if hidden:
            logger.info(f"✅ {name} dismissed")
        return hidden


__all__ = [
    "PopupHandler",
]
