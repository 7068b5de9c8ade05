"""Browser launching via Playwright."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from playwright.async_api import Browser, Playwright, async_playwright

from pagewith.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class BrowserHandle:
    """A launched browser and the Playwright driver behind it."""

    playwright: Playwright
    browser: Browser
    browser_type: str = "chromium"

    async def new_context(self, **options: Any):
        return await self.browser.new_context(**options)

    async def cleanup(self) -> None:
        """Close the browser and stop Playwright."""
        try:
            if self.browser.is_connected():
                await self.browser.close()
        finally:
            await self.playwright.stop()
        logger.debug("closed %s", self.browser_type)


async def create_browser(
    browser_type: Optional[str] = None,
    settings: Optional[Settings] = None,
    **launch_options: Any,
) -> BrowserHandle:
    """Launch a browser for preview pages.

    The browser runs headless unless debug mode is on. Chromium is started
    with ``--no-sandbox`` so it also runs inside containers.

    Args:
        browser_type: ``chromium``, ``firefox`` or ``webkit`` (settings default).
        settings: Settings override.
        **launch_options: Extra Playwright launch options, taking precedence.

    Returns:
        Handle owning the browser.
    """
    settings = settings or get_settings()
    browser_type = browser_type or settings.browser_type

    playwright = await async_playwright().start()

    # Dynamic browser launch based on type
    browser_launchers = {
        "chromium": playwright.chromium,
        "firefox": playwright.firefox,
        "webkit": playwright.webkit,
    }
    launcher = browser_launchers.get(browser_type, playwright.chromium)

    options: dict[str, Any] = {"headless": settings.is_headless}
    if launcher is playwright.chromium:
        options["args"] = ["--no-sandbox"]
    options.update(launch_options)

    try:
        browser = await launcher.launch(**options)
    except Exception:
        await playwright.stop()
        raise

    logger.debug("launched %s (headless=%s)", browser_type, options["headless"])
    return BrowserHandle(playwright=playwright, browser=browser, browser_type=browser_type)
