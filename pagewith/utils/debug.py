"""Pause a test to inspect its page."""

from playwright.async_api import Page

from pagewith.log import get_logger

log = get_logger("debug")

_PAUSE_NOTICE = """() => console.warn(
  '[pagewith] Stopped test execution!\\n' +
  'Call "window.resume()" on this page to continue running the test.'
)"""


async def debug(page: Page) -> None:
    """Block until ``window.resume()`` is called in the page.

    Meant for headed runs (``PAGEWITH_DEBUG=1``) where the page's devtools
    are at hand.
    """
    log.info("stopped test execution!")
    await page.evaluate(_PAUSE_NOTICE)
    await page.evaluate("() => new Promise((resolve) => { window.resume = resolve })")
    log.info("resumed test execution!")
