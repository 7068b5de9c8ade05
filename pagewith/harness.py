"""A preview server and a browser, started and stopped together."""

import logging
from typing import Any, Optional

from pagewith.browser import BrowserHandle, create_browser
from pagewith.config import Settings, get_settings
from pagewith.log import setup_logging
from pagewith.page import Scenario, page_with
from pagewith.server import PreviewServer

logger = logging.getLogger(__name__)


class Harness:
    """Explicit session for browser tests.

    Usage:
        async with await Harness.start() as harness:
            scenario = await harness.page_with(example="tests/fixtures/hello.js")
            assert await scenario.page.text_content("#text") == "hello"
    """

    def __init__(self, server: PreviewServer, browser: BrowserHandle) -> None:
        self.server = server
        self.browser = browser

    @classmethod
    async def start(
        cls,
        settings: Optional[Settings] = None,
        browser_options: Optional[dict[str, Any]] = None,
        **server_options: Any,
    ) -> "Harness":
        """Start a listening server and launch a browser.

        Args:
            settings: Settings override.
            browser_options: Extra Playwright launch options.
            **server_options: Passed on to :class:`PreviewServer`.

        Returns:
            Started harness.
        """
        settings = settings or get_settings()
        if settings.debug:
            setup_logging(debug=True)

        server = PreviewServer(settings=settings, **server_options)
        await server.listen()
        try:
            browser = await create_browser(settings=settings, **(browser_options or {}))
        except Exception:
            await server.close()
            raise

        return cls(server, browser)

    async def page_with(self, example: Optional[str] = None, **options: Any) -> Scenario:
        """Open a preview page, see :func:`pagewith.page.page_with`."""
        return await page_with(self.server, self.browser, example, **options)

    async def close(self) -> None:
        try:
            await self.browser.cleanup()
        finally:
            if self.server.connection_info is not None:
                await self.server.close()

    async def __aenter__(self) -> "Harness":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
