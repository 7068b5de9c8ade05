"""Open preview pages in a browser."""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from playwright.async_api import Browser, BrowserContext, Page

from pagewith.browser import BrowserHandle
from pagewith.exceptions import NotRunningError
from pagewith.routes import RegisterFn
from pagewith.server import PreviewServer
from pagewith.utils.request import RequestHelper, create_request_util

logger = logging.getLogger(__name__)


@dataclass
class Scenario:
    """A preview page opened in its own browser context.

    Attributes:
        page: Playwright page showing the preview.
        context: Browser context the page lives in.
        origin: Preview URL the page was navigated to.
        page_id: Id of the page in the server's registry.
        request: Helper issuing ``fetch`` requests from the page.
    """

    page: Page
    context: BrowserContext
    origin: str
    page_id: str
    request: RequestHelper

    async def cleanup(self) -> None:
        """Close the browser context (and with it the page)."""
        await self.context.close()


async def page_with(
    server: PreviewServer,
    browser: BrowserHandle | Browser,
    example: Optional[str | os.PathLike] = None,
    markup: Optional[str | os.PathLike] = None,
    title: Optional[str] = None,
    routes: Optional[RegisterFn] = None,
    env: Optional[dict[str, Any]] = None,
    content_base: Optional[str | os.PathLike] = None,
    wait_until: Optional[str] = None,
) -> Scenario:
    """Open a new page with the given usage example.

    The example is compiled while the browser context is created. Routes
    registered through ``routes`` live until the page closes, as does the
    page's registry entry.

    Args:
        server: Listening preview server.
        browser: Browser to open the page in.
        example: Entry module of the usage example.
        markup: Literal HTML or a path to a markup file.
        title: Document title.
        routes: Registers extra routes on the server app.
        env: Values assigned onto ``window`` after navigation.
        content_base: Directory of static files the server should serve.
        wait_until: Navigation wait condition (settings default).

    Returns:
        The opened scenario.

    Raises:
        NotRunningError: If the server is not listening.
        EntryNotFoundError: If the example does not exist.
        CompilerInvocationError: If the bundler could not run.
        CompilationError: If the example failed to compile.
    """
    if server.url is None:
        raise NotRunningError("Failed to open a page: server is not running.")
    if isinstance(browser, BrowserHandle):
        browser = browser.browser

    logger.debug('loading example at "%s"', example)
    if content_base is not None:
        server.set_content_base(content_base)

    handle = server.create_page(example, title=title, markup=markup)
    remove_routes = server.use(routes) if routes is not None else None

    def release(_page: Optional[Page] = None) -> None:
        if remove_routes is not None:
            remove_routes()
        server.remove_page(handle.page_id)

    compilation = server.compile(example) if example is not None else asyncio.sleep(0)
    context, compiled = await asyncio.gather(
        browser.new_context(),
        compilation,
        return_exceptions=True,
    )

    if isinstance(context, BaseException) or isinstance(compiled, BaseException):
        release()
        if not isinstance(context, BaseException):
            await context.close()
        raise compiled if isinstance(compiled, BaseException) else context

    try:
        page = await context.new_page()
        page.on("close", release)

        logger.debug("compiled example running at %s", handle.url)
        await page.goto(handle.url, wait_until=wait_until or server.settings.wait_until)

        if env:
            await page.evaluate("(env) => { Object.assign(window, env) }", env)
    except Exception:
        logger.debug("failed to open %s, closing its browser context", handle.url)
        await context.close()
        release()
        raise

    return Scenario(
        page=page,
        context=context,
        origin=handle.url,
        page_id=handle.page_id,
        request=create_request_util(page, server),
    )
