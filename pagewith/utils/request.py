"""Issue HTTP requests from within a preview page."""

import uuid
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Protocol

from playwright.async_api import Page, Response

from pagewith.utils.url import is_absolute_url, make_url

if TYPE_CHECKING:
    from pagewith.server import PreviewServer

# Carries the request id so the matching response can be told apart.
IDENTITY_HEADER = "accept-language"

ResponsePredicate = Callable[[Response, str], bool]


class RequestHelper(Protocol):
    def __call__(
        self,
        url: str,
        init: Optional[dict[str, Any]] = None,
        predicate: Optional[ResponsePredicate] = None,
    ) -> Awaitable[Response]: ...


def create_request_util(page: Page, server: "PreviewServer") -> RequestHelper:
    """Create a ``request(url, init, predicate)`` helper bound to a page.

    The helper runs ``fetch(url, init)`` inside the page, so the request
    carries the page's origin and cookies, and resolves with the Playwright
    response. Relative URLs resolve against the preview server.

    Args:
        page: Page to issue requests from.
        server: Preview server relative URLs point at.

    Returns:
        Request helper.
    """

    async def request(
        url: str,
        init: Optional[dict[str, Any]] = None,
        predicate: Optional[ResponsePredicate] = None,
    ) -> Response:
        request_id = uuid.uuid4().hex
        resolved_url = url if is_absolute_url(url) else make_url("/" + url.lstrip("/"), server.url)

        fetch_options = dict(init or {})
        headers = {k.lower(): v for k, v in dict(fetch_options.get("headers") or {}).items()}
        headers[IDENTITY_HEADER] = request_id
        fetch_options["headers"] = headers

        def matches(response: Response) -> bool:
            if predicate is not None:
                return predicate(response, resolved_url)
            return response.request.headers.get(IDENTITY_HEADER) == request_id

        async with page.expect_response(matches) as response_info:
            await page.evaluate(
                "([url, init]) => { fetch(url, init) }",
                [resolved_url, fetch_options],
            )
        return await response_info.value

    return request
