"""Request dependencies."""

from typing import TYPE_CHECKING

from fastapi import Request

if TYPE_CHECKING:
    from pagewith.server import PreviewServer


async def get_server(request: Request) -> "PreviewServer":
    """Get the preview server owning the app.

    Args:
        request: FastAPI request.

    Returns:
        Preview server instance.
    """
    return request.app.state.server
