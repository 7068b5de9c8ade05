"""Content type detection and the content base middleware."""

import mimetypes

from fastapi import Request
from starlette.exceptions import HTTPException


def guess_media_type(filename: str) -> str:
    """Get the media type for a file name, as Starlette's ``FileResponse`` does."""
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


async def serve_content_base(request: Request, call_next):
    """Serve files from the server's content base before any route.

    Directories resolve to their ``index.html``. Requests that do not match
    a file fall through to the router.
    """
    static_files = request.app.state.server.static_files

    if static_files is not None and request.method in ("GET", "HEAD"):
        try:
            return await static_files.get_response(static_files.get_path(request.scope), request.scope)
        except HTTPException as e:
            if e.status_code != 404:
                raise

    return await call_next(request)
