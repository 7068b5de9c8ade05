"""FastAPI application factory."""

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pagewith import __version__
from pagewith.api.router import create_router
from pagewith.api.static import serve_content_base
from pagewith.exceptions import PageWithException

if TYPE_CHECKING:
    from pagewith.server import PreviewServer

logger = logging.getLogger(__name__)


def create_app(server: "PreviewServer") -> FastAPI:
    """Create the application serving one preview server.

    Args:
        server: Preview server owning the cache, registry and asset store.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="pagewith preview server",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.server = server

    # Add exception handlers
    @app.exception_handler(PageWithException)
    async def preview_error_handler(
        request: Request,
        exc: PageWithException,
    ) -> JSONResponse:
        """Handle preview server errors.

        Args:
            request: FastAPI request.
            exc: Preview server error.

        Returns:
            JSON error response.
        """
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.middleware("http")(serve_content_base)

    app.include_router(create_router())

    return app
