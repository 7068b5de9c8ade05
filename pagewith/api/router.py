"""Main router configuration."""

from fastapi import APIRouter

from pagewith.api.routes import assets, preview


def create_router() -> APIRouter:
    """Create the router with the built-in routes.

    Returns:
        Configured APIRouter.
    """
    router = APIRouter()
    router.include_router(assets.router, tags=["assets"])
    router.include_router(preview.router, tags=["preview"])
    return router
