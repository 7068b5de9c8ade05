"""Preview page routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from pagewith.api.deps import get_server
from pagewith.registry import PageOptions

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/preview/{page_id}", response_class=HTMLResponse)
async def preview_page(page_id: str, server=Depends(get_server)) -> HTMLResponse:
    """Render a registered preview page.

    Compiles the page's entry module (or reuses the cached build) and
    renders the HTML shell referencing the emitted assets.

    Args:
        page_id: Id issued by the page registry.
        server: Preview server.

    Returns:
        HTML document.
    """
    logger.debug("[get] /preview/%s", page_id)
    context = server.registry.resolve_page(page_id)

    asset_files: list[str] = []
    if context.entry_path is not None:
        asset_files = await server.compile(context.entry_path)

    return HTMLResponse(server.renderer.render(asset_files, context.options))


@router.get("/preview", response_class=HTMLResponse)
async def preview_entry(
    entry: Optional[str] = None,
    title: Optional[str] = None,
    server=Depends(get_server),
) -> HTMLResponse:
    """Render an ad hoc preview for an entry path given as a query parameter."""
    logger.debug("[get] /preview?entry=%s", entry)

    asset_files: list[str] = []
    if entry:
        asset_files = await server.compile(entry)

    return HTMLResponse(server.renderer.render(asset_files, PageOptions(title=title)))
