"""Compiled asset routes."""

import logging
from typing import Iterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from pagewith.api.deps import get_server
from pagewith.api.static import guess_media_type
from pagewith.exceptions import AssetNotFoundError, AssetStreamError

logger = logging.getLogger(__name__)

router = APIRouter()


def _stream(path: str, first: bytes, rest: Iterator[bytes]) -> Iterator[bytes]:
    yield first
    try:
        yield from rest
    except Exception:
        logger.exception("error while reading %s from the asset store", path)
        raise
    logger.debug("successfully read the file %s", path)


@router.get("/assets/{path:path}")
async def serve_asset(path: str, server=Depends(get_server)) -> StreamingResponse:
    """Stream a compiled asset from the asset store.

    The first chunk is read before the response starts, so a store that
    cannot be read yields a 500 instead of a truncated 200.

    Args:
        path: Asset path below ``/assets``.
        server: Preview server.

    Returns:
        Streaming response with the asset bytes.
    """
    logger.debug('reading file "%s"...', path)
    store = server.store

    if not store.exists(path):
        logger.debug('asset "%s" not found', path)
        raise AssetNotFoundError(path)

    try:
        chunks = store.open(path)
        first = next(chunks, b"")
    except AssetNotFoundError:
        raise
    except Exception as e:
        raise AssetStreamError(path, str(e)) from e

    return StreamingResponse(_stream(path, first, chunks), media_type=guess_media_type(path))
