"""In-memory asset store."""

import io
import logging
from typing import Iterator

from pagewith.exceptions import AssetNotFoundError
from pagewith.storage.base import CHUNK_SIZE, AssetStore, normalize_asset_path

logger = logging.getLogger(__name__)


class MemoryAssetStore(AssetStore):
    """Keeps emitted assets in a dict, nothing touches the disk."""

    name = "memory"

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}

    def write(self, path: str, content: bytes) -> None:
        key = normalize_asset_path(path)
        self._files[key] = bytes(content)
        logger.debug("wrote asset %s (%d bytes)", key, len(content))

    def read(self, path: str) -> bytes:
        key = normalize_asset_path(path)
        try:
            return self._files[key]
        except KeyError:
            raise AssetNotFoundError(path) from None

    def exists(self, path: str) -> bool:
        try:
            return normalize_asset_path(path) in self._files
        except AssetNotFoundError:
            return False

    def open(self, path: str, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
        buffer = io.BytesIO(self.read(path))

        def chunks() -> Iterator[bytes]:
            while True:
                chunk = buffer.read(chunk_size)
                if not chunk:
                    return
                yield chunk

        return chunks()

    def list(self) -> list[str]:
        return sorted(self._files)

    def cleanup(self) -> None:
        self._files.clear()
