"""On-disk asset store, used when in-memory compilation is turned off."""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Iterator, Optional

from pagewith.exceptions import AssetNotFoundError
from pagewith.storage.base import CHUNK_SIZE, AssetStore, normalize_asset_path

logger = logging.getLogger(__name__)


class DirectoryAssetStore(AssetStore):
    """Writes emitted assets below a root directory.

    Attributes:
        root: Directory holding the assets.
        owns_root: Whether the store created ``root`` and removes it on cleanup.
    """

    name = "directory"

    def __init__(self, root: Optional[str | Path] = None) -> None:
        """Initialize the store.

        Args:
            root: Output directory. A fresh temporary directory is used when
                omitted, and removed again by :meth:`cleanup`.
        """
        self.owns_root = root is None
        if root is None:
            root = tempfile.mkdtemp(prefix="pagewith-")
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _resolve(self, path: str) -> Path:
        return self.root / normalize_asset_path(path)

    def write(self, path: str, content: bytes) -> None:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        logger.debug("wrote asset %s (%d bytes)", target, len(content))

    def read(self, path: str) -> bytes:
        target = self._resolve(path)
        if not target.is_file():
            raise AssetNotFoundError(path)
        return target.read_bytes()

    def exists(self, path: str) -> bool:
        try:
            return self._resolve(path).is_file()
        except AssetNotFoundError:
            return False

    def open(self, path: str, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
        target = self._resolve(path)
        if not target.is_file():
            raise AssetNotFoundError(path)

        def chunks() -> Iterator[bytes]:
            with open(target, "rb") as f:
                while True:
                    chunk = f.read(chunk_size)
                    if not chunk:
                        return
                    yield chunk

        return chunks()

    def list(self) -> list[str]:
        return sorted(
            p.relative_to(self.root).as_posix()
            for p in self.root.rglob("*")
            if p.is_file()
        )

    def cleanup(self) -> None:
        if not self.owns_root:
            return
        shutil.rmtree(self.root, ignore_errors=True)
        logger.debug("removed temporary output directory %s", self.root)
