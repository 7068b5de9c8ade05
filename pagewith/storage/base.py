"""Abstract base class for compiled asset stores."""

import posixpath
from abc import ABC, abstractmethod
from typing import Iterator

from pagewith.exceptions import AssetNotFoundError

CHUNK_SIZE = 64 * 1024


def normalize_asset_path(path: str) -> str:
    """Normalize an asset path to a relative POSIX key.

    Leading slashes and ``.`` segments are dropped; paths escaping the store
    root are rejected.

    Args:
        path: Asset path as written by the bundler or requested over HTTP.

    Returns:
        Normalized relative key.

    Raises:
        AssetNotFoundError: If the path is empty or escapes the store root.
    """
    key = posixpath.normpath("/" + path.replace("\\", "/")).lstrip("/")
    if not key or key == "." or key.startswith(".."):
        raise AssetNotFoundError(path)
    return key


class AssetStore(ABC):
    """Abstract base class for asset stores.

    The bundler output target writes emitted files here; the ``/assets``
    route reads them back. Implementations must accept any path produced by
    :func:`normalize_asset_path`.

    Attributes:
        name: Unique name for this store backend.
    """

    name: str = "base"

    @abstractmethod
    def write(self, path: str, content: bytes) -> None:
        """Write a file, replacing any previous content.

        Args:
            path: Asset path relative to the store root.
            content: File contents.
        """
        ...

    @abstractmethod
    def read(self, path: str) -> bytes:
        """Read a whole file.

        Args:
            path: Asset path relative to the store root.

        Returns:
            File contents.

        Raises:
            AssetNotFoundError: If the file does not exist.
        """
        ...

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check whether a file exists."""
        ...

    @abstractmethod
    def open(self, path: str, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
        """Stream a file in chunks.

        Args:
            path: Asset path relative to the store root.
            chunk_size: Maximum size of each yielded chunk.

        Returns:
            Iterator over the file contents.

        Raises:
            AssetNotFoundError: If the file does not exist.
        """
        ...

    @abstractmethod
    def list(self) -> list[str]:
        """List all stored asset paths."""
        ...

    def cleanup(self) -> None:
        """Release storage the store created itself, dropping its files."""
