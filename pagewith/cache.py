"""Compilation cache keyed by entry module modification time."""

import logging
import os
from dataclasses import dataclass
from typing import Union

from pagewith.exceptions import EntryNotFoundError

logger = logging.getLogger(__name__)


def to_absolute_path(path: str | os.PathLike) -> str:
    """Resolve a path against the current working directory."""
    return os.path.abspath(os.fspath(path))


def stat_mtime(entry_path: str) -> int:
    """Read a file's modification time in nanoseconds.

    Raises:
        EntryNotFoundError: If the file does not exist.
    """
    try:
        stats = os.stat(entry_path)
    except FileNotFoundError:
        raise EntryNotFoundError(entry_path) from None
    if not os.path.isfile(entry_path):
        raise EntryNotFoundError(entry_path)
    return stats.st_mtime_ns


@dataclass(frozen=True)
class CacheEntry:
    """Output of the last successful compilation of an entry module.

    Attributes:
        entry_path: Absolute path of the entry module.
        last_modified: Entry modification time (ns) the build was made from.
        asset_files: Emitted file names in compiler order.
    """

    entry_path: str
    last_modified: int
    asset_files: tuple[str, ...]


@dataclass(frozen=True)
class Stale:
    """Cache miss marker carrying the timestamp to store the new build under."""

    entry_path: str
    last_modified: int


class CompilationCache:
    """Maps absolute entry paths to their most recent build output.

    An entry is only returned while the source file's modification time is
    exactly the one it was stored with. Touching a file without editing it
    is enough to invalidate its entry.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_path: str) -> bool:
        return to_absolute_path(entry_path) in self._entries

    def lookup_or_mark_stale(self, entry_path: str | os.PathLike) -> Union[CacheEntry, Stale]:
        """Look up a cached build for an entry module.

        Args:
            entry_path: Entry module path, absolute or relative to the CWD.

        Returns:
            The cached entry on a hit, otherwise a ``Stale`` marker with the
            current modification time.

        Raises:
            EntryNotFoundError: If the entry module does not exist.
        """
        absolute_path = to_absolute_path(entry_path)
        last_modified = stat_mtime(absolute_path)

        logger.debug("looking up a cached compilation for %s", absolute_path)
        cached = self._entries.get(absolute_path)

        if cached is not None and cached.last_modified == last_modified:
            logger.debug("found a cached compilation (%d)", cached.last_modified)
            return cached

        return Stale(entry_path=absolute_path, last_modified=last_modified)

    def store(
        self,
        entry_path: str | os.PathLike,
        last_modified: int,
        asset_files: list[str] | tuple[str, ...],
    ) -> CacheEntry:
        """Store a build, overwriting any previous entry for the path."""
        absolute_path = to_absolute_path(entry_path)
        entry = CacheEntry(
            entry_path=absolute_path,
            last_modified=last_modified,
            asset_files=tuple(asset_files),
        )
        self._entries[absolute_path] = entry
        logger.debug(
            "caching the compilation of %s (%d, %d assets)",
            absolute_path,
            last_modified,
            len(entry.asset_files),
        )
        return entry

    def clear(self) -> None:
        self._entries.clear()
