"""Tests for the compilation cache."""

import os
from pathlib import Path

import pytest

from pagewith.cache import CacheEntry, CompilationCache, Stale, stat_mtime
from pagewith.exceptions import EntryNotFoundError


def touch(path: Path, offset_ns: int = 1_000_000_000) -> None:
    """Move a file's modification time without changing its contents."""
    stats = os.stat(path)
    os.utime(path, ns=(stats.st_atime_ns, stats.st_mtime_ns + offset_ns))


class TestCompilationCache:
    """Tests for CompilationCache."""

    def test_miss_marks_stale(self, example: Path) -> None:
        """Test an unknown entry yields a Stale marker.

        Args:
            example: Example module.
        """
        cache = CompilationCache()
        result = cache.lookup_or_mark_stale(example)

        assert isinstance(result, Stale)
        assert result.entry_path == str(example)
        assert result.last_modified == os.stat(example).st_mtime_ns

    def test_hit_after_store(self, example: Path) -> None:
        """Test a stored build is returned while the file is unchanged.

        Args:
            example: Example module.
        """
        cache = CompilationCache()
        stale = cache.lookup_or_mark_stale(example)
        cache.store(stale.entry_path, stale.last_modified, ["main.abc.js"])

        result = cache.lookup_or_mark_stale(example)

        assert isinstance(result, CacheEntry)
        assert result.asset_files == ("main.abc.js",)

    def test_touch_invalidates(self, example: Path) -> None:
        """Test touching without editing invalidates the entry.

        Args:
            example: Example module.
        """
        cache = CompilationCache()
        stale = cache.lookup_or_mark_stale(example)
        cache.store(stale.entry_path, stale.last_modified, ["main.abc.js"])

        touch(example)
        result = cache.lookup_or_mark_stale(example)

        assert isinstance(result, Stale)
        assert result.last_modified != stale.last_modified

    def test_older_timestamp_also_invalidates(self, example: Path) -> None:
        """Test the timestamp comparison is exact, not "not older than".

        Args:
            example: Example module.
        """
        cache = CompilationCache()
        stale = cache.lookup_or_mark_stale(example)
        cache.store(stale.entry_path, stale.last_modified, ["main.abc.js"])

        touch(example, offset_ns=-1_000_000_000)

        assert isinstance(cache.lookup_or_mark_stale(example), Stale)

    def test_store_overwrites(self, example: Path) -> None:
        """Test recompilation replaces the previous asset list.

        Args:
            example: Example module.
        """
        cache = CompilationCache()
        stale = cache.lookup_or_mark_stale(example)
        cache.store(example, stale.last_modified, ["main.old.js", "main.old.css"])
        cache.store(example, stale.last_modified, ["main.new.js"])

        result = cache.lookup_or_mark_stale(example)

        assert result.asset_files == ("main.new.js",)
        assert len(cache) == 1

    def test_relative_paths_share_entry(self, example: Path, monkeypatch) -> None:
        """Test relative and absolute paths resolve to the same entry.

        Args:
            example: Example module.
            monkeypatch: Pytest monkeypatch fixture.
        """
        monkeypatch.chdir(example.parent)
        cache = CompilationCache()
        stale = cache.lookup_or_mark_stale("hello.js")
        cache.store(stale.entry_path, stale.last_modified, ["main.abc.js"])

        assert str(example) in cache
        assert isinstance(cache.lookup_or_mark_stale(example), CacheEntry)

    def test_missing_entry(self, tmp_path: Path) -> None:
        """Test a missing file fails with EntryNotFoundError.

        Args:
            tmp_path: Temporary directory.
        """
        cache = CompilationCache()
        with pytest.raises(EntryNotFoundError) as exc_info:
            cache.lookup_or_mark_stale(tmp_path / "missing.js")

        assert exc_info.value.status_code == 404

    def test_directory_is_not_an_entry(self, tmp_path: Path) -> None:
        with pytest.raises(EntryNotFoundError):
            stat_mtime(str(tmp_path))

    def test_clear(self, example: Path) -> None:
        cache = CompilationCache()
        stale = cache.lookup_or_mark_stale(example)
        cache.store(example, stale.last_modified, ["main.abc.js"])
        cache.clear()

        assert len(cache) == 0
        assert isinstance(cache.lookup_or_mark_stale(example), Stale)
