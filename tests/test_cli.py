"""Tests for the command line interface."""

from pathlib import Path

import pytest

from pagewith.__main__ import main


def test_no_command_prints_help(capsys) -> None:
    assert main([]) == 0
    assert "preview" in capsys.readouterr().out


def test_preview_requires_entry() -> None:
    with pytest.raises(SystemExit):
        main(["preview"])


def test_preview_missing_entry(tmp_path: Path) -> None:
    """Test a missing entry module exits with an error code.

    Args:
        tmp_path: Temporary directory.
    """
    code = main([
        "preview",
        str(tmp_path / "missing.js"),
        "--bundler", "passthrough",
        "--host", "127.0.0.1",
    ])

    assert code == 1


def test_preview_rejects_unknown_bundler(fixtures_dir: Path) -> None:
    with pytest.raises(SystemExit):
        main(["preview", str(fixtures_dir / "hello.js"), "--bundler", "webpack"])
