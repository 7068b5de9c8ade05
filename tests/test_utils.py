"""Tests for URL and static file helpers."""

from pagewith.api.static import guess_media_type
from pagewith.exceptions import CompilationError, Diagnostic, EntryNotFoundError
from pagewith.utils.url import is_absolute_url, make_url


def test_make_url() -> None:
    assert make_url("/preview/abc", "http://127.0.0.1:4000/") == "http://127.0.0.1:4000/preview/abc"
    assert make_url("/assets//main.js") == "/assets/main.js"
    assert make_url("/user", None) == "/user"


def test_is_absolute_url() -> None:
    assert is_absolute_url("http://localhost:4000/user")
    assert not is_absolute_url("/user")


def test_guess_media_type() -> None:
    assert "javascript" in guess_media_type("main.abc.js")
    assert guess_media_type("main.css") == "text/css"
    assert guess_media_type("blob") == "application/octet-stream"


def test_error_bodies() -> None:
    error = EntryNotFoundError("/src/missing.js")

    assert error.to_dict() == {
        "error": "EntryNotFoundError",
        "message": 'Failed to load an entry module at "/src/missing.js": given file does not exist.',
    }

    compile_error = CompilationError("/src/a.js", [Diagnostic(message="boom", file="a.js", line=2, column=0)])
    assert compile_error.to_dict()["diagnostics"] == [
        {"message": "boom", "file": "a.js", "line": 2, "column": 0}
    ]
    assert "a.js:2:0: boom" in compile_error.message
