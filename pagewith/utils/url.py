"""URL helpers."""

import re

_DUPLICATE_SLASHES = re.compile(r"(?<!:)/{2,}")


def make_url(path: str, base: str | None = None) -> str:
    """Join a path onto a base URL, collapsing duplicate slashes.

    >>> make_url("/preview/abc", "http://127.0.0.1:4000/")
    'http://127.0.0.1:4000/preview/abc'
    """
    return _DUPLICATE_SLASHES.sub("/", (base or "") + path)


def is_absolute_url(url: str) -> bool:
    return re.match(r"^[a-zA-Z][a-zA-Z0-9+.-]*://", url) is not None
