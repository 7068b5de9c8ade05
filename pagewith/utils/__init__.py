"""Helpers for URLs and Playwright pages.

The Playwright helpers live in their own modules (``request``, ``console``,
``debug``) so importing this package does not require a browser.
"""

from pagewith.utils.url import is_absolute_url, make_url

__all__ = ["is_absolute_url", "make_url"]
