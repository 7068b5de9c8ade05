"""HTTP surface of the preview server."""

from pagewith.api.app import create_app

__all__ = ["create_app"]
