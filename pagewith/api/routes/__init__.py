"""Built-in routes of the preview server."""

from pagewith.api.routes import assets, preview

__all__ = ["assets", "preview"]
