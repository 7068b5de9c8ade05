"""Registry of preview pages."""

import logging
import os
import uuid
from dataclasses import dataclass, field
from typing import Optional

from pagewith.exceptions import PageNotFoundError
from pagewith.utils.url import make_url

logger = logging.getLogger(__name__)

PREVIEW_PATH = "/preview"


@dataclass(frozen=True)
class PageOptions:
    """Presentation options of a preview page.

    Attributes:
        title: Document title. The renderer falls back to "Preview".
        markup: Literal HTML, or a path to a file holding the markup.
    """

    title: Optional[str] = None
    markup: Optional[str] = None


@dataclass(frozen=True)
class PageContext:
    """Everything needed to render one preview page.

    Attributes:
        page_id: Opaque unique identifier.
        entry_path: Absolute entry module path, or None for a page without
            compiled assets.
        options: Presentation options.
    """

    page_id: str
    entry_path: Optional[str]
    options: PageOptions = field(default_factory=PageOptions)


@dataclass(frozen=True)
class PageHandle:
    """What the caller gets back for a registered page."""

    page_id: str
    url: str


class PageRegistry:
    """Assigns ids to preview requests and remembers what they render.

    Attributes:
        base_url: Server URL preview URLs are built on. Empty while the
            server is not listening, which yields relative URLs.
    """

    def __init__(self, base_url: str = "") -> None:
        self.base_url = base_url
        self._pages: dict[str, PageContext] = {}

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, page_id: str) -> bool:
        return page_id in self._pages

    def create_page(
        self,
        entry_path: Optional[str | os.PathLike],
        options: Optional[PageOptions] = None,
    ) -> PageHandle:
        """Register a preview page.

        Args:
            entry_path: Entry module to compile for the page.
            options: Presentation options.

        Returns:
            Handle with the page id and its preview URL.
        """
        page_id = uuid.uuid4().hex
        if entry_path is not None:
            entry_path = os.path.abspath(os.fspath(entry_path))

        self._pages[page_id] = PageContext(
            page_id=page_id,
            entry_path=entry_path,
            options=options or PageOptions(),
        )
        url = self.url_for(page_id)
        logger.debug("registered page %s for %s", page_id, entry_path)
        return PageHandle(page_id=page_id, url=url)

    def resolve_page(self, page_id: str) -> PageContext:
        """Look up a registered page.

        Raises:
            PageNotFoundError: If the id is unknown.
        """
        try:
            return self._pages[page_id]
        except KeyError:
            raise PageNotFoundError(page_id) from None

    def remove_page(self, page_id: str) -> bool:
        """Forget a page. Returns False if it was not registered."""
        removed = self._pages.pop(page_id, None) is not None
        if removed:
            logger.debug("removed page %s", page_id)
        return removed

    def url_for(self, page_id: str) -> str:
        return make_url(f"{PREVIEW_PATH}/{page_id}", self.base_url)
