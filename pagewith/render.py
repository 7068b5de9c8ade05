"""HTML shell for preview pages."""

import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from pagewith.registry import PageOptions
from pagewith.utils.url import make_url

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "preview.html"
DEFAULT_TITLE = "Preview"
ASSETS_PATH = "/assets"


def load_markup(markup: Optional[str]) -> str:
    """Resolve the markup option.

    A readable file path yields the file's contents; anything else is used
    as literal HTML.
    """
    if not markup:
        return ""
    try:
        if os.path.isfile(markup):
            with open(markup, "r", encoding="utf-8") as f:
                return f.read()
    except (OSError, ValueError):
        logger.debug("markup is not a readable file, using it as literal HTML")
    return markup


class HtmlRenderer:
    """Renders the preview document for a set of compiled assets."""

    def __init__(self, templates_dir: Path = TEMPLATES_DIR, template_name: str = TEMPLATE_NAME) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
        )
        self.template_name = template_name

    def render(self, asset_files: Sequence[str], options: Optional[PageOptions] = None) -> str:
        """Render the HTML document.

        Args:
            asset_files: Emitted asset file names in compiler order.
            options: Presentation options.

        Returns:
            HTML string.
        """
        options = options or PageOptions()
        scripts = []
        stylesheets = []

        for filename in asset_files:
            url = make_url(f"{ASSETS_PATH}/{filename}")
            if filename.endswith(".css"):
                stylesheets.append(url)
            elif not filename.endswith(".map"):
                scripts.append(url)

        template = self.env.get_template(self.template_name)
        html = template.render(
            title=options.title or DEFAULT_TITLE,
            markup=load_markup(options.markup),
            scripts=scripts,
            stylesheets=stylesheets,
        )
        logger.debug("rendered html with %d scripts", len(scripts))
        return html
