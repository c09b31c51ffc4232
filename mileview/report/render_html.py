"""Render aggregated milestones through the HTML page template."""

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import jinja2

from mileview.config import get_templates_dir
from mileview.errors import TemplateError
from mileview.github.models import AggregatedMilestone

TEMPLATE_NAME = "index.html"

LABEL_CLASSES = {
    "bug": "danger",
    "enhancement": "success",
}


def label_class(label: str) -> str:
    """Map an issue label to a visual class name."""
    return LABEL_CLASSES.get(label, "default")


def split(text: str, sep: str) -> List[str]:
    return text.split(sep)


def now() -> datetime:
    return datetime.now(timezone.utc)


class HtmlRenderer:
    """Renders the overview page from a template directory.

    The template is re-read whenever it changes on disk.
    """

    def __init__(self, templates_dir: Optional[Path] = None):
        self.templates_dir = Path(templates_dir) if templates_dir else get_templates_dir()
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(self.templates_dir)),
            autoescape=jinja2.select_autoescape(["html"]),
            undefined=jinja2.StrictUndefined,
            auto_reload=True,
        )
        self.env.globals.update(split=split, label_class=label_class, now=now)

    def render(self, repo: str, milestones: List[AggregatedMilestone]) -> bytes:
        """Render the page.

        Args:
            repo: Repository in format "owner/repo".
            milestones: Aggregated milestones in display order.

        Returns:
            UTF-8 encoded HTML.

        Raises:
            TemplateError: If the template is missing, malformed or fails while rendering.
        """
        try:
            template = self.env.get_template(TEMPLATE_NAME)
            html = template.render(repo=repo, milestones=milestones)
        except jinja2.TemplateError as e:
            raise TemplateError(f"template execution: {e}") from e
        except Exception as e:
            # Errors raised by expressions inside the template itself.
            raise TemplateError(f"template execution: {type(e).__name__}: {e}") from e
        return html.encode("utf-8")
