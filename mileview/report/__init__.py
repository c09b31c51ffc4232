"""HTML rendering of the milestone overview."""

from mileview.report.render_html import HtmlRenderer, label_class

__all__ = ["HtmlRenderer", "label_class"]
