"""Plain-text report rendering."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from bldd.reporter.content import EXEC_MARKER, TITLE_RULE, ReportContent

TEMPLATES_DIR = Path(__file__).parent / "templates"
TEXT_TEMPLATE = "report.txt.j2"


class TextRenderer:
    """Renders report content through a Jinja2 text template."""

    def __init__(self, templates_dir: Optional[Path] = None) -> None:
        """
        Initialize the renderer.

        Args:
            templates_dir: Directory containing report.txt.j2
        """
        self.templates_dir = Path(templates_dir) if templates_dir else TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, content: ReportContent) -> str:
        """
        Render the report as text.

        Args:
            content: Report snapshot

        Returns:
            Report text, one executable per line
        """
        template = self.env.get_template(TEXT_TEMPLATE)
        return template.render(
            title=content.title,
            title_rule=TITLE_RULE,
            architectures=content.architectures,
            marker=EXEC_MARKER,
        )


def render_text(content: ReportContent) -> str:
    """Render with the bundled template."""
    return TextRenderer().render(content)
