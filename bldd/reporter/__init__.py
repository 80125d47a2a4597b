"""Reporter module: report content assembly and rendering."""

from bldd.reporter.content import (
    ArchitectureSection,
    LibrarySection,
    ReportContent,
    build_report_content,
)
from bldd.reporter.pdf import PdfLayout, abbreviate_path, render_pdf
from bldd.reporter.text import TextRenderer, render_text
from bldd.reporter.writer import ReportWriter

__all__ = [
    # Content
    "ArchitectureSection",
    "LibrarySection",
    "ReportContent",
    "build_report_content",
    # Text
    "TextRenderer",
    "render_text",
    # PDF
    "PdfLayout",
    "abbreviate_path",
    "render_pdf",
    # Writer
    "ReportWriter",
]
