"""Paginated PDF report.

Layout and drawing are separate steps: `PdfLayout` turns report content
into pages of positioned text, `render_pdf` draws those pages with
reportlab. The layout can therefore be checked without reading a PDF back.
"""

from __future__ import annotations

import io
import os
from dataclasses import dataclass, field
from typing import Optional

from reportlab.lib.pagesizes import A4, letter
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from bldd.config.settings import PdfConfig
from bldd.reporter.content import EXEC_MARKER, ReportContent
from bldd.utils.logging import get_logger

logger = get_logger("reporter.pdf")

PAGE_SIZES = {
    "A4": A4,
    "letter": letter,
}

REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"

TITLE_SIZE = 16
ARCH_SIZE = 14
LIB_SIZE = 12
EXEC_SIZE = 10

# Vertical advance after each kind of line
TITLE_ADVANCE = 30
ARCH_ADVANCE = 20
LIB_ADVANCE = 15
EXEC_ADVANCE = 12
LIBRARY_GAP = 10

# Space that must remain below a header before a page break
HEADER_BAND = 50

MARKER_INDENT = 10
PATH_INDENT = 30
ELLIPSIS = "..."


@dataclass(frozen=True)
class TextOp:
    """A single string drawn at a fixed position."""

    text: str
    x: float
    y: float
    font: str
    size: int


@dataclass
class Page:
    """Text operations of one page, in drawing order."""

    ops: list[TextOp] = field(default_factory=list)

    def texts(self) -> list[str]:
        return [op.text for op in self.ops]


def abbreviate_path(path: str) -> str:
    """Replace everything before the last path segment with an ellipsis."""
    return f"{ELLIPSIS}/{os.path.basename(path.rstrip('/')) or path}"


class PdfLayout:
    """Places report lines on fixed-size pages."""

    def __init__(self, config: Optional[PdfConfig] = None) -> None:
        """
        Initialize the layout.

        Args:
            config: Page size and margin (defaults to PdfConfig())
        """
        config = config or PdfConfig()
        self.page_width, self.page_height = PAGE_SIZES[config.page_size]
        self.margin = config.margin

        self.pages: list[Page] = []
        self._y = 0.0

    @property
    def max_path_width(self) -> float:
        """Widest executable path drawn in full."""
        return self.page_width - self.margin * 2 - 20

    def layout(self, content: ReportContent) -> list[Page]:
        """
        Lay out the whole report.

        Args:
            content: Report snapshot

        Returns:
            Pages in order; there is always at least one
        """
        self.pages = []
        self._new_page()

        self._emit(content.title, self.margin, BOLD_FONT, TITLE_SIZE)
        self._y -= TITLE_ADVANCE

        for arch in content.architectures:
            self._reserve(self.margin + HEADER_BAND)
            self._emit(arch.header, self.margin, BOLD_FONT, ARCH_SIZE)
            self._y -= ARCH_ADVANCE

            for lib in arch.libraries:
                self._reserve(self.margin + HEADER_BAND)
                self._emit(lib.header, self.margin, BOLD_FONT, LIB_SIZE)
                self._y -= LIB_ADVANCE

                for path in lib.executables:
                    self._reserve(self.margin)
                    self._emit(f"{EXEC_MARKER} ", self.margin + MARKER_INDENT, REGULAR_FONT, EXEC_SIZE)
                    self._emit(self._fit_path(path), self.margin + PATH_INDENT, REGULAR_FONT, EXEC_SIZE)
                    self._y -= EXEC_ADVANCE

                self._y -= LIBRARY_GAP

        return self.pages

    def _fit_path(self, path: str) -> str:
        if stringWidth(path, REGULAR_FONT, EXEC_SIZE) > self.max_path_width:
            return abbreviate_path(path)
        return path

    def _reserve(self, floor: float) -> None:
        if self._y < floor:
            self._new_page()

    def _new_page(self) -> None:
        self.pages.append(Page())
        self._y = self.page_height - self.margin

    def _emit(self, text: str, x: float, font: str, size: int) -> None:
        self.pages[-1].ops.append(TextOp(text=text, x=x, y=self._y, font=font, size=size))


def render_pdf(content: ReportContent, config: Optional[PdfConfig] = None) -> bytes:
    """
    Produce the PDF document for the report.

    Args:
        content: Report snapshot
        config: Page size and margin

    Returns:
        PDF file content
    """
    config = config or PdfConfig()
    pages = PdfLayout(config).layout(content)

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=PAGE_SIZES[config.page_size])
    pdf.setTitle(content.title)

    for page in pages:
        for op in page.ops:
            pdf.setFont(op.font, op.size)
            pdf.drawString(op.x, op.y, op.text)
        pdf.showPage()

    pdf.save()
    logger.debug("pdf_rendered", pages=len(pages))
    return buffer.getvalue()
