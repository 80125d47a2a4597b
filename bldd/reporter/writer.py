"""Writes the requested report formats, each independently of the others."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

from bldd.config.settings import PdfConfig
from bldd.reporter.content import ReportContent
from bldd.reporter.pdf import render_pdf
from bldd.reporter.text import TextRenderer
from bldd.utils.atomic import AtomicWriteError, atomic_write_bytes, atomic_write_text
from bldd.utils.logging import get_logger
from bldd.utils.result import Err, Ok, OutputError, Result

logger = get_logger("reporter.writer")

EXTENSIONS = {
    "txt": "txt",
    "pdf": "pdf",
}


class ReportWriter:
    """
    Produces report files from one content snapshot.

    A failure in one format is returned as an OutputError and does not stop
    the remaining formats.
    """

    def __init__(
        self,
        output_base: str,
        pdf_config: Optional[PdfConfig] = None,
        text_renderer: Optional[TextRenderer] = None,
    ) -> None:
        """
        Initialize the writer.

        Args:
            output_base: File name without extension
            pdf_config: PDF page settings
            text_renderer: Text renderer (bundled template by default)
        """
        self.output_base = output_base
        self.pdf_config = pdf_config or PdfConfig()
        self.text_renderer = text_renderer or TextRenderer()

    def path_for(self, report_format: str) -> Path:
        return Path(f"{self.output_base}.{EXTENSIONS[report_format]}")

    def write(self, content: ReportContent, report_format: str) -> Result[Path, OutputError]:
        """
        Write one report format.

        Args:
            content: Report snapshot
            report_format: "txt" or "pdf"

        Returns:
            Ok(path written) or Err(OutputError)
        """
        writers: dict[str, Callable[[ReportContent, Path], None]] = {
            "txt": self._write_text,
            "pdf": self._write_pdf,
        }
        if report_format not in writers:
            return Err(OutputError(
                format=report_format,
                path=self.output_base,
                message="unsupported report format",
            ))

        path = self.path_for(report_format)
        try:
            writers[report_format](content, path)
        except AtomicWriteError as e:
            error = OutputError(
                format=report_format,
                path=str(path),
                message="cannot create output file",
                cause=e.__cause__ or e,
            )
            logger.error("report_failed", format=report_format, path=str(path), error=str(error))
            return Err(error)

        logger.info("report_written", format=report_format, path=str(path))
        return Ok(path)

    def write_all(
        self,
        content: ReportContent,
        formats: list[str],
    ) -> dict[str, Result[Path, OutputError]]:
        """
        Write every requested format.

        Args:
            content: Report snapshot
            formats: Formats in the order they should be produced

        Returns:
            Result per format
        """
        return {report_format: self.write(content, report_format) for report_format in formats}

    def _write_text(self, content: ReportContent, path: Path) -> None:
        # Paths that are not valid UTF-8 are written back as their original bytes
        atomic_write_text(path, self.text_renderer.render(content), errors="surrogateescape")

    def _write_pdf(self, content: ReportContent, path: Path) -> None:
        atomic_write_bytes(path, render_pdf(content, self.pdf_config))
