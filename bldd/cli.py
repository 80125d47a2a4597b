"""CLI entry point for bldd."""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import NoReturn, Optional

import click

from bldd import __version__
from bldd.config.settings import REPORT_FORMATS, BlddConfig, load_config, resolve_formats
from bldd.pipeline.guards import check_output_name, check_scan_root
from bldd.probe import create_probe
from bldd.reporter import ReportWriter, build_report_content
from bldd.scanner import LibraryMatcher, Scanner
from bldd.utils.logging import (
    LOG_FORMATS,
    LOG_LEVELS,
    configure_logging,
    get_logger,
    log_stage_completed,
    set_stage,
    start_run,
)
from bldd.utils.result import ExitCode

DEFAULT_OUTPUT = "bldd_report"

EPILOG = """\b
Examples:
  bldd --lib libc.so.6 --dir /usr/bin --format txt
  bldd --lib libpthread.so --lib libm.so --dir /usr/local/bin
  bldd --lib libc.so.6 --dir /home --format pdf
"""

FORMAT_LABELS = {
    "txt": "Text",
    "pdf": "PDF",
}


def fail(message: str, code: int) -> NoReturn:
    """Report a fatal error and exit."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EPILOG,
)
@click.option(
    "-l",
    "--lib",
    "libs",
    multiple=True,
    required=True,
    metavar="LIB",
    help="Shared library to search for (can be specified multiple times)",
)
@click.option(
    "-d",
    "--dir",
    "scan_dir",
    required=True,
    metavar="DIR",
    help="Directory to scan for executables",
)
@click.option(
    "-f",
    "--format",
    "report_format",
    type=click.Choice(REPORT_FORMATS),
    default="txt",
    show_default=True,
    help="Output report format",
)
@click.option(
    "-o",
    "--output",
    default=DEFAULT_OUTPUT,
    show_default=True,
    metavar="FILENAME",
    help="Output file name without extension",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file",
)
@click.option(
    "--probe",
    type=click.Choice(["elftools", "readelf"]),
    default=None,
    help="ELF introspection backend (default from config: elftools)",
)
@click.option(
    "--log-level",
    type=click.Choice(list(LOG_LEVELS), case_sensitive=False),
    default=None,
    help="Logging level (default from config: info)",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS, case_sensitive=False),
    default=None,
    help="Log format (default from config: text)",
)
@click.version_option(version=__version__, prog_name="bldd")
def cli(
    libs: tuple[str, ...],
    scan_dir: str,
    report_format: str,
    output: str,
    config_path: Optional[Path],
    probe: Optional[str],
    log_level: Optional[str],
    log_format: Optional[str],
) -> None:
    """
    bldd (backward ldd) - Find executables that use specific shared libraries.

    Scans DIR recursively for ELF executables, keeps those whose dynamic
    section names one of the given libraries, and writes a report grouped
    by architecture and library.
    """
    config_result = load_config(config_path)
    if config_result.is_err():
        fail(str(config_result.unwrap_err()), ExitCode.CONFIG_ERROR)
    config: BlddConfig = config_result.unwrap()

    if probe:
        config.probe.backend = probe
    if log_level:
        config.logging.level = log_level
    if log_format:
        config.logging.format = log_format

    configure_logging(level=config.logging.level, format_type=config.logging.format)
    run_id = start_run()
    logger = get_logger("cli")
    logger.info("run_started", run_id=run_id, version=__version__)

    matcher_result = LibraryMatcher.from_terms(libs)
    if matcher_result.is_err():
        fail(matcher_result.unwrap_err().message, ExitCode.CONFIG_ERROR)
    matcher = matcher_result.unwrap()

    output_result = check_output_name(output)
    if output_result.is_err():
        fail(output_result.unwrap_err().message, ExitCode.CONFIG_ERROR)

    root_result = check_scan_root(scan_dir)
    if root_result.is_err():
        fail(str(root_result.unwrap_err()), root_result.unwrap_err().code)
    root = root_result.unwrap()

    click.echo(f"Scanning directory: {root}")
    click.echo(f"Looking for executables using: {' '.join(libs)}")

    scanner = Scanner(config, matcher, create_probe(config.probe))
    try:
        result = scanner.run(root)
    except KeyboardInterrupt:
        logger.warning("scan_interrupted")
        fail("Scan interrupted", ExitCode.INTERRUPTED)

    set_stage("report")
    started = time.monotonic()
    content = build_report_content(
        result.store,
        title=config.report.title,
        tie_break=config.report.tie_break,
    )
    writer = ReportWriter(output, pdf_config=config.pdf)
    outcomes = writer.write_all(content, resolve_formats(report_format))
    for report_format, outcome in outcomes.items():
        if outcome.is_ok():
            click.echo(f"{FORMAT_LABELS[report_format]} report saved to {outcome.unwrap()}")
        else:
            click.echo(f"Error: {outcome.unwrap_err()}", err=True)
    log_stage_completed(
        "report",
        time.monotonic() - started,
        written=sum(1 for outcome in outcomes.values() if outcome.is_ok()),
    )

    click.echo(result.summary())


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        args = ["--help"]
    try:
        cli.main(args=args, prog_name="bldd")
    except Exception as e:
        logger = get_logger("cli")
        logger.error("cli_error", error=str(e))
        sys.exit(ExitCode.GENERAL_ERROR)


if __name__ == "__main__":
    main()
