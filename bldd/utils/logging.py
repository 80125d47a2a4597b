"""Structured logging for bldd runs.

Every event carries the id of the scan run and the stage it happened in
(setup, scan, report). Module loggers are lazy: they resolve the current
configuration on each call, so `--log-level` and `--log-format` also apply
to loggers created at import time.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Optional, TextIO

import structlog

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

LOG_FORMATS = ("text", "json")

run_id_var: ContextVar[str] = ContextVar("run_id", default="")
stage_var: ContextVar[str] = ContextVar("stage", default="")


def start_run(stage: str = "setup") -> str:
    """
    Open the logging context of a new scan run.

    Args:
        stage: Stage the run starts in

    Returns:
        Short run identifier attached to every following event
    """
    run_id = uuid.uuid4().hex[:8]
    run_id_var.set(run_id)
    stage_var.set(stage)
    return run_id


def set_stage(stage: str) -> None:
    """Move the current run to another stage (scan, report)."""
    stage_var.set(stage)


def add_run_context(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add run id and stage to log events, when a run is open."""
    run_id = run_id_var.get()
    if run_id:
        event_dict.setdefault("run_id", run_id)
        event_dict.setdefault("stage", stage_var.get())
    return event_dict


def configure_logging(
    level: str = "info",
    format_type: str = "text",
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure structured logging.

    May be called again at any time; existing module loggers pick up the
    new settings.

    Args:
        level: Log level (debug, info, warn, error)
        format_type: "text" for console output, "json" for one object per line
        stream: Output stream (default: sys.stderr at call time)
    """
    if stream is None:
        stream = sys.stderr
    log_level = LOG_LEVELS.get(level.lower(), logging.INFO)

    processors: list[structlog.types.Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_run_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if format_type.lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))

    # No caching: a reconfigured stream must replace the old one everywhere
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> Any:
    """
    Get a module logger.

    The returned proxy binds `logger_name` and rebuilds its bound logger
    from the active configuration on every call.

    Args:
        name: Dotted module name, e.g. "scanner.walker"
    """
    return structlog.get_logger(logger_name=name)


def log_stage_completed(stage: str, duration_seconds: float, **counters: int) -> None:
    """Log the end of a run stage with its duration and counters."""
    get_logger("run").info(
        "stage_completed",
        stage=stage,
        duration_seconds=round(duration_seconds, 3),
        **counters,
    )


configure_logging()
