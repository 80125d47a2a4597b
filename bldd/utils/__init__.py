"""Utility modules for bldd."""

from bldd.utils.atomic import (
    AtomicWriteError,
    atomic_write,
    atomic_write_bytes,
    atomic_write_text,
)
from bldd.utils.logging import (
    configure_logging,
    get_logger,
    log_stage_completed,
    set_stage,
    start_run,
)
from bldd.utils.result import (
    CapacityError,
    ConfigError,
    Err,
    ExitCode,
    GuardError,
    Ok,
    OutputError,
    ProbeError,
    Result,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "start_run",
    "set_stage",
    "log_stage_completed",
    # Atomic writes
    "AtomicWriteError",
    "atomic_write",
    "atomic_write_text",
    "atomic_write_bytes",
    # Result
    "Ok",
    "Err",
    "Result",
    "ConfigError",
    "GuardError",
    "ProbeError",
    "CapacityError",
    "OutputError",
    "ExitCode",
]
