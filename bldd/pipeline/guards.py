"""Run guards - precondition checks that fail fast before scanning.

If a guard fails, no scanning happens and the CLI exits with the error's
code. Everything that can go wrong later is isolated to a single file,
subdirectory or report format instead.
"""

from __future__ import annotations

import os
from pathlib import Path

from bldd.config.settings import MAX_OUTPUT_PATH
from bldd.utils.logging import get_logger
from bldd.utils.result import ConfigError, Err, ExitCode, GuardError, Ok, Result

logger = get_logger("pipeline.guards")


def check_scan_root(path: str) -> Result[str, GuardError]:
    """
    Check that the scan root is a directory that can be listed.

    Args:
        path: Directory given with --dir

    Returns:
        Ok(absolute path) if usable, Err(GuardError) otherwise
    """
    root = os.path.abspath(path)

    if not os.path.exists(root):
        return _fail(GuardError(
            code=ExitCode.GUARD_SCAN_ROOT,
            message=f"Cannot open directory {path}",
            details="No such file or directory",
        ), guard="scan_root", path=root)

    if not os.path.isdir(root):
        return _fail(GuardError(
            code=ExitCode.GUARD_SCAN_ROOT,
            message=f"Cannot open directory {path}",
            details="Not a directory",
        ), guard="scan_root", path=root)

    try:
        with os.scandir(root):
            pass
    except OSError as e:
        return _fail(GuardError(
            code=ExitCode.GUARD_SCAN_ROOT,
            message=f"Cannot open directory {path}",
            details=e.strerror or str(e),
        ), guard="scan_root", path=root)

    logger.debug("guard_passed", guard="scan_root", path=root)
    return Ok(root)


def check_output_name(output: str) -> Result[str, ConfigError]:
    """
    Check the report base name before anything is written.

    Args:
        output: Base name given with --output

    Returns:
        Ok(output) if usable, Err(ConfigError) otherwise
    """
    if not output:
        error = ConfigError(field="output", message="Output filename must not be empty")
        logger.error("guard_failed", guard="output_name", message=error.message)
        return Err(error)

    # Room for the ".txt" / ".pdf" extension
    if len(output) + 5 > MAX_OUTPUT_PATH:
        error = ConfigError(field="output", message="Output filename too long")
        logger.error("guard_failed", guard="output_name", length=len(output))
        return Err(error)

    separators = tuple(sep for sep in (os.sep, os.altsep) if sep)
    if output.endswith(separators) or Path(output).name in ("", ".", ".."):
        error = ConfigError(field="output", message=f"Output filename is a directory: {output}")
        logger.error("guard_failed", guard="output_name", output=output)
        return Err(error)

    logger.debug("guard_passed", guard="output_name", output=output)
    return Ok(output)


def _fail(error: GuardError, **context) -> Err[GuardError]:
    logger.error("guard_failed", code=error.code, message=error.message, **context)
    return Err(error)
