"""Atomic file operations to prevent truncated reports.

Reports are written to a temporary file next to the target and renamed
into place, so a failed write leaves any previous report untouched.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

from bldd.utils.logging import get_logger

logger = get_logger("utils.atomic")


class AtomicWriteError(Exception):
    """Raised when an atomic write operation fails."""

    pass


@contextmanager
def atomic_write(
    path: Path,
    mode: str = "w",
    encoding: str = "utf-8",
    errors: str = "strict",
) -> Generator[Any, None, None]:
    """
    Context manager for atomic file writes.

    Writes to a temporary file first, then atomically renames to the target path.
    If any error occurs, the temp file is cleaned up and the original is untouched.

    Args:
        path: Target file path
        mode: File mode ('w' for text, 'wb' for binary)
        encoding: Text encoding (ignored for binary mode)
        errors: Encoding error handler (ignored for binary mode)

    Yields:
        File handle for writing

    Raises:
        AtomicWriteError: If the atomic write fails
    """
    path = Path(path)
    temp_path: Path | None = None
    success = False

    try:
        # Same directory as the target so the rename stays on one filesystem
        fd, name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        temp_path = Path(name)
        os.close(fd)

        if "b" in mode:
            with open(temp_path, mode) as f:
                yield f
        else:
            with open(temp_path, mode, encoding=encoding, errors=errors) as f:
                yield f

        temp_path.replace(path)
        success = True

        logger.debug("atomic_write_success", path=str(path))

    except Exception as e:
        logger.error("atomic_write_failed", path=str(path), error=str(e))
        raise AtomicWriteError(f"Failed to atomically write {path}: {e}") from e

    finally:
        if not success and temp_path is not None and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass


def atomic_write_text(
    path: Path,
    content: str,
    encoding: str = "utf-8",
    errors: str = "strict",
) -> None:
    """
    Atomically write text content to a file.

    Args:
        path: Target file path
        content: Text content to write
        encoding: Text encoding
        errors: Encoding error handler
    """
    with atomic_write(path, encoding=encoding, errors=errors) as f:
        f.write(content)


def atomic_write_bytes(path: Path, content: bytes) -> None:
    """
    Atomically write binary content to a file.

    Args:
        path: Target file path
        content: Binary content to write
    """
    with atomic_write(path, mode="wb") as f:
        f.write(content)
