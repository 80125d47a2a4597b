"""Decides which directory entries are candidate executables."""

from __future__ import annotations

import os
import stat

from bldd.probe.base import ElfProbe
from bldd.utils.logging import get_logger

logger = get_logger("scanner.classifier")


class ExecutableClassifier:
    """
    Accepts regular files the current user may execute and that pass the
    probe's ELF validity check.

    Symbolic links are judged by the link itself and therefore never
    accepted. Errors while checking an entry only reject that entry.
    """

    def __init__(self, probe: ElfProbe) -> None:
        self.probe = probe

    def classify(self, path: str) -> bool:
        """
        Check whether a path is a candidate executable.

        Args:
            path: Path of the directory entry

        Returns:
            True if the entry should be probed
        """
        try:
            mode = os.lstat(path).st_mode
        except OSError as e:
            logger.debug("classify_failed", path=path, error=str(e))
            return False

        if not stat.S_ISREG(mode):
            return False

        if not os.access(path, os.X_OK):
            return False

        return self.probe.is_elf(path)
