"""Recursive directory traversal producing candidate executables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterator

from bldd.scanner.classifier import ExecutableClassifier
from bldd.utils.logging import get_logger

logger = get_logger("scanner.walker")


@dataclass
class WalkStatistics:
    """Counters collected while walking a tree."""

    directories_visited: int = 0
    directories_skipped: int = 0
    entries_seen: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "directories_visited": self.directories_visited,
            "directories_skipped": self.directories_skipped,
            "entries_seen": self.entries_seen,
        }


class DirectoryWalker:
    """
    Depth-first walk yielding the paths the classifier accepts.

    Entry types come from the link itself, so a symbolic link to a
    directory is never descended into. This also keeps link cycles from
    being followed. Directories that cannot be listed are skipped with a
    warning and the walk carries on with their siblings.
    """

    def __init__(
        self,
        classifier: ExecutableClassifier,
        sort_entries: bool = True,
    ) -> None:
        """
        Initialize the walker.

        Args:
            classifier: Decides which files are candidates
            sort_entries: Visit entries in name order instead of directory order
        """
        self.classifier = classifier
        self.sort_entries = sort_entries
        self.stats = WalkStatistics()

    def walk(self, root: str) -> Iterator[str]:
        """
        Walk a tree and yield candidate executables.

        Args:
            root: Directory to scan; made absolute without resolving links

        Yields:
            Absolute paths of candidate executables
        """
        yield from self._walk_dir(os.path.abspath(root))

    def _walk_dir(self, dir_path: str) -> Iterator[str]:
        try:
            with os.scandir(dir_path) as it:
                entries = list(it)
        except OSError as e:
            self.stats.directories_skipped += 1
            logger.warning("directory_skipped", path=dir_path, error=str(e))
            return

        self.stats.directories_visited += 1
        logger.debug("directory_scanned", path=dir_path, entries=len(entries))

        if self.sort_entries:
            entries.sort(key=lambda entry: entry.name)

        for entry in entries:
            self.stats.entries_seen += 1
            if _is_real_dir(entry):
                yield from self._walk_dir(entry.path)
            elif self.classifier.classify(entry.path):
                yield entry.path


def _is_real_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False
