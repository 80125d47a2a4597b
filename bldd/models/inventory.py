"""Data models for the dependency inventory."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ArchitectureTag(Enum):
    """CPU architecture of a scanned binary."""

    X86_64 = "x86_64"
    X86 = "x86"
    AARCH64 = "aarch64"
    ARMV7 = "armv7"
    UNKNOWN = "unknown"  # Never stored

    def is_known(self) -> bool:
        """Check if binaries of this architecture are recorded."""
        return self is not ArchitectureTag.UNKNOWN


@dataclass
class Library:
    """
    A matched shared library and the executables depending on it.

    Attributes:
        name: Canonical library form (e.g. "libc.so"), not the raw search term
        executables: Insertion-ordered set of absolute executable paths
    """

    name: str
    executables: dict[str, None] = field(default_factory=dict)

    @property
    def count(self) -> int:
        """Number of distinct executables depending on this library."""
        return len(self.executables)

    def __contains__(self, path: str) -> bool:
        return path in self.executables

    def add(self, path: str) -> bool:
        """Add an executable; returns False if it was already present."""
        if path in self.executables:
            return False
        self.executables[path] = None
        return True

    def paths(self) -> list[str]:
        """Executable paths in first-seen order."""
        return list(self.executables)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "count": self.count,
            "executables": self.paths(),
        }


@dataclass
class Architecture:
    """
    Libraries matched for one CPU architecture.

    Attributes:
        tag: Architecture tag, never UNKNOWN
        libraries: Libraries keyed by canonical name, in first-seen order
    """

    tag: ArchitectureTag
    libraries: dict[str, Library] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.tag.value

    @property
    def library_count(self) -> int:
        return len(self.libraries)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "libraries": [lib.to_dict() for lib in self.libraries.values()],
        }
