"""Grouped index of architecture -> library -> executables."""

from __future__ import annotations

from typing import Iterator, Optional

from bldd.config.settings import CapacityConfig
from bldd.models.inventory import Architecture, ArchitectureTag, Library
from bldd.utils.logging import get_logger
from bldd.utils.result import CapacityError, Err, Ok, Result

logger = get_logger("models.store")


class AggregationStore:
    """
    In-memory inventory filled during one scan.

    Architectures, libraries and executables are created on demand and only
    ever appended. Each container has an optional upper bound; an insert
    beyond a bound is dropped with a warning and reported as a CapacityError
    so the run can continue.
    """

    def __init__(self, capacity: Optional[CapacityConfig] = None) -> None:
        """
        Initialize an empty store.

        Args:
            capacity: Container bounds (defaults to CapacityConfig())
        """
        self.capacity = capacity or CapacityConfig()
        self._architectures: dict[ArchitectureTag, Architecture] = {}
        self._total = 0
        self._dropped = 0

    def record(
        self,
        architecture: ArchitectureTag,
        library_name: str,
        executable_path: str,
    ) -> Result[bool, CapacityError]:
        """
        Record that an executable depends on a library.

        Args:
            architecture: Detected architecture of the executable
            library_name: Canonical library form
            executable_path: Absolute path of the executable

        Returns:
            Ok(True) if inserted, Ok(False) if already present,
            Err(CapacityError) if a bound dropped the insert
        """
        if not architecture.is_known():
            raise ValueError("Unknown architectures are never recorded")

        arch_result = self._find_or_add_architecture(architecture)
        if arch_result.is_err():
            return self._drop(arch_result.unwrap_err())
        arch = arch_result.unwrap()

        lib_result = self._find_or_add_library(arch, library_name)
        if lib_result.is_err():
            return self._drop(lib_result.unwrap_err())
        library = lib_result.unwrap()

        if executable_path in library:
            return Ok(False)

        limit = self.capacity.max_executables
        if limit is not None and library.count >= limit:
            return self._drop(CapacityError(
                kind="executable",
                limit=limit,
                name=executable_path,
            ))

        library.add(executable_path)
        self._total += 1
        return Ok(True)

    def _find_or_add_architecture(
        self,
        tag: ArchitectureTag,
    ) -> Result[Architecture, CapacityError]:
        arch = self._architectures.get(tag)
        if arch is not None:
            return Ok(arch)

        limit = self.capacity.max_architectures
        if limit is not None and len(self._architectures) >= limit:
            return Err(CapacityError(kind="architecture", limit=limit, name=tag.value))

        arch = Architecture(tag=tag)
        self._architectures[tag] = arch
        logger.debug("architecture_added", architecture=tag.value)
        return Ok(arch)

    def _find_or_add_library(
        self,
        arch: Architecture,
        name: str,
    ) -> Result[Library, CapacityError]:
        library = arch.libraries.get(name)
        if library is not None:
            return Ok(library)

        limit = self.capacity.max_libraries
        if limit is not None and arch.library_count >= limit:
            return Err(CapacityError(kind="library", limit=limit, name=name))

        library = Library(name=name)
        arch.libraries[name] = library
        logger.debug("library_added", architecture=arch.name, library=name)
        return Ok(library)

    def _drop(self, error: CapacityError) -> Err[CapacityError]:
        self._dropped += 1
        logger.warning(
            "capacity_exceeded",
            kind=error.kind,
            limit=error.limit,
            name=error.name,
        )
        return Err(error)

    def total_executable_count(self) -> int:
        """Number of successful (library, executable) inserts."""
        return self._total

    def architecture_count(self) -> int:
        return len(self._architectures)

    @property
    def dropped_count(self) -> int:
        """Number of inserts dropped by a capacity bound."""
        return self._dropped

    def architectures(self) -> Iterator[Architecture]:
        """Iterate over architectures in first-seen order."""
        return iter(list(self._architectures.values()))

    def get(self, tag: ArchitectureTag) -> Optional[Architecture]:
        return self._architectures.get(tag)

    def sorted_libraries(
        self,
        architecture: Architecture,
        tie_break: str = "first_seen",
    ) -> list[Library]:
        """
        Libraries of an architecture by descending executable count.

        Args:
            architecture: Architecture to list
            tie_break: Order of equal counts - "first_seen" keeps insertion
                order, "name" sorts ascending by library name

        Returns:
            New list; the store itself is not reordered
        """
        libraries = list(architecture.libraries.values())
        if tie_break == "name":
            libraries.sort(key=lambda lib: lib.name)
        elif tie_break != "first_seen":
            raise ValueError(f"Unknown tie break: {tie_break}")
        # sort() is stable, so the secondary order above survives
        libraries.sort(key=lambda lib: lib.count, reverse=True)
        return libraries

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "total_executables": self._total,
            "dropped": self._dropped,
            "architectures": [arch.to_dict() for arch in self._architectures.values()],
        }
