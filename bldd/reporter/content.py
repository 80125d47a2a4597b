"""Read-only report snapshot shared by all output formats."""

from __future__ import annotations

from dataclasses import dataclass

from bldd.models.store import AggregationStore
from bldd.utils.logging import get_logger

logger = get_logger("reporter.content")

SEPARATOR = "----------"
TITLE_RULE = "-" * 60
EXEC_MARKER = "->"


@dataclass(frozen=True)
class LibrarySection:
    """One library header and its executables."""

    name: str
    executables: tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.executables)

    @property
    def header(self) -> str:
        return f"{self.name} ({self.count} execs)"


@dataclass(frozen=True)
class ArchitectureSection:
    """One architecture block, libraries already in report order."""

    name: str
    libraries: tuple[LibrarySection, ...]

    @property
    def header(self) -> str:
        return f"{SEPARATOR} {self.name} {SEPARATOR}"


@dataclass(frozen=True)
class ReportContent:
    """Everything a renderer needs, detached from the live store."""

    title: str
    architectures: tuple[ArchitectureSection, ...]
    total_executables: int

    @property
    def architecture_count(self) -> int:
        return len(self.architectures)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "total_executables": self.total_executables,
            "architectures": [
                {
                    "name": arch.name,
                    "libraries": [
                        {"name": lib.name, "count": lib.count, "executables": list(lib.executables)}
                        for lib in arch.libraries
                    ],
                }
                for arch in self.architectures
            ],
        }


def build_report_content(
    store: AggregationStore,
    title: str,
    tie_break: str = "first_seen",
) -> ReportContent:
    """
    Take a snapshot of the store in report order.

    Architectures keep first-seen order, libraries are sorted by descending
    executable count and executables keep first-seen order.

    Args:
        store: Finished aggregation store
        title: Report title line
        tie_break: Order of libraries with equal counts

    Returns:
        Immutable report content
    """
    sections = []
    for arch in store.architectures():
        libraries = tuple(
            LibrarySection(name=lib.name, executables=tuple(lib.paths()))
            for lib in store.sorted_libraries(arch, tie_break)
        )
        sections.append(ArchitectureSection(name=arch.name, libraries=libraries))

    content = ReportContent(
        title=title,
        architectures=tuple(sections),
        total_executables=store.total_executable_count(),
    )
    logger.debug(
        "report_content_built",
        architectures=content.architecture_count,
        total_executables=content.total_executables,
    )
    return content
