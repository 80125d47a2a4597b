"""Scan run: walker -> classifier -> probe -> matcher -> store."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional

from bldd.config.settings import BlddConfig
from bldd.models.store import AggregationStore
from bldd.probe.base import ElfProbe
from bldd.scanner.classifier import ExecutableClassifier
from bldd.scanner.matcher import LibraryMatcher
from bldd.scanner.walker import DirectoryWalker, WalkStatistics
from bldd.utils.logging import get_logger, log_stage_completed, set_stage

logger = get_logger("scanner.runner")


@dataclass
class ScanStatistics:
    """
    Statistics for a scan run.

    Attributes:
        candidates: Executable ELF files found
        unknown_architecture: Candidates skipped for an unsupported machine type
        probe_failures: Candidates whose header or dynamic section was unreadable
        matched_files: Candidates depending on at least one searched library
        dropped_inserts: Matches dropped by a store capacity bound
        walk: Directory traversal counters
        duration_seconds: Wall time of the scan
    """

    candidates: int = 0
    unknown_architecture: int = 0
    probe_failures: int = 0
    matched_files: int = 0
    dropped_inserts: int = 0
    walk: WalkStatistics = field(default_factory=WalkStatistics)
    duration_seconds: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "candidates": self.candidates,
            "unknown_architecture": self.unknown_architecture,
            "probe_failures": self.probe_failures,
            "matched_files": self.matched_files,
            "dropped_inserts": self.dropped_inserts,
            **self.walk.to_dict(),
            "duration_seconds": round(self.duration_seconds, 3),
        }


@dataclass
class ScanResult:
    """Finished store plus how it was obtained."""

    root: str
    store: AggregationStore
    statistics: ScanStatistics

    @property
    def total_executables(self) -> int:
        return self.store.total_executable_count()

    @property
    def architecture_count(self) -> int:
        return self.store.architecture_count()

    def summary(self) -> str:
        """One-line run summary."""
        return (
            f"Summary: Found {self.total_executables} executables "
            f"across {self.architecture_count} architectures"
        )


class Scanner:
    """
    Explicit context of one scan.

    Owns the aggregation store for the run and hands it back inside a
    ScanResult; nothing is kept in module state. Failures concerning a
    single file or subdirectory are logged and counted, never raised.
    """

    def __init__(
        self,
        config: BlddConfig,
        matcher: LibraryMatcher,
        probe: ElfProbe,
        store: Optional[AggregationStore] = None,
    ) -> None:
        """
        Initialize the scanner.

        Args:
            config: Run configuration
            matcher: Configured library matcher
            probe: ELF introspection backend
            store: Store to fill (a new bounded store by default)
        """
        self.config = config
        self.matcher = matcher
        self.probe = probe
        self.store = store or AggregationStore(config.capacity)
        self.classifier = ExecutableClassifier(probe)

    def run(self, root: str) -> ScanResult:
        """
        Scan a directory tree.

        Args:
            root: Directory to scan (already checked by the guards)

        Returns:
            ScanResult holding the filled store
        """
        set_stage("scan")
        walker = DirectoryWalker(self.classifier, sort_entries=self.config.scan.sort_entries)
        stats = ScanStatistics(walk=walker.stats)
        interval = self.config.scan.progress_interval

        logger.info(
            "scan_started",
            root=root,
            libraries=self.matcher.canonical_forms,
            probe=self.probe.backend_name,
        )
        started = time.monotonic()

        for path in walker.walk(root):
            stats.candidates += 1
            self._process(path, stats)

            if stats.candidates % interval == 0:
                logger.info(
                    "scan_progress",
                    candidates=stats.candidates,
                    matched_files=stats.matched_files,
                )

        stats.duration_seconds = time.monotonic() - started
        stats.dropped_inserts = self.store.dropped_count
        log_stage_completed(
            "scan",
            stats.duration_seconds,
            candidates=stats.candidates,
            matched_files=stats.matched_files,
        )
        logger.info("scan_completed", **stats.to_dict())

        return ScanResult(root=root, store=self.store, statistics=stats)

    def _process(self, path: str, stats: ScanStatistics) -> None:
        result = self.probe.probe(path)
        if result.is_err():
            stats.probe_failures += 1
            logger.warning("probe_failed", path=path, error=str(result.unwrap_err()))
            return

        probed = result.unwrap()
        if not probed.architecture.is_known():
            stats.unknown_architecture += 1
            logger.debug("architecture_unknown", path=path)
            return

        hits = self.matcher.match_all(probed.dependencies)
        if not hits:
            return

        stats.matched_files += 1
        for canonical in hits:
            self.store.record(probed.architecture, canonical, path)
        logger.debug(
            "executable_matched",
            path=path,
            architecture=probed.architecture.value,
            libraries=hits,
        )
