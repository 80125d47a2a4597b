"""Directory scanning and library matching."""

from bldd.scanner.classifier import ExecutableClassifier
from bldd.scanner.matcher import LibraryMatcher, matches, normalize
from bldd.scanner.runner import Scanner, ScanResult, ScanStatistics
from bldd.scanner.walker import DirectoryWalker, WalkStatistics

__all__ = [
    "ExecutableClassifier",
    "LibraryMatcher",
    "normalize",
    "matches",
    "DirectoryWalker",
    "WalkStatistics",
    "Scanner",
    "ScanResult",
    "ScanStatistics",
]
