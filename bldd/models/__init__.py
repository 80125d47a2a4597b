"""Data models for bldd."""

from bldd.models.inventory import Architecture, ArchitectureTag, Library
from bldd.models.store import AggregationStore

__all__ = [
    "ArchitectureTag",
    "Architecture",
    "Library",
    "AggregationStore",
]
