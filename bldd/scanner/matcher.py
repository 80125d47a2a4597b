"""Normalization of library search terms and matching of NEEDED entries."""

from __future__ import annotations

from typing import Iterable, Optional

from bldd.utils.result import ConfigError, Err, Ok, Result

SO_MARKER = ".so"
LIB_PREFIX = "lib"


def normalize(term: str) -> str:
    """
    Canonical form of a search term.

    "pthread" -> "libpthread.so", "libdl" -> "libdl.so", anything already
    containing ".so" is kept verbatim. Applying it twice changes nothing.
    """
    if SO_MARKER in term:
        return term
    if term.startswith(LIB_PREFIX):
        return f"{term}{SO_MARKER}"
    return f"{LIB_PREFIX}{term}{SO_MARKER}"


def matches(dependency: str, canonical: str) -> bool:
    """Substring match, so "libc.so" matches "libc.so.6"."""
    return canonical in dependency


class LibraryMatcher:
    """
    Attributes raw dependency names to the configured libraries.

    Terms are kept in the order they were given; a dependency matching
    several of them belongs to the first one only.
    """

    def __init__(self, canonical_forms: list[str]) -> None:
        self.canonical_forms = canonical_forms

    @classmethod
    def from_terms(cls, terms: Iterable[str]) -> Result["LibraryMatcher", ConfigError]:
        """
        Build a matcher from caller-supplied search terms.

        Args:
            terms: Search terms in command-line order

        Returns:
            Result with the matcher, or ConfigError for empty input
        """
        canonical_forms: list[str] = []
        for term in terms:
            term = term.strip()
            if not term:
                return Err(ConfigError(field="lib", message="Library name must not be empty"))
            canonical = normalize(term)
            if canonical not in canonical_forms:
                canonical_forms.append(canonical)

        if not canonical_forms:
            return Err(ConfigError(
                field="lib",
                message="At least one library must be specified with --lib",
            ))
        return Ok(cls(canonical_forms))

    def match(self, dependency: str) -> Optional[str]:
        """Canonical form the dependency is attributed to, if any."""
        for canonical in self.canonical_forms:
            if matches(dependency, canonical):
                return canonical
        return None

    def match_all(self, dependencies: Iterable[str]) -> list[str]:
        """
        Canonical forms hit by a dependency list, in dependency order.

        Each canonical form appears at most once.
        """
        hits: list[str] = []
        for dependency in dependencies:
            canonical = self.match(dependency)
            if canonical is not None and canonical not in hits:
                hits.append(canonical)
        return hits
