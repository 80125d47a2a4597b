"""Result type for explicit error handling.

Component seams (probe, store, guards, report writer) return a Result so
that recoverable failures are handled where they happen and only the
fatal ones reach the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, NoReturn, TypeVar, Union

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Mapped type


class ResultError(Exception):
    """Raised when unwrapping a Result fails."""

    pass


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Represents a successful result."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the success value. Safe to call since this is Ok."""
        return self.value

    def unwrap_err(self) -> NoReturn:
        """Get the error value. Raises since this is Ok."""
        raise ResultError(f"Called unwrap_err on Ok value: {self.value}")

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        """Transform the success value."""
        return Ok(fn(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Err(Generic[E]):
    """Represents an error result."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Get the success value. Raises since this is Err."""
        raise ResultError(f"Called unwrap on Err value: {self.error}")

    def unwrap_err(self) -> E:
        """Get the error value. Safe to call since this is Err."""
        return self.error

    def map(self, fn: Callable[[T], U]) -> "Err[E]":
        """Transform the success value. No-op for Err."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Type alias for Result
Result = Union[Ok[T], Err[E]]


# Error types
@dataclass(frozen=True)
class ConfigError:
    """Error in configuration or command-line options."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"Config error in '{self.field}': {self.message}"


@dataclass(frozen=True)
class GuardError:
    """Error from a precondition check."""

    code: int
    message: str
    details: str = ""

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


@dataclass(frozen=True)
class ProbeError:
    """ELF introspection failed for a single file."""

    path: str
    message: str
    cause: Exception | None = None

    def __str__(self) -> str:
        if self.cause:
            return f"Cannot probe {self.path}: {self.message} ({self.cause})"
        return f"Cannot probe {self.path}: {self.message}"


@dataclass(frozen=True)
class CapacityError:
    """An aggregation bound was reached and an insert was dropped."""

    kind: str  # "architecture", "library" or "executable"
    limit: int
    name: str

    def __str__(self) -> str:
        return f"Too many {self.kind} entries (limit {self.limit}), dropped '{self.name}'"


@dataclass(frozen=True)
class OutputError:
    """A report file could not be produced."""

    format: str
    path: str
    message: str
    cause: Exception | None = None

    def __str__(self) -> str:
        if self.cause:
            return f"Cannot write {self.format} report {self.path}: {self.message} ({self.cause})"
        return f"Cannot write {self.format} report {self.path}: {self.message}"


# Exit codes
class ExitCode:
    """Exit codes for CLI."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    USAGE_ERROR = 2

    # Fatal preconditions
    CONFIG_ERROR = 1
    GUARD_SCAN_ROOT = 1

    INTERRUPTED = 130
