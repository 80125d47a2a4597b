"""Abstract interface for ELF introspection backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from bldd.models.inventory import ArchitectureTag
from bldd.utils.logging import get_logger
from bldd.utils.result import Ok, ProbeError, Result

ELF_MAGIC = b"\x7fELF"


@dataclass(frozen=True)
class ProbeResult:
    """Architecture and direct dependencies of one binary."""

    architecture: ArchitectureTag
    dependencies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "architecture": self.architecture.value,
            "dependencies": list(self.dependencies),
        }


class ElfProbe(ABC):
    """
    Reads the ELF header and dynamic section of a candidate file.

    Implementations either parse the file in-process or delegate to an
    external tool; callers only see ProbeResult or ProbeError.
    """

    def __init__(self) -> None:
        self.logger = get_logger(f"probe.{self.backend_name}")

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Unique identifier for this backend."""
        ...

    @abstractmethod
    def is_elf(self, path: str) -> bool:
        """
        Check that the file is a well-formed ELF object.

        Args:
            path: File to check

        Returns:
            True if the ELF header can be read
        """
        ...

    @abstractmethod
    def detect_architecture(self, path: str) -> Result[ArchitectureTag, ProbeError]:
        """Read the machine type of the file."""
        ...

    @abstractmethod
    def extract_dependencies(self, path: str) -> Result[list[str], ProbeError]:
        """Read the DT_NEEDED entries of the file, in order."""
        ...

    def probe(self, path: str) -> Result[ProbeResult, ProbeError]:
        """
        Detect the architecture and, for known ones, list dependencies.

        Files of an unknown architecture come back with no dependencies;
        extraction is not attempted for them.

        Args:
            path: File to probe

        Returns:
            Result with the probe outcome or the failure
        """
        arch_result = self.detect_architecture(path)
        if arch_result.is_err():
            return arch_result
        architecture = arch_result.unwrap()

        if not architecture.is_known():
            return Ok(ProbeResult(architecture=architecture))

        return self.extract_dependencies(path).map(
            lambda deps: ProbeResult(architecture=architecture, dependencies=deps)
        )


def has_elf_magic(path: str) -> bool:
    """Cheap check of the first four bytes."""
    try:
        with open(path, "rb") as f:
            return f.read(4) == ELF_MAGIC
    except OSError:
        return False
