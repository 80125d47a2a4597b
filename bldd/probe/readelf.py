"""ELF introspection through the binutils readelf tool."""

from __future__ import annotations

import os
import re
import subprocess
from typing import Optional

from bldd.models.inventory import ArchitectureTag
from bldd.probe.base import ElfProbe, has_elf_magic
from bldd.utils.result import Err, Ok, ProbeError, Result

# 0x0000000000000001 (NEEDED)             Shared library: [libc.so.6]
NEEDED_RE = re.compile(r"\(NEEDED\)\s+Shared library:\s+\[(.+?)\]")


def machine_to_tag(line: str) -> ArchitectureTag:
    """
    Map the "Machine:" line of readelf -h to an architecture.

    Order matters: "ARM aarch64" has to be checked before plain "ARM".
    """
    if "Advanced Micro Devices X86-64" in line or "AMD x86-64" in line:
        return ArchitectureTag.X86_64
    if "Intel 80386" in line:
        return ArchitectureTag.X86
    if "ARM aarch64" in line or "AArch64" in line:
        return ArchitectureTag.AARCH64
    if "ARM" in line:
        return ArchitectureTag.ARMV7
    return ArchitectureTag.UNKNOWN


class ReadelfProbe(ElfProbe):
    """Runs readelf once per query and parses its text output."""

    def __init__(self, readelf_path: str = "readelf", timeout: int = 30) -> None:
        """
        Initialize the backend.

        Args:
            readelf_path: readelf executable name or path
            timeout: Seconds allowed per readelf call
        """
        super().__init__()
        self.readelf_path = readelf_path
        self.timeout = timeout

    @property
    def backend_name(self) -> str:
        return "readelf"

    def _run(self, flag: str, path: str) -> Result[str, ProbeError]:
        try:
            completed = subprocess.run(
                [self.readelf_path, flag, path],
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                errors="replace",
                timeout=self.timeout,
                env={**os.environ, "LC_ALL": "C"},
                check=False,
            )
        except FileNotFoundError as e:
            return Err(ProbeError(path=path, message=f"{self.readelf_path} not found", cause=e))
        except subprocess.TimeoutExpired as e:
            return Err(ProbeError(path=path, message=f"readelf {flag} timed out", cause=e))
        except OSError as e:
            return Err(ProbeError(path=path, message=f"readelf {flag} failed", cause=e))

        if completed.returncode != 0:
            return Err(ProbeError(
                path=path,
                message=f"readelf {flag} exited with status {completed.returncode}",
            ))
        return Ok(completed.stdout)

    def is_elf(self, path: str) -> bool:
        # Spare a readelf process for scripts and other non-ELF executables
        if not has_elf_magic(path):
            return False
        return self._run("-h", path).is_ok()

    def detect_architecture(self, path: str) -> Result[ArchitectureTag, ProbeError]:
        return self._run("-h", path).map(_parse_machine)

    def extract_dependencies(self, path: str) -> Result[list[str], ProbeError]:
        return self._run("-d", path).map(parse_needed)


def _parse_machine(output: str) -> ArchitectureTag:
    line = _machine_line(output)
    if line is None:
        return ArchitectureTag.UNKNOWN
    return machine_to_tag(line)


def _machine_line(output: str) -> Optional[str]:
    for line in output.splitlines():
        if "Machine:" in line:
            return line
    return None


def parse_needed(output: str) -> list[str]:
    """Extract the NEEDED library names from readelf -d output, in order."""
    needed = []
    for line in output.splitlines():
        match = NEEDED_RE.search(line)
        if match:
            needed.append(match.group(1))
    return needed
