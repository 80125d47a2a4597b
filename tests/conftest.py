"""Global fixtures for bldd tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Union

import pytest

from bldd.models import ArchitectureTag
from bldd.probe.base import ELF_MAGIC, ElfProbe
from bldd.utils.logging import configure_logging
from bldd.utils.result import Err, Ok, ProbeError


class FakeProbe(ElfProbe):
    """In-memory probe: a path is an ELF file if it has an entry."""

    def __init__(self, entries: dict[str, Union[tuple[ArchitectureTag, list[str]], ProbeError]]) -> None:
        super().__init__()
        self.entries = entries
        self.extracted: list[str] = []

    @property
    def backend_name(self) -> str:
        return "fake"

    def is_elf(self, path):
        return path in self.entries

    def detect_architecture(self, path):
        entry = self.entries[path]
        if isinstance(entry, ProbeError):
            return Err(entry)
        return Ok(entry[0])

    def extract_dependencies(self, path):
        self.extracted.append(path)
        return Ok(list(self.entries[path][1]))


@pytest.fixture(autouse=True)
def _logging():
    """Send logs to the stream pytest captures for the current test."""
    configure_logging(level="debug", format_type="text", stream=sys.stderr)
    yield


@pytest.fixture
def make_executable():
    """Create an executable file starting with the ELF magic."""

    def _make(path: Path, mode: int = 0o755) -> str:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(ELF_MAGIC + b"\x00" * 60)
        os.chmod(path, mode)
        return str(path)

    return _make


@pytest.fixture
def fake_probe():
    """Factory for FakeProbe instances."""
    return FakeProbe


@pytest.fixture
def scenario_a(tmp_path, make_executable, fake_probe):
    """Two x86_64 executables depending on libc, one also on libm."""
    root = tmp_path / "root"
    a = make_executable(root / "bin" / "a")
    b = make_executable(root / "bin" / "b")
    probe = fake_probe({
        a: (ArchitectureTag.X86_64, ["libc.so.6"]),
        b: (ArchitectureTag.X86_64, ["libc.so.6", "libm.so.6"]),
    })
    return root, probe, a, b
