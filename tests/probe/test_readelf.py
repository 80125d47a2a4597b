"""Tests for the readelf backend."""

import subprocess

import pytest

from bldd.models import ArchitectureTag
from bldd.probe import ReadelfProbe, create_probe
from bldd.probe.readelf import machine_to_tag, parse_needed
from bldd.config.settings import ProbeConfig

DYNAMIC_OUTPUT = """
Dynamic section at offset 0x2dc8 contains 27 entries:
  Tag        Type                         Name/Value
 0x0000000000000001 (NEEDED)             Shared library: [libpthread.so.0]
 0x0000000000000001 (NEEDED)             Shared library: [libc.so.6]
 0x000000000000000c (INIT)               0x1000
"""

HEADER_OUTPUT = """ELF Header:
  Magic:   7f 45 4c 46 02 01 01 00 00 00 00 00 00 00 00 00
  Class:                             ELF64
  Machine:                           Advanced Micro Devices X86-64
"""


class TestParsing:
    """Tests for readelf output parsing."""

    def test_parse_needed_in_order(self):
        assert parse_needed(DYNAMIC_OUTPUT) == ["libpthread.so.0", "libc.so.6"]

    def test_parse_needed_static(self):
        assert parse_needed("There is no dynamic section in this file.\n") == []

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("Machine: Advanced Micro Devices X86-64", ArchitectureTag.X86_64),
            ("Machine: AMD x86-64", ArchitectureTag.X86_64),
            ("Machine: Intel 80386", ArchitectureTag.X86),
            ("Machine: AArch64", ArchitectureTag.AARCH64),
            ("Machine: ARM aarch64", ArchitectureTag.AARCH64),
            ("Machine: ARM", ArchitectureTag.ARMV7),
            ("Machine: MIPS R3000", ArchitectureTag.UNKNOWN),
        ],
    )
    def test_machine_to_tag(self, line, expected):
        assert machine_to_tag(line) == expected


class FakeCompleted:
    def __init__(self, stdout, returncode=0):
        self.stdout = stdout
        self.returncode = returncode


class TestReadelfProbe:
    """Tests for ReadelfProbe with a stubbed subprocess."""

    def _stub(self, monkeypatch, outputs, returncode=0):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(cmd)
            return FakeCompleted(outputs[cmd[1]], returncode)

        monkeypatch.setattr(subprocess, "run", fake_run)
        return calls

    def test_probe(self, monkeypatch):
        calls = self._stub(monkeypatch, {"-h": HEADER_OUTPUT, "-d": DYNAMIC_OUTPUT})

        result = ReadelfProbe().probe("/bin/tool").unwrap()

        assert result.architecture == ArchitectureTag.X86_64
        assert result.dependencies == ["libpthread.so.0", "libc.so.6"]
        assert calls == [["readelf", "-h", "/bin/tool"], ["readelf", "-d", "/bin/tool"]]

    def test_unknown_machine_skips_dependencies(self, monkeypatch):
        calls = self._stub(monkeypatch, {"-h": "  Machine: MIPS R3000\n"})

        result = ReadelfProbe().probe("/bin/tool").unwrap()

        assert result.architecture == ArchitectureTag.UNKNOWN
        assert result.dependencies == []
        assert len(calls) == 1

    def test_nonzero_exit_is_error(self, monkeypatch):
        self._stub(monkeypatch, {"-h": ""}, returncode=1)
        probe = ReadelfProbe()

        assert not probe.is_elf("/etc/passwd")
        assert probe.probe("/etc/passwd").is_err()

    def test_missing_readelf(self, tmp_path):
        probe = ReadelfProbe(readelf_path=str(tmp_path / "no-such-readelf"))

        result = probe.probe("/bin/tool")

        assert result.is_err()
        assert "not found" in result.unwrap_err().message

    def test_timeout(self, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

        monkeypatch.setattr(subprocess, "run", fake_run)

        assert ReadelfProbe(timeout=1).detect_architecture("/bin/tool").is_err()


def test_create_probe_selects_backend():
    probe = create_probe(ProbeConfig(backend="readelf", readelf_path="/opt/readelf", timeout=5))
    assert isinstance(probe, ReadelfProbe)
    assert probe.readelf_path == "/opt/readelf"
    assert create_probe(ProbeConfig()).backend_name == "elftools"


def test_non_elf_rejected_without_running_readelf(tmp_path, monkeypatch):
    script = tmp_path / "script"
    script.write_text("#!/bin/sh\n")
    calls = []
    monkeypatch.setattr(subprocess, "run", lambda cmd, **kwargs: calls.append(cmd))

    assert not ReadelfProbe().is_elf(str(script))
    assert calls == []
