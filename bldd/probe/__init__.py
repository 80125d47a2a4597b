"""ELF introspection backends."""

from __future__ import annotations

from bldd.config.settings import ProbeConfig
from bldd.probe.base import ElfProbe, ProbeResult, has_elf_magic
from bldd.probe.elf import ElfToolsProbe
from bldd.probe.readelf import ReadelfProbe


def create_probe(config: ProbeConfig) -> ElfProbe:
    """
    Build the backend selected in the configuration.

    Args:
        config: Probe settings

    Returns:
        Ready-to-use probe
    """
    if config.backend == "readelf":
        return ReadelfProbe(readelf_path=config.readelf_path, timeout=config.timeout)
    if config.backend == "elftools":
        return ElfToolsProbe()
    raise ValueError(f"Unknown probe backend: {config.backend}")


__all__ = [
    "ElfProbe",
    "ProbeResult",
    "ElfToolsProbe",
    "ReadelfProbe",
    "create_probe",
    "has_elf_magic",
]
