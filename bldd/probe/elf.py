"""In-process ELF introspection with pyelftools."""

from __future__ import annotations

from elftools.common.exceptions import ELFError
from elftools.elf.dynamic import DynamicSection, DynamicSegment
from elftools.elf.elffile import ELFFile

from bldd.models.inventory import ArchitectureTag
from bldd.probe.base import ElfProbe, ProbeResult
from bldd.utils.result import Err, Ok, ProbeError, Result

MACHINE_MAP = {
    "EM_X86_64": ArchitectureTag.X86_64,
    "EM_386": ArchitectureTag.X86,
    "EM_AARCH64": ArchitectureTag.AARCH64,
    "EM_ARM": ArchitectureTag.ARMV7,
}


class ElfToolsProbe(ElfProbe):
    """
    Parses ELF headers and dynamic sections directly.

    `probe()` opens and parses each file once for both the machine type
    and the dependency list.
    """

    @property
    def backend_name(self) -> str:
        return "elftools"

    def is_elf(self, path: str) -> bool:
        # ELFFile checks the magic and reads only the header
        try:
            with open(path, "rb") as f:
                ELFFile(f)
        except (ELFError, OSError):
            return False
        return True

    def detect_architecture(self, path: str) -> Result[ArchitectureTag, ProbeError]:
        try:
            with open(path, "rb") as f:
                architecture = _architecture(ELFFile(f))
        except (ELFError, OSError) as e:
            return Err(ProbeError(path=path, message="cannot read ELF header", cause=e))

        return Ok(architecture)

    def extract_dependencies(self, path: str) -> Result[list[str], ProbeError]:
        try:
            with open(path, "rb") as f:
                needed = _needed(ELFFile(f))
        except (ELFError, OSError) as e:
            return Err(ProbeError(path=path, message="cannot read dynamic section", cause=e))

        return Ok(needed)

    def probe(self, path: str) -> Result[ProbeResult, ProbeError]:
        try:
            with open(path, "rb") as f:
                elf = ELFFile(f)
                architecture = _architecture(elf)
                if not architecture.is_known():
                    return Ok(ProbeResult(architecture=architecture))
                needed = _needed(elf)
        except (ELFError, OSError) as e:
            return Err(ProbeError(path=path, message="cannot read ELF file", cause=e))

        return Ok(ProbeResult(architecture=architecture, dependencies=needed))


def _architecture(elf: ELFFile) -> ArchitectureTag:
    return MACHINE_MAP.get(elf["e_machine"], ArchitectureTag.UNKNOWN)


def _needed(elf: ELFFile) -> list[str]:
    dynamic = _find_dynamic(elf)
    if dynamic is None:
        # Statically linked
        return []
    return [
        _to_str(tag.needed)
        for tag in dynamic.iter_tags()
        if tag.entry.d_tag == "DT_NEEDED"
    ]


def _find_dynamic(elf: ELFFile):
    """Dynamic section, or the PT_DYNAMIC segment for binaries without section headers."""
    for section in elf.iter_sections():
        if isinstance(section, DynamicSection):
            return section
    for segment in elf.iter_segments():
        if isinstance(segment, DynamicSegment):
            return segment
    return None


def _to_str(value) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
