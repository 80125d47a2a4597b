"""Centralized configuration for a bldd run.

Every tunable of the scanner, the aggregation bounds and the report layout
lives here with its documented default. Configuration can be loaded from a
YAML file and is validated before any scanning starts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from bldd.utils.result import ConfigError, Err, Ok, Result

# Longest output base name accepted, including the appended extension
MAX_OUTPUT_PATH = 4096

PROBE_BACKENDS = ("elftools", "readelf")
TIE_BREAKS = ("first_seen", "name")
PAGE_SIZES = ("A4", "letter")
REPORT_FORMATS = ("txt", "pdf", "both")


@dataclass
class ScanConfig:
    """Directory traversal settings."""

    sort_entries: bool = True
    progress_interval: int = 100


@dataclass
class ProbeConfig:
    """ELF introspection backend settings."""

    backend: str = "elftools"
    readelf_path: str = "readelf"
    timeout: int = 30


@dataclass
class CapacityConfig:
    """
    Upper bounds of the aggregation store.

    A bound set to None makes that container unbounded.
    """

    max_architectures: Optional[int] = 4
    max_libraries: Optional[int] = 100
    max_executables: Optional[int] = 10000


@dataclass
class ReportConfig:
    """Report content settings."""

    tie_break: str = "first_seen"
    title: str = "Report on dynamic used libraries by ELF executables"


@dataclass
class PdfConfig:
    """Paginated document layout."""

    page_size: str = "A4"
    margin: float = 50.0


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "info"
    format: str = "text"


@dataclass
class BlddConfig:
    """
    Complete run configuration.

    Search terms, scan root and output selection come from the command
    line; everything else has a default here and may be overridden from
    YAML.
    """

    scan: ScanConfig = field(default_factory=ScanConfig)
    probe: ProbeConfig = field(default_factory=ProbeConfig)
    capacity: CapacityConfig = field(default_factory=CapacityConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    pdf: PdfConfig = field(default_factory=PdfConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> Result["BlddConfig", ConfigError]:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Result with loaded config or error
        """
        path = Path(path)

        if not path.exists():
            return Err(ConfigError(
                field="path",
                message=f"Configuration file not found: {path}",
            ))

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            return Err(ConfigError(
                field="yaml",
                message=f"Failed to parse YAML: {e}",
            ))
        except OSError as e:
            return Err(ConfigError(
                field="file",
                message=f"Failed to read config file: {e}",
            ))

        if not isinstance(data, dict):
            return Err(ConfigError(
                field="yaml",
                message="Top level of the configuration must be a mapping",
            ))

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Result["BlddConfig", ConfigError]:
        """
        Create configuration from a dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Result with loaded config or error
        """
        try:
            scan_data = data.get("scan") or {}
            scan = ScanConfig(
                sort_entries=bool(scan_data.get("sort_entries", True)),
                progress_interval=int(scan_data.get("progress_interval", 100)),
            )

            probe_data = data.get("probe") or {}
            probe = ProbeConfig(
                backend=probe_data.get("backend", "elftools"),
                readelf_path=probe_data.get("readelf_path", "readelf"),
                timeout=int(probe_data.get("timeout", 30)),
            )

            capacity_data = data.get("capacity") or {}
            capacity = CapacityConfig(
                max_architectures=_optional_int(capacity_data, "max_architectures", 4),
                max_libraries=_optional_int(capacity_data, "max_libraries", 100),
                max_executables=_optional_int(capacity_data, "max_executables", 10000),
            )

            report_data = data.get("report") or {}
            report = ReportConfig(
                tie_break=report_data.get("tie_break", "first_seen"),
                title=report_data.get("title", ReportConfig.title),
            )

            pdf_data = data.get("pdf") or {}
            pdf = PdfConfig(
                page_size=pdf_data.get("page_size", "A4"),
                margin=float(pdf_data.get("margin", 50.0)),
            )

            logging_data = data.get("logging") or {}
            logging_config = LoggingConfig(
                level=logging_data.get("level", "info"),
                format=logging_data.get("format", "text"),
            )

        except (AttributeError, TypeError, ValueError) as e:
            return Err(ConfigError(
                field="unknown",
                message=f"Failed to parse configuration: {e}",
            ))

        config = cls(
            scan=scan,
            probe=probe,
            capacity=capacity,
            report=report,
            pdf=pdf,
            logging=logging_config,
        )

        validation_result = config.validate()
        if validation_result.is_err():
            return Err(validation_result.unwrap_err())

        return Ok(config)

    def validate(self) -> Result[None, ConfigError]:
        """
        Validate configuration values.

        Returns:
            Result indicating success or validation error
        """
        if self.scan.progress_interval < 1:
            return Err(ConfigError(
                field="scan.progress_interval",
                message=f"Must be at least 1, got {self.scan.progress_interval}",
            ))

        if self.probe.backend not in PROBE_BACKENDS:
            return Err(ConfigError(
                field="probe.backend",
                message=f"Must be one of {', '.join(PROBE_BACKENDS)}, got {self.probe.backend!r}",
            ))
        if self.probe.timeout < 1:
            return Err(ConfigError(
                field="probe.timeout",
                message=f"Must be positive, got {self.probe.timeout}",
            ))

        for name, value in [
            ("max_architectures", self.capacity.max_architectures),
            ("max_libraries", self.capacity.max_libraries),
            ("max_executables", self.capacity.max_executables),
        ]:
            if value is not None and value < 1:
                return Err(ConfigError(
                    field=f"capacity.{name}",
                    message=f"Must be at least 1 or null, got {value}",
                ))

        if self.report.tie_break not in TIE_BREAKS:
            return Err(ConfigError(
                field="report.tie_break",
                message=f"Must be one of {', '.join(TIE_BREAKS)}, got {self.report.tie_break!r}",
            ))

        if self.pdf.page_size not in PAGE_SIZES:
            return Err(ConfigError(
                field="pdf.page_size",
                message=f"Must be one of {', '.join(PAGE_SIZES)}, got {self.pdf.page_size!r}",
            ))
        if self.pdf.margin < 0:
            return Err(ConfigError(
                field="pdf.margin",
                message=f"Must not be negative, got {self.pdf.margin}",
            ))

        return Ok(None)


def _optional_int(data: dict[str, Any], key: str, default: int) -> Optional[int]:
    """Read a bound that may be explicitly disabled with null."""
    if key not in data:
        return default
    value = data[key]
    return None if value is None else int(value)


def load_config(path: Optional[Path] = None) -> Result[BlddConfig, ConfigError]:
    """
    Load configuration, falling back to defaults when no file is given.

    Args:
        path: Optional YAML configuration file

    Returns:
        Result with loaded config or error
    """
    if path is None:
        return Ok(BlddConfig())
    return BlddConfig.from_yaml(path)


def resolve_formats(report_format: str) -> list[str]:
    """Expand a --format value into the list of formats to produce."""
    if report_format == "both":
        return ["txt", "pdf"]
    return [report_format]
