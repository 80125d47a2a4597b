"""Run preconditions for bldd."""

from bldd.pipeline.guards import check_output_name, check_scan_root

__all__ = ["check_output_name", "check_scan_root"]
