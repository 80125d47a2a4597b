"""Configuration module for bldd."""

from bldd.config.settings import BlddConfig, load_config, resolve_formats

__all__ = ["BlddConfig", "load_config", "resolve_formats"]
