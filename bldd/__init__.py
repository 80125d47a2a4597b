"""bldd - find executables that depend on given shared libraries."""

__version__ = "1.0.0"
