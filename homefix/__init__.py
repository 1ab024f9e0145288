"""Home repair diagnosis tool server."""

__version__ = "1.0.0"
