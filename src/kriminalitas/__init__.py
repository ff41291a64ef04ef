"""Crime reporting and area mapping backend."""

__version__ = "1.0.0"
