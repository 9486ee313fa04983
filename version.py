"""Generic Panel plugin version."""

__version__ = "0.1.0"
