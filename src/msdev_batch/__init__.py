"""Batch driver for legacy command-line build tools."""

__version__ = "0.1.0"
