"""Relay linked media into Guilded media channels."""

__version__ = "0.1.0"
