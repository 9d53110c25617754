"""Handoff - signed delivery finalization service."""

__version__ = "0.1.0"
