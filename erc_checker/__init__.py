"""Electrical Rule Check engine for wiring diagrams."""

__version__ = "0.1.0"
