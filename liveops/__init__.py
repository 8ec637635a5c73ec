"""Lifecycle operations for live media channels."""

__version__ = "1.0.0.5"
