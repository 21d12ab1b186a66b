"""Minimal task manager: JSON-file store, Flask API, async console client."""

__version__ = "1.0.0"
