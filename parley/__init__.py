"""Parley - live AI voice responses and summaries for video meetings."""

__version__ = "0.1.0"
