"""Beatify: mood-based music discovery backend."""

__version__ = "0.1.0"
