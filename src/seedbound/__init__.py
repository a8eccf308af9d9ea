"""Deterministic 2d6 resolution engine for a narrative single-player RPG."""

__version__ = "0.1.0"
