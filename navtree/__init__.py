"""Hierarchical reorder engine for a three-level navigation tree."""

__version__ = "0.1.0"
