"""Structural model interchange between the canonical schema, E2K text and RAM."""

__version__ = "0.1.0"
