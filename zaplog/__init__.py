"""Structured logging primitives: typed fields, array and error fields, and an encoder registry."""

__version__ = "0.1.0"
__all__ = ["encoder", "field", "array", "error", "anyvalue"]