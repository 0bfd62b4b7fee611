"""
Exception types for the Rectangle Pack project.

- `InvalidInputError`: a degenerate / invalid / non-closed boundary or
  rectangle. Batch code reports it as a warning and moves on.
- `ConfigurationError`: parameters that would make an algorithm loop forever
  or divide by zero (e.g. `search_spacing <= 0`, `num_categories < 1`).

Both derive from `ValueError` so callers that already guard against bad
values keep working.
"""

from __future__ import annotations


class RectanglePackError(ValueError):
    """Base class for all errors raised by this package."""


class InvalidInputError(RectanglePackError):
    """Raised when an input curve or rectangle is geometrically invalid."""


class ConfigurationError(RectanglePackError):
    """Raised when algorithm parameters are out of range."""


__all__ = [
    "RectanglePackError",
    "InvalidInputError",
    "ConfigurationError",
]
