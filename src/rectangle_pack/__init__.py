"""
Rectangle Pack – boundary packing and polygon orientation

This package contains the geometry, packing and orientation logic used by
architectural / packing layout tools:

- `packers.scanline` fits copies of an oriented rectangle inside a closed
  boundary with an adaptive grid scan.
- `direction` finds the dominant edge direction ("major axis") of a polygon.

See `batch` for multi-boundary orchestration and `utils` for I/O and plotting.
"""

__all__ = []

__version__ = "0.1.0"
