"""
Packing strategies for the Rectangle Pack project.

- Adaptive grid scan (`scanline.py`): greedy first-fit-then-switch-spacing
  packing of a single oriented rectangle inside a closed boundary.

High-level code (e.g. `rectangle_pack.batch`) should depend on the `pack`
entry point here rather than on scan internals.
"""

from .scanline import Placement, pack

__all__ = [
    "Placement",
    "pack",
]
