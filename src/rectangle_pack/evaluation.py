"""
Evaluation utilities for the Rectangle Pack project.

The packer guarantees that every placed rectangle lies inside its boundary,
but it never checks rectangles against each other. This module measures
both, plus how much of the boundary ended up covered:

1. `verify_containment`: indices of placements with a corner that is not
   strictly inside the boundary (should always be empty).
2. `has_any_overlap` / `count_overlaps`: pairs of placed rectangles whose
   interiors intersect. Rectangles that only touch along an edge or at a
   corner do not count.
3. `fill_ratio`: placed area divided by boundary area. Overlapping
   rectangles are counted once per rectangle, so this can exceed 1.
4. `summarize_packing`: one table row per boundary.
"""

from __future__ import annotations

from typing import List, Sequence

import pandas as pd
from shapely.strtree import STRtree

from .config import CORNER_TOLERANCE
from .geometry import Boundary
from .packers.scanline import Placement


# Type alias for clarity
SummaryTable = pd.DataFrame


# ---------------------------------------------------------------------------
# Invariant checks
# ---------------------------------------------------------------------------

def verify_containment(
    boundary: Boundary,
    placements: Sequence[Placement],
    tolerance: float = CORNER_TOLERANCE,
) -> List[int]:
    """
    Return the indices of placements that are not fully inside `boundary`.
    """
    return [
        i
        for i, placement in enumerate(placements)
        if not boundary.contains_all(placement.rectangle.corners(), tolerance)
    ]


def _overlapping_pairs(placements: Sequence[Placement]) -> List[tuple]:
    polys = [p.rectangle.to_polygon() for p in placements]
    if len(polys) < 2:
        return []
    index = STRtree(polys)
    pairs = []
    for i, poly in enumerate(polys):
        for j in index.query(poly):
            j = int(j)
            if j <= i:
                continue
            if poly.intersects(polys[j]) and not poly.touches(polys[j]):
                pairs.append((i, j))
    return pairs


def has_any_overlap(placements: Sequence[Placement]) -> bool:
    """
    Check whether any two placed rectangles have a *true* overlap.

    Rectangles that only touch along edges or points are considered OK.
    """
    return bool(_overlapping_pairs(placements))


def count_overlaps(placements: Sequence[Placement]) -> int:
    """Number of overlapping rectangle pairs."""
    return len(_overlapping_pairs(placements))


# ---------------------------------------------------------------------------
# Coverage
# ---------------------------------------------------------------------------

def fill_ratio(boundary: Boundary, placements: Sequence[Placement]) -> float:
    """
    Sum of placed rectangle areas over the boundary area.
    """
    placed = sum(p.rectangle.area for p in placements)
    return float(placed / boundary.area)


def summarize_packing(
    boundaries: Sequence[Boundary],
    placements_per_boundary: Sequence[Sequence[Placement]],
) -> SummaryTable:
    """
    Build a per-boundary summary table.

    Returns
    -------
    SummaryTable (pd.DataFrame)
        Columns:
        - boundary: index of the boundary
        - area: boundary area
        - count: number of placements
        - rotated: number of placements that needed the fallback rotation
        - fill_ratio: placed area / boundary area
        - overlaps: number of overlapping placement pairs
        - escaped: number of placements failing the containment check
    """
    if len(boundaries) != len(placements_per_boundary):
        raise ValueError(
            "boundaries and placements_per_boundary must have the same length, "
            f"got {len(boundaries)} and {len(placements_per_boundary)}"
        )

    records = []
    for i, (boundary, placements) in enumerate(zip(boundaries, placements_per_boundary)):
        records.append(
            {
                "boundary": i,
                "area": boundary.area,
                "count": len(placements),
                "rotated": sum(1 for p in placements if p.rotated),
                "fill_ratio": fill_ratio(boundary, placements),
                "overlaps": count_overlaps(placements),
                "escaped": len(verify_containment(boundary, placements)),
            }
        )

    columns = ["boundary", "area", "count", "rotated", "fill_ratio", "overlaps", "escaped"]
    return pd.DataFrame(records, columns=columns)


__all__ = [
    "SummaryTable",
    "verify_containment",
    "has_any_overlap",
    "count_overlaps",
    "fill_ratio",
    "summarize_packing",
]
