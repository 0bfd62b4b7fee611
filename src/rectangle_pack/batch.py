"""
Batch orchestration for the Rectangle Pack project.

This module glues the core algorithms to lists of inputs:

- `pack_boundaries` packs one or more template rectangles into every
  boundary and flattens the results into rectangles / anchor points /
  translation vectors, in input order.
- `major_directions` runs the major-direction finder over many polygons and
  returns a table.
- `placements_to_df` turns a packing result into a DataFrame for export.

Each boundary is processed independently. Invalid boundaries or templates,
and geometry failures while packing one boundary, are reported as warnings
and the batch carries on. Configuration errors are raised before any work
is done.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Union

import logging
import math

import pandas as pd
from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry

from .config import (
    DEFAULT_NUM_CATEGORIES,
    DEFAULT_OFFSET,
    DEFAULT_SEARCH_SPACING,
    validate_num_categories,
    validate_packing_params,
)
from .direction import analyze_major_direction
from .errors import ConfigurationError, InvalidInputError
from .geometry import Boundary, OrientedRectangle, Point2D, Vector2D
from .packers.scanline import Placement, pack

logger = logging.getLogger(__name__)

BoundaryLike = Union[Boundary, BaseGeometry]


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------

@dataclass
class PackingResult:
    """
    Flattened output of a batch packing run.

    `placements[i]` was placed in boundary `boundary_indices[i]`; the
    `rectangles`, `points` and `vectors` properties are parallel views of
    `placements`.
    """

    placements: List[Placement] = field(default_factory=list)
    boundary_indices: List[int] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def rectangles(self) -> List[OrientedRectangle]:
        return [p.rectangle for p in self.placements]

    @property
    def points(self) -> List[Point2D]:
        return [p.anchor for p in self.placements]

    @property
    def vectors(self) -> List[Vector2D]:
        return [p.vector for p in self.placements]

    def for_boundary(self, index: int) -> List[Placement]:
        return [p for p, b in zip(self.placements, self.boundary_indices) if b == index]

    def __len__(self) -> int:
        return len(self.placements)


def _as_boundary(item: BoundaryLike) -> Boundary:
    if isinstance(item, Boundary):
        return item
    return Boundary.from_geometry(item)


def _warn(result: PackingResult, message: str) -> None:
    logger.warning(message)
    result.warnings.append(message)


# ---------------------------------------------------------------------------
# Packing
# ---------------------------------------------------------------------------

def pack_boundaries(
    boundaries: Iterable[BoundaryLike],
    templates: Union[OrientedRectangle, Sequence[OrientedRectangle]],
    offset: float = DEFAULT_OFFSET,
    search_spacing: float = DEFAULT_SEARCH_SPACING,
    allow_rotation: bool = False,
    axis_aligned: bool = False,
    orientations: Optional[Sequence[float]] = None,
) -> PackingResult:
    """
    Pack every template into every boundary.

    Parameters
    ----------
    boundaries:
        `Boundary` objects or Shapely geometries accepted by
        `Boundary.from_geometry`.
    templates:
        A single rectangle or a sequence of rectangles. Each template is
        packed into each boundary independently, in order.
    offset, search_spacing, allow_rotation, axis_aligned:
        Passed through to `packers.scanline.pack`.
    orientations:
        Optional per-boundary angle (radians). The templates are rotated
        about their centroid by this angle before packing that boundary,
        e.g. to follow `find_major_direction`.

    Returns
    -------
    PackingResult
    """
    validate_packing_params(offset, search_spacing)

    if isinstance(templates, OrientedRectangle):
        templates = [templates]
    templates = list(templates)
    boundaries = list(boundaries)

    if orientations is not None and len(orientations) != len(boundaries):
        raise ConfigurationError(
            f"Expected one orientation per boundary ({len(boundaries)}), got {len(orientations)}"
        )

    result = PackingResult()

    for b_idx, item in enumerate(boundaries):
        try:
            boundary = _as_boundary(item)
        except InvalidInputError as exc:
            _warn(result, f"Boundary {b_idx}: skipped, {exc}")
            continue

        for t_idx, template in enumerate(templates):
            if not template.is_valid:
                _warn(result, f"Boundary {b_idx}: template {t_idx} is invalid, skipped")
                continue

            if orientations is not None and orientations[b_idx]:
                template = template.rotate(orientations[b_idx], template.centroid)

            try:
                placements = pack(
                    boundary,
                    template,
                    offset=offset,
                    search_spacing=search_spacing,
                    allow_rotation=allow_rotation,
                    axis_aligned=axis_aligned,
                )
            except ConfigurationError:
                raise
            except (ValueError, GEOSException) as exc:
                _warn(result, f"Boundary {b_idx}: template {t_idx} failed, {exc}")
                continue

            result.placements.extend(placements)
            result.boundary_indices.extend([b_idx] * len(placements))

        logger.info("Boundary %d: %d placement(s) so far", b_idx, len(result.for_boundary(b_idx)))

    return result


def placements_to_df(result: PackingResult) -> pd.DataFrame:
    """
    One row per placement with anchor, translation vector, rectangle frame
    and corner coordinates as WKT.
    """
    records = []
    for placement, b_idx in zip(result.placements, result.boundary_indices):
        rect = placement.rectangle
        records.append(
            {
                "boundary": b_idx,
                "anchor_x": placement.anchor[0],
                "anchor_y": placement.anchor[1],
                "vector_x": placement.vector[0],
                "vector_y": placement.vector[1],
                "width": rect.width,
                "height": rect.height,
                "angle_deg": math.degrees(rect.angle),
                "rotated": placement.rotated,
                "wkt": rect.to_polygon().wkt,
            }
        )

    columns = [
        "boundary", "anchor_x", "anchor_y", "vector_x", "vector_y",
        "width", "height", "angle_deg", "rotated", "wkt",
    ]
    return pd.DataFrame(records, columns=columns)


# ---------------------------------------------------------------------------
# Major directions
# ---------------------------------------------------------------------------

def major_directions(
    polygons: Iterable[BoundaryLike],
    num_categories: int = DEFAULT_NUM_CATEGORIES,
    debug: bool = False,
) -> pd.DataFrame:
    """
    Find the major direction of every polygon.

    Invalid polygons are logged and get angle 0.0 with `valid=False`.

    Returns
    -------
    pd.DataFrame
        Columns: boundary, angle, angle_deg, bin_index, valid
    """
    validate_num_categories(num_categories)

    records = []
    for i, item in enumerate(polygons):
        try:
            boundary = _as_boundary(item)
        except InvalidInputError as exc:
            logger.warning("Polygon %d: input polygon is invalid, too short, or not closed (%s)", i, exc)
            records.append({"boundary": i, "angle": 0.0, "angle_deg": 0.0, "bin_index": -1, "valid": False})
            continue

        found = analyze_major_direction(boundary, num_categories, debug=debug)
        records.append(
            {
                "boundary": i,
                "angle": found.angle,
                "angle_deg": found.angle_deg,
                "bin_index": found.bin_index,
                "valid": True,
            }
        )

    columns = ["boundary", "angle", "angle_deg", "bin_index", "valid"]
    return pd.DataFrame(records, columns=columns)


__all__ = [
    "BoundaryLike",
    "PackingResult",
    "pack_boundaries",
    "placements_to_df",
    "major_directions",
]
