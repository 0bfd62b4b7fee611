"""
Adaptive grid-scan packer for the Rectangle Pack project.

This module fits as many copies of a template rectangle as it can inside a
closed boundary. It is a greedy scanline heuristic, not an optimal packer:

- The boundary's bounding box is scanned row by row (Y outer, X inner),
  starting at the box minimum.
- While no rectangle has fit yet (SEARCHING), the grid step is the coarse
  `search_spacing`.
- After the first fit (FITTED), the step switches to the rectangle's own
  footprint plus twice the clearance `offset`, and the X origin of later
  rows is aligned to the column of the first fit.
- At each grid point the template is centred on the anchor point and kept
  only if all four corners lie strictly inside the boundary. With
  `allow_rotation`, a rectangle that does not fit in the FITTED phase is
  retried once rotated by `ROTATION_CANDIDATE_ANGLE` about the anchor.

Placed rectangles are never checked against each other; see
`evaluation.count_overlaps` to measure that.

The scan state is an immutable `ScanState` advanced by pure transition
functions, so each step of the scan can be tested in isolation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple

import logging
import math

from ..config import (
    ANCHOR_TOLERANCE,
    CORNER_TOLERANCE,
    ROTATION_CANDIDATE_ANGLE,
    ROTATION_THRESHOLD,
    validate_packing_params,
)
from ..geometry import (
    WORLD_X_AXIS,
    Boundary,
    BoundingBox,
    Containment,
    OrientedRectangle,
    Point2D,
    Vector2D,
    unitize,
    vector_angle,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Output type
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Placement:
    """
    One accepted rectangle:

    - rectangle: the placed rectangle (fully inside the boundary)
    - anchor: the grid point it was centred on
    - vector: translation that moved the template's centroid onto `anchor`
    - rotated: True if the fallback rotation was needed to make it fit
    """

    rectangle: OrientedRectangle
    anchor: Point2D
    vector: Vector2D
    rotated: bool = False


# ---------------------------------------------------------------------------
# Scan state machine
# ---------------------------------------------------------------------------

class ScanPhase(Enum):
    SEARCHING = "searching"
    FITTED = "fitted"


@dataclass(frozen=True)
class ScanState:
    """
    Immutable state of the grid scan.

    step_x / step_y are the active grid steps, x_origin is where each new
    row starts, and last_rotated marks a placement that needed the fallback
    rotation until the steps have been swapped for it.
    """

    phase: ScanPhase
    step_x: float
    step_y: float
    x_origin: float
    last_rotated: bool = False

    @property
    def searching(self) -> bool:
        return self.phase is ScanPhase.SEARCHING


def initial_scan_state(box: BoundingBox, search_spacing: float) -> ScanState:
    return ScanState(
        phase=ScanPhase.SEARCHING,
        step_x=search_spacing,
        step_y=search_spacing,
        x_origin=box.min_x,
    )


def enter_fitted_phase(
    state: ScanState,
    spacing: Tuple[float, float],
    box_min_x: float,
    grid_x: float,
) -> ScanState:
    """
    SEARCHING -> FITTED transition on the first accepted placement.

    The footprint `spacing` replaces the search steps, and later rows start
    on the column lattice through `grid_x` (the grid coordinate of the first
    fit), shifted back as close to `box_min_x` as possible.
    """
    if not state.searching:
        return state
    step_x, step_y = spacing
    columns_before = math.floor((grid_x - box_min_x) / step_x)
    return replace(
        state,
        phase=ScanPhase.FITTED,
        step_x=step_x,
        step_y=step_y,
        x_origin=grid_x - columns_before * step_x,
    )


def record_placement(state: ScanState, rotated: bool) -> ScanState:
    """
    Update the state after an accepted placement.

    A rotated placement raises the `last_rotated` flag; it is consumed by
    `consume_rotation` before the scan moves to the next grid point.
    """
    if rotated:
        state = replace(state, last_rotated=True)
    return state


def consume_rotation(state: ScanState) -> ScanState:
    """
    Swap the X/Y steps if the placement just recorded was rotated.

    The quarter-turned footprint occupies the swapped extents, so the next
    grid point must already use them. The flag is cleared afterwards.
    """
    if not state.last_rotated:
        return state
    return replace(state, step_x=state.step_y, step_y=state.step_x, last_rotated=False)


# ---------------------------------------------------------------------------
# Spacing helpers
# ---------------------------------------------------------------------------

def is_rotated_frame(rect: OrientedRectangle, threshold: float = ROTATION_THRESHOLD) -> bool:
    """
    True if the rectangle's X axis is closer to the world Y axis than
    `threshold` allows for an unrotated frame. Axes pointing along -X count
    as unrotated.
    """
    angle = vector_angle(rect.x_axis, WORLD_X_AXIS)
    return min(angle, math.pi - angle) >= threshold


def axis_components(rect: OrientedRectangle) -> Tuple[float, float]:
    """
    World-axis components of the rectangle frame used to scale grid steps.

    Unrotated frames use the X axis' x component and the Y axis' y
    component; rotated frames use the cross components, since width then
    runs along world Y.
    """
    if is_rotated_frame(rect):
        return abs(rect.y_axis[0]), abs(rect.x_axis[1])
    return abs(rect.x_axis[0]), abs(rect.y_axis[1])


def grid_spacing(rect: OrientedRectangle, offset: float) -> Tuple[float, float]:
    """
    Post-fit grid steps: the rectangle footprint plus `offset` clearance on
    each side, projected onto the world axes.
    """
    ax, ay = axis_components(rect)
    if is_rotated_frame(rect):
        return (2.0 * offset + rect.height) * ax, (2.0 * offset + rect.width) * ay
    return (2.0 * offset + rect.width) * ax, (2.0 * offset + rect.height) * ay


def _anchor_shift(state: ScanState, unit: Optional[Vector2D]) -> Vector2D:
    if unit is None:
        return (0.0, 0.0)
    return (unit[0] * state.step_x, unit[1] * state.step_y)


def _fits(boundary: Boundary, rect: OrientedRectangle) -> bool:
    return boundary.contains_all(rect.corners(), CORNER_TOLERANCE)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def pack(
    boundary: Boundary,
    template: OrientedRectangle,
    offset: float,
    search_spacing: float,
    allow_rotation: bool = False,
    axis_aligned: bool = False,
) -> List[Placement]:
    """
    Greedily pack copies of `template` inside `boundary`.

    Parameters
    ----------
    boundary:
        Closed curve to pack into.
    template:
        Rectangle to copy. Its orientation is kept; only its position (and
        with `allow_rotation`, possibly a quarter turn) changes.
    offset:
        Clearance added on every side of the footprint when computing the
        post-fit grid step. Must be >= 0.
    search_spacing:
        Grid step used until the first rectangle fits. Must be > 0.
    allow_rotation:
        Retry rectangles that do not fit with a single fallback rotation.
        Only used once the first unrotated rectangle has been placed.
    axis_aligned:
        Shift each grid point along the unitized frame components, scaled
        by the current grid steps, before testing it as an anchor. When
        False the grid point itself is the anchor.

    Returns
    -------
    List[Placement]
        Accepted placements in scan order. An empty list means nothing fit
        (or the template was invalid); it is not an error.

    Raises
    ------
    ConfigurationError
        If `search_spacing <= 0` or `offset < 0`.
    """
    validate_packing_params(offset, search_spacing)

    if not template.is_valid:
        logger.warning("Skipping invalid template rectangle: %r", template)
        return []

    box = boundary.bounding_box
    spacing = grid_spacing(template, offset)
    unit = unitize(axis_components(template)) if axis_aligned else None
    centroid = template.centroid

    state = initial_scan_state(box, search_spacing)
    placements: List[Placement] = []

    y = box.min_y
    while y < box.max_y:
        x = state.x_origin
        while x < box.max_x:
            shift = _anchor_shift(state, unit)
            anchor = (x + shift[0], y + shift[1])

            if boundary.contains(anchor, ANCHOR_TOLERANCE) is Containment.INSIDE:
                vector = (anchor[0] - centroid[0], anchor[1] - centroid[1])
                rect = template.translate(vector)
                fits = _fits(boundary, rect)
                rotated = False

                if not fits and allow_rotation and not state.searching:
                    rect = rect.rotate(ROTATION_CANDIDATE_ANGLE, anchor)
                    fits = _fits(boundary, rect)
                    rotated = fits

                if fits:
                    if state.searching:
                        state = enter_fitted_phase(state, spacing, box.min_x, x)
                        logger.debug(
                            "First fit at (%.4f, %.4f); grid steps now (%.4f, %.4f)",
                            anchor[0], anchor[1], state.step_x, state.step_y,
                        )
                    placements.append(Placement(rect, anchor, vector, rotated))
                    state = record_placement(state, rotated)

            state = consume_rotation(state)
            x += state.step_x
        y += state.step_y

    logger.debug("Packed %d rectangle(s) into boundary of area %.4f", len(placements), boundary.area)
    return placements


__all__ = [
    "Placement",
    "ScanPhase",
    "ScanState",
    "initial_scan_state",
    "enter_fitted_phase",
    "record_placement",
    "consume_rotation",
    "is_rotated_frame",
    "axis_components",
    "grid_spacing",
    "pack",
]
