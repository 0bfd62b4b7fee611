"""
Major-direction finder for the Rectangle Pack project.

Given a closed polygon, find the direction its edges predominantly run in:

1. Split the polygon into its edge segments. If the polygon is drawn
   clockwise, every segment is reversed so that edges are traversed
   counter-clockwise.
2. Measure each edge's angle from the world X axis (counter-clockwise,
   `[0, 2*pi)`) and add its length to the matching angle bin. Bins are
   `2*pi / num_categories` wide.
3. The bin with the largest total length wins (lowest index on ties); its
   index times `2*pi / effective_categories` is the candidate orientation,
   where the effective count is raised to the number of segments when
   there are more segments than bins.
4. The first edge seen in the winning bin is compared against the
   candidate direction. If they differ by more than one bin width the
   candidate is mirrored to `pi - candidate`.
5. The result is folded into `[0, pi)`, since a direction and its opposite
   describe the same axis.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import logging
import math

import numpy as np

from .config import (
    BIN_SNAP_EPSILON,
    TIE_RELATIVE_TOLERANCE,
    validate_num_categories,
)
from .geometry import (
    WORLD_X_AXIS,
    Boundary,
    CurveOrientation,
    Segment,
    rotate_vector,
    signed_angle,
    vector_angle,
)

logger = logging.getLogger(__name__)

# Segments of clockwise polygons are reversed.
REFERENCE_ORIENTATION = CurveOrientation.CLOCKWISE


@dataclass
class AngleHistogram:
    """
    Edge length accumulated per angle bin.

    - lengths[i]: total length of edges whose angle falls in bin i
    - first_segment[i]: index of the first edge seen in bin i, or -1
    - bin_width: angular width of a bin (radians)
    - effective_categories: max(num_categories, number of segments)
    """

    lengths: np.ndarray
    first_segment: np.ndarray
    bin_width: float
    effective_categories: int

    @property
    def num_categories(self) -> int:
        return int(self.lengths.shape[0])


@dataclass(frozen=True)
class MajorDirection:
    """Result of `analyze_major_direction`."""

    angle: float
    bin_index: int
    bin_length: float
    candidate_angle: float
    corrected: bool
    histogram: AngleHistogram

    @property
    def angle_deg(self) -> float:
        return math.degrees(self.angle)


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

def normalized_segments(boundary: Boundary) -> List[Segment]:
    """
    Edge segments of `boundary`, all reversed if the polygon is clockwise.
    """
    segments = boundary.segments()
    if boundary.orientation is REFERENCE_ORIENTATION:
        segments = [seg.reversed() for seg in segments]
    return segments


def classify_angle(angle: float, bin_width: float, num_categories: int) -> int:
    """
    Map an angle in `[0, 2*pi)` to its bin index.

    Angles a hair below a bin edge snap onto it, and an angle that snaps to
    `2*pi` wraps around to bin 0.
    """
    index = int(math.floor(angle / bin_width + BIN_SNAP_EPSILON))
    return index % num_categories


def build_histogram(
    segments: Sequence[Segment],
    num_categories: int,
    debug: bool = False,
) -> AngleHistogram:
    """
    Accumulate segment lengths into `num_categories` angle bins.

    The bin width always comes from the requested `num_categories`; the
    effective count (raised to the number of segments when that is larger)
    is kept on the histogram for turning the winning bin index back into
    an angle; it does not resize the bins.
    """
    validate_num_categories(num_categories)
    num_categories = int(num_categories)

    bin_width = 2.0 * math.pi / num_categories
    lengths = np.zeros(num_categories, dtype=float)
    first_segment = np.full(num_categories, -1, dtype=int)

    for i, seg in enumerate(segments):
        angle = signed_angle(WORLD_X_AXIS, seg.vector)
        category = classify_angle(angle, bin_width, num_categories)
        if first_segment[category] < 0:
            first_segment[category] = i
        lengths[category] += seg.length

        if debug:
            logger.info(
                "segment %d: angle %.6f deg, category %d",
                i, math.degrees(angle), category,
            )

    return AngleHistogram(
        lengths=lengths,
        first_segment=first_segment,
        bin_width=bin_width,
        effective_categories=max(num_categories, len(segments)),
    )


def argmax_first(lengths: np.ndarray, rel_tol: float = TIE_RELATIVE_TOLERANCE) -> int:
    """
    Index of the largest entry; the lowest index wins among entries within
    `rel_tol` of the maximum.
    """
    peak = float(lengths.max())
    candidates = np.flatnonzero(lengths >= peak - rel_tol * abs(peak))
    return int(candidates[0])


def correct_orientation(
    candidate: float,
    segment_vector: Sequence[float],
    bin_width: float,
) -> Tuple[float, bool]:
    """
    Check `candidate` against an edge that voted for it.

    The world X axis is rotated by `candidate`; if the edge direction is
    more than one bin width away from that ray, the candidate is mirrored
    to `pi - candidate`. Returns the angle and whether it was corrected.
    """
    check_direction = rotate_vector(WORLD_X_AXIS, candidate)
    if vector_angle(segment_vector, check_direction) > bin_width:
        return math.pi - candidate, True
    return candidate, False


def fold_half_turn(angle: float) -> float:
    """Fold an angle into `[0, pi)`."""
    folded = math.fmod(angle, math.pi)
    if folded < 0.0:
        folded += math.pi
    if folded >= math.pi:
        folded = 0.0
    return folded


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def analyze_major_direction(
    boundary: Boundary,
    num_categories: int,
    debug: bool = False,
) -> MajorDirection:
    """
    Find the major direction of `boundary` and return the full breakdown.

    Parameters
    ----------
    boundary:
        Closed polygon to analyse. Assumed valid (see `Boundary`).
    num_categories:
        Number of angle bins over the full turn. Must be >= 1.
    debug:
        Log every segment's angle and bin plus the winning bin. The result
        is the same either way.

    Raises
    ------
    ConfigurationError
        If `num_categories` is not a finite integer >= 1.
    """
    validate_num_categories(num_categories)

    segments = normalized_segments(boundary)
    histogram = build_histogram(segments, num_categories, debug=debug)

    argmax = argmax_first(histogram.lengths)
    peak = float(histogram.lengths[argmax])
    if debug:
        logger.info("max %.6f", peak)
        logger.info("argmax %d", argmax)

    # Bin index back to an angle uses the effective count, not the bin width
    candidate = argmax * 2.0 * math.pi / histogram.effective_categories
    voter = segments[int(histogram.first_segment[argmax])]
    angle, corrected = correct_orientation(candidate, voter.vector, histogram.bin_width)

    return MajorDirection(
        angle=fold_half_turn(angle),
        bin_index=argmax,
        bin_length=peak,
        candidate_angle=candidate,
        corrected=corrected,
        histogram=histogram,
    )


def find_major_direction(
    boundary: Boundary,
    num_categories: int,
    debug: bool = False,
) -> float:
    """
    Major direction of `boundary` in radians, in `[0, pi)`.

    Thin wrapper around `analyze_major_direction`.
    """
    return analyze_major_direction(boundary, num_categories, debug=debug).angle


__all__ = [
    "REFERENCE_ORIENTATION",
    "AngleHistogram",
    "MajorDirection",
    "normalized_segments",
    "classify_angle",
    "build_histogram",
    "argmax_first",
    "correct_orientation",
    "fold_half_turn",
    "analyze_major_direction",
    "find_major_direction",
]
