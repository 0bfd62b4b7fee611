"""
Global configuration for the Rectangle Pack project.

This module centralizes:

- Project-root and data paths
- Containment tolerances used by the packing engine
- Fixed angles / thresholds of the packing and orientation algorithms
- Default parameters of the packing component
- Parameter validation helpers

All of these are kept in one place so that experiments are easy to
reproduce and configuration changes don't require hunting through
multiple files.
"""

from __future__ import annotations

from pathlib import Path

import math

from .errors import ConfigurationError


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

# This file lives in: <repo>/src/rectangle_pack/config.py
# Project root is therefore two levels up from here.
PROJECT_ROOT: Path = Path(__file__).resolve().parents[2]

DATA_DIR: Path = PROJECT_ROOT / "data"
DATA_RAW_DIR: Path = DATA_DIR / "raw"
DATA_OUTPUTS_DIR: Path = DATA_DIR / "outputs"


# ---------------------------------------------------------------------------
# Containment tolerances
# ---------------------------------------------------------------------------

# Candidate anchor points closer than this to the boundary count as
# "on boundary" and are skipped.
ANCHOR_TOLERANCE: float = 0.1

# Every rectangle corner must be inside the boundary by at least this much.
CORNER_TOLERANCE: float = 1e-5

# Below this area a boundary is considered degenerate.
ZERO_TOLERANCE: float = 1e-12


# ---------------------------------------------------------------------------
# Packing engine constants
# ---------------------------------------------------------------------------

# If the rectangle's local X axis is within this angle (radians) of the
# world X axis (either direction) it is treated as unrotated when deriving
# the post-fit grid spacing.
ROTATION_THRESHOLD: float = 0.5

# Single fallback rotation tried when an unrotated rectangle does not fit.
ROTATION_CANDIDATE_ANGLE: float = math.pi / 2.0

# Defaults of the packing component.
DEFAULT_OFFSET: float = 5.0
DEFAULT_SEARCH_SPACING: float = 1.0


# ---------------------------------------------------------------------------
# Major-direction constants
# ---------------------------------------------------------------------------

DEFAULT_NUM_CATEGORIES: int = 36

# Angles this close (in units of bin width) below a bin edge are snapped
# onto the edge, so that e.g. 45.0 degrees computed as 44.99999999 still
# lands in the 45 degree bin.
BIN_SNAP_EPSILON: float = 1e-9

# Bin totals within this relative distance of the maximum count as a tie;
# ties go to the lowest bin index.
TIE_RELATIVE_TOLERANCE: float = 1e-9


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_packing_params(offset: float, search_spacing: float) -> None:
    """
    Fail fast on packing parameters that would stall or break the grid scan.

    Raises
    ------
    ConfigurationError
        If `search_spacing` is not a positive finite number or `offset` is
        negative / not finite.
    """
    if not math.isfinite(search_spacing) or search_spacing <= 0.0:
        raise ConfigurationError(
            f"search_spacing must be a positive finite number, got {search_spacing}"
        )
    if not math.isfinite(offset) or offset < 0.0:
        raise ConfigurationError(f"offset must be a finite number >= 0, got {offset}")


def validate_num_categories(num_categories: int) -> None:
    """
    Ensure the angle histogram has a finite, whole number of bins (>= 1).
    """
    if (
        not math.isfinite(num_categories)
        or int(num_categories) != num_categories
        or num_categories < 1
    ):
        raise ConfigurationError(
            f"num_categories must be an integer >= 1, got {num_categories}"
        )


__all__ = [
    # Paths
    "PROJECT_ROOT",
    "DATA_DIR",
    "DATA_RAW_DIR",
    "DATA_OUTPUTS_DIR",
    # Tolerances
    "ANCHOR_TOLERANCE",
    "CORNER_TOLERANCE",
    "ZERO_TOLERANCE",
    # Packing
    "ROTATION_THRESHOLD",
    "ROTATION_CANDIDATE_ANGLE",
    "DEFAULT_OFFSET",
    "DEFAULT_SEARCH_SPACING",
    # Major direction
    "DEFAULT_NUM_CATEGORIES",
    "BIN_SNAP_EPSILON",
    "TIE_RELATIVE_TOLERANCE",
    # Validation
    "validate_packing_params",
    "validate_num_categories",
]
