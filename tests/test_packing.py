"""
Tests for the adaptive grid-scan packer (rectangle_pack.packers.scanline).

These tests focus on:
- Every placement being strictly inside the boundary
- The SEARCHING -> FITTED state transition and rotation bookkeeping
- Post-fit grid spacing for rotated / unrotated templates
- Degenerate inputs: zero-area template, nothing fits, bad parameters
"""

from __future__ import annotations

import math

import pytest

from rectangle_pack.config import CORNER_TOLERANCE
from rectangle_pack.errors import ConfigurationError
from rectangle_pack.evaluation import count_overlaps
from rectangle_pack.geometry import Boundary, BoundingBox, Containment, OrientedRectangle
from rectangle_pack.packers.scanline import (
    ScanPhase,
    ScanState,
    consume_rotation,
    enter_fitted_phase,
    grid_spacing,
    initial_scan_state,
    is_rotated_frame,
    pack,
    record_placement,
)


def _square(side: float) -> Boundary:
    return Boundary.from_coords([(0.0, 0.0), (side, 0.0), (side, side), (0.0, side)])


def _l_shape() -> Boundary:
    # 100 x 12 horizontal bar joined to an 18 x 100 vertical bar
    return Boundary.from_coords(
        [(0.0, 0.0), (100.0, 0.0), (100.0, 12.0), (18.0, 12.0), (18.0, 100.0), (0.0, 100.0)]
    )


def _assert_all_inside(boundary, placements):
    for p in placements:
        for corner in p.rectangle.corners():
            assert boundary.contains(corner, CORNER_TOLERANCE) is Containment.INSIDE


# ---------------------------------------------------------------------------
# Scan state transitions
# ---------------------------------------------------------------------------

def test_initial_state_uses_search_spacing():
    state = initial_scan_state(BoundingBox(-3.0, 0.0, 10.0, 10.0), 2.5)
    assert state.phase is ScanPhase.SEARCHING
    assert (state.step_x, state.step_y) == (2.5, 2.5)
    assert state.x_origin == -3.0


def test_enter_fitted_phase_switches_steps_and_aligns_origin():
    state = initial_scan_state(BoundingBox(0.0, 0.0, 100.0, 100.0), 5.0)
    fitted = enter_fitted_phase(state, (10.0, 20.0), box_min_x=0.0, grid_x=35.0)
    assert fitted.phase is ScanPhase.FITTED
    assert (fitted.step_x, fitted.step_y) == (10.0, 20.0)
    assert fitted.x_origin == pytest.approx(5.0)
    # The original state is untouched
    assert state.phase is ScanPhase.SEARCHING


def test_enter_fitted_phase_is_a_no_op_once_fitted():
    state = ScanState(ScanPhase.FITTED, 10.0, 10.0, 0.0)
    assert enter_fitted_phase(state, (1.0, 1.0), 0.0, 50.0) == state


def test_rotated_placement_swaps_steps_before_next_grid_point():
    state = ScanState(ScanPhase.FITTED, 10.0, 4.0, 0.0)

    state = record_placement(state, rotated=True)
    assert state.last_rotated

    state = consume_rotation(state)
    assert not state.last_rotated
    assert (state.step_x, state.step_y) == (4.0, 10.0)

    # Nothing pending: steps stay as they are
    state = consume_rotation(record_placement(state, rotated=False))
    assert (state.step_x, state.step_y) == (4.0, 10.0)


# ---------------------------------------------------------------------------
# Spacing
# ---------------------------------------------------------------------------

def test_grid_spacing_unrotated_template():
    rect = OrientedRectangle.from_bounds(0.0, 0.0, 10.0, 4.0)
    assert not is_rotated_frame(rect)
    assert grid_spacing(rect, offset=1.0) == pytest.approx((12.0, 6.0))


def test_grid_spacing_quarter_turn_swaps_dimensions():
    rect = OrientedRectangle.from_angle((0.0, 0.0), 10.0, 4.0, math.pi / 2)
    assert is_rotated_frame(rect)
    assert grid_spacing(rect, offset=1.0) == pytest.approx((6.0, 12.0))


def test_grid_spacing_half_turn_counts_as_unrotated():
    rect = OrientedRectangle.from_angle((0.0, 0.0), 10.0, 4.0, math.pi)
    assert not is_rotated_frame(rect)
    dx, dy = grid_spacing(rect, offset=0.0)
    assert dx == pytest.approx(10.0)
    assert dy == pytest.approx(4.0)


@pytest.mark.parametrize("angle_deg", [0.0, 20.0, 45.0, 70.0, 135.0, 200.0, 300.0])
def test_grid_spacing_is_positive_for_any_frame(angle_deg):
    rect = OrientedRectangle.from_angle((0.0, 0.0), 3.0, 2.0, math.radians(angle_deg))
    dx, dy = grid_spacing(rect, offset=0.0)
    assert dx > 0.0 and dy > 0.0


# ---------------------------------------------------------------------------
# Packing scenarios
# ---------------------------------------------------------------------------

def test_square_boundary_grid_scan_fills_nine_by_nine():
    boundary = _square(100.0)
    template = OrientedRectangle.from_bounds(0.0, 0.0, 10.0, 10.0)

    placements = pack(boundary, template, offset=0.0, search_spacing=5.0)

    # First fit at (10, 10); afterwards a 10-unit grid from x=0 / y=10
    assert len(placements) == 81
    assert placements[0].anchor == pytest.approx((10.0, 10.0))
    assert placements[-1].anchor == pytest.approx((90.0, 90.0))
    _assert_all_inside(boundary, placements)
    assert count_overlaps(placements) == 0


def test_square_boundary_axis_aligned_scan():
    boundary = _square(100.0)
    template = OrientedRectangle.from_bounds(0.0, 0.0, 10.0, 10.0)

    placements = pack(boundary, template, offset=0.0, search_spacing=5.0, axis_aligned=True)

    assert 0 < len(placements) <= 100
    _assert_all_inside(boundary, placements)


def test_placement_vector_moves_template_centroid_to_anchor():
    boundary = _square(100.0)
    template = OrientedRectangle.from_bounds(-50.0, 20.0, -40.0, 26.0)

    placements = pack(boundary, template, offset=1.0, search_spacing=3.0)

    assert placements
    cx, cy = template.centroid
    for p in placements:
        assert (cx + p.vector[0], cy + p.vector[1]) == pytest.approx(p.anchor)
        assert p.rectangle.centroid == pytest.approx(p.anchor)
        assert not p.rotated


def test_rotation_fallback_places_quarter_turned_rectangles():
    boundary = _l_shape()
    template = OrientedRectangle.from_bounds(0.0, 0.0, 20.0, 10.0)

    plain = pack(boundary, template, offset=0.0, search_spacing=2.0)
    rotated = pack(boundary, template, offset=0.0, search_spacing=2.0, allow_rotation=True)

    assert not any(p.rotated for p in plain)
    turned = [p for p in rotated if p.rotated]
    assert turned
    assert len(rotated) > len(plain)
    for p in turned:
        assert abs(p.rectangle.x_axis[1]) == pytest.approx(1.0)
        assert p.rectangle.centroid == pytest.approx(p.anchor)
    _assert_all_inside(boundary, rotated)


def test_next_anchor_after_rotated_placement_uses_turned_footprint():
    boundary = _l_shape()
    template = OrientedRectangle.from_bounds(0.0, 0.0, 20.0, 10.0)

    placements = pack(boundary, template, offset=0.0, search_spacing=2.0, allow_rotation=True)

    first_turned = next(i for i, p in enumerate(placements) if p.rotated)
    turned, following = placements[first_turned], placements[first_turned + 1]

    # A quarter-turned 20 x 10 rectangle is 20 tall, so the next row is 20 up
    assert turned.anchor == pytest.approx((12.0, 16.0))
    assert following.anchor == pytest.approx((12.0, 36.0))
    assert count_overlaps([turned, following]) == 0


def test_concave_boundary_placements_stay_inside():
    boundary = _l_shape()
    template = OrientedRectangle.from_angle((0.0, 0.0), 6.0, 3.0, math.radians(15.0))

    placements = pack(boundary, template, offset=0.5, search_spacing=1.5, allow_rotation=True)

    assert placements
    _assert_all_inside(boundary, placements)


def test_pack_is_deterministic():
    boundary = _l_shape()
    template = OrientedRectangle.from_bounds(0.0, 0.0, 7.0, 3.0)
    kwargs = dict(offset=0.25, search_spacing=1.0, allow_rotation=True, axis_aligned=True)

    assert pack(boundary, template, **kwargs) == pack(boundary, template, **kwargs)


def test_template_larger_than_boundary_returns_empty_list():
    boundary = _square(10.0)
    template = OrientedRectangle.from_bounds(0.0, 0.0, 15.0, 12.0)

    assert pack(boundary, template, offset=0.0, search_spacing=1.0, allow_rotation=True) == []


def test_zero_area_template_returns_empty_list():
    boundary = _square(10.0)
    template = OrientedRectangle.from_bounds(0.0, 0.0, 0.0, 0.0)

    assert pack(boundary, template, offset=0.0, search_spacing=1.0) == []


@pytest.mark.parametrize(
    "offset, search_spacing",
    [
        (0.0, 0.0),
        (0.0, -1.0),
        (-1.0, 1.0),
        (0.0, math.inf),
        (math.nan, 1.0),
    ],
)
def test_bad_parameters_fail_fast(offset, search_spacing):
    boundary = _square(10.0)
    template = OrientedRectangle.from_bounds(0.0, 0.0, 1.0, 1.0)
    with pytest.raises(ConfigurationError):
        pack(boundary, template, offset=offset, search_spacing=search_spacing)
