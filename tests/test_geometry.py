"""
Tests for rectangle_pack.geometry

These tests focus on:
- Vector helpers (unitize, cross product, angles)
- Boundary construction, containment classification and segments
- OrientedRectangle corners, centroid and immutable transforms
"""

from __future__ import annotations

import math

import numpy as np
import pytest
from shapely.geometry import LineString, LinearRing, Point, Polygon

from rectangle_pack.errors import InvalidInputError
from rectangle_pack.geometry import (
    Boundary,
    Containment,
    CurveOrientation,
    OrientedRectangle,
    Segment,
    cross2d,
    signed_angle,
    unitize,
    vector_angle,
)


SQUARE = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]


# ---------------------------------------------------------------------------
# Vector helpers
# ---------------------------------------------------------------------------

def test_unitize_scales_to_unit_length():
    x, y = unitize((3.0, 4.0))
    assert x == pytest.approx(0.6)
    assert y == pytest.approx(0.8)


def test_unitize_rejects_zero_vector():
    with pytest.raises(ValueError):
        unitize((0.0, 0.0))


def test_cross2d_sign_follows_turn_direction():
    assert cross2d((1.0, 0.0), (0.0, 1.0)) == pytest.approx(1.0)
    assert cross2d((1.0, 0.0), (0.0, -1.0)) == pytest.approx(-1.0)


@pytest.mark.parametrize(
    "vector, expected",
    [
        ((1.0, 0.0), 0.0),
        ((0.0, 1.0), math.pi / 2),
        ((-1.0, 0.0), math.pi),
        ((0.0, -1.0), 3 * math.pi / 2),
        ((1.0, -1.0), 7 * math.pi / 4),
    ],
)
def test_signed_angle_is_counter_clockwise_full_turn(vector, expected):
    assert signed_angle((1.0, 0.0), vector) == pytest.approx(expected)


def test_vector_angle_is_unsigned():
    assert vector_angle((1.0, 0.0), (0.0, -2.0)) == pytest.approx(math.pi / 2)
    assert vector_angle((1.0, 0.0), (-1.0, 0.0)) == pytest.approx(math.pi)


# ---------------------------------------------------------------------------
# Boundary
# ---------------------------------------------------------------------------

def test_boundary_bounding_box_and_area():
    boundary = Boundary.from_coords(SQUARE)
    box = boundary.bounding_box
    assert (box.min_x, box.min_y, box.max_x, box.max_y) == (0.0, 0.0, 10.0, 10.0)
    assert box.width == 10.0
    assert boundary.area == pytest.approx(100.0)


def test_boundary_containment_with_tolerance():
    boundary = Boundary.from_coords(SQUARE)
    assert boundary.contains((5.0, 5.0), 0.1) is Containment.INSIDE
    assert boundary.contains((20.0, 5.0), 0.1) is Containment.OUTSIDE
    assert boundary.contains((10.0, 5.0), 0.1) is Containment.ON_BOUNDARY
    # Inside, but closer to the curve than the tolerance
    assert boundary.contains((9.95, 5.0), 0.1) is Containment.ON_BOUNDARY
    assert boundary.contains((9.95, 5.0), 1e-5) is Containment.INSIDE


def test_boundary_orientation():
    assert Boundary.from_coords(SQUARE).orientation is CurveOrientation.COUNTER_CLOCKWISE
    assert Boundary.from_coords(SQUARE[::-1]).orientation is CurveOrientation.CLOCKWISE


def test_boundary_segments_follow_vertex_order_and_skip_repeats():
    coords = [(0.0, 0.0), (10.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]
    segments = Boundary.from_coords(coords).segments()
    assert len(segments) == 4
    assert segments[0] == Segment((0.0, 0.0), (10.0, 0.0))
    assert segments[-1].end == (0.0, 0.0)
    assert sum(s.length for s in segments) == pytest.approx(40.0)


def test_segment_reversed_swaps_ends():
    seg = Segment((0.0, 0.0), (3.0, 4.0))
    rev = seg.reversed()
    assert rev.start == (3.0, 4.0)
    assert rev.vector == (-3.0, -4.0)
    assert rev.length == pytest.approx(5.0)


@pytest.mark.parametrize(
    "geom",
    [
        Polygon(SQUARE),
        LinearRing(SQUARE),
        LineString(SQUARE + [SQUARE[0]]),
    ],
)
def test_boundary_from_geometry_accepts_closed_curves(geom):
    assert Boundary.from_geometry(geom).area == pytest.approx(100.0)


@pytest.mark.parametrize(
    "geom",
    [
        LineString(SQUARE),                                    # not closed
        Polygon([(0, 0), (10, 10), (10, 0), (0, 10)]),         # bow-tie
        Polygon([(0, 0), (5, 0), (10, 0)]),                    # zero area
        Point(0.0, 0.0),
        None,
    ],
)
def test_boundary_from_geometry_rejects_invalid_input(geom):
    with pytest.raises(InvalidInputError):
        Boundary.from_geometry(geom)


def test_boundary_from_coords_needs_three_vertices():
    with pytest.raises(InvalidInputError):
        Boundary.from_coords([(0.0, 0.0), (1.0, 1.0)])


# ---------------------------------------------------------------------------
# OrientedRectangle
# ---------------------------------------------------------------------------

def test_rectangle_corners_and_centroid():
    rect = OrientedRectangle.from_bounds(1.0, 2.0, 5.0, 4.0)
    expected = np.array([[1.0, 2.0], [5.0, 2.0], [5.0, 4.0], [1.0, 4.0]])
    assert np.allclose(rect.corners(), expected)
    assert rect.centroid == pytest.approx((3.0, 3.0))
    assert rect.area == pytest.approx(8.0)
    assert rect.is_valid


def test_rectangle_translate_returns_new_instance():
    rect = OrientedRectangle.from_bounds(0.0, 0.0, 2.0, 1.0)
    moved = rect.translate((3.0, -1.0))
    assert moved is not rect
    assert rect.origin == (0.0, 0.0)
    assert moved.origin == (3.0, -1.0)
    assert moved.width == rect.width and moved.height == rect.height


def test_rectangle_rotate_about_centroid_keeps_centroid():
    rect = OrientedRectangle.from_bounds(0.0, 0.0, 4.0, 2.0)
    turned = rect.rotate(math.pi / 2, rect.centroid)
    assert turned.centroid == pytest.approx(rect.centroid)
    assert turned.x_axis == pytest.approx((0.0, 1.0), abs=1e-12)
    assert turned.angle == pytest.approx(math.pi / 2)
    # Footprint swaps: 2 wide, 4 tall
    xs, ys = turned.corners()[:, 0], turned.corners()[:, 1]
    assert xs.max() - xs.min() == pytest.approx(2.0)
    assert ys.max() - ys.min() == pytest.approx(4.0)


def test_rectangle_from_angle_preserves_side_lengths():
    rect = OrientedRectangle.from_angle((1.0, 1.0), 3.0, 2.0, math.radians(30.0))
    c = rect.corners()
    assert np.linalg.norm(c[1] - c[0]) == pytest.approx(3.0)
    assert np.linalg.norm(c[3] - c[0]) == pytest.approx(2.0)
    assert rect.to_polygon().area == pytest.approx(6.0)


@pytest.mark.parametrize(
    "rect",
    [
        OrientedRectangle.from_bounds(0.0, 0.0, 0.0, 5.0),
        OrientedRectangle.from_angle((0.0, 0.0), -2.0, 1.0),
        OrientedRectangle((0.0, 0.0), (2.0, 0.0), (0.0, 1.0), 1.0, 1.0),
        OrientedRectangle((0.0, 0.0), (1.0, 0.0), (1.0, 0.0), 1.0, 1.0),
        OrientedRectangle((math.nan, 0.0), (1.0, 0.0), (0.0, 1.0), 1.0, 1.0),
    ],
)
def test_rectangle_is_valid_rejects_degenerate_rectangles(rect):
    assert not rect.is_valid
