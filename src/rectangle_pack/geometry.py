"""
Geometry utilities for the Rectangle Pack project.

This module defines the small 2D toolkit both algorithms are written against:

- Vector helpers (unitize, 2D cross product, angles, rotation).
- `Boundary`: a closed, simple planar curve backed by a Shapely Polygon,
  with a tolerance-aware point containment test.
- `Segment`: one oriented edge of a boundary.
- `OrientedRectangle`: an immutable rectangle defined by a reference frame
  (origin corner + two orthogonal unit axes), a width and a height.

Coordinate convention
---------------------

All geometry lives in the world XY plane. Angles are in radians and measured
counter-clockwise from the world X axis. An `OrientedRectangle` spans
`origin + u * width * x_axis + v * height * y_axis` for `u, v` in `[0, 1]`,
so `origin` is a corner, not the centre.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

import math

import numpy as np
from shapely.errors import GEOSException
from shapely.geometry import LinearRing, LineString, Point, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.prepared import prep

from .config import ZERO_TOLERANCE
from .errors import InvalidInputError


Point2D = Tuple[float, float]
Vector2D = Tuple[float, float]

WORLD_X_AXIS: Vector2D = (1.0, 0.0)
WORLD_Y_AXIS: Vector2D = (0.0, 1.0)


class Containment(Enum):
    """Result of a point-in-boundary test."""

    INSIDE = "inside"
    OUTSIDE = "outside"
    ON_BOUNDARY = "on_boundary"


class CurveOrientation(Enum):
    """Traversal direction of a closed curve."""

    CLOCKWISE = "clockwise"
    COUNTER_CLOCKWISE = "counter_clockwise"


# ---------------------------------------------------------------------------
# Vector helpers
# ---------------------------------------------------------------------------

def unitize(vector: Sequence[float]) -> Vector2D:
    """
    Return `vector` scaled to unit length.

    Raises
    ------
    ValueError
        If the vector has (numerically) zero length.
    """
    x, y = float(vector[0]), float(vector[1])
    norm = math.hypot(x, y)
    if norm <= ZERO_TOLERANCE:
        raise ValueError(f"Cannot unitize zero-length vector ({x}, {y})")
    return (x / norm, y / norm)


def cross2d(a: Sequence[float], b: Sequence[float]) -> float:
    """Z component of the cross product of two planar vectors."""
    return float(a[0]) * float(b[1]) - float(a[1]) * float(b[0])


def vector_angle(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Unsigned angle between two vectors, in `[0, pi]`.
    """
    dot = float(a[0]) * float(b[0]) + float(a[1]) * float(b[1])
    return abs(math.atan2(cross2d(a, b), dot))


def signed_angle(reference: Sequence[float], vector: Sequence[float]) -> float:
    """
    Counter-clockwise angle from `reference` to `vector`, in `[0, 2*pi)`.

    The 2D cross product decides on which side of `reference` the vector
    lies; vectors on the clockwise side get `2*pi - |angle|`.
    """
    unsigned = vector_angle(reference, vector)
    if cross2d(reference, vector) < 0.0:
        angle = 2.0 * math.pi - unsigned
        return 0.0 if angle >= 2.0 * math.pi else angle
    return unsigned


def rotate_vector(vector: Sequence[float], angle: float) -> Vector2D:
    """Rotate a vector counter-clockwise by `angle` radians."""
    c, s = math.cos(angle), math.sin(angle)
    x, y = float(vector[0]), float(vector[1])
    return (c * x - s * y, s * x + c * y)


def rotate_point(point: Sequence[float], angle: float, center: Sequence[float]) -> Point2D:
    """Rotate a point counter-clockwise by `angle` radians about `center`."""
    dx, dy = rotate_vector((point[0] - center[0], point[1] - center[1]), angle)
    return (float(center[0]) + dx, float(center[1]) + dy)


# ---------------------------------------------------------------------------
# Bounding box / segments
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass(frozen=True)
class Segment:
    """
    One oriented straight edge of a polygon boundary.
    """

    start: Point2D
    end: Point2D

    @property
    def vector(self) -> Vector2D:
        return (self.end[0] - self.start[0], self.end[1] - self.start[1])

    @property
    def length(self) -> float:
        return math.hypot(*self.vector)

    def reversed(self) -> "Segment":
        return Segment(start=self.end, end=self.start)


# ---------------------------------------------------------------------------
# Boundary
# ---------------------------------------------------------------------------

class Boundary:
    """
    A closed, simple planar curve.

    Wraps the exterior ring of a Shapely Polygon; holes are ignored. The
    vertex order given by the caller is preserved, so `segments()` and
    `orientation` reflect the curve as it was drawn.

    Raises
    ------
    InvalidInputError
        On construction, if the curve is empty, self-intersecting, or
        encloses (numerically) zero area.
    """

    def __init__(self, polygon: Polygon):
        if not isinstance(polygon, Polygon) or polygon.is_empty:
            raise InvalidInputError("Boundary must be a non-empty polygon")

        shell = Polygon(polygon.exterior)
        if not shell.is_valid:
            raise InvalidInputError("Boundary curve is self-intersecting or otherwise invalid")
        if shell.area <= ZERO_TOLERANCE:
            raise InvalidInputError("Boundary curve encloses zero area")

        self._polygon = shell
        self._ring: LinearRing = shell.exterior
        self._prepared = prep(shell)

    @classmethod
    def from_coords(cls, coords: Iterable[Sequence[float]]) -> "Boundary":
        """
        Build a boundary from a vertex sequence. The closing vertex may be
        given explicitly or omitted.
        """
        pts = [(float(p[0]), float(p[1])) for p in coords]
        if len(pts) < 3:
            raise InvalidInputError(f"Boundary needs at least 3 vertices, got {len(pts)}")
        try:
            polygon = Polygon(pts)
        except (ValueError, GEOSException) as exc:
            raise InvalidInputError(f"Could not build boundary polygon: {exc}") from exc
        return cls(polygon)

    @classmethod
    def from_geometry(cls, geom: BaseGeometry) -> "Boundary":
        """
        Build a boundary from a Shapely Polygon, LinearRing or closed LineString.
        """
        if not isinstance(geom, BaseGeometry):
            raise InvalidInputError(f"Expected a Shapely geometry, got {type(geom).__name__}")
        if isinstance(geom, Polygon):
            return cls(geom)
        if isinstance(geom, LinearRing):
            return cls(Polygon(geom))
        if isinstance(geom, LineString):
            if geom.is_empty or not geom.is_closed:
                raise InvalidInputError("Boundary curve is not closed")
            return cls.from_coords(geom.coords)
        raise InvalidInputError(f"Unsupported boundary geometry type: {geom.geom_type}")

    @property
    def polygon(self) -> Polygon:
        return self._polygon

    @property
    def area(self) -> float:
        return float(self._polygon.area)

    @property
    def bounding_box(self) -> BoundingBox:
        minx, miny, maxx, maxy = self._polygon.bounds
        return BoundingBox(minx, miny, maxx, maxy)

    @property
    def orientation(self) -> CurveOrientation:
        if self._ring.is_ccw:
            return CurveOrientation.COUNTER_CLOCKWISE
        return CurveOrientation.CLOCKWISE

    def contains(self, point: Sequence[float], tolerance: float) -> Containment:
        """
        Classify `point` against the boundary.

        Points within `tolerance` of the curve are ON_BOUNDARY, regardless
        of which side they lie on.
        """
        p = Point(float(point[0]), float(point[1]))
        if self._ring.distance(p) <= tolerance:
            return Containment.ON_BOUNDARY
        if self._prepared.contains(p):
            return Containment.INSIDE
        return Containment.OUTSIDE

    def contains_all(self, points: Iterable[Sequence[float]], tolerance: float) -> bool:
        """True if every point is strictly INSIDE the boundary."""
        return all(self.contains(p, tolerance) is Containment.INSIDE for p in points)

    def segments(self) -> List[Segment]:
        """
        Decompose the curve into its ordered edge segments.

        Zero-length pieces (repeated vertices) are dropped.
        """
        coords = list(self._ring.coords)
        segments: List[Segment] = []
        for a, b in zip(coords[:-1], coords[1:]):
            seg = Segment(start=(a[0], a[1]), end=(b[0], b[1]))
            if seg.length > ZERO_TOLERANCE:
                segments.append(seg)
        return segments

    def __repr__(self) -> str:
        return f"Boundary({self._polygon.wkt})"


# ---------------------------------------------------------------------------
# OrientedRectangle
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OrientedRectangle:
    """
    Immutable rectangle in an arbitrary planar frame.

    - origin: the corner the frame is anchored at
    - x_axis, y_axis: orthogonal unit vectors of the frame
    - width: extent along `x_axis`; height: extent along `y_axis`

    `translate` and `rotate` return new instances.
    """

    origin: Point2D
    x_axis: Vector2D
    y_axis: Vector2D
    width: float
    height: float

    @classmethod
    def from_angle(
        cls,
        origin: Sequence[float],
        width: float,
        height: float,
        angle: float = 0.0,
    ) -> "OrientedRectangle":
        """
        Create a rectangle whose local X axis is rotated `angle` radians
        counter-clockwise from the world X axis.
        """
        return cls(
            origin=(float(origin[0]), float(origin[1])),
            x_axis=rotate_vector(WORLD_X_AXIS, angle),
            y_axis=rotate_vector(WORLD_Y_AXIS, angle),
            width=float(width),
            height=float(height),
        )

    @classmethod
    def from_bounds(cls, min_x: float, min_y: float, max_x: float, max_y: float) -> "OrientedRectangle":
        """Axis-aligned rectangle from box extents."""
        return cls.from_angle((min_x, min_y), max_x - min_x, max_y - min_y)

    @property
    def is_valid(self) -> bool:
        """
        True for a finite, positive-area rectangle with an orthonormal frame.
        """
        values = (*self.origin, *self.x_axis, *self.y_axis, self.width, self.height)
        if not all(math.isfinite(v) for v in values):
            return False
        if self.width <= ZERO_TOLERANCE or self.height <= ZERO_TOLERANCE:
            return False
        if abs(math.hypot(*self.x_axis) - 1.0) > 1e-9 or abs(math.hypot(*self.y_axis) - 1.0) > 1e-9:
            return False
        dot = self.x_axis[0] * self.y_axis[0] + self.x_axis[1] * self.y_axis[1]
        return abs(dot) <= 1e-9

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def angle(self) -> float:
        """Angle of the local X axis, counter-clockwise from world X, in `[0, 2*pi)`."""
        return signed_angle(WORLD_X_AXIS, self.x_axis)

    def corners(self) -> np.ndarray:
        """
        Return the four corners as a (4, 2) array, in frame order:
        origin, +width, +width+height, +height.
        """
        o = np.asarray(self.origin, dtype=float)
        ex = np.asarray(self.x_axis, dtype=float) * self.width
        ey = np.asarray(self.y_axis, dtype=float) * self.height
        return np.array([o, o + ex, o + ex + ey, o + ey], dtype=float)

    @property
    def centroid(self) -> Point2D:
        cx, cy = self.corners().mean(axis=0)
        return (float(cx), float(cy))

    def translate(self, vector: Sequence[float]) -> "OrientedRectangle":
        return replace(
            self,
            origin=(self.origin[0] + float(vector[0]), self.origin[1] + float(vector[1])),
        )

    def rotate(self, angle: float, center: Sequence[float]) -> "OrientedRectangle":
        """Rotate the whole frame counter-clockwise by `angle` about `center`."""
        return replace(
            self,
            origin=rotate_point(self.origin, angle, center),
            x_axis=rotate_vector(self.x_axis, angle),
            y_axis=rotate_vector(self.y_axis, angle),
        )

    def to_polygon(self) -> Polygon:
        return Polygon(self.corners())


__all__ = [
    "Point2D",
    "Vector2D",
    "WORLD_X_AXIS",
    "WORLD_Y_AXIS",
    "Containment",
    "CurveOrientation",
    "unitize",
    "cross2d",
    "vector_angle",
    "signed_angle",
    "rotate_vector",
    "rotate_point",
    "BoundingBox",
    "Segment",
    "Boundary",
    "OrientedRectangle",
]
