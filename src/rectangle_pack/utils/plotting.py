"""
Visualization helpers for the Rectangle Pack project.

These helpers are thin convenience wrappers around matplotlib for:
- Plotting a boundary with its packed rectangles and anchor points.
- Plotting a polygon with its major direction drawn through its centroid.

Typical usage in a notebook
---------------------------

    import matplotlib.pyplot as plt
    from rectangle_pack.utils.plotting import plot_packing

    fig, ax = plt.subplots(figsize=(6, 6))
    plot_packing(boundary, placements, ax=ax, title="Room 12")

You remain in control of figure creation and display.
"""

from __future__ import annotations

from typing import Optional, Sequence

import math

import matplotlib.pyplot as plt
from shapely.geometry import Polygon

from ..geometry import Boundary
from ..packers.scanline import Placement


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _plot_polygon(ax, poly: Polygon, fill: bool = True, **kwargs) -> None:
    """
    Plot a single shapely Polygon on the given Axes.
    """
    xs, ys = poly.exterior.xy
    if fill:
        ax.fill(xs, ys, alpha=kwargs.pop("alpha", 0.4))
    ax.plot(xs, ys, linewidth=kwargs.pop("linewidth", 0.8), color=kwargs.pop("color", None))


def _finish_axes(ax, boundary: Boundary, padding: float, title: Optional[str]) -> None:
    box = boundary.bounding_box
    ax.set_xlim(box.min_x - padding, box.max_x + padding)
    ax.set_ylim(box.min_y - padding, box.max_y + padding)
    ax.set_aspect("equal", adjustable="box")
    ax.axis("off")
    if title is not None:
        ax.set_title(title)


# ---------------------------------------------------------------------------
# Public plotting helpers
# ---------------------------------------------------------------------------

def plot_packing(
    boundary: Boundary,
    placements: Sequence[Placement],
    ax=None,
    title: Optional[str] = None,
    show_anchors: bool = True,
    padding: float = 1.0,
):
    """
    Plot a boundary and the rectangles packed into it.

    Parameters
    ----------
    boundary:
        The packed boundary, drawn as a black outline.
    placements:
        Placements returned by `pack`. Rotated placements are hatched.
    ax:
        Optional matplotlib Axes. If None, a new figure and axes are created.
    title:
        Optional plot title.
    show_anchors:
        If True, mark each placement's anchor point.
    padding:
        Extra margin around the boundary's bounding box.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 6))

    _plot_polygon(ax, boundary.polygon, fill=False, linewidth=1.5, color="black")

    for p in placements:
        poly = p.rectangle.to_polygon()
        _plot_polygon(ax, poly)
        if p.rotated:
            xs, ys = poly.exterior.xy
            ax.fill(xs, ys, fill=False, hatch="//", linewidth=0.0)

    if show_anchors and placements:
        ax.scatter(
            [p.anchor[0] for p in placements],
            [p.anchor[1] for p in placements],
            s=6,
            zorder=3,
        )

    _finish_axes(ax, boundary, padding, title)
    return ax


def plot_major_direction(
    boundary: Boundary,
    angle: float,
    ax=None,
    title: Optional[str] = None,
    padding: float = 1.0,
):
    """
    Plot a polygon with its major direction as a line through the centroid.

    Parameters
    ----------
    boundary:
        The analysed polygon.
    angle:
        Direction in radians (e.g. from `find_major_direction`).
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 6))

    _plot_polygon(ax, boundary.polygon)

    box = boundary.bounding_box
    half = 0.5 * math.hypot(box.width, box.height)
    c = boundary.polygon.centroid
    dx, dy = half * math.cos(angle), half * math.sin(angle)
    ax.plot([c.x - dx, c.x + dx], [c.y - dy, c.y + dy], linestyle="--", linewidth=2)

    if title is None:
        title = f"Major direction: {math.degrees(angle):.2f} deg"
    _finish_axes(ax, boundary, padding, title)
    return ax


__all__ = [
    "plot_packing",
    "plot_major_direction",
]
