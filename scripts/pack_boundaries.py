#!/usr/bin/env python
"""
CLI helper to pack rectangles into boundaries and save the placements.

This script is a thin wrapper around the library entry points:

- rectangle_pack.batch.pack_boundaries
- rectangle_pack.evaluation.summarize_packing  (optional)

Typical usage from the project root
-----------------------------------

    python scripts/pack_boundaries.py data/raw/rooms.csv --width 10 --height 4
    python scripts/pack_boundaries.py data/raw/rooms.csv --width 10 --height 4 --rotation
    python scripts/pack_boundaries.py data/raw/rooms.csv --width 10 --height 4 --follow-major-direction
    python scripts/pack_boundaries.py data/raw/rooms.csv --width 10 --height 4 --output out.csv --summary

The input CSV needs `id` and `wkt` columns. The script automatically adds
`src/` to PYTHONPATH so that it can import the `rectangle_pack` package
without requiring installation.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import math
import sys
from typing import Optional, List


def _ensure_src_on_path() -> Path:
    """
    Ensure that <project_root>/src is on sys.path and return project_root.

    Assumes this file lives in <project_root>/scripts/pack_boundaries.py.
    """
    project_root = Path(__file__).resolve().parents[1]
    src_dir = project_root / "src"
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))
    return project_root


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Pack copies of a rectangle into closed boundary curves.",
    )
    parser.add_argument("csv_path", type=str, help="CSV file with id and wkt columns.")
    parser.add_argument("--width", type=float, required=True, help="Template rectangle width.")
    parser.add_argument("--height", type=float, required=True, help="Template rectangle height.")
    parser.add_argument(
        "--angle",
        type=float,
        default=0.0,
        help="Template rectangle rotation in degrees (default 0).",
    )
    parser.add_argument("--offset", type=float, default=None, help="Clearance around each rectangle.")
    parser.add_argument(
        "--search-spacing",
        type=float,
        default=None,
        help="Grid step while searching for the first fit.",
    )
    parser.add_argument("--rotation", action="store_true", help="Allow a fallback quarter-turn rotation.")
    parser.add_argument("--axis-aligned", action="store_true", help="Shift anchors along the rectangle frame.")
    parser.add_argument(
        "--follow-major-direction",
        action="store_true",
        help="Rotate the template to each boundary's major direction before packing.",
    )
    parser.add_argument(
        "--categories",
        type=int,
        default=None,
        help="Angle bins used with --follow-major-direction.",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help=(
            "Optional output path for the placements CSV. "
            "If omitted, a timestamped name will be created under data/outputs/."
        ),
    )
    parser.add_argument("--summary", action="store_true", help="Print a per-boundary summary table.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    _ensure_src_on_path()

    # Imports done after path configuration
    from rectangle_pack.batch import major_directions, pack_boundaries, placements_to_df
    from rectangle_pack.config import DEFAULT_NUM_CATEGORIES, DEFAULT_OFFSET, DEFAULT_SEARCH_SPACING
    from rectangle_pack.errors import InvalidInputError
    from rectangle_pack.evaluation import summarize_packing
    from rectangle_pack.geometry import Boundary, OrientedRectangle
    from rectangle_pack.utils.io import load_boundaries_csv, save_table
    from rectangle_pack.utils.log import setup_logging

    args = _parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "INFO")

    offset = DEFAULT_OFFSET if args.offset is None else args.offset
    search_spacing = DEFAULT_SEARCH_SPACING if args.search_spacing is None else args.search_spacing
    categories = DEFAULT_NUM_CATEGORIES if args.categories is None else args.categories

    ids, geoms = load_boundaries_csv(args.csv_path)
    print(f"[pack_boundaries] Loaded {len(ids)} boundaries from {args.csv_path}")

    template = OrientedRectangle.from_angle(
        (0.0, 0.0), args.width, args.height, math.radians(args.angle)
    )

    orientations = None
    if args.follow_major_direction:
        directions = major_directions(geoms, categories)
        orientations = directions["angle"].tolist()

    result = pack_boundaries(
        geoms,
        template,
        offset=offset,
        search_spacing=search_spacing,
        allow_rotation=args.rotation,
        axis_aligned=args.axis_aligned,
        orientations=orientations,
    )
    print(f"[pack_boundaries] Placed {len(result)} rectangles ({len(result.warnings)} warnings)")

    table = placements_to_df(result)
    table.insert(1, "boundary_id", [ids[i] for i in result.boundary_indices])
    out_path = save_table(table, path=args.output, prefix="placements")
    print(f"[pack_boundaries] Placements written to: {out_path}")

    if args.summary:
        valid = []
        for i, geom in enumerate(geoms):
            try:
                valid.append((i, Boundary.from_geometry(geom)))
            except InvalidInputError:
                continue
        summary = summarize_packing(
            [b for _, b in valid],
            [result.for_boundary(i) for i, _ in valid],
        )
        summary["boundary_id"] = [ids[i] for i, _ in valid]
        print(summary.to_string(index=False))


if __name__ == "__main__":
    main()
