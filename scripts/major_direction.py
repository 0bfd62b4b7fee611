#!/usr/bin/env python
"""
CLI tool to find the major direction of each polygon in a file.

This script is a thin wrapper around the library entry point:

- rectangle_pack.batch.major_directions

Typical usage from the project root
-----------------------------------

    python scripts/major_direction.py data/raw/rooms.csv
    python scripts/major_direction.py data/raw/rooms.csv --categories 72
    python scripts/major_direction.py data/raw/rooms.csv --debug --output directions.csv

It automatically adds `src/` to PYTHONPATH so that it can import the
`rectangle_pack` package without requiring installation.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import Optional, List


def _ensure_src_on_path() -> Path:
    """
    Ensure that <project_root>/src is on sys.path and return project_root.

    Assumes this file lives in <project_root>/scripts/major_direction.py.
    """
    project_root = Path(__file__).resolve().parents[1]
    src_dir = project_root / "src"
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))
    return project_root


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Find the major edge direction of closed polygons.",
    )
    parser.add_argument(
        "csv_path",
        type=str,
        help="CSV file with id and wkt columns.",
    )
    parser.add_argument(
        "--categories",
        type=int,
        default=None,
        help="Number of angle bins over the full turn.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log each segment's angle and bin.",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Optional path to also write the direction table as CSV.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    _ensure_src_on_path()

    from rectangle_pack.batch import major_directions
    from rectangle_pack.config import DEFAULT_NUM_CATEGORIES
    from rectangle_pack.utils.io import load_boundaries_csv, save_table
    from rectangle_pack.utils.log import setup_logging

    args = _parse_args(argv)
    setup_logging("DEBUG" if args.debug else "INFO")

    categories = DEFAULT_NUM_CATEGORIES if args.categories is None else args.categories

    ids, geoms = load_boundaries_csv(args.csv_path)
    table = major_directions(geoms, categories, debug=args.debug)
    table.insert(1, "boundary_id", ids)

    print(table.to_string(index=False))

    if args.output is not None:
        out_path = save_table(table, path=args.output, prefix="directions")
        print(f"[major_direction] Directions written to: {out_path}")


if __name__ == "__main__":
    main()
