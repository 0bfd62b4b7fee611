"""
I/O utilities for the Rectangle Pack project.

This module centralizes common file and path operations so that:
- Scripts and notebooks do *not* hard-code paths.
- Boundaries are read the same way everywhere (WKT, one per row / line).
- Placement and direction tables are written consistently.

Typical usage from code or notebooks
------------------------------------

    from rectangle_pack.utils.io import load_boundaries_csv, save_table

    ids, boundaries = load_boundaries_csv("data/raw/rooms.csv")
    result = pack_boundaries(boundaries, template)
    csv_path = save_table(placements_to_df(result), prefix="placements")
    print("Wrote placements to:", csv_path)

Boundary CSV files need an `id` column and a `wkt` column holding a
POLYGON, LINEARRING or closed LINESTRING.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple, Union

import datetime as dt

import pandas as pd
from shapely import wkt as shapely_wkt
from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry

from ..config import DATA_OUTPUTS_DIR, DATA_RAW_DIR


PathLike = Union[str, Path]


# ---------------------------------------------------------------------------
# Directory helpers
# ---------------------------------------------------------------------------

def ensure_data_dirs() -> None:
    """
    Ensure that data/raw/ and data/outputs/ exist. Safe to call repeatedly.
    """
    DATA_RAW_DIR.mkdir(parents=True, exist_ok=True)
    DATA_OUTPUTS_DIR.mkdir(parents=True, exist_ok=True)


def get_timestamped_output_path(
    prefix: str = "placements",
    suffix: str = ".csv",
    directory: Optional[PathLike] = None,
) -> Path:
    """
    Build a timestamped output path, by default under `data/outputs/`.

    Example output filename:
        placements_20261019_153045.csv
    """
    out_dir = Path(directory) if directory is not None else DATA_OUTPUTS_DIR
    out_dir.mkdir(parents=True, exist_ok=True)
    timestamp = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%d_%H%M%S")
    return out_dir / f"{prefix}_{timestamp}{suffix}"


# ---------------------------------------------------------------------------
# Loading helpers
# ---------------------------------------------------------------------------

def parse_wkt(text: str) -> Optional[BaseGeometry]:
    """
    Parse one WKT string. Returns None for text Shapely cannot read, so a
    single bad row does not stop a batch.
    """
    try:
        return shapely_wkt.loads(text)
    except (GEOSException, ValueError, TypeError):
        return None


def load_boundaries_csv(path: PathLike) -> Tuple[List[str], List[Optional[BaseGeometry]]]:
    """
    Load boundary geometries from a CSV with `id` and `wkt` columns.

    Returns
    -------
    (ids, geometries)
        Parallel lists in file order. Rows whose WKT cannot be parsed
        yield None; the batch functions report those as invalid input.
    """
    csv_path = Path(path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Boundary CSV not found: {csv_path}")

    df = pd.read_csv(csv_path, dtype={"id": str})
    missing = {"id", "wkt"}.difference(df.columns)
    if missing:
        raise ValueError(f"Boundary CSV is missing required columns: {sorted(missing)}")

    ids = df["id"].astype(str).tolist()
    geoms = [parse_wkt(text) for text in df["wkt"].tolist()]
    return ids, geoms


def load_boundaries_wkt(path: PathLike) -> List[Optional[BaseGeometry]]:
    """
    Load one WKT geometry per non-empty line of a text file.
    """
    txt_path = Path(path)
    if not txt_path.exists():
        raise FileNotFoundError(f"WKT file not found: {txt_path}")
    lines = txt_path.read_text().splitlines()
    return [parse_wkt(line) for line in lines if line.strip()]


# ---------------------------------------------------------------------------
# Saving helpers
# ---------------------------------------------------------------------------

def save_table(
    df: pd.DataFrame,
    path: Optional[PathLike] = None,
    prefix: str = "placements",
) -> Path:
    """
    Save a result table to CSV.

    Parameters
    ----------
    df:
        Table to write (e.g. from `batch.placements_to_df`).
    path:
        Optional explicit output path. If None, a timestamped filename is
        created under `data/outputs/` via `get_timestamped_output_path`.
    prefix:
        Filename prefix when generating a timestamped path.

    Returns
    -------
    Path
        The path to the written CSV.
    """
    if path is None:
        out_path = get_timestamped_output_path(prefix=prefix)
    else:
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)

    df.to_csv(out_path, index=False)
    return out_path


__all__ = [
    "PathLike",
    "ensure_data_dirs",
    "get_timestamped_output_path",
    "parse_wkt",
    "load_boundaries_csv",
    "load_boundaries_wkt",
    "save_table",
]
