from __future__ import annotations

from pathlib import Path

import pandas as pd

from ..config import DEFAULT_SETTINGS

_frames: dict[Path, pd.DataFrame] = {}


def _load(path: Path) -> pd.DataFrame:
    df = pd.read_csv(path, dtype={"id": str})

    df["rating"] = pd.to_numeric(df["rating"], errors="coerce")
    df["open_now"] = df["open_now"].fillna(False).astype(bool)

    # Pre-parse dietary flags into lowercase lists
    df["dietary_list"] = (
        df["dietary"]
        .fillna("")
        .apply(lambda s: [d.strip().lower() for d in str(s).split(";") if d.strip()])
    )

    # Lowercase location and cuisine for case-insensitive lookup
    df["location_lower"] = df["location"].fillna("").str.lower()
    df["cuisine_lower"] = df["cuisine"].fillna("").str.lower()

    return df


def get_dataframe(path: Path = DEFAULT_SETTINGS.catalog_csv) -> pd.DataFrame:
    """Return the restaurant table for *path*, loading it on first call."""
    df = _frames.get(path)
    if df is None:
        df = _load(path)
        _frames[path] = df
    return df


def clear_frames() -> None:
    _frames.clear()
