"""
Example datasets for the plotting gallery, the CLI, and tests.

- iris(): Fisher's iris measurements (150 rows, bundled CSV).
- cars(): deterministic synthetic fuel-economy table with the categorical
  columns the bar layers need (class, drv, cyl) plus displ/hwy.
- read_table(path): CSV or Parquet file to a polars DataFrame.

All loaders return fresh polars DataFrames; nothing is cached across calls.
"""

from __future__ import annotations

import logging
import os
from importlib import resources
from pathlib import Path

import numpy as np
import polars as pl

from .errors import IoReadError

__all__ = ["iris", "cars", "read_table", "DATASETS", "load_dataset"]

logger = logging.getLogger(__name__)

_CAR_CLASSES: tuple[str, ...] = ("compact", "midsize", "suv", "pickup", "subcompact", "minivan", "2seater")
# Drive trains available per class; the first entry is the most common.
_CAR_DRIVES: dict[str, tuple[str, ...]] = {
    "compact": ("f", "4"),
    "midsize": ("f", "4"),
    "suv": ("4", "r"),
    "pickup": ("4",),
    "subcompact": ("f", "r"),
    "minivan": ("f",),
    "2seater": ("r",),
}
_CAR_WEIGHTS: tuple[float, ...] = (0.2, 0.18, 0.27, 0.14, 0.15, 0.05, 0.01)


def iris() -> pl.DataFrame:
    """
    Load the bundled iris dataset.

    Returns:
        pl.DataFrame: Columns sepal_length, sepal_width, petal_length,
        petal_width (Float64) and species (Utf8).
    """
    src = resources.files("civitas.io").joinpath("data", "iris.csv")
    with resources.as_file(src) as path:
        return pl.read_csv(path)


def cars(n: int = 234, seed: int = 7) -> pl.DataFrame:
    """
    Generate a synthetic cars table.

    Args:
        n: Number of rows.
        seed: Seed for numpy's default_rng; the same seed yields the same frame.

    Returns:
        pl.DataFrame: Columns class, drv, cyl (Int64), displ (Float64), hwy (Int64).
    """
    rng = np.random.default_rng(seed)
    classes = rng.choice(len(_CAR_CLASSES), size=n, p=_CAR_WEIGHTS)
    rows: list[dict[str, object]] = []
    for ci in classes:
        klass = _CAR_CLASSES[int(ci)]
        drives = _CAR_DRIVES[klass]
        drv = drives[0] if len(drives) == 1 or rng.random() < 0.7 else drives[int(rng.integers(1, len(drives)))]
        base = {"2seater": 5.7, "pickup": 4.4, "suv": 4.3, "minivan": 3.4, "midsize": 2.9}.get(klass, 2.2)
        displ = float(np.clip(round(base + rng.normal(0.0, 0.6), 1), 1.6, 7.0))
        cyl = 4 if displ < 2.8 else 6 if displ < 4.2 else 8
        hwy = int(round(max(12.0, 38.0 - 3.6 * displ + rng.normal(0.0, 2.0) - (2.0 if drv == "4" else 0.0))))
        rows.append({"class": klass, "drv": drv, "cyl": cyl, "displ": displ, "hwy": hwy})
    return pl.DataFrame(rows, schema={"class": pl.Utf8, "drv": pl.Utf8, "cyl": pl.Int64, "displ": pl.Float64, "hwy": pl.Int64})


def read_table(path: str | os.PathLike[str]) -> pl.DataFrame:
    """
    Read a CSV or Parquet file into a DataFrame.

    Raises:
        IoReadError: If the file is missing, the suffix is unsupported, or parsing fails.
    """
    p = Path(path)
    if not p.exists():
        raise IoReadError(f"no such file: {p}")
    suffix = p.suffix.lower()
    try:
        if suffix == ".csv":
            df = pl.read_csv(p)
        elif suffix in (".parquet", ".pq"):
            df = pl.read_parquet(p)
        else:
            raise IoReadError(f"unsupported table format {suffix!r} (expected .csv or .parquet)")
    except (pl.exceptions.PolarsError, OSError) as exc:
        raise IoReadError(f"failed to read {p}: {exc}") from exc
    logger.info("read %s (%d rows x %d cols)", p, df.height, df.width)
    return df


DATASETS = {"iris": iris, "cars": cars}


def load_dataset(name: str) -> pl.DataFrame:
    """Load a named example dataset ("iris" or "cars")."""
    try:
        loader = DATASETS[name]
    except KeyError as exc:
        raise IoReadError(f"unknown dataset {name!r} (expected one of: {', '.join(DATASETS)})") from exc
    return loader()
