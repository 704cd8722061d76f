"""
View algebra: build, combine, and split lists of View records.

Every function takes and returns plain lists of Views, so pipelines compose
left to right:

    >>> from civitas.io.datasets import iris  # doctest: +SKIP
    >>> vs = layers(views(iris(), [("sepal_length", "sepal_width")]),
    ...             point(color="species"), linear(color="species"))  # doctest: +SKIP

Notes
- facet()/facet_grid() groups follow first appearance in the data.
- Keyword overrides pass through View.merge, so unknown keys or enum values
  raise pydantic.ValidationError.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

import polars as pl

from civitas.core.grammar import Mark, Stat, coord_from_value, scale_type_from_value

from .views import View

__all__ = [
    "cross",
    "stack",
    "views",
    "layer",
    "layers",
    "facet",
    "facet_grid",
    "is_diagonal",
    "infer_defaults",
    "auto",
    "where",
    "where_not",
    "when_diagonal",
    "when_off_diagonal",
    "distribution",
    "pairs",
    "set_scale",
    "set_coord",
]


def cross(xs: Iterable[Any], ys: Iterable[Any]) -> list[tuple[Any, Any]]:
    """Cartesian product of two column lists, x-major."""
    return [(x, y) for x in xs for y in ys]


def stack(*colls: Iterable[View]) -> list[View]:
    """Concatenate view lists."""
    return list(itertools.chain.from_iterable(colls))


def views(data: Any, pairs: Iterable[Sequence[str]]) -> list[View]:
    """Bind a dataset to each (x, y) column pair."""
    return [View(data=data, x=x, y=y) for x, y in pairs]


def layer(vs: Iterable[View], spec: Mapping[str, Any] | None = None, **overrides: Any) -> list[View]:
    """Merge a layer spec and/or keyword overrides into every view."""
    update = {**(spec or {}), **overrides}
    return [v.merge(**update) for v in vs]


def layers(base: Iterable[View], *specs: Mapping[str, Any]) -> list[View]:
    """Apply each layer spec to the same base views and stack the results."""
    base = list(base)
    return stack(*(layer(base, spec) for spec in specs))


def _groups(df: pl.DataFrame, cols: list[str]) -> list[tuple[tuple[Any, ...], pl.DataFrame]]:
    keys = df.select(cols).unique(maintain_order=True).rows()
    out = []
    for key in keys:
        mask = pl.lit(True)
        for col, val in zip(cols, key, strict=True):
            mask = mask & (pl.col(col).is_null() if val is None else pl.col(col) == val)
        out.append((key, df.filter(mask)))
    return out


def facet(vs: Iterable[View], col: str) -> list[View]:
    """Split each view by the values of a categorical column."""
    out: list[View] = []
    for v in vs:
        for (val,), sub in _groups(v.data, [col]):
            out.append(v.merge(data=sub, facet_val=val))
    return out


def facet_grid(vs: Iterable[View], row_col: str, col_col: str) -> list[View]:
    """Split each view by two columns for a row x column grid."""
    out: list[View] = []
    for v in vs:
        for (rv, cv), sub in _groups(v.data, [row_col, col_col]):
            out.append(v.merge(data=sub, facet_row=rv, facet_col=cv))
    return out


def is_diagonal(v: View) -> bool:
    return v.x == v.y


def infer_defaults(v: View) -> View:
    """Diagonal views default to histograms, others to scatter points; explicit fields win."""
    if is_diagonal(v):
        return v.merge_defaults(mark=Mark.BAR, stat=Stat.BIN)
    return v.merge_defaults(mark=Mark.POINT, stat=Stat.IDENTITY)


def auto(vs: Iterable[View]) -> list[View]:
    return [infer_defaults(v) for v in vs]


def where(vs: Iterable[View], pred: Callable[[View], bool]) -> list[View]:
    return [v for v in vs if pred(v)]


def where_not(vs: Iterable[View], pred: Callable[[View], bool]) -> list[View]:
    return [v for v in vs if not pred(v)]


def when_diagonal(vs: Iterable[View], spec: Mapping[str, Any]) -> list[View]:
    """Merge `spec` into diagonal views only."""
    return [v.merge(**spec) if is_diagonal(v) else v for v in vs]


def when_off_diagonal(vs: Iterable[View], spec: Mapping[str, Any]) -> list[View]:
    """Merge `spec` into off-diagonal views only."""
    return [v if is_diagonal(v) else v.merge(**spec) for v in vs]


def distribution(data: Any, *cols: str) -> list[View]:
    """One diagonal (x == y) view per column."""
    return views(data, [(c, c) for c in cols])


def pairs(cols: Sequence[str]) -> list[tuple[str, str]]:
    """Upper-triangle column pairs (i < j)."""
    return [(cols[i], cols[j]) for i in range(len(cols)) for j in range(i + 1, len(cols))]


def set_scale(vs: Iterable[View], channel: str, scale_type: Any, **opts: Any) -> list[View]:
    """
    Set the scale for the x or y channel on every view.

    Raises:
        ValueError: If channel is not "x" or "y".
    """
    if channel not in ("x", "y"):
        raise ValueError(f"channel must be 'x' or 'y', got {channel!r}")
    spec = {"type": scale_type_from_value(scale_type), **opts}
    return [v.merge(**{f"{channel}_scale": spec}) for v in vs]


def set_coord(vs: Iterable[View], coord: Any) -> list[View]:
    """Set the coordinate system (cartesian, flip, polar) on every view."""
    kind = coord_from_value(coord)
    return [v.merge(coord=kind) for v in vs]
