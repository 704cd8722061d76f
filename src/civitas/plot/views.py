"""
View records: one dataset bound to an x/y column pair plus layer options.

A View is the unit the algebra combines, the stats consume, and the renderer
draws. It is transient: algebra functions return new Views, never mutate.

Responsibilities
- Hold the dataset (polars DataFrame) and column bindings.
- Normalize enum-like options (mark, stat, position, coord) via grammar helpers.
- Reject unknown keys (extra="forbid").
- validate_view() checks that bound columns exist before rendering.

Notes
- Column bindings are plain strings naming DataFrame columns.
- Unknown enum strings raise pydantic.ValidationError (wrapping GrammarError).

Examples:
    >>> import polars as pl
    >>> from civitas.plot.views import View
    >>> v = View(data=pl.DataFrame({"a": [1, 2], "b": [3, 4]}), x="a", y="b", mark="Point")
    >>> v.mark.value
    'point'
    >>> v.merge(color="a").color
    'a'
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import polars as pl
from pydantic import BaseModel, ConfigDict, field_validator

from civitas.core.errors import ViewSpecError
from civitas.core.grammar import (
    CoordKind,
    Mark,
    Position,
    Stat,
    coord_from_value,
    mark_from_value,
    position_from_value,
    scale_type_from_value,
    stat_from_value,
)

__all__ = ["View", "as_frame", "validate_view", "AESTHETICS"]

# Optional column bindings checked by validate_view.
AESTHETICS: tuple[str, ...] = ("color", "size", "shape", "text_col")


def as_frame(data: Any) -> pl.DataFrame:
    """
    Coerce tabular input to a polars DataFrame.

    Args:
        data: A polars DataFrame, a mapping of column name to values, or a
            sequence of row mappings.

    Returns:
        pl.DataFrame

    Raises:
        ViewSpecError: If the input is not tabular.
    """
    if isinstance(data, pl.DataFrame):
        return data
    if isinstance(data, Mapping):
        return pl.DataFrame(dict(data), strict=False)
    if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
        if all(isinstance(row, Mapping) for row in data):
            return pl.DataFrame([dict(row) for row in data], strict=False)
    raise ViewSpecError(f"data must be a DataFrame, a column mapping, or row dicts; got {type(data).__name__}")


def _scale_spec(v: Any) -> dict[str, Any] | None:
    if v is None:
        return None
    if isinstance(v, str):
        v = {"type": v}
    if not isinstance(v, Mapping):
        raise ValueError(f"scale spec must be a mapping like {{'type': 'log'}}, got {v!r}")
    spec = dict(v)
    spec["type"] = scale_type_from_value(spec.get("type", "linear"))
    return spec


class View(BaseModel):
    """
    One layer of a plot: dataset, x/y bindings, mark, stat, and aesthetics.

    Attributes:
        data (pl.DataFrame): Source rows.
        x (str): Column for the horizontal channel.
        y (str): Column for the vertical channel (equal to x for distributions).
        mark (Mark | None): Drawable mark; None until set by a geom or infer_defaults.
        stat (Stat | None): Statistical transform; None means identity.
        color (str | None): Grouping column mapped to palette colors.
        size (str | None): Numeric column mapped to point radius.
        shape (str | None): Categorical column mapped to point glyphs.
        text_col (str | None): Column whose values label text marks.
        x_type (str | None): "categorical" coerces x values to strings.
        position (Position | None): Bar placement (dodge or stack).
        value (float | None): Reference value for rule_h/rule_v.
        y1 (float | None): Lower bound for band_h.
        y2 (float | None): Upper bound for band_h.
        x_scale (dict | None): Scale spec for x, e.g. {"type": ScaleType.LOG}.
        y_scale (dict | None): Scale spec for y.
        coord (CoordKind | None): Coordinate system; None means cartesian.
        facet_val (Any): Facet group value from facet().
        facet_row (Any): Row group value from facet_grid().
        facet_col (Any): Column group value from facet_grid().
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True, frozen=True)

    data: pl.DataFrame
    x: str
    y: str
    mark: Mark | None = None
    stat: Stat | None = None
    color: str | None = None
    size: str | None = None
    shape: str | None = None
    text_col: str | None = None
    x_type: str | None = None
    position: Position | None = None
    value: float | None = None
    y1: float | None = None
    y2: float | None = None
    x_scale: dict[str, Any] | None = None
    y_scale: dict[str, Any] | None = None
    coord: CoordKind | None = None
    facet_val: Any = None
    facet_row: Any = None
    facet_col: Any = None

    @field_validator("data", mode="before")
    @classmethod
    def _coerce_data(cls, v: Any) -> pl.DataFrame:
        return as_frame(v)

    @field_validator("mark", mode="before")
    @classmethod
    def _normalize_mark(cls, v: Any) -> Any:
        return None if v is None else mark_from_value(v)

    @field_validator("stat", mode="before")
    @classmethod
    def _normalize_stat(cls, v: Any) -> Any:
        return None if v is None else stat_from_value(v)

    @field_validator("position", mode="before")
    @classmethod
    def _normalize_position(cls, v: Any) -> Any:
        return None if v is None else position_from_value(v)

    @field_validator("coord", mode="before")
    @classmethod
    def _normalize_coord(cls, v: Any) -> Any:
        return None if v is None else coord_from_value(v)

    @field_validator("x_scale", "y_scale", mode="before")
    @classmethod
    def _normalize_scale(cls, v: Any) -> Any:
        return _scale_spec(v)

    @field_validator("x_type", mode="before")
    @classmethod
    def _normalize_x_type(cls, v: Any) -> Any:
        if v is None:
            return None
        token = str(getattr(v, "value", v)).strip().lower()
        if token not in ("categorical", "continuous"):
            raise ValueError(f"x_type must be 'categorical' or 'continuous', got {v!r}")
        return token

    def fields(self) -> dict[str, Any]:
        """Return the view's fields as a plain dict (data by reference)."""
        return {name: getattr(self, name) for name in type(self).model_fields}

    def merge(self, **overrides: Any) -> View:
        """Return a validated copy with `overrides` applied (later keys win)."""
        return type(self).model_validate({**self.fields(), **overrides})

    def merge_defaults(self, **defaults: Any) -> View:
        """Return a copy where `defaults` fill only the fields that are still None."""
        update = {k: v for k, v in defaults.items() if getattr(self, k) is None}
        return self.merge(**update) if update else self

    @property
    def is_diagonal(self) -> bool:
        """True when the view maps a column against itself (SPLOM diagonal)."""
        return self.x == self.y

    @property
    def effective_stat(self) -> Stat:
        return self.stat or Stat.IDENTITY

    @property
    def effective_coord(self) -> CoordKind:
        return self.coord or CoordKind.CARTESIAN


def validate_view(view: View) -> View:
    """
    Check that every bound column exists in the view's dataset.

    Returns:
        View: The same view, for chaining.

    Raises:
        ViewSpecError: If x, y, or a bound aesthetic column is absent.
    """
    cols = set(view.data.columns)
    for channel in ("x", "y", *AESTHETICS):
        col = getattr(view, channel)
        if col is not None and col not in cols:
            raise ViewSpecError(
                f"{channel} binding {col!r} not found in data columns {sorted(cols)}"
            )
    return view
