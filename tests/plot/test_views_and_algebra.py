from __future__ import annotations

import polars as pl
import pytest
from pydantic import ValidationError

from civitas.core.errors import ViewSpecError
from civitas.core.grammar import CoordKind, Mark, Position, ScaleType, Stat
from civitas.plot.algebra import (
    auto,
    cross,
    distribution,
    facet,
    facet_grid,
    layer,
    layers,
    pairs,
    set_coord,
    set_scale,
    stack,
    views,
    when_diagonal,
    when_off_diagonal,
    where,
)
from civitas.plot.geoms import bar, histogram, hline, linear, point, stacked_bar
from civitas.plot.views import View, validate_view


def test_view_normalizes_enum_strings_and_forbids_extra(small_df: pl.DataFrame) -> None:
    v = View(data=small_df, x="a", y="b", mark="Point", stat="regress", position="stack", coord="flip")
    assert (v.mark, v.stat, v.position, v.coord) == (Mark.POINT, Stat.REGRESS, Position.STACK, CoordKind.FLIP)
    with pytest.raises(ValidationError):
        View(data=small_df, x="a", y="b", colour="g")
    with pytest.raises(ValidationError):
        View(data=small_df, x="a", y="b", mark="pie")


def test_view_accepts_column_mapping_and_row_dicts() -> None:
    assert View(data={"a": [1, 2], "b": [3, 4]}, x="a", y="b").data.height == 2
    assert View(data=[{"a": 1, "b": 2}], x="a", y="b").data.columns == ["a", "b"]


def test_validate_view_reports_missing_columns(small_df: pl.DataFrame) -> None:
    with pytest.raises(ViewSpecError):
        validate_view(View(data=small_df, x="a", y="nope"))
    with pytest.raises(ViewSpecError):
        validate_view(View(data=small_df, x="a", y="b", color="missing"))


def test_cross_and_pairs() -> None:
    assert cross(["a", "b"], ["c", "d"]) == [("a", "c"), ("a", "d"), ("b", "c"), ("b", "d")]
    assert pairs(["a", "b", "c"]) == [("a", "b"), ("a", "c"), ("b", "c")]


def test_layer_merges_spec_and_overrides_without_mutation(small_df: pl.DataFrame) -> None:
    base = views(small_df, [("a", "b")])
    out = layer(base, point(color="g"), mark="line")
    assert out[0].mark is Mark.LINE
    assert out[0].color == "g"
    assert base[0].mark is None


def test_layers_stacks_one_copy_per_spec(small_df: pl.DataFrame) -> None:
    out = layers(views(small_df, [("a", "b")]), point(), linear())
    assert [v.stat for v in out] == [None, Stat.REGRESS]
    assert len(stack(out, out)) == 4


def test_auto_defaults_diagonal_to_histogram(small_df: pl.DataFrame) -> None:
    vs = auto(views(small_df, cross(["a", "b"], ["a", "b"])))
    diag = where(vs, lambda v: v.is_diagonal)
    off = where(vs, lambda v: not v.is_diagonal)
    assert {(v.mark, v.stat) for v in diag} == {(Mark.BAR, Stat.BIN)}
    assert {(v.mark, v.stat) for v in off} == {(Mark.POINT, Stat.IDENTITY)}


def test_when_diagonal_only_touches_matching_views(small_df: pl.DataFrame) -> None:
    vs = views(small_df, [("a", "a"), ("a", "b")])
    assert [v.stat for v in when_diagonal(vs, histogram())] == [Stat.BIN, None]
    assert [v.mark for v in when_off_diagonal(vs, point())] == [None, Mark.POINT]


def test_distribution_binds_column_to_itself(small_df: pl.DataFrame) -> None:
    assert [(v.x, v.y) for v in distribution(small_df, "a", "b")] == [("a", "a"), ("b", "b")]


def test_facet_splits_by_value_in_first_appearance_order(small_df: pl.DataFrame) -> None:
    out = facet(views(small_df, [("a", "b")]), "g")
    assert [v.facet_val for v in out] == ["p", "q"]
    assert [v.data.height for v in out] == [3, 3]


def test_facet_grid_sets_row_and_col(small_df: pl.DataFrame) -> None:
    out = facet_grid(views(small_df, [("a", "b")]), "g", "k")
    cells = {(v.facet_row, v.facet_col): v.data.height for v in out}
    assert cells == {("p", "x"): 2, ("q", "y"): 2, ("q", "x"): 1, ("p", "z"): 1}


def test_set_scale_and_coord(small_df: pl.DataFrame) -> None:
    vs = set_scale(views(small_df, [("a", "b")]), "y", "log")
    assert vs[0].y_scale == {"type": ScaleType.LOG}
    assert set_coord(vs, "polar")[0].coord is CoordKind.POLAR
    with pytest.raises(ValueError):
        set_scale(vs, "z", "log")


def test_geom_specs() -> None:
    assert bar() == {"mark": Mark.RECT, "stat": Stat.COUNT}
    assert stacked_bar(color="g")["position"] is Position.STACK
    assert hline(3, color="ignored") == {"mark": Mark.RULE_H, "value": 3}
