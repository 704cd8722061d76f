from __future__ import annotations

import altair as alt
import polars as pl

from civitas.plot.algebra import facet, layer, layers, set_coord, views
from civitas.plot.geoms import bar, linear, point
from civitas.plot.vega import field_type, to_altair
from civitas.plot.views import View


def test_single_point_view_is_plain_chart(small_df: pl.DataFrame) -> None:
    chart = to_altair(layer(views(small_df, [("a", "b")]), point(color="g")))
    spec = chart.to_dict()
    assert spec["mark"]["type"] == "point"
    assert spec["encoding"]["x"]["field"] == "a"
    assert spec["encoding"]["color"]["field"] == "g"


def test_regression_layer_uses_transform(small_df: pl.DataFrame) -> None:
    chart = to_altair(layers(views(small_df, [("a", "b")]), point(), linear()))
    spec = chart.to_dict()
    assert len(spec["layer"]) == 2
    assert "regression" in spec["layer"][1]["transform"][0]


def test_facet_becomes_hconcat(small_df: pl.DataFrame) -> None:
    spec = to_altair(facet(layer(views(small_df, [("a", "b")]), point()), "g")).to_dict()
    assert len(spec["hconcat"]) == 2
    assert [p["title"] for p in spec["hconcat"]] == ["p", "q"]


def test_flip_swaps_count_bar_channels(small_df: pl.DataFrame) -> None:
    spec = to_altair(set_coord(layer(views(small_df, [("k", "k")]), bar()), "flip")).to_dict()
    assert spec["encoding"]["y"]["field"] == "k"
    assert spec["encoding"]["x"]["aggregate"] == "count"


def test_field_type(small_df: pl.DataFrame) -> None:
    v = View(data=small_df, x="a", y="g")
    assert field_type(v, "a") == "Q"
    assert field_type(v, "g") == "N"
    assert field_type(v, "a", categorical=True) == "N"
    assert isinstance(to_altair(v), alt.TopLevelMixin)
