from __future__ import annotations

import polars as pl
import pytest

from civitas.core.constants import LEGEND_WIDTH
from civitas.core.errors import GrammarError, ViewSpecError
from civitas.core.grammar import ScaleMode
from civitas.io.config import Settings
from civitas.io.errors import IoConfigError
from civitas.markup.hiccup import iter_nodes, node_attrs, node_tag, to_markup
from civitas.plot.algebra import cross, facet, facet_grid, layer, set_coord, set_scale, stack, views
from civitas.plot.geoms import bar, hband, hline, point, stacked_bar, text_label, value_bar
from civitas.plot.plot import build_layers, plot, plot_svg, shared_domains
from civitas.plot.render import LEGEND_SPACING


def _tags(node) -> list[str]:
    return [node_tag(n) for n in iter_nodes(node)]


def test_single_panel_size_without_legend(small_df: pl.DataFrame, settings: Settings) -> None:
    svg = plot(layer(views(small_df, [("a", "b")]), point()), settings=settings)
    attrs = node_attrs(svg)
    assert node_tag(svg) == "svg"
    assert attrs["width"] == 400 - 2 * 30
    assert attrs["height"] == 300 - 2 * 30
    assert _tags(svg).count("circle") == 6


def test_color_adds_legend_width_and_title(small_df: pl.DataFrame, settings: Settings) -> None:
    svg = plot(layer(views(small_df, [("a", "b")]), point(color="g")), settings=settings)
    assert node_attrs(svg)["width"] == 400 - 2 * 30 + LEGEND_WIDTH
    markup = to_markup(svg)
    assert ">p<" in markup and ">q<" in markup


def test_tooltip_attaches_titles(small_df: pl.DataFrame, settings: Settings) -> None:
    svg = plot(layer(views(small_df, [("a", "b")]), point()), settings=settings, tooltip=True)
    assert _tags(svg).count("title") == 6
    assert "a: 1.0, b: 2.0" in to_markup(svg)


def test_brush_wraps_svg_with_script(small_df: pl.DataFrame, settings: Settings) -> None:
    node = plot(layer(views(small_df, [("a", "b")]), point()), settings=settings, brush=True)
    assert node_tag(node) == "div"
    assert "script" in _tags(node)
    assert "svg" in _tags(node)


def test_splom_lays_out_one_panel_per_pair(small_df: pl.DataFrame, settings: Settings) -> None:
    cols = ["a", "b"]
    svg = plot(layer(views(small_df, cross(cols, cols)), point()), settings=settings)
    panels = svg[-1]
    assert len([p for p in panels[1:] if isinstance(p, list)]) == 4


def test_facet_headers_and_shared_scale(small_df: pl.DataFrame, settings: Settings) -> None:
    vs = facet(layer(views(small_df, [("a", "b")]), point()), "g")
    markup = plot_svg(vs, settings=settings)
    assert markup.startswith("<svg")
    assert ">p</text>" in markup and ">q</text>" in markup


def test_count_and_stacked_bars_draw_rects(small_df: pl.DataFrame, settings: Settings) -> None:
    dodged = plot(layer(views(small_df, [("k", "k")]), bar(color="g")), settings=settings)
    stacked = plot(layer(views(small_df, [("k", "k")]), stacked_bar(color="g")), settings=settings)
    assert "rect" in _tags(dodged) or "polygon" in _tags(dodged)
    assert "rect" in _tags(stacked) or "polygon" in _tags(stacked)


def test_value_bars_with_labels_and_reference_line(settings: Settings) -> None:
    df = pl.DataFrame({"name": ["a", "b", "c"], "v": [1.0, 3.0, 2.0]})
    base = views(df, [("name", "v")])
    svg = plot(stack(layer(base, value_bar()), layer(base, text_label("v")), layer(base, hline(2.0))), settings=settings)
    markup = to_markup(svg)
    assert ">3.0</text>" in markup
    assert "stroke-dasharray" in markup


def test_band_annotation_renders_translucent_rect(small_df: pl.DataFrame, settings: Settings) -> None:
    base = views(small_df, [("a", "b")])
    svg = plot(stack(layer(base, hband(4.0, 8.0)), layer(base, point())), settings=settings)
    assert 'opacity="0.08"' in to_markup(svg)


def test_polar_and_flip_render(small_df: pl.DataFrame, settings: Settings) -> None:
    base = layer(views(small_df, [("k", "k")]), bar())
    for coord in ("polar", "flip"):
        svg = plot(set_coord(base, coord), settings=settings)
        assert node_tag(svg) == "svg"


def test_log_scale_rejects_non_positive_data(settings: Settings) -> None:
    df = pl.DataFrame({"x": [1.0, 2.0], "y": [0.0, 5.0]})
    vs = set_scale(layer(views(df, [("x", "y")]), point()), "y", "log")
    with pytest.raises(ViewSpecError):
        plot(vs, settings=settings)


def test_plot_requires_views(settings: Settings) -> None:
    with pytest.raises(ValueError):
        plot([], settings=settings)


def _cells(svg) -> list:
    return [c for c in svg[-1][1:] if isinstance(c, list)]


def test_facet_grid_headers_and_empty_cells(small_df: pl.DataFrame, settings: Settings) -> None:
    # Arrange: g gives rows (p, q); k gives columns (x, y, z); (p, y) and (q, z) are empty.
    vs = facet_grid(layer(views(small_df, [("a", "b")]), point()), "g", "k")

    # Act
    svg = plot(vs, settings=settings)
    cells = _cells(svg)

    # Assert: cells in row-major order are (p, x), (p, z), (q, x), (q, y)
    assert len(cells) == 4
    col_headers = [c[3] for c in cells]
    assert [h[-1] if h else None for h in col_headers] == ["x", "z", None, None]
    row_headers = [c[4] for c in cells]
    assert [h[-1] if h else None for h in row_headers] == [None, "p", None, None]
    assert node_attrs(row_headers[1])["transform"].startswith("rotate(-90")
    assert node_attrs(svg)["width"] == pytest.approx(400 - 2 * 30)
    assert node_attrs(svg)["height"] == pytest.approx(300 - 2 * 30)


def test_shared_domains_follow_scale_mode(small_df: pl.DataFrame) -> None:
    # p rows span a in [1, 5], q rows span a in [2, 6]
    layers = build_layers(facet(layer(views(small_df, [("a", "b")]), point()), "g"))

    x_dom, y_dom = shared_domains(layers, ScaleMode.SHARED)

    assert x_dom[0] <= 1.0 and x_dom[1] >= 6.0
    assert y_dom[0] <= 2.0 and y_dom[1] >= 12.0
    assert shared_domains(layers, ScaleMode.FREE_X) == (None, y_dom)
    assert shared_domains(layers, ScaleMode.FREE_Y) == (x_dom, None)
    assert shared_domains(layers, ScaleMode.FREE) == (None, None)


def test_facet_scale_modes_render_and_unknown_mode_raises(small_df: pl.DataFrame, settings: Settings) -> None:
    vs = facet(layer(views(small_df, [("a", "b")]), point()), "g")
    for mode in ("shared", "free_x", "free_y", "free"):
        assert len(_cells(plot(vs, settings=settings, scales=mode))) == 2
    with pytest.raises(GrammarError):
        plot(vs, settings=settings, scales="sideways")


def test_shape_legend_sits_below_color_legend(small_df: pl.DataFrame, settings: Settings) -> None:
    svg = plot(layer(views(small_df, [("a", "b")]), point(color="g", shape="k")), settings=settings)

    legends = svg[2]
    color_legend, shape_legend = legends[1], legends[2]

    y_off = 30 + 2 * LEGEND_SPACING + 10
    assert node_attrs(color_legend[2])["y"] == 30 - 5
    assert shape_legend[2][-1] == "k"
    assert node_attrs(shape_legend[2])["y"] == y_off - 5
    assert [g[-1][-1] for g in shape_legend[3:]] == ["x", "y", "z"]


def test_plot_rejects_margin_that_leaves_no_area(small_df: pl.DataFrame, settings: Settings) -> None:
    vs = layer(views(small_df, [("a", "b")]), point())
    with pytest.raises(IoConfigError):
        plot(vs, settings=settings, margin=150)
    with pytest.raises(IoConfigError):
        plot(vs, settings=settings, width=0)
