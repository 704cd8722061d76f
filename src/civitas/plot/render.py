"""
Panel rendering: stat results + scales + coord -> hiccup nodes.

A panel is one facet cell. render_panel() merges the stat domains of its
views, builds scales and the coord function, and draws, in order:

1) background rect
2) grid (cartesian tick lines, or polar circles and spokes)
3) annotations (dashed rules, translucent band)
4) data layers (points, histogram polygons, categorical/value bars, lines, text)
5) tick labels (bottom row/left column only; none for polar)

Legends and facet headers are drawn by civitas.plot.plot.

Notes
- Colors cycle through the theme palette by category index; unknown
  categories take the first color; uncolored marks use DEFAULT_INK.
- Point glyphs carry class "data-point" so the brush script can find them.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from civitas.core.constants import DEFAULT_INK
from civitas.core.grammar import ANNOTATION_MARKS, CoordKind, Mark, Position, ShapeKind
from civitas.core.typing import Node
from civitas.io.config import ThemeSettings
from civitas.markup.svg import pts

from .coords import Coord, PixelWarp, make_coord, pixel_warp, polar_center
from .scales import BandScale, Scale, is_categorical_domain, make_scale, pad_domain
from .stats import StatResult, is_number
from .views import View

__all__ = [
    "Layer",
    "fmt_name",
    "color_for",
    "shape_for",
    "shape_elem",
    "merge_domain",
    "stacked_max",
    "panel_domains",
    "render_points",
    "render_bins",
    "render_count_bars",
    "render_value_bars",
    "render_lines",
    "render_text",
    "render_annotation",
    "render_grid_cartesian",
    "render_grid_polar",
    "render_x_ticks",
    "render_y_ticks",
    "render_legend",
    "render_shape_legend",
    "render_panel",
]

logger = logging.getLogger(__name__)

SHAPES: tuple[ShapeKind, ...] = tuple(ShapeKind)
POINT_RADIUS = 2.5
LEGEND_SPACING = 16
TICK_INK = "#666"


@dataclass(frozen=True)
class Layer:
    """A view with its stat output (None for annotations)."""

    view: View
    stat: StatResult | None = None


def fmt_name(name: Any) -> str:
    """Column name for display: dashes and underscores become spaces."""
    return re.sub(r"[-_]", " ", str(name))


def color_for(categories: Sequence[Any] | None, value: Any, palette: Sequence[str]) -> str:
    """Palette color for `value` by its index in `categories` (first color if unknown)."""
    if value is None:
        return DEFAULT_INK
    cats = list(categories or [])
    idx = cats.index(value) if value in cats else 0
    return palette[idx % len(palette)]


def shape_for(categories: Sequence[Any] | None, value: Any) -> ShapeKind:
    cats = list(categories or [])
    if value not in cats:
        return ShapeKind.CIRCLE
    return SHAPES[cats.index(value) % len(SHAPES)]


def shape_elem(shape: ShapeKind, cx: float, cy: float, r: float, fill: str, attrs: dict[str, Any]) -> Node:
    """Point glyph centered at (cx, cy) with radius r."""
    if shape is ShapeKind.SQUARE:
        return ["rect", {"x": cx - r, "y": cy - r, "width": 2 * r, "height": 2 * r, "fill": fill, **attrs}]
    if shape is ShapeKind.TRIANGLE:
        corners = [(cx, cy - r), (cx - r, cy + r), (cx + r, cy + r)]
        return ["polygon", {"points": pts(corners), "fill": fill, **attrs}]
    if shape is ShapeKind.DIAMOND:
        corners = [(cx, cy - r), (cx + r, cy), (cx, cy + r), (cx - r, cy)]
        return ["polygon", {"points": pts(corners), "fill": fill, **attrs}]
    return ["circle", {"cx": cx, "cy": cy, "r": r, "fill": fill, **attrs}]


# ----------------------------
# Data layers
# ----------------------------


def render_points(
    view: View,
    stat: StatResult,
    coord: Coord,
    colors: Sequence[Any] | None,
    palette: Sequence[str],
    *,
    shape_categories: Sequence[Any] | None = None,
    tooltip: bool = False,
) -> Node:
    all_sizes = [float(s) for g in stat.points if g.sizes for s in g.sizes if is_number(s)]
    lo = min(all_sizes, default=0.0)
    span = max(1e-6, max(all_sizes, default=0.0) - lo)
    base = {"stroke": "#fff", "stroke-width": 0.5, "opacity": 0.7, "class": "data-point"}
    out: Node = ["g"]
    for g in stat.points:
        fill = color_for(colors, g.color, palette)
        for i, (xv, yv) in enumerate(zip(g.xs, g.ys, strict=True)):
            px, py = coord(xv, yv)
            r = POINT_RADIUS
            if g.sizes is not None and is_number(g.sizes[i]):
                r = 2.0 + 6.0 * (float(g.sizes[i]) - lo) / span
            shape = shape_for(shape_categories, g.shapes[i]) if g.shapes is not None else ShapeKind.CIRCLE
            elem = shape_elem(shape, px, py, r, fill, base)
            if tooltip:
                parts = [f"{view.x}: {xv}", f"{view.y}: {yv}"]
                if view.color is not None:
                    parts.append(f"{view.color}: {g.color}")
                elem.append(["title", ", ".join(parts)])
            out.append(elem)
    return out


def render_bins(stat: StatResult, coord: Coord, colors: Sequence[Any] | None, palette: Sequence[str]) -> Node:
    """Histogram bars as polygons through the four projected corners."""
    out: Node = ["g"]
    for g in stat.bins:
        fill = color_for(colors, g.color, palette)
        for b in g.bins:
            corners = [coord(b.lo, 0), coord(b.hi, 0), coord(b.hi, b.count), coord(b.lo, b.count)]
            out.append(["polygon", {"points": pts(corners), "fill": fill, "opacity": 0.7}])
    return out


class _BarPainter:
    """Draws a bar from band pixels and two values, whatever the coord."""

    def __init__(self, band: BandScale, value_scale: Scale, flip: bool, warp: PixelWarp, polar: bool) -> None:
        self.band = band
        self.value_scale = value_scale
        self.flip = flip
        self.warp = warp
        self.polar = polar

    def __call__(self, b0: float, b1: float, v0: float, v1: float, fill: str) -> Node:
        p0, p1 = self.value_scale(v0), self.value_scale(v1)
        if self.flip:
            x0, x1, y0, y1 = p0, p1, b0, b1
        else:
            x0, x1, y0, y1 = b0, b1, p0, p1
        if self.polar:
            corners = [self.warp(x0, y0), self.warp(x1, y0), self.warp(x1, y1), self.warp(x0, y1)]
            return ["polygon", {"points": pts(corners), "fill": fill, "opacity": 0.7}]
        return [
            "rect",
            {
                "x": min(x0, x1),
                "y": min(y0, y1),
                "width": abs(x1 - x0),
                "height": abs(y1 - y0),
                "fill": fill,
                "opacity": 0.7,
            },
        ]


def _bar_extent(painter: _BarPainter, cat: Any, index: int, n_groups: int, stacked: bool) -> tuple[float, float]:
    bw = painter.band.bandwidth
    lo, hi = painter.band.band(cat)
    sign = 1.0 if hi >= lo else -1.0
    mid = (lo + hi) / 2.0
    if stacked:
        return mid - sign * (0.4 * bw - 0.1 * bw), mid + sign * (0.4 * bw - 0.1 * bw)
    sub = bw * 0.8 / max(1, n_groups)
    start = mid - sign * 0.4 * bw + sign * index * sub
    return start, start + sign * sub


def render_count_bars(
    stat: StatResult,
    painter: _BarPainter,
    colors: Sequence[Any] | None,
    palette: Sequence[str],
    position: Position = Position.DODGE,
) -> Node:
    """Counted categorical bars, dodged side by side or stacked per category."""
    stacked = position is Position.STACK
    cum: dict[Any, float] = {}
    out: Node = ["g"]
    for gi, series in enumerate(stat.bars):
        fill = color_for(colors, series.color, palette)
        for cat, n in series.counts:
            b0, b1 = _bar_extent(painter, cat, gi, len(stat.bars), stacked)
            base = cum.get(cat, 0) if stacked else 0
            if stacked:
                cum[cat] = base + n
            out.append(painter(b0, b1, base, base + n, fill))
    return out


def render_value_bars(
    stat: StatResult,
    painter: _BarPainter,
    colors: Sequence[Any] | None,
    palette: Sequence[str],
    position: Position = Position.DODGE,
) -> Node:
    """Pre-aggregated bars: one bar per (x, y) row of each color group."""
    stacked = position is Position.STACK
    cum: dict[Any, float] = {}
    out: Node = ["g"]
    for gi, g in enumerate(stat.points):
        fill = color_for(colors, g.color, palette)
        for cat, val in zip(g.xs, g.ys, strict=True):
            b0, b1 = _bar_extent(painter, cat, gi, len(stat.points), stacked)
            base = cum.get(cat, 0) if stacked else 0
            if stacked:
                cum[cat] = base + val
            out.append(painter(b0, b1, base, base + val, fill))
    return out


def render_lines(stat: StatResult, coord: Coord, colors: Sequence[Any] | None, palette: Sequence[str]) -> Node:
    """Regression segments and polylines (smooth curves, line marks) sorted by pixel x."""
    out: Node = ["g"]
    for seg in stat.lines:
        (x1, y1), (x2, y2) = coord(seg.x1, seg.y1), coord(seg.x2, seg.y2)
        stroke = color_for(colors, seg.color, palette)
        out.append(["line", {"x1": x1, "y1": y1, "x2": x2, "y2": y2, "stroke": stroke, "stroke-width": 1.5}])
    for g in stat.points:
        projected = sorted(coord(x, y) for x, y in zip(g.xs, g.ys, strict=True))
        stroke = color_for(colors, g.color, palette)
        out.append(
            ["polyline", {"points": pts(projected), "stroke": stroke, "stroke-width": 1.5, "fill": "none"}]
        )
    return out


def render_text(stat: StatResult, coord: Coord, colors: Sequence[Any] | None, palette: Sequence[str]) -> Node:
    out: Node = ["g", {"font-size": 9, "fill": DEFAULT_INK, "text-anchor": "middle"}]
    for g in stat.points:
        fill = color_for(colors, g.color, palette)
        labels = g.labels if g.labels is not None else [""] * len(g.xs)
        for xv, yv, label in zip(g.xs, g.ys, labels, strict=True):
            px, py = coord(xv, yv)
            out.append(["text", {"x": px, "y": py - 5, "fill": fill}, str(label)])
    return out


def _ends(domain: Sequence[Any]) -> tuple[Any, Any]:
    return domain[0], domain[-1]


def render_annotation(view: View, coord: Coord, x_domain: Sequence[Any], y_domain: Sequence[Any]) -> Node:
    """Dashed reference rule or translucent band in data coordinates."""
    rule = {"stroke": DEFAULT_INK, "stroke-width": 1, "stroke-dasharray": "4,3"}
    if view.mark is Mark.RULE_H:
        x0, x1 = _ends(x_domain)
        (ax, ay), (bx, by) = coord(x0, view.value), coord(x1, view.value)
        return ["line", {"x1": ax, "y1": ay, "x2": bx, "y2": by, **rule}]
    if view.mark is Mark.RULE_V:
        y0, y1 = _ends(y_domain)
        (ax, ay), (bx, by) = coord(view.value, y0), coord(view.value, y1)
        return ["line", {"x1": ax, "y1": ay, "x2": bx, "y2": by, **rule}]
    if view.mark is Mark.BAND_H:
        x0, x1 = _ends(x_domain)
        (ax, ay), (bx, by) = coord(x0, view.y1), coord(x1, view.y2)
        return [
            "rect",
            {
                "x": min(ax, bx),
                "y": min(ay, by),
                "width": abs(bx - ax),
                "height": abs(by - ay),
                "fill": DEFAULT_INK,
                "opacity": 0.08,
            },
        ]
    return ["g"]


# ----------------------------
# Grid, ticks, legends
# ----------------------------


def render_grid_cartesian(sx: Scale, sy: Scale, pw: float, ph: float, m: float, theme: ThemeSettings) -> Node:
    stroke = {"stroke": theme.grid, "stroke-width": 0.5}
    out: Node = ["g"]
    for t in sx.ticks():
        px = sx(t)
        out.append(["line", {"x1": px, "y1": m, "x2": px, "y2": ph - m, **stroke}])
    for t in sy.ticks():
        py = sy(t)
        out.append(["line", {"x1": m, "y1": py, "x2": pw - m, "y2": py, **stroke}])
    return out


def render_grid_polar(pw: float, ph: float, m: float, theme: ThemeSettings) -> Node:
    """Five concentric circles and eight spokes."""
    cx, cy, r_max = polar_center(pw, ph, m)
    stroke = {"stroke": theme.grid, "stroke-width": 0.5}
    out: Node = ["g"]
    for i in range(1, 6):
        out.append(["circle", {"cx": cx, "cy": cy, "r": r_max * i / 5.0, "fill": "none", **stroke}])
    for i in range(8):
        a = i * math.pi / 4.0
        out.append(
            ["line", {"x1": cx, "y1": cy, "x2": cx + r_max * math.cos(a), "y2": cy + r_max * math.sin(a), **stroke}]
        )
    return out


def render_x_ticks(sx: Scale, ph: float, theme: ThemeSettings) -> Node:
    ticks = sx.ticks()
    out: Node = ["g", {"font-size": theme.font_size, "fill": TICK_INK}]
    for t, label in zip(ticks, sx.format(ticks), strict=True):
        out.append(["text", {"x": sx(t), "y": ph - 2, "text-anchor": "middle"}, label])
    return out


def render_y_ticks(sy: Scale, m: float, theme: ThemeSettings) -> Node:
    ticks = sy.ticks()
    out: Node = ["g", {"font-size": theme.font_size, "fill": TICK_INK}]
    for t, label in zip(ticks, sy.format(ticks), strict=True):
        out.append(["text", {"x": m - 3, "y": sy(t) + 3, "text-anchor": "end"}, label])
    return out


def render_legend(
    categories: Sequence[Any], palette: Sequence[str], *, x: float, y: float, title: Any = None
) -> Node:
    """Color legend: a dot and a label per category, 16px apart."""
    out: Node = ["g", {"font-family": "sans-serif", "font-size": 10}]
    if title is not None:
        out.append(["text", {"x": x, "y": y - 5, "fill": DEFAULT_INK, "font-size": 9}, fmt_name(title)])
    for i, cat in enumerate(categories):
        cy = y + i * LEGEND_SPACING
        out.append(
            [
                "g",
                ["circle", {"cx": x, "cy": cy, "r": 4, "fill": color_for(categories, cat, palette)}],
                ["text", {"x": x + 10, "y": cy + 4, "fill": DEFAULT_INK}, str(cat)],
            ]
        )
    return out


def render_shape_legend(categories: Sequence[Any], *, x: float, y: float, title: Any = None) -> Node:
    out: Node = ["g", {"font-family": "sans-serif", "font-size": 10}]
    if title is not None:
        out.append(["text", {"x": x, "y": y - 5, "fill": DEFAULT_INK, "font-size": 9}, fmt_name(title)])
    for i, cat in enumerate(categories):
        cy = y + i * LEGEND_SPACING
        out.append(
            [
                "g",
                shape_elem(shape_for(categories, cat), x, cy, 4, TICK_INK, {"stroke": "none"}),
                ["text", {"x": x + 10, "y": cy + 4, "fill": DEFAULT_INK}, str(cat)],
            ]
        )
    return out


# ----------------------------
# Panel
# ----------------------------


def merge_domain(
    domains: Sequence[Sequence[Any]],
    *,
    discrete: bool,
    spec: dict[str, Any] | None = None,
) -> list[Any]:
    """
    Union several stat domains into one panel domain.

    Categorical domains keep first-appearance order; numeric domains take the
    overall [min, max] and are padded by pad_domain. No domains gives [0, 1].
    """
    domains = [d for d in domains if len(d)]
    if not domains:
        return pad_domain([0.0, 1.0], spec)
    if discrete:
        return list(dict.fromkeys(v for d in domains for v in d))
    lo = min(d[0] for d in domains)
    hi = max(d[-1] for d in domains)
    return pad_domain([lo, hi], spec)


def stacked_max(layers: Sequence[Layer]) -> float:
    return max(
        (ly.stat.stack_max() for ly in layers if ly.stat is not None and ly.view.position is Position.STACK),
        default=0,
    )


def panel_domains(
    layers: Sequence[Layer],
) -> tuple[list[Any], list[Any], bool, bool]:
    """Return (x_domain, y_domain, x_discrete, y_discrete) for a panel's layers."""
    stats = [ly.stat for ly in layers if ly.stat is not None]
    first = layers[0].view if layers else None
    x_spec = first.x_scale if first else None
    y_spec = first.y_scale if first else None
    x_disc = any(s.x_discrete for s in stats)
    y_disc = any(s.y_discrete for s in stats)
    x_dom = merge_domain([s.x_domain for s in stats], discrete=x_disc, spec=x_spec)
    y_dom = merge_domain([s.y_domain for s in stats], discrete=y_disc, spec=y_spec)
    stack_hi = stacked_max(layers)
    if not y_disc and stack_hi > 0:
        y_dom = merge_domain([*(s.y_domain for s in stats), [0, stack_hi]], discrete=False, spec=y_spec)
    return x_dom, y_dom, x_disc, y_disc


def render_panel(
    layers: Sequence[Layer],
    pw: float,
    ph: float,
    m: float,
    *,
    theme: ThemeSettings,
    x_domain: Sequence[Any] | None = None,
    y_domain: Sequence[Any] | None = None,
    show_x: bool = True,
    show_y: bool = True,
    colors: Sequence[Any] | None = None,
    shape_categories: Sequence[Any] | None = None,
    tooltip: bool = False,
) -> Node:
    """
    Render one panel.

    Args:
        layers: Views of this panel with their stat results.
        pw: Panel width in pixels.
        ph: Panel height in pixels.
        m: Panel margin in pixels.
        theme: Colors and font size.
        x_domain: Shared x domain from the layout (panel stats when None).
        y_domain: Shared y domain from the layout (panel stats when None).
        show_x: Draw x tick labels.
        show_y: Draw y tick labels.
        colors: Legend categories in palette order.
        shape_categories: Categories of the shape aesthetic in glyph order.
        tooltip: Attach a <title> to every point.

    Returns:
        Node: A ``g`` element in panel-local pixels.
    """
    v1 = layers[0].view
    kind = v1.effective_coord
    polar = kind is CoordKind.POLAR
    flip = kind is CoordKind.FLIP
    x_spec, y_spec = v1.x_scale, v1.y_scale

    px_dom, py_dom, x_disc, y_disc = panel_domains(layers)
    if x_domain is not None:
        px_dom, x_disc = list(x_domain), is_categorical_domain(x_domain) or x_disc
    if y_domain is not None:
        py_dom, y_disc = list(y_domain), is_categorical_domain(y_domain) or y_disc

    # Flip swaps domains at scale construction; the coord swaps the arguments back.
    if flip:
        sx = make_scale(py_dom, (m, pw - m), y_spec, categorical=y_disc)
        sy = make_scale(px_dom, (ph - m, m), x_spec, categorical=x_disc)
    else:
        sx = make_scale(px_dom, (m, pw - m), x_spec, categorical=x_disc)
        sy = make_scale(py_dom, (ph - m, m), y_spec, categorical=y_disc)
    coord = make_coord(kind, sx, sy, pw, ph, m)
    palette = theme.palette

    data_nodes: Node = ["g"]
    for ly in layers:
        view, stat = ly.view, ly.stat
        if stat is None or view.mark in ANNOTATION_MARKS:
            continue
        mark = view.mark or Mark.POINT
        if mark is Mark.BAR:
            data_nodes.append(render_bins(stat, coord, colors, palette))
        elif mark is Mark.RECT:
            band = sy if flip else sx
            if not isinstance(band, BandScale):
                logger.warning("bars on (%s, %s) need a categorical x; drawing points", view.x, view.y)
                data_nodes.append(render_points(view, stat, coord, colors, palette, tooltip=tooltip))
                continue
            painter = _BarPainter(band, sx if flip else sy, flip, pixel_warp(kind, pw, ph, m), polar)
            position = view.position or Position.DODGE
            if stat.bars:
                data_nodes.append(render_count_bars(stat, painter, colors, palette, position))
            else:
                data_nodes.append(render_value_bars(stat, painter, colors, palette, position))
        elif mark is Mark.LINE:
            data_nodes.append(render_lines(stat, coord, colors, palette))
        elif mark is Mark.TEXT:
            data_nodes.append(render_text(stat, coord, colors, palette))
        else:
            data_nodes.append(
                render_points(
                    view, stat, coord, colors, palette, shape_categories=shape_categories, tooltip=tooltip
                )
            )

    annotations: Node = ["g"]
    for ly in layers:
        if ly.view.mark in ANNOTATION_MARKS:
            annotations.append(render_annotation(ly.view, coord, px_dom, py_dom))

    return [
        "g",
        ["rect", {"x": 0, "y": 0, "width": pw, "height": ph, "fill": theme.bg}],
        render_grid_polar(pw, ph, m, theme) if polar else render_grid_cartesian(sx, sy, pw, ph, m, theme),
        annotations,
        data_nodes,
        render_x_ticks(sx, ph, theme) if show_x and not polar else None,
        render_y_ticks(sy, m, theme) if show_y and not polar else None,
    ]
