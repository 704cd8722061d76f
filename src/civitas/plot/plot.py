"""
Plot layout: views -> one SVG hiccup node (optionally wrapped for brushing).

Layouts
- facet grid: views carry facet_row/facet_col; rows x columns, column headers
  on the top row, row headers rotated on the right.
- facets: views carry facet_val; one row of panels with headers.
- default: a grid of distinct x columns by distinct y columns (SPLOM style),
  with column names on top and row names on the right (skipped for polar).

Domains
- Facet layouts honor the scale mode: shared (both axes shared), free_x
  (y shared), free_y (x shared), free (nothing shared).
- The default grid always uses per-panel domains, since each cell plots a
  different pair of columns.

Legends for color and shape are drawn in a 100px strip on the right.

Examples:
    >>> from civitas.plot import views, layer, point, plot_svg  # doctest: +SKIP
    >>> svg = plot_svg(layer(views(df, [("a", "b")]), point()))  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Any

from civitas.core.constants import DEFAULT_INK, LEGEND_WIDTH, SVG_NS, XLINK_NS
from civitas.core.grammar import ANNOTATION_MARKS, CoordKind, ScaleMode, scale_mode_from_value
from civitas.core.typing import Node
from civitas.io.config import Settings
from civitas.markup.hiccup import to_markup
from civitas.markup.svg import rotate, translate

from .render import (
    LEGEND_SPACING,
    Layer,
    fmt_name,
    merge_domain,
    render_legend,
    render_panel,
    render_shape_legend,
    stacked_max,
)
from .stats import compute_stat
from .views import View, validate_view

__all__ = ["BRUSH_SCRIPT", "build_layers", "shared_domains", "plot", "plot_svg"]

logger = logging.getLogger(__name__)

BRUSH_SCRIPT = """
(function(){
  var svg = document.currentScript.previousElementSibling;
  var pts = svg.querySelectorAll('.data-point');
  var drag = false, x0, y0, sel;
  function local(e){
    var r = svg.getBoundingClientRect();
    return [e.clientX - r.left, e.clientY - r.top];
  }
  svg.addEventListener('mousedown', function(e){
    var p = local(e); x0 = p[0]; y0 = p[1];
    sel = document.createElementNS('http://www.w3.org/2000/svg', 'rect');
    sel.setAttribute('fill', 'rgba(100,100,255,0.2)');
    sel.setAttribute('stroke', '#66f');
    svg.appendChild(sel); drag = true;
  });
  svg.addEventListener('mousemove', function(e){
    if(!drag) return;
    var p = local(e);
    sel.setAttribute('x', Math.min(x0, p[0]));
    sel.setAttribute('y', Math.min(y0, p[1]));
    sel.setAttribute('width', Math.abs(p[0] - x0));
    sel.setAttribute('height', Math.abs(p[1] - y0));
  });
  svg.addEventListener('mouseup', function(){
    if(!drag) return; drag = false;
    var bx = parseFloat(sel.getAttribute('x')) || 0, by = parseFloat(sel.getAttribute('y')) || 0;
    var bw = parseFloat(sel.getAttribute('width')) || 0, bh = parseFloat(sel.getAttribute('height')) || 0;
    svg.removeChild(sel);
    pts.forEach(function(p){
      var box = p.getBBox();
      var m = p.getCTM(), s = svg.getCTM().inverse().multiply(m);
      var cx = s.a * (box.x + box.width / 2) + s.e, cy = s.d * (box.y + box.height / 2) + s.f;
      var inside = cx >= bx && cx <= bx + bw && cy >= by && cy <= by + bh;
      p.setAttribute('opacity', inside ? '1.0' : '0.15');
    });
  });
})();
"""


def _distinct(values: Iterable[Any]) -> list[Any]:
    return list(dict.fromkeys(v for v in values if v is not None))


def build_layers(vs: Sequence[View]) -> list[Layer]:
    """Validate every view and compute stats for the data-mark views."""
    out: list[Layer] = []
    for v in vs:
        validate_view(v)
        if v.mark in ANNOTATION_MARKS:
            out.append(Layer(v, None))
        else:
            out.append(Layer(v, compute_stat(v)))
    return out


def shared_domains(layers: Sequence[Layer], mode: ScaleMode) -> tuple[list[Any] | None, list[Any] | None]:
    """
    Domains shared across facet panels for the given scale mode.

    Returns:
        tuple: (x_domain or None, y_domain or None); None means per-panel.
    """
    stats = [ly for ly in layers if ly.stat is not None]
    if not stats:
        return None, None
    first = stats[0].view
    x_dom = y_dom = None
    if mode in (ScaleMode.SHARED, ScaleMode.FREE_Y):
        x_disc = any(ly.stat.x_discrete for ly in stats)
        x_dom = merge_domain([ly.stat.x_domain for ly in stats], discrete=x_disc, spec=first.x_scale)
    if mode in (ScaleMode.SHARED, ScaleMode.FREE_X):
        y_disc = any(ly.stat.y_discrete for ly in stats)
        y_dom = merge_domain([ly.stat.y_domain for ly in stats], discrete=y_disc, spec=first.y_scale)
        stack_hi = stacked_max(stats)
        if not y_disc and stack_hi > 0:
            y_dom = merge_domain(
                [*(ly.stat.y_domain for ly in stats), [0, stack_hi]], discrete=False, spec=first.y_scale
            )
    return x_dom, y_dom


def _header(x: float, y: float, text: Any, font_size: int, transform: str | None = None) -> Node:
    attrs: dict[str, Any] = {"x": x, "y": y, "font-size": font_size, "fill": DEFAULT_INK}
    attrs["text-anchor"] = "end" if transform else "middle"
    if transform:
        attrs["transform"] = transform
    return ["text", attrs, str(text)]


def _row_header(pw: float, ph: float, text: Any, font_size: int) -> Node:
    return _header(pw - 5, ph / 2, text, font_size, rotate(-90, pw - 5, ph / 2))


def plot(
    vs: View | Sequence[View],
    *,
    width: int | None = None,
    height: int | None = None,
    margin: int | None = None,
    scales: ScaleMode | str | None = None,
    coord: CoordKind | str | None = None,
    tooltip: bool = False,
    brush: bool = False,
    settings: Settings | None = None,
) -> Node:
    """
    Render views as an SVG hiccup node.

    Args:
        vs: One view or a list of views (e.g. from civitas.plot.algebra).
        width: Figure width in pixels (Settings.width when None).
        height: Figure height in pixels (Settings.height when None).
        margin: Panel margin in pixels (Settings.margin when None).
        scales: Facet scale mode: shared (default), free_x, free_y, free.
        coord: Coordinate system applied to every view (overrides per-view coords).
        tooltip: Attach hover titles to points.
        brush: Wrap the SVG in a div with a rectangle-selection script.
        settings: Settings providing defaults and the theme (Settings.load() when None).

    Returns:
        Node: ``svg`` node, or ``div`` node wrapping it when brush is True.

    Raises:
        ViewSpecError: A view references a missing column.
        StatError: A stat has no complete rows.
        GrammarError: Unknown scale mode or coord.
        IoConfigError: The width, height, and margin leave no drawing area.
    """
    cfg = settings or Settings.load()
    size = replace(
        cfg,
        width=cfg.width if width is None else width,
        height=cfg.height if height is None else height,
        margin=cfg.margin if margin is None else margin,
    ).validate()
    width, height, m = size.width, size.height, size.margin
    theme = cfg.theme
    views_ = [vs] if isinstance(vs, View) else list(vs)
    if not views_:
        raise ValueError("plot() needs at least one view")
    if coord is not None:
        views_ = [v.merge(coord=coord) for v in views_]
    mode = ScaleMode.SHARED if scales is None else scale_mode_from_value(scales)

    layers = build_layers(views_)
    facet_vals = _distinct(v.facet_val for v in views_)
    row_vals = _distinct(v.facet_row for v in views_)
    col_vals = _distinct(v.facet_col for v in views_)
    grid_facet = bool(row_vals and col_vals)
    multi_facet = bool(facet_vals) and not grid_facet
    x_vars = _distinct(v.x for v in views_)
    y_vars = _distinct(v.y for v in views_)

    if grid_facet:
        cols, rows = len(col_vals), len(row_vals)
    elif multi_facet:
        cols, rows = len(facet_vals), 1
    else:
        cols, rows = len(x_vars), len(y_vars)

    pw = (width - 2 * m) / cols
    ph = (height - 2 * m) / rows

    colors = _distinct(c for ly in layers if ly.stat is not None for c in ly.stat.colors()) or None
    color_col = next((v.color for v in views_ if v.color is not None), None)
    shape_col = next((v.shape for v in views_ if v.shape is not None), None)
    shape_categories = (
        _distinct(c for v in views_ if v.shape is not None for c in v.data.get_column(v.shape).to_list()) or None
    )
    polar = views_[0].effective_coord is CoordKind.POLAR

    if grid_facet or multi_facet:
        x_dom, y_dom = shared_domains(layers, mode)
    else:
        x_dom = y_dom = None

    def panel(members: list[Layer], show_x: bool, show_y: bool) -> Node:
        return render_panel(
            members,
            pw,
            ph,
            m,
            theme=theme,
            x_domain=x_dom,
            y_domain=y_dom,
            show_x=show_x,
            show_y=show_y,
            colors=colors,
            shape_categories=shape_categories,
            tooltip=tooltip,
        )

    header_size = theme.font_size + 2
    panels: Node = ["g"]
    if grid_facet:
        for ri, rv in enumerate(row_vals):
            for ci, cv in enumerate(col_vals):
                members = [ly for ly in layers if ly.view.facet_row == rv and ly.view.facet_col == cv]
                if not members:
                    continue
                panels.append(
                    [
                        "g",
                        {"transform": translate(ci * pw, ri * ph)},
                        panel(members, ri == rows - 1, ci == 0),
                        _header(pw / 2, 12, cv, header_size) if ri == 0 else None,
                        _row_header(pw, ph, rv, header_size) if ci == cols - 1 else None,
                    ]
                )
    elif multi_facet:
        for ci, fv in enumerate(facet_vals):
            members = [ly for ly in layers if ly.view.facet_val == fv]
            panels.append(
                [
                    "g",
                    {"transform": translate(ci * pw, 0)},
                    panel(members, True, ci == 0),
                    _header(pw / 2, 12, fv, header_size),
                ]
            )
    else:
        label_size = theme.font_size + 1
        for ri, yv in enumerate(y_vars):
            for ci, xv in enumerate(x_vars):
                members = [ly for ly in layers if ly.view.x == xv and ly.view.y == yv]
                if not members:
                    continue
                panels.append(
                    [
                        "g",
                        {"transform": translate(ci * pw, ri * ph)},
                        panel(members, ri == rows - 1, ci == 0),
                        _header(pw / 2, 12, fmt_name(xv), label_size) if ri == 0 and not polar else None,
                        _row_header(pw, ph, fmt_name(yv), label_size) if ci == cols - 1 and not polar else None,
                    ]
                )

    legend_x = cols * pw + 10
    legends: Node = ["g"]
    if colors:
        legends.append(render_legend(colors, theme.palette, x=legend_x, y=30, title=color_col))
    if shape_categories:
        y_off = 30 + (len(colors) * LEGEND_SPACING if colors else 0) + 10
        legends.append(render_shape_legend(shape_categories, x=legend_x, y=y_off, title=shape_col))

    legend_w = LEGEND_WIDTH if (colors or shape_categories) else 0
    svg: Node = [
        "svg",
        {
            "width": cols * pw + legend_w,
            "height": rows * ph,
            "xmlns": SVG_NS,
            "xmlns:xlink": XLINK_NS,
            "version": "1.1",
        },
        legends,
        panels,
    ]
    logger.debug("plot: %d views, %dx%d panels, mode=%s", len(views_), cols, rows, mode.value)
    if brush:
        return ["div", {"style": {"position": "relative", "display": "inline-block"}}, svg, ["script", BRUSH_SCRIPT]]
    return svg


def plot_svg(vs: View | Sequence[View], **kwargs: Any) -> str:
    """plot() serialized to a markup string."""
    return to_markup(plot(vs, **kwargs))
