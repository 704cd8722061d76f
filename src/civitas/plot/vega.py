"""
Altair rendition of View lists (Vega-Lite), for notebooks and HTML export.

The SVG renderer in civitas.plot.plot is the primary output; to_altair()
expresses the same views as Vega-Lite so they can be embedded as interactive
charts. Each view becomes one Altair layer:

| mark/stat              | Altair
|------------------------|--------------------------------------------------
| point                  | mark_point (filled), color/size/shape encodings
| line + regress         | mark_line + transform_regression(groupby=color)
| line + smooth          | mark_line + transform_loess(bandwidth=0.3)
| line + identity        | mark_line
| bar + bin              | mark_bar, binned x, count() y
| rect + count           | mark_bar, nominal x, count() y (xOffset when dodged)
| rect + identity        | mark_bar, nominal x, quantitative y
| text                   | mark_text(dy=-5)
| rule_h / rule_v        | mark_rule(strokeDash=[4, 3])
| band_h                 | mark_rect(opacity=0.08)

Layout mirrors plot(): facet grids and facet rows become concatenated
panels titled by their facet value; otherwise panels are laid out by distinct
x and y columns.

Notes
- Polar coordinates have no Vega-Lite counterpart here; those views render as
  cartesian with a warning.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import altair as alt

from civitas.core.constants import DEFAULT_INK
from civitas.core.grammar import CoordKind, Mark, Position, ScaleType, Stat

from .stats import LOESS_BANDWIDTH
from .views import View, validate_view

__all__ = ["field_type", "view_chart", "panel_chart", "to_altair"]

logger = logging.getLogger(__name__)


def _apply_chart_defaults(ch: alt.TopLevelMixin) -> alt.TopLevelMixin:
    return (
        ch.configure_axis(labelFontSize=11, titleFontSize=11, grid=True)
        .configure_legend(labelFontSize=11, titleFontSize=11)
        .configure_view(strokeOpacity=0)
    )


def field_type(view: View, col: str, *, categorical: bool = False) -> str:
    """Vega-Lite type code for a column: "Q" for numbers, "N" otherwise."""
    if categorical:
        return "N"
    return "Q" if view.data.schema[col].is_numeric() else "N"


def _scale(spec: dict[str, Any] | None) -> alt.Scale | Any:
    if spec and spec.get("type") is ScaleType.LOG:
        return alt.Scale(type="log")
    return alt.Undefined


def _xy(view: View, x: tuple[str, dict[str, Any]], y: tuple[str, dict[str, Any]]) -> dict[str, Any]:
    """Position encodings from (shorthand, options) pairs; flip swaps the channels."""
    if view.coord is CoordKind.FLIP:
        x, y = y, x
    return {"x": alt.X(x[0], **x[1]), "y": alt.Y(y[0], **y[1])}


def _aesthetics(view: View) -> dict[str, Any]:
    enc: dict[str, Any] = {}
    if view.color is not None:
        enc["color"] = alt.Color(f"{view.color}:N", title=view.color)
    if view.size is not None:
        enc["size"] = alt.Size(f"{view.size}:Q")
    if view.shape is not None:
        enc["shape"] = alt.Shape(f"{view.shape}:N")
    return enc


def _data(view: View) -> alt.Data:
    return alt.Data(values=view.data.to_dicts())


def view_chart(view: View, *, tooltip: bool = False) -> alt.Chart:
    """Translate one view into an Altair chart (a single layer)."""
    if view.mark in (Mark.RULE_H, Mark.RULE_V, Mark.BAND_H):
        return _annotation_chart(view)
    validate_view(view)
    if view.coord is CoordKind.POLAR:
        logger.warning("polar coord on (%s, %s) rendered as cartesian in Altair", view.x, view.y)
    mark = view.mark or Mark.POINT
    stat = view.effective_stat
    categorical = view.x_type == "categorical"
    x_pos = (f"{view.x}:{field_type(view, view.x, categorical=categorical)}", {"scale": _scale(view.x_scale)})
    y_pos = (f"{view.y}:{field_type(view, view.y)}", {"scale": _scale(view.y_scale)})
    count = ("count():Q", {"title": "count"})
    base = alt.Chart(_data(view))

    if mark is Mark.BAR:
        x_bin = (f"{view.x}:Q", {"bin": alt.Bin(maxbins=20), "title": view.x})
        return base.mark_bar(opacity=0.7).encode(**_xy(view, x_bin, count), **_aesthetics(view))

    if mark is Mark.RECT:
        x_nom = (f"{view.x}:N", {"title": view.x})
        enc = {**_xy(view, x_nom, count if stat is Stat.COUNT else y_pos), **_aesthetics(view)}
        if view.color is not None and view.position is not Position.STACK:
            if view.coord is CoordKind.FLIP:
                enc["yOffset"] = alt.YOffset(f"{view.color}:N")
            else:
                enc["xOffset"] = alt.XOffset(f"{view.color}:N")
        return base.mark_bar(opacity=0.7).encode(**enc)

    color = {"color": alt.Color(f"{view.color}:N")} if view.color is not None else {}

    if mark is Mark.LINE:
        groupby = [view.color] if view.color is not None else []
        chart = base.mark_line(strokeWidth=1.5)
        if stat is Stat.REGRESS:
            chart = chart.transform_regression(view.x, view.y, groupby=groupby)
        elif stat is Stat.SMOOTH:
            chart = chart.transform_loess(view.x, view.y, groupby=groupby, bandwidth=LOESS_BANDWIDTH)
        return chart.encode(**_xy(view, x_pos, y_pos), **color)

    if mark is Mark.TEXT:
        text = alt.Text(f"{view.text_col}:N")
        return base.mark_text(dy=-5, fontSize=9, color=DEFAULT_INK).encode(
            **_xy(view, x_pos, y_pos), text=text, **color
        )

    enc = {**_xy(view, x_pos, y_pos), **_aesthetics(view)}
    if tooltip:
        enc["tooltip"] = [c for c in (view.x, view.y, view.color) if c is not None]
    return base.mark_point(filled=True, opacity=0.7).encode(**enc)


def _annotation_chart(view: View) -> alt.Chart:
    flip = view.coord is CoordKind.FLIP
    if view.mark in (Mark.RULE_H, Mark.RULE_V):
        horizontal = (view.mark is Mark.RULE_H) != flip
        chart = alt.Chart(alt.Data(values=[{"value": view.value}])).mark_rule(strokeDash=[4, 3], color=DEFAULT_INK)
        return chart.encode(y="value:Q") if horizontal else chart.encode(x="value:Q")
    chart = alt.Chart(alt.Data(values=[{"y1": view.y1, "y2": view.y2}])).mark_rect(opacity=0.08, color=DEFAULT_INK)
    if flip:
        return chart.encode(x="y1:Q", x2="y2")
    return chart.encode(y="y1:Q", y2="y2")


def panel_chart(vs: Sequence[View], *, tooltip: bool = False, title: Any = None) -> alt.TopLevelMixin:
    """Layer the views of one panel; a single view stays a plain Chart."""
    charts = [view_chart(v, tooltip=tooltip) for v in vs]
    chart = charts[0] if len(charts) == 1 else alt.layer(*charts)
    if title is not None:
        chart = chart.properties(title=str(title))
    return chart


def _distinct(values: Any) -> list[Any]:
    return list(dict.fromkeys(v for v in values if v is not None))


def to_altair(
    vs: View | Sequence[View],
    *,
    width: int = 200,
    height: int = 160,
    tooltip: bool = False,
) -> alt.TopLevelMixin:
    """
    Translate views into an Altair chart.

    Args:
        vs: One view or a list of views.
        width: Width of each panel in pixels.
        height: Height of each panel in pixels.
        tooltip: Add tooltips to point layers.

    Returns:
        alt.TopLevelMixin: Chart, LayerChart, or concatenated chart.
    """
    views_ = [vs] if isinstance(vs, View) else list(vs)
    if not views_:
        raise ValueError("to_altair() needs at least one view")

    def panel(members: list[View], title: Any = None) -> alt.TopLevelMixin:
        return panel_chart(members, tooltip=tooltip, title=title).properties(width=width, height=height)

    row_vals = _distinct(v.facet_row for v in views_)
    col_vals = _distinct(v.facet_col for v in views_)
    facet_vals = _distinct(v.facet_val for v in views_)

    if row_vals and col_vals:
        rows = []
        for rv in row_vals:
            cells = [
                panel([v for v in views_ if v.facet_row == rv and v.facet_col == cv], f"{rv} / {cv}")
                for cv in col_vals
                if any(v.facet_row == rv and v.facet_col == cv for v in views_)
            ]
            if cells:
                rows.append(alt.hconcat(*cells))
        chart: alt.TopLevelMixin = alt.vconcat(*rows)
    elif facet_vals:
        chart = alt.hconcat(*(panel([v for v in views_ if v.facet_val == fv], fv) for fv in facet_vals))
    else:
        x_vars = _distinct(v.x for v in views_)
        y_vars = _distinct(v.y for v in views_)
        if len(x_vars) == 1 and len(y_vars) == 1:
            chart = panel(views_)
        else:
            rows = []
            for yv in y_vars:
                cells = [
                    panel([v for v in views_ if v.x == xv and v.y == yv])
                    for xv in x_vars
                    if any(v.x == xv and v.y == yv for v in views_)
                ]
                if cells:
                    rows.append(alt.hconcat(*cells))
            chart = alt.vconcat(*rows)
    return _apply_chart_defaults(chart)
