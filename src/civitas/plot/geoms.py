"""
Layer specs: plain dicts of View overrides for common chart types.

Data geoms merge extra keyword options (e.g. ``point(color="species")``);
annotations carry only their values.
"""

from __future__ import annotations

from typing import Any

from civitas.core.grammar import Mark, Position, Stat

__all__ = [
    "point",
    "linear",
    "smooth",
    "histogram",
    "line_mark",
    "bar",
    "text_label",
    "hline",
    "vline",
    "hband",
    "value_bar",
    "stacked_bar",
]


def point(**opts: Any) -> dict[str, Any]:
    return {"mark": Mark.POINT, **opts}


def linear(**opts: Any) -> dict[str, Any]:
    """Least-squares line per color group."""
    return {"mark": Mark.LINE, "stat": Stat.REGRESS, **opts}


def smooth(**opts: Any) -> dict[str, Any]:
    """LOESS curve per color group."""
    return {"mark": Mark.LINE, "stat": Stat.SMOOTH, **opts}


def histogram(**opts: Any) -> dict[str, Any]:
    return {"mark": Mark.BAR, "stat": Stat.BIN, **opts}


def line_mark(**opts: Any) -> dict[str, Any]:
    """Polyline through the data points, sorted by pixel x."""
    return {"mark": Mark.LINE, "stat": Stat.IDENTITY, **opts}


def bar(**opts: Any) -> dict[str, Any]:
    """Counted categorical bars (dodged when colored)."""
    return {"mark": Mark.RECT, "stat": Stat.COUNT, **opts}


def text_label(col: str, **opts: Any) -> dict[str, Any]:
    """Text labels at data positions, taken from column `col`."""
    return {"mark": Mark.TEXT, "stat": Stat.IDENTITY, "text_col": col, **opts}


def hline(value: float, **_opts: Any) -> dict[str, Any]:
    """Horizontal reference line at y = value."""
    return {"mark": Mark.RULE_H, "value": value}


def vline(value: float, **_opts: Any) -> dict[str, Any]:
    """Vertical reference line at x = value."""
    return {"mark": Mark.RULE_V, "value": value}


def hband(y1: float, y2: float, **_opts: Any) -> dict[str, Any]:
    """Horizontal reference band between y1 and y2."""
    return {"mark": Mark.BAND_H, "y1": y1, "y2": y2}


def value_bar(**opts: Any) -> dict[str, Any]:
    """Pre-aggregated bars: categorical x, continuous y, no counting."""
    return {"mark": Mark.RECT, "stat": Stat.IDENTITY, **opts}


def stacked_bar(**opts: Any) -> dict[str, Any]:
    return {"mark": Mark.RECT, "stat": Stat.COUNT, "position": Position.STACK, **opts}
