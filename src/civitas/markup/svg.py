"""
Small SVG builders over hiccup nodes: point strings, polygons, closed paths,
and transform strings.

Examples:
    >>> from civitas.markup.svg import polygon, pts
    >>> pts([(0, 0), (1.5, 2)])
    '0,0 1.5,2'
    >>> polygon({"fill": "red"}, [(0, 0), (1, 0), (0, 1)])
    ['polygon', {'fill': 'red', 'points': '0,0 1,0 0,1'}]
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from civitas.core.typing import Node

from .hiccup import format_number

__all__ = [
    "pt",
    "pts",
    "polygon",
    "path",
    "translate",
    "rotate",
    "scale",
]


def pt(p: Sequence[float]) -> str:
    """Format one point as ``x,y``."""
    return f"{format_number(p[0])},{format_number(p[1])}"


def pts(points: Iterable[Sequence[float]]) -> str:
    """Format points as a space-separated ``x,y`` list."""
    return " ".join(pt(p) for p in points)


def polygon(attrs: Mapping[str, Any] | None, points: Iterable[Sequence[float]]) -> Node:
    """Return a ``polygon`` node with `attrs` and the given points."""
    return ["polygon", {**(attrs or {}), "points": pts(points)}]


def path(attrs: Mapping[str, Any] | None, points: Iterable[Sequence[float]]) -> Node:
    """Return a closed ``path`` node (``M start L rest Z``)."""
    start, *more = list(points)
    return ["path", {**(attrs or {}), "d": f"M{pt(start)} L{pts(more)} Z"}]


def translate(x: float, y: float) -> str:
    return f"translate({format_number(x)},{format_number(y)})"


def rotate(deg: float, cx: float | None = None, cy: float | None = None) -> str:
    if cx is None or cy is None:
        return f"rotate({format_number(deg)})"
    return f"rotate({format_number(deg)},{format_number(cx)},{format_number(cy)})"


def scale(sx: float, sy: float | None = None) -> str:
    if sy is None:
        return f"scale({format_number(sx)})"
    return f"scale({format_number(sx)},{format_number(sy)})"
