"""
Coordinate systems: one function (data_x, data_y) -> (px, py) per panel.

Scales already map data to pixels; the coord decides how the two scaled
values combine:

- cartesian: (sx(dx), sy(dy)).
- flip: (sx(dy), sy(dx)); the caller swaps domains when building the scales.
- polar: scaled x becomes the angle (0 at 12 o'clock, clockwise) and scaled y
  the radius, up to min(width, height)/2 - margin.

Renderers decompose every mark into points before calling the coord, so no
renderer branches on the coordinate system. Marks laid out in pixel space
(categorical bars) go through pixel_warp() instead.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any

from civitas.core.grammar import CoordKind, coord_from_value

__all__ = ["Coord", "PixelWarp", "make_coord", "pixel_warp", "polar_center"]

Coord = Callable[[Any, Any], tuple[float, float]]
PixelWarp = Callable[[float, float], tuple[float, float]]


def polar_center(width: float, height: float, margin: float) -> tuple[float, float, float]:
    """Return (cx, cy, r_max) for a polar panel."""
    cx, cy = width / 2.0, height / 2.0
    return cx, cy, min(cx, cy) - margin


def _identity(px: float, py: float) -> tuple[float, float]:
    return px, py


def pixel_warp(kind: CoordKind | str | None, width: float, height: float, margin: float) -> PixelWarp:
    """
    Return the map from cartesian panel pixels to final pixels.

    Identity for cartesian and flip; for polar, x pixels become the angle and
    y pixels the radius.
    """
    ck = CoordKind.CARTESIAN if kind is None else coord_from_value(kind)
    if ck is not CoordKind.POLAR:
        return _identity

    cx, cy, r_max = polar_center(width, height, margin)
    x_lo, x_span = float(margin), float(width - 2 * margin)
    y_lo, y_span = float(margin), float(height - 2 * margin)

    def polar(px: float, py: float) -> tuple[float, float]:
        t_angle = (px - x_lo) / max(1.0, x_span)
        # Small py is the top of the panel: large value, large radius.
        t_radius = ((y_lo + y_span) - py) / max(1.0, y_span)
        angle = 2.0 * math.pi * t_angle - math.pi / 2.0
        radius = r_max * t_radius
        return cx + radius * math.cos(angle), cy + radius * math.sin(angle)

    return polar


def make_coord(
    kind: CoordKind | str | None,
    sx: Callable[[Any], float],
    sy: Callable[[Any], float],
    width: float,
    height: float,
    margin: float,
) -> Coord:
    """
    Build the coordinate function for a panel.

    Args:
        kind: cartesian (default), flip, or polar.
        sx: x scale (data -> pixel over [margin, width - margin]).
        sy: y scale (data -> pixel over [height - margin, margin]).
        width: Panel width in pixels.
        height: Panel height in pixels.
        margin: Panel margin in pixels.

    Examples:
        >>> from civitas.plot.coords import make_coord
        >>> flip = make_coord("flip", lambda v: v * 10, lambda v: v * 100, 200, 200, 10)
        >>> flip(1, 2)
        (20, 100)
    """
    ck = CoordKind.CARTESIAN if kind is None else coord_from_value(kind)
    warp = pixel_warp(ck, width, height, margin)

    if ck is CoordKind.FLIP:

        def flip(dx: Any, dy: Any) -> tuple[float, float]:
            return sx(dy), sy(dx)

        return flip

    if ck is CoordKind.POLAR:

        def polar(dx: Any, dy: Any) -> tuple[float, float]:
            return warp(sx(dx), sy(dy))

        return polar

    def cartesian(dx: Any, dy: Any) -> tuple[float, float]:
        return sx(dx), sy(dy)

    return cartesian
