"""
Hexagon geometry in cube coordinates.

Hex layouts use cube coordinates ``(q, r, s)`` with ``q + r + s == 0``
(see redblobgames' hexagon guide). Rings and spirals enumerate cells outward
from the origin; the flat-topped projection turns a cell into cartesian
coordinates for an edge length of 1.

Notes
- cube_ring(k) has 6k cells (1 for k == 0); cube_spiral(k) covers rings
  0..k-1, so it yields 1 + 3k(k-1) cells.
- Cartesian outputs are tuples of floats; callers scale them by the hex radius.

Examples:
    >>> from civitas.village.geometry import cube_ring, spiral
    >>> len(cube_ring(2))
    12
    >>> spiral(2)[0]
    (0.0, 0.0)
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from civitas.core.typing import Point2

__all__ = [
    "SQRT3",
    "SIN60",
    "FLAT_HEXAGON_POINTS",
    "DIRECTIONS",
    "triangular_layers",
    "neighbor",
    "cube_to_cartesian_flat",
    "cube_to_cartesian_pointy",
    "cube_ring",
    "cube_spiral",
    "spiral",
    "walk_radially",
    "build_sector",
    "sectors",
    "scale_points",
    "hex_points",
]

Cube = tuple[int, int, int]

SQRT3 = math.sqrt(3)
# Height of the equilateral triangle with edge 2, halved.
SIN60 = SQRT3 / 2

FLAT_HEXAGON_POINTS: tuple[Point2, ...] = (
    (1.0, 0.0),
    (0.5, SIN60),
    (-0.5, SIN60),
    (-1.0, 0.0),
    (-0.5, -SIN60),
    (0.5, -SIN60),
)

DIRECTIONS: tuple[Cube, ...] = (
    (1, 0, -1),
    (1, -1, 0),
    (0, -1, 1),
    (-1, 0, 1),
    (-1, 1, 0),
    (0, 1, -1),
)


def triangular_layers(t: int) -> int:
    """
    Number of layers needed to hold `t` positions.

    Inverts the triangular number T_n = n(n + 1)/2 and rounds up, so a sector
    with k layers holds k(k + 1)/2 positions.

    Examples:
        >>> [triangular_layers(t) for t in (1, 3, 4, 6, 7)]
        [1, 2, 3, 3, 4]
    """
    return int(math.ceil((math.sqrt(8 * t + 1) - 1) / 2))


def neighbor(cube: Sequence[int], direction: int) -> Cube:
    d = DIRECTIONS[direction]
    return (cube[0] + d[0], cube[1] + d[1], cube[2] + d[2])


def cube_to_cartesian_flat(cube: Sequence[int]) -> Point2:
    """Center of a flat-topped hex cell."""
    q, r = cube[0], cube[1]
    return (1.5 * q, SIN60 * q + SQRT3 * r)


def cube_to_cartesian_pointy(cube: Sequence[int]) -> Point2:
    """Center of a pointy-topped hex cell."""
    q, r = cube[0], cube[1]
    return (SQRT3 * q + SIN60 * r, 1.5 * r)


def cube_ring(radius: int) -> list[Cube]:
    """Cells at distance `radius` from the origin, walking once around the ring."""
    if radius == 0:
        return [(0, 0, 0)]
    start = DIRECTIONS[4]
    cube: Cube = (start[0] * radius, start[1] * radius, start[2] * radius)
    out: list[Cube] = []
    for direction in range(6):
        for _ in range(radius):
            out.append(cube)
            cube = neighbor(cube, direction)
    return out


def cube_spiral(radius: int) -> list[Cube]:
    """Rings 0..radius-1 concatenated, innermost first."""
    return [c for k in range(radius) for c in cube_ring(k)]


def spiral(radius: int) -> list[Point2]:
    return [cube_to_cartesian_flat(c) for c in cube_spiral(radius)]


def walk_radially(start: Sequence[int], direction: int, steps: int) -> list[Cube]:
    """`start` followed by `steps` neighbors in one direction."""
    out: list[Cube] = [tuple(start)]  # type: ignore[list-item]
    for _ in range(steps):
        out.append(neighbor(out[-1], direction))
    return out


def build_sector(direction: int, depth: int) -> list[Point2]:
    """
    Cartesian cells of the wedge between `direction` and the next direction.

    Layer k walks k steps outward along `direction`, then k steps along the
    secondary direction from each of those cells. Layers are emitted in order,
    so earlier positions sit closer to the center.
    """
    secondary = (direction + 1) % 6
    start = DIRECTIONS[direction]
    out: list[Point2] = []
    for layer in range(1, depth + 1):
        for cell in walk_radially(start, direction, layer):
            out.extend(cube_to_cartesian_flat(c) for c in walk_radially(cell, secondary, layer))
    return out


def sectors(depth: int = 5) -> list[list[Point2]]:
    """One sector per direction."""
    return [build_sector(d, depth) for d in range(6)]


def scale_points(points: Iterable[Sequence[float]], s: float) -> list[Point2]:
    return [(p[0] * s, p[1] * s) for p in points]


def hex_points(r: float) -> list[Point2]:
    """Corners of a flat-topped hexagon with circumradius `r`."""
    return scale_points(FLAT_HEXAGON_POINTS, r)
