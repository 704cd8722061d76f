"""
Isometric projection and vertex helpers for the village meshes.

World space is x east, y south, z up. iso() maps a world point to the
drawing plane: x and y run along the two 30-degree isometric axes and z
lifts the point straight up the page.

Examples:
    >>> from civitas.village.projection import iso
    >>> iso((0, 0, 2))
    (0.0, -2.0)
    >>> x, y = iso((1, 0, 0))
    >>> round(x, 4), y
    (0.866, 0.5)
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from civitas.core.typing import Face, Point2, Point3

__all__ = [
    "COS30",
    "SIN30",
    "CAMERA_ANGLE",
    "iso",
    "circle_verts",
    "translate_verts",
    "rotate_verts",
    "aligned_faces",
    "index_ranges",
]

COS30 = math.sqrt(3) / 2.0
SIN30 = 0.5
# Rings start at the vertex nearest the viewer so the seam stays hidden.
CAMERA_ANGLE = math.pi - math.pi / 4


def iso(p: Sequence[float]) -> Point2:
    x, y, z = p
    return ((x - y) * COS30, (x + y) * SIN30 - z)


def circle_verts(r: float, n: int) -> list[Point3]:
    """`n` points on a circle of radius `r` in the z = 0 plane."""
    step = 2 * math.pi / n
    return [
        (r * math.cos(CAMERA_ANGLE + i * step), r * math.sin(CAMERA_ANGLE + i * step), 0.0)
        for i in range(n)
    ]


def translate_verts(vs: Iterable[Sequence[float]], offset: Sequence[float]) -> list[Point3]:
    dx, dy, dz = offset
    return [(v[0] + dx, v[1] + dy, v[2] + dz) for v in vs]


def rotate_verts(vs: Iterable[Sequence[float]], angles: Sequence[float]) -> list[Point3]:
    """
    Rotate vertices by (rx, ry, rz) radians about the x, then y, then z axis.

    Examples:
        >>> [tuple(round(c, 6) + 0.0 for c in v) for v in rotate_verts([(1, 0, 0)], (0, 0, math.pi / 2))]
        [(0.0, 1.0, 0.0)]
    """
    rx, ry, rz = angles
    cx, sx = math.cos(rx), math.sin(rx)
    cy, sy = math.cos(ry), math.sin(ry)
    cz, sz = math.cos(rz), math.sin(rz)
    out: list[Point3] = []
    for x, y, z in vs:
        y, z = y * cx - z * sx, y * sx + z * cx
        x, z = x * cy + z * sy, z * cy - x * sy
        x, y = x * cz - y * sz, x * sz + y * cz
        out.append((x, y, z))
    return out


def aligned_faces(n: int, offset: int) -> list[Face]:
    """
    Quads joining ring ``offset..offset+n-1`` to the ring that follows it.

    Face i is ``(o+i, o+(i+1)%n, o+n+(i+1)%n, o+n+i)``, so two consecutive
    rings of n vertices become a band of n side faces.
    """
    return [(offset + i, offset + (i + 1) % n, offset + n + (i + 1) % n, offset + n + i) for i in range(n)]


def index_ranges(counts: Iterable[int]) -> list[Face]:
    """
    Consecutive index runs, one per count.

    Examples:
        >>> index_ranges([2, 3])
        [(0, 1), (2, 3, 4)]
    """
    out: list[Face] = []
    start = 0
    for c in counts:
        out.append(tuple(range(start, start + c)))
        start += c
    return out
