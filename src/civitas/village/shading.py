"""
Flat shading for village meshes.

Each face is lit by a single directional light from (1, 1, 1), with
``lighting = max(0.3, n . light)``. The face color is mixed toward black by
that amount, so each channel becomes ``c * (1 - lighting)``: faces turned away
from the light keep 70% of their color and faces square to it go black.

Pattern fills (``url(#...)``) cannot be mixed and pass through unchanged.

Examples:
    >>> from civitas.village.shading import shade_color
    >>> shade_color("#646464", (1, 1, 1))
    '#000000'
    >>> shade_color("#646464", (0, 0, -1))
    '#464646'
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from civitas.core.typing import Face

from .meshes import Mesh

__all__ = [
    "LIGHT_DIR",
    "MIN_LIGHTING",
    "normalize",
    "dot",
    "face_normal",
    "lighting",
    "shade_color",
    "shade_faces",
    "shade_mesh",
]

MIN_LIGHTING = 0.3

Vec3 = tuple[float, float, float]


def normalize(v: Sequence[float]) -> Vec3:
    x, y, z = v
    m = math.sqrt(x * x + y * y + z * z)
    if m == 0:
        return (0.0, 0.0, 0.0)
    return (x / m, y / m, z / m)


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


LIGHT_DIR: Vec3 = normalize((1, 1, 1))


def face_normal(vertices: Sequence[Sequence[float]], face: Face) -> Vec3:
    """Cross product of the face's first two edges (unnormalized)."""
    a, b, c = (vertices[i] for i in face[:3])
    ux, uy, uz = b[0] - a[0], b[1] - a[1], b[2] - a[2]
    vx, vy, vz = c[0] - a[0], c[1] - a[1], c[2] - a[2]
    return (uy * vz - uz * vy, uz * vx - ux * vz, ux * vy - uy * vx)


def lighting(normal: Sequence[float]) -> float:
    return max(MIN_LIGHTING, dot(normalize(normal), LIGHT_DIR))


def _parse_hex(color: str) -> tuple[int, int, int]:
    s = color.lstrip("#")
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) != 6:
        raise ValueError(f"not a hex color: {color!r}")
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


def shade_color(color: str, normal: Sequence[float]) -> str:
    """
    Mix `color` toward black by lighting(normal): each channel becomes c * (1 - lighting).

    Raises:
        ValueError: `color` is neither a hex color nor a ``url(...)`` fill.
    """
    if color.startswith("url("):
        return color
    keep = 1 - lighting(normal)
    r, g, b = (min(255, max(0, round(c * keep))) for c in _parse_hex(color))
    return f"#{r:02x}{g:02x}{b:02x}"


def shade_faces(vertices: Sequence[Sequence[float]], faces: Sequence[Face], base_color: str) -> list[str]:
    """One shaded fill per face, all from the same base color."""
    return [shade_color(base_color, face_normal(vertices, f)) for f in faces]


def shade_mesh(mesh: Mesh) -> Mesh:
    """A copy of `mesh` (and its children) with every face color shaded."""
    colors = tuple(
        shade_color(c, face_normal(mesh.vertices, f)) if len(f) >= 3 else c
        for f, c in zip(mesh.faces, mesh.colors)
    )
    return Mesh(
        role=mesh.role,
        vertices=mesh.vertices,
        faces=mesh.faces,
        colors=colors,
        children=tuple(shade_mesh(ch) for ch in mesh.children),
    )
