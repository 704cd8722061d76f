"""
Mesh builders for the village scene: houses, temples, aqueducts, and friends.

A Mesh is a role name, a vertex list, faces (vertex indices in winding order),
and one fill per face. Composite meshes (temple, forum) carry no faces of
their own and group their parts as children.

Faces are listed back to front so that drawing them in order (painter's
algorithm) leaves the near faces on top under the iso() projection.

Notes
- Fills are hex colors or pattern references such as ``url(#cobble)``
  (patterns are defined by civitas.village.scene.defs()).
- Sizes are in world units; the scene lays slides out on hexes of radius 50.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from civitas.core.constants import SLIDE_PALETTE, VILLAGE_COLORS
from civitas.core.typing import Face, Point3

from .projection import aligned_faces, circle_verts, index_ranges, rotate_verts, translate_verts

__all__ = [
    "COBBLE",
    "Mesh",
    "circle_mesh",
    "house_mesh",
    "granary_mesh",
    "aqueduct_mesh",
    "oblong_mesh",
    "roof_mesh",
    "temple_mesh",
    "forum_mesh",
    "obelisk_mesh",
    "cylinder_mesh",
    "colosseum_mesh",
    "cart_mesh",
    "fire_mesh",
]

COBBLE = "url(#cobble)"

_C = VILLAGE_COLORS


@dataclass(frozen=True)
class Mesh:
    """
    A colored polygon mesh, optionally grouping child meshes.

    Attributes:
        role (str): What the mesh depicts ("house", "pillar", ...).
        vertices (tuple[Point3, ...]): World-space vertices.
        faces (tuple[Face, ...]): Vertex index tuples.
        colors (tuple[str, ...]): One fill per face.
        children (tuple[Mesh, ...]): Sub-meshes drawn after this mesh's faces.

    Raises:
        ValueError: colors and faces differ in length, or a face indexes a
            missing vertex.
    """

    role: str
    vertices: tuple[Point3, ...] = ()
    faces: tuple[Face, ...] = ()
    colors: tuple[str, ...] = ()
    children: tuple[Mesh, ...] = ()

    def __post_init__(self) -> None:
        if len(self.colors) != len(self.faces):
            raise ValueError(f"{self.role}: {len(self.faces)} faces but {len(self.colors)} colors")
        n = len(self.vertices)
        for face in self.faces:
            if any(i < 0 or i >= n for i in face):
                raise ValueError(f"{self.role}: face {face} indexes outside {n} vertices")

    def walk(self) -> list[Mesh]:
        """This mesh and all descendants, depth first."""
        out = [self]
        for child in self.children:
            out.extend(child.walk())
        return out


def _mesh(role: str, vertices: Sequence[Point3], faces: Sequence[Face], colors: Sequence[str]) -> Mesh:
    return Mesh(
        role=role,
        vertices=tuple(tuple(float(c) for c in v) for v in vertices),  # type: ignore[misc]
        faces=tuple(tuple(f) for f in faces),
        colors=tuple(colors),
    )


def _cone_faces(n: int) -> list[Face]:
    # Ring n..2n-1 joined to the apex at index 2n.
    return [(i + n, (i + 1) % n + n, 2 * n) for i in range(n)]


def circle_mesh(r: float, n: int, color: str, role: str = "circle") -> Mesh:
    """A flat n-gon disc in the z = 0 plane."""
    return _mesh(role, circle_verts(r, n), [tuple(range(n))], [color])


def house_mesh(w: float, d: float, h: float, rh: float) -> Mesh:
    """
    A gabled house: floor, four walls, and a ridge roof.

    Args:
        w: Width along x.
        d: Depth along y.
        h: Wall height.
        rh: Ridge height above the walls.
    """
    vertices = [
        (0, 0, 0), (w, 0, 0), (w, d, 0), (0, d, 0),
        (0, 0, h), (w, 0, h), (w, d, h), (0, d, h),
        (0, d / 2, h + rh), (w, d / 2, h + rh),
    ]
    faces = [
        (0, 1, 2, 3),  # floor
        (3, 0, 4, 7),
        (2, 3, 7, 6),
        (0, 1, 5, 4),
        (1, 2, 6, 5),
        (7, 4, 8),  # gable
        (6, 7, 8, 9),
        (4, 5, 9, 8),
        (5, 6, 9),  # gable
    ]
    colors = [_C["ddblue"], *[_C["gyellow"]] * 4, *[_C["cred"]] * 4]
    return _mesh("house", vertices, faces, colors)


def granary_mesh(r: float, h: float, rh: float, n: int) -> Mesh:
    """A round granary: n-gon walls of height h under a cone of height rh."""
    bottom = circle_verts(r, n)
    top = translate_verts(circle_verts(r, n), (0, 0, h))
    faces = [tuple(range(n)), *aligned_faces(n, 0), *_cone_faces(n)]
    colors = [_C["ddblue"], *[_C["gyellow"]] * n, *[_C["cred"]] * n]
    return _mesh("granary", [*bottom, *top, (0, 0, h + rh)], faces, colors)


def aqueduct_mesh(length: float, width: float, height: float, arch_width: float, n: int) -> Mesh:
    """
    An aqueduct: n arches (pairs of legs) carrying a gutter along x.

    A negative length runs the aqueduct toward -x.
    """
    seg = length / n
    vertices: list[Point3] = []
    faces: list[Face] = []
    for i in range(n):
        x0 = i * seg + 0.5 * seg
        x1 = x0 + arch_width
        vertices += [
            (x0, 0, 0), (x1, 0, 0), (x1, 0, height), (x0, 0, height),
            (x0, width, 0), (x1, width, 0), (x1, width, height), (x0, width, height),
        ]
        o = 8 * i
        faces += [
            (o, o + 1, o + 2, o + 3),
            (o + 3, o, o + 4, o + 7),
            (o + 1, o + 2, o + 6, o + 5),
            (o + 4, o + 5, o + 6, o + 7),
        ]
    top = height + 1.0
    vertices += [
        (0, 0, height), (length, 0, height), (length, width, height), (0, width, height),
        (0, 0, top), (length, 0, top), (length, width, top), (0, width, top),
    ]
    o = 8 * n
    faces += [
        (o, o + 1, o + 2, o + 3),  # gutter bed
        (o, o + 1, o + 5, o + 4),
        (o + 2, o + 3, o + 7, o + 6),
    ]
    colors = [*[_C["gyellow"]] * (4 * n), _C["ddblue"], _C["gyellow"], _C["gyellow"]]
    return _mesh("aqueduct", vertices, faces, colors)


def oblong_mesh(x: float, y: float, z: float, w: float, d: float, h: float, color: str, role: str) -> Mesh:
    """A box centered on (x, y) in plan, with its base at height z."""
    hw, hd = w / 2, d / 2
    vertices = [
        (x - hw, y - hd, z), (x + hw, y - hd, z), (x + hw, y + hd, z), (x - hw, y + hd, z),
        (x - hw, y - hd, z + h), (x + hw, y - hd, z + h), (x + hw, y + hd, z + h), (x - hw, y + hd, z + h),
    ]
    faces = [
        (0, 1, 2, 3),
        (0, 1, 5, 4),
        (3, 0, 4, 7),
        (4, 5, 6, 7),
        (2, 3, 7, 6),
        (1, 2, 6, 5),
    ]
    return _mesh(role, vertices, faces, [color] * 6)


def roof_mesh(x: float, y: float, z: float, w: float, d: float, rh: float, color: str, role: str) -> Mesh:
    """A ridge roof over the w x d rectangle centered on (x, y) at height z."""
    hx, hy = w / 2, d / 2
    vertices = [
        (x - hx, y - hy, z),
        (x + hx, y - hy, z),
        (x + hx, y + hy, z),
        (x - hx, y + hy, z),
        (x - hx, y, z + rh),
        (x + hx, y, z + rh),
    ]
    faces = [(0, 3, 4), (1, 0, 4, 5), (3, 2, 5, 4), (2, 1, 5)]
    return _mesh(role, vertices, faces, [color] * 4)


_TEMPLE_PILLARS = (
    (-4, -3), (4, -3), (1.33, -3), (-1.33, -3), (4, 0),
    (4, 3), (1.33, 3), (-1.33, 3), (-4, 3), (-4, 0),
)


def temple_mesh() -> Mesh:
    """A plinth, a colonnade of ten pillars, and a pediment."""
    parts = [oblong_mesh(0, 0, 0, 10, 8, 1, _C["sstone"], "base")]
    parts += [oblong_mesh(px, py, 1, 0.5, 0.5, 4, _C["swhite"], "pillar") for px, py in _TEMPLE_PILLARS]
    parts.append(roof_mesh(0, 0, 5, 10, 8, 2, _C["swhite"], "pediment"))
    return Mesh(role="temple", children=tuple(parts))


def forum_mesh() -> Mesh:
    """Three stacked stone terraces."""
    return Mesh(
        role="forum",
        children=tuple(
            oblong_mesh(0, 0, z, w, d, 1, _C["sstone"], "base") for z, w, d in ((0, 10, 8), (1, 8, 6), (2, 6, 4))
        ),
    )


def obelisk_mesh(r: float, h: float, rh: float, n: int) -> Mesh:
    """A tapering n-sided shaft (top radius r/2) with a pyramidion of height rh."""
    bottom = circle_verts(r, n)
    top = translate_verts(circle_verts(0.5 * r, n), (0, 0, h))
    faces = [tuple(range(n)), *aligned_faces(n, 0), *_cone_faces(n)]
    colors = [_C["ddblue"], *[_C["swhite"]] * (2 * n)]
    return _mesh("obelisk", [*bottom, *top, (0, 0, h + rh)], faces, colors)


def cylinder_mesh(r: float, h: float, n: int, color: str) -> Mesh:
    """Open n-sided cylinder walls (no caps)."""
    bottom = circle_verts(r, n)
    top = translate_verts(circle_verts(r, n), (0, 0, h))
    return _mesh("cylinder", [*bottom, *top], aligned_faces(n, 0), [color] * n)


def colosseum_mesh(r: float, h: float, n: int) -> Mesh:
    """
    An amphitheatre: outer wall, tiered seating, and an arena floor.

    The far half of the outer wall is drawn first, then the arena and
    seating, then the near half of the wall on top.
    """
    outer_bottom = circle_verts(r, n)
    outer_top = translate_verts(circle_verts(r, n), (0, 0, h))
    seating_top = translate_verts(circle_verts(r, n), (0, 0, 0.7 * h))
    seating_mid = translate_verts(circle_verts(0.5 * r, n), (0, 0, 0.3 * h))
    inner_bottom = circle_verts(0.5 * r, n)

    half = n // 2
    outer = aligned_faces(n, 0)
    far, near = outer[:half], outer[half:]
    seats = aligned_faces(n, 2 * n)
    inner = aligned_faces(n, 3 * n)
    floor = tuple(reversed(range(n)))
    faces = [floor, *far, *inner, *seats, *near]
    colors = [
        _C["cbrown"],
        *[_C["sstone"]] * half,
        *[_C["sstone"]] * n,
        *[COBBLE] * n,
        *[_C["swhite"]] * (n - half),
    ]
    vertices = [*outer_bottom, *outer_top, *seating_top, *seating_mid, *inner_bottom]
    return _mesh("colosseum", vertices, faces, colors)


def cart_mesh() -> Mesh:
    """A two-wheeled hand cart with a pair of shafts."""
    length, width, h = 4.0, 2.0, 2.0
    l2, w2 = length / 2.0, width / 2.0
    base = [(-w2, -l2, h), (w2, -l2, h), (w2, l2, h), (-w2, l2, h)]
    wheel = rotate_verts(circle_verts(w2, 10), (0, math.pi / 2, 0))
    back_wheel = translate_verts(wheel, (-w2, 0, h))
    front_wheel = translate_verts(wheel, (w2, 0, h))
    pole = [(-0.1, l2, 0), (0, length, 0), (0.1, l2, 0)]
    back_pole = translate_verts(pole, (-w2 + 0.1, 0, h))
    front_pole = translate_verts(pole, (w2 - 0.1, 0, h))
    vertices = [*back_wheel, *base, *front_wheel, *back_pole, *front_pole]
    faces = index_ranges([len(wheel), len(base), len(wheel), len(pole), len(pole)])
    return _mesh("cart", vertices, faces, [_C["cbrown"]] * 5)


def fire_mesh() -> Mesh:
    """A campfire flame: a hexagonal cone rising from z = 1 to z = 10."""
    n, r = 6, 3
    ring = translate_verts(circle_verts(r, n), (0, 0, 1))
    faces = [tuple(range(n)), *((i, (i + 1) % n, n) for i in range(n))]
    return _mesh("fire", [*ring, (0, 0, 10)], faces, [SLIDE_PALETTE[9]] * (n + 1))
