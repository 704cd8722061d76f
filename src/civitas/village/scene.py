"""
The village scene: isometric slides laid out on a hexagonal spiral.

Each slide is a pair ``(attrs, node)``: attrs style the slide's hex tile
(usually just a fill) and node is the hiccup content drawn on top of it.
village_svg() places slide i at the i-th cell of geometry.spiral(), scaled
by the tile radius, and tags every tile with ``data-step`` so a deck viewer
(see civitas.village.deck) can frame them one at a time.

Text is written in markdown and embedded through ``foreignObject`` as XHTML.

Notes
- Meshes are drawn in face order (painter's algorithm); optional flat
  shading goes through civitas.village.shading.
- Fills that reference ``url(#cobble)`` or ``url(#writing)`` need defs() in
  the same document; village_svg() includes it.

Examples:
    >>> from civitas.markup.hiccup import to_markup
    >>> from civitas.village.scene import village_svg
    >>> to_markup(village_svg()).startswith('<svg id="app"')
    True
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import markdown

from civitas.core.constants import SLIDE_PALETTE, SVG_NS, VILLAGE_COLORS, XHTML_NS, XLINK_NS
from civitas.core.typing import Node
from civitas.markup.hiccup import Raw
from civitas.markup.svg import polygon, pts, translate

from .geometry import hex_points, spiral
from .meshes import (
    COBBLE,
    Mesh,
    aqueduct_mesh,
    cart_mesh,
    circle_mesh,
    colosseum_mesh,
    cylinder_mesh,
    fire_mesh,
    forum_mesh,
    granary_mesh,
    house_mesh,
    obelisk_mesh,
    oblong_mesh,
    temple_mesh,
)
from .projection import iso
from .shading import shade_mesh

__all__ = [
    "TILE_RADIUS",
    "Slide",
    "defs",
    "mesh_to_hiccup",
    "pillar",
    "maze",
    "posts",
    "tile",
    "markdown_html",
    "markdown_block",
    "slides",
    "slide_centers",
    "village_svg",
]

logger = logging.getLogger(__name__)

TILE_RADIUS = 50
Slide = tuple[dict[str, Any], Node]

_C = VILLAGE_COLORS
_MD_EXTENSIONS = ["tables", "fenced_code"]

# Markdown is rendered at 5x and scaled down so small text stays crisp.
_TEXT_STYLE: dict[str, Any] = {
    "width": "500%",
    "height": "500%",
    "transform": "scale(0.2)",
    "transform-origin": "top left",
    "padding": "20px",
    "text-align": "center",
    "border": "none",
}


def defs() -> Node:
    """Shared clip path and fill patterns (``#hex``, ``#writing``, ``#cobble``)."""
    return [
        "defs",
        ["clipPath", {"id": "hex"}, ["polygon", {"points": pts(hex_points(5))}]],
        [
            "pattern#writing",
            {"width": 2, "height": 2, "patternUnits": "userSpaceOnUse"},
            ["path", {"d": "M0,1 L2,1", "stroke": "#444", "stroke-width": 0.05, "opacity": 0.4}],
            ["path", {"d": "M0,1.2 L2,1.2", "stroke": "#666", "stroke-width": 0.05, "opacity": 0.3}],
            ["path", {"d": "M0,0.8 L2,0.8", "stroke": "#333", "stroke-width": 0.03, "opacity": 0.5}],
        ],
        [
            "pattern#cobble",
            {
                "width": 2,
                "height": 2,
                "patternUnits": "userSpaceOnUse",
                "patternTransform": "scale(1,0.5) rotate(30)",
            },
            ["rect", {"x": 0, "y": 0, "width": 2, "height": 2, "fill": "#d9d9d9"}],
            ["rect", {"x": 1, "y": 1, "width": 1, "height": 1, "fill": "#bfbfbf"}],
        ],
    ]


def mesh_to_hiccup(mesh: Mesh, *, shade: bool = False) -> Node:
    """
    Project a mesh through iso() into a group of polygons.

    Args:
        mesh: Mesh to draw; children are drawn after the mesh's own faces.
        shade: Apply flat shading to face colors first.

    Returns:
        Node: ``["g", {"data-role": role}, *polygons, *child_groups]``.
    """
    if shade:
        mesh = shade_mesh(mesh)
    faces = [
        polygon({"fill": color}, (iso(mesh.vertices[i]) for i in face))
        for face, color in zip(mesh.faces, mesh.colors)
    ]
    return ["g", {"data-role": mesh.role}, faces, [mesh_to_hiccup(ch) for ch in mesh.children]]


def _at(x: float, y: float, *children: Any, extra: str = "") -> Node:
    transform = translate(x, y) + (f" {extra}" if extra else "")
    return ["g", {"transform": transform}, *children]


def pillar(attrs: Mapping[str, Any] | None = None, *, shade: bool = False) -> Node:
    """A column: slate plinth, hexagonal shaft, slate capital."""
    return [
        "g",
        dict(attrs or {}),
        mesh_to_hiccup(oblong_mesh(0, 0, -1, 3, 3, 1, _C["sstone"], "slate"), shade=shade),
        mesh_to_hiccup(cylinder_mesh(1, 10, 6, _C["sstone"]), shade=shade),
        mesh_to_hiccup(oblong_mesh(0, 0, 10, 3, 3, 1, _C["sstone"], "slate"), shade=shade),
    ]


def maze(*, shade: bool = False) -> Node:
    """A walled square with five parallel inner walls on a grey floor."""
    thickness, wall_height, cell = 1.0, 2.0, 20.0
    c2 = cell / 2.0
    walls = [(c2, 0.0, cell + thickness, thickness)]
    walls += [(x * cell / 5, c2, thickness, cell - thickness) for x in range(6)]
    walls.append((c2, cell, cell + thickness, thickness))
    floor = oblong_mesh(c2, c2, -2, cell + thickness, cell + thickness, 2, _C["mgray"], "floor")
    return [
        "g",
        {"data-role": "maze"},
        mesh_to_hiccup(floor, shade=shade),
        [
            mesh_to_hiccup(oblong_mesh(x, y, 0, w, d, wall_height, _C["sstone"], "wall"), shade=shade)
            for x, y, w, d in walls
        ],
    ]


def posts(n: int = 80, r: float = 3, palette: Sequence[str] = SLIDE_PALETTE[:11]) -> Node:
    """
    A honeycomb of `n` small hexes, one per article, with a caption.

    Args:
        n: Number of posts to draw.
        r: Hex radius.
        palette: Fills cycled over the hexes.
    """
    cells = spiral(100)[:n]
    edge = {"stroke": _C["dblue"], "stroke-width": 1}
    return [
        "g",
        _at(0, -8, markdown_block(f"{n} articles")),
        [
            "g",
            {"transform": "scale(0.8)"},
            [
                _at(r * x, r * y, polygon({"fill": palette[i % len(palette)], **edge}, hex_points(r)))
                for i, (x, y) in enumerate(cells)
            ],
        ],
    ]


def tile(r: float = 40) -> Node:
    """A standalone green hex tile as its own svg."""
    return [
        "svg",
        {"id": "app", "xmlns": SVG_NS, "viewBox": [-r, -r, 2 * r, 2 * r], "width": "100%"},
        ["g", {"transform": "rotate(90)"}, polygon({"fill": _C["dgreen"]}, hex_points(r - 2))],
    ]


def markdown_html(text: str) -> Raw:
    """Render markdown (with tables and fenced code) to an HTML fragment."""
    return Raw(markdown.markdown(text, extensions=_MD_EXTENSIONS, output_format="xhtml"))


def markdown_block(text: str, style: Mapping[str, Any] | None = None, *, light: bool = False) -> Node:
    """
    Markdown text inside a ``foreignObject`` centered on the origin.

    Args:
        text: Markdown source.
        style: CSS overrides merged over the default text style.
        light: White text (for dark tiles) instead of near-black.

    Returns:
        Node: ``foreignObject`` node, 75 x 50 units, overflow visible.
    """
    r = 25
    w = r * 3
    color = SLIDE_PALETTE[0] if light else SLIDE_PALETTE[12]
    css = {**_TEXT_STYLE, "color": color, **(style or {})}
    return [
        "foreignObject",
        {"x": -w / 2, "y": -r, "width": w, "height": 2 * r, "style": {"overflow": "visible"}},
        ["div", {"xmlns": XHTML_NS, "style": css}, markdown_html(text)],
    ]


def _m(mesh: Mesh, shade: bool) -> Node:
    return mesh_to_hiccup(mesh, shade=shade)


def _campfire(shade: bool) -> list[Node]:
    log = SLIDE_PALETTE[11]
    return [
        _m(circle_mesh(7, 6, COBBLE), shade),
        _m(oblong_mesh(0, 0, 0, 1, 11, 1, log, "log"), shade),
        _m(oblong_mesh(0, 0, 0, 11, 1, 1, log, "log"), shade),
        _m(fire_mesh(), shade),
    ]


def _blocks(nx: int, ny: int, nz: int, w: float, d: float, h: float, color: str, shade: bool) -> list[Node]:
    return [
        _m(oblong_mesh(i * w, j * d, k * h, w, d, h, color, "block"), shade)
        for i in range(nx)
        for j in range(ny)
        for k in range(nz)
    ]


_HOUSES = (
    (-27, -18, 6, 4, 3, 1),
    (-20, -15, 6, 4, 3, 1),
    (-32, -13, 6, 4, 3, 1),
    (-25, -10, 6, 4, 3, 1),
    (-38, -7, 6, 4, 3, 1),
    (-30, 0, 6, 4, 3, 1),
    (10, -20, 8, 4, 3, 1),
    (15, 20, 8, 4, 3, 1),
)

_CITY_BLOCKS = (
    (0, 0, 10, _C["dblue"]),
    (10, 0, 5, _C["lgreen"]),
    (-10, -20, 7, _C["dblue"]),
    (0, 20, 10, _C["gyellow"]),
    (10, -20, 10, _C["lgreen"]),
    (30, 0, 3, _C["lgreen"]),
    (20, 20, 7, _C["gyellow"]),
    (-25, 0, 10, _C["dblue"]),
    (0, 35, 3, _C["gyellow"]),
)


def slides(*, shade: bool = False) -> list[Slide]:
    """
    The talk's slides, in presentation order.

    Args:
        shade: Apply flat shading to every mesh.

    Returns:
        list[Slide]: ``(tile_attrs, content)`` pairs.
    """
    green, water, night = _C["dgreen"], _C["lblue"], "#171742"
    intro, why = SLIDE_PALETTE[1], SLIDE_PALETTE[11]
    out: list[Slide] = [
        (
            {"fill": intro},
            [
                "g",
                _m(circle_mesh(15, 6, COBBLE), shade),
                _m(circle_mesh(10, 10, _C["dblue"], "clojure"), shade),
                _m(cylinder_mesh(10, 1, 10, _C["sstone"]), shade),
                [_at(x, y, _m(house_mesh(w, d, h, rh), shade)) for x, y, w, d, h, rh in _HOUSES],
            ],
        ),
        (
            {"fill": intro},
            ["g", markdown_block("_meaning_\n\n**collaboration**\n\n`code`"), _at(1, 15, *_campfire(shade))],
        ),
        (
            {"fill": intro},
            [
                "g",
                markdown_block("## Code"),
                _at(0, 15, _m(circle_mesh(25, 6, COBBLE), shade), _m(temple_mesh(), shade)),
            ],
        ),
        (
            {"fill": why},
            [
                "g",
                _at(
                    0,
                    5,
                    _m(oblong_mesh(0, 20, 0, 15, 15, 10, _C["lblue"], "good"), shade),
                    _m(oblong_mesh(20, 0, 0, 15, 15, 10, _C["gyellow"], "evil"), shade),
                ),
                markdown_block("_“There is only one good, knowledge,  \nand one evil, ignorance.”_", light=True),
            ],
        ),
        (
            {"fill": why},
            [
                "g",
                _at(0, 40, markdown_block("Change", light=True)),
                _m(oblong_mesh(0, 0, 4, 20, 20, 1, COBBLE, "slate"), shade),
                [
                    pillar({"transform": f"{translate(x, y)} rotate({rot})"}, shade=shade)
                    for x, y, rot in ((0, -12, -90), (4, -10, 0), (8, -8, -20), (12, -6, 90))
                ],
            ],
        ),
        (
            {"fill": why},
            [
                "g",
                _at(0, 40, markdown_block("Construction", light=True)),
                _m(oblong_mesh(0, 0, 4, 20, 20, 1, COBBLE, "slate"), shade),
                [pillar({"transform": translate(x, y)}, shade=shade) for x, y in ((0, -12), (4, -10), (8, -8), (12, -6))],
            ],
        ),
        (
            {"fill": green},
            ["g", markdown_block("## Sharing", light=True), _at(20, -10, _m(granary_mesh(6, 6, 3, 6), shade))],
        ),
        (
            {"fill": green},
            ["g", markdown_block("## Blogging", light=True), _at(-20, 10, _m(forum_mesh(), shade), extra="scale(2)")],
        ),
        (
            {"fill": green},
            [
                "g",
                _blocks(5, 5, 3, 3, 1, 2, _C["sstone"], shade),
                _at(-10, 10, _m(cart_mesh(), shade), extra="scale(2)"),
            ],
        ),
        (
            {"fill": green},
            [
                "g",
                _at(
                    9,
                    4,
                    _m(oblong_mesh(0, 0, -1, 30, 30, 0, COBBLE, "platform"), shade),
                    _m(circle_mesh(10, 4, _C["ddblue"], "pool"), shade),
                    _m(cylinder_mesh(10, 1, 4, _C["sstone"]), shade),
                ),
                _at(10, 3, _m(aqueduct_mesh(-44, 3, 6, 2, 4), shade)),
            ],
        ),
        (
            {"fill": green},
            [
                "g",
                _m(oblong_mesh(0, 0, -4, 50, 50, 0, COBBLE, "platform"), shade),
                [
                    _m(oblong_mesh(0, 0, z, s, s, 1, _C["sstone"], "platform"), shade)
                    for z, s in ((-3, 25), (-2, 20), (-1, 15))
                ],
                _m(temple_mesh(), shade),
            ],
        ),
        (
            {"fill": green},
            [
                "g",
                markdown_block("## Documents", light=True),
                _at(0, 25, _m(oblong_mesh(0, 0, 0, 15, 1, 20, "url(#writing)", "slate"), shade)),
            ],
        ),
        (
            {"fill": green},
            [
                "g",
                markdown_block("_Verba volant,  \nscripta manent_", light=True),
                [
                    _m(oblong_mesh(x, y, -5, 1, 1, 5, _C["cbrown"], "leg"), shade)
                    for x, y in ((1, -1), (8, -1), (1, 11), (8, 11))
                ],
                _m(oblong_mesh(5, 5, 0, 10, 15, 1, _C["cbrown"], "table"), shade),
                _at(1, 1, _blocks(3, 3, 3, 2, 3, 1, _C["gyellow"], shade), extra="scale(0.5)"),
                [
                    "g",
                    {"stroke-width": 0.2},
                    [
                        _at(x, y, _m(circle_mesh(0.3, 10, _C["gyellow"], "coin"), shade))
                        for x, y in ((0, 5), (0, 6), (1, 6), (1.5, 5.5), (-0.5, 5.5), (-0.5, 5), (-1, 5.5), (-2, 5))
                    ],
                ],
            ],
        ),
        (
            {"fill": SLIDE_PALETTE[3]},
            [
                "g",
                markdown_block(
                    "```\n;; **Markdown** comments.\n```\n\n---\n\n**Markdown** comments.\n",
                ),
            ],
        ),
        (
            {"fill": SLIDE_PALETTE[3]},
            [
                "g",
                markdown_block(
                    "| Table | Chart | Image |\n|--|--|--|\n| Summarize data | Enable comparison | Enhance appeal |\n",
                    {"text-align": "left"},
                ),
            ],
        ),
        (
            {"fill": SLIDE_PALETTE[0]},
            [
                "g",
                markdown_block('```\n[:svg {:width "100%"}\n [:circle {:r 40}]]\n```', {"text-align": "left"}),
                ["circle", {"r": 10, "cy": 10, "fill": _C["lblue"]}],
                ["circle", {"r": 5, "cy": 10, "fill": _C["lgreen"]}],
            ],
        ),
        (
            {"fill": water},
            [
                "g",
                _m(circle_mesh(30, 10, SLIDE_PALETTE[11]), shade),
                _at(0, -10, maze(shade=shade)),
            ],
        ),
        (
            {"fill": water},
            [
                "g",
                markdown_block("Big and small"),
                _at(0, 5, _m(oblong_mesh(0, 0, -4, 45, 45, 0, _C["dgreen"], "platform"), shade)),
                _at(-15, 5, _m(colosseum_mesh(10, 8, 10), shade)),
                [_at(x, y, _m(house_mesh(4, 2, 1, 0.5), shade)) for x, y in ((25, 10), (15, 10), (20, 5))],
            ],
        ),
        (
            {"fill": water},
            [
                "g",
                markdown_block("Posts"),
                _at(0, 10, posts()),
            ],
        ),
        (
            {"fill": water},
            [
                "g",
                markdown_block("clojurecivitas.github.io"),
                [
                    "g",
                    {"transform": "scale(0.5) translate(0,20)"},
                    [
                        _m(oblong_mesh(x, y, 0, s, s, s, color, "building"), shade)
                        for x, y, s, color in _CITY_BLOCKS
                    ],
                ],
            ],
        ),
        (
            {"fill": night},
            [
                "g",
                markdown_block(
                    "_“Strong minds discuss ideas,  \naverage minds discuss events,  \nweak minds discuss people.”_",
                    light=True,
                ),
                _at(0, 20, *_campfire(shade)),
            ],
        ),
        (
            {"fill": night},
            [
                "g",
                _m(circle_mesh(14, 12, _C["gyellow"]), shade),
                _m(circle_mesh(12, 6, _C["dgreen"]), shade),
                _m(circle_mesh(4, 4, COBBLE), shade),
                _m(obelisk_mesh(2, 14, 2, 4), shade),
            ],
        ),
        (
            {"fill": green},
            [
                "g",
                {"transform": translate(7, 3)},
                _m(circle_mesh(10, 4, _C["ddblue"], "pool"), shade),
                _m(cylinder_mesh(10, 1, 4, _C["sstone"]), shade),
                _at(2, -1, _m(aqueduct_mesh(-44, 3, 6, 2, 4), shade)),
                [
                    _at(x, y, _m(house_mesh(w, d, 2, 0.5), shade))
                    for x, y, w, d in ((-45, -10, 4, 2), (-35, -10, 5, 2), (-40, -5, 4, 3), (-50, -5, 4, 3))
                ],
                _at(
                    -25,
                    15,
                    _m(oblong_mesh(0, 0, -1, 15, 15, 1, _C["sstone"], "platform"), shade),
                    _m(temple_mesh(), shade),
                ),
                _at(0, -25, _m(granary_mesh(3, 3, 1, 6), shade)),
                _at(22, -10, _m(circle_mesh(10, 6, COBBLE), shade), _m(obelisk_mesh(2, 12, 2, 4), shade)),
                _at(10, 20, _m(cart_mesh(), shade)),
            ],
        ),
    ]
    return out


def slide_centers(n: int, radius: float = TILE_RADIUS) -> list[tuple[float, float]]:
    """Centers of the first `n` tiles on the spiral, in slide order."""
    # spiral(k) holds 1 + 3k(k-1) cells; grow k until n fit.
    k = 1
    while 1 + 3 * k * (k - 1) < n:
        k += 1
    return [(radius * x, radius * y) for x, y in spiral(k)[:n]]


def village_svg(
    slide_list: Iterable[Slide] | None = None,
    *,
    radius: float = TILE_RADIUS,
    shade: bool = False,
) -> Node:
    """
    Lay slides out on a hexagonal spiral inside one svg.

    Args:
        slide_list: Slides to draw; slides(shade=shade) when None.
        radius: Tile radius; tiles are drawn 2 units smaller to leave a gap.
        shade: Shade meshes when building the default slides.

    Returns:
        Node: ``svg#app`` with defs, a ``data-step`` overview group, and one
        ``data-step`` group per slide.
    """
    items = list(slides(shade=shade) if slide_list is None else slide_list)
    centers = slide_centers(len(items), radius)
    tiles = [
        ["g", {"data-step": True, "transform": translate(cx, cy)}, polygon(attrs, hex_points(radius - 2)), content]
        for (attrs, content), (cx, cy) in zip(items, centers)
    ]
    logger.debug("village: %d slides", len(tiles))
    return [
        "svg",
        {
            "id": "app",
            "xmlns": SVG_NS,
            "xmlns:xlink": XLINK_NS,
            "viewBox": [-400, -400, 800, 800],
            "style": {
                "width": "100vw",
                "height": "100vh",
                "margin-left": "50%",
                "transform": "translateX(-50%)",
                "display": "block",
            },
        },
        defs(),
        [
            "g",
            {"stroke-linejoin": "round", "stroke": "black", "stroke-width": 0.25, "data-step": True},
            # Invisible markers widen the overview's bounds.
            ["circle", {"stroke": "none", "fill": "none", "cx": -600, "cy": -500, "r": 10}],
            ["circle", {"stroke": "none", "fill": "none", "cx": 600, "cy": 500, "r": 10}],
            tiles,
        ],
    ]
