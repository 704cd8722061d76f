"""
Notebook explorer: notebooks as hexes, one sector per topic.

Each topic owns a direction (0..5) of the hex grid; its notebooks fill that
direction's sector outward in db order (see geometry.build_sector), so
introductory notebooks sit near the center.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from civitas.core.constants import SLIDE_PALETTE, SVG_NS, XHTML_NS
from civitas.core.typing import Node
from civitas.markup.svg import polygon, translate
from civitas.village.geometry import hex_points, sectors

from .db import notebooks_by_topic, topic_colors, topic_index

__all__ = ["CELL_SIZE", "SECTOR_DEPTH", "notebook_view", "hex_grid", "icon"]

CELL_SIZE = 80
SECTOR_DEPTH = 5

_SECTORS = sectors(SECTOR_DEPTH)


def _cell(direction: int, position: int, size: float) -> tuple[float, float]:
    cells = _SECTORS[direction % 6]
    if not 0 <= position < len(cells):
        raise ValueError(f"position {position} outside sector of {len(cells)} cells")
    x, y = cells[position]
    return (size * x, size * y)


def notebook_view(notebook: Mapping[str, Any], topic: Mapping[str, Any], *, size: float = CELL_SIZE) -> Node:
    """
    One notebook as a colored hex with its linked title.

    Args:
        notebook: Notebook record with ``position`` (from notebooks_by_topic),
            ``title``, and ``url``.
        topic: Topic record with ``direction`` and ``color``.
        size: Cell size in svg units.

    Raises:
        ValueError: The position does not fit in the topic's sector.
    """
    x, y = _cell(int(topic.get("direction", 0)), int(notebook.get("position", 0)), size)
    return [
        "g",
        {"transform": translate(x, y)},
        polygon({"fill": topic.get("color", SLIDE_PALETTE[8])}, hex_points(0.9 * size)),
        [
            "foreignObject",
            {"x": -size, "y": -size, "width": 2 * size, "height": 2 * size},
            [
                "div",
                {
                    "xmlns": XHTML_NS,
                    "style": {
                        "width": "100%",
                        "height": "100%",
                        "text-align": "center",
                        "display": "flex",
                        "justify-content": "center",
                        "align-items": "center",
                        "overflow": "visible",
                    },
                },
                ["a", {"href": notebook.get("url")}, notebook.get("title", notebook.get("id", ""))],
            ],
        ],
    ]


def hex_grid(db: Mapping[str, Any], width: float = 500) -> Node:
    """Every notebook in the database on one svg, wrapped in a div."""
    topics = topic_index(db)
    views = [
        notebook_view(nb, topics.get(topic_id, {}))
        for topic_id, notebooks in notebooks_by_topic(db).items()
        for nb in notebooks
    ]
    svg = ["svg", {"xmlns": SVG_NS, "viewBox": [-width, -width, 2 * width, 2 * width], "width": "100%"}, views]
    return ["div", svg]


def icon(db: Mapping[str, Any] | None = None, *, size: float = CELL_SIZE) -> Node:
    """
    The site icon: the first cell of each of the six sectors, in topic colors.

    Topic colors cycle when there are fewer than six; without any, the slide
    palette is used.
    """
    colors = topic_colors(db or {}) or list(SLIDE_PALETTE[1:7])
    w = 200
    return [
        "svg",
        {"xmlns": SVG_NS, "width": 100, "height": 100, "viewBox": [-w, -w, 2 * w, 2 * w]},
        [
            [
                "g",
                {"transform": translate(*_cell(i, 0, size))},
                polygon({"fill": colors[i % len(colors)]}, hex_points(0.9 * size)),
            ]
            for i in range(6)
        ],
    ]
