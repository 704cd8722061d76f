"""
civitas.village — isometric village scenes and a slide deck over them.

## Responsibilities
- Hex geometry (cube coordinates, rings, spirals, sectors).
- Isometric projection and mesh builders for the village buildings.
- Flat shading of mesh faces.
- The talk's slides as hiccup, laid out on a hexagonal spiral.
- Deck navigation: viewBox framing, transitions, keyboard, pan and zoom.

## Public API
- geometry — cube_ring, cube_spiral, spiral, sectors, hex_points.
- projection — iso, circle_verts, translate_verts, rotate_verts, aligned_faces.
- meshes — Mesh and the *_mesh builders.
- shading — shade_color, shade_mesh.
- scene — slides, village_svg, markdown_block, mesh_to_hiccup.
- deck — DeckState, frame_viewbox, slide_viewboxes, pan, zoom.

## Import DAG discipline
- Depends on: civitas.core, civitas.markup, markdown (and stdlib).
- Must not import civitas.plot or civitas.site.

## Examples
```python
from civitas.markup.hiccup import svg_document
from civitas.village import village_svg

svg_text = svg_document(village_svg(shade=True))
```
"""

from __future__ import annotations

from .deck import DeckState, frame_viewbox, slide_viewboxes
from .meshes import Mesh
from .projection import iso
from .scene import mesh_to_hiccup, slides, village_svg
from .shading import shade_mesh

__all__ = [
    "DeckState",
    "Mesh",
    "frame_viewbox",
    "iso",
    "mesh_to_hiccup",
    "shade_mesh",
    "slide_viewboxes",
    "slides",
    "village_svg",
]
