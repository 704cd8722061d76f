"""
civitas.markup — hiccup trees (markup as nested lists) and SVG helpers.

## Public API
- hiccup — Raw, to_markup, svg_document, node accessors.
- svg — pt/pts, polygon, path, transform strings.

## Import DAG discipline
- Depends only on stdlib and civitas.core.
"""

from __future__ import annotations

from .hiccup import Raw, svg_document, to_markup
from .svg import path, polygon, pt, pts

__all__ = [
    "Raw",
    "to_markup",
    "svg_document",
    "pt",
    "pts",
    "polygon",
    "path",
]
