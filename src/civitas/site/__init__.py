"""
civitas.site — site metadata: the YAML database, front matter, JSON-LD, explorer.

## Public API
- db — load_db, save_db, index_by, expand_authors, notebooks_by_topic, topic_colors.
- metadata — Resource, BlogPostFrontmatter, front_matter(s), warnings.
- jsonld — notebook_jsonld, jsonld_document, write_jsonld.
- explorer — notebook_view, hex_grid, icon.

## Import DAG discipline
- Depends on: civitas.core, civitas.io, civitas.markup, civitas.village.geometry,
  pydantic, pyyaml.
- Must not import civitas.plot.
"""

from __future__ import annotations

from .db import load_db, notebooks_by_topic, save_db
from .explorer import hex_grid, icon
from .jsonld import jsonld_document, notebook_jsonld, write_jsonld
from .metadata import BlogPostFrontmatter, Resource, front_matter, front_matters, warnings

__all__ = [
    "load_db",
    "save_db",
    "notebooks_by_topic",
    "hex_grid",
    "icon",
    "notebook_jsonld",
    "jsonld_document",
    "write_jsonld",
    "Resource",
    "BlogPostFrontmatter",
    "front_matter",
    "front_matters",
    "warnings",
]
