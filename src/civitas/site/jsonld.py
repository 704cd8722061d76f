"""
JSON-LD export of the notebook catalogue.

Each resource becomes a node:

    {"@id": "<base>resource/<id>", "@type": "<ldns>:Notebook", "title": ...,
     "topics": ["<ldns>topic/<topic>", ...], "level": ...}

and the document wraps the nodes as ``{"context": "<base>context.jsonld",
"graph": [...]}``.

Notes
- ldns and base default to SiteSettings (CIVITAS_LDNS / CIVITAS_BASE_URL).
- Files are written with canonical JSON (sorted keys, compact) so reruns are
  byte-identical.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from civitas.core.constants import BASE_URL, LDNS
from civitas.core.serde import json_dumps_canonical
from civitas.core.typing import JsonDict
from civitas.io.write import write_text_atomic

from .metadata import Resource

__all__ = ["notebook_jsonld", "jsonld_document", "write_jsonld"]

logger = logging.getLogger(__name__)


def _as_dict(resource: Mapping[str, Any] | Resource) -> Mapping[str, Any]:
    if isinstance(resource, Resource):
        return resource.model_dump()
    return resource


def notebook_jsonld(resource: Mapping[str, Any] | Resource, ldns: str = LDNS, base: str = BASE_URL) -> JsonDict:
    """
    One resource as a JSON-LD node.

    Raises:
        KeyError: The resource has no id.

    Examples:
        >>> node = notebook_jsonld({"id": "nb", "title": "T", "topics": ["core"], "level": 1}, "cv", "https://x/")
        >>> node["@id"], node["@type"], node["topics"]
        ('https://x/resource/nb', 'cv:Notebook', ['cvtopic/core'])
    """
    r = _as_dict(resource)
    topics = r.get("topics", r.get("topic")) or []
    if isinstance(topics, str):
        topics = [topics]
    return {
        "@id": f"{base}resource/{r['id']}",
        "@type": f"{ldns}:Notebook",
        "title": r.get("title"),
        "topics": [f"{ldns}topic/{str(t).lstrip(':')}" for t in topics],
        "level": r.get("level"),
    }


def jsonld_document(
    resources: Iterable[Mapping[str, Any] | Resource],
    ldns: str = LDNS,
    base: str = BASE_URL,
) -> JsonDict:
    return {
        "context": f"{base}context.jsonld",
        "graph": [notebook_jsonld(r, ldns, base) for r in resources],
    }


def write_jsonld(
    target: str | os.PathLike[str],
    resources: Iterable[Mapping[str, Any] | Resource],
    ldns: str = LDNS,
    base: str = BASE_URL,
) -> Path:
    """
    Write the JSON-LD document for `resources` to `target`.

    Raises:
        IoWriteError: The file cannot be written.
    """
    doc = jsonld_document(resources, ldns, base)
    path = write_text_atomic(target, json_dumps_canonical(doc))
    logger.info("wrote %d JSON-LD nodes to %s", len(doc["graph"]), path)
    return path
