"""
The site database: authors, affiliations, topics, and notebooks in one YAML file.

Layout (site/db.yml)
- author: list of {id, name, url?, image?, affiliation?: [ids]}
- affiliation: list of {id, name, url?}
- topic: list of {id, title?, direction?: 0..5, color?}
- notebook: list of {id, title, url, topic: [ids], level?, ...}

Notebooks reference their topics by id; the first topic is the primary one
and decides where the explorer draws the notebook.

Notes
- The database is read with yaml.safe_load and written with yaml.safe_dump
  through the atomic writer; nothing is cached between calls.
- expand_authors() swaps author and affiliation ids inside a page config for
  their full records (ids nested inside a substituted record are expanded too).
"""

from __future__ import annotations

import copy
import logging
import os
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from civitas.io.errors import IoReadError
from civitas.io.write import write_text_atomic

__all__ = [
    "DB_KEYS",
    "load_db",
    "save_db",
    "index_by",
    "author_replacements",
    "expand_authors",
    "topic_index",
    "notebooks_by_topic",
    "topic_colors",
    "set_notebooks",
]

logger = logging.getLogger(__name__)

DB_KEYS: tuple[str, ...] = ("author", "affiliation", "topic", "notebook")

Db = dict[str, Any]


def load_db(path: str | os.PathLike[str]) -> Db:
    """
    Read the site database.

    Returns:
        Db: Mapping with every key of DB_KEYS present (missing lists become []).

    Raises:
        IoReadError: The file is missing, is not valid YAML, or is not a mapping.
    """
    p = Path(path)
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise IoReadError(f"cannot load site db {p}: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise IoReadError(f"site db {p} must be a mapping, got {type(data).__name__}")
    for key in DB_KEYS:
        data.setdefault(key, [])
    logger.debug("loaded site db %s (%d notebooks)", p, len(data["notebook"]))
    return data


def save_db(path: str | os.PathLike[str], db: Mapping[str, Any]) -> Path:
    """Write the database as YAML, keeping key order."""
    return write_text_atomic(path, yaml.safe_dump(dict(db), sort_keys=False, allow_unicode=True))


def index_by(f: Callable[[Any], Any] | str, coll: Iterable[Any]) -> dict[Any, Any]:
    """
    Map f(item) -> item; a string `f` indexes mappings by that key.

    Later items win on duplicate keys.

    Examples:
        >>> index_by("id", [{"id": "a", "n": 1}, {"id": "b", "n": 2}])["b"]
        {'id': 'b', 'n': 2}
    """
    key = (lambda x: x.get(f)) if isinstance(f, str) else f
    return {key(x): x for x in coll}


def author_replacements(db: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
    """Author and affiliation ids mapped to their records (minus the id)."""
    entries = [*db.get("author", []), *db.get("affiliation", [])]
    return {k: {kk: vv for kk, vv in v.items() if kk != "id"} for k, v in index_by("id", entries).items()}


def _replace(x: Any, repl: Mapping[str, Any], active: frozenset[str]) -> Any:
    if isinstance(x, str) and x in repl and x not in active:
        return _replace(copy.deepcopy(repl[x]), repl, active | {x})
    if isinstance(x, Mapping):
        return {k: _replace(v, repl, active) for k, v in x.items()}
    if isinstance(x, list):
        return [_replace(v, repl, active) for v in x]
    return x


def expand_authors(config: Mapping[str, Any], db: Mapping[str, Any]) -> dict[str, Any]:
    """
    Expand author/affiliation ids in ``config["quarto"]``.

    Returns:
        dict[str, Any]: A copy of `config`; other keys are untouched.

    Examples:
        >>> db = {"author": [{"id": "tp", "name": "Tim"}]}
        >>> expand_authors({"quarto": {"author": ["tp"]}}, db)
        {'quarto': {'author': [{'name': 'Tim'}]}}
    """
    out = dict(config)
    if "quarto" in out:
        out["quarto"] = _replace(out["quarto"], author_replacements(db), frozenset())
    return out


def topic_index(db: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
    return index_by("id", db.get("topic", []))


def _primary_topic(notebook: Mapping[str, Any]) -> Any:
    topics = notebook.get("topic", notebook.get("topics"))
    if isinstance(topics, (list, tuple)):
        return topics[0] if topics else None
    return topics


def notebooks_by_topic(db: Mapping[str, Any]) -> dict[Any, list[dict[str, Any]]]:
    """
    Group notebooks by primary topic, numbering each group from 0.

    Returns:
        dict: topic id -> notebooks (copies with a ``position`` key), in db order.
    """
    groups: dict[Any, list[dict[str, Any]]] = {}
    for nb in db.get("notebook", []):
        group = groups.setdefault(_primary_topic(nb), [])
        group.append({**nb, "position": len(group)})
    return groups


def topic_colors(db: Mapping[str, Any]) -> list[str]:
    """Topic colors in db order, skipping topics without one."""
    return [t["color"] for t in db.get("topic", []) if t.get("color")]


def set_notebooks(path: str | os.PathLike[str], db: Mapping[str, Any], notebooks: Iterable[Mapping[str, Any]]) -> Db:
    """Replace the notebook list, save, and return the new database."""
    new_db = {**db, "notebook": [dict(nb) for nb in notebooks]}
    save_db(path, new_db)
    logger.info("saved %d notebooks to %s", len(new_db["notebook"]), path)
    return new_db
