from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from civitas.core.serde import json_dumps_canonical
from civitas.io.errors import IoReadError
from civitas.markup.hiccup import iter_nodes, node_attrs, node_tag, to_markup
from civitas.site.db import (
    DB_KEYS,
    author_replacements,
    expand_authors,
    index_by,
    load_db,
    notebooks_by_topic,
    save_db,
    set_notebooks,
    topic_colors,
)
from civitas.site.explorer import CELL_SIZE, _cell, hex_grid, icon, notebook_view
from civitas.site.jsonld import jsonld_document, notebook_jsonld, write_jsonld
from civitas.site.metadata import Resource
from civitas.village.geometry import SIN60


@pytest.fixture
def db() -> dict:
    return {
        "author": [{"id": "tp", "name": "Tim", "affiliation": ["sc"]}],
        "affiliation": [{"id": "sc", "name": "Scicloj"}],
        "topic": [
            {"id": "core", "direction": 0, "color": "#62B132"},
            {"id": "web", "direction": 3, "color": "#5881D8"},
            {"id": "misc"},
        ],
        "notebook": [
            {"id": "a", "title": "A", "url": "/a", "topic": ["core"]},
            {"id": "b", "title": "B", "url": "/b", "topic": ["web", "core"]},
            {"id": "c", "title": "C", "url": "/c", "topic": ["core"]},
        ],
    }


def test_load_db_fills_missing_keys(tmp_path: Path) -> None:
    p = tmp_path / "db.yml"
    p.write_text("notebook:\n  - id: a\n", encoding="utf-8")

    loaded = load_db(p)

    assert set(DB_KEYS) <= set(loaded)
    assert loaded["author"] == []
    assert loaded["notebook"] == [{"id": "a"}]


def test_load_db_empty_file_is_empty_db(tmp_path: Path) -> None:
    p = tmp_path / "db.yml"
    p.write_text("", encoding="utf-8")
    assert load_db(p) == {k: [] for k in DB_KEYS}


@pytest.mark.parametrize("content", [None, "- a\n- b\n", "a: [\n"])
def test_load_db_errors(tmp_path: Path, content: str | None) -> None:
    p = tmp_path / "db.yml"
    if content is not None:
        p.write_text(content, encoding="utf-8")
    with pytest.raises(IoReadError):
        load_db(p)


def test_save_and_set_notebooks_keep_other_keys(tmp_path: Path, db: dict) -> None:
    # Arrange
    p = tmp_path / "site" / "db.yml"
    save_db(p, db)

    # Act
    new_db = set_notebooks(p, load_db(p), [{"id": "z", "title": "Z"}])

    # Assert
    reread = load_db(p)
    assert reread == new_db
    assert reread["notebook"] == [{"id": "z", "title": "Z"}]
    assert reread["author"] == db["author"]
    assert list(yaml.safe_load(p.read_text(encoding="utf-8"))) == list(db)


def test_index_by_key_or_function() -> None:
    items = [{"id": "a", "n": 1}, {"id": "b", "n": 2}, {"id": "a", "n": 3}]
    assert index_by("id", items)["a"]["n"] == 3
    assert set(index_by(lambda x: x["n"], items)) == {1, 2, 3}


def test_author_replacements_drop_ids(db: dict) -> None:
    repl = author_replacements(db)
    assert repl["tp"] == {"name": "Tim", "affiliation": ["sc"]}
    assert repl["sc"] == {"name": "Scicloj"}


def test_expand_authors_nested(db: dict) -> None:
    config = {"quarto": {"book": {"author": ["tp"]}}, "other": ["tp"]}

    out = expand_authors(config, db)

    assert out["quarto"]["book"]["author"] == [{"name": "Tim", "affiliation": [{"name": "Scicloj"}]}]
    assert out["other"] == ["tp"]
    # Input is not mutated
    assert config["quarto"]["book"]["author"] == ["tp"]


def test_expand_authors_stops_on_cycles() -> None:
    cyclic = {"author": [{"id": "x", "name": "X", "friend": "y"}, {"id": "y", "name": "Y", "friend": "x"}]}
    out = expand_authors({"quarto": {"author": "x"}}, cyclic)
    assert out["quarto"]["author"] == {"name": "X", "friend": {"name": "Y", "friend": "x"}}


def test_expand_authors_without_quarto_is_copy(db: dict) -> None:
    config = {"title": "x"}
    out = expand_authors(config, db)
    assert out == config
    assert out is not config


def test_notebooks_by_topic_numbers_positions(db: dict) -> None:
    groups = notebooks_by_topic(db)
    assert list(groups) == ["core", "web"]
    assert [(nb["id"], nb["position"]) for nb in groups["core"]] == [("a", 0), ("c", 1)]
    assert groups["web"][0]["position"] == 0
    assert "position" not in db["notebook"][0]


def test_topic_colors_skip_uncolored(db: dict) -> None:
    assert topic_colors(db) == ["#62B132", "#5881D8"]


def test_notebook_jsonld_node() -> None:
    node = notebook_jsonld({"id": "nb", "title": "T", "topic": ":web", "level": 2}, "cv", "https://x/")
    assert node == {
        "@id": "https://x/resource/nb",
        "@type": "cv:Notebook",
        "title": "T",
        "topics": ["cvtopic/web"],
        "level": 2,
    }


def test_notebook_jsonld_accepts_resources() -> None:
    r = Resource(id="nb", title="T", url="/nb", format="video", topics=["core", "web"], level=1)
    assert notebook_jsonld(r, "cv", "https://x/")["topics"] == ["cvtopic/core", "cvtopic/web"]


def test_jsonld_document_wraps_graph(db: dict) -> None:
    doc = jsonld_document(db["notebook"], "cv", "https://x/")
    assert doc["context"] == "https://x/context.jsonld"
    assert [n["@id"] for n in doc["graph"]] == [f"https://x/resource/{i}" for i in "abc"]


def test_write_jsonld_is_canonical_and_stable(tmp_path: Path, db: dict) -> None:
    # Arrange
    target = tmp_path / "out" / "resources.jsonld"

    # Act
    write_jsonld(target, db["notebook"], "cv", "https://x/")
    first = target.read_bytes()
    write_jsonld(target, db["notebook"], "cv", "https://x/")

    # Assert
    assert target.read_bytes() == first
    text = first.decode("utf-8")
    assert text == json_dumps_canonical(json.loads(text))
    assert json.loads(text) == jsonld_document(db["notebook"], "cv", "https://x/")


def test_cell_positions_and_bounds() -> None:
    assert _cell(0, 0, CELL_SIZE) == pytest.approx((1.5 * CELL_SIZE, SIN60 * CELL_SIZE))
    # Directions wrap modulo six
    assert _cell(6, 0, 1) == _cell(0, 0, 1)
    with pytest.raises(ValueError, match="outside sector"):
        _cell(0, 10_000, 1)


def test_notebook_view_links_title() -> None:
    node = notebook_view({"title": "A", "url": "/a", "position": 0}, {"direction": 1, "color": "#123456"})
    fills = [node_attrs(n)["fill"] for n in iter_nodes(node) if node_tag(n) == "polygon"]
    assert fills == ["#123456"]
    assert '<a href="/a">A</a>' in to_markup(node)


def test_hex_grid_draws_every_notebook(db: dict) -> None:
    # Arrange / Act
    grid = hex_grid(db)

    # Assert
    assert node_tag(grid) == "div"
    polys = [n for n in iter_nodes(grid) if node_tag(n) == "polygon"]
    assert len(polys) == len(db["notebook"])
    text = to_markup(grid)
    assert 'viewBox="-500 -500 1000 1000"' in text


def test_icon_cycles_topic_colors(db: dict) -> None:
    fills = [node_attrs(n)["fill"] for n in iter_nodes(icon(db)) if node_tag(n) == "polygon"]
    assert fills == ["#62B132", "#5881D8"] * 3
    assert len([n for n in iter_nodes(icon()) if node_tag(n) == "polygon"]) == 6
