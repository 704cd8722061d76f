from __future__ import annotations

from civitas.core.constants import XHTML_NS
from civitas.markup.hiccup import iter_nodes, node_attrs, node_children, node_tag, svg_document, to_markup
from civitas.village.meshes import house_mesh, temple_mesh
from civitas.village.scene import (
    TILE_RADIUS,
    defs,
    markdown_block,
    markdown_html,
    mesh_to_hiccup,
    slide_centers,
    slides,
    tile,
    village_svg,
)


def _tags(node) -> list[str]:
    return [node_tag(n) for n in iter_nodes(node)]


def test_defs_declare_clip_path_and_patterns() -> None:
    ids = {node_attrs(n).get("id") for n in iter_nodes(defs())}
    assert {"hex", "writing", "cobble"} <= ids


def test_mesh_to_hiccup_draws_one_polygon_per_face() -> None:
    mesh = house_mesh(2, 2, 2, 1)
    g = mesh_to_hiccup(mesh)
    assert node_attrs(g) == {"data-role": "house"}
    polys = [n for n in node_children(g) if node_tag(n) == "polygon"]
    assert len(polys) == len(mesh.faces)
    assert [node_attrs(p)["fill"] for p in polys] == list(mesh.colors)


def test_mesh_to_hiccup_nests_children_as_groups() -> None:
    g = mesh_to_hiccup(temple_mesh())
    roles = [node_attrs(n).get("data-role") for n in iter_nodes(g) if node_tag(n) == "g"]
    assert roles[0] == "temple"
    assert roles.count("pillar") == 10


def test_shaded_mesh_changes_fills() -> None:
    mesh = house_mesh(2, 2, 2, 1)
    flat = [node_attrs(n)["fill"] for n in iter_nodes(mesh_to_hiccup(mesh)) if node_tag(n) == "polygon"]
    shaded = [
        node_attrs(n)["fill"] for n in iter_nodes(mesh_to_hiccup(mesh, shade=True)) if node_tag(n) == "polygon"
    ]
    assert len(flat) == len(shaded)
    assert flat != shaded


def test_markdown_html_supports_tables() -> None:
    html = markdown_html("| a | b |\n|---|---|\n| 1 | 2 |")
    assert "<table>" in html
    assert "<td>1</td>" in html


def test_markdown_block_wraps_xhtml_in_foreign_object() -> None:
    # Arrange / Act
    node = markdown_block("# Hello", light=True)

    # Assert
    attrs = node_attrs(node)
    assert node_tag(node) == "foreignObject"
    assert (attrs["x"], attrs["y"], attrs["width"], attrs["height"]) == (-37.5, -25, 75, 50)
    (div,) = node_children(node)
    assert node_attrs(div)["xmlns"] == XHTML_NS
    assert node_attrs(div)["style"]["color"] == "#FFFFFF"
    assert "<h1>Hello</h1>" in to_markup(node)


def test_markdown_block_style_overrides_defaults() -> None:
    node = markdown_block("x", {"text-align": "left"})
    (div,) = node_children(node)
    assert node_attrs(div)["style"]["text-align"] == "left"
    assert node_attrs(div)["style"]["transform"] == "scale(0.2)"


def test_slides_are_attr_content_pairs() -> None:
    items = slides()
    assert len(items) > 10
    for attrs, content in items:
        assert "fill" in attrs
        assert isinstance(content, list)


def test_slide_centers_follow_the_spiral() -> None:
    centers = slide_centers(8)
    assert len(centers) == 8
    assert centers[0] == (0.0, 0.0)
    # Second tile is one ring out
    x, y = centers[1]
    assert (x * x + y * y) ** 0.5 > TILE_RADIUS


def test_village_svg_structure() -> None:
    # Arrange
    items = slides()

    # Act
    svg = village_svg(items)

    # Assert
    assert node_tag(svg) == "svg"
    assert node_attrs(svg)["id"] == "app"
    steps = [n for n in iter_nodes(svg) if node_attrs(n).get("data-step")]
    assert len(steps) == len(items) + 1  # overview group plus one per slide
    assert "defs" in _tags(svg)
    assert "foreignObject" in _tags(svg)


def test_village_svg_serializes_as_document() -> None:
    text = svg_document(village_svg(slides()[:3]))
    assert text.startswith("<svg")
    assert text.count('data-step="data-step"') == 4
    assert 'viewBox="-400 -400 800 800"' in text


def test_shaded_village_renders() -> None:
    assert to_markup(village_svg(shade=True)).startswith('<svg id="app"')


def test_tile_is_standalone_svg() -> None:
    node = tile(40)
    assert node_tag(node) == "svg"
    assert node_attrs(node)["viewBox"] == [-40, -40, 80, 80]
