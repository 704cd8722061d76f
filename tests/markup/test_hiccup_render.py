from __future__ import annotations

import pytest

from civitas.core.constants import SVG_NS, XLINK_NS
from civitas.markup.hiccup import (
    Raw,
    format_number,
    is_node,
    iter_nodes,
    node_attrs,
    node_children,
    node_tag,
    svg_document,
    to_markup,
)


def test_tag_shorthand_merges_id_and_classes() -> None:
    node = ["div#main.a.b", {"class": "c", "title": "t"}, "x"]
    assert node_tag(node) == "div"
    assert node_attrs(node) == {"id": "main", "class": "a b c", "title": "t"}


def test_children_are_flattened_and_none_dropped() -> None:
    node = ["g", {}, [["circle", {"r": 1}], None, [["rect"]]], "t"]
    kids = node_children(node)
    assert [node_tag(k) if is_node(k) else k for k in kids] == ["circle", "rect", "t"]


def test_iter_nodes_depth_first() -> None:
    tree = ["svg", ["g", ["circle"], ["rect"]], ["text", "hi"]]
    assert [node_tag(n) for n in iter_nodes(tree)] == ["svg", "g", "circle", "rect", "text"]


def test_to_markup_escapes_text_and_attributes() -> None:
    out = to_markup(["text", {"title": 'a"b'}, "1 < 2 & 3"])
    assert out == '<text title="a&quot;b">1 &lt; 2 &amp; 3</text>'


def test_to_markup_style_mapping_lists_and_booleans() -> None:
    out = to_markup(["g", {"style": {"fill": "red", "opacity": 0.5}, "viewBox": [0, 0, 10, 10.5], "hidden": True, "x": None}])
    assert out == '<g style="fill:red;opacity:0.5" viewBox="0 0 10 10.5" hidden="hidden"/>'


def test_raw_is_not_escaped_and_script_text_is_raw() -> None:
    assert to_markup(["div", Raw("<p>x</p>")]) == "<div><p>x</p></div>"
    assert to_markup(["script", "a < b"]) == "<script>a < b</script>"


def test_paired_elements_keep_close_tag() -> None:
    assert to_markup(["div"]) == "<div></div>"
    assert to_markup(["circle", {"r": 2}]) == '<circle r="2"/>'


@pytest.mark.parametrize("v,expected", [(1.0, "1"), (0.125, "0.125"), (-0.0000001, "0"), (3, "3"), (float("nan"), "0")])
def test_format_number(v: float, expected: str) -> None:
    assert format_number(v) == expected


def test_svg_document_adds_namespaces_and_declaration() -> None:
    out = svg_document(["svg", {"width": 10}, ["circle"]], xml_declaration=True)
    assert out.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<svg')
    assert f'xmlns="{SVG_NS}"' in out
    assert f'xmlns:xlink="{XLINK_NS}"' in out


def test_svg_document_rejects_non_svg_root() -> None:
    with pytest.raises(ValueError):
        svg_document(["div", ["svg"]])
