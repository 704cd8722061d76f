"""
Hiccup trees: markup as nested Python lists, and their serialization.

A node is ``[tag, attrs?, *children]``:

- ``tag`` is a string, optionally with ``#id`` and ``.class`` shorthand
  (``"pattern#cobble"``, ``"a.card-link"``).
- ``attrs`` is an optional dict placed second.
- children may be strings or numbers (escaped as text), nodes, ``None``
  (skipped), ``Raw`` (inserted verbatim), or any other iterable of children,
  which is flattened. Generators are accepted, so ``["g", (f(x) for x in xs)]``
  reads like its Clojure ancestor.

Attribute rendering:

- ``None`` and ``False`` drop the attribute; ``True`` renders ``name="name"``.
- floats are formatted compactly (``2.0`` → ``2``, six significant decimals).
- lists/tuples are space-joined (``viewBox``), dicts become CSS (``style``).

Examples:
    >>> from civitas.markup.hiccup import to_markup
    >>> to_markup(["g", {"fill": "red"}, ["circle", {"r": 2.0}], None, "a<b"])
    '<g fill="red"><circle r="2"/>a&lt;b</g>'
"""

from __future__ import annotations

import html
import math
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from civitas.core.constants import SVG_NS, XLINK_NS
from civitas.core.typing import Node

__all__ = [
    "Raw",
    "is_node",
    "node_tag",
    "node_attrs",
    "node_children",
    "iter_nodes",
    "format_number",
    "render_attrs",
    "to_markup",
    "svg_document",
]

# Elements that keep an explicit close tag even when empty.
_PAIRED = frozenset(
    {"a", "div", "foreignObject", "label", "p", "script", "span", "style", "textarea", "title"}
)
# Elements whose text content must not be escaped.
_RAW_TEXT = frozenset({"script", "style"})


class Raw(str):
    """Pre-rendered markup inserted without escaping (e.g., markdown output)."""

    __slots__ = ()


def is_node(x: Any) -> bool:
    """Return True if `x` looks like a hiccup node (list starting with a tag string)."""
    return isinstance(x, list) and bool(x) and isinstance(x[0], str) and not isinstance(x[0], Raw)


def _split_tag(tag: str) -> tuple[str, str | None, list[str]]:
    name, ident, classes = tag, None, []
    if "." in name:
        name, *classes = name.split(".")
    if "#" in name:
        name, ident = name.split("#", 1)
    return name, ident, classes


def node_tag(node: Node) -> str:
    """Return the bare element name of a node (shorthand stripped)."""
    return _split_tag(node[0])[0]


def node_attrs(node: Node) -> dict[str, Any]:
    """Return the node's attributes, including ids/classes from tag shorthand."""
    _, ident, classes = _split_tag(node[0])
    attrs: dict[str, Any] = {}
    if ident:
        attrs["id"] = ident
    if classes:
        attrs["class"] = " ".join(classes)
    if len(node) > 1 and isinstance(node[1], Mapping):
        explicit = dict(node[1])
        if classes and "class" in explicit:
            explicit["class"] = " ".join([*classes, str(explicit["class"])])
        attrs.update(explicit)
    return attrs


def _flatten(children: Iterable[Any]) -> Iterator[Any]:
    for child in children:
        if child is None:
            continue
        if isinstance(child, (str, int, float)) or is_node(child):
            yield child
        elif isinstance(child, Iterable) and not isinstance(child, Mapping):
            yield from _flatten(child)
        else:
            yield child


def node_children(node: Node) -> list[Any]:
    """Return the flattened children of a node (attrs and None removed)."""
    start = 2 if len(node) > 1 and isinstance(node[1], Mapping) else 1
    return list(_flatten(node[start:]))


def iter_nodes(node: Any) -> Iterator[Node]:
    """Depth-first iteration over every node in a tree, including the root."""
    if is_node(node):
        yield node
        for child in node_children(node):
            yield from iter_nodes(child)
    elif isinstance(node, Iterable) and not isinstance(node, (str, Mapping)):
        for child in _flatten(node):
            yield from iter_nodes(child)


def format_number(v: float) -> str:
    """Format a number compactly for markup (no trailing zeros, no ``-0``)."""
    if isinstance(v, bool):
        return str(v).lower()
    if isinstance(v, int):
        return str(v)
    if math.isnan(v) or math.isinf(v):
        return "0"
    s = f"{v:.6f}".rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s


def _attr_value(name: str, value: Any) -> str:
    if isinstance(value, Mapping):
        return ";".join(f"{k}:{_attr_value(k, v)}" for k, v in value.items() if v is not None)
    if isinstance(value, (list, tuple)):
        return " ".join(_attr_value(name, v) for v in value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return str(value)


def render_attrs(attrs: Mapping[str, Any]) -> str:
    """Render an attribute mapping as a leading-space string (or empty)."""
    parts: list[str] = []
    for name, value in attrs.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f' {name}="{name}"')
            continue
        parts.append(f' {name}="{html.escape(_attr_value(name, value), quote=True)}"')
    return "".join(parts)


def _render(x: Any, out: list[str], raw_text: bool = False) -> None:
    if isinstance(x, Raw):
        out.append(str(x))
    elif is_node(x):
        name = node_tag(x)
        attrs = node_attrs(x)
        children = node_children(x)
        if not children and name not in _PAIRED:
            out.append(f"<{name}{render_attrs(attrs)}/>")
            return
        out.append(f"<{name}{render_attrs(attrs)}>")
        for child in children:
            _render(child, out, raw_text=name in _RAW_TEXT)
        out.append(f"</{name}>")
    elif isinstance(x, str):
        out.append(x if raw_text else html.escape(x, quote=False))
    elif isinstance(x, (int, float)):
        out.append(format_number(x))
    elif isinstance(x, Iterable) and not isinstance(x, Mapping):
        for child in _flatten(x):
            _render(child, out, raw_text=raw_text)
    else:
        out.append(html.escape(str(x), quote=False))


def to_markup(node: Any) -> str:
    """Serialize a hiccup node (or sequence of nodes) to an XML/HTML string."""
    out: list[str] = []
    _render(node, out)
    return "".join(out)


def svg_document(node: Node, *, xml_declaration: bool = False) -> str:
    """Serialize an ``svg`` root node, adding the SVG/XLink namespaces if absent."""
    if node_tag(node) != "svg":
        raise ValueError(f"expected an svg root node, got {node[0]!r}")
    attrs = node_attrs(node)
    attrs.setdefault("xmlns", SVG_NS)
    attrs.setdefault("xmlns:xlink", XLINK_NS)
    root = ["svg", attrs, *node_children(node)]
    body = to_markup(root)
    if xml_declaration:
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + body
    return body
