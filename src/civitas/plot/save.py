"""
Save plots to disk: hiccup nodes as SVG/HTML, Altair charts as HTML/PNG.

PNG export goes through vl-convert-python (optional dependency). When it is
not installed, requesting a PNG raises RuntimeError naming the package; SVG
and HTML never need it.
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any

import altair as alt

from civitas.io.write import write_bytes_atomic, write_text_atomic
from civitas.markup.hiccup import is_node, node_tag, svg_document, to_markup

__all__ = ["html_page", "save"]

logger = logging.getLogger(__name__)

_CONVERTER_HINT = "PNG export requires the 'vl-convert-python' package (pip install vl-convert-python)"


def _converter() -> Any:
    try:
        return importlib.import_module("vl_convert")
    except ImportError as exc:
        raise RuntimeError(_CONVERTER_HINT) from exc


def html_page(body: str, title: str = "civitas") -> str:
    """Wrap markup in a minimal standalone HTML page."""
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n<meta charset=\"utf-8\">\n"
        f"<title>{title}</title>\n</head>\n<body>\n{body}\n</body>\n</html>\n"
    )


def _svg_text(node: list[Any]) -> str:
    if node_tag(node) == "svg":
        return svg_document(node, xml_declaration=True)
    # Brush-wrapped plots: the svg is the div's first element child.
    for child in node[1:]:
        if is_node(child) and node_tag(child) == "svg":
            return svg_document(child, xml_declaration=True)
    raise ValueError(f"no svg element in {node_tag(node)!r} node")


def save(
    obj: Any,
    out_svg: str | None = None,
    out_html: str | None = None,
    out_png: str | None = None,
) -> list[Path]:
    """
    Save a plot in one or more formats.

    Args:
        obj: A hiccup node (from plot() or village_svg()) or an Altair chart.
        out_svg: Destination for SVG (hiccup nodes only).
        out_html: Destination for a standalone HTML page.
        out_png: Destination for a PNG (needs vl-convert-python).

    Returns:
        list[Path]: Paths written, in svg/html/png order.

    Raises:
        RuntimeError: PNG requested without vl-convert-python installed.
        ValueError: SVG requested for an Altair chart, or obj is neither kind.
        IoWriteError: Atomic write failed.
    """
    written: list[Path] = []
    if isinstance(obj, alt.TopLevelMixin):
        if out_svg is not None:
            raise ValueError("Altair charts cannot be saved as SVG here; use out_html or out_png")
        if out_html is not None:
            written.append(write_text_atomic(out_html, obj.to_html()))
        if out_png is not None:
            vlc = _converter()
            written.append(write_bytes_atomic(out_png, vlc.vegalite_to_png(obj.to_json())))
    elif is_node(obj):
        if out_svg is not None:
            written.append(write_text_atomic(out_svg, _svg_text(obj)))
        if out_html is not None:
            written.append(write_text_atomic(out_html, html_page(to_markup(obj))))
        if out_png is not None:
            vlc = _converter()
            written.append(write_bytes_atomic(out_png, vlc.svg_to_png(_svg_text(obj))))
    else:
        raise ValueError(f"cannot save object of type {type(obj).__name__}")
    for p in written:
        logger.info("saved %s", p)
    return written
