from __future__ import annotations

import importlib
from pathlib import Path

import polars as pl
import pytest

from civitas.plot.algebra import layer, views
from civitas.plot.geoms import point
from civitas.plot.plot import plot
from civitas.plot.save import save
from civitas.plot.vega import to_altair

# civitas.plot re-exports the save() function under the module's name.
save_mod = importlib.import_module("civitas.plot.save")


def _node(df: pl.DataFrame, settings, **kw):
    return plot(layer(views(df, [("a", "b")]), point()), settings=settings, **kw)


def test_save_svg_and_html(tmp_path: Path, small_df: pl.DataFrame, settings) -> None:
    out = save(_node(small_df, settings), out_svg=str(tmp_path / "p.svg"), out_html=str(tmp_path / "p.html"))

    assert out == [tmp_path / "p.svg", tmp_path / "p.html"]
    svg = (tmp_path / "p.svg").read_text()
    assert svg.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert 'xmlns="http://www.w3.org/2000/svg"' in svg
    assert (tmp_path / "p.html").read_text().startswith("<!DOCTYPE html>")


def test_save_brushed_plot_extracts_svg(tmp_path: Path, small_df: pl.DataFrame, settings) -> None:
    save(_node(small_df, settings, brush=True), out_svg=str(tmp_path / "b.svg"))
    text = (tmp_path / "b.svg").read_text()
    assert "<script" not in text
    assert "<svg" in text


def test_save_altair_html_and_svg_rejected(tmp_path: Path, small_df: pl.DataFrame) -> None:
    chart = to_altair(layer(views(small_df, [("a", "b")]), point()))
    save(chart, out_html=str(tmp_path / "c.html"))
    assert "vega" in (tmp_path / "c.html").read_text().lower()
    with pytest.raises(ValueError):
        save(chart, out_svg=str(tmp_path / "c.svg"))


def test_png_without_converter_names_package(tmp_path: Path, small_df: pl.DataFrame, settings, monkeypatch) -> None:
    real_import = importlib.import_module

    def fake_import(name: str, *args, **kwargs):
        if name == "vl_convert":
            raise ImportError("No module named 'vl_convert'")
        return real_import(name, *args, **kwargs)

    monkeypatch.setattr(save_mod.importlib, "import_module", fake_import)

    with pytest.raises(RuntimeError, match="vl-convert-python"):
        save(_node(small_df, settings), out_png=str(tmp_path / "p.png"))
    assert not (tmp_path / "p.png").exists()


def test_png_uses_converter(tmp_path: Path, small_df: pl.DataFrame, settings, monkeypatch) -> None:
    class FakeConverter:
        @staticmethod
        def svg_to_png(svg: str) -> bytes:
            assert svg.startswith("<?xml")
            return b"\x89PNG fake"

    monkeypatch.setattr(save_mod, "_converter", lambda: FakeConverter)

    save(_node(small_df, settings), out_png=str(tmp_path / "p.png"))

    assert (tmp_path / "p.png").read_bytes() == b"\x89PNG fake"


def test_save_rejects_unknown_objects(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        save({"not": "a plot"}, out_svg=str(tmp_path / "x.svg"))
