from __future__ import annotations

import altair as alt

from app.gallery import default_index, example_chart, example_labels, example_markup
from civitas.plot.gallery import EXAMPLES


def test_example_labels_follow_gallery_order() -> None:
    labels = example_labels()
    assert list(labels.values()) == list(EXAMPLES)
    first = next(iter(labels))
    assert first.startswith(f"{next(iter(EXAMPLES))}: ")


def test_default_index_falls_back_to_first() -> None:
    names = list(EXAMPLES)
    assert default_index(names[2]) == 2
    assert default_index("nope") == 0
    assert default_index(None) == 0


def test_example_markup_is_svg_or_brush_div() -> None:
    assert example_markup("bars").startswith("<svg")
    splom = example_markup("splom")
    assert splom.startswith("<div")
    assert "<script>" in splom


def test_example_markup_applies_overrides() -> None:
    assert example_markup("histogram", width=222) != example_markup("histogram")


def test_example_chart_is_altair() -> None:
    assert isinstance(example_chart("scatter"), alt.TopLevelMixin)
