"""
Named example plots over the bundled datasets.

Each Example builds its views on demand and carries the plot() options it is
meant to be shown with. The CLI (``civitas plot --example NAME``) and the
Streamlit gallery tab both draw from EXAMPLES.

Examples:
    >>> from civitas.plot.gallery import EXAMPLES  # doctest: +SKIP
    >>> ex = EXAMPLES["regression"]  # doctest: +SKIP
    >>> svg = ex.render()  # doctest: +SKIP
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import polars as pl

from civitas.core.typing import Node
from civitas.io.datasets import cars, iris

from .algebra import (
    auto,
    cross,
    distribution,
    facet,
    facet_grid,
    layer,
    layers,
    set_coord,
    set_scale,
    stack,
    views,
    when_diagonal,
)
from .geoms import bar, hband, histogram, hline, linear, point, smooth, stacked_bar, text_label, value_bar
from .plot import plot
from .views import View

__all__ = ["Example", "EXAMPLES", "example_names", "get_example"]

IRIS_NUMERIC = ["sepal_length", "sepal_width", "petal_length", "petal_width"]


@dataclass(frozen=True)
class Example:
    """A named plot recipe."""

    name: str
    title: str
    build: Callable[[], list[View]]
    options: dict[str, Any] = field(default_factory=dict)

    def render(self, **overrides: Any) -> Node:
        return plot(self.build(), **{**self.options, **overrides})


def _scatter() -> list[View]:
    return layer(views(iris(), [("sepal_length", "sepal_width")]), point(color="species"))


def _regression() -> list[View]:
    base = views(iris(), [("sepal_length", "petal_length")])
    return layers(base, point(color="species"), linear(color="species"))


def _smooth() -> list[View]:
    base = views(iris(), [("sepal_length", "sepal_width")])
    return layers(base, point(), smooth())


def _splom() -> list[View]:
    cols = IRIS_NUMERIC[:3]
    return auto(when_diagonal(layer(views(iris(), cross(cols, cols)), color="species"), histogram()))


def _histogram() -> list[View]:
    return layer(distribution(iris(), "petal_length"), histogram(color="species"))


def _facet() -> list[View]:
    return facet(layer(views(iris(), [("sepal_length", "petal_length")]), point()), "species")


def _facet_grid() -> list[View]:
    base = layer(views(cars(), [("displ", "hwy")]), point())
    return facet_grid(base, "drv", "cyl")


def _dodged_bars() -> list[View]:
    return layer(views(cars(), [("class", "class")]), bar(color="drv"))


def _stacked_bars() -> list[View]:
    return layer(views(cars(), [("class", "class")]), stacked_bar(color="drv"))


def _value_bars() -> list[View]:
    means = (
        iris()
        .group_by("species", maintain_order=True)
        .agg(pl.col("petal_length").mean().round(2).alias("mean_petal_length"))
    )
    base = views(means, [("species", "mean_petal_length")])
    return stack(
        layer(base, value_bar()),
        layer(base, text_label("mean_petal_length")),
        layer(base, hline(float(means["mean_petal_length"].mean()))),
    )


def _annotated() -> list[View]:
    base = views(iris(), [("sepal_length", "sepal_width")])
    return stack(layer(base, hband(2.8, 3.3)), layer(base, point(color="species")), layer(base, hline(3.0)))


def _log_scale() -> list[View]:
    vs = layer(views(cars(), [("displ", "hwy")]), point(color="drv"))
    return set_scale(vs, "y", "log")


def _flipped() -> list[View]:
    return set_coord(layer(views(cars(), [("class", "class")]), bar()), "flip")


def _polar() -> list[View]:
    return set_coord(layer(views(cars(), [("class", "class")]), bar(color="drv")), "polar")


EXAMPLES: dict[str, Example] = {
    ex.name: ex
    for ex in (
        Example("scatter", "Scatter colored by species", _scatter, {"tooltip": True}),
        Example("regression", "Points with per-species regression lines", _regression),
        Example("smooth", "LOESS smoother", _smooth),
        Example("splom", "Scatterplot matrix with brushing", _splom, {"brush": True, "width": 600, "height": 600}),
        Example("histogram", "Histogram by species", _histogram),
        Example("facet", "Faceted by species", _facet, {"height": 300}),
        Example("facet_grid", "Drive by cylinders grid", _facet_grid, {"scales": "free_y", "height": 500}),
        Example("bars", "Dodged count bars", _dodged_bars, {"width": 700}),
        Example("stacked_bars", "Stacked count bars", _stacked_bars, {"width": 700}),
        Example("value_bars", "Mean petal length with labels", _value_bars),
        Example("annotated", "Reference band and line", _annotated),
        Example("log_scale", "Log y scale", _log_scale),
        Example("flipped", "Flipped bars", _flipped),
        Example("polar", "Polar bars", _polar, {"width": 500, "height": 500}),
    )
}


def example_names() -> list[str]:
    return list(EXAMPLES)


def get_example(name: str) -> Example:
    """
    Look up an example by name.

    Raises:
        KeyError: Unknown name (the message lists the known ones).
    """
    try:
        return EXAMPLES[name]
    except KeyError:
        raise KeyError(f"unknown example {name!r}; choose from {', '.join(EXAMPLES)}") from None
