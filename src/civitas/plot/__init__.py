"""
civitas.plot — a small grammar of graphics: views -> stats -> scales -> coords -> SVG.

## Responsibilities
- Describe plots as lists of View records built with an algebra of
  cross/stack/layer/facet operations.
- Compute statistical summaries (identity, bin, regress, smooth, count).
- Render panels, grids, ticks, and legends into hiccup SVG.
- Offer an Altair (Vega-Lite) rendition of the same views.

## Public API
- views — View record and validation.
- algebra — cross, stack, views, layer(s), facet(_grid), auto, pairs, set_scale, set_coord.
- geoms — point, linear, smooth, histogram, bar, value_bar, stacked_bar, annotations.
- stats — compute_stat and its result types.
- scales — LinearScale, LogScale, BandScale.
- coords — cartesian/flip/polar mappings.
- render — panel renderers.
- plot — plot(), plot_svg().
- vega — to_altair().
- save — save() to SVG/HTML/PNG.
- gallery — named example recipes over the bundled datasets.

## Import DAG discipline
- Depends on: civitas.core, civitas.markup, civitas.io, polars, numpy, pydantic, altair.
- Must not import civitas.village or civitas.site.

## Examples
```python
from civitas.io.datasets import iris
from civitas.plot import cross, layer, plot_svg, point, views

cols = ["sepal_length", "sepal_width"]
svg = plot_svg(layer(views(iris(), cross(cols, cols)), point(color="species")))
```
"""

from __future__ import annotations

from .algebra import (
    auto,
    cross,
    distribution,
    facet,
    facet_grid,
    infer_defaults,
    is_diagonal,
    layer,
    layers,
    pairs,
    set_coord,
    set_scale,
    stack,
    views,
    when_diagonal,
    when_off_diagonal,
    where,
    where_not,
)
from .gallery import EXAMPLES, Example, get_example
from .geoms import (
    bar,
    hband,
    histogram,
    hline,
    line_mark,
    linear,
    point,
    smooth,
    stacked_bar,
    text_label,
    value_bar,
    vline,
)
from .plot import plot, plot_svg
from .save import save
from .stats import StatResult, compute_stat
from .vega import to_altair
from .views import View, validate_view

__all__ = [
    "View",
    "validate_view",
    "cross",
    "stack",
    "views",
    "layer",
    "layers",
    "facet",
    "facet_grid",
    "is_diagonal",
    "infer_defaults",
    "auto",
    "where",
    "where_not",
    "when_diagonal",
    "when_off_diagonal",
    "distribution",
    "pairs",
    "set_scale",
    "set_coord",
    "point",
    "linear",
    "smooth",
    "histogram",
    "line_mark",
    "bar",
    "text_label",
    "hline",
    "vline",
    "hband",
    "value_bar",
    "stacked_bar",
    "StatResult",
    "compute_stat",
    "plot",
    "plot_svg",
    "to_altair",
    "save",
    "Example",
    "EXAMPLES",
    "get_example",
]
