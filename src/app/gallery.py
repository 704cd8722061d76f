"""
Gallery helpers for the Streamlit app.

Renders civitas.plot.gallery examples to markup (for st.html) or to Altair
charts (for st.altair_chart). No Streamlit calls happen here.
"""

from __future__ import annotations

from typing import Any

import altair as alt

from civitas.markup.hiccup import to_markup
from civitas.plot.gallery import EXAMPLES, get_example
from civitas.plot.vega import to_altair


def example_labels() -> dict[str, str]:
    """Selectbox labels ("name: title") mapped to example names, in gallery order."""
    return {f"{name}: {ex.title}": name for name, ex in EXAMPLES.items()}


def default_index(name: str | None) -> int:
    """Position of `name` in the gallery, or 0 when unknown."""
    names = list(EXAMPLES)
    return names.index(name) if name in names else 0


def example_markup(name: str, **overrides: Any) -> str:
    """Inline markup for one example (an svg, or a div with the brush script)."""
    return to_markup(get_example(name).render(**overrides))


def example_chart(name: str) -> alt.TopLevelMixin:
    """The Altair rendition of one example."""
    return to_altair(get_example(name).build())
