"""
Shared UI helper utilities for the civitas Streamlit application.

This module centralizes small cross-cutting helpers (deck state bookkeeping and
deck markup) used by multiple UI components. Keeping these here
avoids circular imports and makes per-tab code leaner.

Notes:
    - All functions include Google-style docstrings.
    - Session state is passed in as a plain mapping, so nothing here imports
      Streamlit and every helper can be exercised without a running server.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

from civitas.core.typing import Node
from civitas.markup.hiccup import node_attrs, node_children, svg_document
from civitas.village.deck import DeckState, viewbox_attr

DECK_STATE_KEY = "deck_state"
DECK_HEIGHT_PX = 640


def get_deck_state(
    session: MutableMapping[str, Any],
    n_slides: int,
    *,
    viewport: tuple[float, float] = (1600, 900),
) -> DeckState:
    """Return the DeckState held in `session`, creating it when missing or stale.

    A stored state is stale when its step count no longer matches the deck
    (overview + slides + overview), e.g. after the slide list changed.

    Args:
        session (MutableMapping[str, Any]): Streamlit session state (or any dict).
        n_slides (int): Number of slides in the rendered village.
        viewport (tuple[float, float]): Viewport width and height used to fit frames.

    Returns:
        DeckState: The state stored under DECK_STATE_KEY.
    """
    state = session.get(DECK_STATE_KEY)
    if not isinstance(state, DeckState) or len(state.steps) != n_slides + 2:
        state = DeckState.for_slides(n_slides, *viewport)
        session[DECK_STATE_KEY] = state
    return state


def step_label(state: DeckState) -> str:
    """Human label for the current step: "Overview" or "Slide i of n"."""
    n = len(state.steps) - 2
    if state.step == 0 or state.step == len(state.steps) - 1:
        return "Overview"
    return f"Slide {state.step} of {n}"


def deck_markup(svg: Node, viewbox: Mapping[str, float], *, height_px: int = DECK_HEIGHT_PX) -> str:
    """Serialize the village svg framed on `viewbox`.

    Args:
        svg (Node): The ``svg#app`` node from civitas.village.scene.village_svg.
        viewbox (Mapping[str, float]): Frame to show (x, y, width, height).
        height_px (int): Fixed display height; the width follows the container.

    Returns:
        str: Standalone ``<svg>`` markup.
    """
    attrs = node_attrs(svg)
    attrs["viewBox"] = viewbox_attr(viewbox)
    attrs["style"] = {"width": "100%", "height": f"{height_px}px", "display": "block"}
    return svg_document(["svg", attrs, *node_children(svg)])
