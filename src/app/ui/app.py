"""
Streamlit application orchestrator for civitas.

This module composes the global header and all page tabs while delegating
supporting concerns to focused modules (app.ui.header, app.ui.helpers,
app.gallery).

Responsibilities:
    - Configure Streamlit page.
    - Render global header (shading, Altair rendition, site database).
    - Mount tab content (Deck, Gallery, Explorer).

Notes:
    - The deck step lives in st.session_state as a civitas DeckState; the
      buttons and the jump slider call its navigation methods and the svg is
      re-framed on the state's view.
    - Markup is mounted with streamlit.components.v1.html so the gallery's
      brush script runs.
"""

from __future__ import annotations

import logging

import streamlit as st
import streamlit.components.v1 as components

from app.gallery import default_index, example_chart, example_labels, example_markup
from civitas.io.errors import IoError
from civitas.markup.hiccup import to_markup
from civitas.site.db import load_db
from civitas.site.explorer import hex_grid
from civitas.village.scene import slides, village_svg

from .header import render_header
from .helpers import DECK_HEIGHT_PX, deck_markup, get_deck_state, step_label

logger = logging.getLogger(__name__)


def _render_deck(shade: bool) -> None:
    """Deck tab: the village framed on the current step, with navigation controls."""
    slide_list = slides(shade=shade)
    svg = village_svg(slide_list)
    state = get_deck_state(st.session_state, len(slide_list))

    b_first, b_prev, b_next, b_last, label = st.columns([0.1, 0.1, 0.1, 0.1, 0.6])
    with b_first:
        if st.button("Home", key="deck_first", use_container_width=True):
            state.first()
    with b_prev:
        if st.button("Prev", key="deck_prev", use_container_width=True):
            state.prev()
    with b_next:
        if st.button("Next", key="deck_next", use_container_width=True):
            state.next()
    with b_last:
        if st.button("End", key="deck_last", use_container_width=True):
            state.last()
    with label:
        st.caption(f"{step_label(state)}  ({state.hash})")

    z_in, z_out, _ = st.columns([0.1, 0.1, 0.8])
    with z_in:
        if st.button("Zoom in", key="deck_zoom_in", use_container_width=True):
            state.zoom(1 / 1.25)
    with z_out:
        if st.button("Zoom out", key="deck_zoom_out", use_container_width=True):
            state.zoom(1.25)

    components.html(deck_markup(svg, state.view), height=DECK_HEIGHT_PX + 20)


def _render_gallery(default_example: str | None, altair: bool) -> None:
    """Gallery tab: one plot example as inline SVG, optionally with its Altair rendition."""
    labels = example_labels()
    options = list(labels)
    choice = st.selectbox("Example", options=options, index=default_index(default_example), key="gallery_example")
    name = labels[choice]

    markup = example_markup(name)
    components.html(markup, height=720, scrolling=True)

    if altair:
        st.markdown("#### Altair rendition")
        st.altair_chart(example_chart(name), use_container_width=False)


def _render_explorer(db_path: str) -> None:
    """Explorer tab: notebooks from the site database on the topic hex grid."""
    try:
        db = load_db(db_path)
    except IoError as e:
        st.info(f"No site database loaded: {e}")
        return
    try:
        grid = hex_grid(db)
    except ValueError as e:
        st.error(f"Cannot lay out notebooks: {e}")
        return
    st.caption(f"{len(db['notebook'])} notebooks across {len(db['topic'])} topics")
    components.html(to_markup(grid), height=720, scrolling=True)


def streamlit_app(
    default_example: str | None = None,
    default_shade: bool = False,
    default_db: str | None = None,
) -> None:
    """Render the civitas Streamlit application.

    Args:
        default_example (str | None): Gallery example selected on first render.
        default_shade (bool): Initial mesh shading for the deck.
        default_db (str | None): Site database path for the explorer.

    Returns:
        None
    """
    st.set_page_config(page_title="civitas", layout="wide")

    prefs = render_header(default_shade=default_shade, default_db=default_db)

    tab_deck, tab_gallery, tab_explorer = st.tabs(["Deck", "Gallery", "Explorer"])

    with tab_deck:
        _render_deck(prefs.shade)

    with tab_gallery:
        _render_gallery(default_example, prefs.altair)

    with tab_explorer:
        _render_explorer(prefs.db_path)

    logger.debug("rendered app (shade=%s, altair=%s)", prefs.shade, prefs.altair)
