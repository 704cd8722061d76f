"""
Header (global controls) for the civitas Streamlit application.

This module renders the top-of-page controls, including:
- Title.
- Mesh shading toggle for the village deck.
- Altair rendition toggle for the gallery.
- Site database path for the explorer.

Notes:
    - Preferences persist in st.session_state across reruns.
    - Defaults from the command line seed the session only once.
"""

from __future__ import annotations

from dataclasses import dataclass

import streamlit as st

from civitas.io.config import Settings


@dataclass(frozen=True)
class HeaderPrefs:
    """Selections made in the header.

    Attributes:
        shade (bool): Shade village meshes by face normal.
        altair (bool): Show the Altair rendition next to the SVG in the gallery.
        db_path (str): Site database used by the explorer tab.
    """

    shade: bool
    altair: bool
    db_path: str


def render_header(*, default_shade: bool = False, default_db: str | None = None) -> HeaderPrefs:
    """Render the global header and return the selected preferences.

    Args:
        default_shade (bool): Initial value of the shading toggle.
        default_db (str | None): Initial site database path; Settings.site.db_path when None.

    Returns:
        HeaderPrefs: Current selections.
    """
    st.markdown("### civitas")

    # Session defaults
    if "shade" not in st.session_state:
        st.session_state["shade"] = bool(default_shade)
    if "altair" not in st.session_state:
        st.session_state["altair"] = False
    if "db_path" not in st.session_state:
        st.session_state["db_path"] = default_db or Settings.load().site.db_path

    c1, c2, c3 = st.columns([0.25, 0.25, 0.50])
    with c1:
        st.toggle("Shade meshes", key="shade", help="Mix each face toward black by its angle to the light.")
    with c2:
        st.toggle("Altair rendition", key="altair", help="Also draw gallery plots with Vega-Lite.")
    with c3:
        st.text_input("Site database", key="db_path", help="YAML file with author/topic/notebook lists.")

    return HeaderPrefs(
        shade=bool(st.session_state["shade"]),
        altair=bool(st.session_state["altair"]),
        db_path=str(st.session_state["db_path"]),
    )
