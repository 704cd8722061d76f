"""
civitas App UI package.

This package contains the decomposed Streamlit UI for the civitas viewer. It
exposes high-level orchestration and focused modules for separate concerns
(header, helpers).

Modules:
    - app: Streamlit application orchestrator (streamlit_app).
    - header: Global header (title, shading and Altair preferences).
    - helpers: Small cross-cutting helpers (accelerators, deck state, deck markup).

Usage:
    from app.ui import streamlit_app
    streamlit_app(default_example="splom", default_shade=True)
"""

from __future__ import annotations

from .app import streamlit_app
from .header import render_header

__all__ = [
    "streamlit_app",
    "render_header",
]
