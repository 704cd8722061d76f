from __future__ import annotations

"""
Top-level Streamlit app package.

This package hosts the interactive civitas viewer (Streamlit) decoupled from
the civitas.* library modules. Scenes, plots, and site metadata come from
civitas; the Streamlit UI shell and app-specific helpers live here.

CLI entrypoint (configured in pyproject.toml):
    civitas-app = app.main:main
"""
