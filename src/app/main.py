"""
civitas App entrypoint.

This module provides the CLI entrypoint to launch the Streamlit UI. It defers
all UI composition to the app.ui package and exists solely to start Streamlit
programmatically or render directly when already running under Streamlit.

Usage:
    - Python execution (hands process to Streamlit):
        python -m app.main --shade --example splom

    - Streamlit direct:
        streamlit run src/app/main.py -- --shade --example splom
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from app.ui import streamlit_app


def _parser(*, add_help: bool = True) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="civitas Streamlit App", add_help=add_help)
    parser.add_argument("--shade", action="store_true", help="Shade village meshes by face normal.")
    parser.add_argument("--example", default=None, help="Gallery example selected on start.")
    parser.add_argument("--db", default=None, help="Site database YAML for the Explorer tab.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Console entrypoint that launches Streamlit with the civitas UI.

    If already executing within a Streamlit server (environment variable
    STREAMLIT_SERVER_PORT is set), this function renders the app directly.
    Otherwise, it execs "python -m streamlit run <this_module>" to leverage
    Streamlit's reloader and argument parsing, passing through any supported
    options after "--".

    Args:
        argv (list[str] | None): Optional list of CLI arguments. If None,
            sys.argv[1:] is used.

    Examples:
        python -m app.main --shade --example splom
        streamlit run src/app/main.py -- --shade --example splom
    """
    args = list(sys.argv[1:] if argv is None else argv)
    ns = _parser().parse_args(args)

    # If invoked within Streamlit, just render
    if os.environ.get("STREAMLIT_SERVER_PORT"):
        streamlit_app(
            default_example=ns.example,
            default_shade=bool(ns.shade),
            default_db=ns.db,
        )
        return

    # Otherwise, exec streamlit run on this module to take over the process
    app_path = Path(__file__).resolve()
    cmd = [sys.executable, "-m", "streamlit", "run", str(app_path)]

    passthrough: list[str] = []
    if ns.shade:
        passthrough += ["--shade"]
    if ns.example:
        passthrough += ["--example", ns.example]
    if ns.db:
        passthrough += ["--db", ns.db]
    if passthrough:
        cmd += ["--"] + passthrough

    try:
        os.execv(sys.executable, cmd)
    except OSError:
        import subprocess

        subprocess.run(cmd, check=False)


if __name__ == "__main__":
    # Support: --shade, --example, --db after '--' when using `streamlit run`
    try:
        ns, _ = _parser(add_help=False).parse_known_args(sys.argv[1:])
        streamlit_app(default_example=ns.example, default_shade=bool(ns.shade), default_db=ns.db)
    except SystemExit:
        # Fallback to no-arg render
        streamlit_app()
