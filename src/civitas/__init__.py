"""
civitas — isometric village scenes, a grammar-of-graphics plot library, and site metadata.

## Packages
- civitas.core — grammar enums, errors, constants, serde, typing aliases.
- civitas.markup — hiccup trees and SVG helpers.
- civitas.io — settings, atomic writers, bundled datasets.
- civitas.plot — views, stats, scales, coords, SVG and Altair renderers.
- civitas.village — hex geometry, isometric meshes, the slide deck.
- civitas.site — site database, front matter, JSON-LD, notebook explorer.

The ``civitas`` console script lives in civitas.cli.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
