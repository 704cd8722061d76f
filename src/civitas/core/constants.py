"""
Rendering defaults and shared palettes.

Defines the plot theme, figure geometry defaults, markup namespaces, and the
village color table consumed by the plot renderers, the village scene, and the
settings layer. This module is zero-IO and uses only the Python standard library.

Notes:
    - civitas.io.config.Settings reads its defaults from here; override values via
      environment or TOML rather than editing call sites.
    - PALETTE follows ggplot2's qualitative hues.
"""

from __future__ import annotations

__all__ = [
    "PALETTE",
    "THEME_BG",
    "THEME_GRID",
    "THEME_FONT_SIZE",
    "DEFAULT_INK",
    "DEFAULT_WIDTH",
    "DEFAULT_HEIGHT",
    "DEFAULT_MARGIN",
    "LEGEND_WIDTH",
    "SVG_NS",
    "XLINK_NS",
    "XHTML_NS",
    "VILLAGE_COLORS",
    "SLIDE_PALETTE",
    "LDNS",
    "BASE_URL",
]

PALETTE: tuple[str, ...] = (
    "#F8766D",
    "#00BA38",
    "#619CFF",
    "#A855F7",
    "#F97316",
    "#14B8A6",
    "#EF4444",
    "#6B7280",
)

THEME_BG: str = "#EBEBEB"
THEME_GRID: str = "#FFFFFF"
THEME_FONT_SIZE: int = 8

# Fill for marks without a color binding.
DEFAULT_INK: str = "#333"

DEFAULT_WIDTH: int = 600
DEFAULT_HEIGHT: int = 400
DEFAULT_MARGIN: int = 40
LEGEND_WIDTH: int = 100

SVG_NS: str = "http://www.w3.org/2000/svg"
XLINK_NS: str = "http://www.w3.org/1999/xlink"
XHTML_NS: str = "http://www.w3.org/1999/xhtml"

VILLAGE_COLORS: dict[str, str] = {
    "white": "#FFFFFF",
    "dgreen": "#62B132",
    "dblue": "#5881D8",
    "lgreen": "#91DC47",
    "lblue": "#8FB5FE",
    "cred": "#F26767",
    "gyellow": "#FFCD52",
    "cbrown": "#A86F40",
    "lgray": "#E0E0E0",
    "mgray": "#808080",
    "ddblue": "#2F4179",
    "sstone": "#D6D6D6",
    "swhite": "#F0F4F8",
}

# Slide background and text colors, indexed like the talk's palette.
SLIDE_PALETTE: tuple[str, ...] = (
    "#FFFFFF",
    "#62B132",
    "#5881D8",
    "#91DC47",
    "#8FB5FE",
    "#F26767",
    "#FFCD52",
    "#A86F40",
    "#E0E0E0",
    "#F97316",
    "#808080",
    "#2F4179",
    "#1B1B1B",
)

# JSON-LD namespace and site base URL.
LDNS: str = "civitas"
BASE_URL: str = "https://timothypratley.github.io/civitas/"
