"""
IO layer for civitas: settings, datasets, and atomic writers.

Modules
- config: Settings (env > TOML > defaults).
- datasets: bundled iris, synthetic cars, read_table for CSV/Parquet.
- write: atomic text/bytes writers.
- errors: IoError hierarchy.
"""

from __future__ import annotations

from .config import Settings, SiteSettings, ThemeSettings
from .errors import IoConfigError, IoError, IoReadError, IoWriteError
from .write import write_bytes_atomic, write_text_atomic

__all__ = [
    "Settings",
    "SiteSettings",
    "ThemeSettings",
    "IoError",
    "IoConfigError",
    "IoReadError",
    "IoWriteError",
    "write_bytes_atomic",
    "write_text_atomic",
]
