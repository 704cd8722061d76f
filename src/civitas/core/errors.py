"""
Core exception types raised by grammar normalization, view validation, and stats.

Provides typed exceptions for core-domain failures:
- GrammarError for unknown marks, stats, coords, scale types, or scale modes.
- ViewSpecError for view records that cannot be rendered (missing data/x/y
  bindings or columns absent from the dataset).
- StatError for statistical transforms that have no usable rows.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Everything else (dataset access, numeric failures) propagates unchanged.

Examples:
    Catch a normalization failure.

    >>> from civitas.core.errors import GrammarError
    >>> from civitas.core.grammar import mark_from_value
    >>> try:
    ...     mark_from_value("sparkle")
    ... except GrammarError as e:
    ...     msg = str(e)
    >>> "sparkle" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "CivitasError",
    "GrammarError",
    "ViewSpecError",
    "StatError",
]


class CivitasError(Exception):
    """Base class for civitas domain errors."""


class GrammarError(CivitasError, ValueError):
    """Unknown or malformed enum-like value (mark, stat, coord, scale, mode)."""


class ViewSpecError(CivitasError, ValueError):
    """View record is missing a required binding or references an absent column."""


class StatError(CivitasError, ValueError):
    """Statistical transform could not be computed (e.g., no complete rows)."""
