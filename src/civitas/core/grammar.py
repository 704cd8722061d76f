"""
Canonical plotting grammar and helpers.

Defines the enum vocabulary shared by the view algebra, the stat registry, the
renderers, and the Altair translation: marks, stats, coordinate systems, scale
types, bar positions, facet scale modes, and point shapes. Includes zero-IO
normalization helpers that accept enum members or loose strings.

Design principles
-----------------
1) One naming standard:
   - Enum classes: PascalCase
   - Enum member names: UPPER_SNAKE (Python constants)
   - Enum serialized values: lower_snake
   - View fields elsewhere: lower_snake

2) Loose input, strict output:
   - Helpers accept ``"Rule-H"``, ``"rule_h"`` or ``Mark.RULE_H`` and always
     return the enum member. Anything else raises GrammarError.

Mark/stat mapping
-----------------
| Layer spec      | Mark     | Stat      | Drawn as
|-----------------|----------|-----------|-------------------------------------
| point           | point    | identity  | circles/squares/triangles/diamonds
| linear          | line     | regress   | one segment per color group
| smooth          | line     | smooth    | LOESS polyline per color group
| histogram       | bar      | bin       | polygons from four projected corners
| line_mark       | line     | identity  | polyline sorted by pixel x
| bar             | rect     | count     | dodged categorical bars
| stacked_bar     | rect     | count     | stacked categorical bars
| value_bar       | rect     | identity  | pre-aggregated categorical bars
| text_label      | text     | identity  | text at data positions
| hline/vline     | rule_h/v | (none)    | dashed reference lines
| hband           | band_h   | (none)    | translucent horizontal band

Examples
--------
>>> from civitas.core.grammar import Mark, mark_from_value, stat_from_value, Stat
>>> mark_from_value("Rule-H") == Mark.RULE_H
True
>>> stat_from_value("bin") == Stat.BIN
True
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum
from typing import Any

from .errors import GrammarError

__all__ = [
    "Mark",
    "Stat",
    "CoordKind",
    "ScaleType",
    "Position",
    "ScaleMode",
    "ShapeKind",
    "DATA_MARKS",
    "ANNOTATION_MARKS",
    # helpers/validators
    "is_lower_snake",
    "assert_lower_snake",
    "mark_from_value",
    "stat_from_value",
    "coord_from_value",
    "scale_type_from_value",
    "position_from_value",
    "scale_mode_from_value",
    "ensure_all_enum_values_lower_snake",
]


class Mark(str, Enum):
    """Drawable mark type of a view."""

    POINT = "point"
    LINE = "line"
    BAR = "bar"
    RECT = "rect"
    TEXT = "text"
    RULE_H = "rule_h"
    RULE_V = "rule_v"
    BAND_H = "band_h"


class Stat(str, Enum):
    """Statistical transform applied before drawing."""

    IDENTITY = "identity"
    BIN = "bin"
    REGRESS = "regress"
    SMOOTH = "smooth"
    COUNT = "count"


class CoordKind(str, Enum):
    """Coordinate system mapping scaled values to pixels."""

    CARTESIAN = "cartesian"
    FLIP = "flip"
    POLAR = "polar"


class ScaleType(str, Enum):
    """Continuous scale transform."""

    LINEAR = "linear"
    LOG = "log"


class Position(str, Enum):
    """Placement of grouped bars within a category band."""

    DODGE = "dodge"
    STACK = "stack"


class ScaleMode(str, Enum):
    """Which axes share domains across facet panels."""

    SHARED = "shared"
    FREE_X = "free_x"
    FREE_Y = "free_y"
    FREE = "free"


class ShapeKind(str, Enum):
    """Point glyphs assigned to shape categories, in cycling order."""

    CIRCLE = "circle"
    SQUARE = "square"
    TRIANGLE = "triangle"
    DIAMOND = "diamond"


# Marks driven by a stat result vs. marks positioned by literal values.
DATA_MARKS: frozenset[Mark] = frozenset(
    {Mark.POINT, Mark.LINE, Mark.BAR, Mark.RECT, Mark.TEXT}
)
ANNOTATION_MARKS: frozenset[Mark] = frozenset({Mark.RULE_H, Mark.RULE_V, Mark.BAND_H})


_LOWER_SNAKE_RE = re.compile(r"^[a-z][a-z0-9]*(?:_[a-z0-9]+)*$")


def is_lower_snake(s: str) -> bool:
    """Return True if `s` is lower_snake (letters, digits, single underscores)."""
    return bool(_LOWER_SNAKE_RE.match(s))


def assert_lower_snake(s: str, what: str = "value") -> str:
    """Return `s` unchanged or raise GrammarError if it is not lower_snake."""
    if not is_lower_snake(s):
        raise GrammarError(f"{what} must be lower_snake, got {s!r}")
    return s


def _normalize_token(value: str) -> str:
    return value.strip().lower().replace("-", "_").replace(" ", "_")


def _enum_from_value(enum_cls: type[Enum], value: Any, what: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        raise GrammarError(f"{what} must be a string or {enum_cls.__name__}, got {value!r}")
    token = _normalize_token(value)
    try:
        return enum_cls(token)
    except ValueError as exc:
        allowed = ", ".join(m.value for m in enum_cls)  # type: ignore[attr-defined]
        raise GrammarError(f"unknown {what} {value!r} (expected one of: {allowed})") from exc


def mark_from_value(value: Any) -> Mark:
    """Normalize a mark name (e.g., ``"rule-h"``) to a Mark member."""
    return _enum_from_value(Mark, value, "mark")


def stat_from_value(value: Any) -> Stat:
    """Normalize a stat name to a Stat member."""
    return _enum_from_value(Stat, value, "stat")


def coord_from_value(value: Any) -> CoordKind:
    """Normalize a coordinate system name to a CoordKind member."""
    return _enum_from_value(CoordKind, value, "coord")


def scale_type_from_value(value: Any) -> ScaleType:
    """Normalize a scale type name to a ScaleType member."""
    return _enum_from_value(ScaleType, value, "scale type")


def position_from_value(value: Any) -> Position:
    """Normalize a bar position name to a Position member."""
    return _enum_from_value(Position, value, "position")


def scale_mode_from_value(value: Any) -> ScaleMode:
    """Normalize a facet scale mode (``"free-y"`` → ScaleMode.FREE_Y)."""
    return _enum_from_value(ScaleMode, value, "scale mode")


def ensure_all_enum_values_lower_snake(enums: Iterable[type[Enum]] | None = None) -> None:
    """Raise GrammarError if any enum value in the grammar is not lower_snake."""
    classes = enums or (Mark, Stat, CoordKind, ScaleType, Position, ScaleMode, ShapeKind)
    for cls in classes:
        for member in cls:
            assert_lower_snake(str(member.value), what=f"{cls.__name__}.{member.name}")
