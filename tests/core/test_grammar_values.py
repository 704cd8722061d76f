from __future__ import annotations

import pytest

from civitas.core.errors import CivitasError, GrammarError
from civitas.core.grammar import (
    CoordKind,
    Mark,
    ScaleMode,
    Stat,
    coord_from_value,
    ensure_all_enum_values_lower_snake,
    is_lower_snake,
    mark_from_value,
    scale_mode_from_value,
    stat_from_value,
)


def test_all_enum_values_are_lower_snake() -> None:
    # Raises on the first offending member; passing means the grammar is clean.
    ensure_all_enum_values_lower_snake()


def test_from_value_normalizes_kebab_and_case() -> None:
    assert mark_from_value("Rule-H") == Mark.RULE_H
    assert scale_mode_from_value("free-y") == ScaleMode.FREE_Y
    assert coord_from_value(" polar ") == CoordKind.POLAR
    assert stat_from_value(Stat.BIN) is Stat.BIN


def test_unknown_value_lists_allowed_members() -> None:
    with pytest.raises(GrammarError) as ei:
        stat_from_value("median")
    msg = str(ei.value)
    assert "median" in msg
    assert "regress" in msg


def test_non_string_value_rejected() -> None:
    with pytest.raises(GrammarError):
        mark_from_value(3)


def test_grammar_error_is_value_error_and_civitas_error() -> None:
    err = GrammarError("x")
    assert isinstance(err, ValueError)
    assert isinstance(err, CivitasError)


@pytest.mark.parametrize("s,ok", [("free_x", True), ("a1_b2", True), ("Free", False), ("a__b", False), ("_a", False)])
def test_is_lower_snake(s: str, ok: bool) -> None:
    assert is_lower_snake(s) is ok
