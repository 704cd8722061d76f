from __future__ import annotations

from app.ui.helpers import DECK_STATE_KEY, deck_markup, get_deck_state, step_label
from civitas.village.deck import DeckState


def test_get_deck_state_creates_and_reuses() -> None:
    session: dict = {}

    state = get_deck_state(session, 3)
    state.next()
    again = get_deck_state(session, 3)

    assert session[DECK_STATE_KEY] is state
    assert again is state
    assert again.step == 1
    assert len(state.steps) == 5


def test_get_deck_state_replaces_stale_state() -> None:
    # A stored deck sized for another slide count is rebuilt from step 0
    session: dict = {DECK_STATE_KEY: DeckState.for_slides(2)}
    session[DECK_STATE_KEY].next()

    state = get_deck_state(session, 4)

    assert len(state.steps) == 6
    assert state.step == 0


def test_get_deck_state_ignores_foreign_values() -> None:
    session: dict = {DECK_STATE_KEY: "not a deck"}
    assert isinstance(get_deck_state(session, 1), DeckState)


def test_step_label_names_overview_and_slides() -> None:
    state = DeckState.for_slides(3)
    assert step_label(state) == "Overview"
    state.next()
    assert step_label(state) == "Slide 1 of 3"
    state.last()
    assert step_label(state) == "Overview"


def test_deck_markup_frames_svg_on_viewbox() -> None:
    svg = ["svg#app", {"viewBox": [0, 0, 10, 10]}, ["circle", {"r": 1}]]

    text = deck_markup(svg, {"x": -5, "y": 2.5, "width": 20, "height": 10}, height_px=300)

    assert text.startswith('<svg id="app"')
    assert 'viewBox="-5 2.5 20 10"' in text
    assert "height:300px" in text
    assert '<circle r="1"/>' in text
    # Input node is left untouched
    assert svg[1]["viewBox"] == [0, 0, 10, 10]
