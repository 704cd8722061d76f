from __future__ import annotations

import pytest

from civitas.village.deck import (
    MIN_DURATION_MS,
    OVERVIEW_BBOX,
    ZOOM_STEP,
    DeckState,
    compute_animation,
    frame_viewbox,
    limit_step,
    new_transition,
    pan,
    parse_viewbox,
    progress,
    slide_viewboxes,
    viewbox_attr,
    wheel_zoom_factor,
    zoom,
)


def test_limit_step_clamps_to_available_steps() -> None:
    assert limit_step(0, 5, lambda s: s - 1) == 0
    assert limit_step(4, 5, lambda s: s + 1) == 4
    assert limit_step(1, [1, 2, 3], lambda s: s + 1) == 2


def test_progress_stretches_short_durations() -> None:
    assert progress(250) == pytest.approx(250 / MIN_DURATION_MS)
    assert progress(250, 100) == pytest.approx(0.5)
    assert progress(500, 1000) == pytest.approx(0.5)
    assert progress(5000, 1000) == 1.0
    assert progress(-10) == 0.0


def test_transition_interpolates_changed_keys_only() -> None:
    start = {"x": 0.0, "y": 10.0, "width": 100.0, "height": 50.0}
    end = {"x": 20.0, "y": 10.0, "width": 50.0, "height": 50.0}
    tr = new_transition(start, end)
    assert tr["y"] == 10.0
    assert compute_animation(tr, 0.0) == start
    assert compute_animation(tr, 1.0) == end
    assert compute_animation(tr, 0.5) == {"x": 10.0, "y": 10.0, "width": 75.0, "height": 50.0}


def test_frame_viewbox_widens_to_viewport_aspect() -> None:
    # Arrange: a square target in a 2:1 viewport
    bbox = (0, 0, 100, 100)

    # Act
    vb = frame_viewbox(bbox, 200, 100, scale=1.0)

    # Assert
    assert vb == {"x": -50.0, "y": 0.0, "width": 200.0, "height": 100.0}


def test_frame_viewbox_heightens_for_tall_viewport() -> None:
    vb = frame_viewbox((0, 0, 100, 100), 100, 200, scale=0.5)
    assert vb["width"] == pytest.approx(50.0)
    assert vb["height"] == pytest.approx(100.0)
    # Centered on the target
    assert vb["x"] + vb["width"] / 2 == pytest.approx(50.0)
    assert vb["y"] + vb["height"] / 2 == pytest.approx(50.0)


@pytest.mark.parametrize("bbox,w,h", [((0, 0, 10, 10), 0, 100), ((0, 0, 0, 10), 100, 100)])
def test_frame_viewbox_rejects_empty_areas(bbox, w, h) -> None:
    with pytest.raises(ValueError, match="positive size"):
        frame_viewbox(bbox, w, h)


def test_viewbox_attr_and_parse() -> None:
    vb = {"x": -10.0, "y": 2.5, "width": 100.0, "height": 50.0}
    assert viewbox_attr(vb) == "-10 2.5 100 50"
    assert parse_viewbox("-10, 2.5 100,50") == vb
    with pytest.raises(ValueError, match="four numbers"):
        parse_viewbox("0 0 10")


def test_slide_viewboxes_start_and_end_on_overview() -> None:
    steps = slide_viewboxes(3, 1600, 900)
    assert len(steps) == 5
    assert steps[0] == steps[-1]
    assert steps[0] is not steps[-1]
    assert steps[0] == frame_viewbox(OVERVIEW_BBOX, 1600, 900)
    assert all(s["width"] < steps[0]["width"] for s in steps[1:-1])


def test_pan_moves_view_against_drag() -> None:
    assert pan({"x": 0, "y": 0, "width": 10, "height": 10}, 3, -2) == {"x": -3, "y": 2, "width": 10, "height": 10}


def test_zoom_keeps_center_or_point_fixed() -> None:
    vb = {"x": 0.0, "y": 0.0, "width": 100.0, "height": 100.0}
    assert zoom(vb, 2.0) == {"x": -50.0, "y": -50.0, "width": 200.0, "height": 200.0}
    # Zooming about the top-left corner keeps it in place
    assert zoom(vb, 0.5, 0.0, 0.0) == {"x": 0.0, "y": 0.0, "width": 50.0, "height": 50.0}


def test_wheel_zoom_factor_uses_dominant_axis() -> None:
    assert wheel_zoom_factor(0, 10) == ZOOM_STEP
    assert wheel_zoom_factor(0, -10) == pytest.approx(1 / ZOOM_STEP)
    assert wheel_zoom_factor(-20, 5) == pytest.approx(1 / ZOOM_STEP)
    assert wheel_zoom_factor(0, 0) is None


def test_deck_requires_steps() -> None:
    with pytest.raises(ValueError, match="at least one step"):
        DeckState([])


def test_deck_navigation_is_clamped() -> None:
    # Arrange
    deck = DeckState.for_slides(3)

    # Act / Assert
    assert deck.step == 0
    assert deck.prev() == 0
    assert deck.next() == 1
    assert deck.view == deck.steps[1]
    assert deck.last() == 4
    assert deck.next() == 4
    assert deck.first() == 0
    assert deck.go(99) == 4


@pytest.mark.parametrize(
    "key,expected",
    [("ArrowRight", 2), ("ArrowDown", 2), ("PageDown", 2), (" ", 2), ("ArrowLeft", 0), ("PageUp", 0), ("Home", 0), ("End", 4)],
)
def test_deck_keys(key: str, expected: int) -> None:
    deck = DeckState.for_slides(3)
    deck.go(1)
    assert deck.handle_key(key) is True
    assert deck.step == expected


def test_deck_ignores_other_keys() -> None:
    deck = DeckState.for_slides(3)
    assert deck.handle_key("q") is False
    assert deck.step == 0


def test_deck_step_change_starts_transition() -> None:
    deck = DeckState.for_slides(2)
    before = dict(deck.view)
    deck.next()
    assert deck.frame(0.0) == pytest.approx(before)
    assert deck.frame(1.0) == pytest.approx(deck.steps[1])


def test_deck_pan_and_zoom_cancel_transition() -> None:
    deck = DeckState.for_slides(2)
    deck.next()
    view = deck.zoom(2.0)
    assert deck.transition is None
    assert deck.frame(0.3) == view
    assert deck.pan(1, 1)["x"] == view["x"] - 1


def test_deck_hash_round_trip() -> None:
    deck = DeckState.for_slides(3)
    deck.go(2)
    assert deck.hash == "#step2"
    other = DeckState.for_slides(3)
    assert other.go_hash("#step2") is True
    assert other.step == 2
    assert other.go_hash("#intro") is False
    assert other.go_hash("") is False
