"""
Slide-deck navigation over the village svg, without a browser.

The deck is "presentation without slides": every step is a viewBox framing
one tile of the village, and moving between steps animates the viewBox.
This module keeps the state and the math; a viewer (the Streamlit app, or a
page script) applies the current viewBox to the svg.

Steps
- Step 0 is the overview, then one step per slide, then the overview again.
- The step index is clamped to the available steps.

Transitions
- new_transition(start, end) turns two viewBoxes into a mapping of
  interpolators (keys that do not change keep their value);
  compute_animation(transition, t) evaluates it at t in [0, 1].

Keys
- ArrowRight, ArrowDown, PageDown, space: next step.
- ArrowLeft, ArrowUp, PageUp: previous step.
- Home / End: first / last step.

Examples:
    >>> from civitas.village.deck import DeckState
    >>> deck = DeckState.for_slides(3)
    >>> deck.handle_key("ArrowRight"), deck.step
    (True, 1)
    >>> deck.handle_key("End"), deck.step
    (True, 4)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from civitas.markup.hiccup import format_number

from .geometry import SIN60
from .scene import TILE_RADIUS, slide_centers

__all__ = [
    "ViewBox",
    "FRAME_SCALE",
    "ZOOM_STEP",
    "MIN_DURATION_MS",
    "OVERVIEW_BBOX",
    "NEXT_KEYS",
    "PREV_KEYS",
    "parameterize",
    "new_transition",
    "compute_animation",
    "limit_step",
    "progress",
    "frame_viewbox",
    "viewbox_attr",
    "parse_viewbox",
    "slide_viewboxes",
    "pan",
    "zoom",
    "wheel_zoom_factor",
    "DeckState",
]

logger = logging.getLogger(__name__)

ViewBox = dict[str, float]

FRAME_SCALE = 0.8
ZOOM_STEP = 1.05
MIN_DURATION_MS = 500
# Bounds of the overview step: the scene's two invisible marker circles.
OVERVIEW_BBOX: tuple[float, float, float, float] = (-610.0, -510.0, 1220.0, 1020.0)

NEXT_KEYS = frozenset({"ArrowRight", "ArrowDown", "PageDown", " ", "Space", "Spacebar"})
PREV_KEYS = frozenset({"ArrowLeft", "ArrowUp", "PageUp"})

_STEP_HASH = re.compile(r"^#step(\d+)")


def parameterize(start: float, end: float) -> Callable[[float], float]:
    """Linear interpolator from `start` (t = 0) to `end` (t = 1)."""
    diff = end - start

    def at(t: float) -> float:
        return start + t * diff

    return at


def new_transition(start: Any, end: Any) -> Any:
    """
    Interpolators from `start` to `end`, matching their structure.

    Numbers become a parameterize() function (or stay a number when equal);
    mappings recurse key by key over `start`'s keys.
    """
    if isinstance(start, Mapping):
        return {k: new_transition(v, end[k]) for k, v in start.items()}
    if start == end:
        return start
    return parameterize(start, end)


def compute_animation(obj: Any, t: float) -> Any:
    """Evaluate a transition at `t`; constants pass through."""
    if callable(obj):
        return obj(t)
    if isinstance(obj, Mapping):
        return {k: compute_animation(v, t) for k, v in obj.items()}
    return obj


def limit_step(old_step: int, steps: int | Sequence[Any], f: Callable[[int], int]) -> int:
    """Apply `f` to the step index and clamp the result to [0, len(steps) - 1]."""
    n = steps if isinstance(steps, int) else len(steps)
    return max(0, min(n - 1, f(old_step)))


def progress(elapsed_ms: float, duration_ms: float | None = None) -> float:
    """Animation parameter in [0, 1]; durations under 500 ms are stretched to 500."""
    return min(1.0, max(0.0, elapsed_ms / max(duration_ms or 0, MIN_DURATION_MS)))


def frame_viewbox(
    bbox: Sequence[float],
    viewport_w: float,
    viewport_h: float,
    scale: float = FRAME_SCALE,
) -> ViewBox:
    """
    A viewBox that frames `bbox`, scaled and widened to the viewport's aspect.

    Args:
        bbox: (x, y, width, height) of the target in svg units.
        viewport_w: Viewport width in pixels.
        viewport_h: Viewport height in pixels.
        scale: Zoom around the target's center; < 1 is tighter, > 1 looser.

    Returns:
        ViewBox: {"x", "y", "width", "height"} centered on the target, with
        one side extended so nothing is cropped.

    Raises:
        ValueError: The viewport or the bbox has no area.
    """
    x, y, w, h = (float(v) for v in bbox)
    if viewport_w <= 0 or viewport_h <= 0:
        raise ValueError(f"viewport must have positive size, got {viewport_w}x{viewport_h}")
    if w <= 0 or h <= 0:
        raise ValueError(f"bbox must have positive size, got {w}x{h}")
    cx, cy = x + w / 2, y + h / 2
    sw, sh = w * scale, h * scale
    viewport_ar = viewport_w / viewport_h
    if viewport_ar > sw / sh:
        fw, fh = sh * viewport_ar, sh
    else:
        fw, fh = sw, sw / viewport_ar
    return {"x": cx - fw / 2, "y": cy - fh / 2, "width": fw, "height": fh}


def viewbox_attr(vb: Mapping[str, float]) -> str:
    """Format a viewBox for the svg attribute."""
    return " ".join(format_number(vb[k]) for k in ("x", "y", "width", "height"))


def parse_viewbox(text: str) -> ViewBox:
    """
    Parse a viewBox attribute (space or comma separated).

    Raises:
        ValueError: Not four numbers.
    """
    parts = [p for p in re.split(r"[\s,]+", text.strip()) if p]
    if len(parts) != 4:
        raise ValueError(f"viewBox needs four numbers, got {text!r}")
    x, y, w, h = (float(p) for p in parts)
    return {"x": x, "y": y, "width": w, "height": h}


def _tile_bbox(cx: float, cy: float, radius: float) -> tuple[float, float, float, float]:
    r = radius - 2
    return (cx - r, cy - r * SIN60, 2 * r, 2 * r * SIN60)


def slide_viewboxes(
    n_slides: int,
    viewport_w: float,
    viewport_h: float,
    *,
    radius: float = TILE_RADIUS,
    scale: float = FRAME_SCALE,
) -> list[ViewBox]:
    """Overview, one framed viewBox per slide tile, then the overview again."""
    overview = frame_viewbox(OVERVIEW_BBOX, viewport_w, viewport_h, scale)
    framed = [
        frame_viewbox(_tile_bbox(cx, cy, radius), viewport_w, viewport_h, scale)
        for cx, cy in slide_centers(n_slides, radius)
    ]
    return [overview, *framed, dict(overview)]


def pan(viewbox: Mapping[str, float], dx: float, dy: float) -> ViewBox:
    """Move the view so content follows a drag of (dx, dy) svg units."""
    return {**viewbox, "x": viewbox["x"] - dx, "y": viewbox["y"] - dy}


def zoom(viewbox: Mapping[str, float], factor: float, cx: float | None = None, cy: float | None = None) -> ViewBox:
    """
    Scale the view by `factor`, keeping (cx, cy) fixed on screen.

    factor > 1 zooms out. Without a point the view's center stays fixed.
    """
    x, y, w, h = viewbox["x"], viewbox["y"], viewbox["width"], viewbox["height"]
    nw, nh = w * factor, h * factor
    dw, dh = w - nw, h - nh
    if cx is None or cy is None:
        px, py = dw / 2.0, dh / 2.0
    else:
        px, py = (cx - x) / w * dw, (cy - y) / h * dh
    return {"x": x + px, "y": y + py, "width": nw, "height": nh}


def wheel_zoom_factor(dx: float, dy: float) -> float | None:
    """Zoom factor for a wheel delta (dominant axis wins); None when both are zero."""
    delta = dx if abs(dx) > abs(dy) else dy
    if delta == 0:
        return None
    return ZOOM_STEP if delta > 0 else 1 / ZOOM_STEP


@dataclass
class DeckState:
    """
    Current step of a deck and the transition into it.

    Attributes:
        steps (list[ViewBox]): One viewBox per step.
        step (int): Current step index.
        view (ViewBox): Current (possibly panned or zoomed) viewBox.
        transition (Any): Interpolators from the previous view to `view`, or None.
    """

    steps: list[ViewBox]
    step: int = 0
    view: ViewBox = field(default_factory=dict)
    transition: Any = None

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("a deck needs at least one step")
        self.step = limit_step(self.step, self.steps, lambda s: s)
        if not self.view:
            self.view = dict(self.steps[self.step])

    @classmethod
    def for_slides(
        cls,
        n_slides: int,
        viewport_w: float = 1600,
        viewport_h: float = 900,
        *,
        radius: float = TILE_RADIUS,
    ) -> DeckState:
        return cls(slide_viewboxes(n_slides, viewport_w, viewport_h, radius=radius))

    def alter_step(self, f: Callable[[int], int]) -> int:
        """Move to step f(step) (clamped) and start a transition if the view changes."""
        self.step = limit_step(self.step, self.steps, f)
        target = self.steps[self.step]
        if self.view != target:
            self.transition = new_transition(self.view, target)
            self.view = dict(target)
        logger.debug("deck step %d/%d", self.step, len(self.steps) - 1)
        return self.step

    def next(self) -> int:
        return self.alter_step(lambda s: s + 1)

    def prev(self) -> int:
        return self.alter_step(lambda s: s - 1)

    def first(self) -> int:
        return self.alter_step(lambda s: 0)

    def last(self) -> int:
        return self.alter_step(lambda s: len(self.steps) - 1)

    def go(self, i: int) -> int:
        return self.alter_step(lambda s: i)

    def handle_key(self, key: str) -> bool:
        """Apply a keyboard key; returns True when the key is a navigation key."""
        if key in NEXT_KEYS:
            self.next()
        elif key in PREV_KEYS:
            self.prev()
        elif key == "Home":
            self.first()
        elif key == "End":
            self.last()
        else:
            return False
        return True

    def frame(self, t: float) -> ViewBox:
        """The view at animation parameter `t` of the current transition."""
        if self.transition is None:
            return dict(self.view)
        return compute_animation(self.transition, t)

    def pan(self, dx: float, dy: float) -> ViewBox:
        self.transition = None
        self.view = pan(self.view, dx, dy)
        return self.view

    def zoom(self, factor: float, cx: float | None = None, cy: float | None = None) -> ViewBox:
        self.transition = None
        self.view = zoom(self.view, factor, cx, cy)
        return self.view

    @property
    def hash(self) -> str:
        """URL fragment for the current step (``#step3``)."""
        return f"#step{self.step}"

    def go_hash(self, fragment: str) -> bool:
        """Jump to the step named by a ``#stepN`` fragment; False if it is not one."""
        m = _STEP_HASH.match(fragment or "")
        if m is None:
            return False
        self.go(int(m.group(1)))
        return True
