"""
Statistical transforms: View -> StatResult.

Each stat returns the drawable summary of a view together with the x and y
domains that summary spans. Domains come from the stat output, not the raw
columns, so a histogram's y axis ranges over counts.

Registry
- compute_stat(view) dispatches on view.stat (default identity).
- register_stat(stat) is a decorator adding or replacing an implementation.

Stats
- identity: points grouped by color, optional sizes/shapes/labels.
- bin: Sturges histogram per color group; y domain [0, max_count].
- regress: least-squares segment per color group at the group's x extent.
- smooth: LOESS (local linear, tricube weights) sampled at 80 points per group.
- count: category counts; with color, one series per sorted color value.

Notes
- Rows with a missing (None/NaN) x or y are dropped pairwise before any stat.
- A stat with no complete rows raises StatError.
- bin, regress, and smooth raise StatError on a non-numeric x or y column.
- Groups follow first appearance in the data.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from civitas.core.errors import StatError
from civitas.core.grammar import Stat, stat_from_value

from .views import View, validate_view

__all__ = [
    "PointGroup",
    "Bin",
    "BinGroup",
    "Segment",
    "CountSeries",
    "StatResult",
    "SMOOTH_SAMPLES",
    "LOESS_BANDWIDTH",
    "is_missing",
    "is_number",
    "clean_paired",
    "sturges_bins",
    "loess",
    "register_stat",
    "compute_stat",
]

SMOOTH_SAMPLES = 80
LOESS_BANDWIDTH = 0.3


@dataclass
class PointGroup:
    """Points (or a sampled curve) sharing one color value."""

    xs: list[Any]
    ys: list[Any]
    color: Any = None
    sizes: list[Any] | None = None
    shapes: list[Any] | None = None
    labels: list[Any] | None = None


@dataclass(frozen=True)
class Bin:
    lo: float
    hi: float
    count: int


@dataclass
class BinGroup:
    bins: list[Bin]
    color: Any = None


@dataclass(frozen=True)
class Segment:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Any = None


@dataclass
class CountSeries:
    """Counts per category for one color value (or all rows when uncolored)."""

    counts: list[tuple[Any, int]]
    color: Any = None


@dataclass
class StatResult:
    """
    Output of a statistical transform.

    Attributes:
        x_domain (list): [min, max] for numeric x, distinct values for categorical x.
        y_domain (list): Same convention for y.
        points (list[PointGroup]): identity and smooth output.
        bins (list[BinGroup]): bin output.
        lines (list[Segment]): regress output.
        bars (list[CountSeries]): count output.
        categories (list): count categories in first-appearance order.
        max_count (int): Largest single count (>= 1) for bin/count.
        x_discrete (bool): x_domain lists categories rather than [min, max].
        y_discrete (bool): y_domain lists categories rather than [min, max].
    """

    x_domain: list[Any]
    y_domain: list[Any]
    points: list[PointGroup] = field(default_factory=list)
    bins: list[BinGroup] = field(default_factory=list)
    lines: list[Segment] = field(default_factory=list)
    bars: list[CountSeries] = field(default_factory=list)
    categories: list[Any] = field(default_factory=list)
    max_count: int = 0
    x_discrete: bool = False
    y_discrete: bool = False

    def colors(self) -> list[Any]:
        """Distinct group colors in output order (None excluded)."""
        seen: list[Any] = []
        groups: list[Any] = [*self.points, *self.bins, *self.lines, *self.bars]
        for g in groups:
            if g.color is not None and g.color not in seen:
                seen.append(g.color)
        return seen

    def stack_max(self) -> float:
        """Largest per-category total when groups are stacked (0 when nothing stacks).

        Count output sums counts per category; identity output sums y per x.
        """
        totals: dict[Any, float] = {}
        for series in self.bars:
            for cat, n in series.counts:
                totals[cat] = totals.get(cat, 0) + n
        if not self.bars:
            for g in self.points:
                for x, y in zip(g.xs, g.ys, strict=True):
                    if is_number(y):
                        totals[x] = totals.get(x, 0) + y
        return max(totals.values(), default=0)


# ----------------------------
# Helpers
# ----------------------------


def is_missing(v: Any) -> bool:
    return v is None or (isinstance(v, float) and math.isnan(v))


def is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def clean_paired(xs: Sequence[Any], ys: Sequence[Any], *extra: Sequence[Any] | None) -> list[list[Any] | None]:
    """
    Drop positions where x or y is missing, keeping extra columns aligned.

    Returns:
        list: [xs, ys, *extra] filtered to complete rows; None extras stay None.
    """
    keep = [i for i, (x, y) in enumerate(zip(xs, ys, strict=True)) if not is_missing(x) and not is_missing(y)]
    out: list[list[Any] | None] = [[xs[i] for i in keep], [ys[i] for i in keep]]
    for ev in extra:
        out.append(None if ev is None else [ev[i] for i in keep])
    return out


def _column(view: View, col: str | None) -> list[Any] | None:
    return None if col is None else view.data.get_column(col).to_list()


def _domain(vals: Sequence[Any]) -> list[Any]:
    if vals and not is_number(vals[0]):
        return list(dict.fromkeys(vals))
    return [min(vals), max(vals)]


def _group_indices(keys: Sequence[Any]) -> dict[Any, list[int]]:
    groups: dict[Any, list[int]] = {}
    for i, k in enumerate(keys):
        groups.setdefault(k, []).append(i)
    return groups


def _sort_key(v: Any) -> tuple[int, Any]:
    return (0, v) if is_number(v) else (1, str(v))


def _require_rows(n: int, view: View) -> None:
    if n == 0:
        raise StatError(f"{view.effective_stat.value} stat on ({view.x}, {view.y}) has no complete rows")


def _require_numeric(view: View, *cols: str | None) -> None:
    for col in cols:
        if col is not None and not view.data.schema[col].is_numeric():
            raise StatError(
                f"{view.effective_stat.value} stat needs a numeric column, got {col!r} ({view.data.schema[col]})"
            )


def sturges_bins(values: Sequence[float]) -> list[Bin]:
    """
    Equal-width histogram with ceil(log2(n) + 1) bins over [min, max].

    The last bin is closed on the right; a zero-span sample gets one unit-wide bin.
    """
    arr = np.asarray(values, dtype=float)
    k = max(1, math.ceil(math.log2(arr.size) + 1))
    lo, hi = float(arr.min()), float(arr.max())
    if lo == hi:
        return [Bin(lo - 0.5, hi + 0.5, int(arr.size))]
    counts, edges = np.histogram(arr, bins=k, range=(lo, hi))
    return [Bin(float(edges[i]), float(edges[i + 1]), int(counts[i])) for i in range(k)]


def _dedupe_sorted(xs: Sequence[float], ys: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    sums: dict[float, list[float]] = {}
    for x, y in zip(xs, ys, strict=True):
        sums.setdefault(float(x), []).append(float(y))
    sx = np.array(sorted(sums))
    sy = np.array([sum(sums[x]) / len(sums[x]) for x in sx])
    return sx, sy


def loess(xs: Sequence[float], ys: Sequence[float], at: Sequence[float], bandwidth: float = LOESS_BANDWIDTH) -> np.ndarray:
    """
    Local linear regression with tricube weights.

    Duplicate x values are averaged first. Each estimate uses the nearest
    ceil(bandwidth * n) points (at least 2).

    Returns:
        np.ndarray: Fitted values at `at`.
    """
    sx, sy = _dedupe_sorted(xs, ys)
    n = sx.size
    if n == 1:
        return np.full(len(at), sy[0])
    k = min(n, max(2, math.ceil(bandwidth * n)))
    out = np.empty(len(at))
    for j, x0 in enumerate(at):
        d = np.abs(sx - x0)
        idx = np.argsort(d, kind="stable")[:k]
        h = d[idx].max()
        if h <= 0:
            out[j] = sy[idx].mean()
            continue
        w = (1.0 - np.clip(d[idx] / (h * 1.0000001), 0.0, 1.0) ** 3) ** 3
        wx, wy = sx[idx], sy[idx]
        sw = w.sum()
        mx = (w * wx).sum() / sw
        my = (w * wy).sum() / sw
        var = (w * (wx - mx) ** 2).sum()
        if var <= 1e-12:
            out[j] = my
        else:
            slope = (w * (wx - mx) * (wy - my)).sum() / var
            out[j] = my + slope * (x0 - mx)
    return out


# ----------------------------
# Registry
# ----------------------------

_STATS: dict[Stat, Callable[[View], StatResult]] = {}


def register_stat(stat: Stat | str) -> Callable[[Callable[[View], StatResult]], Callable[[View], StatResult]]:
    """Decorator registering a stat implementation under `stat`."""
    key = stat_from_value(stat)

    def deco(fn: Callable[[View], StatResult]) -> Callable[[View], StatResult]:
        _STATS[key] = fn
        return fn

    return deco


def compute_stat(view: View) -> StatResult:
    """
    Run the view's stat (identity when unset).

    Raises:
        ViewSpecError: If a bound column is missing from the data.
        StatError: If no complete rows remain.
    """
    validate_view(view)
    return _STATS[view.effective_stat](view)


# ----------------------------
# Implementations
# ----------------------------


@register_stat(Stat.IDENTITY)
def _identity(view: View) -> StatResult:
    xs0, ys, sizes, shapes, labels, colors = clean_paired(
        _column(view, view.x),
        _column(view, view.y),
        _column(view, view.size),
        _column(view, view.shape),
        _column(view, view.text_col),
        _column(view, view.color),
    )
    _require_rows(len(xs0), view)
    xs = [str(x) for x in xs0] if view.x_type == "categorical" else xs0

    def group(idxs: list[int], color: Any) -> PointGroup:
        def pick(vals: list[Any] | None) -> list[Any] | None:
            return None if vals is None else [vals[i] for i in idxs]

        return PointGroup(
            xs=pick(xs),
            ys=pick(ys),
            color=color,
            sizes=pick(sizes),
            shapes=pick(shapes),
            labels=pick(labels),
        )

    if colors is None:
        groups = [group(list(range(len(xs))), None)]
    else:
        groups = [group(idxs, c) for c, idxs in _group_indices(colors).items()]
    return StatResult(
        x_domain=_domain(xs),
        y_domain=_domain(ys),
        points=groups,
        x_discrete=not is_number(xs[0]),
        y_discrete=not is_number(ys[0]),
    )


@register_stat(Stat.BIN)
def _bin(view: View) -> StatResult:
    _require_numeric(view, view.x)
    raw = _column(view, view.x)
    colors = _column(view, view.color)
    keep = [i for i, v in enumerate(raw) if not is_missing(v)]
    xs = [float(raw[i]) for i in keep]
    _require_rows(len(xs), view)
    if colors is None:
        groups = [BinGroup(bins=sturges_bins(xs))]
    else:
        cs = [colors[i] for i in keep]
        groups = [
            BinGroup(bins=sturges_bins([xs[i] for i in idxs]), color=c)
            for c, idxs in _group_indices(cs).items()
        ]
    max_count = max([1, *(b.count for g in groups for b in g.bins)])
    return StatResult(
        x_domain=[min(xs), max(xs)],
        y_domain=[0, max_count],
        bins=groups,
        max_count=max_count,
    )


def _fit_segment(gxs: Sequence[float], gys: Sequence[float], color: Any) -> Segment:
    x = np.asarray(gxs, dtype=float)
    y = np.asarray(gys, dtype=float)
    xmin, xmax = float(x.min()), float(x.max())
    if xmin == xmax:
        mean = float(y.mean())
        return Segment(xmin, mean, xmax, mean, color)
    slope, intercept = np.polyfit(x, y, 1)
    return Segment(xmin, float(intercept + slope * xmin), xmax, float(intercept + slope * xmax), color)


@register_stat(Stat.REGRESS)
def _regress(view: View) -> StatResult:
    _require_numeric(view, view.x, view.y)
    xs, ys, colors = clean_paired(_column(view, view.x), _column(view, view.y), _column(view, view.color))
    _require_rows(len(xs), view)
    if colors is None:
        lines = [_fit_segment(xs, ys, None)]
    else:
        lines = [
            _fit_segment([xs[i] for i in idxs], [ys[i] for i in idxs], c)
            for c, idxs in _group_indices(colors).items()
        ]
    return StatResult(x_domain=[min(xs), max(xs)], y_domain=[min(ys), max(ys)], lines=lines)


def _fit_smooth(gxs: Sequence[float], gys: Sequence[float], color: Any) -> PointGroup:
    xmin, xmax = float(min(gxs)), float(max(gxs))
    sample = np.linspace(xmin, xmax, SMOOTH_SAMPLES)
    fitted = loess(gxs, gys, sample)
    return PointGroup(xs=sample.tolist(), ys=fitted.tolist(), color=color)


@register_stat(Stat.SMOOTH)
def _smooth(view: View) -> StatResult:
    _require_numeric(view, view.x, view.y)
    xs, ys, colors = clean_paired(_column(view, view.x), _column(view, view.y), _column(view, view.color))
    _require_rows(len(xs), view)
    if colors is None:
        groups = [_fit_smooth(xs, ys, None)]
    else:
        groups = [
            _fit_smooth([xs[i] for i in idxs], [ys[i] for i in idxs], c)
            for c, idxs in _group_indices(colors).items()
        ]
    all_x = [x for g in groups for x in g.xs]
    all_y = [y for g in groups for y in g.ys]
    return StatResult(x_domain=[min(all_x), max(all_x)], y_domain=[min(all_y), max(all_y)], points=groups)


@register_stat(Stat.COUNT)
def _count(view: View) -> StatResult:
    raw = _column(view, view.x)
    colors = _column(view, view.color)
    keep = [i for i, v in enumerate(raw) if not is_missing(v) and (colors is None or not is_missing(colors[i]))]
    xs = [raw[i] for i in keep]
    _require_rows(len(xs), view)
    if view.x_type == "categorical":
        xs = [str(x) for x in xs]
    categories = list(dict.fromkeys(xs))
    if colors is None:
        tally: dict[Any, int] = {}
        for x in xs:
            tally[x] = tally.get(x, 0) + 1
        bars = [CountSeries(counts=[(cat, tally[cat]) for cat in categories])]
    else:
        cs = [colors[i] for i in keep]
        pair_tally: dict[tuple[Any, Any], int] = {}
        for x, c in zip(xs, cs, strict=True):
            pair_tally[(x, c)] = pair_tally.get((x, c), 0) + 1
        color_cats = sorted(set(cs), key=_sort_key)
        bars = [
            CountSeries(counts=[(cat, pair_tally.get((cat, cc), 0)) for cat in categories], color=cc)
            for cc in color_cats
        ]
    max_count = max([1, *(n for s in bars for _, n in s.counts)])
    return StatResult(
        x_domain=categories,
        y_domain=[0, max_count],
        bars=bars,
        categories=categories,
        max_count=max_count,
        x_discrete=True,
    )
