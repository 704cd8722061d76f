"""
Scales: map a data domain to a pixel range, with ticks and tick labels.

- LinearScale: affine map; "nice" 1/2/5 x 10^k ticks (about five).
- LogScale: base-10 log map; ticks at powers of ten (plus 2x/5x when sparse).
- BandScale: equal bands for categorical domains with 10% inner padding.

make_scale() picks the scale from the domain and the view's scale spec, and
pad_domain() widens numeric domains by 5% (multiplicatively for log scales).

Examples:
    >>> from civitas.plot.scales import LinearScale
    >>> s = LinearScale((0, 10), (0, 100))
    >>> s(2.5)
    25.0
    >>> s.ticks()
    [0.0, 2.0, 4.0, 6.0, 8.0, 10.0]
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

from civitas.core.errors import ViewSpecError
from civitas.core.grammar import ScaleType, scale_type_from_value

__all__ = [
    "LinearScale",
    "LogScale",
    "BandScale",
    "Scale",
    "nice_step",
    "make_scale",
    "pad_domain",
    "is_categorical_domain",
]

BAND_PADDING = 0.1
DOMAIN_PADDING = 0.05


def nice_step(span: float, count: int = 5) -> float:
    """Round span/count to 1, 2, or 5 times a power of ten."""
    raw = span / max(1, count)
    if raw <= 0 or not math.isfinite(raw):
        return 0.0
    mag = 10 ** math.floor(math.log10(raw))
    norm = raw / mag
    if norm < 1.5:
        step = 1.0
    elif norm < 3.0:
        step = 2.0
    elif norm < 7.0:
        step = 5.0
    else:
        step = 10.0
    return step * mag


def _decimals(step: float) -> int:
    return max(0, -math.floor(math.log10(step))) if step > 0 else 0


class LinearScale:
    """Affine map from a [lo, hi] domain to a pixel range."""

    kind = ScaleType.LINEAR

    def __init__(self, domain: Sequence[float], range_: Sequence[float]) -> None:
        self.domain = (float(domain[0]), float(domain[-1]))
        self.range = (float(range_[0]), float(range_[-1]))

    def __call__(self, v: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2.0
        return r0 + (float(v) - d0) / (d1 - d0) * (r1 - r0)

    def ticks(self, count: int = 5) -> list[float]:
        lo, hi = sorted(self.domain)
        if not (math.isfinite(lo) and math.isfinite(hi)):
            return []
        step = nice_step(hi - lo, count)
        if step == 0:
            return [lo]
        dec = _decimals(step)
        start = math.ceil(lo / step - 1e-9)
        stop = math.floor(hi / step + 1e-9)
        return [round(i * step, dec) for i in range(start, stop + 1)]

    def format(self, ticks: Sequence[float]) -> list[str]:
        if len(ticks) < 2:
            return [f"{t:g}" for t in ticks]
        dec = _decimals(abs(ticks[1] - ticks[0]))
        return [f"{t:.{dec}f}" for t in ticks]


class LogScale(LinearScale):
    """Base-10 logarithmic map; the domain must be strictly positive."""

    kind = ScaleType.LOG

    def __init__(self, domain: Sequence[float], range_: Sequence[float]) -> None:
        super().__init__(domain, range_)
        if min(self.domain) <= 0:
            raise ViewSpecError(f"log scale needs a positive domain, got {list(self.domain)}")

    def __call__(self, v: float) -> float:
        d0, d1 = (math.log10(d) for d in self.domain)
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2.0
        v = float(v)
        lv = math.log10(v) if v > 0 else d0
        return r0 + (lv - d0) / (d1 - d0) * (r1 - r0)

    def ticks(self, count: int = 5) -> list[float]:
        lo, hi = sorted(self.domain)
        e0, e1 = math.ceil(math.log10(lo) - 1e-9), math.floor(math.log10(hi) + 1e-9)
        ticks = [10.0**e for e in range(e0, e1 + 1)]
        if len(ticks) < 3:
            extra = [m * 10.0**e for e in range(e0 - 1, e1 + 1) for m in (2.0, 5.0)]
            ticks = sorted({*ticks, *(t for t in extra if lo <= t <= hi)})
        return ticks

    def format(self, ticks: Sequence[float]) -> list[str]:
        return [f"{t:g}" for t in ticks]


class BandScale:
    """
    Equal-width bands for a categorical domain.

    Attributes:
        domain (list): Categories in display order.
        range (tuple[float, float]): Pixel extent (may be decreasing).
        bandwidth (float): Width of one band excluding padding (always >= 0).
    """

    kind = None

    def __init__(self, domain: Sequence[Any], range_: Sequence[float], padding: float = BAND_PADDING) -> None:
        self.domain = list(domain)
        self.range = (float(range_[0]), float(range_[-1]))
        self.padding = padding
        self._index = {c: i for i, c in enumerate(self.domain)}
        self._step = (self.range[1] - self.range[0]) / max(1, len(self.domain))

    @property
    def bandwidth(self) -> float:
        return abs(self._step) * (1.0 - self.padding)

    def _position(self, cat: Any) -> int | None:
        if cat in self._index:
            return self._index[cat]
        return self._index.get(str(cat))

    def band(self, cat: Any) -> tuple[float, float]:
        """Return (start, end) pixels of the category's band (padding excluded)."""
        i = self._position(cat)
        if i is None:
            mid = (self.range[0] + self.range[1]) / 2.0
            return (mid, mid)
        inset = self._step * self.padding / 2.0
        start = self.range[0] + i * self._step
        return (start + inset, start + self._step - inset)

    def __call__(self, cat: Any) -> float:
        """Center pixel of the category's band (range midpoint when unknown)."""
        start, end = self.band(cat)
        return (start + end) / 2.0

    def ticks(self, count: int = 5) -> list[Any]:
        return list(self.domain)

    def format(self, ticks: Sequence[Any]) -> list[str]:
        return [str(t) for t in ticks]


Scale = LinearScale | LogScale | BandScale


def is_categorical_domain(domain: Sequence[Any]) -> bool:
    """True if the domain's first value is not a number."""
    if not domain:
        return False
    first = domain[0]
    return not (isinstance(first, (int, float)) and not isinstance(first, bool))


def _scale_type(spec: Mapping[str, Any] | None) -> ScaleType:
    return scale_type_from_value((spec or {}).get("type", ScaleType.LINEAR))


def make_scale(
    domain: Sequence[Any],
    pixel_range: Sequence[float],
    spec: Mapping[str, Any] | None = None,
    *,
    categorical: bool | None = None,
) -> Scale:
    """
    Build a scale for `domain` over `pixel_range`.

    Args:
        domain: [lo, hi] numbers, or category values.
        pixel_range: (start, end) pixels; y ranges run bottom to top.
        spec: Scale spec such as {"type": "log"}; linear when omitted.
        categorical: Force (or forbid) a band scale; inferred from the domain when None.
    """
    if categorical is None:
        categorical = is_categorical_domain(domain)
    if categorical:
        return BandScale(domain, pixel_range)
    if _scale_type(spec) is ScaleType.LOG:
        return LogScale(domain, pixel_range)
    return LinearScale(domain, pixel_range)


def pad_domain(domain: Sequence[float], spec: Mapping[str, Any] | None = None) -> list[float]:
    """Widen [lo, hi] by 5% of its span on both sides (in log space for log scales)."""
    lo, hi = float(domain[0]), float(domain[-1])
    if _scale_type(spec) is ScaleType.LOG:
        if lo <= 0 or hi <= 0:
            raise ViewSpecError(f"log scale needs a positive domain, got {[lo, hi]}")
        log_lo, log_hi = math.log(lo), math.log(hi)
        pad = DOMAIN_PADDING * max(1e-6, log_hi - log_lo)
        return [math.exp(log_lo - pad), math.exp(log_hi + pad)]
    pad = DOMAIN_PADDING * max(1e-6, hi - lo)
    return [lo - pad, hi + pad]
