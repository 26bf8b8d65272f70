"""One-dimensional scales mapping data values to pixel positions.

The tick and nice arithmetic follows the usual 1-2-5 rule: a step is a
power of ten times 1, 2, 5 or 10, chosen so that roughly ``count`` ticks
cover the domain.
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Sequence
from dataclasses import dataclass

import pandas as pd

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def _tick_spec(start: float, stop: float, count: float) -> tuple[int, int, float]:
    step = (stop - start) / max(0, count)
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power < 0:
        inc = 10 ** -power / factor
        i1 = round(start * inc)
        i2 = round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = 10 ** power * factor
        i1 = round(start / inc)
        i2 = round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1
    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def tick_increment(start: float, stop: float, count: float) -> float:
    """Signed tick step: positive for steps >= 1, negative reciprocal below 1.

    Returns 0 when no step exists (degenerate or non-finite domain).
    """
    if not (count > 0) or start == stop or not (math.isfinite(start) and math.isfinite(stop)):
        return 0
    return _tick_spec(start, stop, count)[2]


def ticks(start: float, stop: float, count: float = 10) -> list[float]:
    """Round tick values covering [start, stop]."""
    if not (count > 0):
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    i1, i2, inc = _tick_spec(start, stop, count)
    if i2 < i1:
        return []
    if inc < 0:
        values = [(i1 + i) / -inc for i in range(i2 - i1 + 1)]
    else:
        values = [(i1 + i) * inc for i in range(i2 - i1 + 1)]
    return values[::-1] if reverse else values


def nice_domain(start: float, stop: float, count: float = 10) -> tuple[float, float]:
    """Extend [start, stop] outward to round tick-aligned bounds.

    A degenerate domain (start == stop) is returned unchanged.
    """
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    prestep = None
    for _ in range(10):
        step = tick_increment(start, stop, count)
        if step == prestep:
            break
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        elif step < 0:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        else:
            break
        prestep = step
    return (stop, start) if reverse else (start, stop)


def format_int(value: float) -> str:
    return str(int(math.floor(value + 0.5)))


def format_month(value) -> str:
    return pd.Timestamp(value).strftime("%b")


@dataclass(frozen=True)
class LinearScale:
    """Continuous linear map from ``domain`` to ``range``.

    A degenerate domain maps every value to the middle of the range.
    """

    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        t = 0.5 if d1 == d0 else (value - d0) / (d1 - d0)
        return r0 + t * (r1 - r0)

    def nice(self, count: int = 10) -> "LinearScale":
        return LinearScale(nice_domain(*self.domain, count), self.range)

    def ticks(self, count: int = 10) -> list[float]:
        return ticks(self.domain[0], self.domain[1], count)


def to_nanos(value) -> int:
    return pd.Timestamp(value).value


@dataclass(frozen=True)
class TimeScale:
    """Linear scale over timestamps (epoch nanoseconds under the hood)."""

    domain: tuple
    range: tuple[float, float]

    @classmethod
    def from_dates(cls, dates: Sequence, range: tuple[float, float]) -> "TimeScale":
        nanos = [to_nanos(d) for d in dates]
        if not nanos:
            raise ValueError("Cannot build a time scale from no dates.")
        return cls((pd.Timestamp(min(nanos)), pd.Timestamp(max(nanos))), range)

    def __call__(self, value) -> float:
        linear = LinearScale((to_nanos(self.domain[0]), to_nanos(self.domain[1])), self.range)
        return linear(to_nanos(value))


@dataclass(frozen=True)
class BandScale:
    """Ordinal scale dividing ``range`` into equal bands, one per key."""

    keys: tuple[Hashable, ...]
    range: tuple[float, float]
    padding: float = 0.0
    align: float = 0.5

    @property
    def step(self) -> float:
        r0, r1 = self.range
        n = len(self.keys)
        return (r1 - r0) / max(1, n - self.padding + 2 * self.padding)

    @property
    def bandwidth(self) -> float:
        return self.step * (1 - self.padding)

    def __call__(self, key: Hashable) -> float:
        try:
            index = self.keys.index(key)
        except ValueError:
            raise KeyError(key) from None
        r0, r1 = self.range
        n = len(self.keys)
        start = r0 + (r1 - r0 - self.step * (n - self.padding)) * self.align
        return start + self.step * index
