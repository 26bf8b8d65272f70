"""Streamgraph stacking: per-category bands with a wiggle-minimising baseline.

Categories are stacked in their configured order. For every record the
baseline is shifted so that the weighted slope of the layer midlines is as
close to zero as possible, which keeps the stream visually steady.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple

import numpy as np

from records import Record


class Band(NamedTuple):
    low: float
    high: float

    @property
    def height(self) -> float:
        return self.high - self.low


@dataclass(frozen=True)
class Layer:
    """One category's bands across all records, aligned with the input order."""

    category: str
    index: int
    dates: tuple[datetime, ...]
    values: tuple[float, ...]
    bands: tuple[Band, ...]

    def __len__(self) -> int:
        return len(self.bands)

    def series(self) -> list[tuple[datetime, float]]:
        return list(zip(self.dates, self.values))


@dataclass(frozen=True)
class StackLayout:
    layers: dict[str, Layer]

    def __iter__(self):
        return iter(self.layers.values())

    def __getitem__(self, category: str) -> Layer:
        return self.layers[category]

    @property
    def extent(self) -> tuple[float, float]:
        """(min low, max high) over every band, or (0, 0) when empty."""
        lows = [b.low for layer in self for b in layer.bands]
        highs = [b.high for layer in self for b in layer.bands]
        if not lows:
            return 0.0, 0.0
        return min(lows), max(highs)


def wiggle_baseline(values: np.ndarray) -> np.ndarray:
    """Baseline offset per record for a (n_categories, n_records) value matrix.

    The first record sits at 0. Each later baseline moves by minus the
    value-weighted mean slope of the layer midlines between the two records;
    records whose values sum to 0 keep the previous baseline.
    """
    n, m = values.shape
    baseline = np.zeros(m)
    if n == 0 or m == 0:
        return baseline
    y = 0.0
    for j in range(1, m):
        delta = values[:, j] - values[:, j - 1]
        slopes = np.cumsum(delta) - delta / 2
        total = values[:, j].sum()
        if total:
            y -= float((slopes * values[:, j]).sum() / total)
        baseline[j] = y
    return baseline


def stack_wiggle(records: Sequence[Record], categories: Sequence[str]) -> StackLayout:
    """Stack records into one Layer per category."""
    values = np.array(
        [[r.value(c) for r in records] for c in categories], dtype=float
    ).reshape(len(categories), len(records))
    baseline = wiggle_baseline(values)
    highs = baseline + np.cumsum(values, axis=0)
    lows = np.vstack([baseline[np.newaxis, :], highs[:-1]])

    dates = tuple(r.date for r in records)
    layers = {}
    for k, category in enumerate(categories):
        bands = tuple(Band(float(lo), float(hi)) for lo, hi in zip(lows[k], highs[k]))
        layers[category] = Layer(category, k, dates, tuple(float(v) for v in values[k]), bands)
    return StackLayout(layers)
