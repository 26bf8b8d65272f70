"""Unit tests for wiggle stacking."""

from __future__ import annotations

import math
from datetime import datetime

import numpy as np
import pytest

from records import Record
from stack_layout import Band, stack_wiggle, wiggle_baseline

pytestmark = pytest.mark.unit


def _random_records(categories, n=8, seed=3):
    rng = np.random.default_rng(seed)
    return [
        Record(datetime(2023, m, 1), {c: float(rng.integers(0, 60)) for c in categories})
        for m in range(1, n + 1)
    ]


def test_bands_are_contiguous_in_category_order(categories) -> None:
    layout = stack_wiggle(_random_records(categories), categories)
    layers = [layout[c] for c in categories]
    for i in range(8):
        for below, above in zip(layers, layers[1:]):
            assert below.bands[i].high == above.bands[i].low


def test_stack_height_equals_record_total(categories) -> None:
    records = _random_records(categories)
    layout = stack_wiggle(records, categories)
    first, last = layout[categories[0]], layout[categories[-1]]
    for i, record in enumerate(records):
        total = sum(record.values.values())
        assert last.bands[i].high - first.bands[i].low == pytest.approx(total)
        for c in categories:
            assert layout[c].bands[i].height == pytest.approx(record.value(c))


def test_rising_category_total_heights(rising_records, categories) -> None:
    """10 + 4*5 = 30 at the first record and 50 + 4*5 = 70 at the last."""

    layout = stack_wiggle(rising_records, categories)
    first, last = layout[categories[0]], layout[categories[-1]]
    assert last.bands[0].high - first.bands[0].low == pytest.approx(30)
    assert last.bands[4].high - first.bands[4].low == pytest.approx(70)


def test_first_record_sits_on_zero_baseline(rising_records, categories) -> None:
    layout = stack_wiggle(rising_records, categories)
    assert layout[categories[0]].bands[0].low == 0


def test_wiggle_baseline_two_layers() -> None:
    """A grows 1 -> 3 under a constant B: the baseline drops by 5/4."""

    values = np.array([[1.0, 3.0], [1.0, 1.0]])
    assert wiggle_baseline(values).tolist() == [0.0, -1.25]

    records = [Record(datetime(2024, 1, 1), {"A": 1, "B": 1}), Record(datetime(2024, 2, 1), {"A": 3, "B": 1})]
    layout = stack_wiggle(records, ["A", "B"])
    assert layout["A"].bands[1] == Band(-1.25, 1.75)
    assert layout["B"].bands[1] == Band(1.75, 2.75)


def test_constant_values_keep_a_flat_baseline(flat_records, categories) -> None:
    layout = stack_wiggle(flat_records, categories)
    for k, c in enumerate(categories):
        assert set(layout[c].bands) == {Band(10.0 * k, 10.0 * (k + 1))}


def test_all_zero_record_collapses_without_nan(categories) -> None:
    records = _random_records(categories, n=5)
    records[2] = Record(records[2].date, {c: 0.0 for c in categories})
    layout = stack_wiggle(records, categories)

    lows = {layout[c].bands[2].low for c in categories}
    assert len(lows) == 1
    for c in categories:
        band = layout[c].bands[2]
        assert band.height == 0
        assert all(math.isfinite(v) for layer in layout for b in layer.bands for v in b)


def test_all_zero_series_stays_at_zero(categories) -> None:
    records = [Record(datetime(2024, m, 1), {}) for m in range(1, 4)]
    layout = stack_wiggle(records, categories)
    assert layout.extent == (0.0, 0.0)
    assert all(b == Band(0.0, 0.0) for layer in layout for b in layer.bands)


def test_extent_is_min_low_max_high(categories) -> None:
    layout = stack_wiggle(_random_records(categories), categories)
    lows = [b.low for layer in layout for b in layer.bands]
    highs = [b.high for layer in layout for b in layer.bands]
    assert layout.extent == (min(lows), max(highs))


def test_empty_records_give_empty_layers(categories) -> None:
    layout = stack_wiggle([], categories)
    assert [layer.category for layer in layout] == categories
    assert all(len(layer) == 0 for layer in layout)
    assert layout.extent == (0.0, 0.0)


def test_layer_series_keeps_input_order(rising_records, categories) -> None:
    layer = stack_wiggle(rising_records, categories)["GPT-4"]
    assert layer.series() == [(r.date, r.value("GPT-4")) for r in rising_records]
    assert layer.index == 0
