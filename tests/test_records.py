"""Unit tests for record normalisation and configuration checks."""

from __future__ import annotations

import logging
from datetime import datetime

import pandas as pd
import pytest

from config import AxisPolicy, ChartConfig, Margin, default_config
from records import Record, normalize_records, records_from_frame, sample_records

pytestmark = pytest.mark.unit


def test_normalize_defaults_missing_none_and_nan(categories) -> None:
    rows = [{"date": "2024-01-01", "GPT-4": 3, "Gemini": None, "Claude": float("nan"), "PaLM-2": "oops"}]
    (record,) = normalize_records(rows, categories)
    assert record.date == datetime(2024, 1, 1)
    assert record.values == {"GPT-4": 3.0, "Gemini": 0.0, "PaLM-2": 0.0, "Claude": 0.0, "LLaMA-3.1": 0.0}


def test_normalize_keeps_input_order_and_records(categories) -> None:
    given = [Record(datetime(2024, 2, 1), {"GPT-4": 1}), Record(datetime(2024, 1, 1), {"Claude": 2})]
    records = normalize_records(given, categories)
    assert [r.date for r in records] == [datetime(2024, 2, 1), datetime(2024, 1, 1)]
    assert records[1].value("Claude") == 2.0
    assert records[1].value("GPT-4") == 0.0


def test_normalize_skips_undated_rows(categories, caplog) -> None:
    rows = [{"Date": None, "GPT-4": 1}, {"Date": "not a date"}, {"Date": "2024-05-01"}]
    with caplog.at_level(logging.WARNING, logger="records"):
        records = normalize_records(rows, categories)
    assert len(records) == 1
    assert len(caplog.records) == 2


def test_normalize_absent_input() -> None:
    assert normalize_records(None, ["A"]) == []


def test_records_from_frame(categories) -> None:
    df = pd.DataFrame({"Date": ["2024-01-01", "2024-02-01"], "GPT-4": [10, 20], "Claude": [1, None]})
    records = records_from_frame(df, categories)
    assert [r.value("GPT-4") for r in records] == [10.0, 20.0]
    assert [r.value("Claude") for r in records] == [1.0, 0.0]
    assert records[0].value("Gemini") == 0.0


def test_records_from_frame_requires_date_column(categories) -> None:
    with pytest.raises(ValueError):
        records_from_frame(pd.DataFrame({"GPT-4": [1]}), categories)


def test_sample_records_are_deterministic(categories) -> None:
    first = sample_records(categories)
    assert first == sample_records(categories)
    assert len(first) == 12
    assert all(v >= 0 for r in first for v in r.values.values())


def test_default_config_is_valid() -> None:
    config = default_config()
    assert config.inner_width == 590
    assert config.inner_height == 440


@pytest.mark.parametrize(
    "kwargs",
    [
        {"categories": ["A", "A"], "colors": {"A": "#000"}},
        {"categories": ["A", "B"], "colors": {"A": "#000"}},
        {"categories": ["A"], "colors": {"A": "#000"}, "axis_policies": {"B": AxisPolicy()}},
        {"categories": ["A"], "colors": {"A": "#000"}, "margin": Margin(300, 300, 300, 300)},
    ],
)
def test_invalid_config_is_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        ChartConfig(**kwargs).validate()


def test_axis_policy_requires_positive_step() -> None:
    with pytest.raises(ValueError):
        AxisPolicy(step=0)
