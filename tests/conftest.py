"""Shared fixtures: configured categories and small record sets."""

from __future__ import annotations

from datetime import datetime

import pytest

from config import DEFAULT_CATEGORIES, default_config
from main_chart import MainChartRenderer
from records import Record

MONTHS = [datetime(2024, m, 1) for m in range(1, 6)]


@pytest.fixture
def categories() -> list[str]:
    return list(DEFAULT_CATEGORIES)


@pytest.fixture
def config():
    return default_config()


@pytest.fixture
def rising_records(categories) -> list[Record]:
    """GPT-4 rises 10..50 while every other category stays at 5."""

    records = []
    for i, date in enumerate(MONTHS):
        values = {c: 5.0 for c in categories}
        values["GPT-4"] = 10.0 * (i + 1)
        records.append(Record(date, values))
    return records


@pytest.fixture
def flat_records(categories) -> list[Record]:
    """Every category at 10 on every date, so each band is a flat strip."""

    return [Record(date, {c: 10.0 for c in categories}) for date in MONTHS]


@pytest.fixture
def renderer(config) -> MainChartRenderer:
    return MainChartRenderer(config)
