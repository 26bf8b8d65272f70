"""Per-date records and their normalisation.

A record is one date plus a value for every configured category. Raw input
may be ``Record`` objects or plain mappings (a CSV row, a JSON object);
missing category values become 0 and rows without a usable date are
skipped.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

DATE_KEYS = ("date", "Date")


@dataclass(frozen=True)
class Record:
    """One time step: a date and the value of each category on that date."""

    date: datetime
    values: dict[str, float] = field(default_factory=dict)

    def value(self, category: str) -> float:
        return self.values.get(category, 0.0)


def _coerce_value(raw) -> float:
    if raw is None:
        return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value):
        return 0.0
    return value


def _coerce_date(raw) -> datetime | None:
    if raw is None:
        return None
    try:
        ts = pd.Timestamp(raw)
    except (TypeError, ValueError):
        return None
    if pd.isna(ts):
        return None
    return ts.to_pydatetime()


def normalize_records(
    raw_records: Iterable[Record | Mapping] | None,
    categories: Sequence[str],
) -> list[Record]:
    """Default every missing category value to 0 and drop undated rows.

    Input order is preserved; the caller is expected to supply records in
    chronological order.
    """
    if raw_records is None:
        return []

    records: list[Record] = []
    for i, raw in enumerate(raw_records):
        if isinstance(raw, Record):
            date, source = raw.date, raw.values
        else:
            date = next((raw[k] for k in DATE_KEYS if k in raw), None)
            source = raw
        date = _coerce_date(date)
        if date is None:
            logger.warning("Skipping record %d: missing or invalid date.", i)
            continue
        records.append(Record(date, {c: _coerce_value(source.get(c)) for c in categories}))
    return records


def records_from_frame(
    df: pd.DataFrame,
    categories: Sequence[str],
    date_column: str = "Date",
) -> list[Record]:
    """Build records from a DataFrame with one row per date."""
    if date_column not in df.columns:
        raise ValueError(f"Missing date column {date_column!r}.")
    rows = df.rename(columns={date_column: "date"}).to_dict(orient="records")
    return normalize_records(rows, categories)


def full_resolution_category(records: Sequence[Record], categories: Sequence[str]) -> str | None:
    """Return the category with the highest median value, or None if empty."""
    if not records or not categories:
        return None
    medians = [np.median([r.value(c) for r in records]) for c in categories]
    return categories[int(np.argmax(medians))]


def sample_records(categories: Sequence[str], n_months: int = 12, seed: int = 7) -> list[Record]:
    """Deterministic month-start demo data, one gently trending series per category."""
    rng = np.random.default_rng(seed)
    dates = pd.date_range("2024-01-01", periods=n_months, freq="MS")
    records = []
    for i, date in enumerate(dates):
        values = {}
        for k, category in enumerate(categories):
            base = 20 + 15 * k + (4 - k) * 3 * i
            values[category] = float(max(0, round(base + rng.normal(0, 6))))
        records.append(Record(date.to_pydatetime(), values))
    return records
