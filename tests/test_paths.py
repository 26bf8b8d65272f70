"""Unit tests for B-spline outlines."""

from __future__ import annotations

from datetime import datetime

import pytest

from paths import PathGeometry, area_path, curve_basis
from scales import LinearScale, TimeScale
from stack_layout import Band, Layer, stack_wiggle

pytestmark = pytest.mark.unit


def _layer(bands, start_month=1):
    dates = tuple(datetime(2024, start_month + i, 1) for i in range(len(bands)))
    values = tuple(b[1] - b[0] for b in bands)
    return Layer("A", 0, dates, values, tuple(Band(*b) for b in bands))


def _scales(layer):
    x = TimeScale.from_dates(layer.dates, (0, 100)) if layer.dates else None
    return x, LinearScale((0, 10), (100, 0))


def _ops(geometry: PathGeometry) -> list[str]:
    return [cmd[0] for cmd in geometry.commands]


def test_empty_layer_gives_empty_path() -> None:
    layer = _layer([])
    geometry = area_path(layer, lambda d: 0.0, LinearScale((0, 1), (1, 0)))
    assert not geometry
    assert geometry.to_svg() == ""
    assert geometry.contains(0, 0) is False


def test_single_record_layer_is_a_closed_vertical_segment() -> None:
    layer = _layer([(2, 6)])
    x, y = _scales(layer)
    geometry = area_path(layer, x, y)
    assert geometry.commands == (("M", 50.0, 40.0), ("L", 50.0, 80.0), ("Z",))


def test_two_records_trace_top_then_bottom_and_close() -> None:
    layer = _layer([(0, 4), (2, 6)])
    x, y = _scales(layer)
    geometry = area_path(layer, x, y)
    assert _ops(geometry) == ["M", "L", "L", "L", "Z"]
    assert geometry.commands[0] == ("M", 0.0, 60.0)
    assert geometry.commands[1] == ("L", 100.0, 40.0)
    assert geometry.commands[3] == ("L", 0.0, 100.0)


def test_basis_curve_passes_near_not_through_interior_points() -> None:
    geometry = curve_basis([(0, 0), (1, 1), (2, 0)])
    assert _ops(geometry) == ["M", "L", "C", "C", "L"]
    first_curve_end = geometry.commands[2][5:]
    assert first_curve_end == pytest.approx((1, 2 / 3))
    assert geometry.commands[0] == ("M", 0, 0)
    assert geometry.commands[-1] == ("L", 2, 0)


def test_basis_curve_single_point_closes() -> None:
    assert _ops(curve_basis([(3, 4)])) == ["M", "Z"]


def test_area_path_is_deterministic(rising_records, categories) -> None:
    layout = stack_wiggle(rising_records, categories)
    x = TimeScale.from_dates([r.date for r in rising_records], (0, 590))
    y = LinearScale(layout.extent, (440, 0)).nice()
    for layer in layout:
        first = area_path(layer, x, y)
        second = area_path(layer, x, y)
        assert first == second
        assert first.to_svg() == second.to_svg()
        assert _ops(first)[-1] == "Z"


def test_flat_band_outline_contains_its_interior() -> None:
    layer = _layer([(2, 6)] * 4)
    x, y = _scales(layer)
    geometry = area_path(layer, x, y)
    assert geometry.contains(50, 60)
    assert not geometry.contains(50, 90)
    assert not geometry.contains(50, 20)


def test_svg_path_data() -> None:
    geometry = PathGeometry((("M", 0.0, 1.5), ("L", 2.0, 3.0), ("Z",)))
    assert geometry.to_svg() == "M0,1.5L2,3Z"
