"""Integration tests: rasterise and serialise drawn scenes."""

from __future__ import annotations

import io

import pytest
from PIL import Image

from raster import render_png, to_svg
from surface import PointerEvent

pytestmark = pytest.mark.integration


def test_chart_png_matches_configured_size(renderer, rising_records) -> None:
    renderer.render(rising_records)
    png = render_png(renderer.surface.root)
    assert png[:8] == b"\x89PNG\r\n\x1a\n"
    assert Image.open(io.BytesIO(png)).size == (800, 500)


def test_detail_panel_png(renderer, rising_records) -> None:
    renderer.render(rising_records)
    renderer.enter("Gemini", PointerEvent(100, 100))
    png = render_png(renderer.detail.panel)
    width, height = Image.open(io.BytesIO(png)).size
    assert width == pytest.approx(320, abs=1)
    assert height == pytest.approx(194, abs=1)


def test_empty_scene_still_renders(renderer) -> None:
    renderer.render([])
    png = render_png(renderer.surface.root, 800, 500)
    assert Image.open(io.BytesIO(png)).size == (800, 500)


def test_svg_contains_layers_axis_and_legend(renderer, rising_records, categories) -> None:
    renderer.render(rising_records)
    svg = to_svg(renderer.surface.root)
    assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="800" height="500">')
    for category in categories:
        assert f'<path class="{category}" d="M' in svg
    assert svg.count('class="tick"') == 5
    assert ">May</text>" in svg
    assert '<g class="legend" transform="translate(670,177.5)">' in svg
