"""Per-category detail panel: a small bar chart of one layer's raw values.

The panel has its own band/linear scale pair, independent of the main
chart's scales, and is anchored at the pointer position.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from config import AxisPolicy, ChartConfig
from scales import BandScale, LinearScale, format_int, format_month, ticks
from surface import AxisSpec, DrawingSurface, Node, PointerEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetailSeries:
    category: str
    color: str
    points: tuple[tuple[datetime, float], ...]

    @property
    def values(self) -> list[float]:
        return [v for _, v in self.points]


def resolve_y_axis(values: Sequence[float], policy: AxisPolicy) -> tuple[float, list[float]]:
    """Return (ceiling, tick values) for a detail value axis.

    An all-zero series gets a ceiling of one step (``round-to-step``) or 1
    (``raw-max``) so its bars stay flat instead of hitting a degenerate scale.
    """
    max_value = max(values, default=0.0)
    if policy.ceiling == "raw-max":
        ceiling = max_value if max_value > 0 else 1.0
        return ceiling, ticks(0, ceiling, policy.ticks)

    ceiling = math.ceil(max_value / policy.step) * policy.step
    if ceiling <= 0:
        ceiling = policy.step
    n_steps = int(round(ceiling / policy.step))
    return ceiling, [i * policy.step for i in range(n_steps + 1)]


class DetailChartRenderer:
    """Builds the floating panel into its own drawing surface.

    ``show`` tears down and rebuilds the panel; ``move`` only repositions it.
    """

    def __init__(self, config: ChartConfig, surface: DrawingSurface) -> None:
        self.config = config
        self.surface = surface
        self.x_scale: BandScale | None = None
        self.y_scale: LinearScale | None = None
        self.clear()

    @property
    def panel(self) -> Node:
        return self.surface.root

    def clear(self) -> None:
        self.surface.remove_children(self.panel)
        self.surface.set_style(self.panel, opacity=0)
        self.x_scale = self.y_scale = None

    def show(self, series: DetailSeries, event: PointerEvent) -> Node:
        self.clear()
        self._build(series)
        self.surface.set_style(self.panel, opacity=1)
        self.move(event)
        logger.debug("Detail panel for %s with %d bars", series.category, len(series.points))
        return self.panel

    def move(self, event: PointerEvent) -> None:
        self.surface.set_style(self.panel, left=event.client_x, top=event.client_y)

    def hide(self) -> None:
        self.surface.set_style(self.panel, opacity=0)

    def _build(self, series: DetailSeries) -> None:
        detail = self.config.detail
        width = detail.panel_width(len(series.points))
        height = detail.height
        margin = detail.margin
        inner_w = width - margin.left - margin.right
        inner_h = height - margin.top - margin.bottom

        pad = detail.box_padding
        box_w = width + 2 * pad
        box_h = detail.title_height + height + 2 * pad
        self.panel.attrs.update(width=box_w, height=box_h)

        surface = self.surface
        surface.rect(self.panel, 0, 0, box_w, box_h, fill=detail.background,
                     stroke=detail.border, name="panel-background")
        surface.text(self.panel, pad, pad + detail.title_height / 2, series.category,
                     font_size=12, weight="bold")
        svg = surface.group(self.panel, name="panel-svg", translate=(pad, pad + detail.title_height))
        plot = surface.group(svg, name="panel-plot", translate=(margin.left, margin.top))

        indices = tuple(range(len(series.points)))
        self.x_scale = BandScale(indices, (0, inner_w), padding=detail.band_padding)
        ceiling, tick_values = resolve_y_axis(series.values, self.config.policy_for(series.category))
        self.y_scale = LinearScale((0, ceiling), (inner_h, 0))

        bars = surface.group(plot, name="bars")
        for i, (_, value) in enumerate(series.points):
            y = self.y_scale(value)
            surface.rect(bars, self.x_scale(i), y, self.x_scale.bandwidth, inner_h - y,
                         fill=series.color, name="bar")

        dates = [d for d, _ in series.points]
        surface.axis(
            plot,
            AxisSpec.from_scale(self.x_scale, "bottom", indices,
                                lambda i: format_month(dates[i]), font_size=detail.font_size),
            translate=(0, inner_h),
        )
        surface.axis(
            plot,
            AxisSpec.from_scale(self.y_scale, "left", tick_values, format_int,
                                font_size=detail.font_size),
        )
