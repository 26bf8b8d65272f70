"""Main streamgraph renderer and its hover interaction.

Pointer positions are in chart pixel coordinates; the detail panel is
anchored at the same coordinates.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from config import ChartConfig, default_config
from detail_chart import DetailChartRenderer, DetailSeries
from paths import area_path
from records import Record, normalize_records
from scales import LinearScale, TimeScale, format_month
from stack_layout import StackLayout, stack_wiggle
from surface import AxisSpec, DrawingSurface, Node, PointerEvent, SceneSurface

logger = logging.getLogger(__name__)


@dataclass
class HoverState:
    """Which layer is hovered and where the pointer was last seen."""

    active_category: str | None = None
    pointer: PointerEvent | None = None

    @property
    def active(self) -> bool:
        return self.active_category is not None

    def enter(self, category: str, event: PointerEvent) -> None:
        self.active_category = category
        self.pointer = event

    def move(self, event: PointerEvent) -> None:
        self.pointer = event

    def leave(self) -> None:
        self.active_category = None
        self.pointer = None


class MainChartRenderer:
    """Draws the streamgraph, axis and legend, and dispatches hover events."""

    def __init__(
        self,
        config: ChartConfig | None = None,
        surface: DrawingSurface | None = None,
        panel_surface: DrawingSurface | None = None,
    ) -> None:
        self.config = (config or default_config()).validate()
        self.surface = surface or SceneSurface(self.config.width, self.config.height)
        self.detail = DetailChartRenderer(self.config, panel_surface or SceneSurface(kind="panel"))
        self.hover = HoverState()
        self.records: list[Record] = []
        self.layout: StackLayout | None = None
        self.x_scale: TimeScale | None = None
        self.y_scale: LinearScale | None = None
        self._layer_nodes: dict[str, Node] = {}

    def clear(self) -> None:
        """Remove everything drawn by a previous pass, panel included."""
        self.surface.remove_children(self.surface.root)
        self.detail.clear()
        self.hover.leave()
        self._layer_nodes = {}
        self.records = []
        self.layout = None
        self.x_scale = self.y_scale = None

    def render(self, raw_records: Iterable[Record | Mapping] | None) -> StackLayout | None:
        """Full re-render. Returns the stack layout, or None for empty input."""
        self.clear()
        cfg = self.config
        records = normalize_records(raw_records, cfg.categories)
        if not records:
            logger.info("No records to render.")
            return None

        self.x_scale = TimeScale.from_dates([r.date for r in records], (0, cfg.inner_width))
        layout = stack_wiggle(records, cfg.categories)
        self.y_scale = LinearScale(layout.extent, (cfg.inner_height, 0)).nice()
        logger.info(
            "Rendering streamgraph: %d records, %d categories, value domain [%.3g, %.3g]",
            len(records), len(cfg.categories), *self.y_scale.domain,
        )

        root = self.surface.root
        plot = self.surface.group(root, name="plot", translate=(cfg.margin.left, cfg.margin.top))
        layers = self.surface.group(plot, name="layers")
        for layer in layout:
            geometry = area_path(layer, self.x_scale, self.y_scale)
            self._layer_nodes[layer.category] = self.surface.path(
                layers, geometry, fill=cfg.color_for(layer.category),
                opacity=cfg.base_opacity, hover_key=layer.category,
            )

        dates = [r.date for r in records]
        self.surface.axis(
            plot,
            AxisSpec.from_scale(self.x_scale, "bottom", dates, format_month),
            translate=(0, cfg.inner_height),
        )
        self._draw_legend(root)

        self.records = records
        self.layout = layout
        return layout

    def _draw_legend(self, root: Node) -> None:
        cfg = self.config
        legend_height = len(cfg.categories) * cfg.legend_row
        legend_y = cfg.margin.top + (cfg.inner_height - legend_height) / 2
        legend = self.surface.group(
            root, name="legend",
            translate=(cfg.inner_width + cfg.margin.left + cfg.legend_gap, legend_y),
        )
        for i, category in enumerate(cfg.categories):
            item = self.surface.group(legend, name=f"legend-{category}", translate=(0, i * cfg.legend_row))
            self.surface.rect(item, 0, 0, cfg.legend_swatch, cfg.legend_swatch,
                              fill=cfg.color_for(category), name="swatch")
            self.surface.text(item, cfg.legend_swatch + 7, cfg.legend_swatch / 2, category,
                              font_size=cfg.legend_font_size)

    def detail_series(self, category: str) -> DetailSeries:
        if self.layout is None:
            raise ValueError("Nothing has been rendered yet.")
        layer = self.layout[category]
        return DetailSeries(category, self.config.color_for(category), tuple(layer.series()))

    # Hover transitions

    def enter(self, category: str, event: PointerEvent) -> None:
        if category not in self._layer_nodes:
            raise KeyError(f"No layer drawn for {category!r}")
        if self.hover.active:
            self.leave()
        self.surface.set_style(self._layer_nodes[category], opacity=self.config.hover_opacity)
        self.detail.show(self.detail_series(category), event)
        self.hover.enter(category, event)
        logger.debug("Hover enter %s at (%s, %s)", category, event.client_x, event.client_y)

    def move(self, event: PointerEvent) -> None:
        if not self.hover.active:
            return
        self.detail.move(event)
        self.hover.move(event)

    def leave(self) -> None:
        if not self.hover.active:
            return
        category = self.hover.active_category
        self.surface.set_style(self._layer_nodes[category], opacity=self.config.base_opacity)
        self.detail.hide()
        self.hover.leave()
        logger.debug("Hover leave %s", category)

    def pointer(self, x: float, y: float) -> str | None:
        """Feed a raw pointer position; returns the hovered category, if any."""
        event = PointerEvent(x, y)
        hit = self.surface.hit_test(x, y)
        category = hit.hover_key if hit is not None else None
        if category is None:
            self.leave()
        elif category != self.hover.active_category:
            self.enter(category, event)
        else:
            self.move(event)
        return category

    def pointer_exit(self) -> None:
        self.leave()


class StreamGraph:
    """Host lifecycle adapter: both mount and update trigger a full re-render."""

    def __init__(self, config: ChartConfig | None = None, **surfaces) -> None:
        self.renderer = MainChartRenderer(config, **surfaces)

    def mount(self, records) -> StackLayout | None:
        return self.renderer.render(records)

    def update(self, records) -> StackLayout | None:
        return self.renderer.render(records)
