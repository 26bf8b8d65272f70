"""Chart configuration: categories, colours, dimensions and axis policies.

Everything here is fixed when the chart is built; nothing is read from the
environment at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_CATEGORIES = ["GPT-4", "Gemini", "PaLM-2", "Claude", "LLaMA-3.1"]

DEFAULT_COLORS = {
    "GPT-4": "#e41a1c",
    "Gemini": "#377eb8",
    "PaLM-2": "#4daf4a",
    "Claude": "#984ea3",
    "LLaMA-3.1": "#ff7f00",
}

CEILING_RULES = ("raw-max", "round-to-step")


@dataclass(frozen=True)
class Margin:
    """Pixel margins around a plot area."""

    top: float
    right: float
    bottom: float
    left: float


@dataclass(frozen=True)
class AxisPolicy:
    """How the detail chart picks its value-axis ceiling and ticks.

    ``raw-max`` uses the series maximum as the ceiling and lets the scale
    choose about ``ticks`` round ticks. ``round-to-step`` rounds the
    ceiling up to the next multiple of ``step`` and ticks at every
    multiple of ``step``.
    """

    ceiling: str = "round-to-step"
    step: float = 20
    ticks: int = 4

    def __post_init__(self) -> None:
        if self.ceiling not in CEILING_RULES:
            raise ValueError(f"Unknown ceiling rule {self.ceiling!r}, expected one of {CEILING_RULES}")
        if self.step <= 0:
            raise ValueError("Axis step must be positive.")


RAW_MAX = AxisPolicy(ceiling="raw-max")
ROUND_TO_20 = AxisPolicy(ceiling="round-to-step", step=20)


@dataclass
class DetailConfig:
    """Floating per-category bar chart shown while a layer is hovered."""

    min_width: float = 300
    width_per_point: float = 25
    height: float = 150
    margin: Margin = field(default_factory=lambda: Margin(top=10, right=10, bottom=30, left=40))
    band_padding: float = 0.1
    font_size: float = 10
    box_padding: float = 10
    title_height: float = 24
    background: str = "white"
    border: str = "#ccc"

    def panel_width(self, n_points: int) -> float:
        return max(self.min_width, n_points * self.width_per_point)


@dataclass
class ChartConfig:
    """Main streamgraph configuration."""

    categories: list[str] = field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    colors: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLORS))
    width: float = 800
    height: float = 500
    margin: Margin = field(default_factory=lambda: Margin(top=20, right=150, bottom=40, left=60))
    base_opacity: float = 0.8
    hover_opacity: float = 1.0
    legend_row: float = 25
    legend_swatch: float = 18
    legend_gap: float = 20
    legend_font_size: float = 12
    axis_policies: dict[str, AxisPolicy] = field(default_factory=dict)
    default_policy: AxisPolicy = ROUND_TO_20
    detail: DetailConfig = field(default_factory=DetailConfig)

    @property
    def inner_width(self) -> float:
        return self.width - self.margin.left - self.margin.right

    @property
    def inner_height(self) -> float:
        return self.height - self.margin.top - self.margin.bottom

    def color_for(self, category: str) -> str:
        return self.colors[category]

    def policy_for(self, category: str) -> AxisPolicy:
        return self.axis_policies.get(category, self.default_policy)

    def validate(self) -> "ChartConfig":
        """Raise ValueError if the configuration cannot produce a chart."""
        if len(set(self.categories)) != len(self.categories):
            raise ValueError("Category names must be unique.")
        missing = [c for c in self.categories if c not in self.colors]
        if missing:
            raise ValueError(f"No colour configured for: {', '.join(missing)}")
        unknown = [c for c in self.axis_policies if c not in self.categories]
        if unknown:
            raise ValueError(f"Axis policy for unknown category: {', '.join(unknown)}")
        if self.inner_width <= 0 or self.inner_height <= 0:
            raise ValueError("Margins leave no room for the plot area.")
        return self


def default_config() -> ChartConfig:
    """The stock five-model chart, with GPT-4 drawn at full resolution."""
    return ChartConfig(axis_policies={"GPT-4": RAW_MAX}).validate()
