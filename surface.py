"""Drawing surface used by the chart renderers.

Renderers only talk to ``DrawingSurface``; ``SceneSurface`` keeps what was
drawn as a tree of ``Node`` objects that can be inspected, hit tested and
handed to ``raster`` for PNG or SVG output.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field

from paths import PathGeometry
from scales import BandScale


@dataclass
class Node:
    """One element of the scene: a group, path, rect, text or axis."""

    kind: str
    attrs: dict = field(default_factory=dict)
    translate: tuple[float, float] = (0.0, 0.0)
    style: dict = field(default_factory=dict)
    name: str | None = None
    hover_key: str | None = None
    children: list["Node"] = field(default_factory=list)
    parent: "Node | None" = field(default=None, repr=False, compare=False)

    def walk(self) -> Iterator["Node"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, name: str) -> "Node | None":
        return next((n for n in self.walk() if n.name == name), None)

    def find_all(self, kind: str) -> list["Node"]:
        return [n for n in self.walk() if n.kind == kind]

    def offset(self) -> tuple[float, float]:
        """Accumulated translation from the root down to this node."""
        dx = dy = 0.0
        node: Node | None = self
        while node is not None:
            dx += node.translate[0]
            dy += node.translate[1]
            node = node.parent
        return dx, dy

    def count(self) -> int:
        """Number of drawn elements below this node, excluding itself."""
        return sum(1 for _ in self.walk()) - 1


@dataclass(frozen=True)
class AxisSpec:
    """Resolved axis: tick positions along the axis and their labels."""

    orient: str
    ticks: tuple[tuple[float, str], ...]
    extent: tuple[float, float]
    tick_size: float = 6
    tick_padding: float = 3
    font_size: float = 10
    stroke: str = "#000"

    @classmethod
    def from_scale(
        cls,
        scale,
        orient: str,
        tick_values: Sequence,
        tick_format: Callable[[object], str] = str,
        **kwargs,
    ) -> "AxisSpec":
        """Place ``tick_values`` with ``scale``; band ticks sit mid-band."""
        if orient not in ("bottom", "left"):
            raise ValueError(f"Unsupported axis orientation {orient!r}")
        shift = scale.bandwidth / 2 if isinstance(scale, BandScale) else 0.0
        ticks = tuple((scale(v) + shift, tick_format(v)) for v in tick_values)
        r0, r1 = scale.range
        return cls(orient, ticks, (min(r0, r1), max(r0, r1)), **kwargs)


@dataclass(frozen=True)
class PointerEvent:
    """Pointer position relative to the viewport."""

    client_x: float
    client_y: float


class DrawingSurface(ABC):
    """Minimal set of drawing operations the renderers need."""

    @property
    @abstractmethod
    def root(self) -> Node: ...

    @abstractmethod
    def group(self, parent: Node, name: str | None = None,
              translate: tuple[float, float] = (0.0, 0.0)) -> Node: ...

    @abstractmethod
    def path(self, parent: Node, geometry: PathGeometry, fill: str,
             opacity: float = 1.0, hover_key: str | None = None) -> Node: ...

    @abstractmethod
    def rect(self, parent: Node, x: float, y: float, width: float, height: float,
             fill: str, stroke: str | None = None, name: str | None = None) -> Node: ...

    @abstractmethod
    def text(self, parent: Node, x: float, y: float, label: str,
             font_size: float = 12, weight: str = "normal") -> Node: ...

    @abstractmethod
    def axis(self, parent: Node, spec: AxisSpec,
             translate: tuple[float, float] = (0.0, 0.0)) -> Node: ...

    @abstractmethod
    def set_style(self, node: Node, **style) -> None: ...

    @abstractmethod
    def remove_children(self, node: Node) -> None: ...

    @abstractmethod
    def hit_test(self, x: float, y: float) -> Node | None: ...


class SceneSurface(DrawingSurface):
    """In-memory scene graph implementation of ``DrawingSurface``."""

    def __init__(self, width: float = 0, height: float = 0, kind: str = "svg") -> None:
        self._root = Node(kind, {"width": width, "height": height})

    @property
    def root(self) -> Node:
        return self._root

    def _append(self, parent: Node, node: Node) -> Node:
        node.parent = parent
        parent.children.append(node)
        return node

    def resize(self, width: float, height: float) -> None:
        self._root.attrs.update(width=width, height=height)

    def group(self, parent, name=None, translate=(0.0, 0.0)):
        return self._append(parent, Node("g", name=name, translate=translate))

    def path(self, parent, geometry, fill, opacity=1.0, hover_key=None):
        node = Node("path", {"geometry": geometry}, style={"fill": fill, "opacity": opacity},
                    hover_key=hover_key, name=hover_key)
        return self._append(parent, node)

    def rect(self, parent, x, y, width, height, fill, stroke=None, name=None):
        node = Node("rect", {"x": x, "y": y, "width": width, "height": height},
                    style={"fill": fill, "stroke": stroke}, name=name)
        return self._append(parent, node)

    def text(self, parent, x, y, label, font_size=12, weight="normal"):
        node = Node("text", {"x": x, "y": y, "text": label},
                    style={"font_size": font_size, "weight": weight})
        return self._append(parent, node)

    def axis(self, parent, spec, translate=(0.0, 0.0)):
        return self._append(parent, Node("axis", {"spec": spec}, translate=translate,
                                         name=f"axis-{spec.orient}"))

    def set_style(self, node, **style):
        node.style.update(style)

    def remove_children(self, node):
        for child in node.children:
            child.parent = None
        node.children.clear()

    def hit_test(self, x, y):
        """Top-most hoverable path whose outline contains (x, y)."""
        targets = [n for n in self._root.walk() if n.kind == "path" and n.hover_key]
        for node in reversed(targets):
            dx, dy = node.offset()
            if node.attrs["geometry"].contains(x - dx, y - dy):
                return node
        return None
