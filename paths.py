"""Smooth outlines for stream layers.

The smoothing is a uniform cubic B-spline: each data point acts as a
control point, so the curve passes near rather than through the points,
except at the ends where it is clamped to the first and last point.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from matplotlib.path import Path

from stack_layout import Layer


@dataclass(frozen=True)
class PathGeometry:
    """Drawing commands in SVG order: ``M`` and ``L`` take one point,
    ``C`` takes two control points and an end point, ``Z`` closes."""

    commands: tuple[tuple, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.commands)

    def to_svg(self) -> str:
        parts = []
        for op, *coords in self.commands:
            parts.append(op + ",".join(_fmt(c) for c in coords))
        return "".join(parts)

    def to_mpl_path(self) -> Path:
        vertices: list[tuple[float, float]] = []
        codes: list[int] = []
        start = (0.0, 0.0)
        for op, *coords in self.commands:
            if op == "M":
                start = (coords[0], coords[1])
                vertices.append(start)
                codes.append(Path.MOVETO)
            elif op == "L":
                vertices.append((coords[0], coords[1]))
                codes.append(Path.LINETO)
            elif op == "C":
                vertices.extend([(coords[0], coords[1]), (coords[2], coords[3]), (coords[4], coords[5])])
                codes.extend([Path.CURVE4] * 3)
            elif op == "Z":
                vertices.append(start)
                codes.append(Path.CLOSEPOLY)
        if not vertices:
            return Path(((0.0, 0.0),), (Path.MOVETO,))
        return Path(vertices, codes)

    def contains(self, x: float, y: float) -> bool:
        if not self.commands:
            return False
        return bool(self.to_mpl_path().contains_point((x, y)))


def _fmt(value: float) -> str:
    return f"{value:.6g}" if abs(value) < 1e6 else f"{value:.1f}"


class _PathBuilder:
    def __init__(self) -> None:
        self.commands: list[tuple] = []

    def move_to(self, x, y):
        self.commands.append(("M", x, y))

    def line_to(self, x, y):
        self.commands.append(("L", x, y))

    def curve_to(self, x1, y1, x2, y2, x, y):
        self.commands.append(("C", x1, y1, x2, y2, x, y))

    def close(self):
        self.commands.append(("Z",))

    def build(self) -> PathGeometry:
        return PathGeometry(tuple(self.commands))


class _BasisCurve:
    """Streaming B-spline writer; ``area`` mode joins a line and its return trip."""

    def __init__(self, out: _PathBuilder) -> None:
        self.out = out
        self._line: int | None = None
        self._point = 0
        self._x0 = self._x1 = self._y0 = self._y1 = math.nan

    def area_start(self):
        self._line = 0

    def area_end(self):
        self._line = None

    def line_start(self):
        self._x0 = self._x1 = self._y0 = self._y1 = math.nan
        self._point = 0

    def line_end(self):
        if self._point == 3:
            self._bezier(self._x1, self._y1)
        if self._point in (2, 3):
            self.out.line_to(self._x1, self._y1)
        if self._line or (self._line is None and self._point == 1):
            self.out.close()
        if self._line is not None:
            self._line = 1 - self._line

    def point(self, x: float, y: float):
        if self._point == 0:
            self._point = 1
            if self._line:
                self.out.line_to(x, y)
            else:
                self.out.move_to(x, y)
        elif self._point == 1:
            self._point = 2
        else:
            if self._point == 2:
                self._point = 3
                self.out.line_to((5 * self._x0 + self._x1) / 6, (5 * self._y0 + self._y1) / 6)
            self._bezier(x, y)
        self._x0, self._x1 = self._x1, x
        self._y0, self._y1 = self._y1, y

    def _bezier(self, x, y):
        x0, x1, y0, y1 = self._x0, self._x1, self._y0, self._y1
        self.out.curve_to(
            (2 * x0 + x1) / 3, (2 * y0 + y1) / 3,
            (x0 + 2 * x1) / 3, (y0 + 2 * y1) / 3,
            (x0 + 4 * x1 + x) / 6, (y0 + 4 * y1 + y) / 6,
        )


def curve_basis(points: Iterable[tuple[float, float]]) -> PathGeometry:
    """Open B-spline through ``points``; a single point yields a closed dot."""
    out = _PathBuilder()
    curve = _BasisCurve(out)
    curve.line_start()
    for x, y in points:
        curve.point(x, y)
    curve.line_end()
    return out.build()


def area_path(
    layer: Layer,
    x_scale: Callable[[object], float],
    y_scale: Callable[[float], float],
) -> PathGeometry:
    """Closed outline of a layer: the smoothed top edge left to right, then
    the smoothed bottom edge right to left.

    An empty layer yields an empty geometry; a one-record layer yields a
    zero-width vertical segment.
    """
    if len(layer) == 0:
        return PathGeometry()
    xs = [x_scale(d) for d in layer.dates]
    out = _PathBuilder()
    curve = _BasisCurve(out)
    curve.area_start()
    curve.line_start()
    for x, band in zip(xs, layer.bands):
        curve.point(x, y_scale(band.high))
    curve.line_end()
    curve.line_start()
    for x, band in zip(reversed(xs), reversed(layer.bands)):
        curve.point(x, y_scale(band.low))
    curve.line_end()
    curve.area_end()
    return out.build()
