from __future__ import annotations

from dataclasses import dataclass, field, replace
import enum
import logging
import math

import numpy as np

from plotsurface.errors import PlotDataError


LOGGER = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]


class PlotType(enum.Flag):
    NONE = 0
    POINTS = enum.auto()
    LINES = enum.auto()
    BARS = enum.auto()


class PointStyle(enum.Enum):
    NONE = "none"
    CIRCLE = "circle"
    LETTER = "letter"
    TRIANGLE = "triangle"
    SQUARE = "square"
    PENTAGON = "pentagon"
    HEXAGON = "hexagon"
    ASTERISK = "asterisk"
    STAR = "star"


@dataclass(frozen=True)
class SeriesStyle:
    color: RGBA = (255, 255, 255, 255)
    size: float = 2.0
    point_style: PointStyle = PointStyle.CIRCLE
    line_color: RGBA | None = None
    line_width: int = 1
    bar_color: RGBA | None = None
    bar_edge_color: RGBA | None = None
    label_color: RGBA | None = None

    def resolved_line_color(self) -> RGBA:
        return self.line_color if self.line_color is not None else self.color

    def resolved_bar_color(self) -> RGBA:
        return self.bar_color if self.bar_color is not None else self.color

    def resolved_bar_edge_color(self) -> RGBA:
        return self.bar_edge_color if self.bar_edge_color is not None else self.color

    def resolved_label_color(self) -> RGBA:
        return self.label_color if self.label_color is not None else self.color


@dataclass
class PlotPoint:
    x: float = 0.0
    y: float = 0.0
    label: str = ""
    bar_width: float = 0.0

    def __post_init__(self) -> None:
        self.x = float(self.x)
        self.y = float(self.y)
        if self.bar_width < 0:
            raise PlotDataError(f"bar width must be >= 0, got {self.bar_width}")
        self.bar_width = float(self.bar_width)

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    @position.setter
    def position(self, value: tuple[float, float]) -> None:
        self.x, self.y = float(value[0]), float(value[1])


@dataclass
class PlotSeries:
    """An ordered, exclusively owned list of points plus how to draw them."""

    style: SeriesStyle = field(default_factory=SeriesStyle)
    plot_types: PlotType = PlotType.POINTS
    _points: list[PlotPoint] = field(default_factory=list)

    def add_point(self, x: float | PlotPoint, y: float | None = None, label: str = "", bar_width: float = 0.0) -> PlotPoint:
        if isinstance(x, PlotPoint):
            if y is not None:
                raise PlotDataError("add_point() takes either a PlotPoint or coordinates")
            point = x
        elif y is None:
            raise PlotDataError("add_point() needs a y coordinate")
        else:
            point = PlotPoint(x=x, y=y, label=label, bar_width=bar_width)
        if not (math.isfinite(point.x) and math.isfinite(point.y)):
            raise PlotDataError(f"point must be finite, got ({point.x}, {point.y})")
        self._points.append(point)
        return point

    def add_points(self, xs, ys, labels=None) -> "PlotSeries":
        x_arr = np.asarray(xs, dtype=np.float64)
        y_arr = np.asarray(ys, dtype=np.float64)
        if x_arr.ndim != 1 or x_arr.shape != y_arr.shape:
            raise PlotDataError(f"x and y must be 1-D and the same length: {x_arr.shape} != {y_arr.shape}")
        names = [""] * x_arr.size if labels is None else list(labels)
        if len(names) != x_arr.size:
            raise PlotDataError(f"labels length mismatch: {len(names)} != {x_arr.size}")
        for x, y, name in zip(x_arr.tolist(), y_arr.tolist(), names, strict=True):
            self.add_point(x, y, name)
        return self

    def remove_point(self, index: int) -> PlotPoint | None:
        if index < 0 or index >= len(self._points):
            LOGGER.warning("remove_point: index %d out of range (%d points)", index, len(self._points))
            return None
        return self._points.pop(index)

    def clear_points(self) -> None:
        self._points.clear()

    def points(self) -> tuple[PlotPoint, ...]:
        return tuple(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def set_show_points(self, show: bool) -> "PlotSeries":
        return self._set_type(PlotType.POINTS, show)

    def set_show_lines(self, show: bool) -> "PlotSeries":
        return self._set_type(PlotType.LINES, show)

    def set_show_bars(self, show: bool) -> "PlotSeries":
        return self._set_type(PlotType.BARS, show)

    def set_style(self, **changes) -> "PlotSeries":
        self.style = replace(self.style, **changes)
        return self

    def bar_extent(self, index: int) -> tuple[float, float]:
        """Left and right data x of the bar drawn for point ``index``."""
        point = self._points[index]
        width = point.bar_width
        if width == 0.0:
            if index + 1 < len(self._points):
                width = self._points[index + 1].x - point.x
            elif index > 0:
                width = point.x - self._points[index - 1].x
            else:
                width = 1.0
        width = abs(width)
        return (point.x - 0.5 * width, point.x + 0.5 * width)

    def _set_type(self, flag: PlotType, show: bool) -> "PlotSeries":
        if show:
            self.plot_types |= flag
        else:
            self.plot_types &= ~flag
        return self
