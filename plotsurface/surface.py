from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import enum
import logging
from typing import Protocol

import numpy as np

from plotsurface.axis import PlotAxis, TickSet
from plotsurface.errors import PlotDataError, PlotGeometryError
from plotsurface.labels import LabelPlacer, Placement
from plotsurface.mask import OcclusionMask
from plotsurface.raster import RasterCanvas
from plotsurface.scales import CoordinateMapper, DataRect, PixelRect, Point, Rect
from plotsurface.series import RGBA, PlotPoint, PlotSeries, PlotType, PointStyle


LOGGER = logging.getLogger(__name__)

DEFAULT_SIZE = (600, 600)

BIG_TICK_PX = 10
SMALL_TICK_PX = 4
TICK_LABEL_GAP_PX = 4
LABEL_MARGIN_PX = 2
HIT_RADIUS_PX = 4

BAR_MASK_WEIGHT = 0.25
LINE_MASK_WEIGHT = 1.0
POINT_MASK_WEIGHT = 2.0
TICK_MASK_WEIGHT = 1.0
GRID_MASK_WEIGHT = 0.5


class AxisSide(enum.Enum):
    LEFT = "left"
    BOTTOM = "bottom"
    RIGHT = "right"
    TOP = "top"


# (padding with tick labels, padding without)
_AUTO_PADDING: dict[AxisSide, tuple[int, int]] = {
    AxisSide.LEFT: (60, 30),
    AxisSide.RIGHT: (60, 20),
    AxisSide.TOP: (40, 20),
    AxisSide.BOTTOM: (40, 30),
}


@dataclass(frozen=True)
class SurfaceStyle:
    background: RGBA = (0, 0, 0, 255)
    foreground: RGBA = (255, 255, 255, 255)
    grid: RGBA = (160, 160, 160, 255)
    font_size_px: float = 12.0


class PlotCanvas(Protocol):
    def clear(self, color: RGBA) -> None:
        ...

    def set_clip(self, rect: Rect | None) -> None:
        ...

    def fill_rect(self, rect: Rect, color: RGBA) -> None:
        ...

    def stroke_rect(self, rect: Rect, color: RGBA) -> None:
        ...

    def draw_line(self, p1: Point, p2: Point, color: RGBA, width: int = 1) -> None:
        ...

    def draw_marker(self, center: Point, size: float, style: PointStyle, color: RGBA, *, letter: str = "") -> None:
        ...

    def text_size(self, text: str, *, rotate_deg: int = 0) -> tuple[int, int]:
        ...

    def draw_text(self, rect: Rect, text: str, color: RGBA, *, rotate_deg: int = 0) -> None:
        ...


class PlotSurface:
    """Data limits, axes, series and the occlusion mask of one drawing surface.

    ``render()`` runs one paint pass: the mask is reset, axes and series
    geometry are drawn and stamped into it, and finally every labeled point is
    given a label position that avoids what was drawn before it.
    """

    def __init__(
        self,
        width: int = DEFAULT_SIZE[0],
        height: int = DEFAULT_SIZE[1],
        *,
        style: SurfaceStyle | None = None,
        placer: LabelPlacer | None = None,
    ) -> None:
        self.style = style or SurfaceStyle()
        self.show_grid = False
        self._width = 0
        self._height = 0
        self._axes = {side: PlotAxis() for side in AxisSide}
        self._axes[AxisSide.LEFT].tick_labels_shown = True
        self._axes[AxisSide.BOTTOM].tick_labels_shown = True
        self._paddings = {side: -1 for side in AxisSide}
        self._series: list[PlotSeries] = []
        self._data_rect = DataRect(0.0, 0.0, 1.0, 1.0)
        self._secondary_rect: DataRect | None = None
        self._mapper = CoordinateMapper()
        self._secondary_mapper = CoordinateMapper()
        self._placer = placer or LabelPlacer()
        self._placements: list[Placement] = []
        self.resize(width, height)
        self._mask = OcclusionMask(self._configure_mapping())
        self._update_tick_marks()

    # geometry

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def mask(self) -> OcclusionMask:
        return self._mask

    @property
    def placer(self) -> LabelPlacer:
        return self._placer

    def resize(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise PlotGeometryError(f"surface size must be > 0, got {width}x{height}")
        self._width = int(width)
        self._height = int(height)

    def left_padding(self) -> int:
        return self._padding(AxisSide.LEFT)

    def right_padding(self) -> int:
        return self._padding(AxisSide.RIGHT)

    def top_padding(self) -> int:
        return self._padding(AxisSide.TOP)

    def bottom_padding(self) -> int:
        return self._padding(AxisSide.BOTTOM)

    def set_left_padding(self, padding: int) -> "PlotSurface":
        self._paddings[AxisSide.LEFT] = int(padding)
        return self

    def set_right_padding(self, padding: int) -> "PlotSurface":
        self._paddings[AxisSide.RIGHT] = int(padding)
        return self

    def set_top_padding(self, padding: int) -> "PlotSurface":
        self._paddings[AxisSide.TOP] = int(padding)
        return self

    def set_bottom_padding(self, padding: int) -> "PlotSurface":
        self._paddings[AxisSide.BOTTOM] = int(padding)
        return self

    def set_default_paddings(self) -> "PlotSurface":
        for side in AxisSide:
            self._paddings[side] = -1
        return self

    def _padding(self, side: AxisSide) -> int:
        explicit = self._paddings[side]
        if explicit >= 0:
            return explicit
        axis = self._axes[side]
        with_labels, without_labels = _AUTO_PADDING[side]
        return with_labels if axis.visible and axis.tick_labels_shown else without_labels

    def pix_rect(self) -> PixelRect:
        left = self.left_padding()
        top = self.top_padding()
        w = self._width - left - self.right_padding()
        h = self._height - top - self.bottom_padding()
        if w <= 0 or h <= 0:
            raise PlotGeometryError(f"surface {self._width}x{self._height} is too small for its paddings")
        return PixelRect(x=left, y=top, width=w, height=h)

    # limits

    def set_limits(self, x1: float, x2: float, y1: float, y2: float) -> "PlotSurface":
        self._data_rect = _limits_rect(x1, x2, y1, y2)
        self._update_tick_marks()
        return self

    def set_secondary_limits(self, x1: float, x2: float, y1: float, y2: float) -> "PlotSurface":
        self._secondary_rect = _limits_rect(x1, x2, y1, y2)
        self._update_tick_marks()
        return self

    def clear_secondary_limits(self) -> "PlotSurface":
        self._secondary_rect = None
        self._update_tick_marks()
        return self

    def data_rect(self) -> DataRect:
        return self._data_rect

    def secondary_data_rect(self) -> DataRect | None:
        return self._secondary_rect

    def _update_tick_marks(self) -> None:
        primary = self._data_rect
        secondary = self._secondary_rect or primary
        self._axes[AxisSide.BOTTOM].set_tick_marks(primary.x, primary.width)
        self._axes[AxisSide.LEFT].set_tick_marks(primary.y, primary.height)
        self._axes[AxisSide.TOP].set_tick_marks(secondary.x, secondary.width)
        self._axes[AxisSide.RIGHT].set_tick_marks(secondary.y, secondary.height)

    def axis(self, side: AxisSide) -> PlotAxis:
        return self._axes[side]

    def set_show_grid(self, show: bool) -> "PlotSurface":
        self.show_grid = bool(show)
        return self

    # series

    def add_series(self, series: PlotSeries) -> "PlotSurface":
        if not isinstance(series, PlotSeries):
            raise PlotDataError(f"expected PlotSeries, got {type(series)!r}")
        self._series.append(series)
        return self

    def add_series_many(self, series: Iterable[PlotSeries]) -> "PlotSurface":
        for s in series:
            self.add_series(s)
        return self

    def series(self) -> tuple[PlotSeries, ...]:
        return tuple(self._series)

    def replace_series(self, index: int, series: PlotSeries) -> PlotSeries | None:
        if not isinstance(series, PlotSeries):
            raise PlotDataError(f"expected PlotSeries, got {type(series)!r}")
        if index < 0 or index >= len(self._series):
            LOGGER.warning("replace_series: index %d out of range (%d series)", index, len(self._series))
            return None
        previous = self._series[index]
        self._series[index] = series
        return previous

    def remove_all_series(self) -> "PlotSurface":
        self._series.clear()
        return self

    def reset_plot(self) -> "PlotSurface":
        self.remove_all_series()
        self._secondary_rect = None
        self.set_limits(0.0, 1.0, 0.0, 1.0)
        for side in (AxisSide.RIGHT, AxisSide.TOP):
            self._axes[side].label = ""
            self._axes[side].tick_labels_shown = False
        self._axes[AxisSide.LEFT].label = ""
        self._axes[AxisSide.BOTTOM].label = ""
        self.reset_plot_mask()
        return self

    # mapping and masking

    def _configure_mapping(self) -> PixelRect:
        pix = self.pix_rect()
        self._mapper.configure(self._data_rect, pix)
        self._secondary_mapper.configure(self._secondary_rect or self._data_rect, pix)
        return pix

    def map_to_widget(self, point: Point) -> Point:
        self._configure_mapping()
        return self._mapper.to_pixel(point)

    def reset_plot_mask(self) -> None:
        pix = self._configure_mapping()
        if pix != self._mask.pixel_rect:
            self._mask.resize(pix)
        else:
            self._mask.reset()
        self._placements = []

    def mask_rect(self, rect: Rect, value: float = 1.0) -> None:
        self._mask.stamp_rect(rect, value)

    def mask_along_line(self, p1: Point, p2: Point, value: float = 1.0) -> None:
        self._mask.stamp_line(p1, p2, value)

    def points_under_point(self, pixel: Point, radius: float = HIT_RADIUS_PX) -> list[PlotPoint]:
        self._configure_mapping()
        px, py = pixel
        hits: list[PlotPoint] = []
        for series in self._series:
            for point in series.points():
                qx, qy = self._mapper.to_pixel(point.position)
                if abs(qx - px) + abs(qy - py) <= radius:
                    hits.append(point)
        return hits

    def last_label_placements(self) -> tuple[Placement, ...]:
        return tuple(self._placements)

    # painting

    def render(self, canvas: PlotCanvas | None = None) -> PlotCanvas:
        if canvas is None:
            canvas = RasterCanvas(self._width, self._height, self.style.background, font_size_px=self.style.font_size_px)
        canvas.clear(self.style.background)
        self.reset_plot_mask()
        pix = self._mask.pixel_rect

        self._draw_axes(canvas, pix)
        canvas.set_clip(pix.as_rect())
        try:
            for series in self._series:
                self._draw_series(canvas, series)
            for series in self._series:
                for point in series.points():
                    if point.label:
                        self.place_label(canvas, point, color=series.style.resolved_label_color())
        finally:
            canvas.set_clip(None)

        LOGGER.debug(
            "paint pass: %d series, %d labels placed, mask weight %.2f",
            len(self._series),
            len(self._placements),
            self._mask.total_weight(),
        )
        return canvas

    def place_label(self, canvas: PlotCanvas, point: PlotPoint, *, color: RGBA | None = None) -> Placement | None:
        anchor = self.map_to_widget(point.position)
        if not self._mask.pixel_rect.contains_point(anchor):
            return None
        w, h = canvas.text_size(point.label)
        size = (w + 2 * LABEL_MARGIN_PX, h + 2 * LABEL_MARGIN_PX)
        placement = self._placer.place(anchor, size, self._mask)
        label_color = color or self.style.foreground
        canvas.draw_text(placement.rect, point.label, label_color)
        if placement.leader is not None:
            canvas.draw_line(placement.leader[0], placement.leader[1], label_color)
        self._placements.append(placement)
        return placement

    def _draw_series(self, canvas: PlotCanvas, series: PlotSeries) -> None:
        points = series.points()
        if not points:
            return
        style = series.style
        xs = np.fromiter((p.x for p in points), dtype=np.float64, count=len(points))
        ys = np.fromiter((p.y for p in points), dtype=np.float64, count=len(points))
        px, py = self._mapper.to_pixels(xs, ys)

        if series.plot_types & PlotType.BARS:
            for i, point in enumerate(points):
                left, right = series.bar_extent(i)
                ax, ay = self._mapper.to_pixel((left, 0.0))
                bx, by = self._mapper.to_pixel((right, point.y))
                rect = Rect(min(ax, bx), min(ay, by), abs(bx - ax), abs(by - ay))
                canvas.fill_rect(rect, style.resolved_bar_color())
                canvas.stroke_rect(rect, style.resolved_bar_edge_color())
                self._mask.stamp_rect(rect, BAR_MASK_WEIGHT)

        if series.plot_types & PlotType.LINES:
            for i in range(len(points) - 1):
                p1 = (float(px[i]), float(py[i]))
                p2 = (float(px[i + 1]), float(py[i + 1]))
                canvas.draw_line(p1, p2, style.resolved_line_color(), style.line_width)
                self._mask.stamp_line(p1, p2, LINE_MASK_WEIGHT)

        if series.plot_types & PlotType.POINTS:
            for i, point in enumerate(points):
                center = (float(px[i]), float(py[i]))
                canvas.draw_marker(center, style.size, style.point_style, style.color, letter=point.label)
                footprint = Rect.from_center(center[0], center[1], 2.0 * style.size, 2.0 * style.size)
                self._mask.stamp_rect(footprint, POINT_MASK_WEIGHT)

    def _draw_axes(self, canvas: PlotCanvas, pix: PixelRect) -> None:
        fg = self.style.foreground
        bottom = self._axes[AxisSide.BOTTOM]
        left = self._axes[AxisSide.LEFT]

        if self.show_grid:
            for x in bottom.ticks.majors:
                px = self._mapper.to_pixel((x, 0.0))[0]
                canvas.draw_line((px, pix.y), (px, pix.bottom), self.style.grid)
                self._mask.stamp_line((px, pix.y), (px, pix.bottom), GRID_MASK_WEIGHT)
            for y in left.ticks.majors:
                py = self._mapper.to_pixel((0.0, y))[1]
                canvas.draw_line((pix.x, py), (pix.right, py), self.style.grid)
                self._mask.stamp_line((pix.x, py), (pix.right, py), GRID_MASK_WEIGHT)

        canvas.stroke_rect(pix.as_rect(), fg)
        self._draw_horizontal_axis(canvas, pix, AxisSide.BOTTOM, self._mapper)
        self._draw_horizontal_axis(canvas, pix, AxisSide.TOP, self._secondary_mapper)
        self._draw_vertical_axis(canvas, pix, AxisSide.LEFT, self._mapper)
        self._draw_vertical_axis(canvas, pix, AxisSide.RIGHT, self._secondary_mapper)

    def _draw_horizontal_axis(self, canvas: PlotCanvas, pix: PixelRect, side: AxisSide, mapper: CoordinateMapper) -> None:
        axis = self._axes[side]
        if not axis.visible:
            return
        fg = self.style.foreground
        edge = pix.bottom if side is AxisSide.BOTTOM else pix.y
        inward = -1 if side is AxisSide.BOTTOM else 1
        outward = -inward
        label_h = 0
        for px, major in self._tick_pixels(axis.ticks, mapper, horizontal=True, lo=pix.x, hi=pix.right):
            end = edge + inward * (BIG_TICK_PX if major else SMALL_TICK_PX)
            canvas.draw_line((px, edge), (px, end), fg)
            self._mask.stamp_line((px, edge), (px, end), TICK_MASK_WEIGHT)
        if axis.tick_labels_shown:
            for value in axis.ticks.majors:
                px = mapper.to_pixel((value, 0.0))[0]
                if not pix.x <= px <= pix.right:
                    continue
                text = axis.tick_label(value)
                w, h = canvas.text_size(text)
                label_h = max(label_h, h)
                cy = edge + outward * (TICK_LABEL_GAP_PX + 0.5 * h)
                canvas.draw_text(Rect.from_center(px, cy, w, h), text, fg)
        if axis.label:
            w, h = canvas.text_size(axis.label)
            offset = TICK_LABEL_GAP_PX + (label_h + TICK_LABEL_GAP_PX if label_h else 0) + 0.5 * h
            cx = pix.x + 0.5 * pix.width
            canvas.draw_text(Rect.from_center(cx, edge + outward * offset, w, h), axis.label, fg)

    def _draw_vertical_axis(self, canvas: PlotCanvas, pix: PixelRect, side: AxisSide, mapper: CoordinateMapper) -> None:
        axis = self._axes[side]
        if not axis.visible:
            return
        fg = self.style.foreground
        edge = pix.x if side is AxisSide.LEFT else pix.right
        inward = 1 if side is AxisSide.LEFT else -1
        outward = -inward
        label_w = 0
        for py, major in self._tick_pixels(axis.ticks, mapper, horizontal=False, lo=pix.y, hi=pix.bottom):
            end = edge + inward * (BIG_TICK_PX if major else SMALL_TICK_PX)
            canvas.draw_line((edge, py), (end, py), fg)
            self._mask.stamp_line((edge, py), (end, py), TICK_MASK_WEIGHT)
        if axis.tick_labels_shown:
            for value in axis.ticks.majors:
                py = mapper.to_pixel((0.0, value))[1]
                if not pix.y <= py <= pix.bottom:
                    continue
                text = axis.tick_label(value)
                w, h = canvas.text_size(text)
                label_w = max(label_w, w)
                cx = edge + outward * (TICK_LABEL_GAP_PX + 0.5 * w)
                canvas.draw_text(Rect.from_center(cx, py, w, h), text, fg)
        if axis.label:
            rotate = 90 if side is AxisSide.LEFT else 270
            w, h = canvas.text_size(axis.label, rotate_deg=rotate)
            offset = TICK_LABEL_GAP_PX + (label_w + TICK_LABEL_GAP_PX if label_w else 0) + 0.5 * w
            cy = pix.y + 0.5 * pix.height
            canvas.draw_text(Rect.from_center(edge + outward * offset, cy, w, h), axis.label, fg, rotate_deg=rotate)

    @staticmethod
    def _tick_pixels(
        ticks: TickSet,
        mapper: CoordinateMapper,
        *,
        horizontal: bool,
        lo: int,
        hi: int,
    ) -> list[tuple[float, bool]]:
        out: list[tuple[float, bool]] = []
        for values, major in ((ticks.majors, True), (ticks.minors, False)):
            for value in values:
                p = mapper.to_pixel((value, 0.0))[0] if horizontal else mapper.to_pixel((0.0, value))[1]
                # Skip ticks that land on the frame.
                if lo < p < hi:
                    out.append((p, major))
        return out


def _limits_rect(x1: float, x2: float, y1: float, y2: float) -> DataRect:
    if x1 == x2:
        LOGGER.warning("x1 and x2 cannot be equal; setting x2 = x1 + 1.0")
        x2 = x1 + 1.0
    if y1 == y2:
        LOGGER.warning("y1 and y2 cannot be equal; setting y2 = y1 + 1.0")
        y2 = y1 + 1.0
    rect = DataRect.from_limits(x1, x2, y1, y2)
    if not all(np.isfinite((rect.x, rect.y, rect.width, rect.height))):
        raise PlotGeometryError(f"limits must be finite, got ({x1}, {x2}, {y1}, {y2})")
    return rect
