from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from plotsurface.errors import PlotGeometryError


Point = tuple[float, float]


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_center(cls, cx: float, cy: float, width: float, height: float) -> "Rect":
        return cls(x=cx - 0.5 * width, y=cy - 0.5 * height, width=width, height=height)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return (self.x + 0.5 * self.width, self.y + 0.5 * self.height)

    def nearest_point(self, point: Point) -> Point:
        px, py = point
        return (min(max(px, self.x), self.right), min(max(py, self.y), self.bottom))


@dataclass(frozen=True)
class PixelRect:
    """Drawable plot region in canvas pixels."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def contains_point(self, point: Point) -> bool:
        px, py = point
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def contains_rect(self, rect: Rect) -> bool:
        return rect.x >= self.x and rect.y >= self.y and rect.right <= self.right and rect.bottom <= self.bottom

    def as_rect(self) -> Rect:
        return Rect(x=float(self.x), y=float(self.y), width=float(self.width), height=float(self.height))


@dataclass(frozen=True)
class DataRect:
    """Visible data limits; ``y`` is the bottom edge, ``y + height`` the top."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_limits(cls, x1: float, x2: float, y1: float, y2: float) -> "DataRect":
        xa, xb = (x1, x2) if x1 <= x2 else (x2, x1)
        ya, yb = (y1, y2) if y1 <= y2 else (y2, y1)
        return cls(x=float(xa), y=float(ya), width=float(xb - xa), height=float(yb - ya))

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class PlotTransform:
    sx: float
    tx: float
    sy: float
    ty: float


def build_transform(data_rect: DataRect, pixel_rect: PixelRect) -> PlotTransform:
    if pixel_rect.width <= 0 or pixel_rect.height <= 0:
        raise PlotGeometryError(f"pixel rect must have a positive size, got {pixel_rect.width}x{pixel_rect.height}")
    values = (data_rect.x, data_rect.y, data_rect.width, data_rect.height)
    if not all(math.isfinite(v) for v in values):
        raise PlotGeometryError(f"data rect must be finite, got {data_rect}")
    if data_rect.width <= 0 or data_rect.height <= 0:
        raise PlotGeometryError(f"data rect must have a positive size, got {data_rect.width}x{data_rect.height}")
    sx = pixel_rect.width / data_rect.width
    tx = pixel_rect.x - data_rect.x * sx
    # Pixel y grows downwards, so the top of the data rect lands on pixel_rect.y.
    sy = -pixel_rect.height / data_rect.height
    ty = pixel_rect.y + data_rect.top * (pixel_rect.height / data_rect.height)
    return PlotTransform(sx=sx, tx=tx, sy=sy, ty=ty)


class CoordinateMapper:
    """Affine data-to-pixel mapping for one plot region."""

    def __init__(self) -> None:
        self._transform: PlotTransform | None = None
        self._data_rect: DataRect | None = None
        self._pixel_rect: PixelRect | None = None

    @property
    def is_configured(self) -> bool:
        return self._transform is not None

    @property
    def data_rect(self) -> DataRect | None:
        return self._data_rect

    @property
    def pixel_rect(self) -> PixelRect | None:
        return self._pixel_rect

    def configure(self, data_rect: DataRect, pixel_rect: PixelRect) -> None:
        self._transform = build_transform(data_rect, pixel_rect)
        self._data_rect = data_rect
        self._pixel_rect = pixel_rect

    def to_pixel(self, point: Point) -> Point:
        t = self._require_transform()
        x, y = point
        return (x * t.sx + t.tx, y * t.sy + t.ty)

    def from_pixel(self, point: Point) -> Point:
        t = self._require_transform()
        px, py = point
        return ((px - t.tx) / t.sx, (py - t.ty) / t.sy)

    def to_pixels(self, xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        t = self._require_transform()
        px = np.asarray(xs, dtype=np.float64) * t.sx + t.tx
        py = np.asarray(ys, dtype=np.float64) * t.sy + t.ty
        return px, py

    def _require_transform(self) -> PlotTransform:
        if self._transform is None:
            raise PlotGeometryError("coordinate mapper used before configure()")
        return self._transform
