from __future__ import annotations

import math

import numpy as np

from plotsurface.errors import PlotGeometryError
from plotsurface.scales import PixelRect, Point, Rect


GRID_SIZE = 100


class OcclusionMask:
    """Coarse occupancy grid over the plot region.

    Drawn geometry adds weight to the cells it covers; label placement reads the
    summed weight of a candidate rectangle as its cost. Weights only grow until
    the next ``reset()``.
    """

    def __init__(self, pixel_rect: PixelRect, grid_size: int = GRID_SIZE) -> None:
        if grid_size <= 0:
            raise ValueError("grid_size must be > 0")
        self._grid_size = grid_size
        self._weights = np.zeros((grid_size, grid_size), dtype=np.float64)
        self._pixel_rect = pixel_rect
        self._cell_w = 1.0
        self._cell_h = 1.0
        self.resize(pixel_rect)

    @property
    def pixel_rect(self) -> PixelRect:
        return self._pixel_rect

    @property
    def grid_size(self) -> int:
        return self._grid_size

    @property
    def weights(self) -> np.ndarray:
        out = self._weights.copy()
        out.flags.writeable = False
        return out

    def resize(self, pixel_rect: PixelRect) -> None:
        if pixel_rect.width <= 0 or pixel_rect.height <= 0:
            raise PlotGeometryError(f"mask needs a positive pixel rect, got {pixel_rect.width}x{pixel_rect.height}")
        self._pixel_rect = pixel_rect
        self._cell_w = pixel_rect.width / self._grid_size
        self._cell_h = pixel_rect.height / self._grid_size
        self.reset()

    def reset(self) -> None:
        self._weights.fill(0.0)

    def total_weight(self) -> float:
        return float(self._weights.sum())

    def stamp_rect(self, rect: Rect, weight: float = 1.0) -> None:
        cells = self._cells_for_rect(rect)
        if cells is None:
            return
        ix0, ix1, iy0, iy1 = cells
        self._weights[iy0:iy1, ix0:ix1] += weight

    def stamp_line(self, p1: Point, p2: Point, weight: float = 1.0) -> None:
        clipped = _clip_segment(p1, p2, self._pixel_rect)
        if clipped is None:
            return
        x0, y0 = self._cell_for_point(clipped[0])
        x1, y1 = self._cell_for_point(clipped[1])
        dx = abs(x1 - x0)
        sx = 1 if x0 < x1 else -1
        dy = -abs(y1 - y0)
        sy = 1 if y0 < y1 else -1
        err = dx + dy
        while True:
            self._weights[y0, x0] += weight
            if x0 == x1 and y0 == y1:
                break
            e2 = 2 * err
            if e2 >= dy:
                err += dy
                x0 += sx
            if e2 <= dx:
                err += dx
                y0 += sy

    def query_cost(self, rect: Rect) -> float:
        cells = self._cells_for_rect(rect)
        if cells is None:
            return 0.0
        ix0, ix1, iy0, iy1 = cells
        return float(self._weights[iy0:iy1, ix0:ix1].sum())

    def _cell_for_point(self, point: Point) -> tuple[int, int]:
        px, py = point
        ix = math.floor((px - self._pixel_rect.x) / self._cell_w)
        iy = math.floor((py - self._pixel_rect.y) / self._cell_h)
        last = self._grid_size - 1
        return (min(max(ix, 0), last), min(max(iy, 0), last))

    def _cells_for_rect(self, rect: Rect) -> tuple[int, int, int, int] | None:
        pr = self._pixel_rect
        xs = _cell_span(rect.x, rect.right, pr.x, pr.right, self._cell_w, self._grid_size)
        if xs is None:
            return None
        ys = _cell_span(rect.y, rect.bottom, pr.y, pr.bottom, self._cell_h, self._grid_size)
        if ys is None:
            return None
        return (xs[0], xs[1], ys[0], ys[1])


def _clip_segment(p1: Point, p2: Point, rect: PixelRect) -> tuple[Point, Point] | None:
    """Liang-Barsky clip of ``p1 -> p2`` to ``rect``; None when it misses."""
    x0, y0 = p1
    dx = p2[0] - x0
    dy = p2[1] - y0
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0 - rect.x), (dx, rect.right - x0), (-dy, y0 - rect.y), (dy, rect.bottom - y0)):
        if p == 0:
            if q < 0:
                return None
            continue
        r = q / p
        if p < 0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)
    return ((x0 + t0 * dx, y0 + t0 * dy), (x0 + t1 * dx, y0 + t1 * dy))


def _cell_span(lo: float, hi: float, edge_lo: int, edge_hi: int, cell: float, n: int) -> tuple[int, int] | None:
    """Half-open range of cells overlapped by ``[lo, hi]`` after clipping to the grid."""
    if hi < lo:
        lo, hi = hi, lo
    degenerate = hi == lo
    a = max(lo, float(edge_lo))
    b = min(hi, float(edge_hi))
    if b < a or (b == a and not degenerate):
        return None
    i0 = math.floor((a - edge_lo) / cell)
    i1 = math.ceil((b - edge_lo) / cell)
    i0 = min(max(i0, 0), n - 1)
    i1 = min(max(i1, i0 + 1), n)
    return (i0, i1)
