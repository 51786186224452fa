from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from plotsurface.raster.draw_shapes import draw_segment, marker_mask
from plotsurface.raster.draw_text import DEFAULT_FONT_SIZE_PX, blend_coverage, render_text_mask, text_size
from plotsurface.scales import Point, Rect
from plotsurface.series import PointStyle


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> np.ndarray:
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    a = color[3] / 255.0
    current = dst[y, x, :3].astype(np.float32)
    dst[y, x, :3] = (np.asarray(color[:3], dtype=np.float32) * a + current * (1.0 - a)).astype(np.uint8)
    dst[y, x, 3] = 255


def fill_region(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA) -> None:
    """Alpha-blend ``color`` over the inclusive pixel box ``[x0, x1] x [y0, y1]``."""
    left = max(0, min(x0, x1))
    right = min(dst.shape[1] - 1, max(x0, x1))
    top = max(0, min(y0, y1))
    bottom = min(dst.shape[0] - 1, max(y0, y1))
    if right < left or bottom < top:
        return
    patch = dst[top : bottom + 1, left : right + 1]
    a = color[3] / 255.0
    blended = np.asarray(color[:3], dtype=np.float32) * a + patch[:, :, :3].astype(np.float32) * (1.0 - a)
    patch[:, :, :3] = blended.astype(np.uint8)
    patch[:, :, 3] = 255


class RasterCanvas:
    """RGBA pixel buffer implementing the drawing calls a plot surface makes."""

    def __init__(self, width: int, height: int, background: RGBA = (0, 0, 0, 255), *, font_size_px: float = DEFAULT_FONT_SIZE_PX) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be > 0")
        self.width = width
        self.height = height
        self.font_size_px = font_size_px
        self.pixels = new_canvas(width, height, background)
        self._clip: tuple[int, int, int, int] | None = None

    def set_clip(self, rect: Rect | None) -> None:
        if rect is None:
            self._clip = None
            return
        x0, y0, x1, y1 = _pixel_box(rect)
        self._clip = (max(0, x0), max(0, y0), min(self.width, x1 + 1), min(self.height, y1 + 1))

    def _target(self) -> tuple[np.ndarray, int, int]:
        if self._clip is None:
            return self.pixels, 0, 0
        x0, y0, x1, y1 = self._clip
        return self.pixels[y0:y1, x0:x1], x0, y0

    def clear(self, color: RGBA) -> None:
        self.pixels[:, :] = np.asarray(color, dtype=np.uint8)

    def fill_rect(self, rect: Rect, color: RGBA) -> None:
        dst, ox, oy = self._target()
        x0, y0, x1, y1 = _pixel_box(rect)
        fill_region(dst, x0 - ox, y0 - oy, x1 - ox, y1 - oy, color)

    def stroke_rect(self, rect: Rect, color: RGBA) -> None:
        dst, ox, oy = self._target()
        x0, y0, x1, y1 = _pixel_box(rect)
        x0, x1, y0, y1 = x0 - ox, x1 - ox, y0 - oy, y1 - oy
        fill_region(dst, x0, y0, x1, y0, color)
        fill_region(dst, x0, y1, x1, y1, color)
        if y1 - y0 > 1:
            fill_region(dst, x0, y0 + 1, x0, y1 - 1, color)
            fill_region(dst, x1, y0 + 1, x1, y1 - 1, color)

    def draw_line(self, p1: Point, p2: Point, color: RGBA, width: int = 1) -> None:
        dst, ox, oy = self._target()
        x0, y0 = _round_point(p1)
        x1, y1 = _round_point(p2)
        for x, y in draw_segment(x0 - ox, y0 - oy, x1 - ox, y1 - oy, width=width):
            draw_pixel(dst, x, y, color)

    def draw_marker(self, center: Point, size: float, style: PointStyle, color: RGBA, *, letter: str = "") -> None:
        if style is PointStyle.NONE:
            return
        if style is PointStyle.LETTER:
            if letter:
                w, h = self.text_size(letter[0])
                self.draw_text(Rect.from_center(center[0], center[1], w, h), letter[0], color)
            return
        dst, ox, oy = self._target()
        coverage, (mx, my) = marker_mask(style, size)
        cx, cy = _round_point(center)
        blend_coverage(dst, cx - mx - ox, cy - my - oy, coverage, color)

    def text_size(self, text: str, *, rotate_deg: int = 0) -> tuple[int, int]:
        return text_size(text, font_size_px=self.font_size_px, rotate_deg=rotate_deg)

    def draw_text(self, rect: Rect, text: str, color: RGBA, *, rotate_deg: int = 0) -> None:
        """Draw ``text`` centred in ``rect``."""
        if not text:
            return
        dst, ox, oy = self._target()
        coverage = render_text_mask(text, font_size_px=self.font_size_px, rotate_deg=rotate_deg)
        h, w = coverage.shape
        cx, cy = rect.center
        blend_coverage(dst, int(round(cx - 0.5 * w)) - ox, int(round(cy - 0.5 * h)) - oy, coverage, color)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    def save_png(self, path: str | Path) -> Path:
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        self.to_image().save(out)
        return out


def _round_point(point: Point) -> tuple[int, int]:
    return (int(round(point[0])), int(round(point[1])))


def _pixel_box(rect: Rect) -> tuple[int, int, int, int]:
    x0 = int(round(rect.x))
    y0 = int(round(rect.y))
    x1 = int(round(rect.right)) - 1
    y1 = int(round(rect.bottom)) - 1
    return (x0, y0, max(x0, x1), max(y0, y1))
