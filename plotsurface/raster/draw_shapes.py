from __future__ import annotations

from collections.abc import Iterator
from functools import lru_cache
import math

import numpy as np
from PIL import Image, ImageDraw

from plotsurface.series import PointStyle


def draw_segment(x0: int, y0: int, x1: int, y1: int, *, width: int = 1) -> Iterator[tuple[int, int]]:
    """Yield the pixels of a Bresenham segment stroked with a square brush."""
    radius = max(0, width // 2)
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    seen: set[tuple[int, int]] = set()
    while True:
        for yy in range(y0 - radius, y0 + radius + 1):
            for xx in range(x0 - radius, x0 + radius + 1):
                if (xx, yy) not in seen:
                    seen.add((xx, yy))
                    yield (xx, yy)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


@lru_cache(maxsize=64)
def marker_mask(style: PointStyle, size: float) -> tuple[np.ndarray, tuple[int, int]]:
    """Coverage mask for one point marker and the offset of its centre pixel."""
    half = max(1.0, 0.5 * float(size))
    c = int(math.ceil(half))
    image = Image.new("L", (2 * c + 1, 2 * c + 1), 0)
    draw = ImageDraw.Draw(image)
    if style is PointStyle.CIRCLE:
        draw.ellipse((c - half, c - half, c + half, c + half), fill=255)
    elif style is PointStyle.SQUARE:
        draw.rectangle((c - half, c - half, c + half, c + half), fill=255)
    elif style is PointStyle.TRIANGLE:
        draw.polygon(_regular_polygon(c, half, 3), fill=255)
    elif style is PointStyle.PENTAGON:
        draw.polygon(_regular_polygon(c, half, 5), fill=255)
    elif style is PointStyle.HEXAGON:
        draw.polygon(_regular_polygon(c, half, 6), fill=255)
    elif style is PointStyle.STAR:
        draw.polygon(_star_polygon(c, half), fill=255)
    elif style is PointStyle.ASTERISK:
        for k in range(3):
            angle = math.pi * k / 3.0 + math.pi / 2.0
            dx = half * math.cos(angle)
            dy = half * math.sin(angle)
            draw.line((c - dx, c - dy, c + dx, c + dy), fill=255, width=1)
    mask = np.asarray(image, dtype=np.uint8)
    mask.flags.writeable = False
    return mask, (c, c)


def _regular_polygon(c: int, radius: float, sides: int) -> list[tuple[float, float]]:
    # First vertex points straight up.
    return [
        (c + radius * math.cos(-math.pi / 2.0 + 2.0 * math.pi * k / sides), c + radius * math.sin(-math.pi / 2.0 + 2.0 * math.pi * k / sides))
        for k in range(sides)
    ]


def _star_polygon(c: int, radius: float) -> list[tuple[float, float]]:
    inner = radius * 0.4
    points: list[tuple[float, float]] = []
    for k in range(10):
        r = radius if k % 2 == 0 else inner
        angle = -math.pi / 2.0 + math.pi * k / 5.0
        points.append((c + r * math.cos(angle), c + r * math.sin(angle)))
    return points
