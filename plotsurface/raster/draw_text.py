from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont


LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "DejaVu Sans"
DEFAULT_FONT_SIZE_PX = 12.0
FONT_FALLBACK_PATTERNS = (
    "dejavusans",
    "dejavu sans",
    "liberationsans",
    "helvetica",
    "arial",
    "menlo",
    "courier",
)
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)


def text_size(
    text: str,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> tuple[int, int]:
    font = _load_font(font_family=font_family, font_size_px=font_size_px)
    if not text:
        _, top, _, bottom = font.getbbox("Ay")
        return (0, max(1, int(bottom - top)))
    left, top, right, bottom = font.getbbox(text)
    w = max(1, int(right - left))
    h = max(1, int(bottom - top))
    if _quarter_turns(rotate_deg) % 2 == 1:
        return (h, w)
    return (w, h)


def render_text_mask(
    text: str,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> np.ndarray:
    font = _load_font(font_family=font_family, font_size_px=font_size_px)
    mask = _render_mask(text, font)
    turns = _quarter_turns(rotate_deg)
    if turns:
        mask = np.rot90(mask, k=turns)
    return mask


def blend_coverage(dst: np.ndarray, x: int, y: int, coverage: np.ndarray, color: tuple[int, int, int, int]) -> None:
    """Composite ``color`` onto ``dst`` at ``(x, y)`` weighted by an 8-bit coverage mask."""
    h, w = coverage.shape
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    cov = coverage[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
    src_alpha = (color[3] / 255.0) * cov
    if not np.any(src_alpha > 0):
        return

    patch = dst[y0:y1, x0:x1]
    dst_rgb = patch[:, :, :3].astype(np.float32)
    dst_alpha = patch[:, :, 3].astype(np.float32) / 255.0
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)

    patch[:, :, :3] = np.clip(out_rgb_num / safe_alpha[:, :, None], 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.clip(out_alpha * 255.0, 0, 255).astype(np.uint8)


@lru_cache(maxsize=256)
def _render_mask(text: str, font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> np.ndarray:
    if not text:
        return np.zeros((1, 1), dtype=np.uint8)
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    mask = np.asarray(image, dtype=np.uint8)
    mask.flags.writeable = False
    return mask


@lru_cache(maxsize=16)
def _load_font(font_family: str, font_size_px: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, int(round(font_size_px)))
    font_path = _resolve_font_path(font_family)
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size=size)
        except OSError as exc:
            LOGGER.warning("could not load font %s: %s", font_path, exc)
    try:
        return ImageFont.load_default(size=size)
    except TypeError:
        # Pillow < 10.1 has no sized default font.
        return ImageFont.load_default()


def _resolve_font_path(font_family: str) -> Path | None:
    wanted = font_family.strip().lower() or DEFAULT_FONT_FAMILY.lower()
    candidates: list[Path] = []
    for base in FONT_DIRS:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf"):
            candidates.extend(sorted(base.rglob(ext)))

    for pattern in (wanted,) + FONT_FALLBACK_PATTERNS:
        p = pattern.replace(" ", "")
        for path in candidates:
            if p in path.name.lower().replace(" ", ""):
                return path
    return None


def _quarter_turns(rotate_deg: int) -> int:
    if rotate_deg % 90 != 0:
        raise ValueError("rotate_deg must be a multiple of 90")
    return (rotate_deg // 90) % 4
