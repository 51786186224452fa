from .canvas import RasterCanvas, draw_pixel, fill_region, new_canvas
from .draw_shapes import draw_segment, marker_mask
from .draw_text import blend_coverage, render_text_mask, text_size

__all__ = [
    "RasterCanvas",
    "blend_coverage",
    "draw_pixel",
    "draw_segment",
    "fill_region",
    "marker_mask",
    "new_canvas",
    "render_text_mask",
    "text_size",
]
