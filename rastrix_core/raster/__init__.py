from .lines import draw_line, draw_thick_line, stroke_polyline, stroke_shape
from .markers import draw_point
from .shapes import draw_circle_outline, fill_circle, fill_polygon

__all__ = [
    "draw_circle_outline",
    "draw_line",
    "draw_point",
    "draw_thick_line",
    "fill_circle",
    "fill_polygon",
    "stroke_polyline",
    "stroke_shape",
]
