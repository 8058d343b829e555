from rastrix_plot.drawables import (
    CircleShape,
    FunctionShape,
    LineShape,
    PointShape,
    PolygonShape,
    Shape,
    TextShape,
    auto_scale,
    draw_shape,
    shape_bounds,
)
from rastrix_plot.graph import Graph, GraphOptions, draw_x_intercepts, find_x_intercepts
from rastrix_plot.transform import Transform2D

__all__ = [
    "CircleShape",
    "FunctionShape",
    "Graph",
    "GraphOptions",
    "LineShape",
    "PointShape",
    "PolygonShape",
    "Shape",
    "TextShape",
    "Transform2D",
    "auto_scale",
    "draw_shape",
    "draw_x_intercepts",
    "find_x_intercepts",
    "shape_bounds",
]
