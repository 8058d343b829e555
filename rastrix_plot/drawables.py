from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Union

import numpy as np

from rastrix_core.errors import MissingCollaboratorError
from rastrix_core.raster import draw_circle_outline, draw_point, fill_circle, fill_polygon, stroke_polyline, stroke_shape
from rastrix_core.render.color import RGBA, WHITE, ColorLike, to_color
from rastrix_core.render.renderer import Renderer
from rastrix_core.viewport import DEFAULT_FIT_PADDING, Viewport, WorldBounds
from rastrix_plot.transform import Transform2D


Point = tuple[float, float]
TextAnchor = Literal["world", "canvas"]


class _Drawable:
    def draw(self, renderer: Renderer, viewport: Viewport | None) -> None:
        draw_shape(renderer, viewport, self)  # type: ignore[arg-type]

    def bounds(self) -> WorldBounds | None:
        return shape_bounds(self)  # type: ignore[arg-type]


@dataclass(frozen=True)
class LineShape(_Drawable):
    p1: Point
    p2: Point
    color: ColorLike = "yellow"
    width: int = 2
    transform: Transform2D = field(default_factory=Transform2D)


@dataclass(frozen=True)
class CircleShape(_Drawable):
    center: Point = (0.0, 0.0)
    radius: float = 1.0
    color: ColorLike = "white"
    fill: bool = False
    fill_color: ColorLike | None = None
    transform: Transform2D = field(default_factory=Transform2D)


@dataclass(frozen=True)
class PolygonShape(_Drawable):
    points: tuple[Point, ...]
    color: ColorLike = "yellow"
    fill: bool = True
    fill_color: ColorLike | None = "rgba(255,255,0,0.5)"
    width: int = 1
    transform: Transform2D = field(default_factory=Transform2D)


@dataclass(frozen=True)
class PointShape(_Drawable):
    pos: Point
    color: ColorLike = "white"
    marker: Literal["circle", "cross", "square"] = "circle"
    size: float = 3
    transform: Transform2D = field(default_factory=Transform2D)


@dataclass(frozen=True)
class TextShape(_Drawable):
    text: str
    pos: Point
    color: str = "white"
    font: str = "14px sans-serif"
    align: str = "left"
    baseline: str = "alphabetic"
    anchor: TextAnchor = "world"
    transform: Transform2D = field(default_factory=Transform2D)


@dataclass(frozen=True)
class FunctionShape(_Drawable):
    """Polyline through data points, optionally filled down to `baseline_y`."""

    data: tuple[Point, ...]
    color: ColorLike = "red"
    fill: bool = False
    fill_color: ColorLike | None = "rgba(255,0,0,0.3)"
    baseline_y: float = 0.0
    width: int = 1


Shape = Union[LineShape, CircleShape, PolygonShape, PointShape, TextShape, FunctionShape]


def _color(value: ColorLike | None, fallback: ColorLike | None = None) -> RGBA:
    return to_color(value if value is not None else fallback, fallback=WHITE)


def draw_shape(renderer: Renderer, viewport: Viewport | None, shape: Shape) -> None:
    if viewport is None:
        raise MissingCollaboratorError(f"{type(shape).__name__} cannot be drawn without a viewport")
    buf = renderer.buffer
    to_canvas = viewport.world_to_canvas

    if isinstance(shape, LineShape):
        p0 = to_canvas(*shape.transform.apply(shape.p1))
        p1 = to_canvas(*shape.transform.apply(shape.p2))
        stroke_polyline(buf, [p0, p1], _color(shape.color), width=max(1, int(shape.width)))
        return
    if isinstance(shape, CircleShape):
        center = to_canvas(*shape.transform.apply(shape.center))
        sx, sy = viewport.scale()
        radius_px = shape.radius * (sx if viewport.aspect.uniform else (sx + sy) * 0.5)
        if shape.fill:
            fill_circle(buf, center, radius_px, _color(shape.fill_color, shape.color))
        draw_circle_outline(buf, center, radius_px, _color(shape.color))
        return
    if isinstance(shape, PolygonShape):
        pts = [to_canvas(*shape.transform.apply(p)) for p in shape.points]
        if shape.fill:
            fill_polygon(buf, pts, _color(shape.fill_color, shape.color))
        stroke_shape(buf, pts, _color(shape.color), width=shape.width)
        return
    if isinstance(shape, PointShape):
        pos = to_canvas(*shape.transform.apply(shape.pos))
        draw_point(buf, pos, _color(shape.color), marker=shape.marker, size=shape.size)
        return
    if isinstance(shape, TextShape):
        if shape.anchor == "canvas":
            pos = shape.pos
        else:
            pos = to_canvas(*shape.transform.apply(shape.pos))
        renderer.draw_text(shape.text, pos, shape.color, shape.font, shape.align, shape.baseline)
        return
    if isinstance(shape, FunctionShape):
        if not shape.data:
            return
        data = np.asarray(shape.data, dtype=np.float64).reshape(-1, 2)
        xs, ys = viewport.world_to_canvas_many(data[:, 0], data[:, 1])
        pts = list(zip(xs.tolist(), ys.tolist()))
        stroke_polyline(buf, pts, _color(shape.color), width=shape.width)
        if shape.fill:
            first_x = shape.data[0][0]
            last_x = shape.data[-1][0]
            area = pts + [to_canvas(last_x, shape.baseline_y), to_canvas(first_x, shape.baseline_y)]
            fill_polygon(buf, area, _color(shape.fill_color, shape.color))
        return
    raise TypeError(f"unsupported shape: {type(shape)!r}")


def shape_bounds(shape: Shape) -> WorldBounds | None:
    """World-space bounding box of a shape, or None when it has no world extent."""
    if isinstance(shape, LineShape):
        return WorldBounds.from_points([shape.transform.apply(shape.p1), shape.transform.apply(shape.p2)])
    if isinstance(shape, CircleShape):
        cx, cy = shape.transform.apply(shape.center)
        r = abs(shape.radius)
        return WorldBounds(cx - r, cx + r, cy - r, cy + r)
    if isinstance(shape, PolygonShape):
        return WorldBounds.from_points(shape.transform.apply(p) for p in shape.points)
    if isinstance(shape, PointShape):
        return WorldBounds.from_points([shape.transform.apply(shape.pos)])
    if isinstance(shape, TextShape):
        if shape.anchor == "canvas":
            return None
        return WorldBounds.from_points([shape.transform.apply(shape.pos)])
    if isinstance(shape, FunctionShape):
        return WorldBounds.from_points(shape.data)
    return None


def auto_scale(viewport: Viewport, shapes: Iterable[Any], padding: float = DEFAULT_FIT_PADDING) -> WorldBounds | None:
    """Fit the viewport's world to a square span around every shape's bounds."""
    bounds = [shape_bounds(s) for s in shapes]
    return viewport.fit_to_bounds([b for b in bounds if b is not None], padding=padding, mode="square")
