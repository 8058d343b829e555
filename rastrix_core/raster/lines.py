from __future__ import annotations

import math
from typing import Sequence

from rastrix_core.render.color import RGBA
from rastrix_core.render.pixel_buffer import PixelBuffer


Point = tuple[float, float]


def round_px(value: float) -> int:
    return int(math.floor(value + 0.5))


def draw_line(buf: PixelBuffer, p0: Point, p1: Point, color: RGBA) -> None:
    """Integer Bresenham between rounded endpoints, both inclusive, every pixel blended once.

    Zero-length lines (identical endpoints) draw nothing.
    """
    if not _finite(p0) or not _finite(p1):
        return
    if p0[0] == p1[0] and p0[1] == p1[1]:
        return
    x0, y0 = round_px(p0[0]), round_px(p0[1])
    x1, y1 = round_px(p1[0]), round_px(p1[1])

    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy
    while True:
        buf.put_pixel_blend(x0, y0, color)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x0 += sx
        if e2 < dx:
            err += dx
            y0 += sy


def stroke_polyline(
    buf: PixelBuffer,
    points: Sequence[Point],
    color: RGBA,
    width: float = 1,
    closed: bool = False,
) -> None:
    """Stroke consecutive segments.

    Widths above one are approximated with parallel Bresenham lines offset
    along each segment's normal, so corners show small gaps or overlaps.
    """
    pts = list(points)
    if len(pts) < 2:
        return
    segments = list(zip(pts, pts[1:]))
    if closed and len(pts) > 2:
        segments.append((pts[-1], pts[0]))
    for p0, p1 in segments:
        if width <= 1:
            draw_line(buf, p0, p1, color)
        else:
            _draw_offset_lines(buf, p0, p1, color, width)


def stroke_shape(buf: PixelBuffer, points: Sequence[Point], color: RGBA, width: float = 1) -> None:
    stroke_polyline(buf, points, color, width=width, closed=True)


def draw_thick_line(buf: PixelBuffer, p0: Point, p1: Point, color: RGBA, width: float = 1) -> None:
    stroke_polyline(buf, [p0, p1], color, width=width)


def _draw_offset_lines(buf: PixelBuffer, p0: Point, p1: Point, color: RGBA, width: float) -> None:
    ux = p1[0] - p0[0]
    uy = p1[1] - p0[1]
    length = math.hypot(ux, uy)
    if length == 0 or not math.isfinite(length):
        return
    nx = -uy / length
    ny = ux / length
    half = int(width // 2)
    for o in range(-half, half + 1):
        ox = nx * o
        oy = ny * o
        draw_line(buf, (p0[0] + ox, p0[1] + oy), (p1[0] + ox, p1[1] + oy), color)


def _finite(p: Point) -> bool:
    return math.isfinite(p[0]) and math.isfinite(p[1])
