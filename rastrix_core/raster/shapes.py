from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from rastrix_core.raster.lines import Point, stroke_shape
from rastrix_core.render.color import RGBA
from rastrix_core.render.pixel_buffer import PixelBuffer


DEFAULT_CIRCLE_SEGMENTS = 48


def fill_circle(buf: PixelBuffer, center: Point, radius: float, color: RGBA) -> None:
    cx, cy = float(center[0]), float(center[1])
    if not (radius > 0) or not math.isfinite(radius) or not (math.isfinite(cx) and math.isfinite(cy)):
        return
    x_min = max(0, int(math.floor(cx - radius)))
    x_max = min(buf.width - 1, int(math.ceil(cx + radius)))
    y_min = max(0, int(math.floor(cy - radius)))
    y_max = min(buf.height - 1, int(math.ceil(cy + radius)))
    if x_min > x_max or y_min > y_max:
        return
    dx = np.arange(x_min, x_max + 1, dtype=np.float64) - cx
    dy = np.arange(y_min, y_max + 1, dtype=np.float64) - cy
    inside = dx[None, :] * dx[None, :] + dy[:, None] * dy[:, None] <= radius * radius
    buf.blend_mask(x_min, y_min, inside, color)


def draw_circle_outline(
    buf: PixelBuffer,
    center: Point,
    radius: float,
    color: RGBA,
    width: float = 1,
    segments: int = DEFAULT_CIRCLE_SEGMENTS,
) -> None:
    if not (radius > 0) or segments < 3:
        return
    cx, cy = center
    pts = [
        (cx + radius * math.cos(2.0 * math.pi * i / segments), cy + radius * math.sin(2.0 * math.pi * i / segments))
        for i in range(segments)
    ]
    stroke_shape(buf, pts, color, width=width)


def fill_polygon(buf: PixelBuffer, points: Sequence[Point], color: RGBA) -> None:
    """Scanline fill with a half-open edge test (ymin <= y < ymax) so shared vertices count once."""
    pts = [(float(x), float(y)) for x, y in points]
    n = len(pts)
    if n < 3 or not all(math.isfinite(x) and math.isfinite(y) for x, y in pts):
        return

    edges: list[tuple[float, float, float, float]] = []
    min_y = math.inf
    max_y = -math.inf
    for i in range(n):
        x1, y1 = pts[i]
        x2, y2 = pts[(i + 1) % n]
        if y1 == y2:
            continue
        ymin, ymax = (y1, y2) if y1 < y2 else (y2, y1)
        x_at_ymin = x1 if y1 < y2 else x2
        edges.append((ymin, ymax, x_at_ymin, (x2 - x1) / (y2 - y1)))
        min_y = min(min_y, ymin)
        max_y = max(max_y, ymax)
    if not edges:
        return

    y_start = max(0, int(math.floor(min_y)))
    y_end = min(buf.height - 1, int(math.ceil(max_y)))
    for y in range(y_start, y_end + 1):
        crossings = sorted(x + (y - ymin) * inv_slope for ymin, ymax, x, inv_slope in edges if ymin <= y < ymax)
        for k in range(0, len(crossings) - 1, 2):
            buf.blend_span(y, int(math.floor(crossings[k])), int(math.ceil(crossings[k + 1])), color)
