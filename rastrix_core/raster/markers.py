from __future__ import annotations

import logging
import math
from typing import Literal

from rastrix_core.raster.lines import Point, draw_line, stroke_shape
from rastrix_core.raster.shapes import fill_circle
from rastrix_core.render.color import RGBA
from rastrix_core.render.pixel_buffer import PixelBuffer


LOGGER = logging.getLogger(__name__)

MarkerType = Literal["circle", "cross", "square"]


def draw_point(
    buf: PixelBuffer,
    pos: Point,
    color: RGBA,
    marker: MarkerType = "circle",
    size: float = 3,
) -> None:
    x, y = pos
    if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(size)):
        return
    if marker == "circle":
        fill_circle(buf, pos, size, color)
    elif marker == "cross":
        draw_line(buf, (x - size, y), (x + size, y), color)
        draw_line(buf, (x, y - size), (x, y + size), color)
    elif marker == "square":
        half = int(size)
        stroke_shape(buf, [(x - half, y - half), (x + half, y - half), (x + half, y + half), (x - half, y + half)], color)
    else:
        LOGGER.debug("skipping point with unknown marker type %r", marker)
