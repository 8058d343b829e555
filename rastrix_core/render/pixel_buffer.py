from __future__ import annotations

import math
from typing import Any

import numpy as np

from rastrix_core.render.color import BLACK, RGBA, ColorLike, blend, blend_arrays, pack_rgba, to_color, unpack_rgba


DEFAULT_CLEAR_COLOR = "#131313"


class PixelBuffer:
    """CPU-side RGBA raster with blending puts and alpha blits.

    `pixels` is a (height, width, 4) uint8 array; `px32` aliases the same
    memory as (height, width) uint32 for uniform fills. Writes outside the
    raster are dropped silently.
    """

    def __init__(self, width: int, height: int) -> None:
        self._allocate(width, height)

    def _allocate(self, width: int, height: int) -> None:
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        self.pixels = np.zeros((self.height, self.width, 4), dtype=np.uint8)
        self.px32 = self.pixels.view(np.uint32).reshape(self.height, self.width)

    @property
    def shape(self) -> tuple[int, int]:
        return (self.width, self.height)

    def resize(self, width: int, height: int) -> None:
        """Reallocate the raster. Previous content is discarded."""
        self._allocate(width, height)

    def clear(self, color: ColorLike = DEFAULT_CLEAR_COLOR) -> None:
        self.px32.fill(pack_rgba(to_color(color, fallback=BLACK)))

    def in_bounds(self, x: float, y: float) -> bool:
        return _finite(x, y) and 0 <= x < self.width and 0 <= y < self.height

    def get_pixel(self, x: float, y: float) -> RGBA | None:
        if not self.in_bounds(x, y):
            return None
        return unpack_rgba(int(self.px32[int(y), int(x)]))

    def put_pixel(self, x: float, y: float, color: RGBA) -> None:
        if not self.in_bounds(x, y):
            return
        self.pixels[int(y), int(x)] = color

    def put_pixel_blend(self, x: float, y: float, color: RGBA) -> None:
        if not self.in_bounds(x, y) or color[3] <= 0:
            return
        x = int(x)
        y = int(y)
        self.pixels[y, x] = blend(self.pixels[y, x].tolist(), color)

    def blend_span(self, y: float, x0: float, x1: float, color: RGBA) -> None:
        """Blend `color` into row `y` over the inclusive span [x0, x1]."""
        if not _finite(y, x0, x1) or y < 0 or y >= self.height or color[3] <= 0:
            return
        y = int(y)
        xa = max(0, min(int(x0), int(x1)))
        xb = min(self.width - 1, max(int(x0), int(x1)))
        if xa > xb:
            return
        segment = self.pixels[y, xa : xb + 1]
        segment[:] = blend_arrays(segment, color[:3], color[3])

    def blend_mask(self, x0: float, y0: float, mask: np.ndarray, color: RGBA) -> None:
        """Blend `color` into the pixels selected by a boolean mask whose top-left sits at (x0, y0)."""
        if color[3] <= 0 or mask.size == 0 or not _finite(x0, y0):
            return
        clip = self._clip(int(x0), int(y0), mask.shape[1], mask.shape[0])
        if clip is None:
            return
        dx0, dy0, dx1, dy1, sx0, sy0 = clip
        sub = mask[sy0 : sy0 + (dy1 - dy0), sx0 : sx0 + (dx1 - dx0)]
        if not np.any(sub):
            return
        view = self.pixels[dy0:dy1, dx0:dx1]
        view[sub] = blend_arrays(view[sub], color[:3], color[3])

    def blit(self, src: Any, dx: float, dy: float) -> None:
        """Composite an RGBA raster onto this buffer at (dx, dy), clipped to the overlap."""
        src_pixels = _as_rgba_array(src)
        if src_pixels is None or not _finite(dx, dy):
            return
        h, w, _ = src_pixels.shape
        clip = self._clip(int(math.floor(dx + 0.5)), int(math.floor(dy + 0.5)), w, h)
        if clip is None:
            return
        dx0, dy0, dx1, dy1, sx0, sy0 = clip
        patch = src_pixels[sy0 : sy0 + (dy1 - dy0), sx0 : sx0 + (dx1 - dx0)]
        view = self.pixels[dy0:dy1, dx0:dx1]
        view[:] = blend_arrays(view, patch[..., :3], patch[..., 3])

    def to_array(self) -> np.ndarray:
        return self.pixels.copy()

    def _clip(self, x: int, y: int, w: int, h: int) -> tuple[int, int, int, int, int, int] | None:
        x0 = max(0, x)
        y0 = max(0, y)
        x1 = min(self.width, x + w)
        y1 = min(self.height, y + h)
        if x1 <= x0 or y1 <= y0:
            return None
        return (x0, y0, x1, y1, x0 - x, y0 - y)


def _as_rgba_array(src: Any) -> np.ndarray | None:
    pixels = getattr(src, "pixels", src)
    if not isinstance(pixels, np.ndarray):
        return None
    if pixels.ndim != 3 or pixels.shape[2] != 4 or pixels.size == 0:
        return None
    if pixels.dtype != np.uint8:
        pixels = np.clip(pixels, 0, 255).astype(np.uint8)
    return pixels


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)
