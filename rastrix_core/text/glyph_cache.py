from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image, ImageDraw

from rastrix_core.render.color import WHITE, ColorLike, to_color
from rastrix_core.text.fonts import DEFAULT_FONT, load_font
from rastrix_core.text.lru import LRUCache


GLYPH_PADDING_PX = 2
DEFAULT_GLYPH_CAPACITY = 256

GlyphKey = tuple[str, str, str]


@dataclass(frozen=True)
class GlyphBitmap:
    width: int
    height: int
    pixels: np.ndarray


def glyph_key(text: str, font: str, color: ColorLike) -> GlyphKey:
    return (text, font, color if isinstance(color, str) else repr(tuple(color)))


def render_glyph(text: str, font: str = DEFAULT_FONT, color: ColorLike = "#fff") -> GlyphBitmap:
    """Rasterize `text` into a padded RGBA bitmap whose alpha carries the glyph coverage."""
    if not text:
        return GlyphBitmap(width=1, height=1, pixels=np.zeros((1, 1, 4), dtype=np.uint8))
    pil_font = load_font(font)
    left, _top, right, bottom = pil_font.getbbox(text)
    if hasattr(pil_font, "getmetrics"):
        ascent, descent = pil_font.getmetrics()
    else:
        ascent, descent = bottom, 0
    pad = GLYPH_PADDING_PX
    width = max(1, int(np.ceil(right - left))) + 2 * pad
    height = max(1, int(ascent + descent)) + 2 * pad

    mask = Image.new("L", (width, height), 0)
    ImageDraw.Draw(mask).text((pad - left, pad), text, fill=255, font=pil_font)
    coverage = np.asarray(mask, dtype=np.float64) / 255.0

    r, g, b, a = to_color(color, fallback=WHITE)
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = r
    pixels[..., 1] = g
    pixels[..., 2] = b
    pixels[..., 3] = np.clip(np.floor(coverage * a + 0.5), 0, 255).astype(np.uint8)
    return GlyphBitmap(width=width, height=height, pixels=pixels)


class GlyphCache:
    """Rendered text bitmaps keyed by (text, font, color), reused across frames."""

    def __init__(self, capacity: int = DEFAULT_GLYPH_CAPACITY) -> None:
        self._cache: LRUCache[GlyphKey, GlyphBitmap] = LRUCache(capacity)
        self.hits = 0
        self.misses = 0

    @property
    def capacity(self) -> int:
        return self._cache.capacity

    def get_or_render(self, text: str, font: str = DEFAULT_FONT, color: ColorLike = "#fff") -> GlyphBitmap:
        key = glyph_key(text, font, color)
        entry = self._cache.get(key)
        if entry is not None:
            self.hits += 1
            return entry
        self.misses += 1
        entry = render_glyph(text, font, color)
        self._cache.set(key, entry)
        return entry

    def clear(self) -> None:
        self._cache.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)
