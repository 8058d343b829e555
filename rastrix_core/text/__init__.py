from .fonts import DEFAULT_FONT, FontDescriptor, load_font
from .glyph_cache import GlyphBitmap, GlyphCache, glyph_key, render_glyph
from .lru import LRUCache

__all__ = [
    "DEFAULT_FONT",
    "FontDescriptor",
    "GlyphBitmap",
    "GlyphCache",
    "LRUCache",
    "glyph_key",
    "load_font",
    "render_glyph",
]
