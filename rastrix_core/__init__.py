from rastrix_core.config import RenderConfig, load_render_config
from rastrix_core.errors import MissingCollaboratorError, RastrixError
from rastrix_core.render import PixelBuffer, PresentEvent, Renderer, TensorSurface, blend, parse_color, to_color
from rastrix_core.text import GlyphBitmap, GlyphCache, LRUCache
from rastrix_core.ticks import compute_covering_ticks, compute_ticks, format_ticks_for_axis
from rastrix_core.viewport import AspectPolicy, Viewport, ViewportRect, WorldBounds, aspect_layout, inset_layout

__all__ = [
    "AspectPolicy",
    "GlyphBitmap",
    "GlyphCache",
    "LRUCache",
    "MissingCollaboratorError",
    "PixelBuffer",
    "PresentEvent",
    "RastrixError",
    "RenderConfig",
    "Renderer",
    "TensorSurface",
    "Viewport",
    "ViewportRect",
    "WorldBounds",
    "aspect_layout",
    "blend",
    "compute_covering_ticks",
    "compute_ticks",
    "format_ticks_for_axis",
    "inset_layout",
    "load_render_config",
    "parse_color",
    "to_color",
]
