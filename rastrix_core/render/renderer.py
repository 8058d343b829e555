from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any, Protocol

from rastrix_core.render.color import RGBA, ColorLike
from rastrix_core.render.pixel_buffer import DEFAULT_CLEAR_COLOR, PixelBuffer
from rastrix_core.render.surface import PresentEvent, TensorSurface
from rastrix_core.text.fonts import DEFAULT_FONT
from rastrix_core.text.glyph_cache import GlyphCache

if TYPE_CHECKING:
    from rastrix_core.config import RenderConfig


LOGGER = logging.getLogger(__name__)

RENDERER_GLYPH_CAPACITY = 512

_ALIGN_FACTORS = {"left": 0.0, "start": 0.0, "center": -0.5, "right": -1.0, "end": -1.0}
_BASELINE_FACTORS = {
    "top": 0.0,
    "hanging": 0.0,
    "middle": -0.5,
    "bottom": -1.0,
    "alphabetic": -1.0,
    "ideographic": -1.0,
}


class Renderable(Protocol):
    def draw(self, renderer: "Renderer", viewport: Any) -> None: ...


class Renderer:
    """Owns one pixel buffer and the glyph cache that feeds its text path."""

    def __init__(
        self,
        width: int,
        height: int,
        *,
        glyph_capacity: int = RENDERER_GLYPH_CAPACITY,
        background: ColorLike = DEFAULT_CLEAR_COLOR,
        surface: TensorSurface | None = None,
    ) -> None:
        self.buffer = PixelBuffer(width, height)
        self.glyphs = GlyphCache(glyph_capacity)
        self.background = background
        self.surface = surface
        self.renderables: list[Renderable] = []
        self.buffer.clear(background)

    @classmethod
    def from_config(cls, config: "RenderConfig", *, surface: TensorSurface | None = None) -> "Renderer":
        return cls(
            config.width,
            config.height,
            glyph_capacity=config.glyph_capacity,
            background=config.background,
            surface=surface,
        )

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def size(self) -> tuple[int, int]:
        return (self.buffer.width, self.buffer.height)

    def resize(self, width: int, height: int) -> None:
        """Reallocate the buffer (and attached surface); callers must redraw everything."""
        self.buffer.resize(width, height)
        if self.surface is not None:
            self.surface.resize(self.buffer.width, self.buffer.height)
        LOGGER.debug("renderer resized to %dx%d", self.buffer.width, self.buffer.height)

    def clear(self, color: ColorLike | None = None) -> None:
        self.buffer.clear(self.background if color is None else color)

    def put_pixel(self, pos: tuple[float, float], color: RGBA) -> None:
        self.buffer.put_pixel(pos[0], pos[1], color)

    def put_pixel_blend(self, pos: tuple[float, float], color: RGBA) -> None:
        self.buffer.put_pixel_blend(pos[0], pos[1], color)

    def blit(self, src: Any, dx: float, dy: float) -> None:
        self.buffer.blit(src, dx, dy)

    def draw_text(
        self,
        text: str,
        pos: tuple[float, float],
        color: ColorLike = "#fff",
        font: str = DEFAULT_FONT,
        align: str = "left",
        baseline: str = "alphabetic",
    ) -> None:
        """Blit cached glyphs for `text` anchored at `pos`.

        Baseline offsets use the full bitmap height rather than font metrics,
        so `alphabetic` sits the bitmap's bottom edge on `pos`.
        """
        if not (math.isfinite(pos[0]) and math.isfinite(pos[1])):
            return
        entry = self.glyphs.get_or_render(text, font, color)
        ox = _ALIGN_FACTORS.get(align, 0.0) * entry.width
        oy = _BASELINE_FACTORS.get(baseline, -1.0) * entry.height
        self.buffer.blit(entry, math.floor(pos[0] + ox + 0.5), math.floor(pos[1] + oy + 0.5))

    def add_renderable(self, obj: Renderable) -> None:
        self.renderables.append(obj)

    def render_all(self, viewport: Any) -> PresentEvent | None:
        self.clear()
        for obj in self.renderables:
            obj.draw(self, viewport)
        return self.present()

    def present(self) -> PresentEvent | None:
        if self.surface is None:
            return None
        return self.surface.submit_frame(self.buffer.pixels)
