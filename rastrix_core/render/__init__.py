from .color import BLACK, NAMED, RGBA, TRANSPARENT, WHITE, ColorLike, blend, parse_color, to_color, with_alpha
from .pixel_buffer import PixelBuffer
from .renderer import Renderer
from .surface import PresentEvent, TensorSurface

__all__ = [
    "BLACK",
    "NAMED",
    "RGBA",
    "TRANSPARENT",
    "WHITE",
    "ColorLike",
    "PixelBuffer",
    "PresentEvent",
    "Renderer",
    "TensorSurface",
    "blend",
    "parse_color",
    "to_color",
    "with_alpha",
]
