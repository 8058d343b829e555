from __future__ import annotations

import re
from typing import Sequence, Union

import numpy as np


RGBA = tuple[int, int, int, int]
ColorLike = Union[str, Sequence[float], RGBA]

NAMED: dict[str, RGBA] = {
    "black": (0, 0, 0, 255),
    "white": (255, 255, 255, 255),
    "red": (255, 0, 0, 255),
    "green": (0, 255, 0, 255),
    "blue": (0, 0, 255, 255),
    "yellow": (255, 255, 0, 255),
    "cyan": (0, 255, 255, 255),
    "magenta": (255, 0, 255, 255),
    "gray": (128, 128, 128, 255),
    "grey": (128, 128, 128, 255),
    "orange": (255, 165, 0, 255),
    "transparent": (0, 0, 0, 0),
}

WHITE: RGBA = NAMED["white"]
BLACK: RGBA = NAMED["black"]
TRANSPARENT: RGBA = NAMED["transparent"]

_NUMBER_RE = re.compile(r"\d+\.?\d*|\.\d+")
_HEX_DIGITS = set("0123456789abcdef")


def clamp255(value: float) -> int:
    if value < 0:
        return 0
    if value > 255:
        return 255
    return int(value)


def round_half_up(value: float) -> int:
    return clamp255(np.floor(value + 0.5))


def parse_color(value: ColorLike | None) -> RGBA | None:
    """Parse a CSS-like color into an RGBA tuple. Returns None when the input is not a color."""
    if value is None:
        return None
    if isinstance(value, str):
        return _parse_color_string(value)
    try:
        channels = [float(v) for v in value]
    except (TypeError, ValueError):
        return None
    if len(channels) == 3:
        channels.append(255.0)
    if len(channels) != 4 or not all(np.isfinite(channels)):
        return None
    r, g, b, a = (clamp255(c) for c in channels)
    return (r, g, b, a)


def to_color(value: ColorLike | None, fallback: RGBA = WHITE) -> RGBA:
    parsed = parse_color(value)
    return fallback if parsed is None else parsed


def with_alpha(color: RGBA, alpha: float) -> RGBA:
    r, g, b, a = color
    factor = max(0.0, min(1.0, alpha))
    return (r, g, b, round_half_up(a * factor))


def _parse_color_string(value: str) -> RGBA | None:
    s = value.strip().lower()
    if not s:
        return None
    if s in NAMED:
        return NAMED[s]
    if s.startswith("#"):
        return _parse_hex(s[1:])
    if s.startswith("rgb"):
        nums = _NUMBER_RE.findall(s)
        if len(nums) not in (3, 4):
            return None
        r = clamp255(float(nums[0]))
        g = clamp255(float(nums[1]))
        b = clamp255(float(nums[2]))
        if len(nums) == 3:
            return (r, g, b, 255)
        alpha = max(0.0, min(1.0, float(nums[3])))
        return (r, g, b, round_half_up(alpha * 255.0))
    return None


def _parse_hex(digits: str) -> RGBA | None:
    if not digits or not set(digits) <= _HEX_DIGITS:
        return None
    if len(digits) in (3, 4):
        channels = [int(d * 2, 16) for d in digits]
    elif len(digits) in (6, 8):
        channels = [int(digits[i : i + 2], 16) for i in range(0, len(digits), 2)]
    else:
        return None
    if len(channels) == 3:
        channels.append(255)
    r, g, b, a = channels
    return (r, g, b, a)


def blend(dst: Sequence[int], src: Sequence[int]) -> RGBA:
    """Porter-Duff source-over of straight-alpha `src` onto `dst`."""
    dr, dg, db, da = (int(c) for c in dst)
    sr, sg, sb, sa = (int(c) for c in src)
    if sa <= 0:
        return (dr, dg, db, da)
    sna = sa / 255.0
    dna = da / 255.0
    out_a = sna + dna * (1.0 - sna)
    if out_a <= 0.0:
        return TRANSPARENT
    inv = 1.0 - sna
    r = (sr * sna + dr * dna * inv) / out_a
    g = (sg * sna + dg * dna * inv) / out_a
    b = (sb * sna + db * dna * inv) / out_a
    return (round_half_up(r), round_half_up(g), round_half_up(b), round_half_up(out_a * 255.0))


def blend_arrays(dst: np.ndarray, src_rgb: np.ndarray, src_alpha: np.ndarray) -> np.ndarray:
    """Vectorized source-over.

    `dst` is an (..., 4) uint8 array, `src_rgb` broadcasts against (..., 3) and
    `src_alpha` against (...) with values in 0..255. Returns the composited
    uint8 array; entries whose source alpha is zero keep `dst` exactly.
    """
    dst_f = dst.astype(np.float64)
    sna = np.broadcast_to(np.asarray(src_alpha, dtype=np.float64) / 255.0, dst.shape[:-1])
    dna = dst_f[..., 3] / 255.0
    out_a = sna + dna * (1.0 - sna)
    safe_a = np.where(out_a > 0.0, out_a, 1.0)
    inv = 1.0 - sna
    src_rgb_f = np.asarray(src_rgb, dtype=np.float64)
    num = src_rgb_f * sna[..., None] + dst_f[..., :3] * dna[..., None] * inv[..., None]
    out = np.empty(dst.shape, dtype=np.float64)
    out[..., :3] = num / safe_a[..., None]
    out[..., 3] = out_a * 255.0
    out = np.clip(np.floor(out + 0.5), 0, 255)
    out[out_a <= 0.0] = 0.0
    result = out.astype(np.uint8)
    untouched = sna <= 0.0
    if np.any(untouched):
        result[untouched] = dst[untouched]
    return result


def pack_rgba(color: Sequence[int]) -> int:
    """Pack a color into the uint32 layout of an RGBA byte quad in native byte order."""
    quad = np.asarray([clamp255(c) for c in color[:4]], dtype=np.uint8)
    return int(quad.view(np.uint32)[0])


def unpack_rgba(packed: int) -> RGBA:
    quad = np.asarray([packed], dtype=np.uint32).view(np.uint8)
    r, g, b, a = (int(c) for c in quad)
    return (r, g, b, a)
