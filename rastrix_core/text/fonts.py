from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import re

from PIL import ImageFont


DEFAULT_FONT = "12px sans-serif"
DEFAULT_FONT_SIZE_PX = 12.0
DEFAULT_FONT_FAMILY = "sans-serif"

GENERIC_FAMILY_PATTERNS: dict[str, tuple[str, ...]] = {
    "sans-serif": ("dejavusans", "dejavu sans", "liberationsans", "arial", "helvetica", "verdana"),
    "serif": ("dejavuserif", "liberationserif", "times new roman", "times", "georgia"),
    "monospace": ("dejavusansmono", "dejavu sans mono", "liberationmono", "menlo", "monaco", "courier new", "courier"),
}
BOLD_SUFFIXES = ("bold", "-bold", "bd")

FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path.home() / ".fonts",
)

_SIZE_RE = re.compile(r"^(\d+(?:\.\d+)?)(px|pt)?$")


@dataclass(frozen=True)
class FontDescriptor:
    """CSS-like font shorthand reduced to what the glyph rasterizer needs."""

    family: str = DEFAULT_FONT_FAMILY
    size_px: float = DEFAULT_FONT_SIZE_PX
    bold: bool = False

    @classmethod
    def parse(cls, spec: str | None) -> "FontDescriptor":
        if not spec or not spec.strip():
            return cls()
        size_px = DEFAULT_FONT_SIZE_PX
        bold = False
        family_parts: list[str] = []
        for token in spec.strip().split():
            lowered = token.lower()
            match = _SIZE_RE.match(lowered)
            if match and not family_parts:
                value = float(match.group(1))
                size_px = value * (4.0 / 3.0) if match.group(2) == "pt" else value
            elif lowered in ("bold", "bolder") or (lowered.isdigit() and int(lowered) >= 600):
                bold = True
            elif lowered in ("normal", "italic", "oblique", "lighter") or lowered.isdigit():
                continue
            else:
                family_parts.append(token)
        family = " ".join(family_parts).split(",")[0].strip().strip("'\"") or DEFAULT_FONT_FAMILY
        return cls(family=family, size_px=max(1.0, size_px), bold=bold)


def load_font(spec: str | None) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    descriptor = FontDescriptor.parse(spec)
    return _load_font(descriptor.family.lower(), descriptor.size_px, descriptor.bold)


@lru_cache(maxsize=64)
def _load_font(family: str, size_px: float, bold: bool) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, int(round(size_px)))
    font_path = resolve_font_path(family, bold=bold)
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size=size)
        except OSError:
            pass
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=64)
def resolve_font_path(family: str, *, bold: bool = False) -> Path | None:
    wanted = family.strip().lower() or DEFAULT_FONT_FAMILY
    patterns = GENERIC_FAMILY_PATTERNS.get(wanted, (wanted,) + GENERIC_FAMILY_PATTERNS["sans-serif"])

    candidates: list[Path] = []
    for base in FONT_DIRS:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(sorted(base.rglob(ext)))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        matches = [path for path in candidates if p in path.stem.lower().replace(" ", "")]
        if not matches:
            continue
        styled = [path for path in matches if _is_bold(path) == bold and not _is_styled(path)]
        if styled:
            return min(styled, key=lambda path: len(path.stem))
        return min(matches, key=lambda path: len(path.stem))
    return None


def _is_bold(path: Path) -> bool:
    stem = path.stem.lower()
    return stem.endswith(BOLD_SUFFIXES)


def _is_styled(path: Path) -> bool:
    stem = path.stem.lower()
    return any(word in stem for word in ("oblique", "italic", "condensed", "light", "extralight"))
