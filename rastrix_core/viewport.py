from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
from typing import TYPE_CHECKING, Any, Callable, Iterable, Protocol, Sequence, Union

import numpy as np

from rastrix_core.ticks import DEFAULT_NUM_TICKS, compute_ticks, widen_degenerate

if TYPE_CHECKING:
    from rastrix_core.config import RenderConfig


DEFAULT_FIT_PADDING = 0.05


class AspectPolicy(str, Enum):
    STRETCH = "stretch"
    FIT = "fit"
    COVER = "cover"

    @classmethod
    def coerce(cls, value: Union["AspectPolicy", str, bool, None]) -> "AspectPolicy":
        if isinstance(value, AspectPolicy):
            return value
        if value is None or value is False:
            return cls.STRETCH
        if value is True:
            return cls.FIT
        name = str(value).strip().lower()
        if name in ("stretch", "none", ""):
            return cls.STRETCH
        if name == "fit":
            return cls.FIT
        if name == "cover":
            return cls.COVER
        raise ValueError(f"unknown aspect policy: {value!r}")

    @property
    def uniform(self) -> bool:
        return self is not AspectPolicy.STRETCH


@dataclass(frozen=True)
class WorldBounds:
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def x_span(self) -> float:
        return self.x_max - self.x_min

    @property
    def y_span(self) -> float:
        return self.y_max - self.y_min

    @property
    def center(self) -> tuple[float, float]:
        return ((self.x_min + self.x_max) / 2.0, (self.y_min + self.y_max) / 2.0)

    def normalized(self) -> "WorldBounds":
        """Ordered limits with zero-width spans widened around their center (see `widen_degenerate`)."""
        x_min, x_max = _normalize_span(self.x_min, self.x_max)
        y_min, y_max = _normalize_span(self.y_min, self.y_max)
        return WorldBounds(x_min, x_max, y_min, y_max)

    def padded(self, padding: float) -> "WorldBounds":
        """Pad each side by a fraction of the span when `padding` < 1, else by `padding` world units."""
        pad_x = self.x_span * padding if padding < 1 else padding
        pad_y = self.y_span * padding if padding < 1 else padding
        return WorldBounds(self.x_min - pad_x, self.x_max + pad_x, self.y_min - pad_y, self.y_max + pad_y)

    def contains(self, x: float, y: float) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max

    @classmethod
    def coerce(cls, value: Any) -> "WorldBounds | None":
        if value is None:
            return None
        if isinstance(value, WorldBounds):
            return value
        try:
            x_min, x_max, y_min, y_max = (float(v) for v in value)
        except (TypeError, ValueError):
            return None
        return cls(x_min, x_max, y_min, y_max)

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> "WorldBounds | None":
        arr = np.asarray([(float(p[0]), float(p[1])) for p in points], dtype=np.float64)
        if arr.size == 0:
            return None
        arr = arr[np.all(np.isfinite(arr), axis=1)]
        if arr.size == 0:
            return None
        return cls(float(arr[:, 0].min()), float(arr[:, 0].max()), float(arr[:, 1].min()), float(arr[:, 1].max()))

    @classmethod
    def union(cls, bounds: Iterable[Any]) -> "WorldBounds | None":
        x_min = y_min = math.inf
        x_max = y_max = -math.inf
        for item in bounds:
            b = cls.coerce(item)
            if b is None or not all(math.isfinite(v) for v in (b.x_min, b.x_max, b.y_min, b.y_max)):
                continue
            x_min = min(x_min, b.x_min, b.x_max)
            x_max = max(x_max, b.x_min, b.x_max)
            y_min = min(y_min, b.y_min, b.y_max)
            y_max = max(y_max, b.y_min, b.y_max)
        if x_min > x_max:
            return None
        return cls(x_min, x_max, y_min, y_max)


def _normalize_span(lo: float, hi: float) -> tuple[float, float]:
    if lo > hi:
        lo, hi = hi, lo
    span = hi - lo
    if span > 0 and math.isfinite(span):
        return lo, hi
    center = (lo + hi) / 2.0 if math.isfinite(lo + hi) else 0.0
    return widen_degenerate(center)


@dataclass(frozen=True)
class ViewportRect:
    x: float
    y: float
    width: float
    height: float


Layout = Callable[[int, int], ViewportRect]


class SizedHost(Protocol):
    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...


def inset_layout(margin: float = 30.0) -> Layout:
    """Full host surface minus a uniform margin."""

    def layout(width: int, height: int) -> ViewportRect:
        return ViewportRect(margin, margin, width - 2 * margin, height - 2 * margin)

    return layout


def aspect_layout(target_aspect: float = 1.0, margin: float = 30.0) -> Layout:
    """Largest rectangle of `target_aspect` (width/height) anchored top-left, minus a margin."""
    if target_aspect <= 0:
        raise ValueError("target_aspect must be > 0")

    def layout(width: int, height: int) -> ViewportRect:
        w = float(width)
        h = float(height)
        if h > 0 and w / h > target_aspect:
            w = h * target_aspect
        else:
            h = w / target_aspect
        return ViewportRect(margin, margin, w - 2 * margin, h - 2 * margin)

    return layout


class Viewport:
    """Maps world coordinates to canvas pixels inside a viewport rectangle.

    The rectangle is static or recomputed from the host size on every read;
    world bounds persist until `set_world` or `fit_to_bounds` replaces them.
    Shapes drawn after a bounds change in the same frame see the new bounds.
    """

    def __init__(
        self,
        host: SizedHost | None,
        world: WorldBounds | Sequence[float] | None = None,
        rect: ViewportRect | Layout | None = None,
        aspect: AspectPolicy | str | bool = AspectPolicy.STRETCH,
        num_ticks: int = DEFAULT_NUM_TICKS,
    ) -> None:
        if host is None and not isinstance(rect, ViewportRect):
            raise ValueError("viewport needs a host unless a static rect is given")
        self.host = host
        self._rect = rect
        self.aspect = AspectPolicy.coerce(aspect)
        self.num_ticks = num_ticks
        self.x_ticks = np.empty(0, dtype=np.float64)
        self.y_ticks = np.empty(0, dtype=np.float64)
        self._world = WorldBounds(0.0, 1.0, 0.0, 1.0)
        self.set_world(WorldBounds.coerce(world) or self._world)

    @classmethod
    def from_config(cls, config: "RenderConfig", host: SizedHost) -> "Viewport":
        rect = inset_layout(config.margin) if config.margin > 0 else None
        return cls(host, world=config.world, rect=rect, aspect=config.aspect, num_ticks=config.num_ticks)

    @property
    def rect(self) -> ViewportRect:
        if isinstance(self._rect, ViewportRect):
            raw = self._rect
        elif self._rect is None:
            raw = ViewportRect(0.0, 0.0, float(self.host.width), float(self.host.height))
        else:
            raw = self._rect(self.host.width, self.host.height)
        # Collapsed layouts would zero the scale and break the inverse mapping.
        return ViewportRect(raw.x, raw.y, max(1.0, float(raw.width)), max(1.0, float(raw.height)))

    @rect.setter
    def rect(self, value: ViewportRect | Layout | None) -> None:
        self._rect = value

    @property
    def world(self) -> WorldBounds:
        return self._world

    @world.setter
    def world(self, bounds: WorldBounds) -> None:
        self.set_world(bounds)

    def set_world(self, bounds: WorldBounds | Sequence[float], num_ticks: int | None = None) -> None:
        coerced = WorldBounds.coerce(bounds)
        if coerced is None:
            raise ValueError(f"invalid world bounds: {bounds!r}")
        self._world = coerced.normalized()
        if num_ticks is not None:
            self.num_ticks = num_ticks
        self.x_ticks = compute_ticks(self._world.x_min, self._world.x_max, self.num_ticks)
        self.y_ticks = compute_ticks(self._world.y_min, self._world.y_max, self.num_ticks)

    def scale(self) -> tuple[float, float]:
        w = self._world
        vp = self.rect
        sx = vp.width / w.x_span
        sy = vp.height / w.y_span
        if self.aspect is AspectPolicy.FIT:
            s = min(sx, sy)
            return (s, s)
        if self.aspect is AspectPolicy.COVER:
            s = max(sx, sy)
            return (s, s)
        return (sx, sy)

    def _mapping(self) -> tuple[float, float, float, float]:
        w = self._world
        vp = self.rect
        sx, sy = self.scale()
        if self.aspect.uniform:
            ox = vp.x + (vp.width - sx * w.x_span) / 2.0
            oy = vp.y + (vp.height - sy * w.y_span) / 2.0
            return (sx, sy, ox, oy)
        return (sx, sy, vp.x, vp.y)

    def world_to_canvas(self, x: float, y: float) -> tuple[float, float]:
        sx, sy, ox, oy = self._mapping()
        w = self._world
        return (ox + (x - w.x_min) * sx, oy + (w.y_max - y) * sy)

    def canvas_to_world(self, px: float, py: float) -> tuple[float, float]:
        sx, sy, ox, oy = self._mapping()
        w = self._world
        return (w.x_min + (px - ox) / sx, w.y_max - (py - oy) / sy)

    def world_to_canvas_many(self, xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        sx, sy, ox, oy = self._mapping()
        w = self._world
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        return (ox + (xs - w.x_min) * sx, oy + (w.y_max - ys) * sy)

    def units_to_pixels(self, units: float) -> float:
        return units * self.scale()[0]

    def fit_to_bounds(
        self,
        bounds_list: Iterable[Any],
        padding: float = DEFAULT_FIT_PADDING,
        mode: str | None = None,
    ) -> WorldBounds | None:
        """Commit world bounds covering every entry of `bounds_list`.

        `mode` is "square" (equal spans around the union center), "fit"
        (widen one axis to the rect's pixel aspect) or "none". The default
        follows the aspect policy: "none" for stretch, "fit" otherwise.
        Returns the committed bounds, or None when nothing usable was given.
        """
        union = WorldBounds.union(bounds_list)
        if union is None:
            return None
        if mode is None:
            mode = "fit" if self.aspect.uniform else "none"
        if mode not in ("square", "fit", "none"):
            raise ValueError(f"unknown fit mode: {mode!r}")

        b = union.normalized().padded(padding)
        cx, cy = b.center
        half_w = b.x_span / 2.0
        half_h = b.y_span / 2.0
        if mode == "square":
            half_w = half_h = max(half_w, half_h)
        elif mode == "fit":
            vp = self.rect
            target = vp.width / vp.height
            if b.x_span / b.y_span < target:
                half_w = half_h * target
            else:
                half_h = half_w / target
        self.set_world(WorldBounds(cx - half_w, cx + half_w, cy - half_h, cy + half_h))
        return self._world
