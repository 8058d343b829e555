from __future__ import annotations

from dataclasses import dataclass, fields, replace
import logging
import math
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence

import numpy as np

from rastrix_core.errors import MissingCollaboratorError
from rastrix_core.raster import draw_line, draw_thick_line, fill_circle
from rastrix_core.render.color import NAMED, RGBA, ColorLike, to_color
from rastrix_core.render.renderer import Renderer
from rastrix_core.ticks import compute_covering_ticks, format_ticks_for_axis, widen_degenerate
from rastrix_core.viewport import Viewport, WorldBounds

if TYPE_CHECKING:
    from rastrix_core.config import RenderConfig


LOGGER = logging.getLogger(__name__)

AXIS_WIDTH_PX = 2
X_INTERCEPT_RADIUS_PX = 5


@dataclass(frozen=True)
class GraphOptions:
    show_grid: bool = True
    show_axes: bool = True
    show_ticks: bool = True
    draw_border: bool = False
    axis_at_zero: bool = True
    grid_color: str = "#2a2a2a"
    axis_color: str = "#888"
    border_color: str = "#555"
    text_color: str = "#fff"
    tick_size_px: int = 6
    num_ticks_x: int | None = None
    num_ticks_y: int | None = None
    font: str = "12px sans-serif"
    margin: float = 30.0
    auto_scale: bool = True

    def __post_init__(self) -> None:
        if self.tick_size_px < 0:
            raise ValueError("tick_size_px must be >= 0")
        for name in ("num_ticks_x", "num_ticks_y"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise ValueError(f"{name} must be >= 1 when set")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "GraphOptions":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ValueError(f"unknown graph option(s): {', '.join(unknown)}")
        return replace(cls(), **dict(raw))


class Graph:
    """Gridlines, axes, tick marks and tick labels for one viewport.

    `draw` may rewrite the viewport's world bounds (auto-scale and tick
    widening) before anything is drawn, so grid and axes always reflect the
    committed bounds.
    """

    def __init__(self, viewport: Viewport | None, options: GraphOptions | None = None) -> None:
        if viewport is None:
            raise MissingCollaboratorError("Graph requires a viewport")
        self.viewport = viewport
        self.options = options or GraphOptions()
        self.grid_color: RGBA = to_color(self.options.grid_color)
        self.axis_color: RGBA = to_color(self.options.axis_color)
        self.border_color: RGBA = to_color(self.options.border_color)

    @classmethod
    def from_config(cls, viewport: Viewport, config: "RenderConfig") -> "Graph":
        return cls(viewport, GraphOptions.from_mapping(config.graph))

    def draw(
        self,
        renderer: Renderer,
        data_series: Iterable[Sequence[Sequence[float]] | np.ndarray] = (),
        x_ticks: Sequence[float] | None = None,
        y_ticks: Sequence[float] | None = None,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Draw the overlay and return the (x_ticks, y_ticks) it used.

        Explicit tick sequences replace the computed ones for their axis.
        """
        opts = self.options
        vp = self.viewport
        x_min, x_max, y_min, y_max = vp.world.x_min, vp.world.x_max, vp.world.y_min, vp.world.y_max

        if opts.auto_scale:
            data_bounds = _series_bounds(data_series)
            if data_bounds is not None:
                x_min, x_max, y_min, y_max = (
                    data_bounds.x_min,
                    data_bounds.x_max,
                    data_bounds.y_min,
                    data_bounds.y_max,
                )

        x_ticks = _given_ticks(x_ticks) if x_ticks is not None else None
        y_ticks = _given_ticks(y_ticks) if y_ticks is not None else None
        if x_ticks is None:
            x_ticks = _axis_ticks(x_min, x_max, opts.num_ticks_x, vp.num_ticks)
        if y_ticks is None:
            y_ticks = _axis_ticks(y_min, y_max, opts.num_ticks_y, vp.num_ticks)
        vp.set_world(
            WorldBounds(
                min(float(x_ticks[0]), x_min),
                max(float(x_ticks[-1]), x_max),
                min(float(y_ticks[0]), y_min),
                max(float(y_ticks[-1]), y_max),
            )
        )
        world = vp.world
        rect = vp.rect
        to_canvas = vp.world_to_canvas
        buf = renderer.buffer

        plot_left = rect.x
        plot_right = rect.x + rect.width
        plot_top = rect.y
        plot_bottom = rect.y + rect.height

        if opts.show_grid:
            for x in x_ticks:
                draw_line(buf, to_canvas(x, world.y_min), to_canvas(x, world.y_max), self.grid_color)
            for y in y_ticks:
                draw_line(buf, to_canvas(world.x_min, y), to_canvas(world.x_max, y), self.grid_color)

        if opts.show_axes:
            if not opts.axis_at_zero:
                draw_thick_line(buf, (plot_left, plot_top), (plot_left, plot_bottom), self.axis_color, AXIS_WIDTH_PX)
                draw_thick_line(buf, (plot_left, plot_bottom), (plot_right, plot_bottom), self.axis_color, AXIS_WIDTH_PX)
            else:
                if world.x_min <= 0.0 <= world.x_max:
                    draw_thick_line(buf, to_canvas(0.0, world.y_min), to_canvas(0.0, world.y_max), self.axis_color, AXIS_WIDTH_PX)
                if world.y_min <= 0.0 <= world.y_max:
                    draw_thick_line(buf, to_canvas(world.x_min, 0.0), to_canvas(world.x_max, 0.0), self.axis_color, AXIS_WIDTH_PX)

        if opts.show_ticks and opts.tick_size_px > 0:
            t = int(opts.tick_size_px)
            for x in x_ticks:
                px = to_canvas(x, world.y_min)[0]
                draw_line(buf, (px, plot_bottom), (px, plot_bottom - t), self.axis_color)
            for y in y_ticks:
                py = to_canvas(world.x_min, y)[1]
                draw_line(buf, (plot_left, py), (plot_left + t, py), self.axis_color)

        for x, label in zip(x_ticks, format_ticks_for_axis(x_ticks)):
            px = to_canvas(x, world.y_min)[0]
            lx = max(plot_left, min(px, plot_right))
            ly = plot_bottom + opts.margin / 2.0
            renderer.draw_text(label, (lx, ly), opts.text_color, opts.font, "center", "top")
        for y, label in zip(y_ticks, format_ticks_for_axis(y_ticks)):
            py = to_canvas(world.x_min, y)[1]
            lx = plot_left - opts.margin / 2.0
            ly = max(plot_top, min(py, plot_bottom))
            renderer.draw_text(label, (lx, ly), opts.text_color, opts.font, "right", "middle")

        if opts.draw_border:
            corners = [(plot_left, plot_top), (plot_right, plot_top), (plot_right, plot_bottom), (plot_left, plot_bottom)]
            for p0, p1 in zip(corners, corners[1:] + corners[:1]):
                draw_line(buf, p0, p1, self.border_color)

        return x_ticks, y_ticks


def _series_bounds(data_series: Iterable[Sequence[Sequence[float]] | np.ndarray]) -> WorldBounds | None:
    chunks = []
    for series in data_series:
        arr = np.asarray(series, dtype=np.float64)
        if arr.size == 0:
            continue
        chunks.append(arr.reshape(-1, 2))
    if not chunks:
        return None
    points = np.concatenate(chunks)
    points = points[np.all(np.isfinite(points), axis=1)]
    if points.size == 0:
        LOGGER.debug("auto-scale skipped: no finite data points")
        return None
    x_min, y_min = (float(v) for v in points.min(axis=0))
    x_max, y_max = (float(v) for v in points.max(axis=0))
    if x_min == x_max:
        x_min, x_max = widen_degenerate(x_min)
    if y_min == y_max:
        y_min, y_max = widen_degenerate(y_min)
    return WorldBounds(x_min, x_max, y_min, y_max)


def _axis_ticks(vmin: float, vmax: float, divisions: int | None, num_ticks: int) -> np.ndarray:
    if divisions:
        ticks = np.linspace(vmin, vmax, int(divisions) + 1, dtype=np.float64)
    else:
        ticks = compute_covering_ticks(vmin, vmax, num_ticks)
    if ticks.size < 2:
        return np.asarray([vmin, vmax], dtype=np.float64)
    return ticks



def _given_ticks(ticks: Sequence[float]) -> np.ndarray | None:
    arr = np.unique(np.asarray(ticks, dtype=np.float64))
    arr = arr[np.isfinite(arr)]
    if arr.size < 2:
        LOGGER.debug("ignoring explicit ticks with fewer than two finite values")
        return None
    return arr


def find_x_intercepts(series: Sequence[Sequence[float]] | np.ndarray) -> list[float]:
    """World x positions where a polyline series meets or crosses y == 0.

    Points lying on zero are reported as-is; sign changes between
    consecutive points are linearly interpolated.
    """
    points = np.asarray(series, dtype=np.float64).reshape(-1, 2)
    out: list[float] = []
    for i, (x, y) in enumerate(points):
        if not (np.isfinite(x) and np.isfinite(y)):
            continue
        if y == 0.0:
            out.append(float(x))
            continue
        if i + 1 >= len(points):
            continue
        x2, y2 = points[i + 1]
        if np.isfinite(x2) and np.isfinite(y2) and y * y2 < 0.0:
            out.append(float(x + (-y / (y2 - y)) * (x2 - x)))
    return out


def draw_x_intercepts(
    renderer: Renderer,
    viewport: Viewport | None,
    series: Sequence[Sequence[float]] | np.ndarray,
    color: ColorLike = "yellow",
    radius: float = X_INTERCEPT_RADIUS_PX,
) -> list[float]:
    """Mark each x-axis crossing of `series` with a filled dot; returns the crossings."""
    if viewport is None:
        raise MissingCollaboratorError("x-intercepts cannot be drawn without a viewport")
    xs = find_x_intercepts(series)
    dot = to_color(color, fallback=NAMED["yellow"])
    for x in xs:
        px, py = viewport.world_to_canvas(x, 0.0)
        fill_circle(renderer.buffer, (math.floor(px + 0.5), math.floor(py + 0.5)), radius, dot)
    return xs
