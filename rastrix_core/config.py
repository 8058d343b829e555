from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import tomllib
from typing import Any

from rastrix_core.render.color import parse_color


LOGGER = logging.getLogger(__name__)

ASPECT_NAMES = ("stretch", "none", "fit", "cover")


@dataclass(frozen=True)
class RenderConfig:
    """Configuration consumed by the renderer, the viewport and the graph overlay.

    A TOML file carries three tables::

        [canvas]
        width = 640
        height = 480
        background = "#131313"
        glyph_capacity = 512

        [viewport]
        world = [0.0, 10.0, 0.0, 10.0]
        aspect = "fit"
        margin = 30
        num_ticks = 10

        [graph]
        show_grid = true
        font = "12px sans-serif"
    """

    width: int = 640
    height: int = 480
    background: str = "#131313"
    glyph_capacity: int = 512
    world: tuple[float, float, float, float] = (0.0, 1.0, 0.0, 1.0)
    aspect: str = "stretch"
    margin: float = 0.0
    num_ticks: int = 10
    graph: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("canvas width/height must be > 0")
        if self.glyph_capacity < 1:
            raise ValueError("glyph_capacity must be >= 1")
        if len(self.world) != 4:
            raise ValueError("world must have 4 entries: x_min, x_max, y_min, y_max")
        if self.aspect not in ASPECT_NAMES:
            raise ValueError(f"unknown aspect policy: {self.aspect}")
        if self.margin < 0:
            raise ValueError("margin must be >= 0")
        if self.num_ticks < 1:
            raise ValueError("num_ticks must be >= 1")
        if parse_color(self.background) is None:
            raise ValueError(f"invalid background color: {self.background}")


def load_render_config(path: str | Path) -> RenderConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"render config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    config = render_config_from_mapping(raw)
    LOGGER.debug("loaded render config from %s", config_path)
    return config


def render_config_from_mapping(raw: dict[str, Any]) -> RenderConfig:
    canvas = _coerce_table(raw.get("canvas", {}), "canvas")
    viewport = _coerce_table(raw.get("viewport", {}), "viewport")
    graph = _coerce_table(raw.get("graph", {}), "graph")
    defaults = RenderConfig()
    try:
        world = tuple(float(v) for v in viewport.get("world", defaults.world))
        return RenderConfig(
            width=int(canvas.get("width", defaults.width)),
            height=int(canvas.get("height", defaults.height)),
            background=str(canvas.get("background", defaults.background)),
            glyph_capacity=int(canvas.get("glyph_capacity", defaults.glyph_capacity)),
            world=world,  # type: ignore[arg-type]
            aspect=str(viewport.get("aspect", defaults.aspect)).lower(),
            margin=float(viewport.get("margin", defaults.margin)),
            num_ticks=int(viewport.get("num_ticks", defaults.num_ticks)),
            graph=dict(graph),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid render config: {exc}") from exc


def _coerce_table(value: Any, label: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"[{label}] must be a table")
    return value
