from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from rastrix_core.config import RenderConfig, load_render_config, render_config_from_mapping
from rastrix_core.render.renderer import Renderer
from rastrix_core.viewport import AspectPolicy, Viewport, ViewportRect, WorldBounds
from rastrix_plot.graph import Graph


CONFIG_TOML = """
[canvas]
width = 320
height = 200
background = "#000"
glyph_capacity = 64

[viewport]
world = [0, 10, -1, 1]
aspect = "fit"
margin = 20
num_ticks = 5

[graph]
show_grid = false
draw_border = true
"""


class RenderConfigTests(unittest.TestCase):
    def _write(self, text: str) -> Path:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        path = Path(tmp.name) / "render.toml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_loads_all_tables(self) -> None:
        config = load_render_config(self._write(CONFIG_TOML))
        self.assertEqual((config.width, config.height), (320, 200))
        self.assertEqual(config.background, "#000")
        self.assertEqual(config.glyph_capacity, 64)
        self.assertEqual(config.world, (0.0, 10.0, -1.0, 1.0))
        self.assertEqual(config.aspect, "fit")
        self.assertEqual(config.margin, 20.0)
        self.assertEqual(config.num_ticks, 5)
        self.assertEqual(config.graph, {"show_grid": False, "draw_border": True})

    def test_builds_renderer_viewport_and_graph(self) -> None:
        config = load_render_config(self._write(CONFIG_TOML))
        renderer = Renderer.from_config(config)
        viewport = Viewport.from_config(config, renderer)
        graph = Graph.from_config(viewport, config)
        self.assertEqual(renderer.size, (320, 200))
        self.assertEqual(renderer.glyphs.capacity, 64)
        self.assertEqual(renderer.buffer.get_pixel(0, 0), (0, 0, 0, 255))
        self.assertIs(viewport.aspect, AspectPolicy.FIT)
        self.assertEqual(viewport.rect, ViewportRect(20, 20, 280, 160))
        self.assertEqual(viewport.world, WorldBounds(0, 10, -1, 1))
        self.assertEqual(viewport.num_ticks, 5)
        self.assertFalse(graph.options.show_grid)
        self.assertTrue(graph.options.draw_border)

    def test_missing_tables_use_defaults(self) -> None:
        self.assertEqual(render_config_from_mapping({}), RenderConfig())

    def test_missing_file_raises(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_render_config("/nonexistent/render.toml")

    def test_invalid_values_raise(self) -> None:
        with self.assertRaises(ValueError):
            render_config_from_mapping({"viewport": {"aspect": "squash"}})
        with self.assertRaises(ValueError):
            render_config_from_mapping({"canvas": {"width": 0}})
        with self.assertRaises(ValueError):
            render_config_from_mapping({"canvas": {"background": "nope"}})
        with self.assertRaises(ValueError):
            render_config_from_mapping({"canvas": 3})
        with self.assertRaises(ValueError):
            render_config_from_mapping({"viewport": {"world": [0, 1, 2]}})

    def test_unknown_graph_option_is_rejected(self) -> None:
        config = render_config_from_mapping({"graph": {"grid": True}})
        viewport = Viewport(Renderer(10, 10))
        with self.assertRaises(ValueError):
            Graph.from_config(viewport, config)


if __name__ == "__main__":
    unittest.main()
