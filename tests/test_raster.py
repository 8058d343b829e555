from __future__ import annotations

import unittest

import numpy as np

from rastrix_core.raster import (
    draw_circle_outline,
    draw_line,
    draw_point,
    draw_thick_line,
    fill_circle,
    fill_polygon,
    stroke_polyline,
)
from rastrix_core.render.pixel_buffer import PixelBuffer

RED = (255, 0, 0, 255)


def _covered(buf: PixelBuffer) -> int:
    return int(np.count_nonzero(buf.pixels[..., 3]))


class LineTests(unittest.TestCase):
    def test_endpoints_are_inclusive(self) -> None:
        buf = PixelBuffer(10, 10)
        draw_line(buf, (0, 0), (4, 0), RED)
        self.assertEqual(_covered(buf), 5)
        self.assertEqual(buf.get_pixel(4, 0), RED)

    def test_diagonal_line(self) -> None:
        buf = PixelBuffer(10, 10)
        draw_line(buf, (3, 3), (0, 0), RED)
        for i in range(4):
            self.assertEqual(buf.get_pixel(i, i), RED)
        self.assertEqual(_covered(buf), 4)

    def test_endpoints_round_half_up(self) -> None:
        buf = PixelBuffer(10, 10)
        draw_line(buf, (0.4, 0.6), (2.5, 1.2), RED)
        self.assertTrue(np.all(buf.pixels[1, 0:4] == RED))
        self.assertEqual(_covered(buf), 4)

    def test_zero_length_and_non_finite_lines_draw_nothing(self) -> None:
        buf = PixelBuffer(10, 10)
        draw_line(buf, (2, 2), (2, 2), RED)
        draw_line(buf, (0, 0), (float("nan"), 3), RED)
        draw_thick_line(buf, (5, 5), (5, 5), RED, width=5)
        self.assertEqual(_covered(buf), 0)

    def test_line_outside_buffer_is_clipped(self) -> None:
        buf = PixelBuffer(10, 10)
        draw_line(buf, (-20, 5), (30, 5), RED)
        self.assertTrue(np.all(buf.pixels[5, :] == RED))

    def test_translucent_line_accumulates(self) -> None:
        buf = PixelBuffer(5, 5)
        color = (255, 0, 0, 128)
        draw_line(buf, (0, 2), (4, 2), color)
        first = buf.get_pixel(2, 2)
        draw_line(buf, (0, 2), (4, 2), color)
        self.assertEqual(first, (255, 0, 0, 128))
        self.assertGreater(buf.get_pixel(2, 2)[3], first[3])

    def test_wider_stroke_covers_more_pixels(self) -> None:
        thin = PixelBuffer(40, 40)
        thick = PixelBuffer(40, 40)
        stroke_polyline(thin, [(5, 5), (35, 5), (35, 35)], RED, width=1)
        stroke_polyline(thick, [(5, 5), (35, 5), (35, 35)], RED, width=3)
        self.assertGreater(_covered(thick), _covered(thin))
        self.assertEqual(thick.get_pixel(20, 4), RED)
        self.assertEqual(thick.get_pixel(20, 6), RED)

    def test_closed_polyline_strokes_back_to_start(self) -> None:
        buf = PixelBuffer(20, 20)
        stroke_polyline(buf, [(2, 2), (10, 2), (10, 10)], RED, closed=True)
        self.assertEqual(buf.get_pixel(6, 6), RED)


class ShapeTests(unittest.TestCase):
    def test_filled_circle(self) -> None:
        buf = PixelBuffer(100, 100)
        fill_circle(buf, (50, 50), 5, RED)
        self.assertEqual(buf.get_pixel(50, 50), RED)
        self.assertEqual(buf.get_pixel(55, 50), RED)
        self.assertEqual(buf.get_pixel(50, 44), (0, 0, 0, 0))
        self.assertEqual(buf.get_pixel(54, 54), (0, 0, 0, 0))

    def test_circle_with_non_positive_radius_draws_nothing(self) -> None:
        buf = PixelBuffer(20, 20)
        fill_circle(buf, (10, 10), 0, RED)
        fill_circle(buf, (10, 10), -2, RED)
        draw_circle_outline(buf, (10, 10), 0, RED)
        self.assertEqual(_covered(buf), 0)

    def test_circle_partly_outside_buffer(self) -> None:
        buf = PixelBuffer(20, 20)
        fill_circle(buf, (0, 0), 4, RED)
        self.assertEqual(buf.get_pixel(0, 0), RED)
        self.assertEqual(buf.get_pixel(4, 0), RED)

    def test_circle_outline_leaves_center_empty(self) -> None:
        buf = PixelBuffer(40, 40)
        draw_circle_outline(buf, (20, 20), 10, RED)
        self.assertEqual(buf.get_pixel(30, 20), RED)
        self.assertEqual(buf.get_pixel(20, 20), (0, 0, 0, 0))

    def test_polygon_area_matches_geometry(self) -> None:
        buf = PixelBuffer(50, 50)
        fill_polygon(buf, [(10, 10), (30, 10), (30, 30), (10, 30)], RED)
        self.assertLessEqual(abs(_covered(buf) - 400), 80)
        self.assertEqual(buf.get_pixel(20, 20), RED)
        self.assertEqual(buf.get_pixel(20, 30), (0, 0, 0, 0))

    def test_triangle_area_matches_geometry(self) -> None:
        buf = PixelBuffer(50, 50)
        fill_polygon(buf, [(5, 5), (45, 5), (5, 45)], RED)
        perimeter = 40 + 40 + 40 * 2**0.5
        self.assertLessEqual(abs(_covered(buf) - 800), perimeter)
        self.assertEqual(buf.get_pixel(40, 40), (0, 0, 0, 0))

    def test_concave_polygon_leaves_notch_empty(self) -> None:
        buf = PixelBuffer(40, 40)
        fill_polygon(buf, [(5, 5), (35, 5), (35, 35), (20, 15), (5, 35)], RED)
        self.assertEqual(buf.get_pixel(20, 10), RED)
        self.assertEqual(buf.get_pixel(20, 30), (0, 0, 0, 0))
        self.assertEqual(buf.get_pixel(8, 30), RED)

    def test_degenerate_polygons_draw_nothing(self) -> None:
        buf = PixelBuffer(20, 20)
        fill_polygon(buf, [(1, 1), (5, 5)], RED)
        fill_polygon(buf, [(1, 1), (5, 1), (9, 1)], RED)
        fill_polygon(buf, [(-50, -50), (-40, -50), (-40, -40)], RED)
        self.assertEqual(_covered(buf), 0)

    def test_polygon_fill_blends(self) -> None:
        buf = PixelBuffer(20, 20)
        buf.clear("blue")
        fill_polygon(buf, [(0, 0), (19, 0), (19, 19), (0, 19)], (255, 0, 0, 128))
        self.assertEqual(buf.get_pixel(10, 10), (128, 0, 127, 255))


class MarkerTests(unittest.TestCase):
    def test_cross_marker(self) -> None:
        buf = PixelBuffer(20, 20)
        draw_point(buf, (10, 10), RED, marker="cross", size=3)
        for x, y in ((7, 10), (13, 10), (10, 7), (10, 13), (10, 10)):
            self.assertEqual(buf.get_pixel(x, y), RED)
        self.assertEqual(buf.get_pixel(11, 11), (0, 0, 0, 0))

    def test_square_marker_is_an_outline(self) -> None:
        buf = PixelBuffer(20, 20)
        draw_point(buf, (10, 10), RED, marker="square", size=2)
        self.assertEqual(buf.get_pixel(8, 8), RED)
        self.assertEqual(buf.get_pixel(12, 12), RED)
        self.assertEqual(buf.get_pixel(10, 10), (0, 0, 0, 0))

    def test_circle_marker_is_filled(self) -> None:
        buf = PixelBuffer(20, 20)
        draw_point(buf, (10, 10), RED, size=3)
        self.assertEqual(buf.get_pixel(10, 10), RED)
        self.assertEqual(buf.get_pixel(13, 10), RED)

    def test_non_finite_marker_is_skipped(self) -> None:
        buf = PixelBuffer(20, 20)
        for marker in ("circle", "cross", "square"):
            draw_point(buf, (float("nan"), 10), RED, marker=marker)
            draw_point(buf, (10, 10), RED, marker=marker, size=float("inf"))
        self.assertEqual(_covered(buf), 0)

    def test_unknown_marker_is_skipped(self) -> None:
        buf = PixelBuffer(20, 20)
        with self.assertLogs("rastrix_core.raster.markers", level="DEBUG"):
            draw_point(buf, (10, 10), RED, marker="star")  # type: ignore[arg-type]
        self.assertEqual(_covered(buf), 0)


if __name__ == "__main__":
    unittest.main()
