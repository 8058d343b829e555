from __future__ import annotations

import math
import unittest

import numpy as np

from rastrix_core.ticks import (
    compute_covering_ticks,
    compute_ticks,
    decimals_for_step,
    format_tick,
    format_ticks_for_axis,
    nice_step,
    widen_degenerate,
)


class NiceStepTests(unittest.TestCase):
    def test_rounds_up_to_one_two_five(self) -> None:
        self.assertEqual(nice_step(1.0), 1.0)
        self.assertEqual(nice_step(3.0), 5.0)
        self.assertEqual(nice_step(7.0), 10.0)
        self.assertEqual(nice_step(0.23), 0.5)
        self.assertEqual(nice_step(120.0), 200.0)

    def test_invalid_steps_are_nan(self) -> None:
        self.assertTrue(math.isnan(nice_step(0.0)))
        self.assertTrue(math.isnan(nice_step(-1.0)))
        self.assertTrue(math.isnan(nice_step(float("inf"))))


class ComputeTicksTests(unittest.TestCase):
    def test_unit_steps(self) -> None:
        np.testing.assert_allclose(compute_ticks(0, 10, 10), np.arange(11, dtype=np.float64))

    def test_ticks_stay_inside_range(self) -> None:
        ticks = compute_ticks(0.3, 9.7, 5)
        np.testing.assert_allclose(ticks, [2.0, 4.0, 6.0, 8.0])

    def test_falls_back_to_covering_ticks(self) -> None:
        np.testing.assert_allclose(compute_ticks(0.1, 0.9, 1), [0.0, 1.0])

    def test_degenerate_range_is_widened(self) -> None:
        np.testing.assert_allclose(compute_ticks(5, 5, 4), [4.5, 5.0, 5.5])

    def test_degenerate_range_far_from_origin_is_widened(self) -> None:
        ticks = compute_ticks(1e20, 1e20, 5)
        self.assertGreaterEqual(ticks.size, 2)
        self.assertTrue(np.all(np.diff(ticks) > 0))
        self.assertLessEqual(ticks[0], 1e20)
        self.assertGreaterEqual(ticks[-1], 1e20)

    def test_widen_degenerate_scales_with_magnitude(self) -> None:
        self.assertEqual(widen_degenerate(0.0), (-0.5, 0.5))
        self.assertEqual(widen_degenerate(3.0), (2.5, 3.5))
        lo, hi = widen_degenerate(-1e20)
        self.assertLess(lo, -1e20)
        self.assertGreater(hi, -1e20)

    def test_reversed_range(self) -> None:
        np.testing.assert_allclose(compute_ticks(10, 0, 10), compute_ticks(0, 10, 10))

    def test_non_finite_range_is_empty(self) -> None:
        self.assertEqual(compute_ticks(0, float("inf"), 5).size, 0)
        self.assertEqual(compute_covering_ticks(float("nan"), 1, 5).size, 0)

    def test_ticks_are_increasing_and_never_fewer_than_two(self) -> None:
        rng = np.random.default_rng(3)
        for _ in range(200):
            lo = float(rng.uniform(-1e4, 1e4))
            span = float(10 ** rng.uniform(-6, 6))
            n = int(rng.integers(1, 20))
            ticks = compute_ticks(lo, lo + span, n)
            self.assertGreaterEqual(ticks.size, 2, (lo, span, n))
            self.assertTrue(np.all(np.diff(ticks) > 0), (lo, span, n))

    def test_zero_is_exact(self) -> None:
        ticks = compute_ticks(-0.3, 0.3, 6)
        self.assertIn(0.0, ticks.tolist())
        self.assertFalse(np.any(np.signbit(ticks[ticks == 0.0])))


class CoveringTicksTests(unittest.TestCase):
    def test_covers_the_range(self) -> None:
        np.testing.assert_allclose(compute_covering_ticks(0.3, 9.7, 5), [0, 2, 4, 6, 8, 10])

    def test_exact_ends_are_not_extended(self) -> None:
        np.testing.assert_allclose(compute_covering_ticks(0, 10, 10), np.arange(11, dtype=np.float64))

    def test_first_and_last_bracket_range(self) -> None:
        rng = np.random.default_rng(11)
        for _ in range(100):
            lo = float(rng.uniform(-50, 50))
            hi = lo + float(rng.uniform(0.01, 100))
            ticks = compute_covering_ticks(lo, hi, 8)
            self.assertLessEqual(ticks[0], lo + 1e-9)
            self.assertGreaterEqual(ticks[-1], hi - 1e-9)


class FormatTickTests(unittest.TestCase):
    def test_decimals_follow_step(self) -> None:
        self.assertEqual(decimals_for_step(1.0), 0)
        self.assertEqual(decimals_for_step(0.5), 1)
        self.assertEqual(decimals_for_step(0.25), 2)
        self.assertEqual(decimals_for_step(2.5), 1)
        self.assertEqual(decimals_for_step(20.0), 0)
        self.assertEqual(decimals_for_step(0.01), 2)

    def test_axis_labels_share_precision(self) -> None:
        self.assertEqual(format_ticks_for_axis(np.array([0.0, 0.5, 1.0])), ["0.0", "0.5", "1.0"])
        self.assertEqual(format_ticks_for_axis(np.array([20.0, 30.0, 40.0])), ["20", "30", "40"])

    def test_near_zero_has_no_sign(self) -> None:
        labels = format_ticks_for_axis(np.array([-1.0, -4.44e-16, 1.0]))
        self.assertEqual(labels[1], "0")

    def test_free_standing_value_trims_zeros(self) -> None:
        self.assertEqual(format_tick(2.5), "2.5")
        self.assertEqual(format_tick(3.0), "3")
        self.assertEqual(format_tick(1.5e-9), "1.500e-09")

    def test_empty_axis(self) -> None:
        self.assertEqual(format_ticks_for_axis(np.array([])), [])


if __name__ == "__main__":
    unittest.main()
