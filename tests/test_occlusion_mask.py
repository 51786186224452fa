from __future__ import annotations

import unittest

import numpy as np

from plotsurface.errors import PlotGeometryError
from plotsurface.mask import OcclusionMask
from plotsurface.scales import PixelRect, Rect


class OcclusionMaskTests(unittest.TestCase):
    def setUp(self) -> None:
        # 2x1 pixel cells.
        self.mask = OcclusionMask(PixelRect(0, 0, 200, 100))

    def test_fresh_mask_has_no_cost(self) -> None:
        self.assertEqual(self.mask.total_weight(), 0.0)
        self.assertEqual(self.mask.query_cost(Rect(0.0, 0.0, 200.0, 100.0)), 0.0)
        self.assertEqual(self.mask.weights.shape, (100, 100))

    def test_stamp_rect_adds_weight_per_covered_cell(self) -> None:
        self.mask.stamp_rect(Rect(10.0, 10.0, 4.0, 2.0))
        self.assertEqual(self.mask.total_weight(), 4.0)
        self.assertEqual(self.mask.query_cost(Rect(10.0, 10.0, 4.0, 2.0)), 4.0)
        self.assertEqual(self.mask.query_cost(Rect(100.0, 50.0, 10.0, 10.0)), 0.0)

    def test_partial_overlap_marks_whole_cell(self) -> None:
        self.mask.stamp_rect(Rect(11.0, 10.5, 1.0, 0.2), 3.0)
        self.assertEqual(self.mask.total_weight(), 3.0)
        self.assertEqual(self.mask.weights[10, 5], 3.0)
        self.assertEqual(self.mask.query_cost(Rect(10.0, 10.0, 2.0, 1.0)), 3.0)

    def test_stamping_never_lowers_cost(self) -> None:
        probe = Rect(20.0, 20.0, 30.0, 10.0)
        before = self.mask.query_cost(probe)
        self.mask.stamp_rect(Rect(40.0, 25.0, 30.0, 30.0), 0.25)
        middle = self.mask.query_cost(probe)
        self.mask.stamp_rect(Rect(0.0, 0.0, 5.0, 5.0), 1.0)
        after = self.mask.query_cost(probe)
        self.assertLessEqual(before, middle)
        self.assertLessEqual(middle, after)
        self.assertGreater(middle, before)

    def test_rects_are_clipped_to_the_grid(self) -> None:
        self.mask.stamp_rect(Rect(-50.0, -50.0, 10.0, 10.0))
        self.assertEqual(self.mask.total_weight(), 0.0)
        self.mask.stamp_rect(Rect(-10.0, -10.0, 14.0, 12.0))
        self.assertEqual(self.mask.total_weight(), 4.0)
        self.assertEqual(self.mask.query_cost(Rect(-100.0, -100.0, 50.0, 50.0)), 0.0)

    def test_horizontal_line_walks_each_cell_once(self) -> None:
        self.mask.stamp_line((0.5, 5.5), (19.5, 5.5))
        self.assertEqual(self.mask.total_weight(), 10.0)
        self.assertEqual(self.mask.query_cost(Rect(0.0, 5.0, 20.0, 1.0)), 10.0)

    def test_diagonal_line(self) -> None:
        self.mask.stamp_line((1.0, 1.0), (41.0, 21.0), 2.0)
        self.assertEqual(self.mask.total_weight(), 42.0)
        self.assertEqual(self.mask.weights[1, 0], 2.0)
        self.assertEqual(self.mask.weights[21, 20], 2.0)

    def test_line_missing_the_grid_is_ignored(self) -> None:
        self.mask.stamp_line((-10.0, -10.0), (-5.0, 300.0))
        self.mask.stamp_line((-10.0, 120.0), (250.0, 101.0))
        self.assertEqual(self.mask.total_weight(), 0.0)

    def test_line_crossing_the_grid_with_both_ends_outside(self) -> None:
        self.mask.stamp_line((-10.0, 50.5), (210.0, 50.5))
        self.assertEqual(self.mask.total_weight(), 100.0)
        self.assertEqual(self.mask.query_cost(Rect(0.0, 50.0, 200.0, 1.0)), 100.0)

    def test_line_with_far_endpoint_only_stamps_cells_it_crosses(self) -> None:
        mask = OcclusionMask(PixelRect(0, 0, 100, 100))
        mask.stamp_line((10.5, 50.5), (60.5, -5000.0))
        rows, cols = np.nonzero(mask.weights)
        self.assertTrue(set(cols.tolist()) <= {10, 11})
        self.assertGreater(mask.weights[50, 10], 0.0)
        self.assertGreater(mask.weights[0, :].sum(), 0.0)
        self.assertEqual(int(rows.max()), 50)

    def test_reset_clears_weights(self) -> None:
        self.mask.stamp_rect(Rect(0.0, 0.0, 200.0, 100.0), 5.0)
        self.mask.reset()
        self.assertEqual(self.mask.total_weight(), 0.0)

    def test_resize_changes_cell_size_and_resets(self) -> None:
        self.mask.stamp_rect(Rect(0.0, 0.0, 10.0, 10.0))
        self.mask.resize(PixelRect(0, 0, 100, 100))
        self.assertEqual(self.mask.total_weight(), 0.0)
        self.mask.stamp_rect(Rect(0.0, 0.0, 2.0, 2.0))
        self.assertEqual(self.mask.total_weight(), 4.0)

    def test_weights_view_is_read_only(self) -> None:
        weights = self.mask.weights
        with self.assertRaises(ValueError):
            weights[0, 0] = 1.0

    def test_invalid_geometry_rejected(self) -> None:
        with self.assertRaises(PlotGeometryError):
            OcclusionMask(PixelRect(0, 0, 0, 10))
        with self.assertRaises(PlotGeometryError):
            self.mask.resize(PixelRect(0, 0, 10, -1))
        with self.assertRaises(ValueError):
            OcclusionMask(PixelRect(0, 0, 10, 10), grid_size=0)


if __name__ == "__main__":
    unittest.main()
