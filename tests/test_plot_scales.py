from __future__ import annotations

import math
import unittest

import numpy as np

from plotsurface.errors import PlotGeometryError
from plotsurface.scales import CoordinateMapper, DataRect, PixelRect, Rect, build_transform


class CoordinateMapperTests(unittest.TestCase):
    def test_corners_map_to_pixel_rect_with_y_inverted(self) -> None:
        mapper = CoordinateMapper()
        mapper.configure(DataRect(0.0, 0.0, 10.0, 10.0), PixelRect(0, 0, 100, 50))
        self.assertEqual(mapper.to_pixel((0.0, 0.0)), (0.0, 50.0))
        self.assertEqual(mapper.to_pixel((10.0, 10.0)), (100.0, 0.0))
        self.assertEqual(mapper.to_pixel((5.0, 5.0)), (50.0, 25.0))

    def test_offset_pixel_rect(self) -> None:
        mapper = CoordinateMapper()
        mapper.configure(DataRect.from_limits(-1.0, 1.0, -1.0, 1.0), PixelRect(60, 20, 200, 100))
        self.assertEqual(mapper.to_pixel((-1.0, 1.0)), (60.0, 20.0))
        self.assertEqual(mapper.to_pixel((1.0, -1.0)), (260.0, 120.0))

    def test_larger_data_y_is_higher_on_screen(self) -> None:
        mapper = CoordinateMapper()
        mapper.configure(DataRect(-3.0, -3.0, 7.0, 7.0), PixelRect(10, 10, 300, 200))
        _, low = mapper.to_pixel((0.0, -1.0))
        _, high = mapper.to_pixel((0.0, 2.0))
        self.assertLess(high, low)

    def test_from_pixel_inverts_to_pixel(self) -> None:
        mapper = CoordinateMapper()
        mapper.configure(DataRect(-2.5, 100.0, 13.0, 0.5), PixelRect(33, 7, 411, 289))
        for point in ((-2.5, 100.0), (1.25, 100.3), (10.5, 100.5), (0.0, 99.0)):
            x, y = mapper.from_pixel(mapper.to_pixel(point))
            self.assertAlmostEqual(x, point[0], places=9)
            self.assertAlmostEqual(y, point[1], places=9)

    def test_to_pixels_matches_scalar_mapping(self) -> None:
        mapper = CoordinateMapper()
        mapper.configure(DataRect(0.0, 0.0, 4.0, 2.0), PixelRect(0, 0, 400, 200))
        xs = np.array([0.0, 1.0, 2.5, 4.0])
        ys = np.array([0.0, 0.5, 1.0, 2.0])
        px, py = mapper.to_pixels(xs, ys)
        for i in range(xs.size):
            self.assertEqual((float(px[i]), float(py[i])), mapper.to_pixel((float(xs[i]), float(ys[i]))))

    def test_reports_configuration(self) -> None:
        mapper = CoordinateMapper()
        self.assertFalse(mapper.is_configured)
        self.assertIsNone(mapper.data_rect)
        data = DataRect(0.0, 0.0, 1.0, 1.0)
        pix = PixelRect(0, 0, 10, 10)
        mapper.configure(data, pix)
        self.assertTrue(mapper.is_configured)
        self.assertEqual(mapper.data_rect, data)
        self.assertEqual(mapper.pixel_rect, pix)

    def test_unconfigured_mapper_raises(self) -> None:
        mapper = CoordinateMapper()
        with self.assertRaises(PlotGeometryError):
            mapper.to_pixel((0.0, 0.0))
        with self.assertRaises(PlotGeometryError):
            mapper.from_pixel((0.0, 0.0))

    def test_invalid_geometry_rejected(self) -> None:
        with self.assertRaises(PlotGeometryError):
            build_transform(DataRect(0.0, 0.0, 1.0, 1.0), PixelRect(0, 0, 0, 10))
        with self.assertRaises(PlotGeometryError):
            build_transform(DataRect(0.0, 0.0, 0.0, 1.0), PixelRect(0, 0, 10, 10))
        with self.assertRaises(PlotGeometryError):
            build_transform(DataRect(math.nan, 0.0, 1.0, 1.0), PixelRect(0, 0, 10, 10))
        self.assertTrue(issubclass(PlotGeometryError, ValueError))


class RectTests(unittest.TestCase):
    def test_data_rect_from_limits_sorts_edges(self) -> None:
        rect = DataRect.from_limits(5.0, 1.0, 3.0, -3.0)
        self.assertEqual(rect, DataRect(1.0, -3.0, 4.0, 6.0))
        self.assertEqual(rect.right, 5.0)
        self.assertEqual(rect.top, 3.0)

    def test_rect_helpers(self) -> None:
        rect = Rect.from_center(10.0, 20.0, 4.0, 6.0)
        self.assertEqual(rect, Rect(8.0, 17.0, 4.0, 6.0))
        self.assertEqual(rect.center, (10.0, 20.0))
        self.assertEqual(rect.nearest_point((0.0, 20.0)), (8.0, 20.0))
        self.assertEqual(rect.nearest_point((9.0, 18.0)), (9.0, 18.0))

    def test_pixel_rect_containment(self) -> None:
        pix = PixelRect(10, 10, 100, 50)
        self.assertTrue(pix.contains_point((10.0, 60.0)))
        self.assertFalse(pix.contains_point((9.5, 30.0)))
        self.assertTrue(pix.contains_rect(Rect(10.0, 10.0, 100.0, 50.0)))
        self.assertFalse(pix.contains_rect(Rect(50.0, 50.0, 20.0, 20.0)))


if __name__ == "__main__":
    unittest.main()
