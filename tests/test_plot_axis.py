from __future__ import annotations

import math
import unittest

from plotsurface.axis import PlotAxis, TickFormat, TickSet, plan_ticks


class PlanTicksTests(unittest.TestCase):
    def test_twelve_unit_interval_uses_step_four(self) -> None:
        ticks = plan_ticks(0.0, 12.0)
        self.assertEqual(list(ticks.majors), [0.0, 4.0, 8.0, 12.0])
        self.assertEqual(list(ticks.minors), [1.0, 2.0, 3.0, 5.0, 6.0, 7.0, 9.0, 10.0, 11.0])
        self.assertEqual(ticks.step, 4.0)
        self.assertEqual(ticks.subdivisions, 4)

    def test_scaling_interval_scales_ticks(self) -> None:
        ticks = plan_ticks(0.0, 120.0)
        self.assertEqual(list(ticks.majors), [0.0, 40.0, 80.0, 120.0])
        self.assertEqual(list(ticks.minors), [10.0, 20.0, 30.0, 50.0, 60.0, 70.0, 90.0, 100.0, 110.0])
        small = plan_ticks(0.0, 12.0)
        self.assertEqual([v * 10.0 for v in small.majors], list(ticks.majors))

    def test_majors_align_to_global_step_multiples(self) -> None:
        ticks = plan_ticks(4.0, 29.0)
        self.assertEqual(list(ticks.majors), [5.0, 10.0, 15.0, 20.0, 25.0, 30.0])
        self.assertEqual(ticks.subdivisions, 5)
        expected_minors = [float(v) for v in range(6, 30) if v % 5 != 0]
        self.assertEqual(list(ticks.minors), expected_minors)

    def test_step_table_picks_one_two_four_five(self) -> None:
        self.assertEqual(plan_ticks(0.0, 5.0).step, 1.0)
        self.assertEqual(plan_ticks(0.0, 8.0).step, 2.0)
        self.assertEqual(plan_ticks(0.0, 12.0).step, 4.0)
        self.assertEqual(plan_ticks(0.0, 29.0).step, 5.0)
        self.assertEqual(plan_ticks(0.0, 8.0).subdivisions, 4)
        self.assertEqual(plan_ticks(0.0, 5.0).subdivisions, 5)

    def test_sub_unit_lengths_normalise_like_their_scaled_copies(self) -> None:
        small = plan_ticks(0.0, 0.25)
        self.assertEqual(small.step, 0.05)
        self.assertEqual(list(small.majors), [0.0, 0.05, 0.1, 0.15, 0.2, 0.25])
        self.assertEqual(plan_ticks(0.0, 25.0).step, 5.0)

    def test_fractional_interval_ticks_are_exact_decimals(self) -> None:
        ticks = plan_ticks(-0.004, 0.0163)
        self.assertEqual(list(ticks.majors), [-0.004, 0.0, 0.004, 0.008, 0.012])

    def test_degenerate_intervals_are_empty(self) -> None:
        for origin, length in ((3.0, 0.0), (3.0, -2.0), (math.nan, 1.0), (0.0, math.inf)):
            ticks = plan_ticks(origin, length)
            self.assertTrue(ticks.is_empty)
            self.assertEqual(ticks, TickSet.empty())

    def test_plan_is_idempotent(self) -> None:
        self.assertEqual(plan_ticks(-17.2, 3.1), plan_ticks(-17.2, 3.1))

    def test_ordering_properties_hold_across_magnitudes(self) -> None:
        intervals = ((0.3, 0.7), (-17.2, 3.1), (1e6, 2.5e5), (-0.004, 0.0123), (123.4, 0.05), (-250.0, 1000.0))
        for origin, length in intervals:
            with self.subTest(origin=origin, length=length):
                ticks = plan_ticks(origin, length)
                majors = list(ticks.majors)
                minors = list(ticks.minors)
                self.assertGreaterEqual(len(majors), 2)
                self.assertLessEqual(len(majors), 7)
                self.assertTrue(all(a < b for a, b in zip(majors, majors[1:])))
                self.assertTrue(all(a < b for a, b in zip(minors, minors[1:])))
                tol = ticks.step * 1e-6
                self.assertGreaterEqual(majors[0], origin - tol)
                self.assertLessEqual(majors[-1], origin + length + tol)
                for value in minors:
                    self.assertGreater(value, majors[0])
                    self.assertLess(value, majors[-1])
                    self.assertNotIn(value, majors)
                per_gap = len(minors) / (len(majors) - 1)
                self.assertEqual(per_gap, ticks.subdivisions - 1)


class TickFormatTests(unittest.TestCase):
    def test_default_general_format(self) -> None:
        fmt = TickFormat()
        self.assertEqual(fmt.render(4.0), "4")
        self.assertEqual(fmt.render(0.5), "0.5")
        self.assertEqual(fmt.render(1e7), "1e+07")

    def test_fixed_and_exponent_formats(self) -> None:
        self.assertEqual(TickFormat("f", 0, 2).render(3.14159), "3.14")
        self.assertEqual(TickFormat("e", 0, 2).render(1234.5), "1.23e+03")

    def test_field_width_pads_and_negative_width_left_aligns(self) -> None:
        self.assertEqual(TickFormat("f", 8, 1).render(2.5), "     2.5")
        self.assertEqual(TickFormat("f", -6, 1).render(2.5), "2.5   ")

    def test_clock_format_wraps_hours(self) -> None:
        fmt = TickFormat("t", 5, 3)
        self.assertEqual(fmt.render(1.5), "01:30")
        self.assertEqual(fmt.render(12.0), "12:00")
        self.assertEqual(fmt.render(25.25), "01:15")
        self.assertEqual(fmt.render(-1.0), "23:00")

    def test_unknown_style_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TickFormat("x")


class PlotAxisTests(unittest.TestCase):
    def test_defaults(self) -> None:
        axis = PlotAxis("label")
        self.assertEqual(axis.label, "label")
        self.assertTrue(axis.visible)
        self.assertFalse(axis.tick_labels_shown)
        self.assertEqual(axis.tick_format, TickFormat("g", 0, -1))
        self.assertEqual(axis.major_tick_marks(), [])

    def test_tick_label_format_round_trips_settings(self) -> None:
        axis = PlotAxis()
        axis.set_tick_label_format("e", 3, 2)
        self.assertEqual(axis.tick_format.style, "e")
        self.assertEqual(axis.tick_format.field_width, 3)
        self.assertEqual(axis.tick_format.precision, 2)
        with self.assertRaises(ValueError):
            axis.set_tick_label_format("q")

    def test_set_tick_marks_replaces_previous_plan(self) -> None:
        axis = PlotAxis()
        axis.set_tick_marks(0.0, 12.0)
        self.assertEqual(axis.major_tick_marks(), [0.0, 4.0, 8.0, 12.0])
        self.assertEqual(axis.tick_labels(), ["0", "4", "8", "12"])
        axis.set_tick_marks(4.0, 29.0)
        self.assertEqual(axis.major_tick_marks(), [5.0, 10.0, 15.0, 20.0, 25.0, 30.0])
        axis.set_tick_marks(4.0, 0.0)
        self.assertEqual(axis.major_tick_marks(), [])
        self.assertEqual(axis.minor_tick_marks(), [])


if __name__ == "__main__":
    unittest.main()
