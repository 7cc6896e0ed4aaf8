from __future__ import annotations

import unittest

import numpy as np

from stackgraph.align import align_series
from stackgraph.formatting import GAP_LABEL, value_formatter
from stackgraph.scales import (
    Geometry,
    compute_max_y,
    invert,
    map_value,
    time_scale,
    value_scale,
)
from stackgraph.stacking import stack_series
from stackgraph.time_grid import TimeGrid


def _aligned(*series):
    grid = TimeGrid(0, 200, 100)
    raw = [{"metadata": {"name": name}, "values": values} for name, values in series]
    return stack_series(align_series(raw, grid, get_series_name=lambda m: m["name"]))


class ScaleTests(unittest.TestCase):
    def test_time_scale_maps_window_to_width(self) -> None:
        scale = time_scale(0, 300, 600)
        self.assertEqual(map_value(scale, 150.0), 300.0)
        self.assertEqual(map_value(scale, 300.0), 600.0)
        self.assertEqual(invert(scale, 300.0), 150.0)

    def test_value_scale_is_inverted(self) -> None:
        scale = value_scale(10.0, 200)
        self.assertEqual(map_value(scale, 0.0), 200.0)
        self.assertEqual(map_value(scale, 10.0), 0.0)
        self.assertEqual(invert(scale, 100.0), 5.0)

    def test_invert_does_not_clamp(self) -> None:
        scale = value_scale(10.0, 200)
        self.assertEqual(invert(scale, 400.0), -10.0)
        self.assertAlmostEqual(invert(time_scale(0, 300, 600), -60.0), -30.0, places=9)

    def test_round_trip_within_domain(self) -> None:
        scale = time_scale(1_700_000_000, 1_700_003_600, 913)
        domain = np.linspace(1_700_000_000, 1_700_003_600, 97)
        np.testing.assert_allclose(invert(scale, map_value(scale, domain)), domain, rtol=0, atol=1e-5)
        vscale = value_scale(0.37, 171)
        values = np.linspace(0.0, 0.37, 41)
        np.testing.assert_allclose(invert(vscale, map_value(vscale, values)), values, rtol=0, atol=1e-12)

    def test_unmeasured_surface_maps_everything_to_zero(self) -> None:
        scale = time_scale(0, 300, 0)
        self.assertEqual(map_value(scale, 10.0), 0.0)
        self.assertEqual(map_value(scale, 290.0), 0.0)
        self.assertEqual(invert(scale, 0.0), 150.0)
        vscale = value_scale(1.0, 0)
        np.testing.assert_array_equal(map_value(vscale, np.asarray([0.0, 0.5, 1.0])), [0.0, 0.0, 0.0])

    def test_negative_geometry_rejected(self) -> None:
        with self.assertRaises(ValueError):
            time_scale(0, 10, -1)
        with self.assertRaises(ValueError):
            Geometry(width=-1, height=10)


class ComputeMaxYTests(unittest.TestCase):
    def test_all_gap_series_does_not_raise_max(self) -> None:
        series = _aligned(("A", [[0, "NaN"], [100, "x"]]))
        self.assertEqual(compute_max_y(series, 0.012), 0.012)
        self.assertEqual(compute_max_y(series, 0.012, stacked=True), 0.012)

    def test_line_mode_uses_raw_values(self) -> None:
        series = _aligned(("A", [[0, "3"], [100, "1"]]), ("B", [[0, "4"]]))
        self.assertEqual(compute_max_y(series, 0.012), 4.0)

    def test_stacked_mode_uses_offset_plus_value(self) -> None:
        series = _aligned(("A", [[0, "3"], [100, "1"]]), ("B", [[0, "4"]]))
        self.assertEqual(compute_max_y(series, 0.012, stacked=True), 7.0)

    def test_floor_applies_to_zero_values(self) -> None:
        series = _aligned(("A", [[0, "0"], [100, "0"], [200, "0"]]))
        self.assertEqual(compute_max_y(series, 0.5), 0.5)
        self.assertEqual(compute_max_y((), 0.012), 0.012)


class ValueFormatterTests(unittest.TestCase):
    def test_every_scheme_handles_gap_and_zero(self) -> None:
        for units in ("none", "bytes", "percent"):
            for reference in (0.0, 0.5, 2048.0, 5e12):
                fmt = value_formatter(units, reference)
                self.assertEqual(fmt(None), GAP_LABEL)
                self.assertEqual(fmt(float("nan")), GAP_LABEL)
                self.assertIsInstance(fmt(0.0), str)

    def test_none_uses_metric_prefix_from_reference(self) -> None:
        fmt = value_formatter("none", 5000.0)
        self.assertEqual(fmt(5000.0), "5 k")
        self.assertEqual(fmt(1234.0), "1 k")
        self.assertEqual(value_formatter("none", 3e9)(3e9), "3 G")

    def test_none_picks_decimal_precision_for_small_references(self) -> None:
        self.assertEqual(value_formatter("none", 5.0)(3.6), "4")
        self.assertEqual(value_formatter("none", 0.5)(0.25), "0.3")
        self.assertEqual(value_formatter("none", 0.05)(0.0123), "0.01")
        self.assertEqual(value_formatter("none", 0.5)(0.0), "0")

    def test_none_falls_back_to_integers(self) -> None:
        fmt = value_formatter("none", 0.00001)
        self.assertEqual(fmt(0.00001), "0")
        self.assertEqual(fmt(3.0), "3")

    def test_bytes_scenario(self) -> None:
        fmt = value_formatter("bytes", 2048.0)
        self.assertEqual(fmt(2048.0), "2 kB")
        self.assertEqual(fmt(1536.0), "2 kB")
        self.assertEqual(value_formatter("bytes", 3.0)(3.0), "3 B")
        self.assertEqual(value_formatter("bytes", 5 * 1024**3)(5 * 1024**3), "5 GB")

    def test_bytes_without_unit_renders_zero(self) -> None:
        fmt = value_formatter("bytes", 1.0)
        self.assertEqual(fmt(1.0), "0")

    def test_percent(self) -> None:
        fmt = value_formatter("percent", 1.0)
        self.assertEqual(fmt(0.1234), "12.34%")
        self.assertEqual(fmt(0.5), "50.00%")
        self.assertEqual(fmt(0.0), "0%")

    def test_huge_values_render_without_error(self) -> None:
        percent = value_formatter("percent", 1.0)(1e27)
        self.assertTrue(percent.endswith(".00%"))
        self.assertAlmostEqual(float(percent[:-1]) / 1e29, 1.0, places=9)
        label = value_formatter("none", 5e40)(5e40)
        self.assertTrue(label.endswith(" T"))
        self.assertEqual(len(label.split()[0]), 29)
        self.assertEqual(value_formatter("none", 0.5)(-1e30)[:2], "-1")

    def test_unknown_units_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "Unknown metric units"):
            value_formatter("furlongs", 1.0)


if __name__ == "__main__":
    unittest.main()
