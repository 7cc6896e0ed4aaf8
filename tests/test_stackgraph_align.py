from __future__ import annotations

import unittest

import numpy as np

from stackgraph.align import align_series
from stackgraph.colors import COLOR_THEMES, color_for
from stackgraph.errors import GraphDataError
from stackgraph.series import InputSeries, default_series_name
from stackgraph.stacking import collapse_stack, graph_values, stack_series, stack_totals
from stackgraph.time_grid import TimeGrid


def _by_name(metadata):
    return metadata["name"]


def _series(name, values):
    return {"metadata": {"name": name}, "values": values}


class AlignSeriesTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = TimeGrid(0, 300, 100)

    def test_scenario_alignment_and_half_boundary(self) -> None:
        aligned = align_series(
            [_series("B", [[50, "5"]]), _series("A", [[0, "10"], [150, "20"]])],
            self.grid,
            get_series_name=_by_name,
        )
        self.assertEqual([s.name for s in aligned], ["A", "B"])
        self.assertEqual([p.value for p in aligned[0].datapoints], [10.0, None, 20.0, None])
        self.assertEqual([p.value for p in aligned[1].datapoints], [None, 5.0, None, None])

    def test_values_follow_their_own_series_after_sorting(self) -> None:
        aligned = align_series(
            [_series("zeta", [[0, "1"]]), _series("alpha", [[0, "2"]])],
            self.grid,
            get_series_name=_by_name,
        )
        self.assertEqual(aligned[0].name, "alpha")
        self.assertEqual(aligned[0].datapoints[0].value, 2.0)
        self.assertEqual(aligned[1].datapoints[0].value, 1.0)

    def test_last_sample_wins_within_a_slot(self) -> None:
        aligned = align_series(
            [_series("A", [[90, "1"], [110, "2"], [100, "3"]])],
            self.grid,
            get_series_name=_by_name,
        )
        self.assertEqual(aligned[0].datapoints[1].value, 3.0)

    def test_unparseable_sample_overwrites_slot_with_gap(self) -> None:
        aligned = align_series(
            [_series("A", [[100, "7"], [100, "+Inf"]])],
            self.grid,
            get_series_name=_by_name,
        )
        self.assertIsNone(aligned[0].datapoints[1].value)

    def test_keys_and_colors_use_canonical_index(self) -> None:
        aligned = align_series(
            [_series("b", []), _series("a", [])],
            self.grid,
            get_series_name=_by_name,
            color_theme="blue",
        )
        self.assertEqual([s.key for s in aligned], ["a:0", "b:1"])
        self.assertEqual([s.color for s in aligned], list(COLOR_THEMES["blue"][:2]))
        self.assertTrue(all(s.gap_mask.all() for s in aligned))

    def test_empty_input_produces_empty_set(self) -> None:
        self.assertEqual(align_series([], self.grid), ())

    def test_duplicate_names_rejected(self) -> None:
        with self.assertRaises(GraphDataError):
            align_series([_series("A", []), _series("A", [])], self.grid, get_series_name=_by_name)

    def test_malformed_samples_rejected(self) -> None:
        with self.assertRaises(GraphDataError):
            align_series([_series("A", [[100]])], self.grid, get_series_name=_by_name)
        with self.assertRaises(GraphDataError):
            align_series([_series("A", [["soon", "1"]])], self.grid, get_series_name=_by_name)
        with self.assertRaises(GraphDataError):
            align_series([{"metadata": {"name": "A"}}], self.grid, get_series_name=_by_name)

    def test_accepts_input_series_and_metric_alias(self) -> None:
        aligned = align_series(
            [
                InputSeries(metadata={"__name__": "up", "job": "api"}, values=[(0, 1)]),
                {"metric": {"__name__": "up", "job": "db"}, "values": [[0, "0"]]},
            ],
            self.grid,
        )
        self.assertEqual([s.name for s in aligned], ['up{job="api"}', 'up{job="db"}'])
        self.assertEqual(aligned[1].datapoints[0].value, 0.0)

    def test_default_series_name(self) -> None:
        self.assertEqual(default_series_name({"__name__": "cpu"}), "cpu")
        self.assertEqual(default_series_name({"b": "2", "a": "1"}), '{a="1", b="2"}')
        self.assertEqual(default_series_name({}), "{}")


class StackSeriesTests(unittest.TestCase):
    def setUp(self) -> None:
        grid = TimeGrid(0, 300, 100)
        self.aligned = align_series(
            [
                _series("A", [[0, "1"], [100, "2"], [200, "3"]]),
                _series("B", [[0, "10"], [200, "x"], [300, "4"]]),
                _series("C", [[0, "100"], [100, "200"], [300, "0.5"]]),
            ],
            grid,
            get_series_name=_by_name,
        )

    def test_offsets_are_cumulative_in_canonical_order(self) -> None:
        stacked = stack_series(self.aligned)
        np.testing.assert_array_equal(stacked[0].offsets, [0.0, 0.0, 0.0, 0.0])
        np.testing.assert_array_equal(stacked[1].offsets, [1.0, 2.0, 3.0, 0.0])
        np.testing.assert_array_equal(stacked[2].offsets, [11.0, 2.0, 3.0, 4.0])

    def test_last_offset_plus_value_equals_total(self) -> None:
        stacked = stack_series(self.aligned)
        last = stacked[-1]
        tops = last.offsets + np.nan_to_num(last.values, nan=0.0)
        np.testing.assert_allclose(tops, stack_totals(stacked))

    def test_gap_graph_value_stays_gap(self) -> None:
        stacked = stack_series(self.aligned)
        heights = graph_values(stacked[1], stacked=True)
        self.assertTrue(np.isnan(heights[1]))
        self.assertEqual(heights[3], 4.0)
        np.testing.assert_array_equal(graph_values(stacked[1], stacked=False)[[0, 3]], [10.0, 4.0])

    def test_collapse_stack_zeroes_offsets(self) -> None:
        stacked = stack_series(self.aligned)
        collapsed = collapse_stack(stacked[2])
        np.testing.assert_array_equal(collapsed.offsets, np.zeros(4))
        self.assertEqual(collapsed.key, stacked[2].key)

    def test_stack_of_nothing(self) -> None:
        self.assertEqual(stack_series(()), ())


class ColorForTests(unittest.TestCase):
    def test_palette_wraps_by_index(self) -> None:
        for theme, palette in COLOR_THEMES.items():
            self.assertTrue(7 <= len(palette) <= 14)
            self.assertEqual(color_for(theme, 0), palette[0])
            self.assertEqual(color_for(theme, len(palette)), palette[0])
            self.assertEqual(color_for(theme, len(palette) + 2), palette[2])

    def test_unknown_theme_rejected(self) -> None:
        with self.assertRaisesRegex(ValueError, "Unknown color theme"):
            color_for("rainbow", 0)


if __name__ == "__main__":
    unittest.main()
