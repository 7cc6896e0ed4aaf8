from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging
from typing import Any

import numpy as np

from stackgraph.align import align_series
from stackgraph.config import DEFAULT_OPTIONS, ChartOptions
from stackgraph.formatting import ValueFormatter, value_formatter
from stackgraph.hover import HoverResult, resolve_hover
from stackgraph.scales import (
    UNMEASURED,
    Geometry,
    LinearScale,
    compute_max_y,
    map_value,
    time_scale,
    value_scale,
)
from stackgraph.series import AlignedSeries, InputSeries, SeriesNamer
from stackgraph.stacking import graph_values, stack_series
from stackgraph.state import (
    ChartState,
    is_faded,
    is_focused,
    on_hover,
    on_pointer_leave,
    on_pointer_move,
    on_rebuild,
    on_select,
    visible_series,
)
from stackgraph.throttle import Debouncer, PointerCoalescer
from stackgraph.time_grid import TimeGrid

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChartData:
    grid: TimeGrid
    series: tuple[AlignedSeries, ...]


@dataclass(frozen=True)
class LegendEntry:
    key: str
    name: str
    color: str
    faded: bool
    focused: bool


def build_chart_data(
    multi_series: Iterable[InputSeries | Mapping[str, Any]],
    *,
    start_time_sec: float,
    end_time_sec: float,
    step_duration_sec: float,
    get_series_name: SeriesNamer | None = None,
    color_theme: str = DEFAULT_OPTIONS.color_theme,
) -> ChartData:
    grid = TimeGrid(start_time_sec, end_time_sec, step_duration_sec)
    aligned = align_series(multi_series, grid, get_series_name=get_series_name, color_theme=color_theme)
    return ChartData(grid=grid, series=stack_series(aligned))


class TimeSeriesChart:
    """Processing session for one chart: aligned data, geometry and interaction state.

    Rebuilds compute a complete `ChartData` before replacing the current one, so
    readers never observe a half-built snapshot and a failed rebuild leaves the
    previous data in place.
    """

    def __init__(
        self,
        *,
        start_time_sec: float,
        end_time_sec: float,
        step_duration_sec: float,
        multi_series: Iterable[InputSeries | Mapping[str, Any]] = (),
        get_series_name: SeriesNamer | None = None,
        options: ChartOptions = DEFAULT_OPTIONS,
        geometry: Geometry = UNMEASURED,
    ) -> None:
        self._options = options
        self._get_series_name = get_series_name
        self._multi_series = tuple(multi_series)
        self._window = (float(start_time_sec), float(end_time_sec), float(step_duration_sec))
        self._geometry = geometry
        self._pending_geometry: Geometry | None = None
        self._state = ChartState()
        self._resize_debounce = Debouncer(delay_s=options.resize_debounce_s)
        self._pointer = PointerCoalescer(min_interval_s=options.pointer_min_interval_s)
        self._data = self._build(self._multi_series, self._window, options.color_theme)

    @property
    def options(self) -> ChartOptions:
        return self._options

    @property
    def data(self) -> ChartData:
        return self._data

    @property
    def grid(self) -> TimeGrid:
        return self._data.grid

    @property
    def series(self) -> tuple[AlignedSeries, ...]:
        return self._data.series

    @property
    def state(self) -> ChartState:
        return self._state

    @property
    def geometry(self) -> Geometry:
        return self._geometry

    @property
    def hover(self) -> HoverResult | None:
        return self._state.hover

    @property
    def show_legend(self) -> bool:
        return len(self._data.series) > 1

    def set_series(self, multi_series: Iterable[InputSeries | Mapping[str, Any]]) -> None:
        multi_series = tuple(multi_series)
        self._swap(self._build(multi_series, self._window, self._options.color_theme))
        self._multi_series = multi_series

    def set_window(self, start_time_sec: float, end_time_sec: float, step_duration_sec: float) -> None:
        window = (float(start_time_sec), float(end_time_sec), float(step_duration_sec))
        self._swap(self._build(self._multi_series, window, self._options.color_theme))
        self._window = window

    def set_options(self, options: ChartOptions) -> None:
        if options.color_theme != self._options.color_theme:
            self._swap(self._build(self._multi_series, self._window, options.color_theme))
        self._options = options
        self._resize_debounce = Debouncer(delay_s=options.resize_debounce_s)
        self._pointer = PointerCoalescer(min_interval_s=options.pointer_min_interval_s)
        self._state = on_pointer_leave(self._state)

    def resize(self, geometry: Geometry) -> None:
        self._geometry = geometry
        self._pending_geometry = None
        self._resize_debounce.cancel()
        self._state = on_pointer_leave(self._state)

    def request_resize(self, geometry: Geometry, now: float) -> None:
        self._pending_geometry = geometry
        self._resize_debounce.trigger(now)

    def submit_pointer(self, x: float, y: float) -> None:
        self._pointer.submit(x, y)

    def tick(self, now: float) -> None:
        """Apply a settled resize and resolve at most one queued pointer move."""
        if self._resize_debounce.poll(now) and self._pending_geometry is not None:
            self.resize(self._pending_geometry)
        position = self._pointer.take(now)
        if position is not None:
            self.pointer_move(*position)

    def visible_series(self) -> tuple[AlignedSeries, ...]:
        return visible_series(self._data.series, self._state)

    def y_axis_max(self) -> float:
        return compute_max_y(
            self.visible_series(),
            self._options.values_min_spread,
            stacked=self._options.show_stacked,
        )

    def time_scale(self) -> LinearScale:
        start, end, _ = self._window
        return time_scale(start, end, self._geometry.width)

    def value_scale(self) -> LinearScale:
        return value_scale(self.y_axis_max(), self._geometry.height)

    def value_formatter(self) -> ValueFormatter:
        return value_formatter(self._options.metric_units, self.y_axis_max())

    def legend_entries(self) -> tuple[LegendEntry, ...]:
        return tuple(
            LegendEntry(
                key=s.key,
                name=s.name,
                color=s.color,
                faded=is_faded(self._state, s.key),
                focused=is_focused(self._state, s.key),
            )
            for s in self._data.series
        )

    def plot_points(self, series: AlignedSeries) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Pixel x, baseline y and top y per datapoint; NaN marks a gap."""
        xs = map_value(self.time_scale(), series.timestamps)
        yscale = self.value_scale()
        stacked = self._options.show_stacked
        tops = graph_values(series, stacked=stacked)
        if stacked:
            bases = np.where(np.isnan(series.values), np.nan, series.offsets)
        else:
            bases = np.where(np.isnan(series.values), np.nan, 0.0)
        return (
            np.asarray(xs, dtype=np.float64),
            np.asarray(map_value(yscale, bases), dtype=np.float64),
            np.asarray(map_value(yscale, tops), dtype=np.float64),
        )

    def pointer_move(self, x: float, y: float) -> HoverResult | None:
        hover = resolve_hover(
            x,
            y,
            self.visible_series(),
            self.time_scale(),
            self.value_scale(),
            self._data.grid,
            stacked=self._options.show_stacked,
            simple_tooltip=self._options.simple_tooltip,
        )
        self._state = on_pointer_move(self._state, hover)
        return hover

    def pointer_leave(self) -> None:
        self._pointer.clear()
        self._state = on_pointer_leave(self._state)

    def select_series(self, key: str | None) -> None:
        self._state = on_select(self._state, key)

    def hover_series(self, key: str | None) -> None:
        self._state = on_hover(self._state, key)

    def _build(
        self,
        multi_series: tuple[InputSeries | Mapping[str, Any], ...],
        window: tuple[float, float, float],
        color_theme: str,
    ) -> ChartData:
        start, end, step = window
        data = build_chart_data(
            multi_series,
            start_time_sec=start,
            end_time_sec=end,
            step_duration_sec=step,
            get_series_name=self._get_series_name,
            color_theme=color_theme,
        )
        LOGGER.debug(
            "rebuilt chart data: %d series x %d grid points [%s, %s] step=%s",
            len(data.series),
            len(data.grid),
            start,
            end,
            step,
        )
        return data

    def _swap(self, data: ChartData) -> None:
        self._data = data
        self._state = on_rebuild(self._state, data.series)
