from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
import math
from typing import Any

import numpy as np

from stackgraph.colors import DEFAULT_COLOR_THEME, color_for
from stackgraph.errors import GraphDataError
from stackgraph.series import AlignedSeries, InputSeries, SeriesNamer, coerce_input_series, default_series_name
from stackgraph.time_grid import TimeGrid
from stackgraph.values import parse_graph_value, to_array_value

LOGGER = logging.getLogger(__name__)


def align_series(
    multi_series: Iterable[InputSeries | Mapping[str, Any]],
    grid: TimeGrid,
    *,
    get_series_name: SeriesNamer | None = None,
    color_theme: str = DEFAULT_COLOR_THEME,
) -> tuple[AlignedSeries, ...]:
    """Snap every series onto the grid, in canonical (sorted-name) order.

    Offsets are left at zero; see `stacking.stack_series`.
    """

    namer = get_series_name or default_series_name
    named: list[tuple[str, InputSeries]] = []
    for raw in multi_series:
        series = coerce_input_series(raw)
        named.append((str(namer(series.metadata)), series))

    names = [name for name, _ in named]
    if len(set(names)) != len(names):
        dupes = sorted({name for name in names if names.count(name) > 1})
        raise GraphDataError(f"series names must be unique, duplicated: {dupes}")
    named.sort(key=lambda item: item[0])

    timestamps = grid.timestamps
    zeros = np.zeros(timestamps.size, dtype=np.float64)
    zeros.setflags(write=False)
    out: list[AlignedSeries] = []
    gap_samples = 0
    overwritten = 0
    for index, (name, series) in enumerate(named):
        values, gaps, dropped = _align_values(series, grid, name)
        gap_samples += gaps
        overwritten += dropped
        values.setflags(write=False)
        out.append(
            AlignedSeries(
                name=name,
                key=f"{name}:{index}",
                color=color_for(color_theme, index),
                timestamps=timestamps,
                values=values,
                offsets=zeros,
            )
        )

    LOGGER.debug(
        "aligned %d series onto %d grid points (%d gap samples, %d overwritten)",
        len(out),
        timestamps.size,
        gap_samples,
        overwritten,
    )
    return tuple(out)


def _align_values(series: InputSeries, grid: TimeGrid, name: str) -> tuple[np.ndarray, int, int]:
    values = np.full(len(grid), np.nan, dtype=np.float64)
    if len(series.values) == 0 or len(grid) == 0:
        return values, 0, 0

    sample_ts = np.empty(len(series.values), dtype=np.float64)
    sample_values = np.empty(len(series.values), dtype=np.float64)
    gaps = 0
    for i, sample in enumerate(series.values):
        try:
            if isinstance(sample, (str, bytes)):
                raise TypeError
            raw_ts, raw_value = sample[0], sample[1]
        except (TypeError, IndexError, KeyError):
            raise GraphDataError(f"series `{name}` sample {i} is not a [timestamp, value] pair: {sample!r}") from None
        sample_ts[i] = _coerce_timestamp(raw_ts, name=name, index=i)
        parsed = parse_graph_value(raw_value)
        if parsed is None:
            gaps += 1
        sample_values[i] = to_array_value(parsed)

    slots = grid.quantize_indices(sample_ts)
    # Later samples win when several land in the same slot: keep the last
    # occurrence of each slot in the caller's order.
    reversed_slots = slots[::-1]
    unique_slots, first_in_reversed = np.unique(reversed_slots, return_index=True)
    last_positions = slots.size - 1 - first_in_reversed
    values[unique_slots] = sample_values[last_positions]
    return values, gaps, int(slots.size - unique_slots.size)


def _coerce_timestamp(raw: Any, *, name: str, index: int) -> float:
    try:
        ts = float(raw)
    except (TypeError, ValueError):
        raise GraphDataError(f"series `{name}` sample {index} has a non-numeric timestamp: {raw!r}") from None
    if not math.isfinite(ts):
        raise GraphDataError(f"series `{name}` sample {index} has a non-finite timestamp: {raw!r}")
    return ts
