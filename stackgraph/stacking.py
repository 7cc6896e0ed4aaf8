from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from stackgraph.series import AlignedSeries


def stack_series(series: Sequence[AlignedSeries]) -> tuple[AlignedSeries, ...]:
    """Populate stack offsets in the given (canonical) order.

    The offset of series i is the sum of series 0..i-1 at each timestamp,
    with gaps counted as 0.
    """

    if not series:
        return ()
    size = len(series[0])
    if any(len(s) != size for s in series):
        raise ValueError("all series must be aligned to the same grid")

    filled = np.vstack([np.nan_to_num(s.values, nan=0.0) for s in series])
    totals = np.cumsum(filled, axis=0)
    offsets = np.vstack([np.zeros((1, size), dtype=np.float64), totals[:-1]])
    return tuple(s.with_offsets(offsets[i]) for i, s in enumerate(series))


def collapse_stack(series: AlignedSeries) -> AlignedSeries:
    return series.with_offsets(np.zeros(len(series), dtype=np.float64))


def graph_values(series: AlignedSeries, *, stacked: bool) -> np.ndarray:
    """Plotted height of every datapoint; NaN where the value is a gap."""
    if not stacked:
        return series.values
    return series.offsets + series.values


def stack_totals(series: Sequence[AlignedSeries]) -> np.ndarray:
    if not series:
        return np.empty(0, dtype=np.float64)
    return np.sum(np.vstack([np.nan_to_num(s.values, nan=0.0) for s in series]), axis=0)
