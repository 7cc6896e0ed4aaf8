from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from stackgraph.series import AlignedSeries
from stackgraph.stacking import graph_values


DEFAULT_VALUES_MIN_SPREAD = 0.012


@dataclass(frozen=True)
class LinearScale:
    domain_lo: float
    domain_hi: float
    range_lo: float
    range_hi: float


@dataclass(frozen=True)
class Geometry:
    width: float
    height: float

    def __post_init__(self) -> None:
        if not (np.isfinite(self.width) and np.isfinite(self.height)):
            raise ValueError("geometry width/height must be finite")
        if self.width < 0 or self.height < 0:
            raise ValueError("geometry width/height must be >= 0")


UNMEASURED = Geometry(width=0.0, height=0.0)


def map_value(scale: LinearScale, value):
    """Map domain -> range. Accepts a float or a numpy array."""
    t = _normalize(value, scale.domain_lo, scale.domain_hi)
    return _interpolate(t, scale.range_lo, scale.range_hi)


def invert(scale: LinearScale, value):
    """Map range -> domain, without clamping to the visible range."""
    t = _normalize(value, scale.range_lo, scale.range_hi)
    return _interpolate(t, scale.domain_lo, scale.domain_hi)


def time_scale(start_time_sec: float, end_time_sec: float, pixel_width: float) -> LinearScale:
    if pixel_width < 0:
        raise ValueError("pixel_width must be >= 0")
    return LinearScale(
        domain_lo=float(start_time_sec),
        domain_hi=float(end_time_sec),
        range_lo=0.0,
        range_hi=float(pixel_width),
    )


def value_scale(max_y: float, pixel_height: float) -> LinearScale:
    # Inverted range: larger values plot higher on screen.
    if pixel_height < 0:
        raise ValueError("pixel_height must be >= 0")
    return LinearScale(domain_lo=0.0, domain_hi=float(max_y), range_lo=float(pixel_height), range_hi=0.0)


def compute_max_y(
    visible_series: Sequence[AlignedSeries],
    min_spread: float = DEFAULT_VALUES_MIN_SPREAD,
    *,
    stacked: bool = False,
) -> float:
    out = float(min_spread)
    for series in visible_series:
        heights = graph_values(series, stacked=stacked)
        finite = heights[np.isfinite(heights)]
        if finite.size:
            out = max(out, float(np.max(finite)))
    return out


def _normalize(value, lo: float, hi: float):
    span = hi - lo
    if span == 0:
        if isinstance(value, np.ndarray):
            return np.full(value.shape, 0.5, dtype=np.float64)
        return 0.5
    return (value - lo) / span


def _interpolate(t, lo: float, hi: float):
    return lo * (1.0 - t) + hi * t
