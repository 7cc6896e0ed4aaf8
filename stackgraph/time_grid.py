from __future__ import annotations

from dataclasses import dataclass, field
import math

import numpy as np


# Repeated subtraction of the step drifts; a point within this distance of
# start_time_sec counts as reaching it, so an exact-multiple span ends on start.
GRID_TOLERANCE_SEC = 1e-6


def build_grid(start_time_sec: float, end_time_sec: float, step_duration_sec: float) -> np.ndarray:
    """Return ascending grid timestamps that always end exactly at end_time_sec."""

    start = float(start_time_sec)
    end = float(end_time_sec)
    step = float(step_duration_sec)
    if not math.isfinite(step) or step <= 0:
        raise ValueError("step_duration_sec must be > 0")
    if not (math.isfinite(start) and math.isfinite(end)):
        raise ValueError("start_time_sec/end_time_sec must be finite")
    if end < start:
        raise ValueError("end_time_sec must be >= start_time_sec")

    # Walk back from the end until a point sits at or before the start.
    count = max(int(math.ceil((end - start - GRID_TOLERANCE_SEC) / step)), 0) + 1
    out: list[float] = []
    ts = end
    for _ in range(count):
        out.append(ts)
        ts -= step
    return np.sort(np.asarray(out, dtype=np.float64))


@dataclass(frozen=True)
class TimeGrid:
    start_time_sec: float
    end_time_sec: float
    step_duration_sec: float
    timestamps: np.ndarray = field(init=False, repr=False, compare=False)
    _thresholds: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        timestamps = build_grid(self.start_time_sec, self.end_time_sec, self.step_duration_sec)
        timestamps.setflags(write=False)
        object.__setattr__(self, "timestamps", timestamps)
        object.__setattr__(self, "_thresholds", self._build_thresholds(timestamps))

    def __len__(self) -> int:
        return int(self.timestamps.size)

    @property
    def first(self) -> float:
        return float(self.timestamps[0])

    @property
    def last(self) -> float:
        return float(self.timestamps[-1])

    def index_of(self, timestamp_sec: float) -> int:
        """Index of the grid point owning timestamp_sec (clamped to the edges)."""
        if self.timestamps.size == 0:
            raise ValueError("grid is empty")
        return int(np.searchsorted(self._thresholds, float(timestamp_sec), side="right"))

    def quantize(self, timestamp_sec: float) -> float:
        return float(self.timestamps[self.index_of(timestamp_sec)])

    def quantize_indices(self, timestamps_sec: np.ndarray) -> np.ndarray:
        arr = np.asarray(timestamps_sec, dtype=np.float64)
        return np.searchsorted(self._thresholds, arr, side="right").astype(np.intp)

    def quantize_many(self, timestamps_sec: np.ndarray) -> np.ndarray:
        return self.timestamps[self.quantize_indices(timestamps_sec)]

    def _build_thresholds(self, timestamps: np.ndarray) -> np.ndarray:
        n = int(timestamps.size) - 1
        if n <= 0:
            return np.empty(0, dtype=np.float64)
        # Uniform buckets over [first - step/2, last + step/2]; a value sitting
        # exactly on a boundary belongs to the upper bucket.
        half = 0.5 * float(self.step_duration_sec)
        x0 = float(timestamps[0]) - half
        x1 = float(timestamps[-1]) + half
        i = np.arange(n, dtype=np.float64)
        return ((i + 1.0) * x1 - (i - float(n)) * x0) / float(n + 1)
