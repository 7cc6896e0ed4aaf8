from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Callable

import numpy as np

from stackgraph.errors import GraphDataError
from stackgraph.values import GraphValue, from_array_value


SeriesNamer = Callable[[Mapping[str, Any]], str]


@dataclass(frozen=True)
class InputSeries:
    metadata: Mapping[str, Any]
    values: Sequence[Sequence[Any]]

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "InputSeries":
        """Coerce a `{"metadata": ..., "values": [[ts, value], ...]}` mapping.

        Range-query payloads carry their labels under `metric`; that key is
        accepted as well.
        """

        if not isinstance(raw, Mapping):
            raise GraphDataError(f"series must be a mapping, got {type(raw)!r}")
        if "values" not in raw:
            raise GraphDataError("series is missing `values`")
        metadata = raw.get("metadata", raw.get("metric", {}))
        if metadata is None:
            metadata = {}
        if not isinstance(metadata, Mapping):
            raise GraphDataError("series metadata must be a mapping")
        values = raw["values"]
        if values is None:
            values = []
        if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
            raise GraphDataError("series `values` must be a sequence of [timestamp, value] pairs")
        return cls(metadata=metadata, values=values)


def coerce_input_series(raw: InputSeries | Mapping[str, Any]) -> InputSeries:
    if isinstance(raw, InputSeries):
        return raw
    return InputSeries.from_mapping(raw)


def default_series_name(metadata: Mapping[str, Any]) -> str:
    name = str(metadata.get("__name__", ""))
    labels = [f'{key}="{metadata[key]}"' for key in sorted(metadata) if key != "__name__"]
    if not labels:
        return name or "{}"
    return f"{name}{{{', '.join(labels)}}}"


@dataclass(frozen=True)
class Datapoint:
    timestamp_sec: float
    value: GraphValue
    stack_offset: float = 0.0


@dataclass(frozen=True)
class AlignedSeries:
    name: str
    key: str
    color: str
    timestamps: np.ndarray = field(repr=False, compare=False)
    values: np.ndarray = field(repr=False, compare=False)
    offsets: np.ndarray = field(repr=False, compare=False)

    def __post_init__(self) -> None:
        if not (self.timestamps.shape == self.values.shape == self.offsets.shape):
            raise ValueError("timestamps/values/offsets shape mismatch")
        if self.timestamps.ndim != 1:
            raise ValueError("aligned series arrays must be 1-D")

    def __len__(self) -> int:
        return int(self.timestamps.size)

    @property
    def gap_mask(self) -> np.ndarray:
        return np.isnan(self.values)

    @property
    def datapoints(self) -> tuple[Datapoint, ...]:
        return tuple(self.datapoint(i) for i in range(len(self)))

    def datapoint(self, index: int) -> Datapoint:
        return Datapoint(
            timestamp_sec=float(self.timestamps[index]),
            value=from_array_value(self.values[index]),
            stack_offset=float(self.offsets[index]),
        )

    def with_offsets(self, offsets: np.ndarray) -> "AlignedSeries":
        arr = np.array(offsets, dtype=np.float64)
        arr.setflags(write=False)
        return replace(self, offsets=arr)
