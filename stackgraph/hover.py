from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
import math

import numpy as np

from stackgraph.scales import LinearScale, invert, map_value
from stackgraph.series import AlignedSeries, Datapoint
from stackgraph.time_grid import TimeGrid
from stackgraph.values import GraphValue


@dataclass(frozen=True)
class HoverPoint:
    key: str
    name: str
    color: str
    value: GraphValue
    graph_position: GraphValue
    focused: bool = False


@dataclass(frozen=True)
class HoverResult:
    hover_timestamp_sec: float
    hover_x: float
    hover_y: float
    cursor_value: float
    points: tuple[HoverPoint, ...] = ()

    @property
    def focused_point(self) -> HoverPoint | None:
        return next((p for p in self.points if p.focused), None)


def datapoint_at(series: AlignedSeries, timestamp_sec: float) -> Datapoint | None:
    """First datapoint whose timestamp is >= timestamp_sec, if any."""
    index = int(np.searchsorted(series.timestamps, float(timestamp_sec), side="left"))
    if index >= len(series):
        return None
    return series.datapoint(index)


def resolve_hover(
    cursor_x: float,
    cursor_y: float,
    visible_series: Sequence[AlignedSeries],
    time_scale: LinearScale,
    value_scale: LinearScale,
    grid: TimeGrid,
    *,
    stacked: bool = False,
    simple_tooltip: bool = False,
) -> HoverResult | None:
    """Resolve a pointer position to the hovered grid timestamp and points.

    Returns None when the grid has no points to hover.
    """

    if len(grid) == 0:
        return None
    cursor_value = float(invert(value_scale, float(cursor_y)))
    hover_ts = grid.quantize(float(invert(time_scale, float(cursor_x))))

    points: list[HoverPoint] = []
    for series in visible_series:
        datapoint = datapoint_at(series, hover_ts)
        if datapoint is None:
            continue
        position = _graph_position(datapoint, stacked=stacked)
        points.append(
            HoverPoint(
                key=series.key,
                name=series.name,
                color=series.color,
                value=datapoint.value,
                graph_position=position,
            )
        )

    focused_key = _focused_key(points, cursor_value, stacked=stacked)
    points = [replace(p, focused=p.key == focused_key) for p in points]
    if simple_tooltip:
        points = [p for p in points if p.focused]

    return HoverResult(
        hover_timestamp_sec=hover_ts,
        hover_x=float(map_value(time_scale, hover_ts)),
        hover_y=float(cursor_y),
        cursor_value=cursor_value,
        points=tuple(points),
    )


def _graph_position(datapoint: Datapoint, *, stacked: bool) -> GraphValue:
    if datapoint.value is None:
        return None
    if stacked:
        return datapoint.stack_offset + datapoint.value
    return datapoint.value


def _focused_key(points: Sequence[HoverPoint], cursor_value: float, *, stacked: bool) -> str | None:
    candidates = [p for p in points if p.graph_position is not None]
    if math.isnan(cursor_value):
        return None
    best: HoverPoint | None = None
    if stacked:
        # The cursor is over the innermost band whose top edge is at or above it.
        for point in candidates:
            if point.graph_position < cursor_value:
                continue
            if best is None or point.graph_position < best.graph_position:
                best = point
    else:
        best_distance = math.inf
        for point in candidates:
            distance = abs(point.graph_position - cursor_value)
            if distance < best_distance:
                best, best_distance = point, distance
    return None if best is None else best.key
