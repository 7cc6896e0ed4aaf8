from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from stackgraph.hover import HoverResult
from stackgraph.series import AlignedSeries
from stackgraph.stacking import collapse_stack


@dataclass(frozen=True)
class ChartState:
    """Transient interaction state; only replaced through the transitions below."""

    selected_key: str | None = None
    hovered_key: str | None = None
    hover: HoverResult | None = None


def on_pointer_move(state: ChartState, hover: HoverResult | None) -> ChartState:
    return replace(state, hover=hover)


def on_pointer_leave(state: ChartState) -> ChartState:
    return replace(state, hover=None)


def on_select(state: ChartState, key: str | None) -> ChartState:
    # The visible set changes, so any resolved hover points are stale.
    if key == state.selected_key:
        return state
    return replace(state, selected_key=key, hover=None)


def on_hover(state: ChartState, key: str | None) -> ChartState:
    return replace(state, hovered_key=key)


def on_rebuild(state: ChartState, series: Sequence[AlignedSeries]) -> ChartState:
    keys = {s.key for s in series}
    return ChartState(
        selected_key=state.selected_key if state.selected_key in keys else None,
        hovered_key=state.hovered_key if state.hovered_key in keys else None,
        hover=None,
    )


def visible_series(series: Sequence[AlignedSeries], state: ChartState) -> tuple[AlignedSeries, ...]:
    """All series, or only the selected one with its stack collapsed to the axis."""
    if state.selected_key is None:
        return tuple(series)
    return tuple(collapse_stack(s) for s in series if s.key == state.selected_key)


def is_faded(state: ChartState, key: str) -> bool:
    return state.selected_key is None and state.hovered_key is not None and state.hovered_key != key


def is_focused(state: ChartState, key: str) -> bool:
    return key in (state.hovered_key, state.selected_key)
