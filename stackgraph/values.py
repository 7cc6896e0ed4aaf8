from __future__ import annotations

from decimal import Decimal
import math
from typing import Any

GAP = None

GraphValue = float | None


def parse_graph_value(raw: Any) -> GraphValue:
    """Parse a raw sample value, returning GAP for anything not finite.

    Textual infinities such as "+Inf" and "NaN" can't be graphed, so they
    become gaps like any other unparseable input.
    """

    if raw is None or isinstance(raw, (bool, bytes, bytearray)):
        return GAP
    # Digit-grouping underscores are Python literal syntax, not sample data.
    if isinstance(raw, str) and "_" in raw:
        return GAP
    if isinstance(raw, Decimal):
        raw = float(raw)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return GAP
    if not math.isfinite(value):
        return GAP
    return value


def is_gap(value: Any) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return False


def to_array_value(value: GraphValue) -> float:
    return math.nan if value is None else float(value)


def from_array_value(value: float) -> GraphValue:
    value = float(value)
    return GAP if math.isnan(value) else value
