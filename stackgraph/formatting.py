from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext
import math
from typing import Callable

from stackgraph.values import is_gap

GAP_LABEL = "---"
DEFAULT_METRIC_UNITS = "none"

ValueFormatter = Callable[[float | None], str]

_METRIC_PREFIXES = (
    ("T", 1_000_000_000_000),
    ("G", 1_000_000_000),
    ("M", 1_000_000),
    ("k", 1_000),
)
_DECIMAL_PRECISIONS = (
    (1.0, 0),
    (0.1, 1),
    (0.01, 2),
    (0.001, 3),
    (0.0001, 4),
)
_BYTE_UNITS = (
    ("TB", 1024**4),
    ("GB", 1024**3),
    ("MB", 1024**2),
    ("kB", 1024),
    ("B", 1),
)


def to_fixed(value: float, precision: int) -> str:
    """Fixed-point rendering with halves rounded away from zero."""
    d = Decimal(value)
    quant = Decimal(1).scaleb(-precision)
    with localcontext() as ctx:
        # Enough digits for the integer part plus the requested decimals.
        ctx.prec = max(ctx.prec, d.adjusted() + precision + 2)
        out = format(d.quantize(quant, rounding=ROUND_HALF_UP), "f")
    if out.startswith("-") and not out.strip("-0."):
        out = out[1:]
    return out


def _none_formatter(reference: float) -> ValueFormatter:
    base_unit = 1
    precision = 0
    label = ""
    big = next(((lbl, unit) for lbl, unit in _METRIC_PREFIXES if reference / unit >= 2), None)
    small = next((prec for base, prec in _DECIMAL_PRECISIONS if reference / base >= 2), None)
    if big is not None:
        label, base_unit = big
    elif small is not None:
        precision = small

    def fmt(value: float | None) -> str:
        if is_gap(value):
            return GAP_LABEL
        if value == 0:
            return "0"
        text = to_fixed(value / base_unit, precision)
        return f"{text} {label}" if label else text

    return fmt


def _bytes_formatter(reference: float) -> ValueFormatter:
    unit = next(((lbl, size) for lbl, size in _BYTE_UNITS if reference / size >= 2), None)

    def fmt(value: float | None) -> str:
        if is_gap(value):
            return GAP_LABEL
        if unit is None:
            return "0"
        label, size = unit
        return f"{math.floor(value / size + 0.5)} {label}"

    return fmt


def _percent_formatter(reference: float) -> ValueFormatter:
    def fmt(value: float | None) -> str:
        if is_gap(value):
            return GAP_LABEL
        if value == 0:
            return "0%"
        return f"{to_fixed(value * 100, 2)}%"

    return fmt


METRIC_UNITS: dict[str, Callable[[float], ValueFormatter]] = {
    "none": _none_formatter,
    "bytes": _bytes_formatter,
    "percent": _percent_formatter,
}


def value_formatter(metric_units: str, reference: float) -> ValueFormatter:
    """Build one formatter for every label on an axis.

    The unit prefix and precision are chosen once from `reference` (normally
    the y-axis max) so all labels on the axis share them.
    """

    try:
        factory = METRIC_UNITS[metric_units]
    except KeyError:
        raise ValueError(f"Unknown metric units: {metric_units}") from None
    return factory(float(reference))
