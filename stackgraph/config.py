from __future__ import annotations

from dataclasses import asdict, dataclass
import math
from pathlib import Path
import tomllib
from typing import Any, Mapping

from stackgraph.colors import COLOR_THEMES, DEFAULT_COLOR_THEME
from stackgraph.formatting import DEFAULT_METRIC_UNITS, METRIC_UNITS
from stackgraph.scales import DEFAULT_VALUES_MIN_SPREAD


@dataclass(frozen=True)
class ChartOptions:
    color_theme: str = DEFAULT_COLOR_THEME
    metric_units: str = DEFAULT_METRIC_UNITS
    show_stacked: bool = False
    simple_tooltip: bool = False
    values_min_spread: float = DEFAULT_VALUES_MIN_SPREAD
    resize_debounce_s: float = 0.2
    pointer_min_interval_s: float = 1.0 / 60.0


DEFAULT_OPTIONS = ChartOptions()


def validate_chart_options(overrides: Mapping[str, Any] | None = None) -> ChartOptions:
    """Merge overrides over the defaults, rejecting unknown keys and values."""

    raw: dict[str, Any] = asdict(DEFAULT_OPTIONS)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown chart option: {key}")
            raw[key] = value

    if raw["color_theme"] not in COLOR_THEMES:
        raise ValueError(f"Option `color_theme` must be one of {sorted(COLOR_THEMES)}")
    if raw["metric_units"] not in METRIC_UNITS:
        raise ValueError(f"Option `metric_units` must be one of {sorted(METRIC_UNITS)}")
    for key in ("show_stacked", "simple_tooltip"):
        if not isinstance(raw[key], bool):
            raise ValueError(f"Option `{key}` must be a boolean")
    for key in ("values_min_spread", "resize_debounce_s", "pointer_min_interval_s"):
        value = raw[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ValueError(f"Option `{key}` must be a finite number")
    if raw["values_min_spread"] <= 0:
        raise ValueError("Option `values_min_spread` must be a positive number")
    if raw["resize_debounce_s"] < 0 or raw["pointer_min_interval_s"] < 0:
        raise ValueError("Rate-limit intervals must be >= 0")

    return ChartOptions(
        color_theme=str(raw["color_theme"]),
        metric_units=str(raw["metric_units"]),
        show_stacked=raw["show_stacked"],
        simple_tooltip=raw["simple_tooltip"],
        values_min_spread=float(raw["values_min_spread"]),
        resize_debounce_s=float(raw["resize_debounce_s"]),
        pointer_min_interval_s=float(raw["pointer_min_interval_s"]),
    )


def load_chart_options(path: str | Path) -> ChartOptions:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("chart", {})
    if not isinstance(table, dict):
        raise ValueError("`chart` must be a table")
    return validate_chart_options(table)
