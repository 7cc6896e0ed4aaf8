from stackgraph.align import align_series
from stackgraph.chart import ChartData, LegendEntry, TimeSeriesChart, build_chart_data
from stackgraph.colors import COLOR_THEMES, color_for
from stackgraph.config import ChartOptions, load_chart_options, validate_chart_options
from stackgraph.errors import GraphDataError
from stackgraph.formatting import value_formatter
from stackgraph.hover import HoverPoint, HoverResult, resolve_hover
from stackgraph.scales import Geometry, LinearScale, compute_max_y, invert, map_value, time_scale, value_scale
from stackgraph.series import AlignedSeries, Datapoint, InputSeries, default_series_name
from stackgraph.stacking import stack_series
from stackgraph.state import ChartState
from stackgraph.time_grid import GRID_TOLERANCE_SEC, TimeGrid
from stackgraph.values import GAP, is_gap, parse_graph_value

__all__ = [
    "AlignedSeries",
    "COLOR_THEMES",
    "ChartData",
    "ChartOptions",
    "ChartState",
    "Datapoint",
    "GAP",
    "GRID_TOLERANCE_SEC",
    "Geometry",
    "GraphDataError",
    "HoverPoint",
    "HoverResult",
    "InputSeries",
    "LegendEntry",
    "LinearScale",
    "TimeGrid",
    "TimeSeriesChart",
    "align_series",
    "build_chart_data",
    "color_for",
    "compute_max_y",
    "default_series_name",
    "invert",
    "is_gap",
    "load_chart_options",
    "map_value",
    "parse_graph_value",
    "resolve_hover",
    "stack_series",
    "time_scale",
    "validate_chart_options",
    "value_formatter",
    "value_scale",
]
