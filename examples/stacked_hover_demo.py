from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from stackgraph import ChartOptions, Geometry, TimeSeriesChart, load_chart_options


def _fake_series(start: float, end: float, count: int) -> list[dict[str, object]]:
    out: list[dict[str, object]] = []
    for i in range(count):
        values = []
        ts = start + 7.0 * i
        while ts <= end:
            level = 1.0 + i + math.sin(ts / 300.0 + i)
            # Timestamps divisible by 11 report an unparseable value.
            raw = "+Inf" if int(ts) % 11 == 0 else f"{level:.3f}"
            values.append([ts, raw])
            ts += 13.0
        if values:
            out.append({"metadata": {"__name__": "requests", "pod": f"api-{i}"}, "values": values})
    return out


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Resolve hover tooltips over a synthetic stacked chart.")
    parser.add_argument("--series", type=int, default=3)
    parser.add_argument("--width", type=float, default=800.0)
    parser.add_argument("--height", type=float, default=200.0)
    parser.add_argument("--config", type=Path, default=None, help="TOML file with a [chart] table")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    options = load_chart_options(args.config) if args.config else ChartOptions(show_stacked=True)

    start, end = 1_700_000_000.0, 1_700_003_600.0
    chart = TimeSeriesChart(
        start_time_sec=start,
        end_time_sec=end,
        step_duration_sec=60.0,
        multi_series=_fake_series(start, end, args.series),
        options=options,
        geometry=Geometry(width=args.width, height=args.height),
    )
    fmt = chart.value_formatter()
    print(f"grid points: {len(chart.grid)}  y max: {fmt(chart.y_axis_max())}")
    for entry in chart.legend_entries():
        print(f"  {entry.color:<20} {entry.name}")

    for x, y in ((args.width * 0.25, args.height * 0.9), (args.width * 0.75, args.height * 0.2)):
        hover = chart.pointer_move(x, y)
        if hover is None:
            continue
        print(f"hover @ t={hover.hover_timestamp_sec:.0f} (x={hover.hover_x:.1f}px)")
        for point in hover.points:
            marker = "*" if point.focused else " "
            print(f"  {marker} {point.name:<32} {fmt(point.value)}")
    chart.pointer_leave()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
