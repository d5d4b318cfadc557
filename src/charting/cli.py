#!/usr/bin/env python3
"""Command-line interface for the charting engine."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone

from charting.types import ChartType


def format_time(time_ms: int) -> str:
    """Format epoch milliseconds for display."""
    moment = datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M")


def positive_int(value: str) -> int:
    """argparse type for strictly positive integers."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{value}'") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def cmd_transform(args: argparse.Namespace) -> int:
    """Build an alternative chart type from a CSV file."""
    from charting.data import CSVDataSource, normalize_series
    from charting.exceptions import DataSourceError, DataValidationError
    from charting.transforms import SIZE_PARAMETERS, apply_chart_type
    from charting.types import TRANSFORM_CHART_TYPES

    chart_type = ChartType(args.type)

    params: dict[str, float | int] = {}
    if args.size is not None and chart_type in SIZE_PARAMETERS:
        params[SIZE_PARAMETERS[chart_type]] = args.size
    if args.lookback is not None and chart_type is ChartType.LINE_BREAK:
        params["lookback"] = args.lookback
    if args.reversal_boxes is not None and chart_type is ChartType.POINT_FIGURE:
        params["reversal_boxes"] = args.reversal_boxes

    try:
        source = CSVDataSource({"file_path": args.source})
        raw = normalize_series(source.fetch_candles())
    except (DataSourceError, DataValidationError) as e:
        print(f"Failed to load candles: {e}")
        return 1

    if not raw:
        print("Error: No candles found in source.")
        return 1

    derived = apply_chart_type(raw, chart_type, **params)

    print("=" * 72)
    print(f"TRANSFORM: {chart_type.value}")
    print("=" * 72)
    print(f"Source:    {args.source}")
    print(f"Candles:   {len(raw)}")
    if chart_type not in TRANSFORM_CHART_TYPES:
        print("Note:      rendering-only chart type, candles passed through")
    if params:
        print(f"Params:    {', '.join(f'{k}={v}' for k, v in params.items())}")

    print(
        f"\n{'Time':<17} {'Open':>12} {'High':>12} {'Low':>12} {'Close':>12} {'Trend':>6}"
    )
    print("-" * 72)
    shown = derived if args.limit is None else derived[-args.limit:]
    for candle in shown:
        trend = candle.trend.value if candle.trend else ""
        print(
            f"{format_time(candle.time):<17} {candle.open:>12.4f} {candle.high:>12.4f} "
            f"{candle.low:>12.4f} {candle.close:>12.4f} {trend:>6}"
        )
    if len(shown) < len(derived):
        print(f"   ... {len(derived) - len(shown)} earlier candles not shown")

    return 0


def cmd_view(args: argparse.Namespace) -> int:
    """Replay a viewport configuration and report the result."""
    from charting.commands.view import load_view_config, run_view
    from charting.exceptions import (ConfigError, DataSourceError,
                                     DataValidationError)
    from charting.log import setup_logging

    try:
        config = load_view_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1

    if args.log_level is None:
        setup_logging(config.log_level)

    print("=" * 60)
    print("VIEW")
    print("=" * 60)
    print(f"Symbol:      {config.symbol}")
    print(f"Timeframe:   {config.timeframe}")
    print(f"Chart type:  {config.chart_type.value}")
    print(f"Source:      {config.source_type}")
    print(f"Zoom steps:  {len(config.zoom_events)}")
    if config.compare:
        print(f"Compare:     {', '.join(c.name for c in config.compare)}")

    try:
        summary = run_view(config)
    except (DataSourceError, DataValidationError) as e:
        print(f"Failed to load candles: {e}")
        return 1

    print("\n" + "=" * 60)
    print("VIEWPORT")
    print("=" * 60)
    print(f"Candles:     {summary.candle_count}")
    if summary.state.is_empty:
        print("Window:      (empty)")
    else:
        print(
            f"Window:      {summary.state.start_index}..{summary.state.end_index} "
            f"({summary.state.visible_count} visible)"
        )
    if summary.y_domain == "auto":
        print("Y domain:    auto")
    else:
        low, high = summary.y_domain
        unit = "%" if summary.overlay_names else ""
        print(f"Y domain:    {low:,.4f}{unit} .. {high:,.4f}{unit}")
    print(f"Duration:    {summary.visible_duration / 3_600_000:,.1f} h")
    print(f"Ticks:       {summary.granularity}  {' | '.join(summary.tick_labels)}")

    return 0


def cmd_chart_types(args: argparse.Namespace) -> int:
    """List the available chart types."""
    from charting.transforms import SIZE_PARAMETERS
    from charting.types import TRANSFORM_CHART_TYPES

    print(f"{'Chart type':<16} {'Kind':<12} {'Size parameter':<16}")
    print("-" * 46)
    for chart_type in ChartType:
        kind = "transform" if chart_type in TRANSFORM_CHART_TYPES else "rendering"
        size_param = SIZE_PARAMETERS.get(chart_type, "-")
        print(f"{chart_type.value:<16} {kind:<12} {size_param:<16}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Candle aggregation and viewport CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: from config, else WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Transform command
    transform_parser = subparsers.add_parser(
        "transform", help="Build an alternative chart type from a CSV file"
    )
    transform_parser.add_argument("source", help="Path to CSV file with candles")
    transform_parser.add_argument(
        "-t",
        "--type",
        default=ChartType.HEIKIN_ASHI.value,
        choices=[c.value for c in ChartType],
        help="Chart type to build (default: heikin_ashi)",
    )
    transform_parser.add_argument(
        "-s",
        "--size",
        type=float,
        help="Brick/box/range size or Kagi reversal amount",
    )
    transform_parser.add_argument(
        "--lookback", type=int, help="Line-break lookback (default: 3)"
    )
    transform_parser.add_argument(
        "--reversal-boxes", type=int, help="Point & Figure reversal boxes (default: 3)"
    )
    transform_parser.add_argument(
        "-n", "--limit", type=positive_int, help="Show only the last N candles"
    )

    # View command
    view_parser = subparsers.add_parser(
        "view", help="Replay a viewport configuration"
    )
    view_parser.add_argument("config", help="Path to YAML configuration file")

    # Chart types command
    subparsers.add_parser("chart-types", help="List available chart types")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    from charting.log import setup_logging

    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level or "WARNING")

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "transform":
        return cmd_transform(args)
    elif args.command == "view":
        return cmd_view(args)
    elif args.command == "chart-types":
        return cmd_chart_types(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
