"""Configuration and execution for the view command.

Example config file (view.yaml):

    source:
      type: "csv"              # csv | synthetic
      params:
        file_path: "btc_30d.csv"
    symbol: "BTC"
    timeframe: "30"
    chart_type: "renko"
    transform_params:
      brick_size: 250.0        # Optional, default is a fraction of the last close
    defaults:                  # Optional overrides of the sizing heuristics
      renko_fraction: 0.005
    compare:                   # Optional comparison overlay, primary first
      - name: "ETH"
        source: {type: "csv", params: {file_path: "eth_30d.csv"}}
    viewport:
      detail_mode: true
      zoom:
        - {cursor_ratio: 0.5, direction: "in"}
        - {cursor_ratio: 0.0, direction: "in"}
      window: [10, 60]         # Optional brush selection applied last
    logging:
      level: "INFO"
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from charting.data.normalize import normalize_series
from charting.data.sources import resolve_data_source
from charting.exceptions import ConfigError
from charting.log import VALID_LOG_LEVELS
from charting.transforms.cache import TransformCache
from charting.transforms.registry import TRANSFORM_PARAMETERS
from charting.data.overlay import build_overlay
from charting.types import (ChartType, CompareSource, SeriesKey,
                            TransformDefaults, ViewConfig, ViewSummary,
                            ZoomDirection, ZoomEvent)
from charting.viewport.controller import ViewportController
from charting.viewport.ticks import format_tick, sample_tick_times

logger = logging.getLogger(__name__)

# Valid source types
VALID_SOURCE_TYPES = frozenset(["csv", "synthetic"])


def _parse_source(raw_source: Any, field: str) -> tuple[str, dict[str, Any]]:
    """Parse a ``{type, params}`` source mapping.

    :raises ConfigError: If the mapping is malformed or the type unknown.
    """
    if not isinstance(raw_source, dict) or "type" not in raw_source:
        raise ConfigError(f"'{field}' must be a mapping with a 'type'")
    source_type = str(raw_source["type"]).lower()
    if source_type not in VALID_SOURCE_TYPES:
        raise ConfigError(
            f"Invalid source type '{raw_source['type']}'. "
            f"Valid options: {sorted(VALID_SOURCE_TYPES)}"
        )
    source_params = raw_source.get("params", {})
    if not isinstance(source_params, dict):
        raise ConfigError(f"'{field}.params' must be a mapping")
    return source_type, source_params


def _parse_compare(raw_compare: Any, symbol: str) -> list[CompareSource]:
    """Parse the ``compare`` list of overlay series.

    :raises ConfigError: If an entry is malformed or a name repeats.
    """
    if not isinstance(raw_compare, list):
        raise ConfigError("'compare' must be a list")

    seen = {symbol}
    sources = []
    for i, raw_entry in enumerate(raw_compare):
        if not isinstance(raw_entry, dict) or not raw_entry.get("name"):
            raise ConfigError(f"'compare[{i}]' must be a mapping with a 'name'")
        name = str(raw_entry["name"])
        if name in seen:
            raise ConfigError(f"Duplicate series name in 'compare': '{name}'")
        seen.add(name)
        source_type, source_params = _parse_source(
            raw_entry.get("source"), f"compare[{i}].source"
        )
        sources.append(
            CompareSource(name=name, source_type=source_type, source_params=source_params)
        )
    return sources


def _parse_zoom_events(raw_zoom: Any) -> list[ZoomEvent]:
    """Parse the ``viewport.zoom`` list.

    :raises ConfigError: If an entry is malformed.
    """
    if not isinstance(raw_zoom, list):
        raise ConfigError("'viewport.zoom' must be a list")

    events = []
    for i, raw_event in enumerate(raw_zoom):
        if not isinstance(raw_event, dict):
            raise ConfigError(f"'viewport.zoom[{i}]' must be a mapping")

        ratio = raw_event.get("cursor_ratio", 0.5)
        if isinstance(ratio, bool) or not isinstance(ratio, (int, float)):
            raise ConfigError(f"'viewport.zoom[{i}].cursor_ratio' must be a number")
        if not 0.0 <= ratio <= 1.0:
            raise ConfigError(f"'viewport.zoom[{i}].cursor_ratio' must be within [0, 1]")

        direction = raw_event.get("direction", "in")
        try:
            direction = ZoomDirection(direction)
        except ValueError:
            raise ConfigError(
                f"Invalid zoom direction '{direction}'. Valid options: ['in', 'out']"
            ) from None

        events.append(ZoomEvent(cursor_ratio=float(ratio), direction=direction))
    return events


def _parse_window(raw_window: Any) -> tuple[int, int] | None:
    if raw_window is None:
        return None
    if (
        not isinstance(raw_window, list)
        or len(raw_window) != 2
        or not all(isinstance(v, int) and not isinstance(v, bool) for v in raw_window)
    ):
        raise ConfigError("'viewport.window' must be a list of two integers")
    return raw_window[0], raw_window[1]


def load_view_config(config_path: str | Path) -> ViewConfig:
    """Parse and validate a view configuration file.

    :param config_path: Path to YAML configuration file.
    :returns: Validated ViewConfig object.
    :raises ConfigError: If file cannot be read or config is invalid.
    """
    config_path = Path(config_path)

    # Read and parse YAML
    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError("Configuration must be a YAML mapping")

    # Parse source (required)
    source_type, source_params = _parse_source(raw_config.get("source"), "source")
    symbol = str(raw_config.get("symbol", "SERIES"))

    # Parse chart_type
    raw_chart_type = raw_config.get("chart_type", ChartType.CANDLE.value)
    try:
        chart_type = ChartType(raw_chart_type)
    except ValueError:
        raise ConfigError(
            f"Invalid chart_type '{raw_chart_type}'. "
            f"Valid options: {sorted(c.value for c in ChartType)}"
        ) from None

    # Parse transform_params (optional)
    transform_params = raw_config.get("transform_params", {})
    if not isinstance(transform_params, dict):
        raise ConfigError("'transform_params' must be a mapping")
    allowed = TRANSFORM_PARAMETERS.get(chart_type, frozenset())
    unknown = sorted(set(transform_params) - allowed)
    if unknown:
        raise ConfigError(
            f"Unknown transform_params for '{chart_type.value}': {unknown}. "
            f"Valid options: {sorted(allowed)}"
        )
    for name, value in transform_params.items():
        if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
            raise ConfigError(f"'transform_params.{name}' must be a number")

    # Parse defaults (optional)
    raw_defaults = raw_config.get("defaults", {})
    if not isinstance(raw_defaults, dict):
        raise ConfigError("'defaults' must be a mapping")
    try:
        defaults = TransformDefaults(**raw_defaults)
    except (TypeError, ValidationError) as e:
        raise ConfigError(f"Invalid 'defaults': {e}") from e

    # Parse compare (optional)
    compare = _parse_compare(raw_config.get("compare", []), symbol)

    # Parse viewport (optional)
    raw_viewport = raw_config.get("viewport", {})
    if not isinstance(raw_viewport, dict):
        raise ConfigError("'viewport' must be a mapping")
    detail_mode = raw_viewport.get("detail_mode", False)
    if not isinstance(detail_mode, bool):
        raise ConfigError("'viewport.detail_mode' must be a boolean")
    zoom_events = _parse_zoom_events(raw_viewport.get("zoom", []))
    window = _parse_window(raw_viewport.get("window"))

    # Parse logging (optional)
    raw_logging = raw_config.get("logging", {})
    if not isinstance(raw_logging, dict):
        raise ConfigError("'logging' must be a mapping")
    log_level = str(raw_logging.get("level", "INFO")).upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid logging level '{log_level}'. "
            f"Valid options: {sorted(VALID_LOG_LEVELS)}"
        )

    return ViewConfig(
        source_type=source_type,
        source_params=source_params,
        symbol=symbol,
        timeframe=str(raw_config.get("timeframe", "1d")),
        chart_type=chart_type,
        transform_params=transform_params,
        defaults=defaults,
        detail_mode=detail_mode,
        zoom_events=zoom_events,
        window=window,
        compare=compare,
        log_level=log_level,
    )


def summarize_view(controller: ViewportController, tick_count: int = 5) -> ViewSummary:
    """Collect the renderer-facing outputs of a controller.

    :param controller: Controller with an active, loaded series.
    :param tick_count: Number of sample tick labels.
    :returns: ViewSummary of the current state.
    :raises ValueError: If no series is active.
    """
    if controller.key is None:
        raise ValueError("Controller has no active series")

    granularity = controller.granularity
    ticks = sample_tick_times(controller.series, controller.state, tick_count)
    return ViewSummary(
        key=controller.key,
        candle_count=controller.length,
        state=controller.state,
        y_domain=controller.y_domain,
        visible_duration=controller.visible_duration,
        granularity=granularity.value,
        tick_labels=[format_tick(t, granularity) for t in ticks],
        overlay_names=list(controller.overlay_names),
    )


def run_view(config: ViewConfig) -> ViewSummary:
    """Load candles, build the chart type and replay viewport events.

    With ``compare`` sources the primary and compared raw series are merged
    into a percentage-change overlay instead of applying the chart type.

    :param config: Validated view configuration.
    :returns: Summary of the final view.
    :raises DataSourceError: If the candle source fails.
    :raises DataValidationError: If the candles are malformed.
    """
    source = resolve_data_source(config)
    raw = normalize_series(source.fetch_candles())
    logger.info("Loaded %d candles from %s source", len(raw), config.source_type)

    key = SeriesKey(
        symbol=config.symbol,
        timeframe=config.timeframe,
        chart_type=config.chart_type,
    )
    controller = ViewportController(detail_mode=config.detail_mode)
    controller.activate(key)

    if config.compare:
        series_by_name = {config.symbol: raw}
        for compared in config.compare:
            candles = normalize_series(resolve_data_source(compared).fetch_candles())
            logger.info("Loaded %d candles for comparison %s", len(candles), compared.name)
            series_by_name[compared.name] = candles
        controller.load(key, build_overlay(series_by_name), overlay_names=list(series_by_name))
    else:
        cache = TransformCache(config.defaults)
        derived = cache.get(key, raw, config.chart_type, **config.transform_params)
        controller.load(key, derived)

    for event in config.zoom_events:
        controller.zoom(event.cursor_ratio, event.direction)
    if config.window is not None:
        start, end = config.window
        state = controller.set_window(start, end)
        if (state.start_index, state.end_index) != (start, end):
            logger.warning("Window %s rejected for %d candles", config.window, controller.length)

    return summarize_view(controller)
