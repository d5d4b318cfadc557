"""Viewport window, value domain and time-axis granularity."""

from charting.viewport.controller import ViewportController
from charting.viewport.domain import (clamp_window, compute_overlay_domain,
                                      compute_y_domain)
from charting.viewport.reducers import (MIN_VISIBLE_CANDLES, reduce_window,
                                        reduce_zoom, reset_viewport)
from charting.viewport.ticks import (TickGranularity, format_tick,
                                     sample_tick_times, select_granularity,
                                     visible_duration)

__all__ = [
    # Controller
    "ViewportController",
    # Reducers
    "MIN_VISIBLE_CANDLES",
    "reset_viewport",
    "reduce_zoom",
    "reduce_window",
    # Domain
    "clamp_window",
    "compute_y_domain",
    "compute_overlay_domain",
    # Ticks
    "TickGranularity",
    "visible_duration",
    "sample_tick_times",
    "select_granularity",
    "format_tick",
]
