"""Time-axis granularity derived from the visible duration."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Sequence

import numpy as np

from charting.viewport.domain import clamp_window

if TYPE_CHECKING:
    from charting.types import Candle, OverlayPoint, ViewportState

MS_PER_HOUR = 60 * 60 * 1000
MS_PER_DAY = 24 * MS_PER_HOUR

# Below this span ticks show the time of day
INTRADAY_THRESHOLD_MS = 36 * MS_PER_HOUR

# Above this span ticks show month and year
YEARLY_THRESHOLD_MS = 365 * MS_PER_DAY


class TickGranularity(str, Enum):
    """Label format selected for the time axis."""

    INTRADAY = "intraday"
    DAY = "day"
    MONTH = "month"


def visible_duration(
    series: Sequence[Candle] | Sequence[OverlayPoint],
    state: ViewportState,
) -> int:
    """Time spanned by the visible window, in the series' time units.

    :param series: Active series (candles or overlay rows).
    :param state: Current window.
    :returns: ``time[end] - time[start]``, or 0 when nothing is visible.
    """
    window = clamp_window(state, len(series))
    if window is None:
        return 0
    start, end = window
    return series[end].time - series[start].time


def sample_tick_times(
    series: Sequence[Candle] | Sequence[OverlayPoint],
    state: ViewportState,
    count: int = 5,
) -> list[int]:
    """Evenly spaced timestamps across the visible window.

    :param series: Active series.
    :param state: Current window.
    :param count: Maximum number of ticks.
    :returns: Distinct timestamps, time-ascending; empty when nothing is visible.
    """
    window = clamp_window(state, len(series))
    if window is None or count <= 0:
        return []
    start, end = window
    indices = np.unique(np.linspace(start, end, num=count).round().astype(int))
    return [series[int(i)].time for i in indices]


def select_granularity(duration_ms: int) -> TickGranularity:
    """Pick the tick label format for a visible duration in milliseconds."""
    if duration_ms < INTRADAY_THRESHOLD_MS:
        return TickGranularity.INTRADAY
    if duration_ms > YEARLY_THRESHOLD_MS:
        return TickGranularity.MONTH
    return TickGranularity.DAY


def format_tick(time_ms: int, granularity: TickGranularity) -> str:
    """Render a tick label in UTC.

    - intraday: ``HH:MM``
    - day: ``M/D``
    - month: ``M/YY``
    """
    moment = datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc)
    if granularity is TickGranularity.INTRADAY:
        return moment.strftime("%H:%M")
    if granularity is TickGranularity.MONTH:
        return f"{moment.month}/{moment.strftime('%y')}"
    return f"{moment.month}/{moment.day}"


__all__ = [
    "MS_PER_HOUR",
    "MS_PER_DAY",
    "INTRADAY_THRESHOLD_MS",
    "YEARLY_THRESHOLD_MS",
    "TickGranularity",
    "visible_duration",
    "sample_tick_times",
    "select_granularity",
    "format_tick",
]
