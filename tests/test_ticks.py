"""Tests for time-axis granularity."""

import pytest

from charting.types import Candle, ViewportState
from charting.viewport import (TickGranularity, format_tick,
                               sample_tick_times, select_granularity,
                               visible_duration)
from charting.viewport.ticks import (INTRADAY_THRESHOLD_MS, MS_PER_HOUR,
                                     YEARLY_THRESHOLD_MS)

# 2024-01-01T00:00:00Z
JAN_1_2024 = 1_704_067_200_000


def _series(count: int, step_ms: int) -> list[Candle]:
    return [
        Candle(time=JAN_1_2024 + i * step_ms, open=1.0, high=1.0, low=1.0, close=1.0)
        for i in range(count)
    ]


class TestVisibleDuration:
    """Tests for visible_duration."""

    def test_duration_of_window(self) -> None:
        series = _series(10, MS_PER_HOUR)
        state = ViewportState(start_index=2, end_index=5)
        assert visible_duration(series, state) == 3 * MS_PER_HOUR

    def test_empty_window(self) -> None:
        assert visible_duration([], ViewportState.empty()) == 0

    def test_single_candle_window(self) -> None:
        series = _series(3, MS_PER_HOUR)
        assert visible_duration(series, ViewportState(start_index=1, end_index=1)) == 0


class TestSelectGranularity:
    """Tests for select_granularity."""

    @pytest.mark.parametrize(
        "duration,expected",
        [
            (0, TickGranularity.INTRADAY),
            (INTRADAY_THRESHOLD_MS - 1, TickGranularity.INTRADAY),
            (INTRADAY_THRESHOLD_MS, TickGranularity.DAY),
            (YEARLY_THRESHOLD_MS, TickGranularity.DAY),
            (YEARLY_THRESHOLD_MS + 1, TickGranularity.MONTH),
        ],
    )
    def test_thresholds(self, duration: int, expected: TickGranularity) -> None:
        assert select_granularity(duration) is expected


class TestFormatTick:
    """Tests for format_tick."""

    def test_intraday_shows_time_of_day(self) -> None:
        assert format_tick(JAN_1_2024 + 12 * MS_PER_HOUR + 30 * 60_000,
                           TickGranularity.INTRADAY) == "12:30"

    def test_day_shows_month_and_day(self) -> None:
        assert format_tick(JAN_1_2024, TickGranularity.DAY) == "1/1"

    def test_month_shows_month_and_year(self) -> None:
        assert format_tick(JAN_1_2024, TickGranularity.MONTH) == "1/24"


class TestSampleTickTimes:
    """Tests for sample_tick_times."""

    def test_ticks_span_window(self) -> None:
        series = _series(100, MS_PER_HOUR)
        state = ViewportState(start_index=10, end_index=90)
        ticks = sample_tick_times(series, state, count=5)

        assert len(ticks) == 5
        assert ticks[0] == series[10].time
        assert ticks[-1] == series[90].time
        assert ticks == sorted(ticks)

    def test_narrow_window_deduplicates(self) -> None:
        series = _series(10, MS_PER_HOUR)
        ticks = sample_tick_times(series, ViewportState(start_index=3, end_index=4), count=5)
        assert ticks == [series[3].time, series[4].time]

    def test_empty_window(self) -> None:
        assert sample_tick_times([], ViewportState.empty()) == []
