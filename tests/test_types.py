"""Tests for core type definitions."""

import pytest
from pydantic import ValidationError

from charting.types import (TRANSFORM_CHART_TYPES, Candle, ChartType,
                            OverlayPoint, SeriesKey, TransformDefaults,
                            ViewportState)


class TestCandle:
    """Tests for the Candle model."""

    def test_optional_fields_default_to_none(self) -> None:
        candle = Candle(time=0, open=1.0, high=2.0, low=0.5, close=1.5)
        assert candle.volume is None
        assert candle.trend is None
        assert candle.box_size is None

    def test_candle_is_immutable(self) -> None:
        """Candles are frozen so derived series can share them."""
        candle = Candle(time=0, open=1.0, high=2.0, low=0.5, close=1.5)
        with pytest.raises(ValidationError):
            candle.close = 3.0

    def test_model_copy_updates_time(self) -> None:
        candle = Candle(time=0, open=1.0, high=2.0, low=0.5, close=1.5, volume=10.0)
        moved = candle.model_copy(update={"time": 60_000})
        assert moved.time == 60_000
        assert moved.close == candle.close
        assert moved.volume == 10.0


class TestViewportState:
    """Tests for the ViewportState model."""

    def test_empty_window(self) -> None:
        state = ViewportState.empty()
        assert state.is_empty
        assert state.visible_count == 0

    def test_visible_count_is_inclusive(self) -> None:
        state = ViewportState(start_index=10, end_index=19)
        assert not state.is_empty
        assert state.visible_count == 10

    def test_negative_start_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ViewportState(start_index=-1, end_index=5)

    def test_states_compare_by_value(self) -> None:
        assert ViewportState(start_index=0, end_index=9) == ViewportState(
            start_index=0, end_index=9
        )


class TestSeriesKey:
    """Tests for the SeriesKey model."""

    def test_default_chart_type_is_candle(self) -> None:
        key = SeriesKey(symbol="BTC", timeframe="30")
        assert key.chart_type is ChartType.CANDLE

    def test_keys_are_hashable(self) -> None:
        a = SeriesKey(symbol="BTC", timeframe="30", chart_type=ChartType.RENKO)
        b = SeriesKey(symbol="BTC", timeframe="30", chart_type=ChartType.RENKO)
        assert {a: 1}[b] == 1

    def test_chart_type_distinguishes_keys(self) -> None:
        a = SeriesKey(symbol="BTC", timeframe="30", chart_type=ChartType.RENKO)
        b = SeriesKey(symbol="BTC", timeframe="30", chart_type=ChartType.KAGI)
        assert a != b


class TestTransformDefaults:
    """Tests for the TransformDefaults model."""

    def test_builtin_values(self) -> None:
        defaults = TransformDefaults()
        assert defaults.renko_fraction == 0.005
        assert defaults.kagi_fraction == 0.01
        assert defaults.point_figure_fraction == 0.005
        assert defaults.range_fraction == 0.005
        assert defaults.line_break_lookback == 3
        assert defaults.reversal_boxes == 3

    @pytest.mark.parametrize("field", ["renko_fraction", "kagi_fraction", "range_fraction"])
    def test_non_positive_fraction_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError):
            TransformDefaults(**{field: 0.0})

    def test_zero_lookback_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TransformDefaults(line_break_lookback=0)


def test_transform_chart_types() -> None:
    """Exactly six chart types reshape the series."""
    assert TRANSFORM_CHART_TYPES == {
        ChartType.HEIKIN_ASHI,
        ChartType.RENKO,
        ChartType.LINE_BREAK,
        ChartType.KAGI,
        ChartType.POINT_FIGURE,
        ChartType.RANGE,
    }


def test_overlay_point_defaults_to_no_values() -> None:
    assert OverlayPoint(time=0).values == {}
