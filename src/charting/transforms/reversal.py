"""Trend-reversal constructions: Three-Line-Break, Kagi and Point & Figure.

Each keeps a running trend and only changes its output when price continues
the trend or moves far enough against it to reverse. Samples that do neither
repeat the previous output so the series stays aligned with the raw input.
"""

from __future__ import annotations

import logging
import math
from typing import NamedTuple, Sequence

from charting.transforms.base import CandleTransform, resolve_size
from charting.types import Candle, ChartType, TransformDefaults, Trend

logger = logging.getLogger(__name__)


class _Line(NamedTuple):
    high: float
    low: float
    is_up: bool


class LineBreakTransform(CandleTransform):
    """Three-Line-Break chart.

    The first line is seeded from the first candle's open and close, and the
    first output is that candle unchanged. Each later close either extends
    the current direction past the last line, reverses it by breaking the
    extreme of the last ``lookback`` lines, or leaves the chart unchanged
    (a flat candle at the previous close with volume 0).

    :param lookback: Lines consulted for a reversal; values below 1 use the
        default.
    :param defaults: Default sizing heuristics.
    """

    chart_type = ChartType.LINE_BREAK

    def __init__(
        self,
        lookback: int | None = None,
        defaults: TransformDefaults | None = None,
    ) -> None:
        super().__init__(defaults)
        self.lookback = lookback

    def _effective_lookback(self) -> int:
        if self.lookback is None or self.lookback < 1:
            return self.defaults.line_break_lookback
        return int(self.lookback)

    def apply(self, candles: Sequence[Candle]) -> list[Candle]:
        if not candles:
            return []

        lookback = self._effective_lookback()
        first = candles[0]
        lines = [
            _Line(
                high=max(first.open, first.close),
                low=min(first.open, first.close),
                is_up=first.close >= first.open,
            )
        ]
        result: list[Candle] = [first]

        for candle in candles[1:]:
            price = candle.close
            last = lines[-1]
            recent = lines[-lookback:]
            min_low = min(line.low for line in recent)
            max_high = max(line.high for line in recent)

            new_line: _Line | None = None
            if last.is_up:
                if price > last.high:
                    new_line = _Line(high=price, low=last.high, is_up=True)
                elif price < min_low:
                    new_line = _Line(high=last.low, low=price, is_up=False)
            else:
                if price < last.low:
                    new_line = _Line(high=last.low, low=price, is_up=False)
                elif price > max_high:
                    new_line = _Line(high=price, low=last.high, is_up=True)

            if new_line is not None:
                lines.append(new_line)
                result.append(
                    Candle(
                        time=candle.time,
                        open=new_line.low if new_line.is_up else new_line.high,
                        high=new_line.high,
                        low=new_line.low,
                        close=new_line.high if new_line.is_up else new_line.low,
                        volume=candle.volume,
                    )
                )
            else:
                prev_close = result[-1].close
                result.append(
                    Candle(
                        time=candle.time,
                        open=prev_close,
                        high=prev_close,
                        low=prev_close,
                        close=prev_close,
                        volume=0.0,
                    )
                )

        logger.debug("Built %d line-break candles from %d lines", len(result), len(lines))
        return result


class KagiTransform(CandleTransform):
    """Kagi step line tagged with the running trend.

    The trend is seeded by comparing the first two closes (a single candle
    seeds an up trend). While up, higher closes raise the reference and a
    close more than the reversal amount below it flips the trend; the down
    case mirrors this. Every output point sits at its close with zero range.

    :param reversal_amount: Price move needed to reverse, or None for the
        default fraction of the last close.
    :param defaults: Default sizing heuristics.
    """

    chart_type = ChartType.KAGI

    def __init__(
        self,
        reversal_amount: float | None = None,
        defaults: TransformDefaults | None = None,
    ) -> None:
        super().__init__(defaults)
        self.reversal_amount = reversal_amount

    def apply(self, candles: Sequence[Candle]) -> list[Candle]:
        if not candles:
            return []

        amount = resolve_size(
            self.reversal_amount, candles, self.defaults.kagi_fraction
        )
        if len(candles) > 1 and candles[1].close < candles[0].close:
            trend = Trend.DOWN
        else:
            trend = Trend.UP
        reference = candles[0].close
        result: list[Candle] = []

        for candle in candles:
            price = candle.close
            if trend is Trend.UP:
                if price > reference:
                    reference = price
                elif price < reference - amount:
                    trend = Trend.DOWN
                    reference = price
            else:
                if price < reference:
                    reference = price
                elif price > reference + amount:
                    trend = Trend.UP
                    reference = price

            result.append(
                Candle(
                    time=candle.time,
                    open=price,
                    high=price,
                    low=price,
                    close=price,
                    volume=candle.volume,
                    trend=trend,
                )
            )

        logger.debug("Built %d kagi points with reversal %.6g", len(result), amount)
        return result


class PointAndFigureTransform(CandleTransform):
    """Point & Figure columns on a fixed box grid.

    The first close is snapped down to the box grid and opens an up column.
    Later closes extend the current column by whole boxes, or reverse it once
    price moves ``reversal_boxes`` boxes against it. The box size is carried
    on every output candle so a renderer can size its glyphs.

    :param box_size: Box height, or None for the default fraction of the last
        close.
    :param reversal_boxes: Boxes needed to reverse a column; values below 1
        use the default.
    :param defaults: Default sizing heuristics.
    """

    chart_type = ChartType.POINT_FIGURE

    def __init__(
        self,
        box_size: float | None = None,
        reversal_boxes: int | None = None,
        defaults: TransformDefaults | None = None,
    ) -> None:
        super().__init__(defaults)
        self.box_size = box_size
        self.reversal_boxes = reversal_boxes

    def _effective_reversal(self) -> int:
        if self.reversal_boxes is None or self.reversal_boxes < 1:
            return self.defaults.reversal_boxes
        return int(self.reversal_boxes)

    def apply(self, candles: Sequence[Candle]) -> list[Candle]:
        if not candles:
            return []

        size = resolve_size(
            self.box_size, candles, self.defaults.point_figure_fraction
        )
        reversal = self._effective_reversal()
        trend = Trend.UP
        level = math.floor(candles[0].close / size) * size
        last = Candle(
            time=candles[0].time,
            open=level,
            high=level,
            low=level,
            close=level,
            trend=Trend.UP,
            box_size=size,
        )
        result: list[Candle] = [last]

        for candle in candles[1:]:
            price = candle.close
            boxes = math.floor(abs(price - level) / size)

            if boxes == 0:
                last = last.model_copy(update={"time": candle.time})
            elif trend is Trend.UP:
                if price > level + size:
                    prev_close = last.close
                    level += boxes * size
                    last = Candle(
                        time=candle.time,
                        open=prev_close,
                        high=level,
                        low=prev_close,
                        close=level,
                        trend=Trend.UP,
                        box_size=size,
                    )
                elif price < level - size * reversal:
                    trend = Trend.DOWN
                    prior_level = level
                    level -= boxes * size
                    last = Candle(
                        time=candle.time,
                        open=prior_level,
                        high=prior_level,
                        low=level,
                        close=level,
                        trend=Trend.DOWN,
                        box_size=size,
                    )
                else:
                    last = last.model_copy(update={"time": candle.time})
            else:
                if price < level - size:
                    prev_close = last.close
                    level -= boxes * size
                    last = Candle(
                        time=candle.time,
                        open=prev_close,
                        high=prev_close,
                        low=level,
                        close=level,
                        trend=Trend.DOWN,
                        box_size=size,
                    )
                elif price > level + size * reversal:
                    trend = Trend.UP
                    prior_level = level
                    level += boxes * size
                    last = Candle(
                        time=candle.time,
                        open=prior_level,
                        high=level,
                        low=prior_level,
                        close=level,
                        trend=Trend.UP,
                        box_size=size,
                    )
                else:
                    last = last.model_copy(update={"time": candle.time})

            result.append(last)

        logger.debug("Built %d point & figure candles with box %.6g", len(result), size)
        return result
