"""Price-threshold constructions: Renko bricks and range bars.

Both ignore time and only emit a new bar once price has travelled a fixed
distance. Input samples that do not cross the threshold are forward-filled so
the output stays aligned with the raw time axis.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from charting.transforms.base import CandleTransform, resolve_size
from charting.types import Candle, ChartType, TransformDefaults

logger = logging.getLogger(__name__)


class RenkoTransform(CandleTransform):
    """Renko bricks of fixed height.

    A running reference starts at the first close. When a close moves at
    least one brick away from the reference, the output candle spans the
    whole number of bricks covered and the reference advances to the brick
    edge. Otherwise a flat candle at the reference is emitted with volume 0.

    :param brick_size: Brick height, or None for the default fraction of the
        last close.
    :param defaults: Default sizing heuristics.
    """

    chart_type = ChartType.RENKO

    def __init__(
        self,
        brick_size: float | None = None,
        defaults: TransformDefaults | None = None,
    ) -> None:
        super().__init__(defaults)
        self.brick_size = brick_size

    def apply(self, candles: Sequence[Candle]) -> list[Candle]:
        if not candles:
            return []

        size = resolve_size(self.brick_size, candles, self.defaults.renko_fraction)
        reference = candles[0].close
        result: list[Candle] = []

        for candle in candles:
            diff = candle.close - reference

            if abs(diff) >= size:
                bricks = math.floor(abs(diff) / size)
                direction = 1 if diff > 0 else -1
                brick_open = reference
                brick_close = reference + bricks * size * direction
                result.append(
                    Candle(
                        time=candle.time,
                        open=brick_open,
                        high=max(brick_open, brick_close),
                        low=min(brick_open, brick_close),
                        close=brick_close,
                        volume=candle.volume,
                    )
                )
                reference = brick_close
            else:
                result.append(
                    Candle(
                        time=candle.time,
                        open=reference,
                        high=reference,
                        low=reference,
                        close=reference,
                        volume=0.0,
                    )
                )

        logger.debug("Built %d renko candles with brick size %.6g", len(result), size)
        return result


class RangeBarTransform(CandleTransform):
    """Bars that close once their high-low span reaches a fixed range.

    Accumulation starts from the first candle's open, high and low. When the
    accumulated span reaches the range, a bar is closed at the current close
    and the next bar starts from that close. While a bar is still forming the
    last completed bar is repeated, or the raw candle if none has completed.

    :param range_size: Bar range, or None for the default fraction of the
        last close.
    :param defaults: Default sizing heuristics.
    """

    chart_type = ChartType.RANGE

    def __init__(
        self,
        range_size: float | None = None,
        defaults: TransformDefaults | None = None,
    ) -> None:
        super().__init__(defaults)
        self.range_size = range_size

    def apply(self, candles: Sequence[Candle]) -> list[Candle]:
        if not candles:
            return []

        size = resolve_size(self.range_size, candles, self.defaults.range_fraction)
        bar_open = candles[0].open
        high = candles[0].high
        low = candles[0].low
        last_bar: Candle | None = None
        result: list[Candle] = []

        for candle in candles:
            high = max(high, candle.high)
            low = min(low, candle.low)

            if high - low >= size:
                last_bar = Candle(
                    time=candle.time,
                    open=bar_open,
                    high=high,
                    low=low,
                    close=candle.close,
                    volume=candle.volume,
                )
                result.append(last_bar)
                bar_open = high = low = candle.close
            elif last_bar is not None:
                result.append(last_bar.model_copy(update={"time": candle.time}))
            else:
                result.append(candle)

        logger.debug("Built %d range bars with range %.6g", len(result), size)
        return result
