"""Heikin-Ashi averaged candles."""

from __future__ import annotations

import logging
from typing import Sequence

from charting.transforms.base import CandleTransform
from charting.types import Candle, ChartType

logger = logging.getLogger(__name__)


class HeikinAshiTransform(CandleTransform):
    """Smooth candles by averaging each bar with the previous averaged bar.

    - close = (open + high + low + close) / 4
    - open = (previous HA open + previous HA close) / 2, or
      (open + close) / 2 for the first bar
    - high = max(high, HA open, HA close)
    - low = min(low, HA open, HA close)

    Volume passes through unchanged.
    """

    chart_type = ChartType.HEIKIN_ASHI

    def apply(self, candles: Sequence[Candle]) -> list[Candle]:
        if not candles:
            return []

        result: list[Candle] = []
        prev_open = 0.0
        prev_close = 0.0

        for i, candle in enumerate(candles):
            ha_close = (candle.open + candle.high + candle.low + candle.close) / 4
            if i == 0:
                ha_open = (candle.open + candle.close) / 2
            else:
                ha_open = (prev_open + prev_close) / 2

            result.append(
                Candle(
                    time=candle.time,
                    open=ha_open,
                    high=max(candle.high, ha_open, ha_close),
                    low=min(candle.low, ha_open, ha_close),
                    close=ha_close,
                    volume=candle.volume,
                )
            )
            prev_open = ha_open
            prev_close = ha_close

        logger.debug("Built %d Heikin-Ashi candles", len(result))
        return result
