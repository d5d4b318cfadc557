"""Validation of raw candle series before they reach the transforms."""

from __future__ import annotations

import math
from typing import Iterable

from charting.exceptions import DataValidationError
from charting.types import Candle


def check_candle(candle: Candle) -> None:
    """Validate a single candle's OHLC ordering.

    :raises DataValidationError: If a price is not finite or
        ``low <= min(open, close) <= max(open, close) <= high`` fails.
    """
    prices = (candle.open, candle.high, candle.low, candle.close)
    if not all(math.isfinite(p) for p in prices):
        raise DataValidationError(f"Non-finite price in candle at {candle.time}")
    if not candle.low <= min(candle.open, candle.close):
        raise DataValidationError(
            f"Candle at {candle.time}: low {candle.low} above open/close"
        )
    if not max(candle.open, candle.close) <= candle.high:
        raise DataValidationError(
            f"Candle at {candle.time}: high {candle.high} below open/close"
        )


def normalize_series(candles: Iterable[Candle]) -> list[Candle]:
    """Sort candles by time and validate them.

    :param candles: Raw candles in any order.
    :returns: Time-ascending list.
    :raises DataValidationError: On duplicate timestamps or malformed candles.
    """
    ordered = sorted(candles, key=lambda c: c.time)
    for i, candle in enumerate(ordered):
        check_candle(candle)
        if i > 0 and candle.time == ordered[i - 1].time:
            raise DataValidationError(f"Duplicate timestamp {candle.time}")
    return ordered
