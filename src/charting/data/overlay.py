"""Comparison overlay: several series as percentage change on one time axis."""

from __future__ import annotations

from typing import Mapping, Sequence

from charting.types import Candle, OverlayPoint


def build_overlay(series_by_name: Mapping[str, Sequence[Candle]]) -> list[OverlayPoint]:
    """Merge candle series by timestamp into percentage-change rows.

    Each series is measured against its first close. A base of zero cannot
    be measured against, so the base moves to the next close and the value
    is omitted until a non-zero base is found.

    :param series_by_name: Candle series keyed by display name, the primary
        series first.
    :returns: Rows for every timestamp present in any series, time-ascending.
    """
    closes_by_name = {
        name: {candle.time: candle.close for candle in candles}
        for name, candles in series_by_name.items()
    }
    times = sorted({t for closes in closes_by_name.values() for t in closes})

    base_prices: dict[str, float] = {}
    points: list[OverlayPoint] = []
    for time in times:
        values: dict[str, float] = {}
        for name, closes in closes_by_name.items():
            close = closes.get(time)
            if close is None:
                continue
            if not base_prices.get(name):
                base_prices[name] = close
            base = base_prices[name]
            if base == 0:
                continue
            values[name] = (close - base) / base * 100
        points.append(OverlayPoint(time=time, values=values))

    return points
