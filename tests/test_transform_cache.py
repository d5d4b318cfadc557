"""Tests for the transform cache."""

import pytest

from charting.transforms import TransformCache
from charting.transforms.cache import DEFAULT_MAX_ENTRIES
from charting.types import Candle, ChartType, SeriesKey, TransformDefaults


def _series(closes: list[float]) -> list[Candle]:
    return [
        Candle(time=i * 1000, open=c, high=c, low=c, close=c)
        for i, c in enumerate(closes)
    ]


KEY = SeriesKey(symbol="BTC", timeframe="1", chart_type=ChartType.RENKO)


class TestTransformCache:
    """Tests for TransformCache."""

    def test_second_request_is_a_hit(self) -> None:
        cache = TransformCache()
        candles = _series([100.0, 102.0, 99.0])

        first = cache.get(KEY, candles, ChartType.RENKO, brick_size=1.0)
        second = cache.get(KEY, candles, "renko", brick_size=1.0)

        assert first == second
        assert cache.misses == 1
        assert cache.hits == 1
        assert len(cache) == 1

    def test_params_distinguish_entries(self) -> None:
        cache = TransformCache()
        candles = _series([100.0, 102.0, 99.0])

        cache.get(KEY, candles, ChartType.RENKO, brick_size=1.0)
        cache.get(KEY, candles, ChartType.RENKO, brick_size=2.0)
        cache.get(KEY, candles, ChartType.KAGI)

        assert cache.misses == 3
        assert len(cache) == 3

    def test_param_order_does_not_matter(self) -> None:
        a = TransformCache.make_key(KEY, "point_figure", {"box_size": 1.0, "reversal_boxes": 2})
        b = TransformCache.make_key(KEY, ChartType.POINT_FIGURE, {"reversal_boxes": 2, "box_size": 1.0})
        assert a == b

    def test_returned_list_is_a_copy(self) -> None:
        cache = TransformCache()
        candles = _series([100.0, 102.0, 99.0])

        first = cache.get(KEY, candles, ChartType.HEIKIN_ASHI)
        first.clear()

        assert len(cache.get(KEY, candles, ChartType.HEIKIN_ASHI)) == 3

    def test_invalidate_drops_only_matching_series(self) -> None:
        cache = TransformCache()
        other = SeriesKey(symbol="ETH", timeframe="1", chart_type=ChartType.RENKO)
        candles = _series([100.0, 102.0, 99.0])

        cache.get(KEY, candles, ChartType.RENKO)
        cache.get(KEY, candles, ChartType.KAGI)
        cache.get(other, candles, ChartType.RENKO)

        assert cache.invalidate(KEY) == 2
        assert len(cache) == 1

        cache.clear()
        assert len(cache) == 0

    def test_defaults_are_applied(self) -> None:
        cache = TransformCache(TransformDefaults(renko_fraction=0.01))
        candles = _series([100.0, 101.0, 103.0])
        # brick = 1.03, so the second close stays inside the first brick.
        result = cache.get(KEY, candles, ChartType.RENKO)
        assert result[1].close == 100.0


class TestTransformCacheCapacity:
    """Tests for the least-recently-used bound."""

    def test_oldest_entry_evicted(self) -> None:
        cache = TransformCache(max_entries=2)
        candles = _series([100.0, 102.0, 99.0])

        cache.get(KEY, candles, ChartType.RENKO)
        cache.get(KEY, candles, ChartType.KAGI)
        cache.get(KEY, candles, ChartType.HEIKIN_ASHI)
        assert len(cache) == 2

        cache.get(KEY, candles, ChartType.RENKO)
        assert cache.misses == 4
        assert cache.hits == 0

    def test_hit_refreshes_recency(self) -> None:
        cache = TransformCache(max_entries=2)
        candles = _series([100.0, 102.0, 99.0])

        cache.get(KEY, candles, ChartType.RENKO)
        cache.get(KEY, candles, ChartType.KAGI)
        cache.get(KEY, candles, ChartType.RENKO)
        cache.get(KEY, candles, ChartType.HEIKIN_ASHI)

        # KAGI was least recently used, so RENKO survives.
        cache.get(KEY, candles, ChartType.RENKO)
        assert cache.hits == 2
        cache.get(KEY, candles, ChartType.KAGI)
        assert cache.misses == 4

    def test_unbounded(self) -> None:
        cache = TransformCache(max_entries=None)
        candles = _series([100.0, 102.0, 99.0])
        for size in range(1, 101):
            cache.get(KEY, candles, ChartType.RENKO, brick_size=float(size))
        assert len(cache) == 100

    def test_default_capacity(self) -> None:
        assert TransformCache().max_entries == DEFAULT_MAX_ENTRIES

    @pytest.mark.parametrize("max_entries", [0, -1])
    def test_invalid_capacity_raises(self, max_entries: int) -> None:
        with pytest.raises(ValueError, match="max_entries"):
            TransformCache(max_entries=max_entries)
