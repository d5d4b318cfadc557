"""Memoization of transform output by series identity."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Hashable, Sequence

from charting.transforms.registry import apply_chart_type, parse_chart_type
from charting.types import ChartType, TransformDefaults

if TYPE_CHECKING:
    from charting.types import Candle

logger = logging.getLogger(__name__)

CacheKey = tuple[Hashable, ChartType, tuple[tuple[str, Any], ...]]

# Derived series kept before the least recently used one is dropped
DEFAULT_MAX_ENTRIES = 64


class TransformCache:
    """Cache derived series keyed by ``(series_id, chart_type, params)``.

    Transforms are pure, so a cached result stays valid until the raw series
    behind ``series_id`` changes; callers signal that with :meth:`invalidate`.
    At most ``max_entries`` results are kept; the least recently used one is
    evicted first.

    :param defaults: Default sizing heuristics passed to every transform.
    :param max_entries: Capacity, or None for no limit.
    :raises ValueError: If ``max_entries`` is less than 1.
    """

    def __init__(
        self,
        defaults: TransformDefaults | None = None,
        max_entries: int | None = DEFAULT_MAX_ENTRIES,
    ) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.defaults = defaults or TransformDefaults()
        self.max_entries = max_entries
        self._entries: dict[CacheKey, list[Candle]] = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(
        series_id: Hashable,
        chart_type: ChartType | str,
        params: dict[str, Any],
    ) -> CacheKey:
        return (series_id, parse_chart_type(chart_type), tuple(sorted(params.items())))

    def get(
        self,
        series_id: Hashable,
        candles: Sequence[Candle],
        chart_type: ChartType | str,
        **params: Any,
    ) -> list[Candle]:
        """Return the derived series, computing it on first request.

        :param series_id: Identity of the raw series (e.g. a SeriesKey).
        :param candles: Raw series used on a cache miss.
        :param chart_type: Chart type to build.
        :param params: Transform parameters.
        :returns: Derived series (a fresh list on every call).
        """
        key = self.make_key(series_id, chart_type, params)
        cached = self._entries.pop(key, None)
        if cached is not None:
            self.hits += 1
            self._entries[key] = cached
            return list(cached)

        self.misses += 1
        derived = apply_chart_type(candles, key[1], self.defaults, **params)
        self._entries[key] = derived
        if self.max_entries is not None and len(self._entries) > self.max_entries:
            evicted = next(iter(self._entries))
            del self._entries[evicted]
            logger.debug("Evicted %s for %s", evicted[1].value, evicted[0])
        logger.debug("Cached %s for %s (%d candles)", key[1].value, series_id, len(derived))
        return list(derived)

    def invalidate(self, series_id: Hashable) -> int:
        """Drop every entry derived from ``series_id``.

        :returns: Number of entries removed.
        """
        stale = [key for key in self._entries if key[0] == series_id]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
