"""Viewport controller over the active chart series.

The controller owns the active series identity, the index window and the
crosshair readout. Input events (zoom, brush, pointer) are applied through
the pure reducers in :mod:`charting.viewport.reducers`; derived outputs
(domain, duration, tick granularity) are recomputed from the current state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Hashable, Sequence

from charting.types import Crosshair, ViewportState, ZoomDirection
from charting.viewport.domain import compute_overlay_domain, compute_y_domain
from charting.viewport.reducers import (reduce_window, reduce_zoom,
                                        reset_viewport)
from charting.viewport.ticks import (TickGranularity, select_granularity,
                                     visible_duration)

if TYPE_CHECKING:
    from charting.types import Candle, OverlayPoint, SeriesKey, YDomain

logger = logging.getLogger(__name__)


class ViewportController:
    """Zoom, pan and crosshair state for one chart.

    Data is accepted only for the active :class:`SeriesKey`; results that
    arrive for a key that is no longer active are dropped, which is how an
    in-flight fetch for a previous selection gets cancelled.

    :param detail_mode: Whether pointer moves update the crosshair (the
        enlarged chart view).

    Example usage::

        controller = ViewportController(detail_mode=True)
        key = SeriesKey(symbol="BTC", timeframe="30", chart_type=ChartType.RENKO)
        controller.activate(key)
        controller.load(key, cache.get(key, raw, key.chart_type))
        controller.zoom(0.5, ZoomDirection.IN)
        low, high = controller.y_domain
    """

    def __init__(self, detail_mode: bool = False) -> None:
        self.detail_mode = detail_mode
        self._key: SeriesKey | None = None
        self._series: list[Candle] | list[OverlayPoint] = []
        self._overlay_names: tuple[str, ...] | None = None
        self._state = ViewportState.empty()
        self._crosshair: Crosshair | None = None
        self._generation = 0
        self._domain_memo: tuple[Hashable, YDomain] | None = None

    # ------------------------------------------------------------------
    # Series lifecycle
    # ------------------------------------------------------------------

    @property
    def key(self) -> SeriesKey | None:
        return self._key

    @property
    def series(self) -> Sequence[Candle] | Sequence[OverlayPoint]:
        return self._series

    @property
    def length(self) -> int:
        return len(self._series)

    @property
    def is_overlay(self) -> bool:
        return self._overlay_names is not None

    @property
    def overlay_names(self) -> tuple[str, ...]:
        return self._overlay_names or ()

    def activate(self, key: SeriesKey) -> None:
        """Select a new series identity.

        Clears the current data and window until :meth:`load` delivers the
        series for ``key``. Re-activating the current key is a no-op.
        """
        if key == self._key:
            return
        logger.debug("Activating series %s", key)
        self._key = key
        self._series = []
        self._overlay_names = None
        self._generation += 1
        self._crosshair = None
        self._state = ViewportState.empty()

    def load(
        self,
        key: SeriesKey,
        series: Sequence[Candle] | Sequence[OverlayPoint],
        overlay_names: Sequence[str] | None = None,
    ) -> bool:
        """Deliver data for ``key`` and show all of it.

        :param key: Identity the data was produced for.
        :param series: Candles, or overlay rows when ``overlay_names`` is set.
        :param overlay_names: Series names to scale over in overlay mode.
        :returns: True if the data was adopted, False if ``key`` is stale.
        """
        if key != self._key:
            logger.info("Ignoring %d rows for inactive series %s", len(series), key)
            return False

        self._series = list(series)
        self._overlay_names = tuple(overlay_names) if overlay_names is not None else None
        self._generation += 1
        self.reset()
        return True

    def reset(self) -> ViewportState:
        """Show the whole active series."""
        self._state = reset_viewport(len(self._series))
        return self._state

    # ------------------------------------------------------------------
    # Input events
    # ------------------------------------------------------------------

    @property
    def state(self) -> ViewportState:
        return self._state

    def zoom(
        self,
        cursor_ratio: float,
        direction: ZoomDirection | str,
    ) -> ViewportState:
        """Apply one wheel step anchored at ``cursor_ratio``."""
        self._state = reduce_zoom(self._state, len(self._series), cursor_ratio, direction)
        return self._state

    def set_window(self, start_index: int, end_index: int) -> ViewportState:
        """Adopt a window reported by a brush or pan control."""
        self._state = reduce_window(self._state, len(self._series), start_index, end_index)
        return self._state

    @property
    def crosshair(self) -> Crosshair | None:
        return self._crosshair

    def pointer_move(self, x: float, y: float) -> None:
        if not self.detail_mode:
            return
        self._crosshair = Crosshair(x=x, y=y)

    def pointer_leave(self) -> None:
        self._crosshair = None

    # ------------------------------------------------------------------
    # Derived outputs
    # ------------------------------------------------------------------

    @property
    def visible_series(self) -> Sequence[Candle] | Sequence[OverlayPoint]:
        if self._state.is_empty:
            return []
        return self._series[self._state.start_index : self._state.end_index + 1]

    @property
    def y_domain(self) -> YDomain:
        """Padded value domain of the visible window, memoized per state."""
        memo_key = (self._key, self._generation, self._state)
        if self._domain_memo is not None and self._domain_memo[0] == memo_key:
            return self._domain_memo[1]

        if self._overlay_names is not None:
            domain = compute_overlay_domain(self._series, self._overlay_names, self._state)
        else:
            domain = compute_y_domain(self._series, self._state)

        self._domain_memo = (memo_key, domain)
        return domain

    @property
    def visible_duration(self) -> int:
        return visible_duration(self._series, self._state)

    @property
    def granularity(self) -> TickGranularity:
        return select_granularity(self.visible_duration)
