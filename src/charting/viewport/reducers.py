"""Pure state transitions for the viewport window.

Every reducer takes the current :class:`ViewportState` plus the length of
the active series and returns the next state. Requests that would break the
window invariants return the input state unchanged.
"""

from __future__ import annotations

import logging
import math

from charting.types import ViewportState, ZoomDirection

logger = logging.getLogger(__name__)

# Smallest number of candles a zoom or brush may leave visible
MIN_VISIBLE_CANDLES = 5

# Fraction of the current span added or removed per wheel step
ZOOM_SPEED = 0.1


def reset_viewport(length: int) -> ViewportState:
    """Show the whole series.

    :param length: Number of candles in the active series.
    :returns: Full window, or the empty window for an empty series.
    """
    if length <= 0:
        return ViewportState.empty()
    return ViewportState(start_index=0, end_index=length - 1)


def reduce_zoom(
    state: ViewportState,
    length: int,
    cursor_ratio: float,
    direction: ZoomDirection | str,
) -> ViewportState:
    """Zoom around the pointer position.

    The window changes by ``max(1, ceil(span * 0.1))`` candles, split between
    the left and right edges in proportion to where the cursor sits, so the
    candle under the pointer stays roughly in place.

    :param state: Current window.
    :param length: Number of candles in the active series.
    :param cursor_ratio: Pointer position within the plot width; clamped to
        [0, 1].
    :param direction: ``in`` to contract the window, ``out`` to expand it.
    :returns: Next window, or ``state`` if the zoom is rejected.
    """
    if length <= 0 or state.is_empty:
        return state

    direction = ZoomDirection(direction)
    if math.isnan(cursor_ratio):
        cursor_ratio = 0.5
    ratio = max(0.0, min(1.0, cursor_ratio))

    span = state.end_index - state.start_index
    total_change = max(1, math.ceil(span * ZOOM_SPEED))
    left = math.floor(total_change * ratio)
    right = total_change - left

    if direction is ZoomDirection.IN:
        new_start = state.start_index + left
        new_end = state.end_index - right
    else:
        new_start = state.start_index - left
        new_end = state.end_index + right

    if new_end - new_start + 1 < MIN_VISIBLE_CANDLES:
        logger.debug("Rejected zoom %s: window would hold fewer than %d candles",
                     direction.value, MIN_VISIBLE_CANDLES)
        return state

    new_start = max(0, new_start)
    new_end = min(length - 1, new_end)

    if new_start > new_end:
        return state
    if new_start == state.start_index and new_end == state.end_index:
        return state
    return ViewportState(start_index=new_start, end_index=new_end)


def reduce_window(
    state: ViewportState,
    length: int,
    start_index: int,
    end_index: int,
) -> ViewportState:
    """Adopt a window reported by a brush or pan control.

    :param state: Current window.
    :param length: Number of candles in the active series.
    :param start_index: Requested first visible index.
    :param end_index: Requested last visible index.
    :returns: The requested window, or ``state`` if it is out of bounds or
        narrower than the minimum window.
    """
    if not 0 <= start_index <= end_index < length:
        return state
    if end_index - start_index + 1 < MIN_VISIBLE_CANDLES:
        return state
    return ViewportState(start_index=start_index, end_index=end_index)


__all__ = [
    "MIN_VISIBLE_CANDLES",
    "ZOOM_SPEED",
    "reset_viewport",
    "reduce_zoom",
    "reduce_window",
]
