"""Vertical value domain for the visible window.

The domain is the padded ``[min, max]`` range of every finite value visible
in the window, or ``"auto"`` when there is nothing to scale to.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import numpy as np
from numpy.typing import NDArray

from charting.types import AUTO_DOMAIN

if TYPE_CHECKING:
    from charting.types import (Candle, OverlayPoint, ViewportState,
                                YDomain)

# Fraction of the visible span added above and below
DOMAIN_PADDING = 0.05

# Fixed pad used when every visible value is identical
FLAT_DOMAIN_PAD = 1.0


def clamp_window(state: ViewportState, length: int) -> tuple[int, int] | None:
    """Clamp a window to the series bounds.

    :returns: ``(start, end)`` inclusive indices, or None if nothing is visible.
    """
    start = max(0, state.start_index)
    end = min(length - 1, state.end_index)
    if length <= 0 or start > end:
        return None
    return start, end


def _padded_domain(values: NDArray[np.float64]) -> YDomain:
    finite = values[np.isfinite(values)]
    if finite.size == 0:
        return AUTO_DOMAIN

    low = float(finite.min())
    high = float(finite.max())
    if high == low:
        return (low - FLAT_DOMAIN_PAD, high + FLAT_DOMAIN_PAD)

    padding = (high - low) * DOMAIN_PADDING
    return (low - padding, high + padding)


def compute_y_domain(candles: Sequence[Candle], state: ViewportState) -> YDomain:
    """Domain of a single candle series.

    The minimum is taken over lows and closes, the maximum over highs and
    closes, so zero-range candles (Kagi, flat bricks) still count.

    :param candles: Active series.
    :param state: Current window.
    :returns: Padded ``(low, high)`` or ``"auto"``.
    """
    window = clamp_window(state, len(candles))
    if window is None:
        return AUTO_DOMAIN

    start, end = window
    visible = candles[start : end + 1]
    values = np.array(
        [v for c in visible for v in (c.low, c.high, c.close)],
        dtype=np.float64,
    )
    return _padded_domain(values)


def compute_overlay_domain(
    points: Sequence[OverlayPoint],
    series_names: Sequence[str],
    state: ViewportState,
) -> YDomain:
    """Domain across several named series sharing one time axis.

    Series missing from a point are skipped.

    :param points: Overlay rows for the active comparison.
    :param series_names: Names of the series to include.
    :param state: Current window.
    :returns: Padded ``(low, high)`` or ``"auto"``.
    """
    window = clamp_window(state, len(points))
    if window is None:
        return AUTO_DOMAIN

    start, end = window
    values = np.array(
        [
            point.values[name]
            for point in points[start : end + 1]
            for name in series_names
            if point.values.get(name) is not None
        ],
        dtype=np.float64,
    )
    return _padded_domain(values)


__all__ = [
    "DOMAIN_PADDING",
    "FLAT_DOMAIN_PAD",
    "clamp_window",
    "compute_y_domain",
    "compute_overlay_domain",
]
