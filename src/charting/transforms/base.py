"""Base class that all candle transforms implement.

A transform reshapes a raw candle series into a derived one. Every transform
emits exactly one output candle per input candle with the same timestamp, so
the viewport and time axis behave identically whatever chart type is shown.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Sequence

from charting.types import ChartType, TransformDefaults

if TYPE_CHECKING:
    from charting.types import Candle


def resolve_size(
    size: float | None,
    candles: Sequence[Candle],
    fraction: float,
) -> float:
    """Return a usable positive sizing parameter.

    A missing, zero, negative or non-finite ``size`` falls back to
    ``fraction`` of the last close in ``candles``. The heuristic looks at the
    final close of the whole series, so it is not a rolling estimate.

    :param size: Caller-supplied size, possibly invalid.
    :param candles: Non-empty raw series.
    :param fraction: Fraction of the last close used as the default.
    :returns: Strictly positive size.
    """
    if size is not None and math.isfinite(size) and size > 0:
        return float(size)

    heuristic = abs(candles[-1].close * fraction)
    if not math.isfinite(heuristic) or heuristic == 0:
        # Last close of zero leaves nothing to scale from.
        return 1.0
    return heuristic


class CandleTransform(ABC):
    """Abstract base class for candle transforms.

    Transforms are stateless between calls: all running state lives inside a
    single :meth:`apply` call, so one instance can be reused and shared.

    :param defaults: Default sizing heuristics, or None for the built-ins.
    """

    chart_type: ClassVar[ChartType]

    def __init__(self, defaults: TransformDefaults | None = None) -> None:
        self.defaults = defaults or TransformDefaults()

    @abstractmethod
    def apply(self, candles: Sequence[Candle]) -> list[Candle]:
        """Build the derived series.

        :param candles: Time-ascending raw series, possibly empty.
        :returns: Derived series with the same length and timestamps.
        """
        ...

    def __call__(self, candles: Sequence[Candle]) -> list[Candle]:
        return self.apply(candles)


class PassthroughTransform(CandleTransform):
    """Return the raw series unchanged.

    Used for chart types that only change how candles are drawn.
    """

    chart_type = ChartType.CANDLE

    def apply(self, candles: Sequence[Candle]) -> list[Candle]:
        return list(candles)
