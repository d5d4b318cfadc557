"""Lookup of candle transforms by chart type."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from charting.transforms.base import CandleTransform, PassthroughTransform
from charting.transforms.bricks import RangeBarTransform, RenkoTransform
from charting.transforms.heikin_ashi import HeikinAshiTransform
from charting.transforms.reversal import (KagiTransform, LineBreakTransform,
                                          PointAndFigureTransform)
from charting.types import ChartType, TransformDefaults

if TYPE_CHECKING:
    from charting.types import Candle

TRANSFORMS: dict[ChartType, type[CandleTransform]] = {
    ChartType.HEIKIN_ASHI: HeikinAshiTransform,
    ChartType.RENKO: RenkoTransform,
    ChartType.LINE_BREAK: LineBreakTransform,
    ChartType.KAGI: KagiTransform,
    ChartType.POINT_FIGURE: PointAndFigureTransform,
    ChartType.RANGE: RangeBarTransform,
}

# Name of the primary sizing keyword for each sized transform
SIZE_PARAMETERS: dict[ChartType, str] = {
    ChartType.RENKO: "brick_size",
    ChartType.KAGI: "reversal_amount",
    ChartType.POINT_FIGURE: "box_size",
    ChartType.RANGE: "range_size",
}

# Keyword parameters accepted by each transform
TRANSFORM_PARAMETERS: dict[ChartType, frozenset[str]] = {
    ChartType.HEIKIN_ASHI: frozenset(),
    ChartType.RENKO: frozenset(["brick_size"]),
    ChartType.LINE_BREAK: frozenset(["lookback"]),
    ChartType.KAGI: frozenset(["reversal_amount"]),
    ChartType.POINT_FIGURE: frozenset(["box_size", "reversal_boxes"]),
    ChartType.RANGE: frozenset(["range_size"]),
}


def parse_chart_type(value: ChartType | str) -> ChartType:
    """Coerce a chart type name to :class:`ChartType`.

    :param value: Chart type or its string value.
    :returns: Matching ChartType.
    :raises ValueError: If the name is unknown.
    """
    if isinstance(value, ChartType):
        return value
    try:
        return ChartType(value)
    except ValueError:
        raise ValueError(
            f"Unknown chart type: {value}. "
            f"Available: {[c.value for c in ChartType]}"
        ) from None


def get_transform(
    chart_type: ChartType | str,
    defaults: TransformDefaults | None = None,
    **params: Any,
) -> CandleTransform:
    """Get a transform by chart type.

    Chart types that only change rendering get a passthrough transform and
    ignore ``params``.

    :param chart_type: Chart type or its name (heikin_ashi, renko, line_break,
        kagi, point_figure, range, or any rendering-only type).
    :param defaults: Default sizing heuristics.
    :param params: Parameters to pass to the transform.
    :returns: CandleTransform instance.
    :raises ValueError: If the chart type is unknown.
    """
    chart_type = parse_chart_type(chart_type)
    transform_class = TRANSFORMS.get(chart_type)
    if transform_class is None:
        return PassthroughTransform(defaults)
    return transform_class(defaults=defaults, **params)


def apply_chart_type(
    candles: Sequence[Candle],
    chart_type: ChartType | str,
    defaults: TransformDefaults | None = None,
    **params: Any,
) -> list[Candle]:
    """Build the series shown for ``chart_type`` from raw candles.

    :param candles: Time-ascending raw series.
    :param chart_type: Chart type or its name.
    :param defaults: Default sizing heuristics.
    :param params: Parameters to pass to the transform.
    :returns: Derived series aligned with ``candles``.
    """
    return get_transform(chart_type, defaults, **params).apply(candles)
