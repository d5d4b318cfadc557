"""Candle transforms that reshape raw series into alternative bar types."""

from charting.transforms.base import (CandleTransform, PassthroughTransform,
                                      resolve_size)
from charting.transforms.bricks import RangeBarTransform, RenkoTransform
from charting.transforms.cache import TransformCache
from charting.transforms.heikin_ashi import HeikinAshiTransform
from charting.transforms.registry import (SIZE_PARAMETERS,
                                          TRANSFORM_PARAMETERS, TRANSFORMS,
                                          apply_chart_type, get_transform,
                                          parse_chart_type)
from charting.transforms.reversal import (KagiTransform, LineBreakTransform,
                                          PointAndFigureTransform)

__all__ = [
    # Base
    "CandleTransform",
    "PassthroughTransform",
    "resolve_size",
    # Transforms
    "HeikinAshiTransform",
    "RenkoTransform",
    "RangeBarTransform",
    "LineBreakTransform",
    "KagiTransform",
    "PointAndFigureTransform",
    # Registry
    "TRANSFORMS",
    "SIZE_PARAMETERS",
    "TRANSFORM_PARAMETERS",
    "parse_chart_type",
    "get_transform",
    "apply_chart_type",
    # Cache
    "TransformCache",
]
