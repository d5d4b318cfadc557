"""Candle sources, series validation and comparison overlays."""

from charting.data.normalize import check_candle, normalize_series
from charting.data.overlay import build_overlay
from charting.data.sources import (CSVDataSource, DataSource,
                                   SyntheticDataSource, parse_timestamp,
                                   resolve_data_source)

__all__ = [
    "DataSource",
    "CSVDataSource",
    "SyntheticDataSource",
    "parse_timestamp",
    "resolve_data_source",
    "check_candle",
    "normalize_series",
    "build_overlay",
]
