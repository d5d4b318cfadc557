"""Charting package root."""

from charting.exceptions import (ChartingError, ConfigError, DataSourceError,
                                 DataValidationError)

__all__ = [
    "ChartingError",
    "ConfigError",
    "DataSourceError",
    "DataValidationError",
]
