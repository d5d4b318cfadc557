"""Charting exception hierarchy.

All charting-specific exceptions derive from :class:`ChartingError` so callers
can catch errors from the configuration and data layers uniformly. The
transform engine and viewport reducers never raise for data conditions; they
degrade to empty output or an ``"auto"`` domain instead.
"""

from __future__ import annotations


class ChartingError(Exception):
    """Base class for charting-related exceptions.

    Derived exceptions should extend this class so that callers can catch all
    charting-specific errors uniformly.
    """


class ConfigError(ChartingError):
    """Raised when configuration files or parameters are invalid."""


class DataSourceError(ChartingError):
    """Raised when accessing or reading a candle source fails."""


class DataValidationError(ChartingError):
    """Raised when a candle series fails validation checks.

    Named DataValidationError to avoid conflict with pydantic's ValidationError.
    """


__all__ = [
    "ChartingError",
    "ConfigError",
    "DataSourceError",
    "DataValidationError",
]
