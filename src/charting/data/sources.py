"""Candle sources feeding the transform engine.

This module provides an abstract interface for candle sources and concrete
implementations for CSV files and seeded synthetic data. Live market-data
fetching lives outside this package; anything that yields candles can stand
behind :class:`DataSource`.
"""

from __future__ import annotations

import csv
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

import numpy as np

from charting.exceptions import DataSourceError
from charting.types import Candle

if TYPE_CHECKING:
    from charting.types import CompareSource, ViewConfig

logger = logging.getLogger(__name__)

MS_PER_DAY = 24 * 60 * 60 * 1000


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_timestamp(value: str, timestamp_format: str | None = None) -> int:
    """Parse a timestamp cell into epoch milliseconds.

    With ``timestamp_format`` every cell is parsed with it. Otherwise integer
    cells are taken as epoch milliseconds and anything else is parsed as an
    ISO datetime. Naive datetimes are assumed to be UTC.

    :raises ValueError: If the value cannot be parsed.
    """
    value = value.strip()
    if timestamp_format:
        ts = datetime.strptime(value, timestamp_format)
    elif value.lstrip("-").isdigit():
        return int(value)
    else:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return int(ts.timestamp() * 1000)


class DataSource(ABC):
    """Abstract base class for candle sources.

    All source implementations must inherit from this class and implement
    the `fetch_candles` method.
    """

    @abstractmethod
    def fetch_candles(self) -> Iterator[Candle]:
        """Yield the candles of one series in chronological order.

        :returns: Iterator of Candle objects.
        :raises DataSourceError: If reading fails.
        """
        ...


class CSVDataSource(DataSource):
    """Data source that reads candles from a CSV file.

    Expected CSV format (default columns):
    - time: Epoch milliseconds or ISO format datetime string
    - open, high, low, close: Prices
    - volume: Traded volume (optional column)

    :param source_params: Required parameters:
        - file_path: Path to the CSV file.
        Optional parameters:
        - time_col: Column name for the timestamp (default: "time")
        - open_col, high_col, low_col, close_col: Price column names
        - volume_col: Column name for volume (default: "volume")
        - delimiter: CSV delimiter (default: ",")
        - timestamp_format: strptime format for timestamps (default: ISO format)
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        """Initialize CSV data source.

        :param source_params: Configuration with file_path and optional column mappings.
        :raises DataSourceError: If file_path is not provided.
        """
        self.params = source_params or {}
        self.file_path = self.params.get("file_path")
        if not self.file_path:
            raise DataSourceError("CSVDataSource requires 'file_path' in source_params")

        self.time_col = self.params.get("time_col", "time")
        self.open_col = self.params.get("open_col", "open")
        self.high_col = self.params.get("high_col", "high")
        self.low_col = self.params.get("low_col", "low")
        self.close_col = self.params.get("close_col", "close")
        self.volume_col = self.params.get("volume_col", "volume")
        self.delimiter = self.params.get("delimiter", ",")
        self.timestamp_format = self.params.get("timestamp_format")

    def fetch_candles(self) -> Iterator[Candle]:
        """Read candles from the CSV file.

        Rows with an empty timestamp are skipped; an empty volume cell leaves
        the volume unset.

        :returns: Iterator of Candle objects in file order.
        :raises DataSourceError: If reading or parsing fails.
        """
        path = Path(self.file_path)
        if not path.exists():
            raise DataSourceError(f"CSV file not found: {self.file_path}")

        try:
            with open(path, newline="", encoding="utf-8") as f:
                reader = csv.DictReader(f, delimiter=self.delimiter)

                for row in reader:
                    ts_str = row.get(self.time_col)
                    if not ts_str:
                        continue

                    try:
                        ts = parse_timestamp(ts_str, self.timestamp_format)
                    except ValueError as e:
                        raise DataSourceError(
                            f"Failed to parse timestamp '{ts_str}': {e}"
                        ) from e

                    raw_volume = row.get(self.volume_col)
                    try:
                        yield Candle(
                            time=ts,
                            open=float(row[self.open_col]),
                            high=float(row[self.high_col]),
                            low=float(row[self.low_col]),
                            close=float(row[self.close_col]),
                            volume=float(raw_volume) if raw_volume else None,
                        )
                    except (KeyError, TypeError, ValueError) as e:
                        raise DataSourceError(f"Failed to parse row {row}: {e}") from e

        except csv.Error as e:
            raise DataSourceError(f"CSV parsing error: {e}") from e
        except OSError as e:
            raise DataSourceError(f"Failed to read CSV file: {e}") from e


class SyntheticDataSource(DataSource):
    """Seeded geometric Brownian motion candles.

    :param source_params: Optional parameters:
        - count: Number of candles (default: 200)
        - initial_price: Starting price (default: 100.0)
        - drift: Per-candle drift (default: 0.0)
        - volatility: Per-candle volatility (default: 0.02)
        - interval_ms: Spacing between candles (default: one day)
        - start_time: Epoch milliseconds of the first candle
          (default: 2024-01-01T00:00:00Z)
        - seed: Random seed, or None for nondeterministic output
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        self.params = source_params or {}
        self.count = self.params.get("count", 200)
        self.initial_price = self.params.get("initial_price", 100.0)
        self.drift = self.params.get("drift", 0.0)
        self.volatility = self.params.get("volatility", 0.02)
        self.interval_ms = self.params.get("interval_ms", MS_PER_DAY)
        self.start_time = self.params.get("start_time", 1_704_067_200_000)
        self.seed = self.params.get("seed")

        if not _is_int(self.count) or self.count < 0:
            raise DataSourceError("'count' must be a non-negative integer")
        if not _is_number(self.initial_price) or self.initial_price <= 0:
            raise DataSourceError("'initial_price' must be a positive number")
        if not _is_number(self.drift):
            raise DataSourceError("'drift' must be a number")
        if not _is_number(self.volatility) or self.volatility < 0:
            raise DataSourceError("'volatility' must be a non-negative number")
        if not _is_int(self.interval_ms) or self.interval_ms <= 0:
            raise DataSourceError("'interval_ms' must be a positive integer")
        if not _is_int(self.start_time):
            raise DataSourceError("'start_time' must be an integer")
        if self.seed is not None and (not _is_int(self.seed) or self.seed < 0):
            raise DataSourceError("'seed' must be a non-negative integer or null")

    def fetch_candles(self) -> Iterator[Candle]:
        if self.count == 0:
            return

        rng = np.random.default_rng(self.seed)
        sigma = float(self.volatility)
        log_returns = rng.normal(self.drift - 0.5 * sigma**2, sigma, self.count)
        closes = self.initial_price * np.exp(np.cumsum(log_returns))
        opens = np.concatenate(([self.initial_price], closes[:-1]))
        wicks = np.abs(rng.normal(0.0, sigma / 2, (2, self.count)))
        highs = np.maximum(opens, closes) * (1 + wicks[0])
        lows = np.minimum(opens, closes) * (1 - np.minimum(wicks[1], 0.5))
        volumes = rng.uniform(1_000.0, 5_000.0, self.count)

        logger.debug("Generating %d synthetic candles (seed=%s)", self.count, self.seed)
        for i in range(self.count):
            yield Candle(
                time=self.start_time + i * self.interval_ms,
                open=float(opens[i]),
                high=float(highs[i]),
                low=float(lows[i]),
                close=float(closes[i]),
                volume=float(volumes[i]),
            )


def resolve_data_source(config: ViewConfig | CompareSource) -> DataSource:
    """Construct a data source from configuration.

    :param config: ViewConfig or CompareSource with source_type and source_params.
    :returns: DataSource instance for the specified type.
    :raises DataSourceError: If source_type is unrecognized.
    """
    source_type = config.source_type.lower()

    if source_type == "csv":
        return CSVDataSource(config.source_params)
    elif source_type == "synthetic":
        return SyntheticDataSource(config.source_params)
    else:
        raise DataSourceError(
            f"Unrecognized data source type: '{config.source_type}'. "
            f"Supported types: csv, synthetic"
        )
