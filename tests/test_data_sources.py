"""Tests for candle sources and series validation."""

from pathlib import Path

import pytest

from charting.data import (CSVDataSource, DataSource, SyntheticDataSource,
                           check_candle, normalize_series, parse_timestamp,
                           resolve_data_source)
from charting.exceptions import DataSourceError, DataValidationError
from charting.types import Candle, CompareSource, ViewConfig

# 2024-01-01T00:00:00Z
JAN_1_2024 = 1_704_067_200_000


def _write_csv(path: Path, rows: list[str], header: str = "time,open,high,low,close,volume") -> Path:
    path.write_text("\n".join([header, *rows]) + "\n")
    return path


class TestDataSourceProtocol:
    """Tests for the DataSource abstract base class."""

    def test_datasource_is_abstract(self) -> None:
        """DataSource cannot be instantiated directly."""
        with pytest.raises(TypeError, match="abstract"):
            DataSource()  # type: ignore[abstract]

    def test_subclass_must_implement_fetch_candles(self) -> None:
        """Subclasses must implement fetch_candles."""

        class IncompleteSource(DataSource):
            pass

        with pytest.raises(TypeError, match="abstract"):
            IncompleteSource()


class TestParseTimestamp:
    """Tests for timestamp parsing."""

    def test_epoch_milliseconds(self) -> None:
        assert parse_timestamp("1704067200000") == JAN_1_2024

    def test_iso_format_with_z(self) -> None:
        assert parse_timestamp("2024-01-01T00:00:00Z") == JAN_1_2024

    def test_naive_iso_assumes_utc(self) -> None:
        assert parse_timestamp("2024-01-01 01:00:00") == JAN_1_2024 + 3_600_000

    def test_custom_format(self) -> None:
        assert parse_timestamp("01/01/2024", "%m/%d/%Y") == JAN_1_2024

    def test_format_applies_to_digit_only_cells(self) -> None:
        """A compact date like 20240101 is parsed with the format, not as epoch ms."""
        assert parse_timestamp("20240101", "%Y%m%d") == JAN_1_2024

    def test_format_mismatch_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_timestamp("1704067200000", "%Y-%m-%d")

    def test_invalid_value_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")


class TestCSVDataSource:
    """Tests for CSVDataSource."""

    def test_requires_file_path(self) -> None:
        """CSVDataSource requires file_path parameter."""
        with pytest.raises(DataSourceError, match="file_path"):
            CSVDataSource({})

    def test_file_not_found_raises_error(self, tmp_path: Path) -> None:
        source = CSVDataSource({"file_path": str(tmp_path / "missing.csv")})
        with pytest.raises(DataSourceError, match="not found"):
            list(source.fetch_candles())

    def test_reads_candles(self, tmp_path: Path) -> None:
        """Read candles with epoch and ISO timestamps."""
        path = _write_csv(tmp_path / "btc.csv", [
            "1704067200000,100,110,95,105,12.5",
            "2024-01-02T00:00:00Z,105,108,101,102,",
        ])

        candles = list(CSVDataSource({"file_path": str(path)}).fetch_candles())

        assert len(candles) == 2
        assert candles[0] == Candle(
            time=JAN_1_2024, open=100.0, high=110.0, low=95.0, close=105.0, volume=12.5
        )
        assert candles[1].time == JAN_1_2024 + 86_400_000
        assert candles[1].volume is None

    def test_custom_columns_and_delimiter(self, tmp_path: Path) -> None:
        path = _write_csv(
            tmp_path / "custom.csv",
            ["2024-01-01;1;2;0.5;1.5"],
            header="date;o;h;l;c",
        )
        source = CSVDataSource({
            "file_path": str(path),
            "time_col": "date",
            "open_col": "o",
            "high_col": "h",
            "low_col": "l",
            "close_col": "c",
            "delimiter": ";",
        })

        candles = list(source.fetch_candles())

        assert candles[0].time == JAN_1_2024
        assert candles[0].close == 1.5
        assert candles[0].volume is None

    def test_timestamp_format_param(self, tmp_path: Path) -> None:
        path = _write_csv(tmp_path / "compact.csv", ["20240101,1,2,0.5,1.5,", "20240102,1.5,2,1,1.8,"])
        source = CSVDataSource({"file_path": str(path), "timestamp_format": "%Y%m%d"})

        candles = list(source.fetch_candles())

        assert [c.time for c in candles] == [JAN_1_2024, JAN_1_2024 + 86_400_000]

    def test_rows_without_timestamp_skipped(self, tmp_path: Path) -> None:
        path = _write_csv(tmp_path / "gaps.csv", [",1,2,0.5,1.5,", "1000,1,2,0.5,1.5,"])
        candles = list(CSVDataSource({"file_path": str(path)}).fetch_candles())
        assert [c.time for c in candles] == [1000]

    def test_bad_price_raises(self, tmp_path: Path) -> None:
        path = _write_csv(tmp_path / "bad.csv", ["1000,abc,2,0.5,1.5,"])
        with pytest.raises(DataSourceError, match="Failed to parse row"):
            list(CSVDataSource({"file_path": str(path)}).fetch_candles())

    def test_bad_timestamp_raises(self, tmp_path: Path) -> None:
        path = _write_csv(tmp_path / "bad.csv", ["soon,1,2,0.5,1.5,"])
        with pytest.raises(DataSourceError, match="timestamp"):
            list(CSVDataSource({"file_path": str(path)}).fetch_candles())


class TestSyntheticDataSource:
    """Tests for SyntheticDataSource."""

    def test_seeded_output_is_reproducible(self) -> None:
        params = {"count": 50, "seed": 3}
        first = list(SyntheticDataSource(params).fetch_candles())
        second = list(SyntheticDataSource(params).fetch_candles())
        assert first == second

    def test_spacing_and_start(self) -> None:
        candles = list(SyntheticDataSource({
            "count": 10, "seed": 1, "interval_ms": 60_000, "start_time": 0,
        }).fetch_candles())

        assert [c.time for c in candles] == [i * 60_000 for i in range(10)]

    def test_candles_pass_validation(self) -> None:
        candles = list(SyntheticDataSource({"count": 300, "seed": 11}).fetch_candles())
        assert len(normalize_series(candles)) == 300
        assert all(c.volume is not None and c.volume > 0 for c in candles)

    def test_zero_count(self) -> None:
        assert list(SyntheticDataSource({"count": 0}).fetch_candles()) == []

    @pytest.mark.parametrize(
        "params",
        [
            {"count": -1},
            {"count": True},
            {"initial_price": 0},
            {"drift": "abc"},
            {"volatility": -0.1},
            {"interval_ms": 0},
            {"interval_ms": True},
            {"start_time": "2024-01-01"},
            {"seed": "lucky"},
            {"seed": -1},
        ],
    )
    def test_invalid_params_raise(self, params: dict) -> None:
        with pytest.raises(DataSourceError):
            SyntheticDataSource(params)


class TestResolveDataSource:
    """Tests for resolve_data_source."""

    def test_csv(self, tmp_path: Path) -> None:
        config = ViewConfig(source_type="csv", source_params={"file_path": str(tmp_path / "x.csv")})
        assert isinstance(resolve_data_source(config), CSVDataSource)

    def test_synthetic(self) -> None:
        config = ViewConfig(source_type="Synthetic")
        assert isinstance(resolve_data_source(config), SyntheticDataSource)

    def test_compare_source(self) -> None:
        compared = CompareSource(name="ETH", source_type="synthetic", source_params={"seed": 2})
        assert isinstance(resolve_data_source(compared), SyntheticDataSource)

    def test_unknown_type_raises(self) -> None:
        with pytest.raises(DataSourceError, match="Unrecognized"):
            resolve_data_source(ViewConfig(source_type="coingecko"))


class TestNormalizeSeries:
    """Tests for series validation."""

    def test_sorts_by_time(self) -> None:
        candles = [
            Candle(time=2, open=1, high=1, low=1, close=1),
            Candle(time=1, open=1, high=1, low=1, close=1),
        ]
        assert [c.time for c in normalize_series(candles)] == [1, 2]

    def test_duplicate_timestamp_raises(self) -> None:
        candles = [
            Candle(time=1, open=1, high=1, low=1, close=1),
            Candle(time=1, open=2, high=2, low=2, close=2),
        ]
        with pytest.raises(DataValidationError, match="Duplicate"):
            normalize_series(candles)

    def test_low_above_body_raises(self) -> None:
        with pytest.raises(DataValidationError, match="low"):
            check_candle(Candle(time=0, open=10, high=12, low=10.5, close=11))

    def test_high_below_body_raises(self) -> None:
        with pytest.raises(DataValidationError, match="high"):
            check_candle(Candle(time=0, open=10, high=10.5, low=9, close=11))

    def test_non_finite_price_raises(self) -> None:
        with pytest.raises(DataValidationError, match="Non-finite"):
            check_candle(Candle(time=0, open=10, high=float("inf"), low=9, close=11))

    def test_empty_series(self) -> None:
        assert normalize_series([]) == []
