"""Data loader tests.

Covers:
- deterministic synthetic bars
- CSV and cache sources
- conversion to a BarSeries
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pandas as pd
import pytest

from infra.data.data_loader import DataLoader, DataSource, bars_to_series, timeframe_to_timedelta
from taengine.utils.numeric import DOUBLE


class TestSyntheticSource:

    def test_bars_are_deterministic(self):
        loader = DataLoader({"source": "synthetic"})

        first = loader.fetch_ohlcv("EURUSD", "M15", 50)
        second = loader.fetch_ohlcv("EURUSD", "M15", 50)

        assert first == second
        assert len(first) == 50
        assert first[-1]["timestamp"] == "2024-01-01T00:00:00+00:00"

    def test_bars_are_consistent(self):
        bars = DataLoader({"source": "synthetic"}).fetch_ohlcv("EURUSD", "H1", 30)

        for bar in bars:
            high, low = Decimal(bar["high"]), Decimal(bar["low"])
            assert high >= max(Decimal(bar["open"]), Decimal(bar["close"]))
            assert low <= min(Decimal(bar["open"]), Decimal(bar["close"]))

    def test_timestamps_follow_timeframe(self):
        bars = DataLoader({"source": "synthetic"}).fetch_ohlcv("EURUSD", "H1", 3)

        times = [datetime.fromisoformat(b["timestamp"]) for b in bars]
        assert times[1] - times[0] == timedelta(hours=1)
        assert times[2] - times[1] == timedelta(hours=1)


class TestFileSources:

    def test_csv_source(self, tmp_path):
        csv_path = tmp_path / "prices.csv"
        pd.DataFrame({
            "Timestamp": ["2024-01-01 00:30:00", "2024-01-01 00:15:00", "2024-01-01 00:45:00"],
            "Open": [1.1, 1.0, 1.2],
            "High": [1.3, 1.2, 1.4],
            "Low": [1.0, 0.9, 1.1],
            "Close": [1.2, 1.1, 1.3],
            "Volume": [10, 20, 30],
        }).to_csv(csv_path, index=False)
        loader = DataLoader({"source": "csv", "csv_path": str(csv_path)})

        bars = loader.fetch_ohlcv("EURUSD", "M15", 2)

        assert [b["close"] for b in bars] == [1.2, 1.3]
        assert bars[0]["timestamp"] == "2024-01-01T00:30:00+00:00"

    def test_missing_csv(self, tmp_path):
        loader = DataLoader({"source": "csv", "csv_path": str(tmp_path / "missing.csv")})

        assert loader.fetch_ohlcv("EURUSD", "M15", 10) is None

    def test_cache_roundtrip(self, tmp_path):
        loader = DataLoader({"source": "synthetic", "cache": {"path": str(tmp_path / "cache")}})
        bars = loader.fetch_ohlcv("EURUSD", "M15", 20)

        assert loader.cache_data("EURUSD", "M15", bars)
        assert loader.switch_source("cache")
        assert loader.get_source() == "cache"
        assert loader.fetch_ohlcv("EURUSD", "M15", 5) == bars[-5:]

    def test_missing_cache(self, tmp_path):
        loader = DataLoader({"source": "cache", "cache": {"path": str(tmp_path)}})

        assert loader.fetch_ohlcv("EURUSD", "M15", 5) is None

    def test_invalid_source_switch(self):
        loader = DataLoader({"source": "synthetic"})

        assert not loader.switch_source("broker")
        assert loader.source == DataSource.SYNTHETIC


class TestBarsToSeries:

    def test_builds_series(self):
        bars = DataLoader({"source": "synthetic"}).fetch_ohlcv("EURUSD", "M15", 40)

        series = bars_to_series(bars, name="EURUSD_M15")

        assert series.bar_count == 40
        assert series.end_index == 39
        assert series.last_bar.close == Decimal(bars[-1]["close"])
        assert series.last_bar.end_time == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert series.last_bar.time_period == timedelta(minutes=15)

    def test_bounded_double_series(self):
        bars = DataLoader({"source": "synthetic"}).fetch_ohlcv("EURUSD", "M15", 40)

        series = bars_to_series(bars, num_factory=DOUBLE, maximum_bar_count=10)

        assert series.bar_count == 10
        assert series.begin_index == 30
        assert isinstance(series.last_bar.close, float)

    @pytest.mark.parametrize("timeframe,expected", [
        ("M1", timedelta(minutes=1)),
        ("H4", timedelta(hours=4)),
        ("D1", timedelta(days=1)),
    ])
    def test_timeframes(self, timeframe, expected):
        assert timeframe_to_timedelta(timeframe) == expected
