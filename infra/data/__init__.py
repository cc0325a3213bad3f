"""OHLCV data sources."""

from .data_loader import DataLoader, DataSource, bars_to_series, timeframe_to_timedelta

__all__ = ["DataLoader", "DataSource", "bars_to_series", "timeframe_to_timedelta"]
