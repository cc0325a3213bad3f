"""
Data Loader: Switchable Source (Synthetic | CSV | Cache)

Provides a unified interface for loading OHLCV data and turning it into a
BarSeries for backtesting.
"""

import logging
from typing import Dict, Iterable, List, Optional
from enum import Enum
from datetime import datetime, timedelta, timezone
from decimal import Decimal
import json
import os

import pandas as pd

from taengine.models.bar import Bar
from taengine.models.series import BarSeries
from taengine.utils.numeric import DECIMAL, NumFactory

logger = logging.getLogger(__name__)

TIMEFRAMES = {
    "M1": timedelta(minutes=1),
    "M5": timedelta(minutes=5),
    "M15": timedelta(minutes=15),
    "M30": timedelta(minutes=30),
    "H1": timedelta(hours=1),
    "H4": timedelta(hours=4),
    "D1": timedelta(days=1),
}


class DataSource(Enum):
    """Data source types."""
    SYNTHETIC = "synthetic"
    CACHE = "cache"
    CSV = "csv"


def timeframe_to_timedelta(timeframe: str) -> timedelta:
    try:
        return TIMEFRAMES[timeframe.upper()]
    except KeyError:
        raise ValueError(f"Unknown timeframe: {timeframe}") from None


class DataLoader:
    """
    Unified data loader with switchable sources.

    Supports:
    - Synthetic data generation (smoke runs, tests)
    - CSV files (historical exports)
    - Cached data (backtest/replay)
    """

    def __init__(self, config: Dict):
        """
        Initialize data loader.

        Args:
            config: Data loader config
                {
                  "source": "synthetic|csv|cache",
                  "synthetic": { "base_price": "1.0950" },
                  "cache": { "path": "..." },
                  "csv_path": "..."
                }
        """
        self.config = config
        self.source = DataSource(config.get("source", "synthetic"))

        self.synthetic_config = config.get("synthetic", {})
        self.cache_config = config.get("cache", {})

        logger.info("Data loader initialized", extra={"source": self.source.value})

    def fetch_ohlcv(self, symbol: str, timeframe: str, count: int) -> Optional[List[Dict]]:
        """
        Fetch OHLCV data from configured source.

        Args:
            symbol: Symbol name (e.g., "EURUSD")
            timeframe: Timeframe (e.g., "M15")
            count: Number of bars to fetch

        Returns:
            List of OHLCV dicts with UTC timestamps, oldest first
        """
        if self.source == DataSource.SYNTHETIC:
            return self._fetch_synthetic(symbol, timeframe, count)
        elif self.source == DataSource.CACHE:
            return self._fetch_cached(symbol, timeframe, count)
        elif self.source == DataSource.CSV:
            return self._fetch_csv(symbol, timeframe, count)
        else:
            logger.error("Unknown data source", extra={"source": self.source})
            return None

    def _fetch_synthetic(self, symbol: str, timeframe: str, count: int) -> List[Dict]:
        """
        Generate deterministic synthetic OHLCV data.

        Bars end on aligned timeframe boundaries, the last one at
        ``synthetic.end_time`` (ISO string) or 2024-01-01T00:00Z.
        """
        period = timeframe_to_timedelta(timeframe)
        end_time = datetime.fromisoformat(
            self.synthetic_config.get("end_time", "2024-01-01T00:00:00+00:00")
        )

        bars = []
        base_price = Decimal(self.synthetic_config.get("base_price", "1.0950"))

        for i in range(count):
            timestamp = end_time - period * (count - 1 - i)

            # Simulate price movement
            price_change = Decimal((i % 20 - 10) * 5) / Decimal(100000)
            open_price = base_price + price_change
            close_price = open_price + Decimal((i % 5 - 2) * 3) / Decimal(10000)

            high_price = max(open_price, close_price) + Decimal("0.0008")
            low_price = min(open_price, close_price) - Decimal("0.0005")

            bar = {
                "timestamp": timestamp.isoformat(),
                "open": str(open_price),
                "high": str(high_price),
                "low": str(low_price),
                "close": str(close_price),
                "volume": 1000000,
            }
            bars.append(bar)
            base_price = close_price

        logger.info("Synthetic data generated", extra={
            "symbol": symbol,
            "timeframe": timeframe,
            "bars": count
        })
        return bars

    def _cache_file(self, symbol: str, timeframe: str) -> str:
        cache_path = self.cache_config.get("path", "data/cache")
        return os.path.join(cache_path, f"{symbol}_{timeframe}.json")

    def _fetch_cached(self, symbol: str, timeframe: str, count: int) -> Optional[List[Dict]]:
        """
        Fetch OHLCV data from cache.

        Returns:
            List of cached OHLCV dicts or None
        """
        cache_file = self._cache_file(symbol, timeframe)

        if not os.path.exists(cache_file):
            logger.warning("Cache file not found", extra={"file": cache_file})
            return None

        try:
            with open(cache_file, "r", encoding="utf-8") as f:
                data = json.load(f)

            bars = data.get("bars", [])[-count:]  # Get last N bars

            logger.info("Cached data loaded", extra={
                "symbol": symbol,
                "timeframe": timeframe,
                "bars": len(bars)
            })
            return bars

        except (OSError, ValueError) as e:
            logger.error("Cache load error", extra={
                "file": cache_file,
                "error": str(e)
            })
            return None

    def cache_data(self, symbol: str, timeframe: str, bars: List[Dict]) -> bool:
        """
        Cache OHLCV data for later use.

        Returns:
            True if caching successful
        """
        cache_file = self._cache_file(symbol, timeframe)
        os.makedirs(os.path.dirname(cache_file) or ".", exist_ok=True)

        try:
            data = {
                "symbol": symbol,
                "timeframe": timeframe,
                "cached_at": datetime.now(timezone.utc).isoformat(),
                "bars": bars,
            }

            with open(cache_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)

            logger.info("Data cached", extra={
                "symbol": symbol,
                "timeframe": timeframe,
                "file": cache_file,
                "bars": len(bars)
            })
            return True

        except (OSError, TypeError) as e:
            logger.error("Cache write error", extra={
                "file": cache_file,
                "error": str(e)
            })
            return False

    def switch_source(self, new_source: str) -> bool:
        """
        Switch data source at runtime.

        Returns:
            True if switch successful
        """
        try:
            self.source = DataSource(new_source)
        except ValueError as e:
            logger.error("Source switch error", extra={"error": str(e)})
            return False
        logger.info("Data source switched", extra={"source": new_source})
        return True

    def _fetch_csv(self, symbol: str, timeframe: str, count: int) -> Optional[List[Dict]]:
        """
        Fetch OHLCV data from CSV file.

        Returns:
            List of OHLCV dicts or None
        """
        csv_path = self.config.get("csv_path", "data/eurusd_m15.csv")

        if not os.path.exists(csv_path):
            logger.error("CSV file not found", extra={"path": csv_path})
            return None

        try:
            df = pd.read_csv(csv_path)
        except (OSError, ValueError) as e:
            logger.error("CSV load error", extra={"path": csv_path, "error": str(e)})
            return None

        # Standardize column names
        df.columns = [c.strip().lower() for c in df.columns]

        time_col = next((c for c in ["timestamp_utc", "timestamp", "datetime"] if c in df.columns), None)
        if time_col is None:
            logger.error("No timestamp column found in CSV", extra={"path": csv_path})
            return None

        df[time_col] = pd.to_datetime(df[time_col], utc=True)
        df = df.sort_values(time_col)

        # Get last N bars
        df = df.tail(count)

        bars = []
        for _, row in df.iterrows():
            bar = {
                "timestamp": row[time_col].isoformat(),
                "open": float(row["open"]),
                "high": float(row["high"]),
                "low": float(row["low"]),
                "close": float(row["close"]),
                "volume": float(row.get("volume", 0)),
            }
            bars.append(bar)

        logger.info("CSV data loaded", extra={
            "symbol": symbol,
            "timeframe": timeframe,
            "bars": len(bars),
            "path": csv_path
        })
        return bars

    def get_source(self) -> str:
        """Get current data source."""
        return self.source.value


def bars_to_series(
    bar_dicts: Iterable[Dict],
    name: Optional[str] = None,
    time_period: timedelta = timedelta(minutes=15),
    num_factory: NumFactory = DECIMAL,
    maximum_bar_count: Optional[int] = None,
) -> BarSeries:
    """
    Build a BarSeries from OHLCV dicts as returned by ``fetch_ohlcv``.

    Each dict's ``timestamp`` is taken as the bar's end time.
    """
    series = BarSeries(name=name, num_factory=num_factory)
    if maximum_bar_count is not None:
        series.set_maximum_bar_count(maximum_bar_count)
    for data in bar_dicts:
        end_time = datetime.fromisoformat(str(data["timestamp"]).replace("Z", "+00:00"))
        series.add_bar(Bar.of(
            end_time,
            data["open"],
            data["high"],
            data["low"],
            data["close"],
            volume=data.get("volume", 0),
            time_period=time_period,
            num_factory=num_factory,
        ))
    logger.info("Bar series built", extra={
        "series": series.name,
        "bars": series.bar_count,
    })
    return series
