"""
taengine - technical analysis and backtesting engine.

Bars and series, cached indicators, rules and strategies, and a bar-by-bar
replay producing trading records.
"""

from .models.bar import Bar
from .models.series import BarSeries
from .models.trade import Trade, TradeType
from .models.position import Position
from .models.trading_record import TradingRecord
from .strategy import Strategy
from .backtest import BarSeriesManager, BacktestExecutor
from .utils.numeric import DECIMAL, DOUBLE

__version__ = "1.0.0"

__all__ = [
    "Bar",
    "BarSeries",
    "BarSeriesManager",
    "BacktestExecutor",
    "DECIMAL",
    "DOUBLE",
    "Position",
    "Strategy",
    "Trade",
    "TradeType",
    "TradingRecord",
]
