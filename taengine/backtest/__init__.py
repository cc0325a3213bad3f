"""Strategy replay over bar series."""

from .execution import TradeExecutionModel, TradeOnCurrentCloseModel, TradeOnNextOpenModel
from .executor import BacktestExecutor, BacktestResult
from .manager import BarSeriesManager

__all__ = [
    "BacktestExecutor",
    "BacktestResult",
    "BarSeriesManager",
    "TradeExecutionModel",
    "TradeOnCurrentCloseModel",
    "TradeOnNextOpenModel",
]
