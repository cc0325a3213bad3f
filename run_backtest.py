"""
Backtest Script

Loads OHLCV data, replays an SMA crossover strategy bar by bar and prints
the trading record summary as JSON.
"""

import argparse
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from configs import config_loader
from infra.data.data_loader import DataLoader, bars_to_series, timeframe_to_timedelta
from taengine.analysis.summary import summarize
from taengine.backtest.manager import BarSeriesManager
from taengine.indicators import ClosePriceIndicator, SMAIndicator
from taengine.models.config import BacktestConfig
from taengine.models.series import BarSeries
from taengine.rules import CrossedDownIndicatorRule, CrossedUpIndicatorRule, StopLossRule
from taengine.strategy import Strategy

logger = logging.getLogger(__name__)


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        # Add extra fields
        for key, value in record.__dict__.items():
            if key not in ['name', 'msg', 'args', 'created', 'filename', 'funcName',
                           'levelname', 'levelno', 'lineno', 'module', 'msecs', 'message',
                           'pathname', 'process', 'processName', 'relativeCreated', 'thread',
                           'threadName', 'exc_info', 'exc_text', 'stack_info', 'taskName']:
                if not key.startswith('_'):
                    log_obj[key] = value
        return json.dumps(log_obj, default=str)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> Optional[Path]:
    """JSON logging to a file (when given) plus plain console output."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    path = None
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path)
        file_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root_logger.addHandler(console_handler)

    return path


def build_sma_crossover_strategy(series: BarSeries, fast: int, slow: int,
                                 stop_loss: Optional[float] = None) -> Strategy:
    """Enter when the fast SMA crosses above the slow one, exit on the opposite cross."""
    if fast >= slow:
        raise ValueError(f"fast period ({fast}) must be shorter than slow period ({slow})")
    close_price = ClosePriceIndicator(series)
    fast_sma = SMAIndicator(close_price, fast)
    slow_sma = SMAIndicator(close_price, slow)

    entry_rule = CrossedUpIndicatorRule(fast_sma, slow_sma)
    exit_rule = CrossedDownIndicatorRule(fast_sma, slow_sma)
    if stop_loss is not None:
        exit_rule = exit_rule | StopLossRule(close_price, stop_loss)
    return Strategy(entry_rule, exit_rule, unstable_bars=slow, name=f"sma_cross_{fast}_{slow}")


def run_backtest(config: Dict[str, Any], fast: int = 10, slow: int = 30,
                 stop_loss: Optional[float] = None) -> Dict[str, Any]:
    """
    Load data, replay the SMA crossover strategy and summarize the result.

    Returns:
        JSON-friendly summary dict, or a dict with an ``error`` key when no
        data could be loaded
    """
    backtest_config = BacktestConfig.from_dict(config)
    data_config = backtest_config.data
    symbol = data_config.get("symbol", "EURUSD")
    timeframe = data_config.get("timeframe", "M15")
    count = data_config.get("count", 500)

    loader = DataLoader(data_config)
    bar_dicts = loader.fetch_ohlcv(symbol, timeframe, count)
    if not bar_dicts:
        logger.error("No data loaded", extra={"symbol": symbol, "timeframe": timeframe})
        return {"error": "no data", "symbol": symbol, "timeframe": timeframe}

    series = bars_to_series(
        bar_dicts,
        name=f"{symbol}_{timeframe}",
        time_period=timeframe_to_timedelta(timeframe),
        num_factory=backtest_config.num_factory(),
        maximum_bar_count=backtest_config.maximum_bar_count,
    )

    strategy = build_sma_crossover_strategy(series, fast, slow, stop_loss)
    manager = BarSeriesManager(
        series,
        backtest_config.transaction_cost_model(),
        backtest_config.holding_cost_model(),
        backtest_config.trade_execution_model(),
    )
    trading_record = manager.run(
        strategy,
        trade_type=backtest_config.starting_type(),
        amount=backtest_config.amount,
    )

    summary = summarize(trading_record)
    return {
        "strategy": strategy.name,
        "series": series.name,
        "period": series.series_period_description(),
        "bars": series.bar_count,
        "config_hash": backtest_config.config_hash.hash_value,
        "summary": summary.to_dict(),
    }


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="SMA crossover backtest")
    parser.add_argument("--fast", type=int, default=10, help="Fast SMA period (default: 10)")
    parser.add_argument("--slow", type=int, default=30, help="Slow SMA period (default: 30)")
    parser.add_argument(
        "--stop-loss",
        type=float,
        default=None,
        help="Stop loss in percent of the entry price (default: none)",
    )
    parser.add_argument("--source", choices=["synthetic", "csv", "cache"], default=None,
                        help="Override the configured data source")
    parser.add_argument("--count", type=int, default=None, help="Number of bars to load")
    return parser.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()
    config = dict(config_loader.get_config("backtest"))
    data_config = dict(config.get("data", {}))
    if args.source:
        data_config["source"] = args.source
    if args.count:
        data_config["count"] = args.count
    config["data"] = data_config

    logging_config = config.get("logging", {})
    setup_logging(logging_config.get("level", "INFO"), logging_config.get("file"))

    results = run_backtest(config, fast=args.fast, slow=args.slow, stop_loss=args.stop_loss)
    print("\nBacktest Summary JSON:")
    print(json.dumps(results, indent=2))
