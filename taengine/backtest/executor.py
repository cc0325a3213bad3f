"""
Runs many strategies over the same series.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .execution import TradeExecutionModel
from .manager import BarSeriesManager
from ..analysis.cost import CostModel
from ..analysis.summary import TradingRecordSummary, summarize
from ..models.series import BarSeries
from ..models.trade import TradeType
from ..models.trading_record import TradingRecord
from ..strategy import Strategy

logger = logging.getLogger(__name__)


@dataclass
class BacktestResult:
    """Outcome of one strategy run."""
    strategy_name: str
    trading_record: TradingRecord
    summary: TradingRecordSummary


class BacktestExecutor:
    """Replays each strategy independently, one trading record per strategy."""

    def __init__(
        self,
        series: BarSeries,
        transaction_cost_model: Optional[CostModel] = None,
        holding_cost_model: Optional[CostModel] = None,
        trade_execution_model: Optional[TradeExecutionModel] = None,
    ):
        self.series = series
        self.manager = BarSeriesManager(
            series, transaction_cost_model, holding_cost_model, trade_execution_model
        )

    def execute(
        self,
        strategies: Iterable[Strategy],
        amount=None,
        trade_type: Optional[TradeType] = None,
    ) -> List[BacktestResult]:
        results = []
        for strategy in strategies:
            trading_record = self.manager.run(strategy, trade_type, amount)
            results.append(BacktestResult(
                strategy_name=strategy.name,
                trading_record=trading_record,
                summary=summarize(trading_record),
            ))
        logger.info("backtest_batch_finished", extra={
            "series": self.series.name,
            "strategies": len(results),
        })
        return results
