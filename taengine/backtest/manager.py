"""
Bar-by-bar replay of a strategy over a bar series.
"""

import logging
from typing import Optional

from .execution import TradeExecutionModel, TradeOnCurrentCloseModel
from ..analysis.cost import CostModel, ZeroCostModel
from ..models.series import BarSeries
from ..models.trade import TradeType
from ..models.trading_record import TradingRecord
from ..strategy import Strategy

logger = logging.getLogger(__name__)


class BarSeriesManager:
    """
    Runs strategies over one series with fixed cost and execution models.

    The series is only read during a run; each run builds its own
    trading record.
    """

    def __init__(
        self,
        series: BarSeries,
        transaction_cost_model: Optional[CostModel] = None,
        holding_cost_model: Optional[CostModel] = None,
        trade_execution_model: Optional[TradeExecutionModel] = None,
    ):
        self.series = series
        self.transaction_cost_model = transaction_cost_model or ZeroCostModel()
        self.holding_cost_model = holding_cost_model or ZeroCostModel()
        self.trade_execution_model = trade_execution_model or TradeOnCurrentCloseModel()

    def run(
        self,
        strategy: Strategy,
        trade_type: Optional[TradeType] = None,
        amount=None,
        start_index: Optional[int] = None,
        finish_index: Optional[int] = None,
    ) -> TradingRecord:
        """
        Replay ``strategy`` over [start_index, finish_index].

        Args:
            strategy: Strategy to replay
            trade_type: Entry type of every position (default: the strategy's)
            amount: Amount traded per trade (default: one)
            start_index: First index (default: series begin index)
            finish_index: Last index (default: series end index)

        Returns:
            TradingRecord stamped with the clamped run bounds

        A position still open at the end of the window may be closed by the
        first later bar whose signal the strategy accepts.
        """
        series = self.series
        trade_type = trade_type or strategy.starting_type
        if amount is None:
            amount = series.num_factory.one()
        elif not series.num_factory.produces(amount):
            amount = series.num_of(amount)
        start_index = series.begin_index if start_index is None else start_index
        finish_index = series.end_index if finish_index is None else finish_index

        run_begin_index = max(start_index, series.begin_index)
        run_end_index = min(finish_index, series.end_index)

        logger.info("backtest_run_started", extra={
            "strategy": strategy.name,
            "series": series.name,
            "begin_index": run_begin_index,
            "end_index": run_end_index,
            "trade_type": trade_type.value,
        })

        trading_record = TradingRecord(
            trade_type,
            self.transaction_cost_model,
            self.holding_cost_model,
            name=strategy.name,
            start_index=run_begin_index,
            end_index=run_end_index,
            num_factory=series.num_factory,
        )

        execution_model = self.trade_execution_model
        for i in range(run_begin_index, run_end_index + 1):
            if strategy.should_operate(i, trading_record):
                execution_model.execute(i, trading_record, series, amount)

        if not trading_record.is_closed():
            # Give the open position a chance to close on the following bars
            series_max_size = max(series.end_index + 1, len(series.bar_data))
            for i in range(run_end_index + 1, series_max_size):
                if strategy.should_operate(i, trading_record):
                    execution_model.execute(i, trading_record, series, amount)
                    break

        logger.info("backtest_run_finished", extra={
            "strategy": strategy.name,
            "positions": trading_record.position_count,
            "open_position": not trading_record.is_closed(),
        })
        return trading_record
