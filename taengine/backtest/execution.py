"""
Trade execution models: at which bar and price a strategy signal is filled.
"""

from abc import ABC, abstractmethod


class TradeExecutionModel(ABC):
    """Turns a signal at ``index`` into an ``operate`` call on the trading record."""

    @abstractmethod
    def execute(self, index: int, trading_record, series, amount) -> None:
        """Fill the signal raised at ``index``."""


class TradeOnCurrentCloseModel(TradeExecutionModel):
    """Fill at the close of the signal bar."""

    def execute(self, index: int, trading_record, series, amount) -> None:
        trading_record.operate(index, series.get_bar(index).close, amount)


class TradeOnNextOpenModel(TradeExecutionModel):
    """
    Fill at the open of the bar after the signal bar.

    A signal on the last bar has no next bar and is dropped.
    """

    def execute(self, index: int, trading_record, series, amount) -> None:
        execution_index = index + 1
        if execution_index <= series.end_index:
            trading_record.operate(execution_index, series.get_bar(execution_index).open, amount)
