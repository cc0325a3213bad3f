"""
Stop rules relative to the entry price of the open position.

Percentages are expressed in percent (5 means 5%). Short positions
mirror the thresholds.
"""

from abc import abstractmethod

from .base import Rule
from ..indicators.base import Indicator
from ..utils.numeric import is_nan


class _EntryRelativeRule(Rule):
    def __init__(self, price_indicator: Indicator, percentage):
        self.price_indicator = price_indicator
        self.percentage = price_indicator.num_of(percentage)

    def is_satisfied(self, index: int, trading_record=None) -> bool:
        satisfied = False
        if trading_record is not None:
            position = trading_record.current_position
            if position.is_opened:
                entry_price = position.entry.net_price
                current_price = self.price_indicator.get_value(index)
                if not is_nan(entry_price) and not is_nan(current_price):
                    satisfied = self._is_triggered(position.entry.is_buy, entry_price, current_price)
        self._trace_is_satisfied(index, satisfied)
        return satisfied

    def _ratio(self, sign: int):
        hundred = self.price_indicator.num_of(100)
        return (hundred + sign * self.percentage) / hundred

    @abstractmethod
    def _is_triggered(self, is_long: bool, entry_price, current_price) -> bool:
        """True if the current price crossed the threshold."""


class StopLossRule(_EntryRelativeRule):
    """Satisfied once the price moved ``loss_percentage`` against the position."""

    def __init__(self, price_indicator: Indicator, loss_percentage):
        super().__init__(price_indicator, loss_percentage)

    def _is_triggered(self, is_long: bool, entry_price, current_price) -> bool:
        if is_long:
            return current_price <= entry_price * self._ratio(-1)
        return current_price >= entry_price * self._ratio(1)


class StopGainRule(_EntryRelativeRule):
    """Satisfied once the price moved ``gain_percentage`` in favour of the position."""

    def __init__(self, price_indicator: Indicator, gain_percentage):
        super().__init__(price_indicator, gain_percentage)

    def _is_triggered(self, is_long: bool, entry_price, current_price) -> bool:
        if is_long:
            return current_price >= entry_price * self._ratio(1)
        return current_price <= entry_price * self._ratio(-1)
