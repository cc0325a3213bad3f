"""
Transaction and holding cost models.

A cost model prices a single trade (``calculate_trade``) and a whole
position (``calculate``). For still-open positions the holding cost needs
the index of the final bar under consideration.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from ..utils.numeric import factory_of


class CostModel(ABC):
    """Pluggable pricing of trading costs."""

    @abstractmethod
    def calculate(self, position, final_index: Optional[int] = None):
        """Cost of ``position``, observed up to ``final_index`` if it is still open."""

    @abstractmethod
    def calculate_trade(self, price, amount):
        """Cost of a single trade of ``amount`` assets at ``price``."""

    def __eq__(self, other):
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self):
        return hash((type(self).__name__, self._key()))

    def _key(self):
        return ()


def _zero_like(value):
    return factory_of(value).zero()


class ZeroCostModel(CostModel):
    """Trading without costs."""

    def calculate(self, position, final_index: Optional[int] = None):
        return position.num_factory.zero()

    def calculate_trade(self, price, amount):
        return _zero_like(price)

    def __repr__(self):
        return "ZeroCostModel()"


class LinearTransactionCostModel(CostModel):
    """
    Fee proportional to the traded value.

    trade cost = price * amount * fee_per_trade; a position costs its entry
    trade plus its exit trade once closed.
    """

    def __init__(self, fee_per_trade):
        self.fee_per_trade = fee_per_trade

    def calculate(self, position, final_index: Optional[int] = None):
        if position.is_new:
            return position.num_factory.zero()
        total_position_cost = position.entry.cost
        if position.is_closed:
            total_position_cost = total_position_cost + position.exit.cost
        return total_position_cost

    def calculate_trade(self, price, amount):
        factory = factory_of(price)
        return price * amount * factory.num_of(self.fee_per_trade)

    def _key(self):
        return (Decimal(str(self.fee_per_trade)),)

    def __repr__(self):
        return f"LinearTransactionCostModel(fee_per_trade={self.fee_per_trade})"


class LinearBorrowingCostModel(CostModel):
    """
    Borrowing fee for short positions, linear in the holding time.

    cost = entry value * holding periods * fee_per_period. Long positions
    borrow nothing and cost zero.
    """

    def __init__(self, fee_per_period):
        self.fee_per_period = fee_per_period

    def calculate(self, position, final_index: Optional[int] = None):
        if position.is_new:
            return position.num_factory.zero()
        if position.is_closed:
            periods = position.exit.index - position.entry.index
        elif final_index is None:
            raise ValueError(
                "Position is not closed. Final index of observation needs to be provided."
            )
        else:
            periods = final_index - position.entry.index
        return self._holding_cost(position.entry, periods)

    def calculate_trade(self, price, amount):
        return _zero_like(price)

    def _holding_cost(self, entry, periods: int):
        factory = factory_of(entry.value)
        if not entry.is_sell:
            return factory.zero()
        return entry.value * factory.num_of(periods) * factory.num_of(self.fee_per_period)

    def _key(self):
        return (Decimal(str(self.fee_per_period)),)

    def __repr__(self):
        return f"LinearBorrowingCostModel(fee_per_period={self.fee_per_period})"
