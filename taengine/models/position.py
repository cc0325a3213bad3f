"""
Position model: an entry trade and, once closed, its complementary exit.
"""

from typing import Optional

from .trade import Trade, TradeType
from ..analysis.cost import CostModel, ZeroCostModel
from ..exceptions import PositionStateError
from ..utils.numeric import DECIMAL, NumFactory, factory_of, is_negative, is_positive


class Position:
    """
    Pair of trades: entry, then exit of the complementary type.

    State is derived from the trades: new (no trade), opened (entry only)
    and closed (entry and exit).
    """

    def __init__(
        self,
        starting_type: TradeType = TradeType.BUY,
        transaction_cost_model: Optional[CostModel] = None,
        holding_cost_model: Optional[CostModel] = None,
        num_factory: NumFactory = DECIMAL,
    ):
        if starting_type is None:
            raise ValueError("Starting type must not be None")
        self.starting_type = starting_type
        self.transaction_cost_model = transaction_cost_model or ZeroCostModel()
        self.holding_cost_model = holding_cost_model or ZeroCostModel()
        self.num_factory = num_factory
        self.entry: Optional[Trade] = None
        self.exit: Optional[Trade] = None

    @classmethod
    def of(
        cls,
        entry: Trade,
        exit: Trade,
        transaction_cost_model: Optional[CostModel] = None,
        holding_cost_model: Optional[CostModel] = None,
    ) -> "Position":
        """
        Closed position from prebuilt trades.

        Raises:
            ValueError: If both trades have the same type, or if the trades
                were priced with another transaction cost model
        """
        if entry.trade_type is exit.trade_type:
            raise ValueError("Both trades must have different types")
        transaction_cost_model = transaction_cost_model or ZeroCostModel()
        if (entry.transaction_cost_model != transaction_cost_model
                or exit.transaction_cost_model != transaction_cost_model):
            raise ValueError("Trades and the position must incorporate the same trading cost model")
        position = cls(
            entry.trade_type,
            transaction_cost_model,
            holding_cost_model,
            num_factory=factory_of(entry.price_per_asset),
        )
        position.entry = entry
        position.exit = exit
        return position

    @property
    def is_new(self) -> bool:
        return self.entry is None and self.exit is None

    @property
    def is_opened(self) -> bool:
        return self.entry is not None and self.exit is None

    @property
    def is_closed(self) -> bool:
        return self.entry is not None and self.exit is not None

    def operate(self, index: int, price=None, amount=None) -> Optional[Trade]:
        """
        Open or close the position at ``index``.

        Without a price the trade is a NaN placeholder (price and amount).
        With a price but no amount the amount is one. Operating on a closed
        position does nothing and returns None.

        Raises:
            PositionStateError: If closing before the entry index
        """
        if price is None:
            price = self.num_factory.nan()
            if amount is None:
                amount = self.num_factory.nan()
        elif amount is None:
            amount = self.num_factory.one()

        trade = None
        if self.is_new:
            trade = Trade(index, self.starting_type, price, amount,
                          self.transaction_cost_model, self.num_factory)
            self.entry = trade
        elif self.is_opened:
            if index < self.entry.index:
                raise PositionStateError(
                    f"The index {index} is less than the entry trade index {self.entry.index}"
                )
            trade = Trade(index, self.starting_type.complement_type(), price, amount,
                          self.transaction_cost_model, self.num_factory)
            self.exit = trade
        return trade

    def has_profit(self) -> bool:
        return is_positive(self.get_profit())

    def has_loss(self) -> bool:
        return is_negative(self.get_profit())

    @property
    def profit(self):
        return self.get_profit()

    def get_profit(self, final_index: Optional[int] = None, final_price=None):
        """
        Net profit (gross profit minus costs).

        Without arguments: zero unless the position is closed. With a final
        index and price: profit as if exited there, holding costs accrued up
        to ``final_index`` for still-open positions.
        """
        if final_index is None and final_price is None:
            if not self.is_closed:
                return self._zero()
            return self.get_gross_profit(self.exit.price_per_asset) - self.get_position_cost()
        if self.is_new:
            return self._zero()
        return self.get_gross_profit(final_price) - self.get_position_cost(final_index)

    def get_gross_profit(self, final_price=None):
        """Profit before costs; negated for short (SELL-entry) positions."""
        if final_price is None:
            if not self.is_closed:
                return self._zero()
            final_price = self.exit.price_per_asset
        if self.is_new:
            return self._zero()
        if self.is_opened:
            gross_profit = self.entry.amount * final_price - self.entry.value
        else:
            gross_profit = self.exit.value - self.entry.value
        if self.entry.is_sell:
            gross_profit = -gross_profit
        return gross_profit

    def get_gross_return(self, final_price=None):
        """
        Gross return including the base (1.04 for a 4% gain).

        Zero unless closed, when no ``final_price`` is given.
        """
        if final_price is None:
            if not self.is_closed:
                return self._zero()
            final_price = self.exit.price_per_asset
        return self.gross_return_between(self.entry.price_per_asset, final_price)

    def get_gross_return_for(self, series):
        """Gross return with NaN trade prices replaced by the series' close prices."""
        entry_price = self.entry.price_per_asset_for(series)
        exit_price = self.exit.price_per_asset_for(series)
        return self.gross_return_between(entry_price, exit_price)

    def gross_return_between(self, entry_price, exit_price):
        one = factory_of(entry_price).one()
        if self.entry.is_buy:
            return exit_price / entry_price
        return -(exit_price / entry_price - one) + one

    def get_position_cost(self, final_index: Optional[int] = None):
        """Transaction cost plus holding cost."""
        transaction_cost = self.transaction_cost_model.calculate(self, final_index)
        holding_cost = self.get_holding_cost(final_index)
        return transaction_cost + holding_cost

    def get_holding_cost(self, final_index: Optional[int] = None):
        return self.holding_cost_model.calculate(self, final_index)

    def _zero(self):
        if self.entry is not None:
            return factory_of(self.entry.net_price).zero()
        return self.num_factory.zero()

    def __eq__(self, other):
        if not isinstance(other, Position):
            return NotImplemented
        return self.entry == other.entry and self.exit == other.exit

    def __hash__(self):
        return hash((self.entry, self.exit))

    def __str__(self):
        return f"Entry: {self.entry} exit: {self.exit}"
