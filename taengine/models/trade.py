"""
Trade model: a single BUY or SELL execution.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..analysis.cost import CostModel, ZeroCostModel
from ..utils.numeric import DECIMAL, NumFactory, is_nan, num_equals


class TradeType(Enum):
    """Trade direction."""
    BUY = "BUY"
    SELL = "SELL"

    def complement_type(self) -> "TradeType":
        return TradeType.SELL if self is TradeType.BUY else TradeType.BUY


@dataclass(eq=False)
class Trade:
    """
    One execution at a bar index.

    ``price_per_asset`` may be NaN for placeholder trades whose price is
    resolved later against a series (see ``price_per_asset_for``).
    """
    index: int
    trade_type: TradeType
    price_per_asset: Any = None
    amount: Any = None
    transaction_cost_model: CostModel = field(default_factory=ZeroCostModel, repr=False)
    num_factory: NumFactory = field(default=DECIMAL, repr=False)
    cost: Any = field(init=False, repr=False)
    net_price: Any = field(init=False, repr=False)

    def __post_init__(self):
        if self.trade_type is None:
            raise ValueError("Trade type must not be None")
        if self.transaction_cost_model is None:
            self.transaction_cost_model = ZeroCostModel()
        self.price_per_asset = self._to_num(self.price_per_asset, self.num_factory.nan)
        self.amount = self._to_num(self.amount, self.num_factory.one)
        self.cost = self.transaction_cost_model.calculate_trade(self.price_per_asset, self.amount)
        self.net_price = self._compute_net_price()

    def _to_num(self, value, default):
        if value is None:
            return default()
        if self.num_factory.produces(value):
            return value
        return self.num_factory.num_of(value)

    def _compute_net_price(self):
        if is_nan(self.amount) or self.amount == 0:
            return self.price_per_asset
        cost_per_asset = self.cost / self.amount
        if self.trade_type is TradeType.BUY:
            return self.price_per_asset + cost_per_asset
        return self.price_per_asset - cost_per_asset

    @classmethod
    def buy_at(cls, index: int, price=None, amount=None,
               transaction_cost_model: Optional[CostModel] = None, series=None) -> "Trade":
        """BUY at ``price``, or at the close of bar ``index`` when only ``series`` is given."""
        return cls._at(TradeType.BUY, index, price, amount, transaction_cost_model, series)

    @classmethod
    def sell_at(cls, index: int, price=None, amount=None,
                transaction_cost_model: Optional[CostModel] = None, series=None) -> "Trade":
        """SELL at ``price``, or at the close of bar ``index`` when only ``series`` is given."""
        return cls._at(TradeType.SELL, index, price, amount, transaction_cost_model, series)

    @classmethod
    def _at(cls, trade_type, index, price, amount, transaction_cost_model, series):
        num_factory = DECIMAL
        if series is not None:
            num_factory = series.num_factory
            if price is None:
                price = series.get_bar(index).close
        return cls(
            index=index,
            trade_type=trade_type,
            price_per_asset=price,
            amount=amount,
            transaction_cost_model=transaction_cost_model or ZeroCostModel(),
            num_factory=num_factory,
        )

    @property
    def value(self):
        """Traded value (price x amount), costs excluded."""
        return self.price_per_asset * self.amount

    @property
    def is_buy(self) -> bool:
        return self.trade_type is TradeType.BUY

    @property
    def is_sell(self) -> bool:
        return self.trade_type is TradeType.SELL

    def price_per_asset_for(self, series):
        """Price, falling back to the close of bar ``index`` when the price is NaN."""
        if is_nan(self.price_per_asset):
            return series.get_bar(self.index).close
        return self.price_per_asset

    def __eq__(self, other):
        if not isinstance(other, Trade):
            return NotImplemented
        return (self.trade_type is other.trade_type
                and self.index == other.index
                and num_equals(self.price_per_asset, other.price_per_asset)
                and num_equals(self.amount, other.amount))

    def __hash__(self):
        return hash((self.trade_type, self.index))

    def __str__(self):
        return (f"Trade{{type={self.trade_type.value}, index={self.index}, "
                f"price={self.price_per_asset}, amount={self.amount}}}")
