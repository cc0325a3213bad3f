"""
Trading record: history of positions and trades produced by a replay.
"""

import logging
from typing import Iterable, List, Optional

from .position import Position
from .trade import Trade, TradeType
from ..analysis.cost import CostModel, ZeroCostModel
from ..exceptions import PositionStateError
from ..utils.numeric import DECIMAL, NumFactory, factory_of

logger = logging.getLogger(__name__)


class TradingRecord:
    """
    Closed positions plus the current one.

    Every successful ``operate`` advances the current position; once it
    closes it is archived and a fresh position of ``starting_type`` takes
    its place.
    """

    def __init__(
        self,
        starting_type: TradeType = TradeType.BUY,
        transaction_cost_model: Optional[CostModel] = None,
        holding_cost_model: Optional[CostModel] = None,
        name: Optional[str] = None,
        start_index: Optional[int] = None,
        end_index: Optional[int] = None,
        num_factory: NumFactory = DECIMAL,
    ):
        if starting_type is None:
            raise ValueError("Starting type must not be None")
        self.starting_type = starting_type
        self.transaction_cost_model = transaction_cost_model or ZeroCostModel()
        self.holding_cost_model = holding_cost_model or ZeroCostModel()
        self.name = name
        self.start_index = start_index
        self.end_index = end_index
        self.num_factory = num_factory
        self.positions: List[Position] = []
        self.trades: List[Trade] = []
        self._buy_trades: List[Trade] = []
        self._sell_trades: List[Trade] = []
        self._entry_trades: List[Trade] = []
        self._exit_trades: List[Trade] = []
        self.current_position = self._new_position(starting_type)

    @classmethod
    def from_trades(
        cls,
        trades: Iterable[Trade],
        transaction_cost_model: Optional[CostModel] = None,
        holding_cost_model: Optional[CostModel] = None,
    ) -> "TradingRecord":
        """
        Rebuild a record from a flat sequence of trades.

        The record starts with the first trade's type. A fresh position whose
        next trade has the other type is opened with that type instead of
        failing; only that one position is reversed.
        """
        trades = list(trades)
        if not trades:
            raise ValueError("At least one trade is required")
        record = cls(
            trades[0].trade_type,
            transaction_cost_model,
            holding_cost_model,
            num_factory=factory_of(trades[0].price_per_asset),
        )
        for trade in trades:
            is_entry = record.current_position.is_new
            if is_entry and trade.trade_type is not record.starting_type:
                logger.debug("position_type_reversed", extra={
                    "index": trade.index,
                    "trade_type": trade.trade_type.value,
                })
                record.current_position = record._new_position(trade.trade_type)
            new_trade = record.current_position.operate(trade.index, trade.price_per_asset, trade.amount)
            record._record_trade(new_trade, is_entry)
        return record

    @classmethod
    def from_positions(cls, positions: Iterable[Position]) -> "TradingRecord":
        """Record replaying the trades of already built positions."""
        positions = list(positions)
        trades = []
        for position in positions:
            trades.append(position.entry)
            if position.exit is not None:
                trades.append(position.exit)
        if positions:
            return cls.from_trades(
                trades,
                positions[0].transaction_cost_model,
                positions[0].holding_cost_model,
            )
        return cls.from_trades(trades)

    def _new_position(self, starting_type: TradeType) -> Position:
        return Position(
            starting_type,
            self.transaction_cost_model,
            self.holding_cost_model,
            num_factory=self.num_factory,
        )

    def operate(self, index: int, price=None, amount=None) -> None:
        """
        Advance the current position at ``index``.

        Raises:
            PositionStateError: If the current position is already closed
        """
        if self.current_position.is_closed:
            raise PositionStateError("Current position should not be closed")
        is_entry = self.current_position.is_new
        trade = self.current_position.operate(index, price, amount)
        self._record_trade(trade, is_entry)

    def enter(self, index: int, price=None, amount=None) -> bool:
        """Open a position if none is open; True if a trade was recorded."""
        if self.current_position.is_new:
            self.operate(index, price, amount)
            return True
        return False

    def exit(self, index: int, price=None, amount=None) -> bool:
        """Close the open position; True if a trade was recorded."""
        if self.current_position.is_opened:
            self.operate(index, price, amount)
            return True
        return False

    def _record_trade(self, trade: Trade, is_entry: bool) -> None:
        if trade is None:
            raise ValueError("Trade should not be None")
        if is_entry:
            self._entry_trades.append(trade)
        else:
            self._exit_trades.append(trade)

        self.trades.append(trade)
        if trade.is_buy:
            self._buy_trades.append(trade)
        else:
            self._sell_trades.append(trade)

        if self.current_position.is_closed:
            self.positions.append(self.current_position)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("position_closed", extra={
                    "record": self.name,
                    "entry_index": self.current_position.entry.index,
                    "exit_index": self.current_position.exit.index,
                })
            self.current_position = self._new_position(self.starting_type)

    def is_closed(self) -> bool:
        """True unless a position is currently open."""
        return not self.current_position.is_opened

    @property
    def position_count(self) -> int:
        return len(self.positions)

    @property
    def last_position(self) -> Optional[Position]:
        return self.positions[-1] if self.positions else None

    def last_trade(self, trade_type: Optional[TradeType] = None) -> Optional[Trade]:
        """Most recent trade, optionally restricted to one trade type."""
        if trade_type is None:
            trades = self.trades
        elif trade_type is TradeType.BUY:
            trades = self._buy_trades
        else:
            trades = self._sell_trades
        return trades[-1] if trades else None

    @property
    def last_entry(self) -> Optional[Trade]:
        return self._entry_trades[-1] if self._entry_trades else None

    @property
    def last_exit(self) -> Optional[Trade]:
        return self._exit_trades[-1] if self._exit_trades else None

    def __repr__(self):
        return (f"TradingRecord(name={self.name!r}, positions={self.position_count}, "
                f"starting_type={self.starting_type.value})")
