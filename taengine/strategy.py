"""
Trading strategy: an entry rule and an exit rule.
"""

import logging
from typing import Optional

from .models.trade import TradeType
from .rules.base import Rule

logger = logging.getLogger(__name__)


class Strategy:
    """
    Pairs an entry rule with an exit rule.

    No signal is produced while the index is within the first
    ``unstable_bars`` bars, whatever the rules answer.
    """

    def __init__(
        self,
        entry_rule: Rule,
        exit_rule: Rule,
        unstable_bars: int = 0,
        name: Optional[str] = None,
        starting_type: TradeType = TradeType.BUY,
    ):
        if entry_rule is None or exit_rule is None:
            raise ValueError("Rules cannot be None")
        self.entry_rule = entry_rule
        self.exit_rule = exit_rule
        self.unstable_bars = unstable_bars
        self.name = name or "unnamed_strategy"
        self.starting_type = starting_type

    @property
    def unstable_bars(self) -> int:
        return self._unstable_bars

    @unstable_bars.setter
    def unstable_bars(self, value: int) -> None:
        if value < 0:
            raise ValueError("Unstable bars must be >= 0")
        self._unstable_bars = value

    def is_unstable_at(self, index: int) -> bool:
        return index < self._unstable_bars

    def should_enter(self, index: int, trading_record=None) -> bool:
        if self.is_unstable_at(index):
            return False
        enter = self.entry_rule.is_satisfied(index, trading_record)
        self._trace_should_enter(index, enter)
        return enter

    def should_exit(self, index: int, trading_record=None) -> bool:
        if self.is_unstable_at(index):
            return False
        exit_ = self.exit_rule.is_satisfied(index, trading_record)
        self._trace_should_exit(index, exit_)
        return exit_

    def should_operate(self, index: int, trading_record) -> bool:
        """Entry rule while no position is open, exit rule while one is."""
        position = trading_record.current_position
        if position.is_new:
            return self.should_enter(index, trading_record)
        if position.is_opened:
            return self.should_exit(index, trading_record)
        return False

    def and_(self, other: "Strategy", name: Optional[str] = None) -> "Strategy":
        return Strategy(
            self.entry_rule & other.entry_rule,
            self.exit_rule & other.exit_rule,
            max(self._unstable_bars, other.unstable_bars),
            name or f"and({self.name},{other.name})",
            self.starting_type,
        )

    def or_(self, other: "Strategy", name: Optional[str] = None) -> "Strategy":
        return Strategy(
            self.entry_rule | other.entry_rule,
            self.exit_rule | other.exit_rule,
            max(self._unstable_bars, other.unstable_bars),
            name or f"or({self.name},{other.name})",
            self.starting_type,
        )

    def opposite(self, name: Optional[str] = None) -> "Strategy":
        """Entry and exit rules swapped."""
        return Strategy(
            self.exit_rule,
            self.entry_rule,
            self._unstable_bars,
            name or f"opposite({self.name})",
            self.starting_type,
        )

    def _trace_should_enter(self, index: int, enter: bool) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("should_enter", extra={"strategy": self.name, "index": index, "enter": enter})

    def _trace_should_exit(self, index: int, exit_: bool) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("should_exit", extra={"strategy": self.name, "index": index, "exit": exit_})

    def __repr__(self):
        return f"Strategy(name={self.name!r}, unstable_bars={self._unstable_bars})"
