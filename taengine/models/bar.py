"""
OHLCV bar model.
"""

from datetime import datetime, timedelta
from dataclasses import dataclass, field
from typing import Any, Optional

from ..utils.numeric import DECIMAL, NumFactory, is_nan


@dataclass
class Bar:
    """
    Single OHLCV aggregation over a time period.

    Prices stay None until the first price is added. A bar is mutated through
    ``add_trade``/``add_price`` only while it is the last bar of a series.
    """
    time_period: timedelta
    end_time: datetime
    open: Optional[Any] = None
    high: Optional[Any] = None
    low: Optional[Any] = None
    close: Optional[Any] = None
    volume: Optional[Any] = None
    amount: Optional[Any] = None
    trades: int = 0
    num_factory: NumFactory = field(default=DECIMAL, repr=False, compare=False)
    begin_time: datetime = field(init=False, repr=False)

    def __post_init__(self):
        if self.time_period is None:
            raise ValueError("Time period cannot be None")
        if self.end_time is None:
            raise ValueError("End time cannot be None")
        self.begin_time = self.end_time - self.time_period
        if self.volume is None:
            self.volume = self.num_factory.zero()
        if self.amount is None:
            self.amount = self.num_factory.zero()

        prices = (self.open, self.high, self.low, self.close)
        if any(p is None or is_nan(p) for p in prices):
            return
        if self.high < self.low:
            raise ValueError("High must be >= Low")
        if self.high < self.open or self.high < self.close:
            raise ValueError("High must be >= Open and Close")
        if self.low > self.open or self.low > self.close:
            raise ValueError("Low must be <= Open and Close")

    @classmethod
    def of(
        cls,
        end_time: datetime,
        open,
        high,
        low,
        close,
        volume=0,
        amount=0,
        time_period: timedelta = timedelta(days=1),
        num_factory: NumFactory = DECIMAL,
    ) -> "Bar":
        """Build a bar from native numbers, converted to ``num_factory``'s backend."""
        return cls(
            time_period=time_period,
            end_time=end_time,
            open=num_factory.num_of(open),
            high=num_factory.num_of(high),
            low=num_factory.num_of(low),
            close=num_factory.num_of(close),
            volume=num_factory.num_of(volume),
            amount=num_factory.num_of(amount),
            num_factory=num_factory,
        )

    def add_trade(self, trade_volume, trade_price) -> None:
        """Accumulate one trade: price update plus volume, amount and trade count."""
        self.add_price(trade_price)
        self.volume = self.volume + trade_volume
        self.amount = self.amount + trade_volume * trade_price
        self.trades += 1

    def add_price(self, price) -> None:
        """
        Update open (first time only), close, high and low with ``price``.

        A NaN price leaves high and low untouched; a NaN high or low is
        replaced by the next real price.
        """
        if self.open is None:
            self.open = price
        self.close = price
        if is_nan(price):
            return
        if self.high is None or is_nan(self.high) or self.high < price:
            self.high = price
        if self.low is None or is_nan(self.low) or self.low > price:
            self.low = price

    def in_period(self, timestamp: datetime) -> bool:
        """True if ``timestamp`` lies in [begin_time, end_time)."""
        return timestamp is not None and self.begin_time <= timestamp < self.end_time

    def _has_open_and_close(self) -> bool:
        return (self.open is not None and self.close is not None
                and not is_nan(self.open) and not is_nan(self.close))

    @property
    def is_bullish(self) -> bool:
        return self._has_open_and_close() and self.open < self.close

    @property
    def is_bearish(self) -> bool:
        return self._has_open_and_close() and self.open > self.close

    def __str__(self):
        return (
            f"{{end time: {self.end_time.isoformat()}, close price: {self.close}, "
            f"open price: {self.open}, low price: {self.low}, high price: {self.high}, "
            f"volume: {self.volume}}}"
        )
