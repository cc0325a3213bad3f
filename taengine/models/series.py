"""
Bar series: an ordered, index-addressable and optionally bounded list of bars.

Global indices stay stable while the physical list shrinks: the bar with
global index ``i`` lives at physical slot ``i - removed_bars_count``.
"""

import logging
from typing import Iterable, List, Optional

from .bar import Bar
from ..exceptions import BarIndexError, BarOrderError, NumTypeMismatchError, SeriesStateError
from ..utils.numeric import DECIMAL, NumFactory

logger = logging.getLogger(__name__)


class BarSeries:
    """Sequence of bars with begin/end index bookkeeping and front eviction."""

    def __init__(
        self,
        name: Optional[str] = None,
        bars: Optional[Iterable[Bar]] = None,
        num_factory: NumFactory = DECIMAL,
        maximum_bar_count: Optional[int] = None,
        constrained: bool = False,
    ):
        """
        Initialize bar series.

        Args:
            name: Series name (e.g., 'EURUSD_M15')
            bars: Initial bars, oldest first
            num_factory: Numeric backend every bar must use
            maximum_bar_count: Bound on retained bars (None = unbounded)
            constrained: Fixed-bounds view (sub-series); bounds cannot change
        """
        self.name = name or "unnamed_series"
        self.num_factory = num_factory
        self._bars: List[Bar] = list(bars or [])
        self._begin_index = -1
        self._end_index = -1
        self._removed_bars_count = 0
        self._maximum_bar_count: Optional[int] = None
        self._constrained = constrained if self._bars else False

        for bar in self._bars:
            self._check_num_type(bar)
        if self._bars:
            self._begin_index = 0
            self._end_index = len(self._bars) - 1

        if maximum_bar_count is not None:
            if maximum_bar_count <= 0:
                raise ValueError("Maximum bar count must be strictly positive")
            self._maximum_bar_count = maximum_bar_count
            self._remove_exceeding_bars()

    @property
    def begin_index(self) -> int:
        return self._begin_index

    @property
    def end_index(self) -> int:
        return self._end_index

    @property
    def removed_bars_count(self) -> int:
        return self._removed_bars_count

    @property
    def maximum_bar_count(self) -> Optional[int]:
        return self._maximum_bar_count

    @property
    def is_constrained(self) -> bool:
        return self._constrained

    @property
    def bar_count(self) -> int:
        """Number of logically visible bars."""
        if self._end_index < 0:
            return 0
        start_index = max(self._removed_bars_count, self._begin_index)
        return self._end_index - start_index + 1

    @property
    def bar_data(self) -> List[Bar]:
        """Physical list of retained bars."""
        return self._bars

    def is_empty(self) -> bool:
        return self.bar_count == 0

    @property
    def first_bar(self) -> Bar:
        return self.get_bar(self._begin_index)

    @property
    def last_bar(self) -> Bar:
        return self.get_bar(self._end_index)

    def num_of(self, value):
        """Convert a native number into this series' numeric backend."""
        return self.num_factory.num_of(value)

    def get_bar(self, index: int) -> Bar:
        """
        Get the bar at a global index.

        Indices that were evicted resolve to the oldest retained bar.

        Raises:
            BarIndexError: If index is negative or past the last bar
        """
        inner_index = index - self._removed_bars_count
        if inner_index < 0:
            if index < 0:
                raise BarIndexError(self._out_of_bounds_message(index))
            if not self._bars:
                raise BarIndexError(self._out_of_bounds_message(self._removed_bars_count))
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("bar_already_removed", extra={
                    "series": self.name,
                    "bars": len(self._bars),
                    "requested_index": index,
                    "served_index": self._removed_bars_count,
                })
            inner_index = 0
        elif inner_index >= len(self._bars):
            raise BarIndexError(self._out_of_bounds_message(index))
        return self._bars[inner_index]

    def add_bar(self, bar: Bar, replace: bool = False) -> None:
        """
        Append a bar at the end of the series.

        Args:
            bar: Bar to add; must use the series' numeric backend
            replace: Overwrite the last bar instead of appending

        Raises:
            NumTypeMismatchError: If the bar's prices use another backend
            BarOrderError: If the bar does not end after the last bar
        """
        if bar is None:
            raise ValueError("bar must not be None")
        self._check_num_type(bar)

        if self._bars:
            if replace:
                self._bars[-1] = bar
                return
            series_end_time = self._bars[-1].end_time
            if not bar.end_time > series_end_time:
                raise BarOrderError(
                    f"Cannot add a bar with end time: {bar.end_time} "
                    f"that is <= to series end time: {series_end_time}"
                )

        self._bars.append(bar)
        if self._begin_index == -1:
            self._begin_index = 0
        self._end_index += 1
        self._remove_exceeding_bars()

    def add_trade(self, trade_volume, trade_price) -> None:
        """Add a trade to the last bar; native numbers are converted."""
        self.last_bar.add_trade(self.num_of(trade_volume), self.num_of(trade_price))

    def add_price(self, price) -> None:
        """Add a price to the last bar; native numbers are converted."""
        self.last_bar.add_price(self.num_of(price))

    def set_maximum_bar_count(self, maximum_bar_count: int) -> None:
        """
        Bound the number of retained bars, evicting the oldest excess now.

        Raises:
            SeriesStateError: On a constrained series
            ValueError: If maximum_bar_count <= 0
        """
        if self._constrained:
            raise SeriesStateError("Cannot set a maximum bar count on a constrained bar series")
        if maximum_bar_count <= 0:
            raise ValueError("Maximum bar count must be strictly positive")
        self._maximum_bar_count = maximum_bar_count
        self._remove_exceeding_bars()

    def get_sub_series(self, start_index: int, end_index: int) -> "BarSeries":
        """
        Independent constrained copy of bars in [start_index, end_index), re-indexed from 0.

        Raises:
            ValueError: If start_index < 0 or end_index <= start_index
        """
        if start_index < 0:
            raise ValueError(f"the start_index: {start_index} must not be negative")
        if start_index >= end_index:
            raise ValueError(
                f"the end_index: {end_index} must be greater than start_index: {start_index}"
            )
        if not self._bars:
            return BarSeries(name=self.name, num_factory=self.num_factory, constrained=True)

        start = max(start_index, self._begin_index, self._removed_bars_count) - self._removed_bars_count
        end = min(end_index, self._end_index + 1) - self._removed_bars_count
        return BarSeries(
            name=self.name,
            bars=self._bars[start:max(start, end)],
            num_factory=self.num_factory,
            constrained=True,
        )

    def series_period_description(self) -> str:
        """'<first bar end> - <last bar end>' in ISO format, empty for an empty series."""
        if not self._bars:
            return ""
        return f"{self.first_bar.end_time.isoformat()} - {self.last_bar.end_time.isoformat()}"

    def _check_num_type(self, bar: Bar) -> None:
        if bar.close is not None and not self.num_factory.produces(bar.close):
            raise NumTypeMismatchError(
                f"Cannot add Bar with data type: {type(bar.close).__name__} "
                f"to series with data type: {self.num_factory.num_type.__name__}"
            )

    def _remove_exceeding_bars(self) -> None:
        if self._maximum_bar_count is None:
            return
        bar_count = len(self._bars)
        if bar_count > self._maximum_bar_count:
            nb_bars_to_remove = bar_count - self._maximum_bar_count
            del self._bars[:nb_bars_to_remove]
            self._removed_bars_count += nb_bars_to_remove
            self._begin_index = max(self._begin_index, self._removed_bars_count)
            logger.debug("bars_evicted", extra={
                "series": self.name,
                "removed": nb_bars_to_remove,
                "removed_bars_count": self._removed_bars_count,
            })

    def _out_of_bounds_message(self, index: int) -> str:
        return (
            f"Size of series: {len(self._bars)} bars, "
            f"{self._removed_bars_count} bars removed, index = {index}"
        )

    def __repr__(self):
        return (
            f"BarSeries(name={self.name!r}, bars={self.bar_count}, "
            f"begin_index={self._begin_index}, end_index={self._end_index})"
        )
