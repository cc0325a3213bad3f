"""
Base indicator classes.

An indicator is a function of bar index backed by a bar series. Cached
indicators memoize results per index and agree with the series on a single
eviction frontier (``removed_bars_count``).
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Union

from .cache import CachedBuffer, NOT_COMPUTED
from ..models.series import BarSeries
from ..utils.numeric import num_equals

logger = logging.getLogger(__name__)


class Indicator(ABC):
    """Function from bar index to a value."""

    def __init__(self, series: Optional[BarSeries]):
        self.bar_series = series

    @abstractmethod
    def get_value(self, index: int):
        """Value of the indicator at ``index``."""

    def __getitem__(self, index: int):
        return self.get_value(index)

    @property
    def unstable_bars(self) -> int:
        """Number of leading bars whose values are still warming up."""
        return 0

    def num_of(self, value):
        return self.bar_series.num_of(value)

    def __str__(self):
        return self.__class__.__name__


def series_of(source: Union[BarSeries, Indicator, None]) -> Optional[BarSeries]:
    """Bar series behind a series or an indicator."""
    if isinstance(source, Indicator):
        return source.bar_series
    return source


class CachedIndicator(Indicator):
    """
    Indicator that memoizes ``calculate(index)`` results.

    - Stored values are hits whatever they are (NaN included), so indicators
      that stably produce NaN during warm-up are not recomputed.
    - Indices already evicted from the series are served from ``calculate(0)``,
      memoized for the current eviction frontier. Index 0 is the base case of
      every recursive definition, so no call chases further into removed
      history.
    - The value at the series' last index is cached against a snapshot of
      the last bar (identity, trade count, close), since that bar may still
      receive trades.
    """

    def __init__(self, source: Union[BarSeries, Indicator, None]):
        series = series_of(source)
        super().__init__(series)
        capacity = series.maximum_bar_count if series is not None else None
        self._cache = CachedBuffer(capacity)
        self._highest_result_index = -1
        self._first_bar_removed_count = -1
        self._first_bar_value = NOT_COMPUTED
        self._last_bar_snapshot = None
        self._last_bar_value = NOT_COMPUTED

    @abstractmethod
    def calculate(self, index: int):
        """Compute the value at ``index``; may call ``get_value`` on earlier indices."""

    @property
    def highest_result_index(self) -> int:
        """Highest index computed so far (-1 before the first computation)."""
        return self._highest_result_index

    def get_value(self, index: int):
        series = self.bar_series
        if series is None:
            # No series: nothing to cache against
            return self.calculate(index)

        removed_bars_count = series.removed_bars_count
        if index < removed_bars_count:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("result_already_removed", extra={
                    "indicator": str(self),
                    "requested_index": index,
                    "served_index": removed_bars_count,
                })
            result = self._get_first_bar_value(removed_bars_count)
        elif index == series.end_index:
            result = self._get_last_bar_value(index, series)
        else:
            result = self._get_or_compute(index, removed_bars_count)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("indicator_value", extra={
                "indicator": str(self),
                "index": index,
                "value": str(result),
            })
        return result

    def invalidate_cache(self) -> None:
        """Forget every memoized value."""
        self._cache.clear()
        self._highest_result_index = -1
        self._first_bar_removed_count = -1
        self._first_bar_value = NOT_COMPUTED
        self._last_bar_snapshot = None
        self._last_bar_value = NOT_COMPUTED

    def _get_or_compute(self, index: int, removed_bars_count: int):
        # The series bound may have changed since the last call
        self._cache.maximum_capacity = self.bar_series.maximum_bar_count
        self._cache.prune_before(removed_bars_count)
        result = self._cache.get(index)
        if result is not NOT_COMPUTED:
            return result

        if self._last_bar_snapshot is not None and self._last_bar_snapshot[0] == index:
            # A former last bar: reuse its value if the bar did not move since
            if self._snapshot_matches(index, self.bar_series.get_bar(index)):
                result = self._last_bar_value
                self._cache.put(index, result)
                return result

        result = self.calculate(index)
        self._cache.put(index, result)
        self._update_highest_result_index(index)
        return result

    def _get_first_bar_value(self, removed_bars_count: int):
        if self._first_bar_removed_count == removed_bars_count:
            return self._first_bar_value
        result = self.calculate(0)
        self._first_bar_removed_count = removed_bars_count
        self._first_bar_value = result
        return result

    def _get_last_bar_value(self, index: int, series: BarSeries):
        bar = series.last_bar
        if self._snapshot_matches(index, bar):
            return self._last_bar_value
        result = self.calculate(index)
        self._last_bar_snapshot = (index, bar, bar.trades, bar.close)
        self._last_bar_value = result
        self._update_highest_result_index(index)
        return result

    def _snapshot_matches(self, index: int, bar) -> bool:
        snapshot = self._last_bar_snapshot
        if snapshot is None:
            return False
        snap_index, snap_bar, snap_trades, snap_close = snapshot
        return (snap_index == index and snap_bar is bar
                and snap_trades == bar.trades and num_equals(snap_close, bar.close))

    def _update_highest_result_index(self, index: int) -> None:
        if index > self._highest_result_index:
            self._highest_result_index = index


class RecursiveCachedIndicator(CachedIndicator):
    """
    Cached indicator for definitions like ``value[i] = f(value[i-1], data[i])``.

    A request far ahead of the lowest uncached retained index first fills the
    gap iteratively in increasing order, so the call stack never grows by
    more than ``RECURSION_THRESHOLD`` nested evaluations. Below the highest
    computed index, values may have been trimmed from a bounded buffer; those
    requests are filled from the eviction frontier.
    """

    RECURSION_THRESHOLD = 100

    def get_value(self, index: int):
        series = self.bar_series
        if series is not None and index <= series.end_index:
            start_index = max(series.removed_bars_count, self._highest_result_index)
            if index < start_index and not self._cache.is_cached(index):
                start_index = series.removed_bars_count
            if index - start_index > self.RECURSION_THRESHOLD:
                logger.debug("recursive_prefill", extra={
                    "indicator": str(self),
                    "from_index": start_index,
                    "to_index": index,
                })
                for prev_index in range(start_index, index):
                    super().get_value(prev_index)
        return super().get_value(index)
