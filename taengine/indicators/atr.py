"""
Average True Range (ATR) indicator.
"""

from .averages import MMAIndicator
from .base import CachedIndicator


class TrueRangeIndicator(CachedIndicator):
    """
    Largest of high - low, |high - previous close| and |low - previous close|.

    The first bar has no previous close and uses high - low only.
    """

    def __init__(self, series):
        super().__init__(series)

    def calculate(self, index: int):
        bar = self.bar_series.get_bar(index)
        tr1 = bar.high - bar.low
        if index == 0:
            return abs(tr1)
        prev_close = self.bar_series.get_bar(index - 1).close
        tr2 = abs(bar.high - prev_close)
        tr3 = abs(bar.low - prev_close)
        return max(abs(tr1), tr2, tr3)


class ATRIndicator(CachedIndicator):
    """Wilder-smoothed average of the true range."""

    def __init__(self, series, bar_count: int = 14):
        super().__init__(series)
        self.bar_count = bar_count
        self.true_range = TrueRangeIndicator(series)
        self.average_true_range = MMAIndicator(self.true_range, bar_count)

    def calculate(self, index: int):
        return self.average_true_range.get_value(index)

    @property
    def unstable_bars(self) -> int:
        return self.bar_count

    def __str__(self):
        return f"ATRIndicator(bar_count={self.bar_count})"
