"""
Price, constant and difference indicators.
"""

from .base import CachedIndicator, Indicator
from ..utils.numeric import is_nan, is_negative, is_positive, num_equals


class _BarValueIndicator(CachedIndicator):
    """Reads one attribute of the bar at each index."""

    attribute = "close"

    def __init__(self, series):
        super().__init__(series)

    def calculate(self, index: int):
        return getattr(self.bar_series.get_bar(index), self.attribute)


class ClosePriceIndicator(_BarValueIndicator):
    attribute = "close"


class OpenPriceIndicator(_BarValueIndicator):
    attribute = "open"


class HighPriceIndicator(_BarValueIndicator):
    attribute = "high"


class LowPriceIndicator(_BarValueIndicator):
    attribute = "low"


class VolumeIndicator(_BarValueIndicator):
    attribute = "volume"


class ConstantIndicator(Indicator):
    """Same value at every index."""

    def __init__(self, series, value):
        super().__init__(series)
        if series is not None and not series.num_factory.produces(value):
            value = series.num_of(value)
        self.value = value

    def get_value(self, index: int):
        return self.value

    def __str__(self):
        return f"ConstantIndicator({self.value})"


class PreviousValueIndicator(CachedIndicator):
    """
    Value of ``indicator`` ``n`` bars back.

    NaN while fewer than ``n`` bars precede the index.
    """

    def __init__(self, indicator: Indicator, n: int = 1):
        if n < 1:
            raise ValueError("n must be positive number, but was: " + str(n))
        super().__init__(indicator)
        self.indicator = indicator
        self.n = n

    def calculate(self, index: int):
        previous_index = index - self.n
        if previous_index < 0:
            return self.bar_series.num_factory.nan()
        return self.indicator.get_value(previous_index)

    @property
    def unstable_bars(self) -> int:
        return self.n

    def __str__(self):
        return f"PreviousValueIndicator({self.indicator}, n={self.n})"


class GainIndicator(CachedIndicator):
    """Positive change against the previous index, zero otherwise."""

    def __init__(self, indicator: Indicator):
        super().__init__(indicator)
        self.indicator = indicator

    def calculate(self, index: int):
        if index == 0:
            return self.bar_series.num_factory.zero()
        change = self.indicator.get_value(index) - self.indicator.get_value(index - 1)
        if is_nan(change):
            return change
        return change if is_positive(change) else self.bar_series.num_factory.zero()


class LossIndicator(CachedIndicator):
    """Magnitude of a negative change against the previous index, zero otherwise."""

    def __init__(self, indicator: Indicator):
        super().__init__(indicator)
        self.indicator = indicator

    def calculate(self, index: int):
        if index == 0:
            return self.bar_series.num_factory.zero()
        change = self.indicator.get_value(index) - self.indicator.get_value(index - 1)
        if is_nan(change):
            return change
        return -change if is_negative(change) else self.bar_series.num_factory.zero()


def _greater(left, right) -> bool:
    return not is_nan(left) and not is_nan(right) and left > right


class CrossIndicator(CachedIndicator):
    """
    True at the index where ``up`` drops below ``low``.

    Equal values between the two crossing bars are skipped, so a move
    through a flat stretch still counts as one cross.
    """

    def __init__(self, up: Indicator, low: Indicator):
        super().__init__(up)
        self.up = up
        self.low = low

    def calculate(self, index: int) -> bool:
        i = index
        if i == 0 or not _greater(self.low.get_value(i), self.up.get_value(i)):
            return False
        i -= 1
        if _greater(self.up.get_value(i), self.low.get_value(i)):
            return True
        while i > 0 and num_equals(self.up.get_value(i), self.low.get_value(i)):
            i -= 1
        return i != 0 and _greater(self.up.get_value(i), self.low.get_value(i))

    def __str__(self):
        return f"CrossIndicator({self.up}, {self.low})"
