"""
Relative strength index.
"""

from .averages import MMAIndicator
from .base import CachedIndicator, Indicator
from .helpers import GainIndicator, LossIndicator
from ..utils.numeric import is_nan


class RSIIndicator(CachedIndicator):
    """
    RSI = 100 - 100 / (1 + average gain / average loss).

    Averages use Wilder smoothing. A window without losses yields 100,
    one without any movement yields 0.
    """

    def __init__(self, indicator: Indicator, bar_count: int):
        super().__init__(indicator)
        self.bar_count = bar_count
        self.average_gain = MMAIndicator(GainIndicator(indicator), bar_count)
        self.average_loss = MMAIndicator(LossIndicator(indicator), bar_count)

    def calculate(self, index: int):
        factory = self.bar_series.num_factory
        average_gain = self.average_gain.get_value(index)
        average_loss = self.average_loss.get_value(index)
        if is_nan(average_gain) or is_nan(average_loss):
            return factory.nan()
        if average_loss == 0:
            if average_gain == 0:
                return factory.zero()
            return factory.hundred()
        relative_strength = average_gain / average_loss
        return factory.hundred() - factory.hundred() / (factory.one() + relative_strength)

    @property
    def unstable_bars(self) -> int:
        return self.bar_count

    def __str__(self):
        return f"RSIIndicator(bar_count={self.bar_count})"
