"""
Moving averages.

The exponential family is recursive (each value depends on the previous
one) and relies on the iterative prefill of ``RecursiveCachedIndicator``
for long series.
"""

from .base import CachedIndicator, Indicator, RecursiveCachedIndicator


class SMAIndicator(CachedIndicator):
    """
    Simple moving average.

    Near the start of the series the window shrinks to the available bars.
    """

    def __init__(self, indicator: Indicator, bar_count: int):
        if bar_count < 1:
            raise ValueError("bar_count must be positive")
        super().__init__(indicator)
        self.indicator = indicator
        self.bar_count = bar_count

    def calculate(self, index: int):
        start_index = max(0, index - self.bar_count + 1)
        total = self.bar_series.num_factory.zero()
        for i in range(start_index, index + 1):
            total = total + self.indicator.get_value(i)
        return total / self.num_of(index - start_index + 1)

    @property
    def unstable_bars(self) -> int:
        return self.bar_count

    def __str__(self):
        return f"SMAIndicator(bar_count={self.bar_count})"


class _ExponentialMovingAverage(RecursiveCachedIndicator):
    """value[i] = (input[i] - value[i-1]) * multiplier + value[i-1], seeded with input[0]."""

    def __init__(self, indicator: Indicator, bar_count: int, multiplier):
        super().__init__(indicator)
        self.indicator = indicator
        self.bar_count = bar_count
        self.multiplier = multiplier

    def calculate(self, index: int):
        if index == 0:
            return self.indicator.get_value(0)
        previous = self.get_value(index - 1)
        return (self.indicator.get_value(index) - previous) * self.multiplier + previous

    @property
    def unstable_bars(self) -> int:
        return self.bar_count

    def __str__(self):
        return f"{self.__class__.__name__}(bar_count={self.bar_count})"


class EMAIndicator(_ExponentialMovingAverage):
    """Exponential moving average, multiplier 2 / (bar_count + 1)."""

    def __init__(self, indicator: Indicator, bar_count: int):
        if bar_count < 1:
            raise ValueError("bar_count must be positive")
        factory = indicator.bar_series.num_factory
        super().__init__(indicator, bar_count, factory.num_of(2) / factory.num_of(bar_count + 1))


class MMAIndicator(_ExponentialMovingAverage):
    """Modified (Wilder) moving average, multiplier 1 / bar_count."""

    def __init__(self, indicator: Indicator, bar_count: int):
        if bar_count < 1:
            raise ValueError("bar_count must be positive")
        factory = indicator.bar_series.num_factory
        super().__init__(indicator, bar_count, factory.one() / factory.num_of(bar_count))
