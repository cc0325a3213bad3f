"""
Rules reading indicator values.
"""

from .base import Rule
from ..indicators.base import Indicator
from ..indicators.helpers import ConstantIndicator, CrossIndicator
from ..utils.numeric import is_nan


def _as_indicator(reference: Indicator, value) -> Indicator:
    if isinstance(value, Indicator):
        return value
    return ConstantIndicator(reference.bar_series, value)


class BooleanIndicatorRule(Rule):
    """Satisfied where a boolean indicator is True."""

    def __init__(self, indicator: Indicator):
        self.indicator = indicator

    def is_satisfied(self, index: int, trading_record=None) -> bool:
        satisfied = bool(self.indicator.get_value(index))
        self._trace_is_satisfied(index, satisfied)
        return satisfied


class OverIndicatorRule(Rule):
    """Satisfied where ``first`` is strictly above ``second`` (an indicator or a number)."""

    def __init__(self, first: Indicator, second):
        self.first = first
        self.second = _as_indicator(first, second)

    def is_satisfied(self, index: int, trading_record=None) -> bool:
        first = self.first.get_value(index)
        second = self.second.get_value(index)
        satisfied = not is_nan(first) and not is_nan(second) and first > second
        self._trace_is_satisfied(index, satisfied)
        return satisfied


class UnderIndicatorRule(Rule):
    """Satisfied where ``first`` is strictly below ``second`` (an indicator or a number)."""

    def __init__(self, first: Indicator, second):
        self.first = first
        self.second = _as_indicator(first, second)

    def is_satisfied(self, index: int, trading_record=None) -> bool:
        first = self.first.get_value(index)
        second = self.second.get_value(index)
        satisfied = not is_nan(first) and not is_nan(second) and first < second
        self._trace_is_satisfied(index, satisfied)
        return satisfied


class CrossedUpIndicatorRule(Rule):
    """Satisfied where ``first`` crosses above ``second``."""

    def __init__(self, first: Indicator, second):
        self.first = first
        self.second = _as_indicator(first, second)
        self.cross = CrossIndicator(self.second, first)

    def is_satisfied(self, index: int, trading_record=None) -> bool:
        satisfied = self.cross.get_value(index)
        self._trace_is_satisfied(index, satisfied)
        return satisfied


class CrossedDownIndicatorRule(Rule):
    """Satisfied where ``first`` crosses below ``second``."""

    def __init__(self, first: Indicator, second):
        self.first = first
        self.second = _as_indicator(first, second)
        self.cross = CrossIndicator(first, self.second)

    def is_satisfied(self, index: int, trading_record=None) -> bool:
        satisfied = self.cross.get_value(index)
        self._trace_is_satisfied(index, satisfied)
        return satisfied
