"""Trading rules."""

from .base import AndRule, BooleanRule, FixedRule, NotRule, OrRule, Rule, XorRule
from .indicator_rules import (
    BooleanIndicatorRule,
    CrossedDownIndicatorRule,
    CrossedUpIndicatorRule,
    OverIndicatorRule,
    UnderIndicatorRule,
)
from .stops import StopGainRule, StopLossRule

__all__ = [
    "AndRule",
    "BooleanIndicatorRule",
    "BooleanRule",
    "CrossedDownIndicatorRule",
    "CrossedUpIndicatorRule",
    "FixedRule",
    "NotRule",
    "OrRule",
    "OverIndicatorRule",
    "Rule",
    "StopGainRule",
    "StopLossRule",
    "UnderIndicatorRule",
    "XorRule",
]
