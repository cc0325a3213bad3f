"""Indicator engine and a small library of indicators built on it."""

from .base import CachedIndicator, Indicator, RecursiveCachedIndicator
from .cache import CachedBuffer, NOT_COMPUTED
from .helpers import (
    ClosePriceIndicator,
    ConstantIndicator,
    CrossIndicator,
    GainIndicator,
    HighPriceIndicator,
    LossIndicator,
    LowPriceIndicator,
    OpenPriceIndicator,
    PreviousValueIndicator,
    VolumeIndicator,
)
from .averages import EMAIndicator, MMAIndicator, SMAIndicator
from .oscillators import RSIIndicator
from .atr import ATRIndicator, TrueRangeIndicator

__all__ = [
    "ATRIndicator",
    "CachedBuffer",
    "CachedIndicator",
    "ClosePriceIndicator",
    "ConstantIndicator",
    "CrossIndicator",
    "EMAIndicator",
    "GainIndicator",
    "HighPriceIndicator",
    "Indicator",
    "LossIndicator",
    "LowPriceIndicator",
    "MMAIndicator",
    "NOT_COMPUTED",
    "OpenPriceIndicator",
    "PreviousValueIndicator",
    "RSIIndicator",
    "RecursiveCachedIndicator",
    "SMAIndicator",
    "TrueRangeIndicator",
    "VolumeIndicator",
]
