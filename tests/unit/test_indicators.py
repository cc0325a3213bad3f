"""
Unit tests for the indicator library.
"""

import unittest
from decimal import Decimal
from datetime import datetime, timezone, timedelta

from taengine.indicators import (
    ATRIndicator,
    ClosePriceIndicator,
    ConstantIndicator,
    CrossIndicator,
    EMAIndicator,
    GainIndicator,
    HighPriceIndicator,
    LossIndicator,
    LowPriceIndicator,
    MMAIndicator,
    OpenPriceIndicator,
    PreviousValueIndicator,
    RSIIndicator,
    SMAIndicator,
    TrueRangeIndicator,
    VolumeIndicator,
)
from taengine.models.bar import Bar
from taengine.models.series import BarSeries
from taengine.utils.numeric import DOUBLE

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _series(closes, num_factory=None):
    kwargs = {"num_factory": num_factory} if num_factory else {}
    series = BarSeries(name="test_series", **kwargs)
    for i, close in enumerate(closes):
        series.add_bar(Bar.of(START + timedelta(days=i + 1), close, close, close, close,
                              volume=10 * (i + 1), **kwargs))
    return series


class TestPriceIndicators(unittest.TestCase):
    """Test bar field indicators."""

    def setUp(self):
        self.series = BarSeries(name="ohlc")
        self.series.add_bar(Bar.of(START, 10, 12, 8, 11, volume=100))

    def test_bar_fields(self):
        self.assertEqual(OpenPriceIndicator(self.series).get_value(0), Decimal(10))
        self.assertEqual(HighPriceIndicator(self.series).get_value(0), Decimal(12))
        self.assertEqual(LowPriceIndicator(self.series).get_value(0), Decimal(8))
        self.assertEqual(ClosePriceIndicator(self.series).get_value(0), Decimal(11))
        self.assertEqual(VolumeIndicator(self.series).get_value(0), Decimal(100))

    def test_constant(self):
        constant = ConstantIndicator(self.series, 5)
        self.assertEqual(constant.get_value(0), Decimal(5))
        self.assertEqual(constant.get_value(1000), Decimal(5))


class TestDifferenceIndicators(unittest.TestCase):
    """Test previous value, gain and loss."""

    def setUp(self):
        self.series = _series([1, 3, 2, 2])
        self.close = ClosePriceIndicator(self.series)

    def test_previous_value(self):
        previous = PreviousValueIndicator(self.close)
        self.assertTrue(previous.get_value(0).is_nan())
        self.assertEqual(previous.get_value(1), Decimal(1))
        self.assertEqual(previous.get_value(3), Decimal(2))

        two_back = PreviousValueIndicator(self.close, 2)
        self.assertTrue(two_back.get_value(1).is_nan())
        self.assertEqual(two_back.get_value(2), Decimal(1))
        self.assertEqual(two_back.unstable_bars, 2)

        with self.assertRaises(ValueError):
            PreviousValueIndicator(self.close, 0)

    def test_gain_and_loss(self):
        gain = GainIndicator(self.close)
        loss = LossIndicator(self.close)
        self.assertEqual([gain.get_value(i) for i in range(4)], [0, 2, 0, 0])
        self.assertEqual([loss.get_value(i) for i in range(4)], [0, 0, 1, 0])


class TestMovingAverages(unittest.TestCase):
    """Test SMA, EMA and MMA."""

    def test_sma(self):
        series = _series(range(1, 10))
        sma = SMAIndicator(ClosePriceIndicator(series), 3)
        self.assertEqual(sma.get_value(0), Decimal(1))
        self.assertEqual(sma.get_value(1), Decimal('1.5'))
        self.assertEqual(sma.get_value(2), Decimal(2))
        self.assertEqual(sma.get_value(8), Decimal(8))
        self.assertEqual(sma.unstable_bars, 3)

    def test_sma_double_backend(self):
        series = _series([0.1, 0.2, 0.3], num_factory=DOUBLE)
        sma = SMAIndicator(ClosePriceIndicator(series), 3)
        self.assertIsInstance(sma.get_value(2), float)
        self.assertAlmostEqual(sma.get_value(2), 0.2)

    def test_ema(self):
        series = _series([10, 20, 30])
        ema = EMAIndicator(ClosePriceIndicator(series), 3)
        self.assertEqual(ema.get_value(0), Decimal(10))
        self.assertEqual(ema.get_value(1), Decimal(15))
        self.assertEqual(ema.get_value(2), Decimal('22.5'))

    def test_mma(self):
        series = _series([10, 20, 30])
        mma = MMAIndicator(ClosePriceIndicator(series), 4)
        self.assertEqual(mma.get_value(0), Decimal(10))
        self.assertEqual(mma.get_value(1), Decimal('12.5'))
        self.assertEqual(mma.get_value(2), Decimal('16.875'))

    def test_invalid_bar_count(self):
        close = ClosePriceIndicator(_series([1, 2]))
        for indicator_class in (SMAIndicator, EMAIndicator, MMAIndicator):
            with self.assertRaises(ValueError):
                indicator_class(close, 0)


class TestRSI(unittest.TestCase):
    """Test RSI bounds."""

    def test_only_gains(self):
        rsi = RSIIndicator(ClosePriceIndicator(_series([1, 2, 3, 4, 5])), 3)
        self.assertEqual(rsi.get_value(0), Decimal(0))
        self.assertEqual(rsi.get_value(4), Decimal(100))

    def test_flat_series(self):
        rsi = RSIIndicator(ClosePriceIndicator(_series([3, 3, 3])), 2)
        self.assertEqual(rsi.get_value(2), Decimal(0))

    def test_mixed_moves(self):
        # Gains 2, losses 1 with bar_count 1: RS = 0 / 1 at index 2
        rsi = RSIIndicator(ClosePriceIndicator(_series([1, 3, 2])), 1)
        self.assertEqual(rsi.get_value(1), Decimal(100))
        self.assertEqual(rsi.get_value(2), Decimal(0))

    def test_value_between_bounds(self):
        rsi = RSIIndicator(ClosePriceIndicator(_series([5, 6, 5, 7, 6, 8, 7])), 3)
        value = rsi.get_value(6)
        self.assertGreater(value, 0)
        self.assertLess(value, 100)


class TestTrueRange(unittest.TestCase):
    """Test true range and ATR."""

    def setUp(self):
        self.series = BarSeries(name="ohlc")
        self.series.add_bar(Bar.of(START, 10, 12, 8, 11))
        self.series.add_bar(Bar.of(START + timedelta(days=1), 11, 15, 10, 14))
        self.series.add_bar(Bar.of(START + timedelta(days=2), 13, 13, 12, '12.5'))

    def test_true_range(self):
        true_range = TrueRangeIndicator(self.series)
        self.assertEqual(true_range.get_value(0), Decimal(4))
        self.assertEqual(true_range.get_value(1), Decimal(5))
        self.assertEqual(true_range.get_value(2), Decimal(2))

    def test_atr(self):
        atr = ATRIndicator(self.series, 1)
        self.assertEqual(atr.get_value(2), Decimal(2))
        atr = ATRIndicator(self.series, 2)
        # 4 -> (5 - 4) / 2 + 4 -> (2 - 4.5) / 2 + 4.5
        self.assertEqual(atr.get_value(1), Decimal('4.5'))
        self.assertEqual(atr.get_value(2), Decimal('3.25'))


class TestCrossIndicator(unittest.TestCase):
    """Test crossing detection."""

    def test_cross_below(self):
        series = _series([3, 3, 2, 1])
        close = ClosePriceIndicator(series)
        cross = CrossIndicator(close, ConstantIndicator(series, 2))
        self.assertEqual([cross.get_value(i) for i in range(4)], [False, False, False, True])

    def test_direct_cross(self):
        series = _series([3, 1, 4])
        close = ClosePriceIndicator(series)
        cross = CrossIndicator(close, ConstantIndicator(series, 2))
        self.assertTrue(cross.get_value(1))
        self.assertFalse(cross.get_value(2))


if __name__ == '__main__':
    unittest.main()
