"""
Unit tests for trading rules and strategies.
"""

import logging
import unittest
from datetime import datetime, timezone, timedelta

import pytest

from taengine.indicators import ClosePriceIndicator
from taengine.models.bar import Bar
from taengine.models.series import BarSeries
from taengine.models.trade import TradeType
from taengine.models.trading_record import TradingRecord
from taengine.rules import (
    AndRule,
    BooleanIndicatorRule,
    BooleanRule,
    CrossedDownIndicatorRule,
    CrossedUpIndicatorRule,
    FixedRule,
    NotRule,
    OrRule,
    OverIndicatorRule,
    StopGainRule,
    StopLossRule,
    UnderIndicatorRule,
    XorRule,
)
from taengine.strategy import Strategy

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _series(closes):
    series = BarSeries(name="rules_series")
    for i, close in enumerate(closes):
        series.add_bar(Bar.of(START + timedelta(days=i + 1), close, close, close, close))
    return series


class TestCombinators(unittest.TestCase):

    def setUp(self):
        self.satisfied = BooleanRule.TRUE
        self.unsatisfied = BooleanRule.FALSE

    def test_fixed_rule(self):
        rule = FixedRule(1, 3)
        self.assertEqual([rule.is_satisfied(i) for i in range(5)], [False, True, False, True, False])
        self.assertFalse(FixedRule().is_satisfied(0))

    def test_and(self):
        self.assertTrue(self.satisfied.and_(BooleanRule(True)).is_satisfied(0))
        self.assertFalse(self.satisfied.and_(self.unsatisfied).is_satisfied(0))
        self.assertFalse(self.unsatisfied.and_(self.satisfied).is_satisfied(0))
        self.assertIsInstance(self.satisfied & self.unsatisfied, AndRule)

    def test_or(self):
        self.assertTrue(self.satisfied.or_(self.unsatisfied).is_satisfied(0))
        self.assertTrue(self.unsatisfied.or_(self.satisfied).is_satisfied(0))
        self.assertFalse(self.unsatisfied.or_(BooleanRule(False)).is_satisfied(0))
        self.assertIsInstance(self.satisfied | self.unsatisfied, OrRule)

    def test_xor(self):
        self.assertTrue(self.satisfied.xor(self.unsatisfied).is_satisfied(0))
        self.assertFalse(self.satisfied.xor(BooleanRule(True)).is_satisfied(0))
        self.assertFalse(self.unsatisfied.xor(BooleanRule(False)).is_satisfied(0))
        self.assertIsInstance(self.satisfied ^ self.unsatisfied, XorRule)

    def test_negation(self):
        self.assertFalse(self.satisfied.negation().is_satisfied(0))
        self.assertTrue((~self.unsatisfied).is_satisfied(0))
        self.assertIsInstance(~self.satisfied, NotRule)

    def test_nested(self):
        rule = (FixedRule(1, 2) & ~FixedRule(2)) | FixedRule(4)
        self.assertEqual([rule.is_satisfied(i) for i in range(5)], [False, True, False, False, True])


class TestIndicatorRules(unittest.TestCase):

    def setUp(self):
        self.series = _series([1, 2, 3, 4, 3, 2])
        self.close = ClosePriceIndicator(self.series)

    def test_over_and_under_numbers(self):
        over = OverIndicatorRule(self.close, 2)
        under = UnderIndicatorRule(self.close, 2)
        self.assertEqual([over.is_satisfied(i) for i in range(6)], [False, False, True, True, True, False])
        self.assertEqual([under.is_satisfied(i) for i in range(6)], [True, False, False, False, False, False])

    def test_over_indicator(self):
        other = ClosePriceIndicator(_series([2, 2, 2, 2, 2, 2]))
        rule = OverIndicatorRule(self.close, other)
        self.assertTrue(rule.is_satisfied(3))
        self.assertFalse(rule.is_satisfied(1))

    def test_crossed_up(self):
        rule = CrossedUpIndicatorRule(self.close, 2.5)
        self.assertEqual([rule.is_satisfied(i) for i in range(6)], [False, False, True, False, False, False])

    def test_crossed_down(self):
        rule = CrossedDownIndicatorRule(self.close, 2.5)
        self.assertEqual([rule.is_satisfied(i) for i in range(6)], [False, False, False, False, False, True])

    def test_boolean_indicator(self):
        rule = BooleanIndicatorRule(CrossedUpIndicatorRule(self.close, 2.5).cross)
        self.assertTrue(rule.is_satisfied(2))
        self.assertFalse(rule.is_satisfied(3))


class TestStopRules(unittest.TestCase):

    def setUp(self):
        self.close = ClosePriceIndicator(_series([100, 97, 95, 90, 106, 110]))

    def _record(self, trade_type):
        record = TradingRecord(trade_type)
        record.enter(0, 100)
        return record

    def test_stop_loss_long(self):
        rule = StopLossRule(self.close, 5)
        record = self._record(TradeType.BUY)
        self.assertEqual([rule.is_satisfied(i, record) for i in range(4)], [False, False, True, True])

    def test_stop_loss_short(self):
        rule = StopLossRule(self.close, 5)
        record = self._record(TradeType.SELL)
        self.assertFalse(rule.is_satisfied(3, record))
        self.assertTrue(rule.is_satisfied(4, record))

    def test_stop_gain_long(self):
        rule = StopGainRule(self.close, 10)
        record = self._record(TradeType.BUY)
        self.assertFalse(rule.is_satisfied(4, record))
        self.assertTrue(rule.is_satisfied(5, record))

    def test_stop_gain_short(self):
        rule = StopGainRule(self.close, 10)
        record = self._record(TradeType.SELL)
        self.assertFalse(rule.is_satisfied(2, record))
        self.assertTrue(rule.is_satisfied(3, record))

    def test_needs_open_position(self):
        rule = StopLossRule(self.close, 5)
        self.assertFalse(rule.is_satisfied(3))
        self.assertFalse(rule.is_satisfied(3, TradingRecord()))


class TestStrategy(unittest.TestCase):

    def setUp(self):
        self.strategy = Strategy(FixedRule(2, 3), FixedRule(4, 5), unstable_bars=3, name="fixed")

    def test_unstable_bars(self):
        self.assertTrue(self.strategy.is_unstable_at(2))
        self.assertFalse(self.strategy.is_unstable_at(3))
        self.assertFalse(self.strategy.should_enter(2))
        self.assertTrue(self.strategy.should_enter(3))
        self.assertFalse(Strategy(BooleanRule.TRUE, BooleanRule.TRUE, 5).should_exit(4))

    def test_negative_unstable_bars(self):
        with self.assertRaises(ValueError):
            Strategy(BooleanRule.TRUE, BooleanRule.FALSE, unstable_bars=-1)
        with self.assertRaises(ValueError):
            self.strategy.unstable_bars = -2

    def test_rules_required(self):
        with self.assertRaises(ValueError):
            Strategy(None, BooleanRule.TRUE)

    def test_should_operate_dispatch(self):
        record = TradingRecord()
        self.assertTrue(self.strategy.should_operate(3, record))
        self.assertFalse(self.strategy.should_operate(4, record))
        record.enter(3, 10)
        self.assertFalse(self.strategy.should_operate(3, record))
        self.assertTrue(self.strategy.should_operate(4, record))

    def test_and_or(self):
        other = Strategy(FixedRule(3), FixedRule(5), unstable_bars=1, name="other")
        both = self.strategy.and_(other)
        either = self.strategy.or_(other)
        self.assertEqual(both.unstable_bars, 3)
        self.assertEqual(either.unstable_bars, 3)
        self.assertEqual(both.name, "and(fixed,other)")
        self.assertTrue(both.should_enter(3))
        self.assertFalse(both.should_exit(4))
        self.assertTrue(either.should_exit(4))

    def test_opposite(self):
        opposite = self.strategy.opposite()
        self.assertTrue(opposite.should_enter(4))
        self.assertTrue(opposite.should_exit(3))
        self.assertEqual(opposite.name, "opposite(fixed)")

    def test_default_name(self):
        self.assertEqual(Strategy(BooleanRule.TRUE, BooleanRule.FALSE).name, "unnamed_strategy")


class TestRuleLogging:

    def test_rule_evaluation_is_traced(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="taengine.rules.base"):
            FixedRule(7).is_satisfied(7)
        traced = [r for r in caplog.records if r.getMessage() == "rule_evaluated"]
        assert len(traced) == 1
        assert traced[0].rule == "FixedRule"
        assert traced[0].satisfied is True

    @pytest.mark.parametrize("index", [0, 3])
    def test_should_enter_is_traced(self, caplog, index):
        strategy = Strategy(BooleanRule.TRUE, BooleanRule.FALSE, unstable_bars=0, name="traced")
        with caplog.at_level(logging.DEBUG, logger="taengine.strategy"):
            assert strategy.should_enter(index) is True
        traced = [r for r in caplog.records if r.getMessage() == "should_enter"]
        assert traced[0].strategy == "traced"
        assert traced[0].index == index
        assert traced[0].enter is True
