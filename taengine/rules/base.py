"""
Trading rules.

A rule answers ``is_satisfied(index, trading_record)``. Rules compose with
``&``, ``|``, ``^`` and ``~`` (or ``and_``, ``or_``, ``xor``, ``negation``).
"""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class Rule(ABC):
    """Boolean decision at a bar index, optionally aware of the trading record."""

    @abstractmethod
    def is_satisfied(self, index: int, trading_record=None) -> bool:
        """True if the rule holds at ``index``."""

    def and_(self, rule: "Rule") -> "Rule":
        return AndRule(self, rule)

    def or_(self, rule: "Rule") -> "Rule":
        return OrRule(self, rule)

    def xor(self, rule: "Rule") -> "Rule":
        return XorRule(self, rule)

    def negation(self) -> "Rule":
        return NotRule(self)

    def __and__(self, other: "Rule") -> "Rule":
        return self.and_(other)

    def __or__(self, other: "Rule") -> "Rule":
        return self.or_(other)

    def __xor__(self, other: "Rule") -> "Rule":
        return self.xor(other)

    def __invert__(self) -> "Rule":
        return self.negation()

    def _trace_is_satisfied(self, index: int, is_satisfied: bool) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("rule_evaluated", extra={
                "rule": self.__class__.__name__,
                "index": index,
                "satisfied": is_satisfied,
            })

    def __str__(self):
        return self.__class__.__name__


class BooleanRule(Rule):
    """Always the same answer."""

    def __init__(self, satisfied: bool):
        self.satisfied = satisfied

    def is_satisfied(self, index: int, trading_record=None) -> bool:
        self._trace_is_satisfied(index, self.satisfied)
        return self.satisfied


BooleanRule.TRUE = BooleanRule(True)
BooleanRule.FALSE = BooleanRule(False)


class FixedRule(Rule):
    """Satisfied at a fixed set of indexes."""

    def __init__(self, *indexes: int):
        self.indexes = frozenset(indexes)

    def is_satisfied(self, index: int, trading_record=None) -> bool:
        satisfied = index in self.indexes
        self._trace_is_satisfied(index, satisfied)
        return satisfied


class AndRule(Rule):
    def __init__(self, rule1: Rule, rule2: Rule):
        self.rule1 = rule1
        self.rule2 = rule2

    def is_satisfied(self, index: int, trading_record=None) -> bool:
        satisfied = (self.rule1.is_satisfied(index, trading_record)
                     and self.rule2.is_satisfied(index, trading_record))
        self._trace_is_satisfied(index, satisfied)
        return satisfied


class OrRule(Rule):
    def __init__(self, rule1: Rule, rule2: Rule):
        self.rule1 = rule1
        self.rule2 = rule2

    def is_satisfied(self, index: int, trading_record=None) -> bool:
        satisfied = (self.rule1.is_satisfied(index, trading_record)
                     or self.rule2.is_satisfied(index, trading_record))
        self._trace_is_satisfied(index, satisfied)
        return satisfied


class XorRule(Rule):
    def __init__(self, rule1: Rule, rule2: Rule):
        self.rule1 = rule1
        self.rule2 = rule2

    def is_satisfied(self, index: int, trading_record=None) -> bool:
        satisfied = (self.rule1.is_satisfied(index, trading_record)
                     != self.rule2.is_satisfied(index, trading_record))
        self._trace_is_satisfied(index, satisfied)
        return satisfied


class NotRule(Rule):
    def __init__(self, rule: Rule):
        self.rule = rule

    def is_satisfied(self, index: int, trading_record=None) -> bool:
        satisfied = not self.rule.is_satisfied(index, trading_record)
        self._trace_is_satisfied(index, satisfied)
        return satisfied
