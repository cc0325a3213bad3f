"""Index-keyed results buffer backing cached indicators."""

from typing import Any, List, Optional


class _NotComputed:
    """Marker for buffer slots that hold no result yet."""

    __slots__ = ()

    def __repr__(self):
        return "NOT_COMPUTED"


NOT_COMPUTED = _NotComputed()


class CachedBuffer:
    """
    Contiguous window of results addressed by global bar index.

    Slot ``k`` of the window holds the result for index ``first_index + k``.
    Any stored value is a hit, including None and NaN; only ``NOT_COMPUTED``
    marks a gap. When bounded, the window keeps at most ``maximum_capacity``
    slots and drops the oldest ones first. The bound may be changed between
    calls; it applies from the next ``put``.
    """

    def __init__(self, maximum_capacity: Optional[int] = None):
        self._values: List[Any] = []
        self.maximum_capacity = maximum_capacity
        self.first_index = -1
        self.highest_result_index = -1

    def __len__(self):
        return len(self._values)

    def get(self, index: int):
        """Stored result for ``index`` or ``NOT_COMPUTED``."""
        if self.first_index < 0 or index < self.first_index or index > self.highest_result_index:
            return NOT_COMPUTED
        return self._values[index - self.first_index]

    def is_cached(self, index: int) -> bool:
        return self.get(index) is not NOT_COMPUTED

    def put(self, index: int, value) -> None:
        """Store ``value`` for ``index``, growing the window as needed."""
        if index < 0:
            return
        if self.first_index < 0:
            self._values = [value]
            self.first_index = index
            self.highest_result_index = index
        elif index > self.highest_result_index:
            gap = index - self.highest_result_index - 1
            self._values.extend([NOT_COMPUTED] * gap)
            self._values.append(value)
            self.highest_result_index = index
        elif index >= self.first_index:
            self._values[index - self.first_index] = value
        else:
            if (self.maximum_capacity is not None
                    and self.highest_result_index - index + 1 > self.maximum_capacity):
                # Would be trimmed right away
                return
            gap = self.first_index - index - 1
            self._values[0:0] = [value] + [NOT_COMPUTED] * gap
            self.first_index = index
        self._trim()

    def prune_before(self, index: int) -> None:
        """Drop every slot for indices lower than ``index``."""
        if self.first_index < 0 or index <= self.first_index:
            return
        if index > self.highest_result_index:
            self.clear()
            return
        del self._values[:index - self.first_index]
        self.first_index = index

    def clear(self) -> None:
        self._values = []
        self.first_index = -1
        self.highest_result_index = -1

    def _trim(self) -> None:
        if self.maximum_capacity is None:
            return
        excess = len(self._values) - self.maximum_capacity
        if excess > 0:
            del self._values[:excess]
            self.first_index += excess
