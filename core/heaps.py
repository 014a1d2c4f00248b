# core/heaps.py
from __future__ import annotations

import heapq
from enum import Enum
from typing import Generic

from core.errors import EngineInvariantError
from core.numeric import N


class Balance(Enum):
    EMPTY = "empty"
    EQUAL = "equal"
    MIN_BIGGER = "min_bigger"  # upper half holds one extra value
    MAX_BIGGER = "max_bigger"  # lower half holds one extra value


class Side(Enum):
    LOWER = "lower"
    UPPER = "upper"


class MedianHeapPair(Generic[N]):
    """
    Running median:
      - lower half in a max-heap (stored negated, heapq is a min-heap)
      - upper half in a min-heap
      - explicit balance state, one transition per (state, inbound side)
    push is O(log k), median is O(1).
    """

    __slots__ = ("_lower", "_upper", "balance")

    def __init__(self) -> None:
        self._lower: list[N] = []
        self._upper: list[N] = []
        self.balance = Balance.EMPTY

    def __len__(self) -> int:
        return len(self._lower) + len(self._upper)

    def _side_for(self, value: N) -> Side:
        if not self._lower or value <= -self._lower[0]:
            return Side.LOWER
        return Side.UPPER

    def push(self, value: N) -> None:
        side = self._side_for(value)
        state = self.balance

        # an impossible transition raises before either heap changes
        rebalance = False
        if state is Balance.EMPTY and side is Side.LOWER:
            nxt = Balance.MAX_BIGGER
        elif state is Balance.EQUAL:
            nxt = Balance.MAX_BIGGER if side is Side.LOWER else Balance.MIN_BIGGER
        elif state is Balance.MAX_BIGGER and side is Side.UPPER:
            nxt = Balance.EQUAL
        elif state is Balance.MIN_BIGGER and side is Side.LOWER:
            nxt = Balance.EQUAL
        elif (state, side) in ((Balance.MAX_BIGGER, Side.LOWER), (Balance.MIN_BIGGER, Side.UPPER)):
            nxt, rebalance = Balance.EQUAL, True
        else:
            raise EngineInvariantError(f"unreachable heap transition: {state.value} + {side.value}")

        if side is Side.LOWER:
            heapq.heappush(self._lower, -value)
            if rebalance:
                heapq.heappush(self._upper, -heapq.heappop(self._lower))
        else:
            heapq.heappush(self._upper, value)
            if rebalance:
                heapq.heappush(self._lower, -heapq.heappop(self._upper))
        self.balance = nxt

    def median(self) -> N:
        state = self.balance
        if state is Balance.MAX_BIGGER:
            return -self._lower[0]
        if state is Balance.MIN_BIGGER:
            return self._upper[0]
        if state is Balance.EQUAL:
            lo = -self._lower[0]
            hi = self._upper[0]
            one = type(hi).one()
            return (lo + hi) / (one + one)
        raise EngineInvariantError("median() called before any value was pushed")
