# core/types.py
from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering
from typing import Any, Generic, TypedDict

from core.numeric import N


@total_ordering
@dataclass(frozen=True)
class BestCandidate(Generic[N]):
    """
    A scored split. Ordered by statistic; on equal statistics the smaller
    location ranks higher, so max() over candidates keeps the earliest split.
    """

    statistic: N
    location: int

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, BestCandidate):
            return NotImplemented
        if self.statistic == other.statistic:
            return self.location > other.location
        return self.statistic < other.statistic


@dataclass(frozen=True)
class PermutationTestResult:
    p_value: float
    changepoint_index: int
    statistic: float = 0.0
    permutations: int = 0
    exceedances: int = 0

    def to_dict(self) -> Report:
        return {
            "changepoint_index": self.changepoint_index,
            "p_value": self.p_value,
            "statistic": self.statistic,
            "permutations": self.permutations,
            "exceedances": self.exceedances,
        }


class Report(TypedDict):
    # what the CLI prints
    changepoint_index: int
    p_value: float
    statistic: float
    permutations: int
    exceedances: int
