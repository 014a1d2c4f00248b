# core/detect/base.py
from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from core.types import BestCandidate


@runtime_checkable
class Detector(Protocol):
    """
    One-method seam the permutation test is written against.
    find_candidate raises a ChangepointError subclass when the sequence
    cannot be scored. Implementations must be picklable to run in worker
    processes.
    """

    def find_candidate(self, observations: Sequence[Any]) -> BestCandidate[Any]: ...
