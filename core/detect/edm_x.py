# core/detect/edm_x.py
from __future__ import annotations

import json
import logging
from collections.abc import Sequence

from core.errors import EngineInvariantError, NotEnoughValues
from core.heaps import MedianHeapPair
from core.numeric import N
from core.types import BestCandidate

logger = logging.getLogger("edm-changepoint")


def _inner_scan(left_median: N, z: Sequence[N], i: int, delta: int) -> BestCandidate[N]:
    """
    Best statistic for boundary i: stream z[i:] through a fresh right-hand
    median tracker and score every window at least delta long.
    """
    kind = type(left_median)
    right: MedianHeapPair[N] = MedianHeapPair()
    best: N | None = None
    for j in range(i, len(z)):
        right.push(z[j])
        if j - i < delta:
            continue
        diff = left_median - right.median()
        # i >= delta >= 1 and j >= i + delta, so j is never zero here
        stat = kind.from_float(i * (j - i) / j) * (diff * diff)
        if best is None or stat > best:
            best = stat
    if best is None:
        raise EngineInvariantError(f"boundary {i} produced no scored window")
    return BestCandidate(best, i)


class EDMX:
    """
    E-divisive with medians, exact O(n^2) variant.

    For every boundary i in [delta, n - delta) the left median covers z[0..i]
    (inclusive) and is grown incrementally; the right median is rebuilt per
    boundary over z[i..j]. Score:

        i * (j - i) / j * (left_median - right_median)^2

    The reported location is the boundary i of the maximal score; on ties the
    smallest i wins.
    """

    def __init__(self, delta: int) -> None:
        if int(delta) < 1:
            raise ValueError(f"delta must be >= 1, got {delta}")
        self.delta = int(delta)

    def __repr__(self) -> str:
        return f"EDMX(delta={self.delta})"

    def find_candidate(self, observations: Sequence[N]) -> BestCandidate[N]:
        z = observations
        n = len(z)
        delta = self.delta
        if n < 2 * delta:
            raise NotEnoughValues(n, delta)

        left: MedianHeapPair[N] = MedianHeapPair()
        for k in range(delta):
            left.push(z[k])

        best: BestCandidate[N] | None = None
        for i in range(delta, n - delta):
            left.push(z[i])
            cand = _inner_scan(left.median(), z, i, delta)
            if best is None or cand > best:
                best = cand

        if best is None:
            # n == 2 * delta: no boundary leaves delta values on both sides
            best = BestCandidate(type(z[0]).zero(), delta)

        logger.debug(json.dumps({
            "evt": "edm_x_scan",
            "n": n,
            "delta": delta,
            "location": best.location,
            "statistic": float(best.statistic),
        }))
        return best


def new_edmx(delta: int) -> EDMX:
    return EDMX(delta)
