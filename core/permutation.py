# core/permutation.py
from __future__ import annotations

import json
import logging
import os
import time
from collections.abc import Sequence
from concurrent.futures import Executor, Future, ProcessPoolExecutor
from functools import partial
from typing import Any, Callable, Protocol, Union

from core.detect.base import Detector
from core.errors import ChangepointError, PermutationScanFailed
from core.types import PermutationTestResult

logger = logging.getLogger("edm-changepoint")

Pending = list[tuple[int, list[Any]]]  # (permutation index, shuffled copy)
Node = Union["Future[int]", tuple["Node", "Node"]]


class RandomSource(Protocol):
    def shuffle(self, x: list[Any]) -> None: ...


def _count_exceedances(detector: Detector, true_statistic: Any, pending: Pending) -> int:
    """Leaf task: scan each permutation, count statistics strictly above the truth."""
    hits = 0
    for idx, permutation in pending:
        try:
            cand = detector.find_candidate(permutation)
        except ChangepointError as e:
            raise PermutationScanFailed(idx, e) from e
        if cand.statistic > true_statistic:
            hits += 1
    return hits


def _fork(
    pool: Executor,
    scan: Callable[[Pending], int],
    pending: Pending,
    inline_threshold: int,
) -> Node:
    """Recursively halve the pending scans; every leaf becomes one submitted task."""
    if len(pending) <= inline_threshold:
        return pool.submit(scan, pending)
    mid = len(pending) // 2
    return (
        _fork(pool, scan, pending[:mid], inline_threshold),
        _fork(pool, scan, pending[mid:], inline_threshold),
    )


def _join(node: Node) -> int:
    if isinstance(node, tuple):
        left, right = node
        return _join(left) + _join(right)
    return node.result()


def _shuffles(random_source: RandomSource, observations: Sequence[Any], count: int) -> Pending:
    out: Pending = []
    for idx in range(count):
        copy = list(observations)
        random_source.shuffle(copy)
        out.append((idx, copy))
    return out


def run_permutation_test(
    detector: Detector,
    random_source: RandomSource,
    permutation_count: int,
    observations: Sequence[Any],
    *,
    executor: Executor | None = None,
    workers: int | None = None,
    inline_threshold: int = 4,
) -> PermutationTestResult:
    """
    Significance of the detector's best split via random reshuffling.

    p_value = (#permutations whose statistic is strictly greater than the true
    one) / (permutation_count + 1). Ties count toward the null.

    Shuffles are drawn up front, in order, from random_source; only the scans
    run concurrently. Pass `executor` to reuse a pool (e.g. a
    ThreadPoolExecutor for detectors that cannot be pickled); otherwise a
    ProcessPoolExecutor with `workers` processes is created for this call.
    """
    count = int(permutation_count)
    if count < 0:
        raise ValueError(f"permutation_count must be >= 0, got {permutation_count}")
    t0 = time.perf_counter()

    truth = detector.find_candidate(observations)

    exceedances = 0
    if count > 0:
        pending = _shuffles(random_source, observations, count)
        scan = partial(_count_exceedances, detector, truth.statistic)
        threshold = max(1, int(inline_threshold))
        if executor is not None:
            exceedances = _join(_fork(executor, scan, pending, threshold))
        else:
            n_workers = max(1, int(workers or os.cpu_count() or 1))
            with ProcessPoolExecutor(max_workers=n_workers) as pool:
                exceedances = _join(_fork(pool, scan, pending, threshold))

    p_value = exceedances / (count + 1)
    result = PermutationTestResult(
        p_value=p_value,
        changepoint_index=truth.location,
        statistic=float(truth.statistic),
        permutations=count,
        exceedances=exceedances,
    )
    logger.info(json.dumps({
        "evt": "permutation_test",
        "permutations": count,
        "exceedances": exceedances,
        "p_value": round(p_value, 6),
        "changepoint_index": truth.location,
        "elapsed_ms": round((time.perf_counter() - t0) * 1000.0, 3),
    }))
    return result
