import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from core.detect.edm_x import EDMX, new_edmx
from core.errors import ChangepointError, EngineInvariantError, NotEnoughValues, PermutationScanFailed
from core.numeric import to_total_order_floats
from core.permutation import run_permutation_test
from data.sim_shift import draw_two_normals

# 199 is the usual choice; a smaller count keeps the pure-Python scans tractable
NUM_PERMUTATIONS = 19


class NoShuffle:
    def shuffle(self, x):
        raise AssertionError("random source must not be used")


class RecordingShuffle:
    def __init__(self, seed):
        self.rnd = random.Random(seed)
        self.lengths = []

    def shuffle(self, x):
        self.lengths.append(len(x))
        self.rnd.shuffle(x)


class FailsOnPermutations:
    """Scores the original list, refuses anything else."""

    def __init__(self, original):
        self.original = original
        self.inner = EDMX(2)

    def find_candidate(self, observations):
        if observations is self.original:
            return self.inner.find_candidate(observations)
        raise NotEnoughValues(len(observations), 10_000)


class BrokenOnPermutations(FailsOnPermutations):
    def find_candidate(self, observations):
        if observations is self.original:
            return self.inner.find_candidate(observations)
        raise EngineInvariantError("heap pair lost a value")


def _small_series(seed=3):
    rnd = random.Random(seed)
    return to_total_order_floats(draw_two_normals(rnd, 25, 25, 0.0, 1.0, 3.0, 1.0))


def test_zero_permutations_gives_zero_p_value():
    obs = _small_series()
    res = run_permutation_test(EDMX(5), NoShuffle(), 0, obs)
    assert res.p_value == 0.0
    assert res.permutations == 0
    assert res.exceedances == 0
    assert res.changepoint_index == EDMX(5).find_candidate(obs).location


def test_negative_permutation_count_rejected():
    with pytest.raises(ValueError):
        run_permutation_test(EDMX(5), NoShuffle(), -1, _small_series())


def test_p_value_bounds_and_shuffle_order():
    obs = _small_series()
    src = RecordingShuffle(11)
    with ThreadPoolExecutor(max_workers=4) as pool:
        res = run_permutation_test(EDMX(5), src, 9, obs, executor=pool, inline_threshold=2)
    assert src.lengths == [len(obs)] * 9
    assert 0.0 <= res.p_value <= 9 / 10
    assert res.p_value == res.exceedances / 10
    assert 0 <= res.exceedances <= 9


def test_true_run_failure_surfaces_unchanged():
    obs = to_total_order_floats([1.0, 2.0, 3.0])
    with pytest.raises(NotEnoughValues) as ei:
        run_permutation_test(EDMX(5), NoShuffle(), 5, obs)
    assert (ei.value.length, ei.value.delta) == (3, 5)


def test_permutation_failure_aborts_whole_test():
    obs = _small_series()
    with ThreadPoolExecutor(max_workers=2) as pool:
        with pytest.raises(PermutationScanFailed) as ei:
            run_permutation_test(FailsOnPermutations(obs), random.Random(1), 6, obs, executor=pool)
    assert isinstance(ei.value.cause, NotEnoughValues)
    assert 0 <= ei.value.permutation_index < 6


def test_engine_bug_in_permutation_is_not_wrapped():
    obs = _small_series()
    with ThreadPoolExecutor(max_workers=2) as pool:
        with pytest.raises(EngineInvariantError) as ei:
            run_permutation_test(BrokenOnPermutations(obs), random.Random(1), 6, obs, executor=pool)
    assert not isinstance(ei.value, ChangepointError)


def test_fixed_seed_is_reproducible_across_executors():
    obs = _small_series(seed=5)
    det = new_edmx(5)
    a = run_permutation_test(det, random.Random(42), 8, obs, workers=2)
    with ThreadPoolExecutor(max_workers=3) as pool:
        b = run_permutation_test(det, random.Random(42), 8, obs, executor=pool, inline_threshold=1)
    assert a == b


def test_detects_change_when_one_occurred():
    rng = random.Random(0x1234)
    raw = draw_two_normals(rng, 500, 200, 10.0, 5.0, 20.0, 5.0)
    res = run_permutation_test(new_edmx(30), rng, NUM_PERMUTATIONS, to_total_order_floats(raw))
    assert abs(res.changepoint_index - 500) <= 50
    assert res.p_value <= 0.1


def test_no_change_gives_large_p_value():
    rng = random.Random(0x1234)
    raw = [rng.gauss(10.0, 5.0) for _ in range(700)]
    res = run_permutation_test(new_edmx(30), rng, NUM_PERMUTATIONS, to_total_order_floats(raw))
    assert res.p_value > 0.1


@pytest.mark.slow
def test_detects_change_with_full_permutation_count():
    rng = random.Random(0x1234)
    raw = draw_two_normals(rng, 500, 200, 10.0, 5.0, 20.0, 5.0)
    res = run_permutation_test(new_edmx(30), rng, 199, to_total_order_floats(raw))
    assert abs(res.changepoint_index - 500) <= 50
    assert res.p_value <= 0.1
    assert res.permutations == 199
