import random
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from core.errors import InvalidValue, NotEnoughValues
from core.pipeline import ChangePointPipeline
from data.sim_shift import draw_two_normals

CFG = {"delta": 8, "permutations": 5, "seed": 21, "workers": 1, "inline_threshold": 2}


def test_pipeline_runs_with_explicit_config():
    xs = draw_two_normals(random.Random(2), 40, 40, 0.0, 1.0, 8.0, 1.0)
    with ThreadPoolExecutor(max_workers=2) as pool:
        res = ChangePointPipeline(dict(CFG)).run(np.asarray(xs), executor=pool)
    assert abs(res.changepoint_index - 40) <= 5
    assert res.permutations == 5
    assert res.p_value == 0.0


def test_pipeline_seed_makes_runs_repeatable():
    rnd = random.Random(6)
    xs = [rnd.gauss(0.0, 1.0) for _ in range(40)]
    pipe = ChangePointPipeline(dict(CFG))
    assert pipe.run(xs) == pipe.run(xs)


def test_pipeline_surfaces_ingestion_and_length_errors():
    pipe = ChangePointPipeline(dict(CFG))
    with pytest.raises(InvalidValue):
        pipe.run([1.0, float("nan")] * 10)
    with pytest.raises(NotEnoughValues):
        pipe.run([1.0] * 10)
