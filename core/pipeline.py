# core/pipeline.py
from __future__ import annotations

import json
import logging
import random
from collections.abc import Sequence
from concurrent.futures import Executor
from typing import Any

import numpy as np

from core.config import load_config
from core.detect.edm_x import EDMX, new_edmx
from core.numeric import to_total_order_floats
from core.permutation import run_permutation_test
from core.types import PermutationTestResult

logger = logging.getLogger("edm-changepoint")


class ChangePointPipeline:
    """
    Batch, config-driven wrapper around the four core operations:
      - ingest raw floats as TotalOrderFloat (fails on NaN/inf)
      - build the EDM-X detector with cfg["delta"]
      - seed a Mersenne Twister (random.Random) with cfg["seed"]
      - run the permutation test with cfg["permutations"] shuffles
    """

    def __init__(self, cfg: dict[str, Any] | None = None) -> None:
        self.cfg = cfg or load_config()
        self.delta = int(self.cfg.get("delta", 30))
        self.permutations = int(self.cfg.get("permutations", 199))
        self.seed = self.cfg.get("seed")
        w = self.cfg.get("workers")
        self.workers = int(w) if w else None
        self.inline_threshold = int(self.cfg.get("inline_threshold", 4))
        self.detector: EDMX = new_edmx(self.delta)

    def run(
        self,
        values: Sequence[float] | np.ndarray,
        *,
        random_source: Any | None = None,
        executor: Executor | None = None,
    ) -> PermutationTestResult:
        observations = to_total_order_floats(values)
        rng = random_source if random_source is not None else random.Random(self.seed)
        result = run_permutation_test(
            self.detector,
            rng,
            self.permutations,
            observations,
            executor=executor,
            workers=self.workers,
            inline_threshold=self.inline_threshold,
        )
        logger.info(json.dumps({
            "evt": "pipeline_run",
            "n": len(observations),
            "delta": self.delta,
            "seed": self.seed,
            "changepoint_index": result.changepoint_index,
            "p_value": round(result.p_value, 6),
        }))
        return result
