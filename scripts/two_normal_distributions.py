from __future__ import annotations

import random
import sys

from core.detect.edm_x import new_edmx
from core.errors import ChangepointError
from core.numeric import to_total_order_floats
from core.permutation import run_permutation_test
from data.sim_shift import draw_two_normals

START_MEAN, START_STD = 10.0, 5.0
END_MEAN, END_STD = 20.0, 5.0
NUM_START, NUM_END = 500, 200
DELTA = 30
NUM_PERMUTATIONS = 199
SEED = 0x1234


def main() -> int:
    print("\n**Detect a changepoint from observations drawn from two normal distributions**\n")
    rng = random.Random(SEED)
    print(f"Drawing {NUM_START} samples from N(mean={START_MEAN:.1f}, std={START_STD:.1f})")
    print(f"Drawing {NUM_END} samples from N(mean={END_MEAN:.1f}, std={END_STD:.1f})")
    raw = draw_two_normals(rng, NUM_START, NUM_END, START_MEAN, START_STD, END_MEAN, END_STD)

    try:
        inputs = to_total_order_floats(raw)
        print(f"Initialized EDM-X with delta={DELTA}")
        detector = new_edmx(DELTA)
        print(f"Performing a permutation test with {NUM_PERMUTATIONS} iterations")
        res = run_permutation_test(detector, rng, NUM_PERMUTATIONS, inputs)
    except ChangepointError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print()
    print(f"Candidate split location: {res.changepoint_index}")
    print(f"P-Value: {res.p_value:.5f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
