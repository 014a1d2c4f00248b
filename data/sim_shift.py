from __future__ import annotations

import argparse
import random

import pandas as pd


def draw_two_normals(
    rnd: random.Random,
    n_before: int,
    n_after: int,
    mean_before: float = 10.0,
    std_before: float = 5.0,
    mean_after: float = 20.0,
    std_after: float = 5.0,
) -> list[float]:
    """
    n_before draws from N(mean_before, std_before) followed by n_after draws
    from N(mean_after, std_after). The caller owns rnd, so the same generator
    can go on to drive the permutation shuffles.
    """
    xs: list[float] = []
    for i in range(n_before + n_after):
        if i < n_before:
            xs.append(rnd.gauss(mean_before, std_before))
        else:
            xs.append(rnd.gauss(mean_after, std_after))
    return xs


def simulate(
    n_before: int = 500,
    n_after: int = 200,
    mean_before: float = 10.0,
    std_before: float = 5.0,
    mean_after: float = 20.0,
    std_after: float = 5.0,
    seed: int = 0x1234,
) -> pd.DataFrame:
    """
    Two Gaussian segments. cp=1 on the first index of the second segment
    (the index the detector is expected to report).
    """
    rnd = random.Random(seed)
    x = draw_two_normals(rnd, n_before, n_after, mean_before, std_before, mean_after, std_after)
    cp = [1 if (i == n_before and n_after > 0) else 0 for i in range(len(x))]
    return pd.DataFrame({"t": range(len(x)), "x": x, "cp": cp})


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--out", required=True)
    ap.add_argument("--seed", type=int, default=0x1234)
    ap.add_argument("--n_before", type=int, default=500)
    ap.add_argument("--n_after", type=int, default=200)
    ap.add_argument("--mean_before", type=float, default=10.0)
    ap.add_argument("--std_before", type=float, default=5.0)
    ap.add_argument("--mean_after", type=float, default=20.0)
    ap.add_argument("--std_after", type=float, default=5.0)
    args = ap.parse_args()

    df = simulate(
        n_before=args.n_before,
        n_after=args.n_after,
        mean_before=args.mean_before,
        std_before=args.std_before,
        mean_after=args.mean_after,
        std_after=args.std_after,
        seed=args.seed,
    )
    df.to_csv(args.out, index=False)
    print(f"wrote {len(df)} rows to {args.out}")


if __name__ == "__main__":
    main()
