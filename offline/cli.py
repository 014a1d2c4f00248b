# offline/cli.py
from __future__ import annotations

import argparse
import json
import logging
import sys

from core.config import load_config
from core.errors import ChangepointError
from core.pipeline import ChangePointPipeline
from data.replay import load_series


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Single change point detection (EDM-X + permutation test).")
    ap.add_argument("--data", required=True, help="CSV/Parquet file with one numeric column.")
    ap.add_argument("--column", default="x", help="Column holding the observations (default: x).")
    ap.add_argument("--delta", type=int, default=None, help="Minimum segment length (overrides config).")
    ap.add_argument("--permutations", type=int, default=None, help="Number of shuffles (overrides config).")
    ap.add_argument("--seed", type=int, default=None, help="Seed for the shuffle generator (overrides config).")
    ap.add_argument("--workers", type=int, default=None, help="Worker processes (overrides config).")
    ap.add_argument("--profile", help="Config profile to load (e.g. quick, paper).")
    ap.add_argument("--config", help="Path to a YAML config file.")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    # Resolve configuration (explicit path > env > profile > default), then CLI overrides
    cfg = load_config(args.config, args.profile)
    for key in ("delta", "permutations", "seed", "workers"):
        v = getattr(args, key)
        if v is not None:
            cfg[key] = v

    logging.basicConfig(level=str(cfg.get("log_level", "INFO")).upper(), stream=sys.stderr)

    try:
        values = load_series(args.data, column=args.column)
    except (OSError, KeyError, ValueError) as e:
        sys.stderr.write(f"[edm-detect] cannot read {args.data}: {e}\n")
        return 2

    try:
        result = ChangePointPipeline(cfg).run(values)
    except ChangepointError as e:
        sys.stderr.write(f"[edm-detect] {type(e).__name__}: {e}\n")
        return 1
    except ValueError as e:
        sys.stderr.write(f"[edm-detect] invalid settings: {e}\n")
        return 2

    out = {
        "data": args.data,
        "n_points": len(values),
        "delta": int(cfg["delta"]),
        "result": result.to_dict(),
    }
    print(json.dumps(out, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
