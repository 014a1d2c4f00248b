# core/config.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List

import yaml

DEFAULTS: Dict[str, Any] = {
    "delta": 30,
    "permutations": 199,
    "seed": 0x1234,
    "workers": None,
    "inline_threshold": 4,
    "log_level": "INFO",
}

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"

# nested spelling -> flat key the pipeline reads
_NESTED_KEYS = (
    ("detector", "delta", "delta"),
    ("permutation", "count", "permutations"),
    ("permutation", "workers", "workers"),
)


def _read_yaml(p: Path) -> Dict[str, Any]:
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _flatten(layer: Dict[str, Any]) -> Dict[str, Any]:
    """Lift detector.delta / permutation.count / permutation.workers to flat keys; flat keys win."""
    out = dict(layer)
    for section, nested, flat in _NESTED_KEYS:
        block = layer.get(section)
        if isinstance(block, dict) and nested in block and flat not in out:
            out[flat] = block[nested]
    if out.get("delta") is not None:
        out["delta"] = int(out["delta"])
    if out.get("permutations") is not None:
        out["permutations"] = int(out["permutations"])
    return out


def _layers(config: str | os.PathLike | None, profile: str | None) -> List[Path]:
    """
    Files to read, lowest precedence first.

    An explicit path (argument, then $EDM_CONFIG) is the only layer when given.
    Otherwise config/default.yaml, overlaid by config/profiles/<profile>.yaml
    when a profile is named by argument or $EDM_PROFILE.
    """
    if config:
        p = Path(config)
        if not p.is_file():
            raise FileNotFoundError(f"--config not found: {p}")
        return [p]

    env_path = os.getenv("EDM_CONFIG")
    if env_path and Path(env_path).is_file():
        return [Path(env_path)]

    found: List[Path] = []
    default = CONFIG_DIR / "default.yaml"
    if default.is_file():
        found.append(default)
    prof = profile or os.getenv("EDM_PROFILE")
    if prof:
        p = CONFIG_DIR / "profiles" / f"{prof}.yaml"
        if not p.is_file():
            raise FileNotFoundError(f"profile not found: {p}")
        found.append(p)
    return found


def load_config(
    config: str | os.PathLike | None = None,
    profile: str | None = None,
) -> Dict[str, Any]:
    """
    Built-in DEFAULTS overlaid by each resolved YAML layer in turn (shallow,
    per key). Nested keys are flattened per layer, so a profile's
    permutation.count overrides the default file's flat `permutations`.
    """
    cfg = dict(DEFAULTS)
    for path in _layers(config, profile):
        cfg.update(_flatten(_read_yaml(path)))
    return cfg
