# ABOUTME: Loads overridable aggregation constants from YAML config files.
# ABOUTME: Covers the pass threshold, category weights, and malformed-entry strictness.

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from .statistics import DEFAULT_THRESHOLD
from .weighting import DEFAULT_WEIGHTS, CategoryWeights

CONFIG_KEYS = {"threshold", "weights", "strict"}


@dataclass(frozen=True)
class AggregationConfig:
    """Constants the engine treats as parameters."""

    threshold: float = DEFAULT_THRESHOLD
    weights: CategoryWeights = DEFAULT_WEIGHTS
    strict: bool = False


def load_config(config_path: Path) -> AggregationConfig:
    """Read an ``AggregationConfig`` from YAML; omitted keys keep their defaults."""

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Missing aggregation config at {config_path}")

    with open(config_path) as f:
        cfg = yaml.safe_load(f)

    if cfg is None:
        return AggregationConfig()
    if not isinstance(cfg, dict):
        raise ValueError(f"Expected a mapping at the top of {config_path}.")

    unknown = sorted(set(cfg) - CONFIG_KEYS)
    if unknown:
        raise ValueError(f"Unknown config keys in {config_path}: {', '.join(unknown)}.")

    weights_cfg = cfg.get("weights") or {}
    if not isinstance(weights_cfg, dict):
        raise ValueError("'weights' must map category names to numbers.")

    try:
        threshold = float(cfg.get("threshold", DEFAULT_THRESHOLD))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'threshold' must be numeric, got {cfg.get('threshold')!r}.") from exc

    strict = cfg.get("strict", False)
    if not isinstance(strict, bool):
        raise ValueError(f"'strict' must be true or false, got {strict!r}.")

    return AggregationConfig(
        threshold=threshold,
        weights=CategoryWeights.from_mapping(weights_cfg),
        strict=strict,
    )
