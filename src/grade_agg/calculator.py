# ABOUTME: Computes category-weighted composite averages from score entries.
# ABOUTME: Offers a per-subject function and a vectorized per-group DataFrame variant.

from __future__ import annotations

import math
import numbers
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from src.common.schemas import CATEGORIES, MalformedEntryError, ScoreEntry

from .weighting import DEFAULT_WEIGHTS, CategoryWeights


def compute_composite(
    entries: Iterable[ScoreEntry],
    weights: CategoryWeights = DEFAULT_WEIGHTS,
    strict: bool = False,
) -> float:
    """
    Weighted average of the exam, quiz, and homework means for one subject.

    All-or-nothing: if any of the three categories has no numeric score, the result
    is NaN rather than an average over the categories that are present. Statistics
    rely on this, since NaN never exceeds a pass threshold.
    """

    means = category_means(entries, strict=strict)
    return combine_category_means(means, weights)


def category_means(entries: Iterable[ScoreEntry], strict: bool = False) -> Dict[str, float]:
    """Arithmetic mean per known category; NaN for a category with no scores."""

    buckets: Dict[str, List[float]] = {category: [] for category in CATEGORIES}
    for entry in entries:
        if entry.is_malformed:
            if strict:
                raise MalformedEntryError("Score entry has neither a type nor a score.")
            continue
        if entry.type not in buckets:
            continue
        score = numeric_score(entry.score)
        if score is not None:
            buckets[entry.type].append(score)

    return {category: float(np.mean(scores)) if scores else math.nan for category, scores in buckets.items()}


def combine_category_means(means: Dict[str, float], weights: CategoryWeights = DEFAULT_WEIGHTS) -> float:
    total = 0.0
    for category in CATEGORIES:
        total += means.get(category, math.nan) * weights.weight_for(category)
    return total


def composite_frame(
    scores: pd.DataFrame,
    keys: List[str],
    weights: CategoryWeights = DEFAULT_WEIGHTS,
) -> pd.DataFrame:
    """
    Vectorized composite averages for every subject in a flattened scores frame.

    Expects one row per score entry with the ``keys`` columns plus ``type`` and
    ``score``. Returns one row per distinct key with an ``avg`` column, sorted by key.
    """

    if scores is None or scores.empty:
        return pd.DataFrame(columns=[*keys, "avg"])

    # One column per category, NaN where the row belongs to another category.
    spread = scores[keys].copy()
    score_values = pd.to_numeric(scores["score"], errors="coerce").astype("float64")
    for category in CATEGORIES:
        spread[category] = score_values.where(scores["type"] == category)

    means = spread.groupby(keys, sort=True)[list(CATEGORIES)].mean()
    weight_series = pd.Series(weights.as_dict())
    means["avg"] = means[list(CATEGORIES)].mul(weight_series).sum(axis=1, skipna=False)
    return means["avg"].reset_index()


def numeric_score(value) -> Optional[float]:
    """Return the score as a float, or None when it cannot be averaged."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        number = float(value)
        return None if math.isnan(number) else number
    return None
