# ABOUTME: Groups raw score records into per-subject buckets and reduces each bucket.
# ABOUTME: Produces per-class averages for a learner and per-learner averages for a cohort.

from __future__ import annotations

from typing import Iterable, List, Optional

import pandas as pd

from src.common.schemas import ClassAverage, LearnerAverage, MalformedEntryError, ScoreRecord

from .calculator import composite_frame, numeric_score
from .weighting import DEFAULT_WEIGHTS, CategoryWeights

SCORE_COLUMNS = ["learner_id", "class_id", "type", "score"]


def records_to_frame(records: Iterable[ScoreRecord], strict: bool = False) -> pd.DataFrame:
    """
    Flatten records into one row per score entry.

    Records without entries produce no rows. Malformed entries (no type and no score)
    are kept as rows that belong to no category unless ``strict`` is set, in which
    case they raise ``MalformedEntryError``.
    """

    rows = []
    for record in records:
        for entry in record.scores:
            if entry.is_malformed and strict:
                raise MalformedEntryError(
                    f"Score entry for learner {record.learner_id} in class {record.class_id!r} "
                    "has neither a type nor a score."
                )
            rows.append(
                {
                    "learner_id": record.learner_id,
                    "class_id": record.class_id,
                    "type": entry.type,
                    "score": numeric_score(entry.score),
                }
            )

    if not rows:
        return pd.DataFrame(columns=SCORE_COLUMNS)

    df = pd.DataFrame(rows, columns=SCORE_COLUMNS)
    df["learner_id"] = df["learner_id"].astype("int64")
    df["score"] = pd.to_numeric(df["score"], errors="coerce").astype("float64")
    return df


def average_per_class_for_learner(
    records: Iterable[ScoreRecord],
    learner_id: int,
    weights: CategoryWeights = DEFAULT_WEIGHTS,
    strict: bool = False,
) -> List[ClassAverage]:
    """Composite average for each class the learner has scores in; empty when none."""

    scores = records_to_frame((r for r in records if r.learner_id == learner_id), strict=strict)
    grouped = composite_frame(scores, ["class_id"], weights)
    return [
        ClassAverage(class_id=str(class_id), avg=float(avg))
        for class_id, avg in zip(grouped["class_id"], grouped["avg"])
    ]


def average_per_learner(
    records: Iterable[ScoreRecord],
    class_id: Optional[str] = None,
    weights: CategoryWeights = DEFAULT_WEIGHTS,
    strict: bool = False,
) -> List[LearnerAverage]:
    """
    Composite average for each learner, optionally restricted to one class first.

    Shared by both statistics queries; global statistics pass no class filter.
    """

    if class_id is not None:
        records = (r for r in records if r.class_id == class_id)
    scores = records_to_frame(records, strict=strict)
    grouped = composite_frame(scores, ["learner_id"], weights)
    return [
        LearnerAverage(learner_id=int(learner), avg=float(avg))
        for learner, avg in zip(grouped["learner_id"], grouped["avg"])
    ]
