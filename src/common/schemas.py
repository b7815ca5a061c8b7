# ABOUTME: Defines canonical data structures shared by the grade aggregation engine.
# ABOUTME: Centralizes score record, composite average, and population statistic schemas.

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

EXAM = "exam"
QUIZ = "quiz"
HOMEWORK = "homework"
CATEGORIES: Tuple[str, ...] = (EXAM, QUIZ, HOMEWORK)


class MalformedRecordError(ValueError):
    """Raised when a grades document cannot be interpreted as a score record."""


class MalformedEntryError(ValueError):
    """Raised in strict mode for a score entry carrying neither a type nor a score."""


@dataclass(frozen=True)
class ScoreEntry:
    """One scored piece of work. Unknown types are kept but never averaged."""

    type: Optional[str]
    score: Optional[float]

    @property
    def is_malformed(self) -> bool:
        return self.type is None and self.score is None

    @classmethod
    def from_dict(cls, doc: Mapping[str, Any]) -> "ScoreEntry":
        raw_type = doc.get("type")
        return cls(type=None if raw_type is None else str(raw_type), score=doc.get("score"))


@dataclass(frozen=True)
class ScoreRecord:
    """A learner's scores for one class, as stored in the grades collection."""

    learner_id: int
    class_id: str
    scores: Sequence[ScoreEntry] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, doc: Mapping[str, Any]) -> "ScoreRecord":
        """
        Parse a grades document such as
        ``{"learner_id": 1, "class_id": "C1", "scores": [{"type": "exam", "score": 90}]}``.
        """

        if not isinstance(doc, Mapping):
            raise MalformedRecordError(f"Expected a mapping, got {type(doc).__name__}.")
        if doc.get("learner_id") is None or doc.get("class_id") is None:
            raise MalformedRecordError("Grades document requires both 'learner_id' and 'class_id'.")

        learner_id = _to_learner_id(doc["learner_id"])
        raw_scores = doc.get("scores")
        # Unwind semantics: a missing or null array yields nothing, a lone value one entry.
        if raw_scores is None:
            raw_scores = []
        elif not isinstance(raw_scores, (list, tuple)):
            raw_scores = [raw_scores]
        entries = tuple(
            ScoreEntry.from_dict(item) if isinstance(item, Mapping) else ScoreEntry(None, None)
            for item in raw_scores
        )
        return cls(learner_id=learner_id, class_id=str(doc["class_id"]), scores=entries)


@dataclass(frozen=True)
class ClassAverage:
    class_id: str
    avg: float

    def to_dict(self) -> Dict[str, Any]:
        return {"class_id": self.class_id, "avg": _json_float(self.avg)}


@dataclass(frozen=True)
class LearnerAverage:
    learner_id: int
    avg: float

    def to_dict(self) -> Dict[str, Any]:
        return {"learner_id": self.learner_id, "avg": _json_float(self.avg)}


@dataclass(frozen=True)
class PopulationStatistic:
    """Pass-rate summary over a set of composite averages."""

    total: int
    above_threshold: int
    percentage: float
    threshold: float = 70.0

    def to_dict(self) -> Dict[str, Any]:
        label = _threshold_label(self.threshold)
        return {
            "total": self.total,
            f"above{label}": self.above_threshold,
            f"percAbove{label}": self.percentage,
        }


def _to_learner_id(value: Any) -> int:
    if isinstance(value, bool):
        raise MalformedRecordError(f"Invalid learner_id {value!r}.")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    try:
        numeric = float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedRecordError(f"Invalid learner_id {value!r}.") from exc
    if not numeric.is_integer():
        raise MalformedRecordError(f"learner_id must be an integer, got {value!r}.")
    return int(numeric)


def _threshold_label(threshold: float) -> str:
    return str(int(threshold)) if float(threshold).is_integer() else str(threshold)


def _json_float(value: float) -> Optional[float]:
    if value is None or math.isnan(value):
        return None
    return float(value)
