# ABOUTME: Holds the fixed category weighting policy used for composite averages.
# ABOUTME: Exams count 50%, quizzes 30%, and homework 20% unless overridden by config.

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Dict, Mapping, Tuple

from src.common.schemas import CATEGORIES, EXAM, HOMEWORK, QUIZ


@dataclass(frozen=True)
class CategoryWeights:
    """Weight applied to each category mean. The defaults sum to 1.0."""

    exam: float = 0.5
    quiz: float = 0.3
    homework: float = 0.2

    @property
    def categories(self) -> Tuple[str, ...]:
        return CATEGORIES

    def weight_for(self, category: str) -> float:
        if category == EXAM:
            return self.exam
        if category == QUIZ:
            return self.quiz
        if category == HOMEWORK:
            return self.homework
        raise ValueError(f"Unknown score category '{category}'. Expected one of: {', '.join(CATEGORIES)}.")

    def as_dict(self) -> Dict[str, float]:
        return {category: self.weight_for(category) for category in CATEGORIES}

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, float]) -> "CategoryWeights":
        """
        Build weights from a config mapping. Omitted categories keep their default weight;
        weights are taken as given and never renormalized.
        """

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise ValueError(f"Unknown weight categories: {', '.join(unknown)}.")

        overrides = {}
        for category, raw in mapping.items():
            try:
                weight = float(raw)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Weight for '{category}' must be numeric, got {raw!r}.") from exc
            if weight < 0:
                raise ValueError(f"Weight for '{category}' must be non-negative, got {weight}.")
            overrides[category] = weight
        return replace(cls(), **overrides)


DEFAULT_WEIGHTS = CategoryWeights()
