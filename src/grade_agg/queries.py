# ABOUTME: Exposes the three grade queries over a record source.
# ABOUTME: Learner class averages, global pass-rate statistics, and per-class statistics.

from __future__ import annotations

from typing import List

from src.common.schemas import ClassAverage, PopulationStatistic

from .aggregation import average_per_class_for_learner, average_per_learner
from .config import AggregationConfig
from .sources import RecordFilter, RecordSource
from .statistics import compute_statistics


class GradeQueries:
    """
    Stateless query facade. Each call fetches a fresh snapshot from the source, so
    concurrent calls never share intermediate state.
    """

    def __init__(self, source: RecordSource, config: AggregationConfig = AggregationConfig()):
        self.source = source
        self.config = config

    def learner_class_averages(self, learner_id: int) -> List[ClassAverage]:
        records = self.source.fetch_records(RecordFilter.by_learner(learner_id))
        return average_per_class_for_learner(
            records, int(learner_id), weights=self.config.weights, strict=self.config.strict
        )

    def global_statistics(self) -> PopulationStatistic:
        records = self.source.fetch_records(RecordFilter.all())
        averages = average_per_learner(records, weights=self.config.weights, strict=self.config.strict)
        return compute_statistics(averages, threshold=self.config.threshold)

    def class_statistics(self, class_id: str) -> PopulationStatistic:
        records = self.source.fetch_records(RecordFilter.by_class(class_id))
        averages = average_per_learner(
            records, class_id=str(class_id), weights=self.config.weights, strict=self.config.strict
        )
        return compute_statistics(averages, threshold=self.config.threshold)
