# ABOUTME: Exposes the grade aggregation engine entrypoints.
# ABOUTME: Groups weighting, composite calculation, grouping, statistics, and queries.

from .aggregation import average_per_class_for_learner, average_per_learner, records_to_frame
from .calculator import compute_composite
from .config import AggregationConfig, load_config
from .queries import GradeQueries
from .sources import FileRecordSource, InMemoryRecordSource, RecordFilter
from .statistics import DEFAULT_THRESHOLD, compute_statistics
from .weighting import DEFAULT_WEIGHTS, CategoryWeights

__all__ = [
    "AggregationConfig",
    "CategoryWeights",
    "DEFAULT_THRESHOLD",
    "DEFAULT_WEIGHTS",
    "FileRecordSource",
    "GradeQueries",
    "InMemoryRecordSource",
    "RecordFilter",
    "average_per_class_for_learner",
    "average_per_learner",
    "compute_composite",
    "compute_statistics",
    "load_config",
    "records_to_frame",
]
