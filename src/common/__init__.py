# ABOUTME: Makes the shared common package importable across the engine and CLI.
# ABOUTME: Re-exports score record and result schema types for convenience.

from .schemas import (
    CATEGORIES,
    ClassAverage,
    LearnerAverage,
    MalformedEntryError,
    MalformedRecordError,
    PopulationStatistic,
    ScoreEntry,
    ScoreRecord,
)

__all__ = [
    "CATEGORIES",
    "ClassAverage",
    "LearnerAverage",
    "MalformedEntryError",
    "MalformedRecordError",
    "PopulationStatistic",
    "ScoreEntry",
    "ScoreRecord",
]
