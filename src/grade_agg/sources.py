# ABOUTME: Adapters that supply score records to the engine from memory or grades exports.
# ABOUTME: Supports JSON, JSON Lines, and parquet exports of the grades collection.

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Protocol, Sequence, Union

import pandas as pd

from src.common.schemas import ScoreRecord

FILTER_ALL = "all"
FILTER_LEARNER = "learner"
FILTER_CLASS = "class"


@dataclass(frozen=True)
class RecordFilter:
    kind: str = FILTER_ALL
    value: Optional[Union[int, str]] = None

    @classmethod
    def all(cls) -> "RecordFilter":
        return cls()

    @classmethod
    def by_learner(cls, learner_id: int) -> "RecordFilter":
        return cls(kind=FILTER_LEARNER, value=int(learner_id))

    @classmethod
    def by_class(cls, class_id: str) -> "RecordFilter":
        return cls(kind=FILTER_CLASS, value=str(class_id))

    def matches(self, record: ScoreRecord) -> bool:
        if self.kind == FILTER_ALL:
            return True
        if self.kind == FILTER_LEARNER:
            return record.learner_id == self.value
        if self.kind == FILTER_CLASS:
            return record.class_id == self.value
        raise ValueError(f"Unsupported record filter '{self.kind}'.")


class RecordSource(Protocol):
    def fetch_records(self, record_filter: RecordFilter) -> Sequence[ScoreRecord]:
        ...


class InMemoryRecordSource:
    """Serves records from an in-memory snapshot."""

    def __init__(self, records: Sequence[ScoreRecord]):
        self._records = list(records)

    def __len__(self) -> int:
        return len(self._records)

    def fetch_records(self, record_filter: RecordFilter = RecordFilter()) -> List[ScoreRecord]:
        return [record for record in self._records if record_filter.matches(record)]


class FileRecordSource(InMemoryRecordSource):
    """
    Loads a grades export once and serves it like ``InMemoryRecordSource``.

    Accepted formats: ``.json`` (array of documents), ``.jsonl`` (one document per
    line), and ``.parquet`` (one row per document with a list-valued ``scores`` column).
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(load_records(self.path))


def load_records(path: Path) -> List[ScoreRecord]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing grades export at {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        documents = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(documents, list):
            raise ValueError(f"Expected a JSON array of grades documents in {path}.")
    elif suffix == ".jsonl":
        documents = [
            json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()
        ]
    elif suffix == ".parquet":
        documents = _parquet_documents(pd.read_parquet(path))
    else:
        raise ValueError(f"Unsupported grades export '{path.suffix}'. Expected .json, .jsonl, or .parquet.")

    return [ScoreRecord.from_dict(doc) for doc in documents]


def _parquet_documents(df: pd.DataFrame) -> List[Mapping[str, Any]]:
    documents = []
    for row in df.to_dict(orient="records"):
        scores = row.get("scores")
        if scores is not None and not isinstance(scores, list):
            scores = list(scores)
        documents.append({**row, "scores": scores})
    return documents
