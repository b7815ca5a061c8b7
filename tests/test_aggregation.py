# ABOUTME: Tests grouping of score records into per-class and per-learner averages.
# ABOUTME: Ensures filtering, empty results, and order independence of the grouping.

import math
import random

import pytest

from src.common.schemas import MalformedEntryError, ScoreEntry, ScoreRecord
from src.grade_agg.aggregation import (
    average_per_class_for_learner,
    average_per_learner,
    records_to_frame,
)
from src.grade_agg.calculator import compute_composite


def _record(learner_id, class_id, **scores):
    entries = tuple(ScoreEntry(category, value) for category, values in scores.items() for value in values)
    return ScoreRecord(learner_id=learner_id, class_id=class_id, scores=entries)


def _records():
    return [
        _record(1, "C1", exam=[90, 80], quiz=[70], homework=[100]),
        _record(1, "C2", exam=[60], quiz=[75], homework=[90]),
        _record(2, "C1", quiz=[90]),
        _record(3, "C2", exam=[70], quiz=[74], homework=[74]),
    ]


def _as_map(rows, key):
    return {getattr(row, key): row.avg for row in rows}


def test_records_to_frame_flattens_entries():
    df = records_to_frame(_records())
    assert list(df.columns) == ["learner_id", "class_id", "type", "score"]
    assert len(df) == 11
    assert df["score"].dtype == "float64"


def test_records_to_frame_drops_records_without_entries():
    df = records_to_frame([ScoreRecord(learner_id=9, class_id="C9")])
    assert df.empty


def test_average_per_class_for_learner_groups_by_class():
    rows = average_per_class_for_learner(_records(), learner_id=1)

    averages = _as_map(rows, "class_id")
    assert set(averages) == {"C1", "C2"}
    assert averages["C1"] == pytest.approx(83.5)
    assert averages["C2"] == pytest.approx(0.5 * 60 + 0.3 * 75 + 0.2 * 90)


def test_average_per_class_for_unknown_learner_is_empty():
    assert average_per_class_for_learner(_records(), learner_id=42) == []
    assert average_per_class_for_learner([], learner_id=1) == []


def test_average_per_learner_spans_all_classes():
    averages = _as_map(average_per_learner(_records()), "learner_id")

    exam, quiz, homework = (90 + 80 + 60) / 3, (70 + 75) / 2, (100 + 90) / 2
    assert averages[1] == pytest.approx(0.5 * exam + 0.3 * quiz + 0.2 * homework)
    assert math.isnan(averages[2])
    assert averages[3] == pytest.approx(72.0)


def test_average_per_learner_filters_by_class():
    averages = _as_map(average_per_learner(_records(), class_id="C1"), "learner_id")
    assert set(averages) == {1, 2}
    assert averages[1] == pytest.approx(83.5)
    assert average_per_learner(_records(), class_id="missing") == []


def test_learner_with_only_unknown_categories_still_counts_as_subject():
    records = [_record(5, "C1", project=[100])]
    rows = average_per_learner(records)
    assert [row.learner_id for row in rows] == [5]
    assert math.isnan(rows[0].avg)


def test_grouping_is_order_independent():
    records = _records() + [_record(3, "C1", exam=[40, 100], quiz=[88], homework=[12])]
    baseline = _as_map(average_per_learner(records), "learner_id")

    shuffled = list(records)
    random.Random(3).shuffle(shuffled)
    permuted = _as_map(average_per_learner(shuffled), "learner_id")

    assert set(permuted) == set(baseline)
    for learner_id, avg in baseline.items():
        if math.isnan(avg):
            assert math.isnan(permuted[learner_id])
        else:
            assert permuted[learner_id] == pytest.approx(avg)


def test_accepts_lazily_produced_records():
    rows = average_per_learner(record for record in _records())
    assert len(rows) == 3


def test_malformed_entries_raise_in_strict_mode():
    records = [ScoreRecord(learner_id=1, class_id="C1", scores=(ScoreEntry(None, None),))]
    rows = average_per_learner(records)
    assert len(rows) == 1 and math.isnan(rows[0].avg)
    with pytest.raises(MalformedEntryError):
        average_per_learner(records, strict=True)


def test_non_mapping_and_single_entry_scores_still_form_subjects():
    records = [
        ScoreRecord.from_dict({"learner_id": 1, "class_id": "C1", "scores": [None]}),
        ScoreRecord.from_dict({"learner_id": 2, "class_id": "C1", "scores": {"type": "exam", "score": 90}}),
        ScoreRecord.from_dict({"learner_id": 3, "class_id": "C1", "scores": [5]}),
    ]

    rows = average_per_learner(records)
    assert [row.learner_id for row in rows] == [1, 2, 3]
    assert all(math.isnan(row.avg) for row in rows)

    with pytest.raises(MalformedEntryError):
        average_per_learner(records, strict=True)


def test_non_numeric_scores_are_ignored_when_grouping():
    entries = (
        ScoreEntry("exam", 80),
        ScoreEntry("exam", None),
        ScoreEntry("quiz", 60),
        ScoreEntry("quiz", "seventy"),
        ScoreEntry("homework", 90),
        ScoreEntry("homework", True),
    )
    rows = average_per_learner([ScoreRecord(learner_id=1, class_id="C1", scores=entries)])
    assert rows[0].avg == pytest.approx(0.5 * 80 + 0.3 * 60 + 0.2 * 90)

    only_text = (ScoreEntry("exam", 80), ScoreEntry("quiz", 60), ScoreEntry("homework", "full marks"))
    rows = average_per_class_for_learner([ScoreRecord(learner_id=2, class_id="C2", scores=only_text)], 2)
    assert [row.class_id for row in rows] == ["C2"]
    assert math.isnan(rows[0].avg)


def test_grouped_averages_match_single_subject_calculation():
    records = _records() + [
        _record(3, "C1", exam=[40, 100], quiz=[88], homework=[12]),
        ScoreRecord(learner_id=4, class_id="C3", scores=(ScoreEntry("exam", 55), ScoreEntry("quiz", None))),
    ]

    for row in average_per_learner(records):
        entries = [entry for record in records if record.learner_id == row.learner_id for entry in record.scores]
        expected = compute_composite(entries)
        if math.isnan(expected):
            assert math.isnan(row.avg)
        else:
            assert row.avg == pytest.approx(expected)
