"""
Practice statistics merge and mastery gate evaluation.

Both functions are pure. `merge_stats` folds one batch of answers into the
per-exercise counters; `is_gate_satisfied` decides whether a practice batch
is good enough to lift a mastery gate.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from kybalion_path.progress.models import PracticeExerciseStats

DEFAULT_GATE_MIN_ANSWERS = 5
DEFAULT_GATE_PASS_RATIO = 0.70


def merge_stats(
    existing: Mapping[str, PracticeExerciseStats],
    answers: Mapping[str, bool],
    now: datetime,
) -> dict[str, PracticeExerciseStats]:
    """
    Merge one batch of practice answers into per-exercise statistics.

    Args:
        existing: Current stats keyed by base exercise id (left untouched)
        answers: Base exercise id -> answered correctly
        now: Timestamp shared by every entry in the batch

    Returns:
        New stats map containing every existing entry plus the updates
    """
    merged = dict(existing)
    for exercise_id, correct in answers.items():
        prev = merged.get(exercise_id) or PracticeExerciseStats()
        merged[exercise_id] = PracticeExerciseStats(
            seen_count=prev.seen_count + 1,
            correct_count=prev.correct_count + (1 if correct else 0),
            wrong_count=prev.wrong_count + (0 if correct else 1),
            correct_streak=prev.correct_streak + 1 if correct else 0,
            last_seen_at=now,
        )
    return merged


def is_gate_satisfied(
    answers: Mapping[str, bool],
    min_answers: int = DEFAULT_GATE_MIN_ANSWERS,
    pass_ratio: float = DEFAULT_GATE_PASS_RATIO,
) -> bool:
    """True if enough answers were given and enough of them were correct."""
    total = len(answers)
    if total < min_answers or total == 0:
        return False
    correct = sum(1 for ok in answers.values() if ok)
    return correct / total >= pass_ratio
