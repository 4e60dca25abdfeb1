"""
Exercise identity for practice: base ids, dedupe keys and cloning.

A practice clone keeps the original id as a prefix so answers to any clone
map back to the same persisted statistics.
"""

from __future__ import annotations

from kybalion_path.content.models import Exercise
from kybalion_path.core.rng import Rng, fnv1a32, shuffle, to_hex
from kybalion_path.core.text import normalize_ws

PRACTICE_MARKER = "__practice__"


def base_exercise_id(exercise_id: str) -> str:
    """Id before the practice marker; the whole id if there is none."""
    head, _sep, _tail = exercise_id.partition(PRACTICE_MARKER)
    return head


def dedupe_key(exercise: Exercise) -> tuple[str, str]:
    """(type, whitespace-normalized prompt) identifying a logical question."""
    return (exercise.type, normalize_ws(exercise.prompt))


def clone_exercise(exercise: Exercise, rng: Rng, salt: str) -> Exercise:
    """
    Clone an exercise with a salted id and shuffled options.

    `correct_answer` is left untouched, so grading stays value based rather
    than position based.
    """
    digest = to_hex(fnv1a32(f"{salt}|{exercise.id}|{exercise.prompt}"))
    options = list(exercise.options) if exercise.options is not None else None
    if options is not None and len(options) > 1:
        options = shuffle(options, rng)
    return exercise.model_copy(
        update={
            "id": f"{exercise.id}{PRACTICE_MARKER}{digest}",
            "options": options,
        }
    )
