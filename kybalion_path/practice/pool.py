"""
Candidate pool for practice selection.

Combines exercises derived from lesson prose with cloned copies of the
authored lesson exercises.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, field

from loguru import logger

from kybalion_path.content.models import Exercise, ExerciseType, Language, Lesson
from kybalion_path.core.rng import Rng, shuffle

from .derivation import derive_lesson_exercises
from .identity import clone_exercise

# Types the practice runner renders; sorting and reflection stay in lessons.
PRACTICE_TYPES: frozenset[str] = frozenset({
    ExerciseType.MULTIPLE_CHOICE.value,
    ExerciseType.TRUE_FALSE.value,
    ExerciseType.CLOZE.value,
    ExerciseType.SCENARIO.value,
})


def type_values(types: Collection[str]) -> frozenset[str]:
    """Normalize ExerciseType members and raw strings to wire values."""
    return frozenset(t.value if isinstance(t, ExerciseType) else str(t) for t in types)


@dataclass
class CandidatePool:
    """Candidates for one practice build."""

    derived: list[Exercise] = field(default_factory=list)
    originals: list[Exercise] = field(default_factory=list)
    supported_types: frozenset[str] = PRACTICE_TYPES

    @property
    def supported_originals(self) -> list[Exercise]:
        return [ex for ex in self.originals if ex.type in self.supported_types]

    @property
    def candidates(self) -> list[Exercise]:
        """Derived first, then cloned originals, restricted to supported types."""
        return [
            ex for ex in (*self.derived, *self.originals)
            if ex.type in self.supported_types
        ]


def build_candidate_pool(
    lessons: list[Lesson],
    language: Language | str,
    rng: Rng,
    seed: str,
    supported_types: Collection[str] = PRACTICE_TYPES,
) -> CandidatePool:
    """
    Build the candidate pool from eligible lessons.

    Lessons are shuffled first; every authored exercise is cloned with
    shuffled options, then each lesson contributes its derived exercises.

    Args:
        lessons: Eligible lessons in course order
        language: Course language
        rng: Seeded generator
        seed: Practice seed string
        supported_types: Exercise types allowed into practice

    Returns:
        CandidatePool
    """
    shuffled_lessons = shuffle(lessons, rng)

    originals = [
        clone_exercise(exercise, rng, f"orig:{lesson.id}")
        for lesson in shuffled_lessons
        for exercise in lesson.exercises
    ]

    derived: list[Exercise] = []
    for lesson in shuffled_lessons:
        derived.extend(derive_lesson_exercises(lesson, language, rng, seed))

    pool = CandidatePool(
        derived=derived,
        originals=originals,
        supported_types=type_values(supported_types),
    )
    logger.debug(
        f"Candidate pool: {len(derived)} derived + {len(originals)} originals "
        f"from {len(lessons)} lessons ({len(pool.candidates)} supported)"
    )
    return pool
