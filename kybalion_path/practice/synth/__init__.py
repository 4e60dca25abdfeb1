"""
Exercise synthesizers for practice sessions.

Each synthesizer turns one lesson sentence into a quiz item with
distractors, or returns None when the sentence does not fit its pattern:
- true_false: verbatim or heuristically negated statement
- cloze: one keyword blanked out
- mcq: "<subject> is <definition>" turned into a definition question
"""

from typing import TYPE_CHECKING

from kybalion_path.content.models import ExerciseType

if TYPE_CHECKING:
    from .base import ExerciseSynthesizer


# Synthesizer registry - populated by @register decorator
SYNTHESIZERS: dict[ExerciseType, "ExerciseSynthesizer"] = {}

# Order in which synthesizers are attempted for each lesson
DERIVATION_ORDER = (
    ExerciseType.TRUE_FALSE,
    ExerciseType.CLOZE,
    ExerciseType.MULTIPLE_CHOICE,
)


def register(exercise_type: ExerciseType):
    """Decorator to register a synthesizer."""
    def decorator(cls):
        SYNTHESIZERS[exercise_type] = cls()
        return cls
    return decorator


def get_synthesizer(exercise_type: str | ExerciseType) -> "ExerciseSynthesizer | None":
    """Get the synthesizer for an exercise type."""
    if isinstance(exercise_type, str):
        try:
            exercise_type = ExerciseType(exercise_type.upper())
        except ValueError:
            return None
    return SYNTHESIZERS.get(exercise_type)


# Import synthesizers to trigger registration
from . import true_false  # noqa: E402
from . import cloze  # noqa: E402
from . import mcq  # noqa: E402

__all__ = [
    "DERIVATION_ORDER",
    "SYNTHESIZERS",
    "get_synthesizer",
    "register",
]
