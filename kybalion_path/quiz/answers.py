"""
Answer checking for lesson and practice exercises.
"""

from __future__ import annotations

from typing import Any

from kybalion_path.content.models import (
    Exercise,
    Language,
    ReflectionExercise,
    SortingExercise,
    TrueFalseExercise,
)

_TRUE_WORDS = {"true", "wahr"}
_FALSE_WORDS = {"false", "falsch"}


def to_boolean_answer(answer: Any, language: Language | str) -> bool | None:
    """
    Interpret a true/false answer.

    Accepts booleans and the English or German labels in any language;
    "ja"/"nein" only count for German.

    Returns:
        The boolean, or None if the answer is not recognizable
    """
    if isinstance(answer, bool):
        return answer
    if not isinstance(answer, str):
        return None

    normalized = answer.strip().lower()
    if normalized in _TRUE_WORDS:
        return True
    if normalized in _FALSE_WORDS:
        return False

    if Language(language) == Language.DE:
        if normalized == "ja":
            return True
        if normalized == "nein":
            return False
    return None


def check_answer(exercise: Exercise, answer: Any, language: Language | str) -> bool:
    """
    Grade a non-reflection answer.

    Args:
        exercise: The exercise shown
        answer: Option text, boolean, or ordered list for sorting
        language: UI language, used for true/false labels

    Returns:
        True if correct

    Raises:
        ValueError: For reflection exercises, which are graded externally
    """
    if isinstance(exercise, ReflectionExercise):
        raise ValueError(f"Reflection exercise {exercise.id} needs external grading")

    if isinstance(exercise, TrueFalseExercise):
        normalized = to_boolean_answer(answer, language)
        if normalized is None:
            return answer == exercise.correct_answer
        return normalized == exercise.correct_answer

    if isinstance(exercise, SortingExercise):
        return list(answer or []) == list(exercise.correct_answer)

    return answer == exercise.correct_answer
