"""
Quiz sessions.

Tracks answers while a lesson, practice set or daily session runs and
computes the rewards handed to the progression rules when it ends.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from loguru import logger

from kybalion_path.content.models import (
    Course,
    Exercise,
    Language,
    Lesson,
    ReflectionExercise,
)
from kybalion_path.grading.reflection import ReflectionFeedback
from kybalion_path.practice.identity import base_exercise_id
from kybalion_path.progress.models import UserProgress

from .answers import check_answer

# =============================================================================
# Rewards
# =============================================================================

PRACTICE_XP = 10
PRACTICE_HEART_RATIO = 0.6
PRACTICE_HEART_GEMS = 1

DAILY_XP = 25
DAILY_REFLECTION_GEMS = 2

DEFAULT_CHECKIN_SCORE = 6

DAILY_REFLECTION_PROMPTS = {
    "en": "What is one thing you can take responsibility for today (thought → emotion → action)?",
    "de": "Was ist heute eine Sache, für die du Verantwortung übernehmen kannst (Gedanke → Gefühl → Handlung)?",
}

DAILY_MICRO_PRACTICE = {
    "en": "60 seconds: inhale 4s, exhale 6s. Observe: which thought creates the emotion? Name it.",
    "de": (
        "60 Sekunden: Atme 4 Sekunden ein, 6 Sekunden aus. "
        "Beobachte: Welcher Gedanke erzeugt gerade die Emotion? Benenne ihn."
    ),
}


def heart_threshold(total: int) -> int:
    """Correct answers needed in a practice set to earn a heart."""
    return math.ceil(total * PRACTICE_HEART_RATIO)


# =============================================================================
# Practice
# =============================================================================


@dataclass
class PracticeResult:
    """Outcome of a finished practice set."""

    answers: dict[str, bool]
    correct: int
    total: int

    @property
    def hearts_earned(self) -> int:
        return 1 if self.total > 0 and self.correct >= heart_threshold(self.total) else 0

    @property
    def xp_earned(self) -> int:
        return PRACTICE_XP

    @property
    def gems_earned(self) -> int:
        return PRACTICE_HEART_GEMS if self.hearts_earned else 0


@dataclass
class PracticeSession:
    """
    Running practice set.

    Answers are keyed by base exercise id, so a clone and its original
    share one statistics entry.
    """

    exercises: list[Exercise]
    language: Language | str
    answers: dict[str, bool] = field(default_factory=dict)
    correct: int = 0
    answered: int = 0

    def answer(self, exercise: Exercise, answer) -> bool:
        """Grade and record one answer. Returns whether it was correct."""
        is_correct = check_answer(exercise, answer, self.language)
        self.answers[base_exercise_id(exercise.id)] = is_correct
        self.answered += 1
        if is_correct:
            self.correct += 1
        return is_correct

    @property
    def is_complete(self) -> bool:
        return self.answered >= len(self.exercises)

    def result(self) -> PracticeResult:
        result = PracticeResult(
            answers=dict(self.answers),
            correct=self.correct,
            total=len(self.exercises),
        )
        logger.info(
            f"Practice finished: {result.correct}/{result.total} correct, "
            f"+{result.hearts_earned} heart(s)"
        )
        return result


# =============================================================================
# Lessons
# =============================================================================


@dataclass
class LessonSession:
    """
    Running lesson.

    Every exercise contributes its points when answered correctly; a
    reflection contributes the share of its points given by the grader's
    score. Each wrong answer costs a heart.
    """

    lesson: Lesson
    language: Language | str
    score: int = 0
    hearts_lost: int = 0
    answered: int = 0

    def answer(self, exercise: Exercise, answer) -> bool:
        is_correct = check_answer(exercise, answer, self.language)
        self._record(is_correct, exercise.points if is_correct else 0)
        return is_correct

    def answer_reflection(self, exercise: ReflectionExercise, feedback: ReflectionFeedback) -> bool:
        points = math.floor(exercise.points * (feedback.score / 100)) if feedback.is_pass else 0
        self._record(feedback.is_pass, points)
        return feedback.is_pass

    def _record(self, is_correct: bool, points: int) -> None:
        self.answered += 1
        if is_correct:
            self.score += points
        else:
            self.hearts_lost += 1

    @property
    def max_points(self) -> int:
        return self.lesson.max_points

    @property
    def score_percent(self) -> float:
        if self.max_points <= 0:
            return 0.0
        return self.score / self.max_points * 100

    @property
    def passed(self) -> bool:
        return self.score_percent >= self.lesson.required_score_percent


# =============================================================================
# Daily session
# =============================================================================


def today_lesson(course: Course, progress: UserProgress) -> Lesson | None:
    """The lesson at the user's cursor, or the first lesson of the course."""
    lessons = course.ordered_lessons()
    if not lessons:
        return None
    return course.find_lesson(progress.current_lesson_id) or lessons[0]


def daily_insight(lesson: Lesson) -> str:
    """Short text for the daily session's insight step."""
    if lesson.quote and lesson.quote.text:
        return lesson.quote.text
    return lesson.interpretation or lesson.intro_text or lesson.description


@dataclass
class DailySessionResult:
    """Outcome of the daily session: check-in, practice answers and reflection."""

    reflection_text: str
    reflection_passed: bool
    clarity: int = DEFAULT_CHECKIN_SCORE
    reactivity: int = DEFAULT_CHECKIN_SCORE
    agency: int = DEFAULT_CHECKIN_SCORE
    practice_answers: dict[str, bool] = field(default_factory=dict)
    reflection_score: int | None = None

    @property
    def xp_earned(self) -> int:
        return DAILY_XP

    @property
    def gems_earned(self) -> int:
        return DAILY_REFLECTION_GEMS if self.reflection_passed else 0
