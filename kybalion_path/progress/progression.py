"""
Progression rules.

Pure functions that apply session outcomes to a UserProgress snapshot and
return the next snapshot: lesson access, hearts, lesson completion with the
mastery gate, practice rewards and the daily session.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from kybalion_path.content.models import Course, Language
from kybalion_path.core.clock import day_key
from kybalion_path.practice.stats import (
    DEFAULT_GATE_MIN_ANSWERS,
    DEFAULT_GATE_PASS_RATIO,
    is_gate_satisfied,
    merge_stats,
)

from .models import (
    ActiveGate,
    CompletedLesson,
    OutcomeEntry,
    UserProgress,
)

if TYPE_CHECKING:
    from kybalion_path.quiz.session import DailySessionResult, PracticeResult

LESSON_XP = 15
PERFECT_LESSON_GEMS = 5
LESSON_GEMS = 2
MASTERY_SCORE_PERCENT = 90

GATE_MESSAGES = {
    "en": "Mastery: Complete a short practice session (≥70% correct) to continue.",
    "de": "Meisterschaft: Erst eine kurze Practice-Session (≥70% richtig), dann geht’s weiter.",
}


class LessonAccess(str, Enum):
    """Outcome of trying to start a lesson."""

    OPEN = "open"
    LOCKED = "locked"  # Neither completed nor current
    GATED = "gated"  # Practice gate outstanding
    NEEDS_PRACTICE = "needs_practice"  # Out of hearts


def gate_message(language: Language | str) -> str:
    return GATE_MESSAGES[Language(language).value]


def lesson_access(progress: UserProgress, lesson_id: str | None = None) -> LessonAccess:
    """
    Decide whether a lesson may start, or where the user goes instead.

    Only the current lesson and completed lessons can be played. Without a
    lesson id the current lesson is assumed.
    """
    if lesson_id is not None and not is_lesson_unlocked(progress, lesson_id):
        return LessonAccess.LOCKED
    if progress.has_practice_gate:
        return LessonAccess.GATED
    if progress.hearts > 0:
        return LessonAccess.OPEN
    return LessonAccess.NEEDS_PRACTICE


def is_lesson_unlocked(progress: UserProgress, lesson_id: str) -> bool:
    return lesson_id == progress.current_lesson_id or lesson_id in progress.completed_lessons


def lose_heart(progress: UserProgress) -> UserProgress:
    return progress.evolve(hearts=max(0, progress.hearts - 1))


def record_outcome(progress: UserProgress, entry: OutcomeEntry) -> UserProgress:
    """Record a daily check-in; one entry per date, newest kept."""
    return progress.with_outcome(entry)


def add_memory_note(progress: UserProgress, note: str) -> UserProgress:
    return progress.with_memory_note(note)


# =============================================================================
# Lessons
# =============================================================================


def _next_lesson_after(course: Course, lesson_id: str, completed: dict) -> str | None:
    ids = [lesson.id for lesson in course.ordered_lessons()]
    start = ids.index(lesson_id) + 1 if lesson_id in ids else 0
    for candidate in ids[start:]:
        if candidate not in completed:
            return candidate
    return None


def _lesson_index(course: Course, lesson_id: str) -> int:
    ids = [lesson.id for lesson in course.ordered_lessons()]
    return ids.index(lesson_id) if lesson_id in ids else -1


def complete_lesson(
    progress: UserProgress,
    course: Course,
    lesson_id: str,
    score_percent: float,
    passed: bool,
    now: datetime,
) -> UserProgress:
    """
    Apply a finished lesson.

    A failed lesson changes nothing. A passed lesson is recorded, rewarded
    and moves the cursor to the next uncompleted lesson, never behind the
    previous cursor. Scores below mastery raise a practice gate.

    Args:
        progress: Snapshot before the lesson
        course: Course the lesson belongs to
        lesson_id: Finished lesson
        score_percent: Lesson score, 0-100
        passed: Whether the lesson met its required score
        now: Completion time

    Returns:
        Updated snapshot
    """
    if not passed:
        logger.info(f"Lesson {lesson_id} not passed ({score_percent:.0f}%)")
        return progress

    completed = {
        **progress.completed_lessons,
        lesson_id: CompletedLesson(score=score_percent, completed_at=now),
    }

    candidate = _next_lesson_after(course, lesson_id, completed) or progress.current_lesson_id
    prev_idx = _lesson_index(course, progress.current_lesson_id)
    next_idx = _lesson_index(course, candidate)
    if next_idx >= 0 and prev_idx >= 0 and next_idx < prev_idx:
        candidate = progress.current_lesson_id

    changes: dict = {
        "xp": progress.xp + LESSON_XP,
        "gems": progress.gems + (PERFECT_LESSON_GEMS if score_percent == 100 else LESSON_GEMS),
        "completed_lessons": completed,
        "current_lesson_id": candidate,
        "active_gate": None,
    }

    unit = course.unit_of(candidate)
    if unit is not None:
        changes["current_unit_id"] = unit.id
        if unit.id not in progress.unlocked_units:
            changes["unlocked_units"] = [*progress.unlocked_units, unit.id]

    if score_percent < MASTERY_SCORE_PERCENT:
        changes["active_gate"] = ActiveGate(
            message=gate_message(progress.language),
            created_at=now,
        )
        logger.info(f"Lesson {lesson_id} passed below mastery, practice gate set")

    return progress.evolve(**changes)


# =============================================================================
# Practice
# =============================================================================


@dataclass(frozen=True)
class PracticeCompletion:
    progress: UserProgress
    gate_cleared: bool


def complete_practice(
    progress: UserProgress,
    result: PracticeResult,
    now: datetime,
    min_answers: int = DEFAULT_GATE_MIN_ANSWERS,
    pass_ratio: float = DEFAULT_GATE_PASS_RATIO,
) -> PracticeCompletion:
    """
    Apply a finished practice session.

    The gate is judged once against the snapshot taken before the update;
    the same decision clears the gate and is reported back so the caller can
    continue into a lesson that was queued behind it.
    """
    gate_cleared = progress.has_practice_gate and is_gate_satisfied(
        result.answers, min_answers=min_answers, pass_ratio=pass_ratio
    )

    updated = progress.evolve(
        hearts=min(progress.max_hearts, progress.hearts + result.hearts_earned),
        xp=progress.xp + result.xp_earned,
        gems=progress.gems + result.gems_earned,
        practice_stats=merge_stats(progress.practice_stats, result.answers, now),
        active_gate=None if gate_cleared else progress.active_gate,
    )
    if gate_cleared:
        logger.info("Practice gate cleared")
    return PracticeCompletion(progress=updated, gate_cleared=gate_cleared)


# =============================================================================
# Daily session
# =============================================================================


def complete_daily_session(
    progress: UserProgress,
    result: DailySessionResult,
    now: datetime,
) -> UserProgress:
    """Apply a finished daily session: rewards, check-in, reflection note, stats."""
    today = day_key(now)
    entry = OutcomeEntry(
        date=today,
        clarity=result.clarity,
        reactivity=result.reactivity,
        agency=result.agency,
    )
    updated = progress.evolve(
        xp=progress.xp + result.xp_earned,
        gems=progress.gems + result.gems_earned,
        last_daily_completed_date=today,
        practice_stats=merge_stats(progress.practice_stats, result.practice_answers, now),
    )
    updated = record_outcome(updated, entry)
    return add_memory_note(updated, f"{today}: {result.reflection_text}")
