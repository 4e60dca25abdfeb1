"""
User progress: models, persistence and progression rules.
"""

from .models import (
    ActiveGate,
    CompletedLesson,
    OutcomeEntry,
    PracticeExerciseStats,
    Theme,
    UserProgress,
)
from .store import PROGRESS_KEY, ProgressStore
from .progression import (
    LessonAccess,
    PracticeCompletion,
    add_memory_note,
    complete_daily_session,
    complete_lesson,
    complete_practice,
    gate_message,
    is_lesson_unlocked,
    lesson_access,
    lose_heart,
    record_outcome,
)

__all__ = [
    "PROGRESS_KEY",
    "ActiveGate",
    "CompletedLesson",
    "LessonAccess",
    "OutcomeEntry",
    "PracticeCompletion",
    "PracticeExerciseStats",
    "ProgressStore",
    "Theme",
    "UserProgress",
    "add_memory_note",
    "complete_daily_session",
    "complete_lesson",
    "complete_practice",
    "gate_message",
    "is_lesson_unlocked",
    "lesson_access",
    "lose_heart",
    "record_outcome",
]
