"""
Quiz runtime: answer checking and session scoring.
"""

from .answers import check_answer, to_boolean_answer
from .session import (
    DailySessionResult,
    LessonSession,
    PracticeResult,
    PracticeSession,
    daily_insight,
    heart_threshold,
    today_lesson,
)

__all__ = [
    "DailySessionResult",
    "LessonSession",
    "PracticeResult",
    "PracticeSession",
    "check_answer",
    "daily_insight",
    "heart_threshold",
    "to_boolean_answer",
    "today_lesson",
]
