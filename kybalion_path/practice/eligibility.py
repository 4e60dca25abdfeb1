"""
Eligibility and seeding for practice generation.

Decides which lessons may feed a practice set and derives the seed string
that makes a set reproducible for one user, one UTC day and one progress
snapshot.
"""

from __future__ import annotations

from datetime import datetime

from kybalion_path.content.models import Course, Language, Lesson
from kybalion_path.core.clock import day_key
from kybalion_path.core.rng import fnv1a32, to_hex
from kybalion_path.progress.models import UserProgress


def _digest(ids: set[str] | list[str]) -> str:
    return to_hex(fnv1a32(",".join(sorted(ids))))


def eligible_lessons(course: Course, progress: UserProgress) -> list[Lesson]:
    """
    Lessons whose content may seed practice.

    The current lesson plus every completed lesson, in unit order then
    lesson order. New users with no overlap get every lesson.
    """
    all_lessons = course.ordered_lessons()
    eligible_ids = {progress.current_lesson_id, *progress.completed_lessons} - {""}
    eligible = [lesson for lesson in all_lessons if lesson.id in eligible_ids]
    return eligible or all_lessons


def progress_seed(progress: UserProgress, now: datetime) -> str:
    """Seed prefix from the day, XP and the set of touched lessons."""
    lesson_ids = {progress.current_lesson_id, *progress.completed_lessons} - {""}
    return f"{day_key(now)}|xp:{progress.xp}|lessons:{_digest(lesson_ids)}"


def practice_seed(
    course: Course,
    progress: UserProgress,
    language: Language | str,
    now: datetime,
    lessons: list[Lesson] | None = None,
) -> str:
    """
    Full seed string for one practice-generation call.

    Args:
        course: Course the practice set is drawn from
        progress: Progress snapshot
        language: Course language code
        now: Injected clock reading
        lessons: Pre-computed eligible lessons (resolved if omitted)

    Returns:
        Pipe-joined seed string
    """
    if lessons is None:
        lessons = eligible_lessons(course, progress)
    lang = Language(language).value
    return "|".join([
        progress_seed(progress, now),
        f"course:{course.id}",
        f"lang:{lang}",
        f"eligible:{_digest([lesson.id for lesson in lessons])}",
    ])
