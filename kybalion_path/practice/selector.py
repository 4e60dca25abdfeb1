"""
Practice selection engine.

Builds a deterministic practice set for one user, one UTC day and one
progress snapshot:

1. Seed a Mulberry32 stream from the practice seed string
2. Build the candidate pool (derived + cloned authored exercises)
3. Score candidates by novelty, mistakes, streak and time since last seen
4. Sort by jittered score, apply cooldown and (type, prompt) dedupe
5. Pad from cloned originals when the quota is not met
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from loguru import logger

from kybalion_path.content.models import Course, Exercise, Language
from kybalion_path.core.clock import as_utc
from kybalion_path.core.rng import Mulberry32, fnv1a32, pick_one
from kybalion_path.progress.models import PracticeExerciseStats, UserProgress

from .eligibility import eligible_lessons, practice_seed
from .identity import base_exercise_id, clone_exercise, dedupe_key
from .pool import PRACTICE_TYPES, build_candidate_pool

# =============================================================================
# Configuration
# =============================================================================


@dataclass
class PracticeConfig:
    """Tunable constants for practice selection."""

    supported_types: Collection[str] = field(default_factory=lambda: PRACTICE_TYPES)
    cooldown_minutes: float = 30
    novelty_bonus: float = 2.5  # Never practiced
    wrong_weight: float = 2.0
    streak_weight: float = 1.25
    recency_cap: float = 3.0
    recency_divisor_hours: float = 12.0
    jitter: float = 0.25
    padding_factor: int = 10  # Padding attempts per requested item

    @classmethod
    def from_settings(cls, practice: Mapping[str, Any]) -> PracticeConfig:
        """Build from the dict returned by `Settings.get_practice_config()`."""
        return cls(cooldown_minutes=practice.get("cooldown_minutes", 30))


# =============================================================================
# Scoring
# =============================================================================


def score_exercise(
    exercise: Exercise,
    stats: Mapping[str, PracticeExerciseStats],
    now: datetime,
    config: PracticeConfig | None = None,
) -> float:
    """
    Priority of an exercise for practice; higher is picked first.

    Unseen items get a flat novelty bonus. Seen items gain weight for past
    mistakes and elapsed time and lose weight for a running correct streak.
    """
    config = config or PracticeConfig()
    entry = stats.get(base_exercise_id(exercise.id))
    score = 1.0
    if entry is None:
        return score + config.novelty_bonus

    score += config.wrong_weight * entry.wrong_count
    score -= config.streak_weight * entry.correct_streak
    if entry.last_seen_at is not None:
        elapsed = as_utc(now) - as_utc(entry.last_seen_at)
        hours = max(0.0, elapsed.total_seconds() / 3600)
        score += min(config.recency_cap, hours / config.recency_divisor_hours)
    return score


def _cooling_down(
    exercise: Exercise,
    stats: Mapping[str, PracticeExerciseStats],
    now: datetime,
    cooldown: timedelta,
) -> bool:
    entry = stats.get(base_exercise_id(exercise.id))
    if entry is None or entry.last_seen_at is None:
        return False
    return as_utc(now) - as_utc(entry.last_seen_at) < cooldown


# =============================================================================
# Selection
# =============================================================================


def select_practice_exercises(
    course: Course,
    progress: UserProgress,
    language: Language | str,
    count: int,
    now: datetime,
    config: PracticeConfig | None = None,
) -> list[Exercise]:
    """
    Select a practice set.

    Args:
        course: Course for the user's language
        progress: Progress snapshot (stats, cursor, completions, xp)
        language: Course language code
        count: Number of exercises wanted
        now: Injected clock reading (timezone-aware UTC)
        config: Selection constants (defaults if None)

    Returns:
        Up to `count` exercises in selection order, unique by (type, prompt)
    """
    if count <= 0:
        return []

    config = config or PracticeConfig()
    lessons = eligible_lessons(course, progress)
    seed = practice_seed(course, progress, language, now, lessons=lessons)
    rng = Mulberry32(fnv1a32(seed))

    pool = build_candidate_pool(lessons, language, rng, seed, config.supported_types)
    candidates = pool.candidates
    stats = progress.practice_stats

    jittered = [
        (score_exercise(ex, stats, now, config) + (rng() - 0.5) * config.jitter, ex)
        for ex in candidates
    ]
    ranked = [ex for _score, ex in sorted(jittered, key=lambda pair: pair[0], reverse=True)]

    apply_cooldown = len(candidates) >= 2 * count
    cooldown = timedelta(minutes=config.cooldown_minutes)

    selected: list[Exercise] = []
    seen_keys: set[tuple[str, str]] = set()
    skipped_cooldown = 0
    for exercise in ranked:
        if len(selected) >= count:
            break
        if apply_cooldown and _cooling_down(exercise, stats, now, cooldown):
            skipped_cooldown += 1
            continue
        key = dedupe_key(exercise)
        if key in seen_keys:
            continue
        seen_keys.add(key)
        selected.append(exercise)

    originals = pool.supported_originals
    if len(selected) < count and originals:
        attempts = config.padding_factor * count
        for i in range(attempts):
            if len(selected) >= count:
                break
            repeat = clone_exercise(pick_one(originals, rng), rng, f"repeat:{i}")
            key = dedupe_key(repeat)
            if key in seen_keys:
                continue
            seen_keys.add(key)
            selected.append(repeat)

    logger.debug(
        f"Practice selection: {len(selected)}/{count} from {len(candidates)} candidates "
        f"(cooldown {'on' if apply_cooldown else 'off'}, {skipped_cooldown} skipped)"
    )
    return selected[:count]
