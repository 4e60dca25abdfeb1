"""
User progress models.

UserProgress is the single unit of persistence. It is an immutable value:
every update produces a new instance through `evolve()`, which re-runs
validation so the bounded histories and the heart range hold after every
change, not only after loading.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from typing import Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from kybalion_path.content.models import Language

T = TypeVar("T")

MAX_OUTCOME_HISTORY = 60
MAX_MEMORY_NOTES = 25
DEFAULT_MAX_HEARTS = 5


def bounded_append(items: Iterable[T], item: T, capacity: int) -> list[T]:
    """Append to a fixed-capacity history, evicting the oldest entries."""
    ring: deque[T] = deque(items, maxlen=capacity)
    ring.append(item)
    return list(ring)


class ProgressModel(BaseModel):
    """Frozen base with camelCase JSON aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class PracticeExerciseStats(ProgressModel):
    """Per base-exercise counters, created lazily on the first practice answer."""

    seen_count: int = 0
    correct_count: int = 0
    wrong_count: int = 0
    correct_streak: int = 0
    last_seen_at: datetime | None = None


class CompletedLesson(ProgressModel):
    score: float
    completed_at: datetime


class OutcomeEntry(ProgressModel):
    """Self-reported daily check-in, one per UTC date."""

    date: str  # YYYY-MM-DD
    clarity: int = Field(ge=1, le=10)
    reactivity: int = Field(ge=1, le=10)
    agency: int = Field(ge=1, le=10)


class ActiveGate(ProgressModel):
    """Blocks lesson access until a practice session meets the mastery threshold."""

    type: Literal["practice"] = "practice"
    message: str
    created_at: datetime


class UserProgress(ProgressModel):
    """The persisted root aggregate."""

    language: Language = Language.DE
    theme: Theme = Theme.LIGHT
    max_hearts: int = Field(default=DEFAULT_MAX_HEARTS, ge=0)
    hearts: int = DEFAULT_MAX_HEARTS
    streak: int = 0
    xp: int = 0
    gems: int = 0
    last_active_date: str | None = None
    completed_lessons: dict[str, CompletedLesson] = Field(default_factory=dict)
    unlocked_units: list[str] = Field(default_factory=lambda: ["unit_1"])
    current_unit_id: str = "unit_1"
    current_lesson_id: str = "lesson_1_1"
    memory_notes: list[str] = Field(default_factory=list)
    practice_stats: dict[str, PracticeExerciseStats] = Field(default_factory=dict)
    outcome_history: list[OutcomeEntry] = Field(default_factory=list)
    last_daily_completed_date: str | None = None
    active_gate: ActiveGate | None = None

    @field_validator("hearts")
    @classmethod
    def _clamp_hearts(cls, value: int, info: ValidationInfo) -> int:
        max_hearts = info.data.get("max_hearts", DEFAULT_MAX_HEARTS)
        return min(max(value, 0), max_hearts)

    @field_validator("memory_notes")
    @classmethod
    def _trim_notes(cls, value: list[str]) -> list[str]:
        return value[-MAX_MEMORY_NOTES:]

    @field_validator("outcome_history")
    @classmethod
    def _trim_outcomes(cls, value: list[OutcomeEntry]) -> list[OutcomeEntry]:
        # Later entries for a date replace earlier ones.
        latest: dict[str, OutcomeEntry] = {}
        for entry in value:
            latest.pop(entry.date, None)
            latest[entry.date] = entry
        return list(latest.values())[-MAX_OUTCOME_HISTORY:]

    @property
    def has_practice_gate(self) -> bool:
        return self.active_gate is not None and self.active_gate.type == "practice"

    def evolve(self, **changes) -> UserProgress:
        """Return a validated copy with `changes` applied."""
        return type(self).model_validate({**dict(self), **changes})

    def with_outcome(self, entry: OutcomeEntry) -> UserProgress:
        """Record a check-in, replacing any entry for the same date."""
        kept = [e for e in self.outcome_history if e.date != entry.date]
        return self.evolve(
            outcome_history=bounded_append(kept, entry, MAX_OUTCOME_HISTORY),
        )

    def with_memory_note(self, note: str) -> UserProgress:
        return self.evolve(
            memory_notes=bounded_append(self.memory_notes, note, MAX_MEMORY_NOTES),
        )
