"""
Course content models.

Static Course -> Unit -> Lesson -> Exercise trees, loaded once from JSON
and never mutated. Exercises are a discriminated union on `type`; the shape
of `correct_answer` depends on the variant.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from kybalion_path.core.text import normalize_ws


class Language(str, Enum):
    """Supported course languages."""

    DE = "de"
    EN = "en"


class ExerciseType(str, Enum):
    """Exercise kinds authored in lessons or derived for practice."""

    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TRUE_FALSE = "TRUE_FALSE"
    SORTING = "SORTING"
    CLOZE = "CLOZE"
    SCENARIO = "SCENARIO"
    REFLECTION = "REFLECTION"


class ContentModel(BaseModel):
    """Frozen base with camelCase JSON aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class _ExerciseBase(ContentModel):
    id: str
    prompt: str
    options: list[str] | None = None
    explanation: str | None = None
    points: int = 10


class MultipleChoiceExercise(_ExerciseBase):
    type: Literal["MULTIPLE_CHOICE"] = "MULTIPLE_CHOICE"
    correct_answer: str


class TrueFalseExercise(_ExerciseBase):
    type: Literal["TRUE_FALSE"] = "TRUE_FALSE"
    correct_answer: bool


class SortingExercise(_ExerciseBase):
    type: Literal["SORTING"] = "SORTING"
    correct_answer: list[str]


class ClozeExercise(_ExerciseBase):
    type: Literal["CLOZE"] = "CLOZE"
    correct_answer: str


class ScenarioExercise(_ExerciseBase):
    type: Literal["SCENARIO"] = "SCENARIO"
    correct_answer: str


class ReflectionExercise(_ExerciseBase):
    """Free-text prompt graded by the reflection service."""

    type: Literal["REFLECTION"] = "REFLECTION"


Exercise = Annotated[
    Union[
        MultipleChoiceExercise,
        TrueFalseExercise,
        SortingExercise,
        ClozeExercise,
        ScenarioExercise,
        ReflectionExercise,
    ],
    Field(discriminator="type"),
]

exercise_adapter: TypeAdapter[Exercise] = TypeAdapter(Exercise)


class Quote(ContentModel):
    text: str
    source: str = ""


class Lesson(ContentModel):
    """Ordered exercises plus the narrative that doubles as derivation source."""

    id: str
    title: str
    description: str = ""
    intro_text: str | None = None
    quote: Quote | None = None
    interpretation: str | None = None
    exercises: list[Exercise] = Field(default_factory=list)
    required_score_percent: int = 80

    def source_text(self) -> str:
        """Narrative fields joined into one whitespace-normalized block."""
        parts = [
            self.description,
            self.intro_text,
            self.interpretation,
            self.quote.text if self.quote else None,
        ]
        return normalize_ws(" ".join(p for p in parts if p))

    @property
    def max_points(self) -> int:
        return sum(ex.points for ex in self.exercises)


class Unit(ContentModel):
    id: str
    title: str
    description: str = ""
    order: int
    lessons: list[Lesson] = Field(default_factory=list)


class Course(ContentModel):
    """A complete course for one language."""

    id: str
    title: str
    description: str = ""
    units: list[Unit] = Field(default_factory=list)

    def ordered_units(self) -> list[Unit]:
        return sorted(self.units, key=lambda u: u.order)

    def ordered_lessons(self) -> list[Lesson]:
        """All lessons by unit order, then by position inside the unit."""
        return [lesson for unit in self.ordered_units() for lesson in unit.lessons]

    def find_lesson(self, lesson_id: str) -> Lesson | None:
        for lesson in self.ordered_lessons():
            if lesson.id == lesson_id:
                return lesson
        return None

    def unit_of(self, lesson_id: str) -> Unit | None:
        for unit in self.units:
            if any(lesson.id == lesson_id for lesson in unit.lessons):
                return unit
        return None
