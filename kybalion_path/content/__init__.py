"""
Static course content: models and the JSON loader.
"""

from .course_loader import CourseLibrary, CourseLoadError, load_course, load_courses
from .models import (
    ClozeExercise,
    Course,
    Exercise,
    ExerciseType,
    Language,
    Lesson,
    MultipleChoiceExercise,
    Quote,
    ReflectionExercise,
    ScenarioExercise,
    SortingExercise,
    TrueFalseExercise,
    Unit,
    exercise_adapter,
)

__all__ = [
    # Loading
    "CourseLibrary",
    "CourseLoadError",
    "load_course",
    "load_courses",
    # Content tree
    "Course",
    "Unit",
    "Lesson",
    "Quote",
    "Language",
    # Exercises
    "Exercise",
    "ExerciseType",
    "exercise_adapter",
    "MultipleChoiceExercise",
    "TrueFalseExercise",
    "SortingExercise",
    "ClozeExercise",
    "ScenarioExercise",
    "ReflectionExercise",
]
