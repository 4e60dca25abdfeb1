"""
Course Library: Course Content Loader.

Loads static course trees from JSON files named `course_<lang>.json`.
The bundled courses ship inside the package; a directory override can be
configured for custom content.
"""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from .models import Course, Language


class CourseLoadError(ValueError):
    """Raised when a course file is missing or does not match the content schema."""


def load_course(path: Path) -> Course:
    """
    Load a single course from a JSON file.

    Args:
        path: Path to a course JSON file

    Returns:
        Parsed Course

    Raises:
        CourseLoadError: File unreadable, not JSON, or schema mismatch
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CourseLoadError(f"Failed to read {path}: {e}") from e

    try:
        course = Course.model_validate(data)
    except ValidationError as e:
        raise CourseLoadError(f"Invalid course content in {path}: {e}") from e

    lesson_count = len(course.ordered_lessons())
    logger.debug(f"Loaded course {course.id} from {path.name} ({lesson_count} lessons)")
    return course


class CourseLibrary:
    """
    Courses keyed by language.

    Features:
    - Auto-discovery of course_<lang>.json files
    - Falls back to the bundled content directory
    """

    DEFAULT_CONTENT_DIR = Path(__file__).parent / "data"
    FILE_PATTERN = "course_*.json"

    def __init__(self, content_dir: Path | None = None):
        """
        Initialize the library.

        Args:
            content_dir: Directory with course JSON files (default: bundled data)
        """
        self.content_dir = content_dir or self.DEFAULT_CONTENT_DIR
        self._courses: dict[Language, Course] = {}

    @property
    def languages(self) -> list[Language]:
        return sorted(self._courses, key=lambda lang: lang.value)

    def load(self) -> int:
        """
        Load every course file in the content directory.

        Returns:
            Number of courses loaded
        """
        self._courses.clear()

        for path in sorted(self.content_dir.glob(self.FILE_PATTERN)):
            code = path.stem.removeprefix("course_")
            try:
                language = Language(code)
            except ValueError:
                logger.warning(f"Skipping {path.name}: unsupported language '{code}'")
                continue
            self._courses[language] = load_course(path)

        if not self._courses:
            logger.warning(f"No course files found in {self.content_dir}")

        logger.info(f"CourseLibrary loaded {len(self._courses)} courses from {self.content_dir}")
        return len(self._courses)

    def for_language(self, language: Language | str) -> Course:
        """
        Get the course for a language, loading lazily.

        Raises:
            CourseLoadError: No course exists for the language
        """
        if not self._courses:
            self.load()
        try:
            course = self._courses.get(Language(language))
        except ValueError as e:
            raise CourseLoadError(f"Unsupported language '{language}'") from e
        if course is None:
            raise CourseLoadError(f"No course available for language '{language}'")
        return course


def load_courses(content_dir: Path | None = None) -> dict[Language, Course]:
    """Load all courses from a directory into a language-keyed dict."""
    library = CourseLibrary(content_dir)
    library.load()
    return {lang: library.for_language(lang) for lang in library.languages}
