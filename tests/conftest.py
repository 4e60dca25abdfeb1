"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from datetime import UTC, datetime
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from kybalion_path.content import CourseLibrary, Lesson, Quote  # noqa: E402
from kybalion_path.progress import UserProgress  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def library():
    """Bundled course library, loaded once."""
    lib = CourseLibrary()
    lib.load()
    return lib


@pytest.fixture
def en_course(library):
    return library.for_language("en")


@pytest.fixture
def de_course(library):
    return library.for_language("de")


@pytest.fixture
def fixed_now():
    """A fixed UTC clock reading."""
    return datetime(2025, 3, 14, 9, 30, tzinfo=UTC)


@pytest.fixture
def new_user():
    """Default progress of a user who has never practiced."""
    return UserProgress()


@pytest.fixture
def prose_lesson():
    """A lesson with definition sentences and no authored exercises."""
    return Lesson(
        id="lesson_prose",
        title="Vibration",
        description="Nothing rests; everything moves.",
        intro_text=(
            "Vibration is the principle that every state moves at its own rate. "
            "Moods are patterns of motion rather than fixed objects."
        ),
        interpretation=(
            "Transmutation means shifting your position on the scale of a feeling. "
            "Attention is the lever that changes the frequency of experience."
        ),
        quote=Quote(text="Nothing rests; everything moves; everything vibrates.", source="The Kybalion"),
    )
