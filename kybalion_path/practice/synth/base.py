"""
Base protocol and shared helpers for exercise synthesizers.
"""

from collections.abc import Iterable
from typing import Protocol

from kybalion_path.content.models import Exercise, Language
from kybalion_path.core.rng import Rng, fnv1a32, shuffle, to_hex
from kybalion_path.core.text import truncate, unique_strings

MIN_OPTIONS = 2
MAX_DISTRACTORS = 3
MIN_OPTION_LENGTH = 3
DERIVED_POINTS = 10


class ExerciseSynthesizer(Protocol):
    """Protocol for sentence-to-exercise synthesizers."""

    def synthesize(
        self,
        sentence: str,
        lesson_keywords: list[str],
        language: Language | str,
        salt: str,
        rng: Rng,
    ) -> Exercise | None:
        """Build an exercise from one sentence. Returns None if the sentence does not fit."""
        ...


def derived_id(prefix: str, salt: str, *parts: str) -> str:
    """Content-hashed id, stable for the same salt and content."""
    return f"{prefix}__{to_hex(fnv1a32('|'.join((salt, *parts))))}"


def distinct_options(items: Iterable[str]) -> list[str]:
    """Trimmed, non-empty strings, unique ignoring case, in first-seen order."""
    result: list[str] = []
    seen: set[str] = set()
    for item in unique_strings(items):
        key = item.casefold()
        if key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result


def pick_distractors(
    correct: str,
    candidates: Iterable[str],
    rng: Rng,
    max_length: int | None = None,
) -> list[str]:
    """
    Choose up to three shuffled distractors.

    Words that match the answer or each other ignoring case count once, so
    a lowercased keyword and its capitalised bank entry never both appear.

    Args:
        correct: The right answer, never returned as a distractor
        candidates: Keyword and fallback word pool
        rng: Seeded generator
        max_length: Truncate candidates to this length and drop short ones

    Returns:
        Distinct distractors in shuffled order
    """
    answer = correct.casefold()
    pool = [word for word in distinct_options(candidates) if word.casefold() != answer]
    distractors = shuffle(pool, rng)
    if max_length is not None:
        distractors = [truncate(word, max_length) for word in distractors]
        distractors = [
            word for word in distinct_options(distractors)
            if len(word) >= MIN_OPTION_LENGTH and word.casefold() != answer
        ]
    return distractors[:MAX_DISTRACTORS]


def assemble_options(correct: str, distractors: list[str], rng: Rng) -> list[str] | None:
    """Shuffle the answer in with its distractors; None for degenerate one-option items."""
    options = shuffle(distinct_options([correct, *distractors]), rng)
    if len(options) < MIN_OPTIONS:
        return None
    return options
