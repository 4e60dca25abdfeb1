"""
Per-lesson exercise derivation.

Runs each registered synthesizer once per lesson against a randomly picked
qualifying sentence and keeps the unique results.
"""

from __future__ import annotations

from kybalion_path.content.models import Exercise, Language, Lesson
from kybalion_path.core.rng import Rng, pick_one
from kybalion_path.core.text import extract_keywords, qualifying_sentences

from .identity import dedupe_key
from .synth import DERIVATION_ORDER, get_synthesizer

MAX_DERIVED_PER_LESSON = 3


def derive_lesson_exercises(
    lesson: Lesson,
    language: Language | str,
    rng: Rng,
    seed: str,
) -> list[Exercise]:
    """
    Derive up to three exercises from a lesson's narrative text.

    Args:
        lesson: Lesson whose intro, interpretation and quote feed derivation
        language: Course language
        rng: Seeded generator shared with the rest of the practice build
        seed: Practice seed string, salted with the lesson id

    Returns:
        Derived exercises, unique by (type, prompt)
    """
    text = lesson.source_text()
    if not text:
        return []

    sentences = qualifying_sentences(text)
    if not sentences:
        return []

    lang = Language(language).value
    lesson_keywords = extract_keywords(text, lang)
    salt = f"{seed}|lesson:{lesson.id}"

    derived: list[Exercise] = []
    for exercise_type in DERIVATION_ORDER:
        synthesizer = get_synthesizer(exercise_type)
        if synthesizer is None:
            continue
        sentence = pick_one(sentences, rng)
        exercise = synthesizer.synthesize(sentence, lesson_keywords, lang, salt, rng)
        if exercise is not None:
            derived.append(exercise)

    unique: list[Exercise] = []
    seen: set[tuple[str, str]] = set()
    for exercise in derived:
        key = dedupe_key(exercise)
        if key in seen:
            continue
        seen.add(key)
        unique.append(exercise)

    return unique[:MAX_DERIVED_PER_LESSON]
