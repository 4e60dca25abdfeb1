"""
Cloze synthesizer.

Blanks out one keyword of a lesson sentence and offers it among keyword
and word-bank distractors.
"""

from kybalion_path.content.models import ClozeExercise, ExerciseType, Language
from kybalion_path.core.rng import Rng, pick_one
from kybalion_path.core.text import (
    BLANK,
    MIN_KEYWORD_LENGTH,
    MIN_SENTENCE_LENGTH,
    contains_word,
    extract_keywords,
    fallback_distractors,
    normalize_ws,
    replace_first_word,
    unique_strings,
)

from . import register
from .base import DERIVED_POINTS, assemble_options, derived_id, pick_distractors

_PROMPT = {
    "en": "Fill in the blank: {text}",
    "de": "Setze das fehlende Wort ein: {text}",
}
_EXPLANATION = {
    "en": "Hint: The missing word is taken from the lesson's intro/interpretation.",
    "de": "Hinweis: Das Wort stammt aus dem Einführungstext/der Deutung der Lektion.",
}


@register(ExerciseType.CLOZE)
class ClozeSynthesizer:
    """Synthesizer for fill-in-the-blank items."""

    def synthesize(
        self,
        sentence: str,
        lesson_keywords: list[str],
        language: Language | str,
        salt: str,
        rng: Rng,
    ) -> ClozeExercise | None:
        cleaned = normalize_ws(sentence)
        if len(cleaned) < MIN_SENTENCE_LENGTH:
            return None

        lang = Language(language).value
        candidates = [
            word
            for word in unique_strings([*extract_keywords(cleaned, lang), *lesson_keywords])
            if len(word) >= MIN_KEYWORD_LENGTH and contains_word(cleaned, word)
        ]
        if not candidates:
            return None

        chosen = pick_one(candidates, rng)
        blanked = replace_first_word(cleaned, chosen, BLANK)
        if blanked == cleaned:
            return None

        prompt = _PROMPT[lang].format(text=blanked)
        distractors = pick_distractors(
            chosen,
            [*lesson_keywords, *fallback_distractors(lang)],
            rng,
        )
        options = assemble_options(chosen, distractors, rng)
        if options is None:
            return None

        return ClozeExercise(
            id=derived_id("derived_cloze", salt, "cloze", prompt, chosen),
            prompt=prompt,
            options=options,
            correct_answer=chosen,
            explanation=_EXPLANATION[lang],
            points=DERIVED_POINTS,
        )
