"""
True/False synthesizer.

Keeps a lesson sentence verbatim (answer True) or negates it heuristically
(answer False). The explanation always quotes the original sentence.
"""

import re

from kybalion_path.content.models import ExerciseType, Language, TrueFalseExercise
from kybalion_path.core.rng import Rng
from kybalion_path.core.text import normalize_ws

from . import register
from .base import DERIVED_POINTS, derived_id

NEGATION_PROBABILITY = 0.45
MIN_STATEMENT_LENGTH = 20

_BULLET_RE = re.compile(r"^[-–•]\s*")
_TRAILING_PERIODS_RE = re.compile(r"\.+$")

_COPULA_RE = {
    "en": re.compile(r"\b(is|are)\b", re.IGNORECASE),
    "de": re.compile(r"\b(ist|sind)\b", re.IGNORECASE),
}
_NEGATION_WORD = {"en": "not", "de": "nicht"}

_PROMPT = {"en": "True or False: {statement}", "de": "Wahr oder Falsch: {statement}"}
_OPTIONS = {"en": ["True", "False"], "de": ["Wahr", "Falsch"]}
_EXPLANATION = {
    "en": 'The lesson text says: "{sentence}."',
    "de": "Im Text heißt es sinngemäß: „{sentence}.“",
}


def negate_statement(sentence: str, language: Language | str) -> str:
    """
    Negate a statement by inserting a negation after its first is/are.

    Falls back to an explicit `NOT:` marker when no copula is found.
    """
    lang = Language(language).value
    pattern = _COPULA_RE[lang]
    negation = _NEGATION_WORD[lang]

    replaced = pattern.sub(lambda m: f"{m.group(1)} {negation}", sentence, count=1)
    if replaced == sentence:
        return f"NOT: {sentence}."
    return f"{replaced}."


@register(ExerciseType.TRUE_FALSE)
class TrueFalseSynthesizer:
    """Synthesizer for true/false statements."""

    def synthesize(
        self,
        sentence: str,
        lesson_keywords: list[str],
        language: Language | str,
        salt: str,
        rng: Rng,
    ) -> TrueFalseExercise | None:
        cleaned = _BULLET_RE.sub("", normalize_ws(sentence))
        if len(cleaned) < MIN_STATEMENT_LENGTH:
            return None

        lang = Language(language).value
        negated = rng() < NEGATION_PROBABILITY
        base = _TRAILING_PERIODS_RE.sub("", cleaned)

        statement = negate_statement(base, lang) if negated else f"{base}."
        prompt = _PROMPT[lang].format(statement=statement)

        return TrueFalseExercise(
            id=derived_id("derived_tf", salt, "tf", prompt),
            prompt=prompt,
            options=list(_OPTIONS[lang]),
            correct_answer=not negated,
            explanation=_EXPLANATION[lang].format(sentence=base),
            points=DERIVED_POINTS,
        )
