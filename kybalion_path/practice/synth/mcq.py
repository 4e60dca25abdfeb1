"""
Multiple-choice synthesizer.

Parses definition sentences ("<subject> is/means/refers to <definition>")
and asks which option best describes the subject.
"""

import re
from dataclasses import dataclass

from kybalion_path.content.models import ExerciseType, Language, MultipleChoiceExercise
from kybalion_path.core.rng import Rng
from kybalion_path.core.text import (
    MIN_SENTENCE_LENGTH,
    fallback_distractors,
    normalize_ws,
    strip_quotes,
    truncate,
)

from . import register
from .base import DERIVED_POINTS, MIN_OPTION_LENGTH, assemble_options, derived_id, pick_distractors

MAX_SUBJECT_WORDS = 8
MAX_RAW_SUBJECT_LENGTH = 80
MAX_SUBJECT_LENGTH = 60
MAX_DEFINITION_LENGTH = 90

_DEFINITION_RE = {
    "en": re.compile(r"(.+?)\s+(is|means|refers to)\s+(.+?)(?:[.!?]|$)", re.IGNORECASE),
    "de": re.compile(r"(.+?)\s+(ist|bedeutet|steht für)\s+(.+?)(?:[.!?]|$)", re.IGNORECASE),
}
_LEADING_DEMONSTRATIVE_RE = re.compile(r"^(this|that|dies|das)\s+", re.IGNORECASE)
_LEADING_THAT_RE = re.compile(r"^that\s+", re.IGNORECASE)
_CLAUSE_BREAK_RE = re.compile(r"[;:]")

_PROMPT = {
    "en": 'According to the lesson, what best describes "{subject}"?',
    "de": "Laut der Lektion: Was trifft am ehesten auf „{subject}“ zu?",
}
_EXPLANATION = {
    "en": "Derived from a sentence in the intro/interpretation.",
    "de": "Abgeleitet aus einem Satz im Einführungstext/der Deutung.",
}


@dataclass(frozen=True)
class Definition:
    subject: str
    definition: str


def parse_definition(sentence: str, language: Language | str) -> Definition | None:
    """
    Parse a definition sentence into subject and definition.

    Args:
        sentence: One lesson sentence
        language: Selects the copula list

    Returns:
        Definition, or None if the sentence is not a usable definition
    """
    text = normalize_ws(sentence.replace("“", '"').replace("”", '"'))
    match = _DEFINITION_RE[Language(language).value].search(text)
    if not match:
        return None

    subject = _LEADING_DEMONSTRATIVE_RE.sub("", normalize_ws(strip_quotes(match.group(1))))
    definition = normalize_ws(strip_quotes(match.group(3)))
    definition = _CLAUSE_BREAK_RE.split(definition)[0].strip()
    definition = _LEADING_THAT_RE.sub("", definition)

    if len(subject) < MIN_OPTION_LENGTH or len(definition) < MIN_OPTION_LENGTH:
        return None
    if len(subject) > MAX_RAW_SUBJECT_LENGTH:
        return None

    subject = " ".join(subject.split(" ")[:MAX_SUBJECT_WORDS]).strip()
    return Definition(subject=subject, definition=definition.strip())


@register(ExerciseType.MULTIPLE_CHOICE)
class MultipleChoiceSynthesizer:
    """Synthesizer for definition questions."""

    def synthesize(
        self,
        sentence: str,
        lesson_keywords: list[str],
        language: Language | str,
        salt: str,
        rng: Rng,
    ) -> MultipleChoiceExercise | None:
        cleaned = normalize_ws(sentence)
        if len(cleaned) < MIN_SENTENCE_LENGTH:
            return None

        lang = Language(language).value
        parsed = parse_definition(cleaned, lang)
        if parsed is None:
            return None

        subject = truncate(parsed.subject, MAX_SUBJECT_LENGTH)
        correct = truncate(parsed.definition, MAX_DEFINITION_LENGTH)
        if len(subject) < MIN_OPTION_LENGTH or len(correct) < MIN_OPTION_LENGTH:
            return None

        prompt = _PROMPT[lang].format(subject=subject)
        distractors = pick_distractors(
            correct,
            [*lesson_keywords, *fallback_distractors(lang)],
            rng,
            max_length=MAX_DEFINITION_LENGTH,
        )
        options = assemble_options(correct, distractors, rng)
        if options is None:
            return None

        return MultipleChoiceExercise(
            id=derived_id("derived_mc", salt, "mc", prompt, correct),
            prompt=prompt,
            options=options,
            correct_answer=correct,
            explanation=_EXPLANATION[lang],
            points=DERIVED_POINTS,
        )
