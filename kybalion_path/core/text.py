"""
Text utilities for deriving exercises from lesson prose.

Sentence splitting, keyword extraction with stopword filtering, phrase
truncation and case-insensitive first-match word substitution.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

_WS_RE = re.compile(r"\s+")
_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+|[^.!?]+$")
_WORD_RE = re.compile(r"[A-Za-zÀ-ÖØ-öø-ÿÄÖÜäöüß]+")

MIN_SENTENCE_LENGTH = 25
MAX_SENTENCE_LENGTH = 220
MIN_KEYWORD_LENGTH = 5
MAX_KEYWORDS = 40

BLANK = "_____"

_COMMON_STOPWORDS = (
    "the", "and", "that", "this", "with", "from", "your", "you", "are", "for", "not",
    "eine", "einer", "eines", "und", "dass", "dies", "diese", "dieser", "mit", "aus",
    "dein", "deine", "deiner", "deines", "nicht", "oder", "wie", "sich", "sind", "ist",
    "einem", "einen", "also", "wir", "uns", "ihr", "sie", "der", "die", "das", "den",
    "dem", "des", "ein",
)

_EXTRA_STOPWORDS = {
    "de": ("auch", "nur", "mehr", "weniger", "kann", "können", "muss", "musst", "soll", "sollte"),
    "en": ("also", "only", "more", "less", "can", "could", "must", "should", "will", "would"),
}

_FALLBACK_DISTRACTORS = {
    "de": (
        "Bewusstsein", "Realität", "Gedanke", "Geist", "Muster",
        "Erfahrung", "Prinzip", "Ursache", "Wirkung",
    ),
    "en": (
        "consciousness", "reality", "thought", "mind", "pattern",
        "experience", "principle", "cause", "effect",
    ),
}


def normalize_ws(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return _WS_RE.sub(" ", text).strip()


def split_sentences(text: str) -> list[str]:
    """Split text on `.`, `!` and `?`, keeping the terminator with its sentence."""
    cleaned = normalize_ws(text)
    if not cleaned:
        return []
    return _SENTENCE_RE.findall(cleaned)


def qualifying_sentences(
    text: str,
    min_length: int = MIN_SENTENCE_LENGTH,
    max_length: int = MAX_SENTENCE_LENGTH,
) -> list[str]:
    """Sentences whose trimmed length falls inside the derivation window."""
    sentences = (s.strip() for s in split_sentences(text))
    return [s for s in sentences if min_length <= len(s) <= max_length]


def stopwords(language: str) -> frozenset[str]:
    """Stopwords for a language; the shared list covers both EN and DE."""
    extras = _EXTRA_STOPWORDS.get(language, _EXTRA_STOPWORDS["en"])
    return frozenset(_COMMON_STOPWORDS + extras)


def unique_strings(items: Iterable[str]) -> list[str]:
    """Trimmed, non-empty strings in first-seen order."""
    result: list[str] = []
    seen: set[str] = set()
    for item in items:
        key = item.strip()
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(key)
    return result


def extract_keywords(text: str, language: str) -> list[str]:
    """
    Extract candidate keywords from text.

    Args:
        text: Source prose
        language: "en" or "de", selects the stopword list

    Returns:
        Up to 40 unique lowercase words of 5+ letters that are not stopwords
    """
    stop = stopwords(language)
    candidates = (
        word.lower()
        for word in _WORD_RE.findall(text)
    )
    keywords = (
        word for word in candidates
        if len(word) >= MIN_KEYWORD_LENGTH and word not in stop and not word.isdigit()
    )
    return unique_strings(keywords)[:MAX_KEYWORDS]


def _word_pattern(word: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)


def contains_word(text: str, word: str) -> bool:
    """Whether `word` occurs in `text` as a whole word, ignoring case."""
    return _word_pattern(word).search(text) is not None


def replace_first_word(text: str, word: str, replacement: str) -> str:
    """Replace the first case-insensitive whole-word occurrence of `word`."""
    return _word_pattern(word).sub(lambda _m: replacement, text, count=1)


def strip_quotes(text: str) -> str:
    """Strip leading and trailing double quotes."""
    return text.strip('"').strip()


def truncate(text: str, max_length: int) -> str:
    """Trim text to `max_length` characters, ending in an ellipsis when cut."""
    trimmed = text.strip()
    if len(trimmed) <= max_length:
        return trimmed
    return f"{trimmed[:max(0, max_length - 1)].strip()}…"


def fallback_distractors(language: str) -> list[str]:
    """Fixed word bank used when a lesson has too few keywords."""
    return list(_FALLBACK_DISTRACTORS.get(language, _FALLBACK_DISTRACTORS["en"]))
