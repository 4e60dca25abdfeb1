"""
Unit tests for exercise synthesizers and per-lesson derivation.
"""

from kybalion_path.content.models import (
    ClozeExercise,
    ExerciseType,
    MultipleChoiceExercise,
    TrueFalseExercise,
)
from kybalion_path.core.rng import Mulberry32, fnv1a32, to_hex
from kybalion_path.practice.derivation import derive_lesson_exercises
from kybalion_path.practice.identity import dedupe_key
from kybalion_path.practice.synth import DERIVATION_ORDER, SYNTHESIZERS, get_synthesizer
from kybalion_path.practice.synth.base import assemble_options, derived_id, pick_distractors
from kybalion_path.practice.synth.mcq import Definition, parse_definition
from kybalion_path.practice.synth.true_false import negate_statement

SENTENCE = "Vibration is the principle that every state moves at its own rate."


def _keep():
    """rng stub that never triggers negation."""
    return 0.9


def _negate():
    return 0.1


class TestRegistry:
    def test_all_derivation_types_registered(self):
        for exercise_type in DERIVATION_ORDER:
            assert exercise_type in SYNTHESIZERS

    def test_lookup_by_string_is_case_insensitive(self):
        assert get_synthesizer("cloze") is SYNTHESIZERS[ExerciseType.CLOZE]
        assert get_synthesizer("TRUE_FALSE") is SYNTHESIZERS[ExerciseType.TRUE_FALSE]

    def test_unknown_or_unsynthesized_type(self):
        assert get_synthesizer("nonsense") is None
        assert get_synthesizer(ExerciseType.SORTING) is None

    def test_derived_id_hashes_salt_and_parts(self):
        expected = f"derived_tf__{to_hex(fnv1a32('salt|tf|prompt'))}"
        assert derived_id("derived_tf", "salt", "tf", "prompt") == expected

    def test_assemble_options_rejects_single_option(self):
        assert assemble_options("same", ["same", " same "], Mulberry32(1)) is None

    def test_options_ignore_case_duplicates(self):
        options = assemble_options("geist", ["Geist", "Ursache"], Mulberry32(1))
        assert sorted(options) == ["Ursache", "geist"]

    def test_distractors_never_restate_answer_in_other_case(self):
        picked = pick_distractors("geist", ["Geist", "GEIST", "Ursache", "ursache"], Mulberry32(1))
        assert picked == ["Ursache"]


class TestTrueFalse:
    def test_verbatim_statement_is_true(self):
        ex = get_synthesizer(ExerciseType.TRUE_FALSE).synthesize(SENTENCE, [], "en", "s", _keep)
        assert isinstance(ex, TrueFalseExercise)
        assert ex.correct_answer is True
        assert ex.prompt == f"True or False: {SENTENCE}"
        assert ex.options == ["True", "False"]
        assert ex.id.startswith("derived_tf__")
        assert ex.points == 10

    def test_negated_statement_is_false_and_quotes_original(self):
        ex = get_synthesizer(ExerciseType.TRUE_FALSE).synthesize(SENTENCE, [], "en", "s", _negate)
        assert ex.correct_answer is False
        assert ex.prompt == (
            "True or False: Vibration is not the principle that every state moves at its own rate."
        )
        assert "Vibration is the principle that every state moves at its own rate" in ex.explanation

    def test_german_labels(self):
        ex = get_synthesizer(ExerciseType.TRUE_FALSE).synthesize(
            "Das Universum ist geistig und lebendig.", [], "de", "s", _keep
        )
        assert ex.prompt.startswith("Wahr oder Falsch: ")
        assert ex.options == ["Wahr", "Falsch"]

    def test_negate_german_copula(self):
        assert negate_statement("Das Universum ist geistig", "de") == "Das Universum ist nicht geistig."

    def test_negate_preserves_case_of_copula(self):
        assert negate_statement("The Mind Is everything", "en") == "The Mind Is not everything."

    def test_negate_without_copula_uses_marker(self):
        assert negate_statement("Everything moves and vibrates", "en") == "NOT: Everything moves and vibrates."

    def test_copula_must_be_standalone_word(self):
        """'This' contains 'is' but is not a copula."""
        assert negate_statement("This moves constantly", "en") == "NOT: This moves constantly."

    def test_short_statement_rejected(self):
        assert get_synthesizer("TRUE_FALSE").synthesize("Too short here.", [], "en", "s", _keep) is None

    def test_same_salt_same_id(self):
        synth = get_synthesizer(ExerciseType.TRUE_FALSE)
        a = synth.synthesize(SENTENCE, [], "en", "salt-1", _keep)
        b = synth.synthesize(SENTENCE, [], "en", "salt-1", _keep)
        c = synth.synthesize(SENTENCE, [], "en", "salt-2", _keep)
        assert a.id == b.id
        assert a.id != c.id


class TestCloze:
    def test_blanks_a_keyword_present_in_sentence(self):
        sentence = "Moods are patterns of motion rather than fixed objects."
        ex = get_synthesizer(ExerciseType.CLOZE).synthesize(sentence, [], "en", "s", lambda: 0.0)
        assert isinstance(ex, ClozeExercise)
        assert ex.correct_answer == "moods"
        assert ex.prompt == "Fill in the blank: _____ are patterns of motion rather than fixed objects."
        assert ex.correct_answer in ex.options
        assert 2 <= len(ex.options) <= 4
        assert len(set(ex.options)) == len(ex.options)
        assert ex.id.startswith("derived_cloze__")

    def test_lesson_keywords_absent_from_sentence_never_chosen(self):
        sentence = "Moods are patterns of motion rather than fixed objects."
        synth = get_synthesizer(ExerciseType.CLOZE)
        for seed in range(20):
            ex = synth.synthesize(sentence, ["transmutation", "polarity"], "en", "s", Mulberry32(seed))
            assert ex.correct_answer not in {"transmutation", "polarity"}
            assert ex.correct_answer in sentence.lower()

    def test_no_keyword_returns_none(self):
        sentence = "It is a big red car and it is old and fun."
        assert get_synthesizer(ExerciseType.CLOZE).synthesize(sentence, [], "en", "s", Mulberry32(1)) is None

    def test_german_prompt(self):
        sentence = "Gedanken formen die Wirklichkeit jeden Tag neu."
        ex = get_synthesizer(ExerciseType.CLOZE).synthesize(sentence, [], "de", "s", Mulberry32(3))
        assert ex.prompt.startswith("Setze das fehlende Wort ein: ")
        assert "_____" in ex.prompt

    def test_german_options_unique_ignoring_case(self):
        sentence = "Das All ist Geist; das Universum ist geistig."
        synth = get_synthesizer(ExerciseType.CLOZE)
        for seed in range(50):
            ex = synth.synthesize(sentence, ["geist", "universum"], "de", "s", Mulberry32(seed))
            assert ex is not None
            folded = [option.casefold() for option in ex.options]
            assert len(set(folded)) == len(folded)
            assert folded.count(ex.correct_answer.casefold()) == 1


class TestMultipleChoice:
    def test_parse_definition(self):
        assert parse_definition(SENTENCE, "en") == Definition(
            subject="Vibration",
            definition="the principle that every state moves at its own rate",
        )

    def test_parse_strips_demonstrative_and_leading_that(self):
        parsed = parse_definition("This principle means that the mind shapes reality.", "en")
        assert parsed == Definition(subject="principle", definition="the mind shapes reality")

    def test_parse_cuts_definition_at_semicolon(self):
        parsed = parse_definition("Polarity is the law of opposites; it explains degrees.", "en")
        assert parsed.definition == "the law of opposites"

    def test_parse_german_copula(self):
        parsed = parse_definition("Mentalismus ist die Lehre vom geistigen Universum.", "de")
        assert parsed == Definition(subject="Mentalismus", definition="die Lehre vom geistigen Universum")

    def test_non_definition_returns_none(self):
        assert parse_definition("Everything moves constantly in waves.", "en") is None

    def test_synthesized_question(self):
        ex = get_synthesizer(ExerciseType.MULTIPLE_CHOICE).synthesize(
            SENTENCE, ["motion", "pattern"], "en", "s", Mulberry32(5)
        )
        assert isinstance(ex, MultipleChoiceExercise)
        assert ex.prompt == 'According to the lesson, what best describes "Vibration"?'
        assert ex.correct_answer == "the principle that every state moves at its own rate"
        assert ex.correct_answer in ex.options
        assert 2 <= len(ex.options) <= 4
        assert ex.id.startswith("derived_mc__")


class TestDerivation:
    def test_at_most_three_unique_items(self, prose_lesson):
        derived = derive_lesson_exercises(prose_lesson, "en", Mulberry32(11), "seed")
        assert 1 <= len(derived) <= 3
        keys = [dedupe_key(ex) for ex in derived]
        assert len(keys) == len(set(keys))

    def test_deterministic_for_same_seed(self, prose_lesson):
        a = derive_lesson_exercises(prose_lesson, "en", Mulberry32(11), "seed")
        b = derive_lesson_exercises(prose_lesson, "en", Mulberry32(11), "seed")
        assert [ex.model_dump() for ex in a] == [ex.model_dump() for ex in b]

    def test_lesson_without_prose_yields_nothing(self, prose_lesson):
        empty = prose_lesson.model_copy(
            update={"description": "", "intro_text": None, "interpretation": None, "quote": None}
        )
        assert derive_lesson_exercises(empty, "en", Mulberry32(1), "seed") == []
