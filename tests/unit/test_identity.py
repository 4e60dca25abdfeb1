"""
Unit tests for practice cloning and exercise identity.
"""

from kybalion_path.content.models import MultipleChoiceExercise, TrueFalseExercise
from kybalion_path.core.rng import Mulberry32, fnv1a32, to_hex
from kybalion_path.practice.identity import (
    PRACTICE_MARKER,
    base_exercise_id,
    clone_exercise,
    dedupe_key,
)


def _mc():
    return MultipleChoiceExercise(
        id="ex_2",
        prompt="If the Universe is Mental, what is the most powerful tool you possess?",
        options=["Physical Strength", "Financial Wealth", "Thought/Focus", "Social Status"],
        correct_answer="Thought/Focus",
    )


class TestBaseId:
    def test_strips_practice_suffix(self):
        assert base_exercise_id("ex_2__practice__0badf00d") == "ex_2"

    def test_plain_id_unchanged(self):
        assert base_exercise_id("derived_tf__1234abcd") == "derived_tf__1234abcd"

    def test_nested_clone_maps_to_original(self):
        assert base_exercise_id("ex_2__practice__aaaa__practice__bbbb") == "ex_2"


class TestClone:
    def test_clone_id_embeds_salted_hash(self):
        original = _mc()
        clone = clone_exercise(original, Mulberry32(1), "orig:lesson_1_1")
        digest = to_hex(fnv1a32(f"orig:lesson_1_1|ex_2|{original.prompt}"))
        assert clone.id == f"ex_2{PRACTICE_MARKER}{digest}"

    def test_clone_keeps_answer_and_option_set(self):
        original = _mc()
        clone = clone_exercise(original, Mulberry32(42), "salt")
        assert clone.correct_answer == original.correct_answer
        assert sorted(clone.options) == sorted(original.options)
        assert base_exercise_id(clone.id) == original.id
        assert clone.prompt == original.prompt

    def test_original_untouched(self):
        original = _mc()
        clone_exercise(original, Mulberry32(42), "salt")
        assert original.options == ["Physical Strength", "Financial Wealth", "Thought/Focus", "Social Status"]
        assert original.id == "ex_2"

    def test_clone_without_options(self):
        original = TrueFalseExercise(id="tf_1", prompt="Nothing rests.", correct_answer=True)
        clone = clone_exercise(original, Mulberry32(3), "salt")
        assert clone.options is None
        assert clone.correct_answer is True

    def test_same_salt_same_id(self):
        a = clone_exercise(_mc(), Mulberry32(1), "salt")
        b = clone_exercise(_mc(), Mulberry32(2), "salt")
        assert a.id == b.id


class TestDedupeKey:
    def test_whitespace_normalized(self):
        a = _mc()
        b = a.model_copy(update={"id": "other", "prompt": f"  {a.prompt.replace(' ', '   ')} "})
        assert dedupe_key(a) == dedupe_key(b)

    def test_type_is_part_of_key(self):
        mc = MultipleChoiceExercise(id="a", prompt="Same prompt", options=["x", "y"], correct_answer="x")
        tf = TrueFalseExercise(id="b", prompt="Same prompt", correct_answer=True)
        assert dedupe_key(mc) != dedupe_key(tf)
