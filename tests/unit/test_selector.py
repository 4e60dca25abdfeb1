"""
Unit tests for eligibility, seeding and practice selection.
"""

from datetime import timedelta

import pytest

from kybalion_path.content.models import Course, ExerciseType
from kybalion_path.core.rng import Mulberry32, fnv1a32, to_hex
from kybalion_path.practice import (
    PRACTICE_TYPES,
    PracticeConfig,
    base_exercise_id,
    build_candidate_pool,
    dedupe_key,
    eligible_lessons,
    practice_seed,
    score_exercise,
    select_practice_exercises,
)
from kybalion_path.progress.models import CompletedLesson, PracticeExerciseStats


def _stats(**kwargs):
    return PracticeExerciseStats(**kwargs)


@pytest.fixture
def mc_only_course():
    """One lesson, four authored questions and no prose to derive from."""
    return Course.model_validate({
        "id": "course_test",
        "title": "Test",
        "units": [{
            "id": "unit_1",
            "title": "Unit",
            "order": 1,
            "lessons": [{
                "id": "lesson_1_1",
                "title": "Lesson",
                "exercises": [
                    {
                        "id": f"q{i}",
                        "type": "MULTIPLE_CHOICE",
                        "prompt": f"Question number {i}?",
                        "options": ["alpha", "beta", "gamma"],
                        "correctAnswer": "beta",
                    }
                    for i in range(1, 5)
                ],
            }],
        }],
    })


class TestEligibility:
    def test_new_user_gets_current_lesson(self, en_course, new_user):
        assert [lesson.id for lesson in eligible_lessons(en_course, new_user)] == ["lesson_1_1"]

    def test_current_and_completed_in_course_order(self, en_course, new_user, fixed_now):
        progress = new_user.evolve(
            current_lesson_id="lesson_1_2",
            completed_lessons={"lesson_2_1": CompletedLesson(score=100, completed_at=fixed_now)},
        )
        assert [lesson.id for lesson in eligible_lessons(en_course, progress)] == [
            "lesson_1_2",
            "lesson_2_1",
        ]

    def test_unknown_cursor_falls_back_to_all_lessons(self, en_course, new_user):
        progress = new_user.evolve(current_lesson_id="lesson_missing")
        assert len(eligible_lessons(en_course, progress)) == len(en_course.ordered_lessons())

    def test_seed_string_layout(self, en_course, new_user, fixed_now):
        digest = to_hex(fnv1a32("lesson_1_1"))
        assert practice_seed(en_course, new_user, "en", fixed_now) == (
            f"2025-03-14|xp:0|lessons:{digest}|course:course_1_en|lang:en|eligible:{digest}"
        )

    def test_seed_changes_with_xp_and_day(self, en_course, new_user, fixed_now):
        base = practice_seed(en_course, new_user, "en", fixed_now)
        assert practice_seed(en_course, new_user.evolve(xp=10), "en", fixed_now) != base
        assert practice_seed(en_course, new_user, "en", fixed_now + timedelta(days=1)) != base
        assert practice_seed(en_course, new_user, "en", fixed_now + timedelta(hours=2)) == base


class TestScoring:
    def test_unseen_gets_novelty_bonus(self, en_course, fixed_now):
        exercise = en_course.find_lesson("lesson_1_1").exercises[1]
        assert score_exercise(exercise, {}, fixed_now) == pytest.approx(3.5)

    def test_mistakes_and_elapsed_time_raise_score(self, en_course, fixed_now):
        exercise = en_course.find_lesson("lesson_1_1").exercises[1]
        stats = {"ex_2": _stats(seen_count=2, wrong_count=2, last_seen_at=fixed_now - timedelta(hours=24))}
        assert score_exercise(exercise, stats, fixed_now) == pytest.approx(1 + 4 + 2)

    def test_streak_lowers_score(self, en_course, fixed_now):
        exercise = en_course.find_lesson("lesson_1_1").exercises[1]
        stats = {"ex_2": _stats(seen_count=3, correct_count=3, correct_streak=3, last_seen_at=fixed_now)}
        assert score_exercise(exercise, stats, fixed_now) == pytest.approx(1 - 3.75)

    def test_recency_capped_and_future_clamped(self, en_course, fixed_now):
        exercise = en_course.find_lesson("lesson_1_1").exercises[1]
        old = {"ex_2": _stats(seen_count=1, last_seen_at=fixed_now - timedelta(days=30))}
        future = {"ex_2": _stats(seen_count=1, last_seen_at=fixed_now + timedelta(hours=5))}
        assert score_exercise(exercise, old, fixed_now) == pytest.approx(4.0)
        assert score_exercise(exercise, future, fixed_now) == pytest.approx(1.0)


class TestCandidatePool:
    def test_pool_holds_clones_and_derived(self, en_course):
        lesson = en_course.find_lesson("lesson_1_1")
        pool = build_candidate_pool([lesson], "en", Mulberry32(7), "seed")
        assert len(pool.originals) == len(lesson.exercises)
        assert all("__practice__" in ex.id for ex in pool.originals)
        # Reflection stays out of practice
        assert {base_exercise_id(ex.id) for ex in pool.supported_originals} == {
            ex.id for ex in lesson.exercises if ex.type != "REFLECTION"
        }
        assert all(ex.id.startswith("derived_") for ex in pool.derived)
        assert {ex.type for ex in pool.candidates} <= PRACTICE_TYPES

    def test_supported_types_accept_enum_members(self, en_course):
        lesson = en_course.find_lesson("lesson_1_1")
        pool = build_candidate_pool(
            [lesson], "en", Mulberry32(7), "seed", supported_types={ExerciseType.SCENARIO}
        )
        assert [ex.type for ex in pool.candidates] == ["SCENARIO"]


class TestSelection:
    def test_zero_or_negative_count_returns_empty(self, en_course, new_user, fixed_now):
        assert select_practice_exercises(en_course, new_user, "en", 0, fixed_now) == []
        assert select_practice_exercises(en_course, new_user, "en", -3, fixed_now) == []

    def test_new_user_gets_same_three_prompts_twice(self, en_course, new_user, fixed_now):
        first = select_practice_exercises(en_course, new_user, "en", 3, fixed_now)
        second = select_practice_exercises(en_course, new_user, "en", 3, fixed_now)
        assert len(first) == 3
        assert [ex.prompt for ex in first] == [ex.prompt for ex in second]
        assert [ex.id for ex in first] == [ex.id for ex in second]

    def test_xp_gain_changes_derived_items(self, en_course, new_user, fixed_now):
        before = select_practice_exercises(en_course, new_user, "en", 10, fixed_now)
        after = select_practice_exercises(en_course, new_user.evolve(xp=25), "en", 10, fixed_now)
        assert {ex.id for ex in before} != {ex.id for ex in after}

    def test_no_duplicate_questions(self, en_course, new_user, fixed_now):
        progress = new_user.evolve(
            current_lesson_id="lesson_2_1",
            completed_lessons={
                "lesson_1_1": CompletedLesson(score=80, completed_at=fixed_now),
                "lesson_1_2": CompletedLesson(score=100, completed_at=fixed_now),
            },
        )
        selected = select_practice_exercises(en_course, progress, "en", 25, fixed_now)
        keys = [dedupe_key(ex) for ex in selected]
        assert len(keys) == len(set(keys))
        assert len(selected) <= 25

    def test_only_practice_types(self, en_course, new_user, fixed_now):
        progress = new_user.evolve(
            current_lesson_id="lesson_1_2",
            completed_lessons={"lesson_1_1": CompletedLesson(score=80, completed_at=fixed_now)},
        )
        selected = select_practice_exercises(en_course, progress, "en", 30, fixed_now)
        assert selected
        assert {ex.type for ex in selected} <= {"MULTIPLE_CHOICE", "TRUE_FALSE", "CLOZE", "SCENARIO"}

    def test_frequent_mistakes_come_first(self, en_course, new_user, fixed_now):
        progress = new_user.evolve(practice_stats={"ex_2": _stats(seen_count=5, wrong_count=5)})
        selected = select_practice_exercises(en_course, progress, "en", 1, fixed_now)
        assert base_exercise_id(selected[0].id) == "ex_2"

    def test_cooldown_skips_recently_seen(self, en_course, new_user, fixed_now):
        recent = fixed_now - timedelta(minutes=5)
        cooled = {"ex_1", "ex_2", "ex_3"}
        progress = new_user.evolve(practice_stats={
            exercise_id: _stats(seen_count=1, wrong_count=3, last_seen_at=recent)
            for exercise_id in cooled
        })
        selected = select_practice_exercises(en_course, progress, "en", 1, fixed_now)
        assert len(selected) == 1
        assert base_exercise_id(selected[0].id) not in cooled

    def test_cooldown_off_for_small_pools(self, en_course, new_user, fixed_now):
        recent = fixed_now - timedelta(minutes=5)
        progress = new_user.evolve(practice_stats={
            "ex_2": _stats(seen_count=1, wrong_count=3, last_seen_at=recent),
        })
        selected = select_practice_exercises(en_course, progress, "en", 10, fixed_now)
        assert "ex_2" in {base_exercise_id(ex.id) for ex in selected}

    def test_padding_readmits_cooled_originals(self, mc_only_course, new_user, fixed_now):
        recent = fixed_now - timedelta(minutes=1)
        progress = new_user.evolve(practice_stats={
            exercise_id: _stats(seen_count=1, last_seen_at=recent)
            for exercise_id in ("q1", "q2", "q3")
        })
        selected = select_practice_exercises(mc_only_course, progress, "en", 2, fixed_now)
        assert len(selected) == 2
        assert "q4" in {base_exercise_id(ex.id) for ex in selected}
        keys = [dedupe_key(ex) for ex in selected]
        assert len(keys) == len(set(keys))

    def test_count_capped_by_available_questions(self, mc_only_course, new_user, fixed_now):
        selected = select_practice_exercises(mc_only_course, new_user, "en", 10, fixed_now)
        assert len(selected) == 4

    def test_custom_supported_types(self, en_course, new_user, fixed_now):
        config = PracticeConfig(supported_types={"SCENARIO"})
        selected = select_practice_exercises(en_course, new_user, "en", 5, fixed_now, config=config)
        assert [ex.type for ex in selected] == ["SCENARIO"]

    def test_clones_keep_correct_answers(self, en_course, new_user, fixed_now):
        originals = {ex.id: ex for lesson in en_course.ordered_lessons() for ex in lesson.exercises}
        for ex in select_practice_exercises(en_course, new_user, "en", 10, fixed_now):
            original = originals.get(base_exercise_id(ex.id))
            if original is not None:
                assert ex.correct_answer == original.correct_answer
