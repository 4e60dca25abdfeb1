"""
Practice generation: eligibility, synthesis, pooling and selection.
"""

from kybalion_path.core.clock import day_key

from .eligibility import eligible_lessons, practice_seed
from .identity import PRACTICE_MARKER, base_exercise_id, clone_exercise, dedupe_key
from .pool import PRACTICE_TYPES, CandidatePool, build_candidate_pool
from .selector import PracticeConfig, score_exercise, select_practice_exercises
from .stats import is_gate_satisfied, merge_stats

__all__ = [
    "PRACTICE_MARKER",
    "PRACTICE_TYPES",
    "CandidatePool",
    "PracticeConfig",
    "base_exercise_id",
    "build_candidate_pool",
    "clone_exercise",
    "day_key",
    "dedupe_key",
    "eligible_lessons",
    "is_gate_satisfied",
    "merge_stats",
    "practice_seed",
    "score_exercise",
    "select_practice_exercises",
]
