"""
Reflection grading via the grading proxy, with a local fallback.
"""

from .reflection import ReflectionFeedback, ReflectionGrader, simulate_evaluation

__all__ = [
    "ReflectionFeedback",
    "ReflectionGrader",
    "simulate_evaluation",
]
