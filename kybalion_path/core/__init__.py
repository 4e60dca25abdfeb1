"""
Core Module - Deterministic primitives shared by the practice engine.

Components:
- rng: FNV-1a hashing and the Mulberry32 seeded generator
- text: sentence splitting, keyword extraction, truncation, word substitution
- clock: UTC normalization and the day key

Design Principle:
Nothing in here reads the clock or the global `random` module; callers
pass a seeded `Rng` and the current time explicitly.
"""

from kybalion_path.core.clock import as_utc, day_key
from kybalion_path.core.rng import Mulberry32, Rng, fnv1a32, pick_one, shuffle, to_hex

__all__ = [
    "Mulberry32",
    "Rng",
    "as_utc",
    "day_key",
    "fnv1a32",
    "pick_one",
    "shuffle",
    "to_hex",
]
