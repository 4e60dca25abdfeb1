"""
Seeded hashing and pseudo-random primitives.

Everything that shuffles or makes a probabilistic choice during practice
generation draws from a Mulberry32 stream seeded via FNV-1a, so a practice
set can be replayed exactly from its seed string.

Components:
- fnv1a32: 32-bit FNV-1a hash over UTF-8 bytes
- Mulberry32: restartable float stream in [0, 1)
- shuffle / pick_one: rng-driven helpers that never touch `random`
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

T = TypeVar("T")

Rng = Callable[[], float]

MASK_32 = 0xFFFFFFFF

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193

MULBERRY_INCREMENT = 0x6D2B79F5


def fnv1a32(text: str) -> int:
    """
    Hash a string with 32-bit FNV-1a.

    Args:
        text: Arbitrary input, hashed over its UTF-8 encoding

    Returns:
        Unsigned 32-bit hash
    """
    value = FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        value ^= byte
        value = (value * FNV_PRIME) & MASK_32
    return value


def to_hex(value: int) -> str:
    """Format a 32-bit value as 8 lowercase hex digits."""
    return f"{value & MASK_32:08x}"


class Mulberry32:
    """
    Mulberry32 pseudo-random generator.

    Calling the instance advances a 32-bit state and returns a float in
    [0, 1). Two instances built from the same seed yield identical streams.
    """

    def __init__(self, seed: int):
        self._state = seed & MASK_32

    def __call__(self) -> float:
        self._state = (self._state + MULBERRY_INCREMENT) & MASK_32
        x = self._state
        x = ((x ^ (x >> 15)) * (x | 1)) & MASK_32
        x ^= (x + (((x ^ (x >> 7)) * (x | 61)) & MASK_32)) & MASK_32
        return ((x ^ (x >> 14)) & MASK_32) / 4294967296

    def random(self) -> float:
        """Alias matching the `random.Random.random` spelling."""
        return self()

    @classmethod
    def from_string(cls, seed: str) -> Mulberry32:
        """Build a generator from an arbitrary seed string."""
        return cls(fnv1a32(seed))


def shuffle(items: Sequence[T], rng: Rng) -> list[T]:
    """Return a Fisher-Yates shuffled copy of `items`."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = int(rng() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result


def pick_one(items: Sequence[T], rng: Rng) -> T:
    """Pick one element of a non-empty sequence."""
    return items[int(rng() * len(items))]
