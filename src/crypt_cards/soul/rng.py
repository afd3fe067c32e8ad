"""Deterministic random number generation for procedural identities.

Two generators are provided:
- ``hash_to_seeds`` folds a string (usually a transaction signature) into a
  32-bit hash and expands it through a Park-Miller style LCG step into a
  fixed-length list of floats in [0, 1).
- ``Mulberry32`` is a fast 32-bit mix-and-shift generator seeded with a
  single integer.

Everything is emulated with explicit 32-bit masks so the sequences are
identical across processes and platforms.
"""

from __future__ import annotations

import math

DEFAULT_SEED_COUNT = 30

_MASK_32 = 0xFFFFFFFF
_LCG_MULTIPLIER = 16807
_LCG_INCREMENT = 2147483647
_MULBERRY_INCREMENT = 0x6D2B79F5
_SKULL_SEED_SCALE = 999_999


def _to_int32(value: int) -> int:
    """Wrap an arbitrary integer to a signed 32-bit value."""
    value &= _MASK_32
    return value - 0x1_0000_0000 if value & 0x8000_0000 else value


def _imul(a: int, b: int) -> int:
    """Multiply two integers with unsigned 32-bit overflow."""
    return (a * b) & _MASK_32


def string_hash(seed: str) -> int:
    """Hash a string to a signed 32-bit integer (``h * 31 + code``)."""
    h = 0
    for char in seed:
        h = _to_int32((h << 5) - h + ord(char))
    return h


def hash_to_seeds(seed: str, count: int = DEFAULT_SEED_COUNT) -> list[float]:
    """Expand a seed string into ``count`` uniform floats in [0, 1).

    Args:
        seed: Seed string, typically a transaction signature.
        count: Number of floats to produce.

    Returns:
        List of floats, identical for identical seeds.
    """
    h = string_hash(seed)
    seeds: list[float] = []
    for _ in range(count):
        h = _to_int32(h * _LCG_MULTIPLIER + _LCG_INCREMENT)
        seeds.append((h & 0x7FFFFFFF) / 0x80000000)
    return seeds


class Mulberry32:
    """Seeded 32-bit generator yielding floats in [0, 1).

    Example:
        ```python
        rng = Mulberry32(42)
        a = rng.random()
        b = rng.randint(8)  # 0..7
        ```
    """

    def __init__(self, seed: int) -> None:
        self._state = seed & _MASK_32

    @property
    def state(self) -> int:
        """Current internal 32-bit state."""
        return self._state

    def next_uint32(self) -> int:
        """Advance the generator and return the next unsigned 32-bit value."""
        self._state = (self._state + _MULBERRY_INCREMENT) & _MASK_32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK_32
        return (t ^ (t >> 14)) & _MASK_32

    def random(self) -> float:
        """Return the next float in [0, 1)."""
        return self.next_uint32() / 4294967296

    def randint(self, n: int) -> int:
        """Return ``floor(random() * n)``, an integer in [0, n)."""
        return math.floor(self.random() * n)

    def __call__(self) -> float:
        return self.random()


def rng_from_hash(tx_hash: str) -> Mulberry32:
    """Build the generator used for skull generation from a transaction hash."""
    seeds = hash_to_seeds(tx_hash)
    return Mulberry32(math.floor(seeds[0] * _SKULL_SEED_SCALE))
