"""Seeded pseudo-random generator for demand realisation."""

import math

import numpy as np

_MASK = 0xFFFFFFFF
_EPSILON = float(np.finfo(np.float64).eps)


def _finite(value) -> bool:
    # Python ints have no float range limit
    return isinstance(value, int) or math.isfinite(value)


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK


class Rng:
    """
    Deterministic Mulberry32 generator.

    Not cryptographic. Two instances built from the same seed always produce
    the same sequence, which is what lets candidate policies be compared
    under matched randomness. Instances must not be shared across runs.
    """

    def __init__(self, seed: int):
        self._state = int(seed) & _MASK

    def next(self) -> float:
        """Uniform draw in [0, 1)."""
        self._state = (self._state + 0x6D2B79F5) & _MASK
        x = self._state
        x = _imul(x ^ (x >> 15), x | 1)
        x ^= (x + _imul(x ^ (x >> 7), x | 61)) & _MASK
        return ((x ^ (x >> 14)) & _MASK) / 4294967296

    def randint(self, min_inclusive: int, max_inclusive: int) -> int:
        """Uniform integer in [min_inclusive, max_inclusive]."""
        if not (_finite(min_inclusive) and _finite(max_inclusive)):
            raise ValueError(
                f"Rng.randint bounds must be finite, got ({min_inclusive}, {max_inclusive})"
            )
        if max_inclusive < min_inclusive:
            raise ValueError(
                f"Rng.randint max must be >= min, got ({min_inclusive}, {max_inclusive})"
            )
        span = max_inclusive - min_inclusive + 1
        return min_inclusive + math.floor(self.next() * span)

    def normal(self, mean: float = 0.0, std_dev: float = 1.0) -> float:
        """Normal variate via the Box-Muller transform (two uniform draws)."""
        u1 = max(self.next(), _EPSILON)
        u2 = self.next()
        z0 = np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)
        return float(mean + z0 * std_dev)
