"""Seeded pseudo-random streams used for sampling and synthetic data."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np


def sine_draw(seed: int) -> float:
    """Draw in [-1, 1) for one seed; any integer seed is accepted, 0 included."""
    x = math.sin(seed) * 10000
    return (x - math.floor(x)) * 2 - 1


class Random:
    """
    Replayable generator driven by a single integer seed.

    Each draw is a pure function of the current seed, which is then advanced
    by one. Values lie in [-1, 1); only a seed of exactly 0 yields -1.
    """

    def __init__(self, seed: Optional[int] = 1) -> None:
        self.initial_seed = seed or 1
        self.seed = self.initial_seed

    def next(self) -> float:
        value = sine_draw(self.seed)
        self.seed += 1
        return value

    def reset(self) -> None:
        self.seed = self.initial_seed

    def randn(self, n: int) -> np.ndarray:
        # Filled from next(), so uniform rather than normal.
        out = np.empty(n, dtype=np.float64)
        for i in range(n):
            out[i] = self.next()
        return out

    def next_double(self) -> float:
        # Must stay uniform: Poisson sampling relies on it.
        return 0.5 * self.next() + 0.5


class Poisson:
    """Poisson(lam) draws using Knuth's multiplicative method."""

    def __init__(self, lam: float, seed: Optional[int] = 1) -> None:
        if lam < 0:
            raise ValueError("lam must be non-negative")
        self.lam = lam
        self.rng = Random(seed)

    def sample(self) -> int:
        limit = math.exp(-self.lam)
        k = 0
        p = 1.0
        while True:
            k += 1
            p *= self.rng.next_double()
            if p <= limit:
                return k - 1
