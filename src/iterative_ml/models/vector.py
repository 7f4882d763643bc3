"""Vector helpers shared by the trainers."""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

_INT32_SPAN = 1 << 32
_INT32_MIN = -(1 << 31)


def zeros(n: int) -> np.ndarray:
    """Fresh float vector of ``n`` zeros; the additive identity for gradients and sums."""
    if n < 0:
        raise ValueError("n must be non-negative")
    return np.zeros(n, dtype=np.float64)


def as_vector(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=np.float64)


def check_dimension(vector: Sequence[float], expected: int, what: str = "vector") -> None:
    if len(vector) != expected:
        raise ValueError(f"{what} has dimension {len(vector)}, expected {expected}")


def cksum(value: Any) -> int:
    """
    Non-negative 32-bit fingerprint of ``str(value)``.

    Polynomial rolling hash (multiplier 31) wrapped to a signed 32-bit integer
    after every character. Not collision resistant.
    """
    h = 0
    for char in str(value):
        h = (h << 5) - h + ord(char)
        h = (h - _INT32_MIN) % _INT32_SPAN + _INT32_MIN
    return abs(h)
