"""Synthetic linearly-separable-ish SVM data drawn from the seeded RNG."""

from __future__ import annotations

import math
from typing import Any, Dict, Tuple

import numpy as np

from iterative_ml.dataset.local import LocalContext, LocalDataset
from iterative_ml.rng import Random, sine_draw

Example = Tuple[int, np.ndarray]


def svm_label(value: float) -> int:
    """+/-1 label from a draw; halves round up."""
    return int(math.floor(abs(value) + 0.5)) * 2 - 1


def _split(data: np.ndarray) -> Example:
    return svm_label(data[0]), data[1:]


def random_svm_line(rng: Random, D: int) -> Example:
    """
    Draw one ``(label, features)`` example.

    The first of ``D + 1`` draws becomes a +/-1 label, the rest the features.
    """
    return _split(rng.randn(D + 1))


def _svm_record(i: int, args: Dict[str, Any]) -> Example:
    # Seeds are used as-is, so record 0 of seed 0 starts at sin(0).
    D = args["D"]
    start = args["seed"] + i * (D + 1)
    return _split(np.array([sine_draw(start + j) for j in range(D + 1)], dtype=np.float64))


def random_svm_data(
    context: LocalContext,
    N: int,
    D: int,
    seed: int = 0,
    n_partitions: int = 1,
) -> LocalDataset:
    """
    N synthetic examples; record i is a pure function of ``seed``, ``i`` and ``D``.

    Record i consumes the ``D + 1`` consecutive seeds starting at
    ``seed + i * (D + 1)``, so no two records share a draw.
    """
    if D <= 0:
        raise ValueError("D must be positive")
    return context.generate(N, _svm_record, {"D": D, "seed": seed}, n_partitions)
