"""
Linear models trained by full-batch sub-gradient descent.

Each round maps every ``(label, features)`` example to its loss gradient at
the current weights, sums the gradients, and takes one step with the
diminishing size ``1 / (N * sqrt(t + 1))``. Only the unregularized hinge and
squared losses are computed; L1/L2/elastic-net penalties would slot in as
additional gradient functions.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

import numpy as np

from iterative_ml.dataset import Dataset
from iterative_ml.models.base import IterativeTrainer
from iterative_ml.models.vector import as_vector, check_dimension, zeros
from iterative_ml.utils import InMemoryMetrics, get_logger

logger = get_logger("linear")

Example = Tuple[float, Sequence[float]]
GradientFn = Callable[[Example, Dict[str, Any]], np.ndarray]


def _unpack(example: Example, args: Dict[str, Any]) -> Tuple[float, np.ndarray, np.ndarray]:
    label, features = example
    weights = args["weights"]
    x = as_vector(features)
    check_dimension(x, len(weights), "features")
    return float(label), x, weights


def hinge_loss_gradient(example: Example, args: Dict[str, Any]) -> np.ndarray:
    """Hinge sub-gradient: ``-y * x`` inside the margin, zero outside."""
    label, x, weights = _unpack(example, args)
    if label * float(np.dot(x, weights)) < 1:
        return -label * x
    return zeros(len(x))


def squared_loss_gradient(example: Example, args: Dict[str, Any]) -> np.ndarray:
    label, x, weights = _unpack(example, args)
    return (float(np.dot(x, weights)) - label) * x


def sum_vectors(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    a += b
    return a


class LinearModelTrainer(IterativeTrainer):
    """Generic trainer parameterized by a per-example gradient function."""

    name = "linear"

    def __init__(
        self,
        dataset: Dataset,
        D: int,
        N: Optional[int] = None,
        w: Optional[Sequence[float]] = None,
        gradient: GradientFn = hinge_loss_gradient,
        metrics: Optional[InMemoryMetrics] = None,
    ) -> None:
        if D <= 0:
            raise ValueError("D must be positive")
        if N is not None and N <= 0:
            raise ValueError("N must be positive")
        super().__init__(dataset, metrics)
        self.D = D
        self.N = N
        self.gradient = gradient
        self.w = zeros(D) if w is None else w

    @property
    def w(self) -> np.ndarray:
        return self._w

    @w.setter
    def w(self, value: Sequence[float]) -> None:
        weights = np.array(value, dtype=np.float64)
        check_dimension(weights, self.D, "weights")
        self._w = weights

    def _prepare(self) -> None:
        if self.N is None:
            self.N = self.dataset.count().result()
            logger.info(f"{self.name}: counted N={self.N} examples")
            if self.N == 0:
                raise ValueError("Cannot train on an empty dataset")

    def _round(self, round_idx: int) -> bool:
        gradient = (
            self.dataset.map(self.gradient, {"weights": self._w.copy()})
            .reduce(sum_vectors, zeros(self.D))
            .result()
        )
        check_dimension(gradient, self.D, "gradient")
        self._w -= as_vector(gradient) / (self.N * math.sqrt(round_idx + 1))
        return False


class LinearSVM(LinearModelTrainer):
    """Linear SVM: hinge loss, labels in {-1, +1}."""

    name = "linear_svm"

    def __init__(
        self,
        dataset: Dataset,
        D: int,
        N: Optional[int] = None,
        w: Optional[Sequence[float]] = None,
        metrics: Optional[InMemoryMetrics] = None,
    ) -> None:
        super().__init__(dataset, D, N, w, gradient=hinge_loss_gradient, metrics=metrics)


class LinearRegression(LinearModelTrainer):
    """Least-squares regression: squared loss, real-valued labels."""

    name = "linear_regression"

    def __init__(
        self,
        dataset: Dataset,
        D: int,
        N: Optional[int] = None,
        w: Optional[Sequence[float]] = None,
        metrics: Optional[InMemoryMetrics] = None,
    ) -> None:
        super().__init__(dataset, D, N, w, gradient=squared_loss_gradient, metrics=metrics)
