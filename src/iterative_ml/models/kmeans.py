"""Lloyd's-algorithm KMeans over a partitioned dataset."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from iterative_ml.convergence import DEFAULT_MOVEMENT_THRESHOLD, ConvergenceConfig, ConvergenceTracker
from iterative_ml.dataset import Dataset
from iterative_ml.models.base import IterativeTrainer
from iterative_ml.models.vector import as_vector, check_dimension, zeros
from iterative_ml.utils import InMemoryMetrics, get_logger

logger = get_logger("kmeans")

DEFAULT_SAMPLE_SEED = 1


@dataclass
class ClusterSum:
    """Running feature sum and point count for one cluster."""

    vector: np.ndarray
    count: int = 0


def point_features(record: Any) -> np.ndarray:
    """Features of a bare point or of a ``(label, features)`` example, tuple or list."""
    if isinstance(record, (tuple, list)) and len(record) == 2 and np.ndim(record[1]) == 1:
        return np.atleast_1d(as_vector(record[1]))
    return np.atleast_1d(as_vector(record))


def closest_centroid(record: Any, args: Dict[str, Any]) -> Tuple[int, ClusterSum]:
    """
    Assign a point to the centroid at the smallest squared Euclidean distance.

    ``argmin`` returns the first minimum, so ties go to the lowest index.
    """
    means = args["means"]
    x = point_features(record)
    check_dimension(x, means.shape[1], "point")
    distances = np.sum((means - x) ** 2, axis=1)
    return int(np.argmin(distances)), ClusterSum(x.copy(), 1)


def accumulate(a: ClusterSum, b: ClusterSum) -> ClusterSum:
    a.vector += b.vector
    a.count += b.count
    return a


class KMeans(IterativeTrainer):
    """
    Fields ``means`` (K x D centroids) and ``mse`` (one movement value per
    completed round). Without initial means, K points are sampled without
    replacement on the first ``train`` call.
    """

    name = "kmeans"

    def __init__(
        self,
        dataset: Dataset,
        n_clusters: int,
        init_means: Optional[Sequence[Sequence[float]]] = None,
        max_mse: float = DEFAULT_MOVEMENT_THRESHOLD,
        seed: int = DEFAULT_SAMPLE_SEED,
        metrics: Optional[InMemoryMetrics] = None,
    ) -> None:
        if n_clusters <= 0:
            raise ValueError("n_clusters must be positive")
        super().__init__(dataset, metrics)
        self.n_clusters = n_clusters
        self.seed = seed
        self.tracker = ConvergenceTracker(ConvergenceConfig(threshold=max_mse), name=self.name)
        self._means: Optional[np.ndarray] = None
        if init_means is not None:
            self.means = init_means

    @property
    def means(self) -> Optional[np.ndarray]:
        return self._means

    @means.setter
    def means(self, value: Sequence[Sequence[float]]) -> None:
        means = np.array(value, dtype=np.float64)
        if means.ndim != 2 or means.shape[0] != self.n_clusters:
            raise ValueError(f"Expected {self.n_clusters} centroids of equal dimension, got shape {means.shape}")
        self._means = means

    @property
    def mse(self) -> List[float]:
        return self.tracker.history

    @property
    def D(self) -> Optional[int]:
        return None if self._means is None else self._means.shape[1]

    def _prepare(self) -> None:
        if self._means is not None:
            return
        sample = self.dataset.take_sample(False, self.n_clusters, self.seed).result()
        if len(sample) < self.n_clusters:
            raise ValueError(f"Dataset holds {len(sample)} points, fewer than {self.n_clusters} clusters")
        self.means = [point_features(record) for record in sample]
        logger.info(f"Sampled {self.n_clusters} initial centroids of dimension {self.D}")

    def _round(self, round_idx: int) -> bool:
        previous = self._means.copy()
        sums = (
            self.dataset.map(closest_centroid, {"means": previous})
            .reduce_by_key(accumulate, ClusterSum(zeros(self.D), 0))
            .collect()
            .result()
        )
        updated = previous.copy()
        assigned = set()
        for cluster_id, acc in sums:
            if acc.count > 0:
                updated[cluster_id] = acc.vector / acc.count
                assigned.add(cluster_id)
        for cluster_id in range(self.n_clusters):
            if cluster_id not in assigned:
                logger.warning(f"Cluster {cluster_id} received no points; keeping its previous centroid")

        state = self.tracker.update(previous, updated)
        self._means = updated
        if self.metrics is not None:
            self.metrics.emit_gauge("mse", state.movement, trainer=self.name)
        return state.converged

    def _finish(self, rounds: int, converged: bool) -> None:
        if not converged:
            self.tracker.mark_exhausted()
        logger.info(f"{self.name} finished after {rounds} rounds ({self.tracker.state.stop_reason})")
