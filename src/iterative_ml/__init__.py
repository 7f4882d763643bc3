"""
Iterative learning algorithms expressed as map/aggregate rounds over a
partitioned dataset.

Provided:
- Linear SVM and linear regression trained by diminishing-step gradient descent
- Lloyd's KMeans with a centroid-movement stopping rule
- Seeded RNG and Poisson sampler, checksum and zero-vector helpers
- An in-process partitioned dataset and synthetic SVM data
"""

__all__ = ["cli", "config", "convergence", "dataset", "models", "rng", "utils"]
