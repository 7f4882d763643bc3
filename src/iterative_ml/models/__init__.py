from iterative_ml.models.base import IterativeTrainer
from iterative_ml.models.kmeans import ClusterSum, KMeans, accumulate, closest_centroid, point_features
from iterative_ml.models.linear import (
    LinearModelTrainer,
    LinearRegression,
    LinearSVM,
    hinge_loss_gradient,
    squared_loss_gradient,
)
from iterative_ml.models.vector import cksum, zeros

__all__ = [
    "ClusterSum",
    "IterativeTrainer",
    "KMeans",
    "LinearModelTrainer",
    "LinearRegression",
    "LinearSVM",
    "accumulate",
    "cksum",
    "closest_centroid",
    "hinge_loss_gradient",
    "point_features",
    "squared_loss_gradient",
    "zeros",
]
