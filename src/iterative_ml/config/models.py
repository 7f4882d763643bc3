import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from iterative_ml.convergence import DEFAULT_MOVEMENT_THRESHOLD


class Algorithm(str, Enum):
    SVM = "svm"
    REGRESSION = "regression"
    KMEANS = "kmeans"


def _check_keys(section: str, data: Dict[str, Any], allowed: set) -> None:
    for key in data:
        if key not in allowed:
            raise ValueError(f"Unknown {section} key '{key}'")


@dataclass
class SyntheticDataConfig:
    n_samples: int = 1000
    dimensions: int = 10
    seed: int = 0
    n_partitions: int = 4
    max_workers: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: Optional[Dict[str, Any]]) -> "SyntheticDataConfig":
        if not data:
            return cls()
        _check_keys("data", data, {"n_samples", "dimensions", "seed", "n_partitions", "max_workers"})
        base = cls()
        n_samples = int(data.get("n_samples", base.n_samples))
        if n_samples <= 0:
            raise ValueError("data.n_samples must be positive")
        dimensions = int(data.get("dimensions", base.dimensions))
        if dimensions <= 0:
            raise ValueError("data.dimensions must be positive")
        n_partitions = int(data.get("n_partitions", base.n_partitions))
        if n_partitions <= 0:
            raise ValueError("data.n_partitions must be positive")
        max_workers = data.get("max_workers")
        if max_workers is not None:
            max_workers = int(max_workers)
            if max_workers <= 0:
                raise ValueError("data.max_workers must be positive")
        return cls(
            n_samples=n_samples,
            dimensions=dimensions,
            seed=int(data.get("seed", base.seed)),
            n_partitions=n_partitions,
            max_workers=max_workers,
        )


@dataclass
class LinearModelConfig:
    iterations: int = 10

    @classmethod
    def from_mapping(cls, data: Optional[Dict[str, Any]]) -> "LinearModelConfig":
        if not data:
            return cls()
        _check_keys("linear", data, {"iterations"})
        iterations = int(data.get("iterations", cls().iterations))
        if iterations <= 0:
            raise ValueError("linear.iterations must be positive")
        return cls(iterations=iterations)


@dataclass
class KMeansConfig:
    n_clusters: int = 2
    iterations: int = 20
    max_mse: float = DEFAULT_MOVEMENT_THRESHOLD
    seed: int = 1

    @classmethod
    def from_mapping(cls, data: Optional[Dict[str, Any]]) -> "KMeansConfig":
        if not data:
            return cls()
        _check_keys("kmeans", data, {"n_clusters", "iterations", "max_mse", "seed"})
        base = cls()
        n_clusters = int(data.get("n_clusters", base.n_clusters))
        if n_clusters <= 0:
            raise ValueError("kmeans.n_clusters must be positive")
        iterations = int(data.get("iterations", base.iterations))
        if iterations <= 0:
            raise ValueError("kmeans.iterations must be positive")
        max_mse = float(data.get("max_mse", base.max_mse))
        if max_mse < 0:
            raise ValueError("kmeans.max_mse must be non-negative")
        return cls(
            n_clusters=n_clusters,
            iterations=iterations,
            max_mse=max_mse,
            seed=int(data.get("seed", base.seed)),
        )


@dataclass
class TrainingConfig:
    algorithm: Algorithm = Algorithm.SVM
    log_level: str = "INFO"
    data: SyntheticDataConfig = field(default_factory=SyntheticDataConfig)
    linear: LinearModelConfig = field(default_factory=LinearModelConfig)
    kmeans: KMeansConfig = field(default_factory=KMeansConfig)

    @classmethod
    def from_file(cls, path: Path) -> "TrainingConfig":
        path = Path(path)
        text = path.read_text()
        try:
            if path.suffix in {".yaml", ".yml"}:
                data = yaml.safe_load(text) or {}
            else:
                data = json.loads(text)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ValueError(f"Invalid training config at {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Training config at {path} must be a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrainingConfig":
        _check_keys("config", data, {"algorithm", "log_level", "data", "linear", "kmeans"})
        try:
            algorithm = Algorithm(str(data.get("algorithm", Algorithm.SVM.value)))
        except ValueError as exc:
            raise ValueError(f"Unknown algorithm '{data.get('algorithm')}'") from exc
        return cls(
            algorithm=algorithm,
            log_level=str(data.get("log_level", "INFO")).upper(),
            data=SyntheticDataConfig.from_mapping(data.get("data")),
            linear=LinearModelConfig.from_mapping(data.get("linear")),
            kmeans=KMeansConfig.from_mapping(data.get("kmeans")),
        )
