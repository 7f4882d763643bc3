"""
Train a model on synthetic SVM data.

Usage:
  iterative-ml svm --iterations 20
  iterative-ml kmeans --config config/kmeans.yaml
"""

from __future__ import annotations

import argparse
import dataclasses
from pathlib import Path
from typing import Any, Dict, List, Optional

from iterative_ml.config import Algorithm, SyntheticDataConfig, TrainingConfig, load_training_config
from iterative_ml.dataset import LocalContext, random_svm_data
from iterative_ml.models import KMeans, LinearRegression, LinearSVM
from iterative_ml.utils import InMemoryMetrics, configure_logging, get_logger

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="iterative-ml", description="Train a model on synthetic SVM data.")
    parser.add_argument("algorithm", nargs="?", choices=[a.value for a in Algorithm], help="Overrides the config file")
    parser.add_argument("--config", type=Path, help="JSON or YAML training config (default: $ITERATIVE_ML_CONFIG)")
    parser.add_argument("--iterations", type=int, help="Round cap for the selected algorithm")
    parser.add_argument("--samples", type=int, help="Number of synthetic examples")
    parser.add_argument("--dimensions", type=int, help="Feature dimension")
    parser.add_argument("--partitions", type=int, help="Number of dataset partitions")
    parser.add_argument("--seed", type=int, help="Synthetic data seed")
    parser.add_argument("--log-level", help="Log level (default: config, then $LOG_LEVEL)")
    parser.add_argument("--json-logs", action="store_true", help="Emit structured log lines")
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def apply_overrides(cfg: TrainingConfig, args: argparse.Namespace) -> TrainingConfig:
    if args.algorithm:
        cfg.algorithm = Algorithm(args.algorithm)
    data_overrides = {
        "n_samples": args.samples,
        "dimensions": args.dimensions,
        "n_partitions": args.partitions,
        "seed": args.seed,
    }
    data = dataclasses.asdict(cfg.data)
    data.update({k: v for k, v in data_overrides.items() if v is not None})
    cfg.data = SyntheticDataConfig.from_mapping(data)
    if args.iterations is not None:
        if args.iterations <= 0:
            raise ValueError("--iterations must be positive")
        if cfg.algorithm is Algorithm.KMEANS:
            cfg.kmeans.iterations = args.iterations
        else:
            cfg.linear.iterations = args.iterations
    if args.log_level:
        cfg.log_level = args.log_level.upper()
    return cfg


def run_training(cfg: TrainingConfig, metrics: Optional[InMemoryMetrics] = None) -> Dict[str, Any]:
    """Train the configured algorithm and return a summary of the final model."""
    with LocalContext(max_workers=cfg.data.max_workers) as context:
        data = random_svm_data(
            context,
            cfg.data.n_samples,
            cfg.data.dimensions,
            seed=cfg.data.seed,
            n_partitions=cfg.data.n_partitions,
        )
        if cfg.algorithm is Algorithm.KMEANS:
            kmeans = KMeans(
                data,
                cfg.kmeans.n_clusters,
                max_mse=cfg.kmeans.max_mse,
                seed=cfg.kmeans.seed,
                metrics=metrics,
            )
            try:
                kmeans.train(cfg.kmeans.iterations).result()
            finally:
                kmeans.close()
            return {
                "algorithm": cfg.algorithm.value,
                "means": kmeans.means.tolist(),
                "mse": list(kmeans.mse),
                "stop_reason": kmeans.tracker.state.stop_reason,
            }

        model_cls = LinearSVM if cfg.algorithm is Algorithm.SVM else LinearRegression
        linear = model_cls(data, cfg.data.dimensions, cfg.data.n_samples, metrics=metrics)
        try:
            linear.train(cfg.linear.iterations).result()
        finally:
            linear.close()
        return {"algorithm": cfg.algorithm.value, "weights": linear.w.tolist()}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        cfg, path = load_training_config(args.config)
        cfg = apply_overrides(cfg, args)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))
    configure_logging(level=cfg.log_level, json_output=args.json_logs, log_file=args.log_file)
    if path is not None:
        logger.info(f"Loaded config from {path}")

    metrics = InMemoryMetrics()
    summary = run_training(cfg, metrics)
    rounds = int(metrics.total("rounds"))
    if "weights" in summary:
        logger.info(f"Trained {summary['algorithm']} for {rounds} rounds; weights={summary['weights']}")
    else:
        logger.info(f"KMeans stopped after {rounds} rounds ({summary['stop_reason']}); means={summary['means']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
