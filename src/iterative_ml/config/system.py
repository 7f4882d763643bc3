"""Locating the training configuration file."""

import os
from pathlib import Path
from typing import Optional, Tuple

from iterative_ml.config.models import TrainingConfig

CONFIG_ENV_VAR = "ITERATIVE_ML_CONFIG"


def resolve_config_path(explicit: Optional[Path] = None) -> Optional[Path]:
    """
    Resolve the training config path.

    An explicit path wins over the ``ITERATIVE_ML_CONFIG`` environment
    variable; relative values are resolved against the working directory.
    Returns None when neither is set.
    """
    candidate = explicit if explicit is not None else os.getenv(CONFIG_ENV_VAR)
    if not candidate:
        return None
    path = Path(candidate)
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    return path


def load_training_config(explicit: Optional[Path] = None) -> Tuple[TrainingConfig, Optional[Path]]:
    """
    Load the training config, falling back to defaults when no file is configured.

    Returns:
        (config, resolved_path)

    Raises:
        FileNotFoundError: if a configured path does not exist.
        ValueError: if the file cannot be parsed or fails validation.
    """
    path = resolve_config_path(explicit)
    if path is None:
        return TrainingConfig(), None
    if not path.exists():
        raise FileNotFoundError(f"Training config not found at {path}")
    return TrainingConfig.from_file(path), path
