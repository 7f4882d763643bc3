from .models import Algorithm, KMeansConfig, LinearModelConfig, SyntheticDataConfig, TrainingConfig
from .system import CONFIG_ENV_VAR, load_training_config, resolve_config_path

__all__ = [
    "Algorithm",
    "CONFIG_ENV_VAR",
    "KMeansConfig",
    "LinearModelConfig",
    "SyntheticDataConfig",
    "TrainingConfig",
    "load_training_config",
    "resolve_config_path",
]
