import json
import logging
import os
import sys
from logging import Logger
from typing import List, Optional

LOG_LEVEL_ENV_VAR = "LOG_LEVEL"
LOG_JSON_ENV_VAR = "ITERATIVE_ML_LOG_JSON"
ROOT_LOGGER_NAME = "iterative_ml"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, including the thread that ran the round."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def configure_logging(level: Optional[str] = None, json_output: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure root logging for a training run.

    Level comes from ``level``, then ``$LOG_LEVEL``, then INFO. JSON lines are
    used when requested or when ``$ITERATIVE_ML_LOG_JSON`` is truthy. Output goes
    to stdout and, optionally, to ``log_file`` as well.
    """
    effective_level = level or os.getenv(LOG_LEVEL_ENV_VAR) or "INFO"
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    formatter: logging.Formatter
    if json_output or _env_flag(LOG_JSON_ENV_VAR):
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s (%(threadName)s) | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    logging.basicConfig(
        level=getattr(logging, effective_level.upper(), logging.INFO),
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> Logger:
    """Logger under the package namespace, e.g. ``iterative_ml.kmeans``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
