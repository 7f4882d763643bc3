"""Movement-based convergence tracking for centroid models."""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from iterative_ml.utils import get_logger

logger = get_logger("convergence")

DEFAULT_MOVEMENT_THRESHOLD = 1e-7


@dataclass
class ConvergenceConfig:
    """Configuration for movement-driven stopping.

    A round converges when the total squared displacement between the previous
    and the new model falls strictly below ``threshold``.
    """

    threshold: float = DEFAULT_MOVEMENT_THRESHOLD

    def __post_init__(self) -> None:
        if self.threshold < 0:
            raise ValueError("threshold must be non-negative")


@dataclass
class ConvergenceState:
    """Current state of convergence tracking."""

    round_idx: int = 0
    history: List[float] = field(default_factory=list)
    movement: float = float("inf")
    converged: bool = False
    stop_reason: str = ""


def squared_movement(previous: np.ndarray, current: np.ndarray) -> float:
    """Total squared displacement summed over every row and dimension."""
    if previous.shape != current.shape:
        raise ValueError(f"Model shape changed from {previous.shape} to {current.shape}")
    return float(np.sum((current - previous) ** 2))


class ConvergenceTracker:
    """
    Records one movement value per round and decides when to stop.

    The history is append-only and spans every ``train`` call of its owner.
    """

    def __init__(self, config: Optional[ConvergenceConfig] = None, name: str = "model") -> None:
        self.config = config or ConvergenceConfig()
        self.name = name
        self.state = ConvergenceState()

    @property
    def history(self) -> List[float]:
        return self.state.history

    def update(self, previous: np.ndarray, current: np.ndarray) -> ConvergenceState:
        """
        Update state after a round replaced ``previous`` with ``current``.

        Returns:
            Updated convergence state with stop decision.
        """
        movement = squared_movement(previous, current)
        self.state.movement = movement
        self.state.history.append(movement)
        logger.info(f"{self.name} round {self.state.round_idx}: mse={movement:.3e}")

        self.state.converged = movement < self.config.threshold
        if self.state.converged:
            self.state.stop_reason = "converged"
            logger.info(
                f"{self.name} converged at round {self.state.round_idx} "
                f"(mse {movement:.3e} < {self.config.threshold:.1e})"
            )
        self.state.round_idx += 1
        return self.state

    def mark_exhausted(self) -> None:
        if not self.state.converged:
            self.state.stop_reason = "max_rounds_reached"
