"""Round sequencing shared by every iterative trainer."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from iterative_ml.dataset import Dataset
from iterative_ml.utils import InMemoryMetrics, Timer, get_logger

logger = get_logger("trainer")


class IterativeTrainer(ABC):
    """
    Runs training as a strict sequence of rounds.

    ``train`` hands the round loop to a trainer-owned single worker and returns
    a future. Each round issues one aggregate computation, blocks on its
    result and updates model state before the next round is issued, so at most
    one round is ever in flight. Errors raised by the dataset abort the loop
    and fail the returned future unchanged.
    """

    name = "trainer"

    def __init__(self, dataset: Dataset, metrics: Optional[InMemoryMetrics] = None) -> None:
        self.dataset = dataset
        self.metrics = metrics
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"{self.name}-rounds")
        self._lock = threading.Lock()
        self._running = False

    def train(self, n_iterations: int) -> Future:
        if n_iterations < 1:
            raise ValueError("n_iterations must be at least 1")
        with self._lock:
            if self._running:
                raise RuntimeError(f"{self.name} is already training")
            self._running = True
        try:
            return self._executor.submit(self._train, n_iterations)
        except RuntimeError:
            with self._lock:
                self._running = False
            raise

    def _train(self, n_iterations: int) -> None:
        try:
            self._prepare()
            round_idx = 0
            while True:
                with Timer(self.metrics, "round_duration", trainer=self.name) as timer:
                    converged = self._round(round_idx)
                logger.info(f"{self.name} round {round_idx} done in {timer.elapsed * 1000:.1f} ms")
                if self.metrics is not None:
                    self.metrics.emit_counter("rounds", trainer=self.name)
                round_idx += 1
                if converged or round_idx == n_iterations:
                    break
            self._finish(round_idx, converged)
        finally:
            with self._lock:
                self._running = False

    def _prepare(self) -> None:
        """Hook run once per ``train`` call before the first round."""

    def _finish(self, rounds: int, converged: bool) -> None:
        logger.info(f"{self.name} finished after {rounds} rounds")

    @abstractmethod
    def _round(self, round_idx: int) -> bool:
        """Run one round; return True when training should stop early."""

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "IterativeTrainer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()
