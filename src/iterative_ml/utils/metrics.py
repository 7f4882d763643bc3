"""Per-round instrumentation for trainers: durations, round counts, movement."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


Labels = Tuple[Tuple[str, str], ...]

COUNTER = "counters"
GAUGE = "gauges"
TIMER = "timers"


@dataclass
class MetricPoint:
    value: float
    labels: Labels


class InMemoryMetrics:
    """
    Collects samples in memory, grouped by kind and name.

    Trainers emit a ``round_duration`` timer and a ``rounds`` counter per
    round; KMeans adds an ``mse`` gauge.
    """

    def __init__(self) -> None:
        self._stores: Dict[str, Dict[str, List[MetricPoint]]] = {COUNTER: {}, GAUGE: {}, TIMER: {}}

    @property
    def counters(self) -> Dict[str, List[MetricPoint]]:
        return self._stores[COUNTER]

    @property
    def gauges(self) -> Dict[str, List[MetricPoint]]:
        return self._stores[GAUGE]

    @property
    def timers(self) -> Dict[str, List[MetricPoint]]:
        return self._stores[TIMER]

    def _emit(self, kind: str, name: str, value: float, labels: Dict[str, str]) -> None:
        point = MetricPoint(value=float(value), labels=tuple(labels.items()))
        self._stores[kind].setdefault(name, []).append(point)

    def emit_counter(self, name: str, value: float = 1.0, **labels: str) -> None:
        self._emit(COUNTER, name, value, labels)

    def emit_gauge(self, name: str, value: float, **labels: str) -> None:
        self._emit(GAUGE, name, value, labels)

    def emit_timer(self, name: str, value: float, **labels: str) -> None:
        self._emit(TIMER, name, value, labels)

    def values(self, kind: str, name: str) -> List[float]:
        return [point.value for point in self._stores[kind].get(name, [])]

    def total(self, name: str) -> float:
        """Sum of a counter across all label sets."""
        return sum(self.values(COUNTER, name))

    def snapshot(self) -> Dict[str, Dict[str, List[MetricPoint]]]:
        return {kind: {k: list(v) for k, v in store.items()} for kind, store in self._stores.items()}


class Timer:
    """
    Context manager measuring a block's wall time.

    ``elapsed`` is set on exit, also when an exception escapes the block; the
    sample is only emitted for blocks that complete.
    """

    def __init__(self, sink: Optional[InMemoryMetrics], name: str, **labels: str) -> None:
        self.sink = sink
        self.name = name
        self.labels = labels
        self.elapsed: float = 0.0
        self._start: float | None = None

    def __enter__(self) -> "Timer":
        self._start = time.monotonic()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        if self._start is None:
            return
        self.elapsed = time.monotonic() - self._start
        if self.sink is not None and exc_type is None:
            self.sink.emit_timer(self.name, self.elapsed, **self.labels)
