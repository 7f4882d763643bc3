"""
In-process partitioned dataset.

A ``LocalContext`` owns two executors: a single driver thread that runs one
action at a time, and a worker pool evaluating partitions in parallel. Datasets
are lazy pipelines of map stages over a partition source. Sources behind a
``reduce_by_key`` are resolved on the driver before any partition of the
downstream stages runs, so worker tasks never wait on other worker tasks.
"""

from __future__ import annotations

import copy
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from iterative_ml.dataset.base import Dataset, MapFn, ReduceFn
from iterative_ml.rng import Random
from iterative_ml.utils import get_logger

logger = get_logger("dataset")

Partition = List[Any]
PartitionSource = Callable[[int], Partition]
SourceResolver = Callable[[], PartitionSource]


def _split(records: Sequence[Any], n_partitions: int) -> List[Partition]:
    size, extra = divmod(len(records), n_partitions)
    partitions: List[Partition] = []
    start = 0
    for p in range(n_partitions):
        end = start + size + (1 if p < extra else 0)
        partitions.append(list(records[start:end]))
        start = end
    return partitions


class LocalContext:
    """Execution context shared by every dataset derived from it."""

    def __init__(self, max_workers: Optional[int] = None) -> None:
        self._workers = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="iterative-ml-worker")
        self._driver = ThreadPoolExecutor(max_workers=1, thread_name_prefix="iterative-ml-driver")
        self._closed = False
        self._lock = threading.Lock()

    def parallelize(self, records: Iterable[Any], n_partitions: int = 1) -> "LocalDataset":
        """Distribute an in-memory collection over ``n_partitions`` partitions."""
        if n_partitions <= 0:
            raise ValueError("n_partitions must be positive")
        partitions = _split(list(records), n_partitions)
        return LocalDataset(self, n_partitions, lambda: partitions.__getitem__)

    def generate(
        self,
        n_records: int,
        fn: Callable[[int, Any], Any],
        args: Any = None,
        n_partitions: int = 1,
    ) -> "LocalDataset":
        """
        Dataset whose i-th record is ``fn(i, args)``.

        Records are produced when a partition is evaluated, so each one depends
        only on its index and not on how the range is partitioned.
        """
        if n_records < 0:
            raise ValueError("n_records must be non-negative")
        if n_partitions <= 0:
            raise ValueError("n_partitions must be positive")
        bounds = _split(range(n_records), n_partitions)
        snapshot = copy.deepcopy(args)

        def _source(partition: int) -> Partition:
            return [fn(i, snapshot) for i in bounds[partition]]

        return LocalDataset(self, n_partitions, lambda: _source)

    def run_job(self, job: Callable[[], Any]) -> Future:
        with self._lock:
            if self._closed:
                raise RuntimeError("LocalContext is closed")
            return self._driver.submit(job)

    def run_partitions(self, fn: Callable[[int], Any], n_partitions: int) -> List[Any]:
        return list(self._workers.map(fn, range(n_partitions)))

    def close(self) -> None:
        with self._lock:
            self._closed = True
        self._driver.shutdown(wait=True)
        self._workers.shutdown(wait=True)

    def __enter__(self) -> "LocalContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()


class LocalDataset(Dataset):
    """Lazy dataset evaluated partition by partition on a ``LocalContext``."""

    def __init__(
        self,
        context: LocalContext,
        n_partitions: int,
        resolve: SourceResolver,
        stages: Tuple[Tuple[MapFn, Any], ...] = (),
    ) -> None:
        self.context = context
        self.n_partitions = n_partitions
        self._resolve = resolve
        self._stages = stages

    def map(self, fn: MapFn, args: Any = None) -> "LocalDataset":
        stage = (fn, copy.deepcopy(args))
        return LocalDataset(self.context, self.n_partitions, self._resolve, self._stages + (stage,))

    def _run(self, per_partition: Callable[[Partition], Any]) -> List[Any]:
        """Evaluate every partition on the worker pool. Must run on the driver."""
        source = self._resolve()
        stages = self._stages

        def _task(partition: int) -> Any:
            records = source(partition)
            for fn, args in stages:
                records = [fn(record, args) for record in records]
            return per_partition(records)

        return self.context.run_partitions(_task, self.n_partitions)

    def _records(self) -> List[Any]:
        return [record for partition in self._run(list) for record in partition]

    def reduce(self, fn: ReduceFn, zero_value: Any) -> Future:
        def _fold(records: Partition) -> Any:
            acc = copy.deepcopy(zero_value)
            for record in records:
                acc = fn(acc, record)
            return acc

        def _job() -> Any:
            result = copy.deepcopy(zero_value)
            for partial in self._run(_fold):
                result = fn(result, partial)
            return result

        return self.context.run_job(_job)

    def reduce_by_key(self, fn: ReduceFn, zero_value: Any) -> "LocalDataset":
        def _fold(records: Partition) -> Dict[Any, Any]:
            groups: Dict[Any, Any] = {}
            for key, value in records:
                if key not in groups:
                    groups[key] = copy.deepcopy(zero_value)
                groups[key] = fn(groups[key], value)
            return groups

        def _resolve() -> PartitionSource:
            merged: Dict[Any, Any] = {}
            for groups in self._run(_fold):
                for key, partial in groups.items():
                    if key in merged:
                        merged[key] = fn(merged[key], partial)
                    else:
                        merged[key] = partial
            return _split(list(merged.items()), self.n_partitions).__getitem__

        return LocalDataset(self.context, self.n_partitions, _resolve)

    def collect(self) -> Future:
        return self.context.run_job(self._records)

    def count(self) -> Future:
        def _job() -> int:
            return sum(self._run(len))

        return self.context.run_job(_job)

    def take_sample(self, with_replacement: bool, count: int, seed: int) -> Future:
        if count < 0:
            raise ValueError("count must be non-negative")

        def _job() -> List[Any]:
            records = self._records()
            rng = Random(seed)
            if with_replacement:
                if not records:
                    return []
                return [records[min(int(rng.next_double() * len(records)), len(records) - 1)] for _ in range(count)]
            pool = list(records)
            picked: List[Any] = []
            for _ in range(min(count, len(pool))):
                idx = min(int(rng.next_double() * len(pool)), len(pool) - 1)
                pool[idx], pool[-1] = pool[-1], pool[idx]
                picked.append(pool.pop())
            logger.debug("Sampled %d of %d records (seed=%d)", len(picked), len(records), seed)
            return picked

        return self.context.run_job(_job)
