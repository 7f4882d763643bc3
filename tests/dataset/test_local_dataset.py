from concurrent.futures import Future
from typing import Callable, Dict, List

import pytest

from iterative_ml.dataset import LocalContext, future_from_callback, future_from_stream


@pytest.fixture
def context():
    ctx = LocalContext(max_workers=3)
    yield ctx
    ctx.close()


def _add(a: int, b: int) -> int:
    return a + b


def test_map_reduce_over_partitions(context: LocalContext) -> None:
    data = context.parallelize(range(1, 11), n_partitions=3)
    total = data.map(lambda x, args: x * args["factor"], {"factor": 2}).reduce(_add, 0)
    assert total.result(timeout=5) == 110


def test_map_args_are_snapshotted(context: LocalContext) -> None:
    args = {"offset": 1}
    mapped = context.parallelize([1, 2, 3], n_partitions=2).map(lambda x, a: x + a["offset"], args)
    args["offset"] = 100
    assert mapped.collect().result(timeout=5) == [2, 3, 4]


def test_reduce_zero_value_not_shared_between_partitions(context: LocalContext) -> None:
    def append(acc: List[int], x: object) -> List[int]:
        if isinstance(x, list):
            acc.extend(x)
        else:
            acc.append(x)
        return acc

    zero: List[int] = []
    result = context.parallelize([1, 2, 3, 4], n_partitions=2).reduce(append, zero).result(timeout=5)
    assert sorted(result) == [1, 2, 3, 4]
    assert zero == []


def test_reduce_by_key_groups_and_maps(context: LocalContext) -> None:
    records = [("a", 1), ("b", 2), ("a", 3), ("c", 4), ("b", 5)]
    grouped = context.parallelize(records, n_partitions=3).reduce_by_key(_add, 0)
    assert dict(grouped.collect().result(timeout=5)) == {"a": 4, "b": 7, "c": 4}
    doubled = grouped.map(lambda kv, _: (kv[0], kv[1] * 2))
    assert dict(doubled.collect().result(timeout=5)) == {"a": 8, "b": 14, "c": 8}


def test_collect_preserves_order_and_count(context: LocalContext) -> None:
    data = context.parallelize(list(range(17)), n_partitions=4)
    assert data.collect().result(timeout=5) == list(range(17))
    assert data.count().result(timeout=5) == 17


def test_more_partitions_than_records(context: LocalContext) -> None:
    data = context.parallelize([1, 2], n_partitions=5)
    assert data.reduce(_add, 0).result(timeout=5) == 3


def test_take_sample_without_replacement(context: LocalContext) -> None:
    data = context.parallelize(range(50), n_partitions=4)
    sample = data.take_sample(False, 10, seed=3).result(timeout=5)
    assert len(sample) == 10
    assert len(set(sample)) == 10
    assert set(sample) <= set(range(50))
    assert data.take_sample(False, 10, seed=3).result(timeout=5) == sample
    assert len(data.take_sample(False, 80, seed=3).result(timeout=5)) == 50


def test_take_sample_with_replacement(context: LocalContext) -> None:
    data = context.parallelize(range(3))
    sample = data.take_sample(True, 20, seed=1).result(timeout=5)
    assert len(sample) == 20
    assert set(sample) <= {0, 1, 2}


def test_generate_is_partition_independent(context: LocalContext) -> None:
    def record(i: int, args: Dict[str, int]) -> int:
        return i * args["k"]

    one = context.generate(10, record, {"k": 3}, n_partitions=1).collect().result(timeout=5)
    many = context.generate(10, record, {"k": 3}, n_partitions=4).collect().result(timeout=5)
    assert one == many == [i * 3 for i in range(10)]


def test_map_errors_fail_the_action(context: LocalContext) -> None:
    def boom(x: int, _: object) -> int:
        if x == 3:
            raise KeyError("bad record")
        return x

    future = context.parallelize(range(5), n_partitions=2).map(boom).reduce(_add, 0)
    with pytest.raises(KeyError):
        future.result(timeout=5)


def test_closed_context_rejects_actions() -> None:
    ctx = LocalContext()
    data = ctx.parallelize([1])
    ctx.close()
    with pytest.raises(RuntimeError):
        data.collect()


def test_invalid_partition_count(context: LocalContext) -> None:
    with pytest.raises(ValueError):
        context.parallelize([1], n_partitions=0)


class FakeEmitter:
    """Minimal event emitter standing in for a streaming result."""

    def __init__(self) -> None:
        self.handlers: Dict[str, List[Callable]] = {}

    def on(self, event: str, handler: Callable) -> "FakeEmitter":
        self.handlers.setdefault(event, []).append(handler)
        return self

    def emit(self, event: str, *args: object) -> None:
        for handler in self.handlers.get(event, []):
            handler(*args)


def test_future_from_stream_collects_items() -> None:
    emitter = FakeEmitter()
    future = future_from_stream(emitter)
    emitter.emit("data", [1.0])
    emitter.emit("data", [2.0])
    assert not future.done()
    emitter.emit("end")
    assert future.result(timeout=1) == [[1.0], [2.0]]


def test_future_from_stream_error() -> None:
    emitter = FakeEmitter()
    future = future_from_stream(emitter)
    emitter.emit("error", IOError("partition lost"))
    with pytest.raises(IOError):
        future.result(timeout=1)


def test_future_from_callback_success_and_failure() -> None:
    ok = future_from_callback(lambda cb: cb(None, 42))
    assert ok.result(timeout=1) == 42

    failed = future_from_callback(lambda cb: cb(RuntimeError("worker died"), None))
    with pytest.raises(RuntimeError):
        failed.result(timeout=1)


def test_future_from_callback_deferred_and_sync_raise() -> None:
    pending: Dict[str, Callable] = {}
    deferred = future_from_callback(lambda cb: pending.setdefault("cb", cb))
    assert isinstance(deferred, Future) and not deferred.done()
    pending["cb"](None, "late")
    assert deferred.result(timeout=1) == "late"

    def start(cb: Callable) -> None:
        raise ValueError("rejected")

    with pytest.raises(ValueError):
        future_from_callback(start).result(timeout=1)
