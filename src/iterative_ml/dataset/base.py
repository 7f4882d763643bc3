"""
Partitioned-dataset contract consumed by the trainers.

Every aggregate operation returns a ``concurrent.futures.Future``. Substrates
that report completion through a node-style ``(err, result)`` callback or a
``data``/``end``/``error`` event stream are adapted with
``future_from_callback`` and ``future_from_stream`` so trainers only ever see
one completion style.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Any, Callable, List, Optional, Protocol

MapFn = Callable[[Any, Any], Any]
ReduceFn = Callable[[Any, Any], Any]
NodeCallback = Callable[[Optional[BaseException], Any], None]


class Dataset(ABC):
    """Lazy, partitioned collection of records."""

    @abstractmethod
    def map(self, fn: MapFn, args: Any = None) -> "Dataset":
        """Apply ``fn(record, args)`` to every record. Nothing runs until an action is called."""
        pass

    @abstractmethod
    def reduce(self, fn: ReduceFn, zero_value: Any) -> Future:
        """Fold all records into one value starting from ``zero_value``."""
        pass

    @abstractmethod
    def reduce_by_key(self, fn: ReduceFn, zero_value: Any) -> "Dataset":
        """Fold ``(key, value)`` records per key, yielding ``(key, aggregate)`` records."""
        pass

    @abstractmethod
    def take_sample(self, with_replacement: bool, count: int, seed: int) -> Future:
        """Draw ``count`` records reproducibly for ``seed``."""
        pass

    @abstractmethod
    def collect(self) -> Future:
        """Materialize every record as a list."""
        pass

    @abstractmethod
    def count(self) -> Future:
        """Number of records."""
        pass


class EventStream(Protocol):
    def on(self, event: str, handler: Callable[..., None]) -> Any:
        ...


def future_from_callback(start: Callable[[NodeCallback], None]) -> Future:
    """
    Wrap an API that reports completion through ``callback(err, result)``.

    ``start`` is invoked immediately with the callback to hand to the API.
    """
    future: Future = Future()

    def _done(err: Optional[BaseException], result: Any = None) -> None:
        if future.done():
            return
        if err is not None:
            future.set_exception(err)
        else:
            future.set_result(result)

    try:
        start(_done)
    except Exception as exc:  # noqa: BLE001
        if not future.done():
            future.set_exception(exc)
    return future


def future_from_stream(stream: EventStream) -> Future:
    """
    Wrap an event-emitting result stream.

    Items from ``data`` events are collected in arrival order and the future
    resolves with that list on ``end``; an ``error`` event fails it.
    """
    future: Future = Future()
    items: List[Any] = []

    def _on_data(item: Any) -> None:
        items.append(item)

    def _on_end(*_: Any) -> None:
        if not future.done():
            future.set_result(items)

    def _on_error(err: BaseException) -> None:
        if not future.done():
            future.set_exception(err)

    stream.on("data", _on_data)
    stream.on("end", _on_end)
    stream.on("error", _on_error)
    return future
