"""Closable thread-safe channels and the fan-in used to collect stage errors."""

from __future__ import annotations

import queue
import threading
from typing import Any, Callable, Generic, Iterator, TypeVar

T = TypeVar("T")

_CLOSED = object()


class Channel(Generic[T]):
    """A queue with an explicit close, iterated by exactly one consumer.

    ``maxsize=1`` gives hand-off semantics between stages; ``maxsize=0``
    buffers without bound.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: "queue.Queue[Any]" = queue.Queue(maxsize)
        self._closed = False

    def send(self, item: T) -> None:
        if self._closed:
            raise RuntimeError("send on closed channel")
        self._queue.put(item)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[T]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item


def start_stage(target: Callable[..., None], *args: Any, name: str) -> threading.Thread:
    """Run a pipeline stage body on its own daemon thread."""
    thread = threading.Thread(target=target, args=args, name=name, daemon=True)
    thread.start()
    return thread


def merge_channels(*channels: Channel[T]) -> Channel[T]:
    """Fan several channels into one; the result closes once all inputs are drained."""
    out: Channel[T] = Channel()
    forwarders = []

    def forward(source: Channel[T]) -> None:
        for item in source:
            out.send(item)

    for index, channel in enumerate(channels):
        forwarders.append(start_stage(forward, channel, name=f"fan-in-{index}"))

    def close_when_done() -> None:
        for thread in forwarders:
            thread.join()
        out.close()

    start_stage(close_when_done, name="fan-in-close")
    return out


__all__ = ["Channel", "start_stage", "merge_channels"]
