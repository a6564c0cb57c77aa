"""Hand-off of state-change notifications to the consumer's context.

The classifier notifies synchronously on whatever thread delivers samples.
A UI usually wants those updates on its own loop, so the monitor routes
notifications through a dispatcher.
"""

from __future__ import annotations

import queue
from typing import Callable, Protocol


class Dispatcher(Protocol):
    def dispatch(self, fn: Callable[[], None]) -> None: ...


class ImmediateDispatcher:
    """Run callbacks inline on the calling thread."""

    def dispatch(self, fn: Callable[[], None]) -> None:
        fn()


class QueuedDispatcher:
    """Queue callbacks until the consumer drains them on its own thread.

    Producers may call dispatch() from any thread; drain() must be called
    from the single consumer thread (e.g. once per UI frame).
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[Callable[[], None]] = queue.Queue()

    def dispatch(self, fn: Callable[[], None]) -> None:
        self._queue.put(fn)

    def pending(self) -> int:
        return self._queue.qsize()

    def drain(self, max_items: int | None = None) -> int:
        """Run queued callbacks in submission order.

        Args:
            max_items: Stop after this many callbacks. None runs everything queued.

        Returns:
            Number of callbacks executed.
        """

        done = 0
        while max_items is None or done < max_items:
            try:
                fn = self._queue.get_nowait()
            except queue.Empty:
                break
            fn()
            done += 1
        return done
