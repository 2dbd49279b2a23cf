"""Bounded queue that closes itself after a period of inactivity."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TimedQueue(Generic[T]):
    """Bounded FIFO queue with an inactivity timer.

    A watcher thread closes the queue once ``idle_timeout`` seconds pass
    without a successful send or receive. When the timer fires while items
    are still buffered the queue stays open: the timer is rearmed and
    ``on_idle_reset`` is called instead, so unread data is never dropped
    because a slow consumer has not caught up yet.

    ``send()`` blocks while the queue is full and ``receive()`` blocks while
    it is empty. Both return a failure result once the queue is closed, they
    never raise for it. ``close()`` may be called any number of times from
    any thread; ``on_close`` runs once, on the call that actually closed the
    queue.
    """

    def __init__(
        self,
        capacity: int,
        idle_timeout: float,
        on_close: Callable[[], None] | None = None,
        on_idle_reset: Callable[[], None] | None = None,
        *,
        name: str | None = None,
        zero: T | None = None,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        if idle_timeout <= 0:
            raise ValueError(f"idle_timeout must be positive, got {idle_timeout}")

        self._capacity = capacity
        self._idle_timeout = idle_timeout
        self._on_close = on_close
        self._on_idle_reset = on_idle_reset
        self._name = name or f"timed-queue-{id(self):x}"
        self._zero = zero

        self._buffer: deque[T] = deque()
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)
        self._closed = False
        self._closed_event = threading.Event()

        # Single-slot reset signal. Setting an already set event is a no-op,
        # so any burst of activity collapses into one pending reset.
        self._activity = threading.Event()

        self._watcher = threading.Thread(
            target=self._watch,
            name=f"{self._name}-watcher",
            daemon=True,
        )
        self._watcher.start()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return (
            f"TimedQueue(name={self._name!r}, capacity={self._capacity}, "
            f"idle_timeout={self._idle_timeout}, {state})"
        )

    # ── properties ──────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def idle_timeout(self) -> float:
        return self._idle_timeout

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Number of buffered items not yet received."""
        with self._lock:
            return len(self._buffer)

    # ── public API ──────────────────────────────────────────────

    def send(self, value: T) -> bool:
        """Enqueue *value*, blocking while the queue is full.

        Returns False without blocking if the queue is already closed, or
        False once the queue closes while this call waits for space.
        """
        # Unlocked fast path; the flag is checked again under the lock.
        if self._closed:
            return False

        self._activity.set()
        with self._not_full:
            while len(self._buffer) >= self._capacity and not self._closed:
                self._not_full.wait()
            if self._closed:
                return False
            self._buffer.append(value)
            self._not_empty.notify()
        return True

    def receive(self) -> tuple[T | None, bool]:
        """Dequeue the oldest value, blocking while the queue is empty.

        Returns ``(value, True)`` on success. Once the queue is closed and
        drained every call returns ``(zero, False)`` immediately.
        """
        with self._not_empty:
            while not self._buffer and not self._closed:
                self._not_empty.wait()
            if not self._buffer:
                return self._zero, False
            value = self._buffer.popleft()
            self._not_full.notify()
        self._activity.set()
        return value, True

    def close(self) -> None:
        """Close the queue. Calls after the first one do nothing."""
        with self._lock:
            if not self._mark_closed():
                return
        logger.debug(f"Queue {self._name} closed")
        # Wake the watcher so it sees the flag and exits
        self._activity.set()
        if self._on_close is not None:
            self._on_close()

    def wait_closed(self, timeout: float | None = None) -> bool:
        """Block until the queue is closed. Returns False on timeout."""
        return self._closed_event.wait(timeout)

    def __iter__(self) -> Iterator[T]:
        while True:
            value, ok = self.receive()
            if not ok:
                return
            yield value

    def __enter__(self) -> TimedQueue[T]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ── internals ───────────────────────────────────────────────

    def _mark_closed(self) -> bool:
        """Flip the closed flag and wake every blocked caller.

        Must be called with ``self._lock`` held. Returns False if the queue
        was already closed.
        """
        if self._closed:
            return False
        self._closed = True
        self._closed_event.set()
        self._not_empty.notify_all()
        self._not_full.notify_all()
        return True

    def _watch(self) -> None:
        """Idle watcher loop, runs until the queue closes."""
        deadline = time.monotonic() + self._idle_timeout
        while True:
            signalled = self._activity.wait(max(deadline - time.monotonic(), 0))
            with self._lock:
                if self._closed:
                    return
                # A reset that races the expiry always wins over it.
                if signalled or self._activity.is_set():
                    self._activity.clear()
                    deadline = time.monotonic() + self._idle_timeout
                    continue
                if not self._buffer:
                    self._mark_closed()
                    break
                pending = len(self._buffer)
                deadline = time.monotonic() + self._idle_timeout

            logger.debug(
                f"Queue {self._name} idle with {pending} pending items, timer restarted"
            )
            self._invoke(self._on_idle_reset, "idle reset")

        logger.debug(
            f"Queue {self._name} closed after {self._idle_timeout:.3f}s of inactivity"
        )
        self._invoke(self._on_close, "close")

    def _invoke(self, callback: Callable[[], None] | None, kind: str) -> None:
        """Run a callback on the watcher thread, logging any failure."""
        if callback is None:
            return
        try:
            callback()
        except Exception:
            logger.exception(f"Queue {self._name}: {kind} callback failed")
