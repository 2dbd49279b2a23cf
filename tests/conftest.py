"""Pytest configuration and fixtures for chanwitch tests."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator

import pytest

from chanwitch.core import ChannelRegistry, TimedQueue


def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    """Poll *predicate* until it holds or *timeout* seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def wait_until() -> Callable[..., bool]:
    return _wait_until


@pytest.fixture
def registry() -> Iterator[ChannelRegistry]:
    """A registry that is swept after the test."""
    reg = ChannelRegistry()
    yield reg
    reg.close_all()


@pytest.fixture
def make_queue() -> Iterator[Callable[..., TimedQueue]]:
    """Factory for queues that are closed after the test."""
    queues: list[TimedQueue] = []

    def _make(capacity: int = 2, idle_timeout: float = 5.0, **kwargs) -> TimedQueue:
        queue: TimedQueue = TimedQueue(capacity, idle_timeout, **kwargs)
        queues.append(queue)
        return queue

    yield _make
    for queue in queues:
        queue.close()
