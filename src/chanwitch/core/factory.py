"""Open a self-closing channel and register it in one step."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ..config import Settings
from ..errors import ChannelExistsError
from .registry import ChannelRegistry
from .timed_queue import TimedQueue


def open_channel(
    registry: ChannelRegistry,
    name: str,
    *,
    capacity: int | None = None,
    idle_timeout: float | None = None,
    on_idle_reset: Callable[[], None] | None = None,
    zero: Any = None,
    settings: Settings | None = None,
) -> TimedQueue[Any]:
    """Create a TimedQueue registered under *name*.

    The queue removes its own registry entry when it closes, whether it
    timed out or was closed explicitly. Unset *capacity* and *idle_timeout*
    come from settings.

    Raises:
        ChannelExistsError: *name* is already registered.
    """
    if name in registry:
        raise ChannelExistsError(name)

    if capacity is None or idle_timeout is None:
        settings = settings or Settings()
        if capacity is None:
            capacity = settings.default_capacity
        if idle_timeout is None:
            idle_timeout = settings.idle_timeout

    def _unregister() -> None:
        registry.remove(name, queue)

    queue: TimedQueue[Any] = TimedQueue(
        capacity,
        idle_timeout,
        on_close=_unregister,
        on_idle_reset=on_idle_reset,
        name=name,
        zero=zero,
    )
    try:
        registry.add(name, queue)
    except ChannelExistsError:
        # Lost a race for the name; stop the watcher before bailing out
        queue.close()
        raise
    return queue
