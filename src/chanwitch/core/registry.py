"""Channel registry — tracks open channels by name."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator

from ..errors import ChannelExistsError, ChannelNotFoundError
from .channel import Closable

logger = logging.getLogger(__name__)


class ChannelRegistry:
    """Thread-safe registry of named channels.

    The registry only indexes handles, it never creates them. Any object
    with an idempotent ``close()`` can be stored. The lock is re-entrant so
    a channel's close callback may call back into the registry while the
    registry itself is closing that channel.
    """

    def __init__(self) -> None:
        self._channels: dict[str, Closable] = {}
        self._lock = threading.RLock()
        # Names whose close() is running on the lock-holding thread
        self._closing: set[str] = set()

    def add(self, name: str, channel: Closable) -> None:
        """Register a channel under a name that is not in use yet."""
        # Handles may resolve close() dynamically (proxies, mocks)
        if not callable(getattr(channel, "close", None)):
            raise TypeError(
                f"Channel '{name}' must provide close(), got {type(channel).__name__}"
            )
        with self._lock:
            if name in self._channels:
                raise ChannelExistsError(name)
            self._channels[name] = channel
        logger.info(f"Registered channel: {name}")

    def get(self, name: str) -> Closable | None:
        """Get a channel by name."""
        with self._lock:
            return self._channels.get(name)

    def remove(self, name: str, channel: Closable | None = None) -> None:
        """Drop a channel without closing it.

        When *channel* is given the entry is only dropped if the name still
        maps to that exact handle.
        """
        with self._lock:
            current = self._channels.get(name)
            if current is None:
                return
            if channel is not None and current is not channel:
                return
            del self._channels[name]
        logger.debug(f"Removed channel: {name}")

    def close(self, name: str) -> None:
        """Close a channel and drop it from the registry.

        A close callback that closes its own channel again by name returns
        quietly instead of raising.
        """
        with self._lock:
            if name in self._closing:
                return
            channel = self._channels.pop(name, None)
            if channel is None:
                raise ChannelNotFoundError(name)
            self._closing.add(name)
            try:
                channel.close()
            finally:
                self._closing.discard(name)
        logger.info(f"Closed channel: {name}")

    def close_all(self) -> None:
        """Close and drop every registered channel."""
        with self._lock:
            channels = list(self._channels.items())
            self._channels.clear()
            self._closing.update(name for name, _ in channels)
            try:
                for name, channel in channels:
                    try:
                        channel.close()
                    except Exception:
                        logger.exception(f"Failed to close channel: {name}")
            finally:
                self._closing.difference_update(name for name, _ in channels)
        if channels:
            logger.info(f"Closed {len(channels)} channels")

    @property
    def names(self) -> list[str]:
        """Snapshot of all channel names."""
        with self._lock:
            return list(self._channels)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._channels

    def __len__(self) -> int:
        return len(self._channels)

    def __str__(self) -> str:
        return "\n".join(f" <- {name}" for name in self.names)
