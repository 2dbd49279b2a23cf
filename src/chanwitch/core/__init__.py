"""Core channel primitives."""

from .channel import Closable
from .factory import open_channel
from .registry import ChannelRegistry
from .timed_queue import TimedQueue

__all__ = ["ChannelRegistry", "Closable", "TimedQueue", "open_channel"]
