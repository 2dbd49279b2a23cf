"""Chanwitch — named bounded queues that close themselves when idle."""

from .config import Settings
from .core import ChannelRegistry, Closable, TimedQueue, open_channel
from .errors import ChannelExistsError, ChannelNotFoundError, ChanwitchError

__all__ = [
    "ChannelExistsError",
    "ChannelNotFoundError",
    "ChannelRegistry",
    "ChanwitchError",
    "Closable",
    "Settings",
    "TimedQueue",
    "open_channel",
]
