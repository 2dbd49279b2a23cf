"""Errors raised by the channel registry."""


class ChanwitchError(Exception):
    """Base class for chanwitch errors."""


class ChannelExistsError(ChanwitchError, ValueError):
    """A channel with this name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Channel '{name}' already exists")
        self.name = name


class ChannelNotFoundError(ChanwitchError, KeyError):
    """No channel is registered under this name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Channel '{name}' not found")
        self.name = name

    def __str__(self) -> str:
        # KeyError reprs its argument; keep the plain message
        return str(self.args[0])
