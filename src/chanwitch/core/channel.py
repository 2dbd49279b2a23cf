"""Closable protocol — the only capability the registry relies on."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Closable(Protocol):
    """Anything the registry can store and close.

    ``close()`` must be idempotent: the registry may call it on a handle
    that has already closed itself.
    """

    def close(self) -> None:
        """Close the underlying resource."""
        ...
