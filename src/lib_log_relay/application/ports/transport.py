"""Port describing a log delivery sink."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Protocol, runtime_checkable

from lib_log_relay.domain.entry import LogEntry


@runtime_checkable
class TransportPort(Protocol):
    """Accept entries and deliver them to one destination.

    ``log`` may return an awaitable when delivery needs I/O; the logger awaits
    it. ``close`` is optional on concrete transports and is looked up with
    ``getattr`` by the logger.
    """

    def log(self, entry: LogEntry) -> Awaitable[None] | None:
        """Deliver ``entry`` or schedule its delivery."""


@runtime_checkable
class ClosableTransportPort(TransportPort, Protocol):
    """Transport that owns resources released by :meth:`close`."""

    def close(self) -> Awaitable[None] | None:
        """Release handles, flush buffers, and stop timers."""


__all__ = ["ClosableTransportPort", "TransportPort"]
