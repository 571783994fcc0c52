"""Port for admission predicates evaluated before delivery."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_relay.domain.entry import LogEntry


@runtime_checkable
class FilterPort(Protocol):
    """Decide whether an entry may proceed."""

    def filter(self, entry: LogEntry) -> bool:
        """Return ``True`` when ``entry`` is accepted."""


__all__ = ["FilterPort"]
