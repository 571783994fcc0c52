"""Port for pure entry renderers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_relay.domain.entry import LogEntry


@runtime_checkable
class FormatPort(Protocol):
    """Render a :class:`LogEntry` to text without side effects."""

    def format(self, entry: LogEntry) -> str:
        """Return the rendered representation of ``entry``."""


__all__ = ["FormatPort"]
