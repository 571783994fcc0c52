"""Filter accepting entries by exact level membership."""

from __future__ import annotations

from lib_log_relay.domain.entry import LogEntry

from .base import BaseFilter


class LevelFilter(BaseFilter):
    """Accept entries whose level matches ``level``/``levels``.

    Examples
    --------
    >>> from lib_log_relay.domain.levels import LogLevel
    >>> only_errors = LevelFilter(levels=["error", "fatal"])
    >>> only_errors.filter(LogEntry(None, LogLevel.ERROR, "x"))
    True
    >>> only_errors.filter(LogEntry(None, LogLevel.WARN, "x"))
    False
    """

    def filter(self, entry: LogEntry) -> bool:
        return self.match_level(entry.level)


__all__ = ["LevelFilter"]
