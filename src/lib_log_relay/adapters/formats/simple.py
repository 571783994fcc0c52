"""Single-line text format: ``[timestamp] [LEVEL] message {meta}``."""

from __future__ import annotations

from typing import Any

from lib_log_relay.domain.entry import LogEntry

from .base import BaseFormat


class SimpleFormat(BaseFormat):
    """Render entries as one readable line, stack trace on the following lines.

    Examples
    --------
    >>> from lib_log_relay.domain.levels import LogLevel
    >>> entry = LogEntry("2025-09-30T12:00:00.000Z", LogLevel.INFO, "started", {"port": 8080})
    >>> SimpleFormat().format(entry)
    '[2025-09-30T12:00:00.000Z] [INFO] started {"port": 8080}'
    """

    def __init__(
        self,
        *,
        timestamp_separator: str = " ",
        level_separator: str = " ",
        meta_separator: str = " ",
        stack_trace_separator: str = "\n",
        **options: Any,
    ) -> None:
        super().__init__(**options)
        self.timestamp_separator = timestamp_separator
        self.level_separator = level_separator
        self.meta_separator = meta_separator
        self.stack_trace_separator = stack_trace_separator

    def format(self, entry: LogEntry) -> str:
        parts: list[str] = []
        timestamp = self.format_timestamp(entry.timestamp)
        if timestamp:
            parts.append(f"[{timestamp}]{self.timestamp_separator}")
        level = self.format_level(entry)
        if level:
            parts.append(f"[{level}]{self.level_separator}")
        parts.append(entry.message)
        meta = self.format_meta(entry.meta)
        if meta:
            parts.append(f"{self.meta_separator}{meta}")
        stack_trace = self.format_stack_trace(entry.stack_trace)
        if stack_trace:
            parts.append(f"{self.stack_trace_separator}{stack_trace}")
        return "".join(parts)


__all__ = ["SimpleFormat"]
