"""Multi-line labelled format used by the console ``detailed`` mode."""

from __future__ import annotations

from typing import Any

from lib_log_relay.domain.entry import LogEntry

from .base import BaseFormat


class DetailedFormat(BaseFormat):
    """Render each part of an entry on its own labelled line."""

    def __init__(self, **options: Any) -> None:
        options.setdefault("json_indent", 2)
        super().__init__(**options)

    def format(self, entry: LogEntry) -> str:
        parts: list[str] = []
        timestamp = self.format_timestamp(entry.timestamp)
        if timestamp:
            parts.append(f"TIME: {timestamp}")
        level = self.format_level(entry)
        if level:
            parts.append(f"LEVEL: {level}")
        parts.append(f"MESSAGE: {entry.message}")
        meta = self.format_meta(entry.meta)
        if meta:
            parts.append(f"META: {meta}")
        if entry.stack_trace:
            parts.append(f"STACK TRACE:\n{entry.stack_trace}")
        return "\n".join(parts)


__all__ = ["DetailedFormat"]
