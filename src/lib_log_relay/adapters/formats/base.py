"""Shared rendering helpers for the bundled formats.

Why
---
The simple, detailed, and JSON formats agree on how timestamps, levels,
metadata, and stack traces are presented. Keeping those rules in one place
keeps the console and file transports consistent with each other.

Contents
--------
* :class:`BaseFormat` – option holder with the per-field render helpers.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from lib_log_relay.domain.entry import LogEntry
from lib_log_relay.domain.timestamps import TimestampFormat, parse_timestamp

_META_FORMATS = frozenset({"json", "repr"})


class BaseFormat:
    """Common options for the text formats.

    Parameters
    ----------
    show_timestamp, show_level, show_meta:
        Toggle the corresponding parts of the rendered line.
    timestamp_format:
        ``None`` keeps the entry's pre-rendered timestamp; otherwise the value
        is parsed and re-rendered as ``ISO``/``UNIX``/``LOCAL``.
    meta_format:
        ``"json"`` (default) or ``"repr"`` for Python's representation.
    json_indent:
        Indentation applied when metadata is rendered as JSON.
    """

    def __init__(
        self,
        *,
        show_timestamp: bool = True,
        show_level: bool = True,
        show_meta: bool = True,
        timestamp_format: str | TimestampFormat | None = None,
        meta_format: str = "json",
        json_indent: int | None = None,
    ) -> None:
        if meta_format not in _META_FORMATS:
            raise ValueError(f"meta_format must be one of {sorted(_META_FORMATS)}, got {meta_format!r}")
        self.show_timestamp = show_timestamp
        self.show_level = show_level
        self.show_meta = show_meta
        self.timestamp_format = TimestampFormat.coerce(timestamp_format) if timestamp_format is not None else None
        self.meta_format = meta_format
        self.json_indent = json_indent

    def format(self, entry: LogEntry) -> str:  # pragma: no cover - overridden
        raise NotImplementedError

    def format_timestamp(self, timestamp: str | int | None) -> str:
        if not self.show_timestamp or timestamp is None:
            return ""
        if self.timestamp_format is None:
            return str(timestamp)
        try:
            return str(self.timestamp_format.render(parse_timestamp(timestamp)))
        except ValueError:
            return str(timestamp)

    def format_level(self, entry: LogEntry) -> str:
        if not self.show_level:
            return ""
        return entry.level.severity.upper()

    def format_meta(self, meta: Mapping[str, Any] | None) -> str:
        if not meta or not self.show_meta:
            return ""
        if self.meta_format == "repr":
            return repr(dict(meta))
        try:
            return json.dumps(dict(meta), indent=self.json_indent, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            return str(dict(meta))

    @staticmethod
    def format_stack_trace(stack_trace: str | None) -> str:
        return stack_trace or ""


__all__ = ["BaseFormat"]
