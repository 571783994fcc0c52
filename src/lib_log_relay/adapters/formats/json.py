"""JSON object format with configurable field names.

Purpose
-------
Render entries as JSON for machine consumers whose schema may use different
field names than the relay's wire format, and read such documents back.

Contents
--------
* :class:`JsonFormat` – renderer plus :meth:`JsonFormat.parse`.

System Role
-----------
Used by the console ``json`` mode and available to any transport accepting a
:class:`~lib_log_relay.application.ports.format.FormatPort`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from lib_log_relay.domain.entry import STACK_TRACE_KEY, LogEntry
from lib_log_relay.domain.levels import LogLevel
from lib_log_relay.domain.timestamps import parse_timestamp

from .base import BaseFormat


class JsonFormat(BaseFormat):
    """Render entries as JSON objects.

    Parameters
    ----------
    indent:
        ``json.dumps`` indentation; ``None`` renders compactly.
    additional_fields:
        Constant fields written first into every object.
    use_unix_timestamps:
        Convert the entry timestamp to epoch milliseconds.
    timestamp_key, level_key, message_key, meta_key, stack_trace_key:
        Field names used in the rendered object.

    Examples
    --------
    >>> entry = LogEntry("2025-09-30T12:00:00.000Z", LogLevel.ERROR, "boom")
    >>> JsonFormat(level_key="severity").format(entry)
    '{"timestamp": "2025-09-30T12:00:00.000Z", "severity": "error", "message": "boom"}'
    """

    def __init__(
        self,
        *,
        indent: int | None = None,
        additional_fields: Mapping[str, Any] | None = None,
        use_unix_timestamps: bool = False,
        timestamp_key: str = "timestamp",
        level_key: str = "level",
        message_key: str = "message",
        meta_key: str = "meta",
        stack_trace_key: str = STACK_TRACE_KEY,
        **options: Any,
    ) -> None:
        super().__init__(**options)
        self.indent = indent
        self.additional_fields = dict(additional_fields or {})
        self.use_unix_timestamps = use_unix_timestamps
        self.timestamp_key = timestamp_key
        self.level_key = level_key
        self.message_key = message_key
        self.meta_key = meta_key
        self.stack_trace_key = stack_trace_key

    def to_object(self, entry: LogEntry) -> dict[str, Any]:
        """Return the mapping that :meth:`format` serialises."""

        payload: dict[str, Any] = dict(self.additional_fields)
        if self.show_timestamp and entry.timestamp is not None:
            payload[self.timestamp_key] = self._timestamp_value(entry.timestamp)
        if self.show_level:
            payload[self.level_key] = entry.level.severity
        payload[self.message_key] = entry.message
        if entry.meta is not None and self.show_meta:
            payload[self.meta_key] = dict(entry.meta)
        if entry.stack_trace:
            payload[self.stack_trace_key] = entry.stack_trace
        return payload

    def format(self, entry: LogEntry) -> str:
        return json.dumps(self.to_object(entry), indent=self.indent, default=str, ensure_ascii=False)

    def parse(self, text: str) -> LogEntry:
        """Rebuild an entry from a document produced by :meth:`format`.

        Fields missing from the document fall back to ``INFO`` and empty values.
        """

        payload = json.loads(text)
        if not isinstance(payload, Mapping):
            raise ValueError("JSON log document must be an object")
        level_name = payload.get(self.level_key, LogLevel.INFO.severity)
        return LogEntry(
            timestamp=payload.get(self.timestamp_key),
            level=LogLevel.from_name(level_name),
            message=payload.get(self.message_key, ""),
            meta=payload.get(self.meta_key),
            stack_trace=payload.get(self.stack_trace_key),
        )

    def _timestamp_value(self, timestamp: str | int) -> str | int:
        if not self.use_unix_timestamps:
            return timestamp
        if isinstance(timestamp, int):
            return timestamp
        try:
            return int(parse_timestamp(timestamp).timestamp() * 1000)
        except ValueError:
            return timestamp


__all__ = ["JsonFormat"]
