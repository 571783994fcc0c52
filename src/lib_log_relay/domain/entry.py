"""Domain record describing one log event.

Purpose
-------
Provide an immutable, serialisable representation of a log call that can be
handed to many transports at once.

Contents
--------
* :class:`LogEntry` frozen dataclass with wire (de)serialisation helpers.
* :data:`STACK_TRACE_KEY` – wire name of the stack trace field.

System Role
-----------
Created exactly once per accepted log call by the logger; transports and
formats only read it. Any transformation goes through :meth:`LogEntry.replace`
and yields a new object.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any

from .levels import LogLevel

STACK_TRACE_KEY = "stackTrace"


def _freeze_meta(meta: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    if meta is None:
        return None
    try:
        snapshot = copy.deepcopy(dict(meta))
    except (TypeError, copy.Error):
        # values that refuse copying (locks, sockets) are shared as-is
        snapshot = dict(meta)
    return MappingProxyType(snapshot)


@dataclass(slots=True, frozen=True)
class LogEntry:
    """Immutable log event.

    Attributes
    ----------
    timestamp:
        Pre-rendered timestamp (ISO string, epoch milliseconds or locale
        string); ``None`` when the logger omits timestamps.
    level:
        :class:`LogLevel` severity.
    message:
        Caller supplied text.
    meta:
        Read-only view over a private deep copy of the caller's structured
        data; later changes to nested caller values do not reach the entry.
    stack_trace:
        Optional rendered call chain for ``error``/``fatal`` entries.
    """

    timestamp: str | int | None
    level: LogLevel
    message: str
    meta: Mapping[str, Any] | None = None
    stack_trace: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.level, LogLevel):
            raise TypeError("level must be a LogLevel")
        if not isinstance(self.message, str):
            object.__setattr__(self, "message", str(self.message))
        object.__setattr__(self, "meta", _freeze_meta(self.meta))

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire mapping; absent optional fields are omitted.

        Examples
        --------
        >>> entry = LogEntry("2025-09-30T12:00:00.000Z", LogLevel.WARN, "disk low", {"free": 3})
        >>> entry.to_dict()
        {'timestamp': '2025-09-30T12:00:00.000Z', 'level': 'warn', 'message': 'disk low', 'meta': {'free': 3}}
        """

        data: dict[str, Any] = {}
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        data["level"] = self.level.severity
        data["message"] = self.message
        if self.meta is not None:
            data["meta"] = dict(self.meta)
        if self.stack_trace is not None:
            data[STACK_TRACE_KEY] = self.stack_trace
        return data

    def to_json(self) -> str:
        """Serialise to compact JSON; non-JSON values fall back to ``str``."""

        return json.dumps(self.to_dict(), default=str, ensure_ascii=False)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LogEntry":
        """Reconstruct an entry from :meth:`to_dict` output."""

        return cls(
            timestamp=payload.get("timestamp"),
            level=LogLevel.from_name(payload["level"]),
            message=payload["message"],
            meta=payload.get("meta"),
            stack_trace=payload.get(STACK_TRACE_KEY),
        )

    def replace(self, **changes: Any) -> "LogEntry":
        """Return a copy with ``changes`` applied."""

        return replace(self, **changes)


__all__ = ["LogEntry", "STACK_TRACE_KEY"]
