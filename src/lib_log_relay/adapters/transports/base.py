"""Admission gate shared by the bundled transports.

Contents
--------
* :class:`LevelGate` – minimum level plus filter list, composed into every
  transport instead of a base class.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from lib_log_relay.application.ports.filter import FilterPort
from lib_log_relay.domain.entry import LogEntry
from lib_log_relay.domain.levels import LogLevel

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelGate:
    """Decide whether a transport accepts an entry.

    Examples
    --------
    >>> gate = LevelGate.build("warn")
    >>> gate.admits(LogEntry(None, LogLevel.ERROR, "x"))
    True
    >>> gate.admits(LogEntry(None, LogLevel.INFO, "x"))
    False
    """

    min_level: LogLevel | None = None
    filters: tuple[FilterPort, ...] = field(default_factory=tuple)

    @classmethod
    def build(cls, min_level: LogLevel | str | None = None, filters: Iterable[FilterPort] = ()) -> "LevelGate":
        level = LogLevel.coerce(min_level) if min_level is not None else None
        return cls(level, tuple(filters))

    def admits(self, entry: LogEntry) -> bool:
        if not entry.level.at_least(self.min_level):
            return False
        for entry_filter in self.filters:
            try:
                if not entry_filter.filter(entry):
                    return False
            except Exception as exc:  # noqa: BLE001
                LOGGER.error("Transport filter %r raised; admitting entry", entry_filter, exc_info=exc)
        return True


__all__ = ["LevelGate"]
