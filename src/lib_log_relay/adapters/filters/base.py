"""Filter base class and combinators.

Contents
--------
* :class:`BaseFilter` – shared ``level``/``levels``/``negate`` matching.
* :func:`all_of`, :func:`any_of`, :func:`negate` – compose filters.
"""

from __future__ import annotations

from collections.abc import Iterable

from lib_log_relay.application.ports.filter import FilterPort
from lib_log_relay.domain.entry import LogEntry
from lib_log_relay.domain.levels import LogLevel


class BaseFilter:
    """Level matching shared by the bundled filters.

    Parameters
    ----------
    level:
        Accept only this exact level.
    levels:
        Accept only these levels (ignored when ``level`` is given).
    negate:
        Invert the level match.
    """

    def __init__(
        self,
        *,
        level: LogLevel | str | None = None,
        levels: Iterable[LogLevel | str] = (),
        negate: bool = False,
    ) -> None:
        self.level = LogLevel.coerce(level) if level is not None else None
        self.levels = frozenset(LogLevel.coerce(item) for item in levels)
        self.negate = negate

    def match_level(self, level: LogLevel) -> bool:
        if self.level is not None:
            result = level is self.level
        elif self.levels:
            result = level in self.levels
        else:
            return True
        return not result if self.negate else result

    def filter(self, entry: LogEntry) -> bool:  # pragma: no cover - overridden
        raise NotImplementedError


class _AllOf:
    def __init__(self, filters: tuple[FilterPort, ...]) -> None:
        self._filters = filters

    def filter(self, entry: LogEntry) -> bool:
        return all(item.filter(entry) for item in self._filters)


class _AnyOf:
    def __init__(self, filters: tuple[FilterPort, ...]) -> None:
        self._filters = filters

    def filter(self, entry: LogEntry) -> bool:
        return any(item.filter(entry) for item in self._filters)


class _Not:
    def __init__(self, inner: FilterPort) -> None:
        self._inner = inner

    def filter(self, entry: LogEntry) -> bool:
        return not self._inner.filter(entry)


def all_of(*filters: FilterPort) -> FilterPort:
    """Accept entries accepted by every filter (vacuously true)."""

    return _AllOf(filters)


def any_of(*filters: FilterPort) -> FilterPort:
    """Accept entries accepted by at least one filter."""

    return _AnyOf(filters)


def negate(inner: FilterPort) -> FilterPort:
    """Invert ``inner``."""

    return _Not(inner)


__all__ = ["BaseFilter", "all_of", "any_of", "negate"]
