"""Filter accepting entries by metadata keys and values."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from lib_log_relay.domain.entry import LogEntry
from lib_log_relay.domain.levels import LogLevel

from .base import BaseFilter

MISSING: Any = object()


def _lookup(meta: Mapping[str, Any], key: str, deep: bool) -> Any:
    if not deep:
        return meta.get(key, MISSING)
    current: Any = meta
    for part in key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return MISSING
        current = current[part]
    return current


class MetadataFilter(BaseFilter):
    """Match entries on one metadata key.

    Parameters
    ----------
    key:
        Metadata key; with ``deep_match`` a dotted path such as ``"user.id"``.
    value:
        Expected value. String values match by substring unless
        ``exact_match`` is set.
    exists:
        When given without ``value``, only the presence of ``key`` matters.
        ``exists=False`` also accepts entries without metadata.
    negate:
        Invert the key/value comparison.
    negate_level:
        Invert the ``level``/``levels`` match independently of ``negate``.

    Examples
    --------
    >>> entry = LogEntry(None, LogLevel.INFO, "login", {"user": {"id": "u-7"}})
    >>> MetadataFilter("user.id", value="u-", deep_match=True).filter(entry)
    True
    >>> MetadataFilter("tenant", exists=True).filter(entry)
    False
    """

    def __init__(
        self,
        key: str,
        *,
        value: Any = MISSING,
        exists: bool | None = None,
        exact_match: bool = False,
        deep_match: bool = False,
        negate: bool = False,
        negate_level: bool = False,
        level: LogLevel | str | None = None,
        levels: Iterable[LogLevel | str] = (),
    ) -> None:
        if not key and exists is not False:
            raise ValueError("key must be specified for MetadataFilter")
        super().__init__(level=level, levels=levels, negate=negate_level)
        self.key = key
        self.value = value
        self.exists = exists
        self.exact_match = exact_match
        self.deep_match = deep_match
        self.negate_match = negate

    def filter(self, entry: LogEntry) -> bool:
        if not self.match_level(entry.level):
            return False
        if not entry.meta:
            return self.exists is False
        actual = _lookup(entry.meta, self.key, self.deep_match)
        if self.exists is not None and self.value is MISSING:
            return self._apply_negate(actual is not MISSING)
        if actual is MISSING:
            return False
        if isinstance(actual, str) and isinstance(self.value, str) and not self.exact_match:
            return self._apply_negate(self.value in actual)
        return self._apply_negate(actual == self.value)

    def _apply_negate(self, result: bool) -> bool:
        return not result if self.negate_match else result


__all__ = ["MISSING", "MetadataFilter"]
