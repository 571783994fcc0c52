"""Timestamp rendering for log entries.

Entries carry their timestamp already rendered so every transport sees the
same value. Three renderings exist: ISO-8601 (UTC, millisecond precision,
``Z`` suffix), UNIX epoch milliseconds, and the host's locale representation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum


class TimestampFormat(Enum):
    """Supported timestamp renderings."""

    ISO = "ISO"
    UNIX = "UNIX"
    LOCAL = "LOCAL"

    @classmethod
    def from_name(cls, name: str) -> "TimestampFormat":
        try:
            return cls[name.strip().upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown timestamp format: {name!r}") from exc

    @classmethod
    def coerce(cls, value: "str | TimestampFormat") -> "TimestampFormat":
        if isinstance(value, TimestampFormat):
            return value
        return cls.from_name(value)

    def render(self, moment: datetime) -> str | int:
        """Render ``moment`` (timezone-aware) according to this format.

        Examples
        --------
        >>> moment = datetime(2025, 9, 30, 12, 0, 1, 250000, tzinfo=timezone.utc)
        >>> TimestampFormat.ISO.render(moment)
        '2025-09-30T12:00:01.250Z'
        >>> TimestampFormat.UNIX.render(moment)
        1759233601250
        """

        if self is TimestampFormat.UNIX:
            return int(moment.timestamp() * 1000)
        if self is TimestampFormat.LOCAL:
            return moment.astimezone().strftime("%x, %X")
        return to_iso(moment)


def to_iso(moment: datetime) -> str:
    """Return the ISO-8601 UTC rendering with millisecond precision."""

    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str | int | float) -> datetime:
    """Best-effort inverse of :meth:`TimestampFormat.render` for ISO and UNIX values.

    Raises :class:`ValueError` when ``value`` cannot be interpreted.
    """

    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    text = value.strip()
    if text.isdigit():
        return datetime.fromtimestamp(int(text) / 1000, tz=timezone.utc)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


__all__ = ["TimestampFormat", "parse_timestamp", "to_iso"]
