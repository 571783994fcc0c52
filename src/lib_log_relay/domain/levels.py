"""Ordered log levels used for every admission decision.

Purpose
-------
Provide the fixed severity ordering ``debug < info < warn < error < fatal``
that transports and filters compare against.

Contents
--------
* :class:`LogLevel` enum with conversion helpers and comparison shortcuts.
* ``_ALIASES`` mapping stdlib-style names onto the relay levels.

System Role
-----------
Sits in the domain layer; the logger, the transport gates, and the filters
all compare entries through :meth:`LogLevel.at_least`.
"""

from __future__ import annotations

from enum import Enum


class LogLevel(Enum):
    """Enumerated logging levels in ascending severity."""

    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40
    FATAL = 50

    @property
    def severity(self) -> str:
        """Return the lowercase name used on the wire (``"warn"``, ...)."""

        return self.name.lower()

    @property
    def captures_stack(self) -> bool:
        """Return ``True`` for the levels that may carry a stack trace."""

        return self in (LogLevel.ERROR, LogLevel.FATAL)

    def at_least(self, minimum: "LogLevel | None") -> bool:
        """Return ``True`` when this level is ``minimum`` or more severe.

        Examples
        --------
        >>> LogLevel.ERROR.at_least(LogLevel.WARN)
        True
        >>> LogLevel.DEBUG.at_least(LogLevel.INFO)
        False
        >>> LogLevel.DEBUG.at_least(None)
        True
        """

        if minimum is None:
            return True
        return self.value >= minimum.value

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Resolve ``name`` case-insensitively, accepting ``warning``/``critical``.

        Examples
        --------
        >>> LogLevel.from_name("Warning") is LogLevel.WARN
        True
        """

        normalized = name.strip().upper()
        normalized = _ALIASES.get(normalized, normalized)
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def coerce(cls, value: "str | LogLevel") -> "LogLevel":
        """Return ``value`` as a :class:`LogLevel`, parsing strings by name."""

        if isinstance(value, LogLevel):
            return value
        return cls.from_name(value)


_ALIASES = {"WARNING": "WARN", "CRITICAL": "FATAL"}


__all__ = ["LogLevel"]
