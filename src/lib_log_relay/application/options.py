"""Immutable logger configuration.

Purpose
-------
Capture every constructor option of :class:`~lib_log_relay.application.logger.Logger`
in one frozen value so child loggers can derive their configuration by
merging overrides instead of mutating shared state.

Contents
--------
* :class:`LoggerOptions` – frozen dataclass with validation and ``merged``.
* :data:`ENVIRONMENTS` – accepted environment tags.

System Role
-----------
Built by :func:`lib_log_relay.runtime.create_logger` (which layers environment
overrides on top) or directly by host code; never reloaded after a logger has
been constructed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any

from lib_log_relay.domain.levels import LogLevel
from lib_log_relay.domain.timestamps import TimestampFormat

from .ports.filter import FilterPort
from .ports.transport import TransportPort

ENVIRONMENTS = frozenset({"development", "production", "test"})

DEFAULT_QUEUE_CAPACITY = 1000
DEFAULT_STACK_TRACE_LIMIT = 10


@dataclass(frozen=True)
class LoggerOptions:
    """Configuration consumed by the logger at construction time.

    Parameters
    ----------
    level:
        Minimum level handed to the default console/file transports. Transports
        supplied explicitly keep their own thresholds.
    transports:
        Transports registered first, in dispatch order.
    console, file:
        ``True`` to add a default transport, ``False`` to skip it, or a mapping
        of transport keyword options.
    include_timestamp, timestamp_format:
        Whether entries carry a timestamp and how it is rendered.
    include_stack_trace, stack_trace_limit:
        Capture the caller chain for ``error``/``fatal`` entries, bounded to
        ``stack_trace_limit`` frames.
    app_name, environment:
        Descriptive identifiers; ``app_name`` names the default log file.
    async_logging, log_queue:
        Queue entries for background delivery with the given capacity.
    filters:
        Predicates every entry must pass before dispatch.
    """

    level: LogLevel = LogLevel.DEBUG
    transports: tuple[TransportPort, ...] = ()
    console: bool | Mapping[str, Any] = True
    file: bool | Mapping[str, Any] = False
    include_timestamp: bool = True
    timestamp_format: TimestampFormat = TimestampFormat.ISO
    include_stack_trace: bool = False
    stack_trace_limit: int = DEFAULT_STACK_TRACE_LIMIT
    app_name: str | None = None
    environment: str = "development"
    async_logging: bool = False
    log_queue: int = DEFAULT_QUEUE_CAPACITY
    filters: tuple[FilterPort, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "level", LogLevel.coerce(self.level))
        object.__setattr__(self, "timestamp_format", TimestampFormat.coerce(self.timestamp_format))
        object.__setattr__(self, "transports", tuple(self.transports or ()))
        object.__setattr__(self, "filters", tuple(self.filters or ()))
        if self.environment not in ENVIRONMENTS:
            raise ValueError(f"environment must be one of {sorted(ENVIRONMENTS)}, got {self.environment!r}")
        if self.log_queue <= 0:
            raise ValueError("log_queue must be positive")
        if self.stack_trace_limit < 0:
            raise ValueError("stack_trace_limit cannot be negative")

    @classmethod
    def option_names(cls) -> frozenset[str]:
        """Return the recognised option keys."""

        return frozenset(item.name for item in fields(cls))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "LoggerOptions":
        """Build options from a plain mapping, rejecting unknown keys."""

        _reject_unknown(values.keys())
        return cls(**dict(values))

    def merged(self, overrides: Mapping[str, Any] | None = None) -> "LoggerOptions":
        """Return a copy with ``overrides`` applied (validated like the constructor).

        Examples
        --------
        >>> base = LoggerOptions(app_name="svc")
        >>> child = base.merged({"async_logging": True})
        >>> (child.app_name, child.async_logging, base.async_logging)
        ('svc', True, False)
        """

        if not overrides:
            return self
        _reject_unknown(overrides.keys())
        return replace(self, **dict(overrides))


def _reject_unknown(keys: Iterable[str]) -> None:
    unknown = sorted(set(keys) - LoggerOptions.option_names())
    if unknown:
        raise ValueError(f"Unknown logger option(s): {', '.join(unknown)}")


__all__ = ["DEFAULT_QUEUE_CAPACITY", "DEFAULT_STACK_TRACE_LIMIT", "ENVIRONMENTS", "LoggerOptions"]
