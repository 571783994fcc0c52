"""Metadata-merging wrapper returned by :meth:`Logger.child`."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from lib_log_relay.domain.levels import LogLevel

if TYPE_CHECKING:
    from .logger import Logger


class ChildLogger:
    """Decorate a :class:`Logger` with fixed contextual metadata.

    The leveled methods (and :meth:`log`) merge the fixed metadata with the
    call-site metadata, call-site keys winning on collision. Every other
    attribute is looked up on the wrapped logger unchanged.

    Examples
    --------
    >>> class Recorder:
    ...     def __init__(self):
    ...         self.meta = []
    ...     def log(self, entry):
    ...         self.meta.append(dict(entry.meta))
    >>> from lib_log_relay.application.logger import Logger
    >>> recorder = Recorder()
    >>> child = Logger(console=False, transports=[recorder]).child({"request": "r1"})
    >>> child.info("hit", {"path": "/"})
    >>> recorder.meta
    [{'request': 'r1', 'path': '/'}]
    """

    def __init__(self, logger: "Logger", meta: Mapping[str, Any] | None = None) -> None:
        self._logger = logger
        self._meta = MappingProxyType(dict(meta or {}))

    @property
    def meta(self) -> Mapping[str, Any]:
        """Return the fixed metadata merged into every call."""

        return self._meta

    @property
    def wrapped(self) -> "Logger":
        return self._logger

    def debug(self, message: str, meta: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.DEBUG, message, meta)

    def info(self, message: str, meta: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.INFO, message, meta)

    def warn(self, message: str, meta: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.WARN, message, meta)

    def error(self, message: str, meta: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.ERROR, message, meta)

    def fatal(self, message: str, meta: Mapping[str, Any] | None = None) -> None:
        self.log(LogLevel.FATAL, message, meta)

    def log(self, level: LogLevel | str, message: str, meta: Mapping[str, Any] | None = None) -> None:
        self._logger.log(level, message, self._merge(meta))

    def _merge(self, meta: Any) -> dict[str, Any]:
        merged = dict(self._meta)
        if isinstance(meta, Mapping):
            merged.update(meta)
        elif meta is not None:
            merged["value"] = meta
        return merged

    def __getattr__(self, item: str) -> Any:
        """Delegate every other attribute to the wrapped logger."""

        return getattr(self._logger, item)

    def __repr__(self) -> str:
        return f"ChildLogger(meta={dict(self._meta)!r}, logger={self._logger!r})"


__all__ = ["ChildLogger"]
