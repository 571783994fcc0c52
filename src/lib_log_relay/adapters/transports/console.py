"""Rich-powered console transport.

Purpose
-------
Print entries for humans watching a terminal, coloured per level.

Contents
--------
* :data:`_STYLE_MAP` – default level-to-style mapping.
* :class:`ConsoleTransport` – transport created for ``console=True`` loggers.

System Role
-----------
Default sink of every logger unless ``console=False``. Rendering is delegated
to a :class:`~lib_log_relay.application.ports.format.FormatPort`; Rich only
adds colour and handles terminal detection.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from rich.console import Console

from lib_log_relay.adapters.formats import DetailedFormat, JsonFormat, SimpleFormat
from lib_log_relay.application.ports.filter import FilterPort
from lib_log_relay.application.ports.format import FormatPort
from lib_log_relay.domain.entry import LogEntry
from lib_log_relay.domain.levels import LogLevel

from .base import LevelGate

_STYLE_MAP: Mapping[LogLevel, str] = {
    LogLevel.DEBUG: "bright_black",
    LogLevel.INFO: "cyan",
    LogLevel.WARN: "yellow",
    LogLevel.ERROR: "red",
    LogLevel.FATAL: "magenta",
}

CONSOLE_FORMATS = ("simple", "json", "detailed")


def _build_format(name: str, *, show_timestamp: bool, show_level: bool) -> FormatPort:
    if name == "simple":
        return SimpleFormat(show_timestamp=show_timestamp, show_level=show_level)
    if name == "json":
        return JsonFormat(show_timestamp=show_timestamp, show_level=show_level)
    if name == "detailed":
        return DetailedFormat(show_timestamp=show_timestamp, show_level=show_level)
    raise ValueError(f"Unknown console format {name!r}; expected one of {CONSOLE_FORMATS}")


class ConsoleTransport:
    """Write formatted entries to a Rich console.

    Examples
    --------
    >>> from io import StringIO
    >>> console = Console(file=StringIO(), record=True, width=120)
    >>> transport = ConsoleTransport(console=console, colorize=False)
    >>> transport.log(LogEntry("2025-09-30T12:00:00.000Z", LogLevel.INFO, "ready"))
    >>> console.export_text().strip()
    '[2025-09-30T12:00:00.000Z] [INFO] ready'
    """

    def __init__(
        self,
        *,
        min_level: LogLevel | str | None = None,
        filters: Iterable[FilterPort] = (),
        format: str = "simple",
        formatter: FormatPort | None = None,
        colorize: bool = True,
        show_timestamp: bool = True,
        show_level: bool = True,
        styles: Mapping[LogLevel | str, str] | None = None,
        console: Console | None = None,
        stderr: bool = False,
    ) -> None:
        self.gate = LevelGate.build(min_level, filters)
        self.formatter = formatter or _build_format(format, show_timestamp=show_timestamp, show_level=show_level)
        self.colorize = colorize
        self._console = console if console is not None else Console(stderr=stderr, no_color=not colorize)
        style_map = dict(_STYLE_MAP)
        for key, value in (styles or {}).items():
            style_map[LogLevel.coerce(key)] = value
        self._style_map = style_map

    @property
    def console(self) -> Console:
        return self._console

    def log(self, entry: LogEntry) -> None:
        if not self.gate.admits(entry):
            return
        style = self._style_map.get(entry.level, "") if self.colorize else ""
        self._console.print(self.formatter.format(entry), style=style or None, markup=False, highlight=False, soft_wrap=True)


__all__ = ["CONSOLE_FORMATS", "ConsoleTransport"]
