"""Rotating file transport.

Purpose
-------
Append entries to a local file and keep disk usage bounded through size and
calendar based rotation.

Contents
--------
* :data:`DATE_PATTERNS` – supported time rotation buckets.
* :func:`rotation_bucket` – calendar bucket of a moment for a pattern.
* :class:`FileTransport` – the transport itself.

System Role
-----------
Created by the composition root for ``file=True`` loggers or directly by
callers. Writes are synchronous; the only asynchronous piece is the periodic
time rotation check, which runs on the event loop that first sees the
transport.

Alignment Notes
---------------
Rotated files are named ``<base>.<index><ext>`` where ``.1`` is the most
recent; at most ``max_files`` rotated files are kept. Write errors are logged
and dropped, never raised to the logger.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from pathlib import Path
from typing import IO

from lib_log_relay.adapters.formats import SimpleFormat
from lib_log_relay.application.diagnostics import build_diagnostic_emitter
from lib_log_relay.application.ports.diagnostics import DiagnosticHook
from lib_log_relay.application.ports.filter import FilterPort
from lib_log_relay.application.ports.format import FormatPort
from lib_log_relay.domain.entry import LogEntry
from lib_log_relay.domain.levels import LogLevel

from .base import LevelGate

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 10 * 1024 * 1024
DEFAULT_MAX_FILES = 5

DATE_PATTERNS = ("hourly", "daily", "weekly", "monthly")

_CHECK_INTERVALS = {
    "hourly": 15 * 60.0,
    "daily": 60 * 60.0,
    "weekly": 6 * 60 * 60.0,
    "monthly": 6 * 60 * 60.0,
}

_SECONDS_PER_DAY = 24 * 60 * 60


def rotation_bucket(pattern: str, moment: datetime) -> tuple[int, ...]:
    """Return the calendar bucket ``moment`` falls into for ``pattern``.

    Weekly buckets count whole days since the Unix epoch divided by seven, so
    weeks start on Thursdays.

    Examples
    --------
    >>> rotation_bucket("daily", datetime(2025, 9, 30, 23, 59))
    (2025, 9, 30)
    >>> rotation_bucket("monthly", datetime(2025, 9, 30, 23, 59))
    (2025, 9)
    """

    if pattern == "hourly":
        return (moment.year, moment.month, moment.day, moment.hour)
    if pattern == "daily":
        return (moment.year, moment.month, moment.day)
    if pattern == "weekly":
        return (int(moment.timestamp() // _SECONDS_PER_DAY) // 7,)
    if pattern == "monthly":
        return (moment.year, moment.month)
    raise ValueError(f"Unknown date pattern {pattern!r}; expected one of {DATE_PATTERNS}")


class FileTransport:
    """Write entries to ``directory/filename`` with rotation.

    Parameters
    ----------
    filename:
        Target file name; required.
    directory:
        Optional parent directory, created when missing.
    mode:
        ``"a"`` appends to an existing file, ``"w"`` truncates it on first open.
    max_size:
        Rotate once the bytes written reach this size.
    max_files:
        Number of rotated files kept next to the live one.
    date_pattern:
        Optional ``hourly``/``daily``/``weekly``/``monthly`` time rotation.
    format:
        ``"text"`` for readable lines or ``"json"`` for one object per line.
    formatter:
        Custom :class:`FormatPort` used in text mode.
    now:
        Local time source used by the time rotation check.
    """

    def __init__(
        self,
        filename: str,
        *,
        directory: str | Path | None = None,
        mode: str = "a",
        max_size: int = DEFAULT_MAX_SIZE,
        max_files: int = DEFAULT_MAX_FILES,
        date_pattern: str | None = None,
        format: str = "text",
        formatter: FormatPort | None = None,
        min_level: LogLevel | str | None = None,
        filters: Iterable[FilterPort] = (),
        diagnostic: DiagnosticHook = None,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        if not filename:
            raise ValueError("Filename must be specified for FileTransport")
        if mode not in ("a", "w"):
            raise ValueError(f"mode must be 'a' or 'w', got {mode!r}")
        if format not in ("text", "json"):
            raise ValueError(f"format must be 'text' or 'json', got {format!r}")
        if date_pattern is not None and date_pattern not in DATE_PATTERNS:
            raise ValueError(f"Unknown date pattern {date_pattern!r}; expected one of {DATE_PATTERNS}")
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        if max_files <= 0:
            raise ValueError("max_files must be positive")

        self.gate = LevelGate.build(min_level, filters)
        self.directory = Path(directory) if directory else None
        self.path = self.directory / filename if self.directory else Path(filename)
        self.mode = mode
        self.max_size = max_size
        self.max_files = max_files
        self.date_pattern = date_pattern
        self.format = format
        self.formatter: FormatPort = formatter or SimpleFormat()
        self._emit = build_diagnostic_emitter(diagnostic)
        self._now = now
        self._handle: IO[str] | None = None
        self._opened_once = False
        self._size = 0
        self._last_rotation = now()
        self._timer: asyncio.Task[None] | None = None

        if self.directory is not None:
            self.directory.mkdir(parents=True, exist_ok=True)
        self._check_file_size()
        self._open()
        self._ensure_timer()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def size(self) -> int:
        """Bytes written to the live file since it was opened or rotated."""

        return self._size

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def rotated_path(self, index: int) -> Path:
        """Return the path of the rotated file with ``index`` (``1`` is newest)."""

        suffix = self.path.suffix
        stem = self.path.name[: -len(suffix)] if suffix else self.path.name
        return self.path.with_name(f"{stem}.{index}{suffix}")

    # ------------------------------------------------------------------
    # Transport API
    # ------------------------------------------------------------------
    def log(self, entry: LogEntry) -> None:
        if not self.gate.admits(entry):
            return
        self._ensure_timer()
        if self.date_pattern is not None:
            self.check_time_rotation()
        if self._handle is None:
            self._open()
            if self._handle is None:
                return
        line = self._render(entry)
        try:
            self._handle.write(line)
            self._handle.flush()
        except OSError as exc:
            LOGGER.error("Error writing to log file %s", self.path, exc_info=exc)
            self._emit("file_write_error", {"path": str(self.path), "exception": repr(exc)})
            self._discard_handle()
            return
        self._size += len(line.encode("utf-8"))
        if self._size >= self.max_size:
            self.rotate()

    def close(self) -> None:
        """Stop the rotation timer and close the file; later writes reopen it."""

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._discard_handle()

    # ------------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------------
    def check_time_rotation(self, now: datetime | None = None) -> bool:
        """Rotate when ``now`` lies in a later calendar bucket than the last rotation."""

        if self.date_pattern is None:
            return False
        moment = now if now is not None else self._now()
        if rotation_bucket(self.date_pattern, moment) == rotation_bucket(self.date_pattern, self._last_rotation):
            return False
        self._last_rotation = moment
        self.rotate(reason="time")
        return True

    def rotate(self, *, reason: str = "size") -> None:
        """Shift rotated files up by one index and start a fresh live file."""

        was_open = self._handle is not None
        self._discard_handle()
        try:
            oldest = self.rotated_path(self.max_files)
            if oldest.exists():
                oldest.unlink()
            for index in range(self.max_files - 1, 0, -1):
                source = self.rotated_path(index)
                if source.exists():
                    source.rename(self.rotated_path(index + 1))
            if self.path.exists():
                self.path.rename(self.rotated_path(1))
        except OSError as exc:
            LOGGER.error("Error during log file rotation of %s", self.path, exc_info=exc)
            self._emit("file_rotation_error", {"path": str(self.path), "exception": repr(exc)})
        self._size = 0
        LOGGER.debug("Rotated log file %s (%s)", self.path, reason)
        self._emit("file_rotated", {"path": str(self.path), "reason": reason})
        if was_open:
            self._open()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _render(self, entry: LogEntry) -> str:
        if self.format == "json":
            return entry.to_json() + "\n"
        return self.formatter.format(entry) + "\n"

    def _check_file_size(self) -> None:
        try:
            self._size = self.path.stat().st_size if self.path.exists() else 0
        except OSError as exc:
            LOGGER.error("Error checking log file size of %s", self.path, exc_info=exc)
            self._size = 0
            return
        if self.mode == "a" and self._size >= self.max_size:
            self.rotate()

    def _open(self) -> None:
        mode = self.mode if not self._opened_once else "a"
        try:
            self._handle = self.path.open(mode, encoding="utf-8")
        except OSError as exc:
            LOGGER.error("Error opening log file %s", self.path, exc_info=exc)
            self._emit("file_open_error", {"path": str(self.path), "exception": repr(exc)})
            self._handle = None
            return
        if mode == "w":
            self._size = 0
        self._opened_once = True

    def _discard_handle(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.close()
        except OSError as exc:
            LOGGER.error("Error closing log file %s", self.path, exc_info=exc)

    def _ensure_timer(self) -> None:
        if self.date_pattern is None or (self._timer is not None and not self._timer.done()):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._timer = loop.create_task(self._rotation_loop(_CHECK_INTERVALS[self.date_pattern]))

    async def _rotation_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self.check_time_rotation()


__all__ = ["DATE_PATTERNS", "DEFAULT_MAX_FILES", "DEFAULT_MAX_SIZE", "FileTransport", "rotation_bucket"]
