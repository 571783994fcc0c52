"""Logger orchestrator: entry creation, queueing, and transport fan-out.

Purpose
-------
Own the ordered transport list of one logger, turn log calls into immutable
:class:`LogEntry` objects, and deliver them either inline (sync mode) or via a
bounded FIFO drained by a single background task (async mode).

Contents
--------
* :class:`Logger` – the public orchestrator.
* ``_running_loop`` – helper returning the active event loop or ``None``.

System Role
-----------
Application-layer core. It depends only on the ports in
:mod:`lib_log_relay.application.ports`; concrete transports are created by
the default-transport factory in :mod:`lib_log_relay.runtime._composition`.

Alignment Notes
---------------
Delivery failures are contained here: they are logged through
:data:`LOGGER`, reported through the optional diagnostic hook, and never
reach the caller of :meth:`Logger.log`. Within one logger every transport
receives entries in call order; at most one drain task runs at a time.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from collections.abc import Awaitable, Callable, Iterable, Mapping
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Deque

from lib_log_relay.domain.entry import LogEntry
from lib_log_relay.domain.levels import LogLevel
from lib_log_relay.domain.stack import capture_stack

from .diagnostics import build_diagnostic_emitter
from .options import LoggerOptions
from .ports.diagnostics import DiagnosticHook
from .ports.time import ClockPort
from .ports.transport import TransportPort

if TYPE_CHECKING:
    from .child import ChildLogger

LOGGER = logging.getLogger(__name__)

DefaultTransportFactory = Callable[[LoggerOptions], Iterable[TransportPort]]
_Settlement = tuple[list[tuple[TransportPort, Awaitable[Any]]], str, LogEntry | None]

_DRAIN_POLL_SECONDS = 0.05


class _SystemClock(ClockPort):
    """Clock returning timezone-aware UTC timestamps."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def _coerce_meta(meta: Any) -> Mapping[str, Any] | None:
    if meta is None or isinstance(meta, Mapping):
        return meta
    return {"value": meta}


def _resolve_default_factory() -> DefaultTransportFactory:
    from lib_log_relay.runtime._composition import build_default_transports

    return build_default_transports


class Logger:
    """Structured logger fanning entries out to an ordered list of transports.

    Parameters
    ----------
    options:
        Base :class:`LoggerOptions`; keyword ``overrides`` are merged on top.
    diagnostic:
        Optional callback receiving named events such as ``transport_error``
        or ``queue_evicted``.
    clock:
        Time source used to stamp entries; defaults to UTC wall clock.
    default_transports:
        Factory building the console/file transports requested by
        ``options.console`` and ``options.file``.

    Examples
    --------
    >>> class Recorder:
    ...     def __init__(self):
    ...         self.messages = []
    ...     def log(self, entry):
    ...         self.messages.append(entry.message)
    >>> recorder = Recorder()
    >>> logger = Logger(console=False, transports=[recorder])
    >>> logger.info("ready")
    >>> recorder.messages
    ['ready']
    >>> logger.shutdown()
    """

    def __init__(
        self,
        options: LoggerOptions | None = None,
        *,
        diagnostic: DiagnosticHook = None,
        clock: ClockPort | None = None,
        default_transports: DefaultTransportFactory | None = None,
        **overrides: Any,
    ) -> None:
        base = options if options is not None else LoggerOptions()
        self._options = base.merged(overrides)
        self._diagnostic_hook = diagnostic
        self._emit = build_diagnostic_emitter(diagnostic)
        self._clock: ClockPort = clock or _SystemClock()
        self._default_transports = default_transports or _resolve_default_factory()
        self._transports: list[TransportPort] = list(self._options.transports)
        self._transports.extend(self._default_transports(self._options))
        self._queue: Deque[LogEntry] = deque()
        self._draining = False
        self._drain_task: asyncio.Task[None] | None = None
        self._settling: Deque[_Settlement] = deque()
        self._settle_task: asyncio.Task[None] | None = None
        self._closed = False
        self._dropped = 0

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def options(self) -> LoggerOptions:
        """Return the immutable configuration of this logger."""

        return self._options

    @property
    def transports(self) -> tuple[TransportPort, ...]:
        """Return the registered transports in dispatch order."""

        return tuple(self._transports)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Number of queued entries not yet handed to a drain pass."""

        return len(self._queue)

    @property
    def dropped(self) -> int:
        """Number of entries evicted by the drop-oldest queue policy."""

        return self._dropped

    @property
    def draining(self) -> bool:
        return self._draining

    # ------------------------------------------------------------------
    # Logging API
    # ------------------------------------------------------------------
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
        """Create an entry for ``message`` and deliver or enqueue it.

        Calls made after :meth:`close` are ignored with a warning on the
        library's diagnostic logger.
        """

        if self._closed:
            LOGGER.warning("Logger is closed: message not processed")
            self._emit("closed_logger_used", {"message": message})
            return
        entry = self._create_entry(LogLevel.coerce(level), message, _coerce_meta(meta))
        if not self._passes_filters(entry):
            return
        if self._options.async_logging:
            self._enqueue(entry)
        else:
            self._dispatch_now(entry)

    # ------------------------------------------------------------------
    # Transport management
    # ------------------------------------------------------------------
    def add_transport(self, transport: TransportPort) -> "Logger":
        """Append ``transport`` to the dispatch list and return the logger."""

        self._transports.append(transport)
        return self

    def clear_transports(self) -> "Logger":
        """Close every registered transport and empty the dispatch list."""

        transports, self._transports = self._transports, []
        for transport in transports:
            close = getattr(transport, "close", None)
            if not callable(close):
                continue
            try:
                result = close()
            except Exception as exc:  # noqa: BLE001
                self._report_close_error(transport, exc)
                continue
            if inspect.isawaitable(result):
                self._settle_later([(transport, result)], action="close")
        return self

    def child(
        self,
        meta: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> "ChildLogger":
        """Return a logger that merges ``meta`` into every leveled call.

        The child is built from this logger's options merged with ``options``;
        transports passed explicitly in the options are shared, default
        console/file transports are created anew.
        """

        from .child import ChildLogger

        child_logger = Logger(
            self._options.merged(options),
            diagnostic=self._diagnostic_hook,
            clock=self._clock,
            default_transports=self._default_transports,
        )
        return ChildLogger(child_logger, meta)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def flush(self) -> None:
        """Wait until queued and in-flight deliveries finished."""

        await self._drain_remaining()
        await self._await_settling()

    async def close(self) -> None:
        """Stop accepting entries, drain the queue, then close every transport.

        Calling ``close`` again is a no-op.
        """

        if self._closed:
            return
        self._closed = True
        await self._drain_remaining()
        await self._await_settling()
        for transport in list(self._transports):
            await self._close_transport(transport)

    def shutdown(self) -> None:
        """Synchronously run :meth:`close` in a fresh event loop.

        Raises :class:`RuntimeError` inside a running loop; await
        :meth:`close` there instead.
        """

        if _running_loop() is not None:
            raise RuntimeError("Logger.shutdown() cannot run inside an active event loop; await Logger.close() instead")
        asyncio.run(self.close())

    async def __aenter__(self) -> "Logger":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Entry creation
    # ------------------------------------------------------------------
    def _create_entry(self, level: LogLevel, message: str, meta: Mapping[str, Any] | None) -> LogEntry:
        options = self._options
        timestamp = options.timestamp_format.render(self._clock.now()) if options.include_timestamp else None
        stack_trace = None
        if options.include_stack_trace and level.captures_stack:
            stack_trace = capture_stack(options.stack_trace_limit)
        return LogEntry(timestamp=timestamp, level=level, message=message, meta=meta, stack_trace=stack_trace)

    def _passes_filters(self, entry: LogEntry) -> bool:
        for entry_filter in self._options.filters:
            try:
                if not entry_filter.filter(entry):
                    return False
            except Exception as exc:  # noqa: BLE001
                LOGGER.error("Log filter %r raised; admitting entry", entry_filter, exc_info=exc)
        return True

    # ------------------------------------------------------------------
    # Synchronous delivery
    # ------------------------------------------------------------------
    def _dispatch_now(self, entry: LogEntry) -> None:
        pending: list[tuple[TransportPort, Awaitable[Any]]] = []
        for transport in list(self._transports):
            try:
                result = transport.log(entry)
            except Exception as exc:  # noqa: BLE001
                self._report_transport_error(transport, entry, exc)
                continue
            if inspect.isawaitable(result):
                pending.append((transport, result))
        if pending:
            self._settle_later(pending, action="log", entry=entry)

    def _settle_later(
        self,
        pending: list[tuple[TransportPort, Awaitable[Any]]],
        *,
        action: str,
        entry: LogEntry | None = None,
    ) -> None:
        # one chain per logger keeps deliveries serial and in call order
        self._settling.append((pending, action, entry))
        loop = _running_loop()
        if loop is None:
            asyncio.run(self._settle_chain())
            return
        task = self._settle_task
        if task is None or task.done() or task.get_loop() is not loop:
            self._settle_task = loop.create_task(self._settle_chain())

    async def _settle_chain(self) -> None:
        while self._settling:
            pending, action, entry = self._settling.popleft()
            await self._settle_all(pending, action=action, entry=entry)

    async def _settle_all(
        self,
        pending: list[tuple[TransportPort, Awaitable[Any]]],
        *,
        action: str,
        entry: LogEntry | None,
    ) -> None:
        for transport, awaitable in pending:
            await self._settle(transport, awaitable, action=action, entry=entry)

    async def _settle(
        self,
        transport: TransportPort,
        awaitable: Awaitable[Any],
        *,
        action: str,
        entry: LogEntry | None,
    ) -> None:
        try:
            await awaitable
        except Exception as exc:  # noqa: BLE001
            if action == "close":
                self._report_close_error(transport, exc)
            else:
                self._report_transport_error(transport, entry, exc)

    async def _await_settling(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            task = self._settle_task
            if task is not None and not task.done() and task.get_loop() is loop and task is not asyncio.current_task():
                await task
            elif self._settling:
                await self._settle_chain()
            else:
                return

    # ------------------------------------------------------------------
    # Asynchronous delivery
    # ------------------------------------------------------------------
    def _enqueue(self, entry: LogEntry) -> None:
        if len(self._queue) >= self._options.log_queue:
            evicted = self._queue.popleft()
            self._dropped += 1
            self._emit("queue_evicted", {"level": evicted.level.severity, "message": evicted.message})
        self._queue.append(entry)
        if not self._drain_active():
            self._start_drain()

    def _drain_active(self) -> bool:
        task = self._drain_task
        if self._draining and task is not None and (task.done() or task.get_loop() is not _running_loop()):
            # the owning loop went away before the drain task could finish
            self._draining = False
            self._drain_task = None
        return self._draining

    def _start_drain(self) -> None:
        self._draining = True
        loop = _running_loop()
        if loop is None:
            asyncio.run(self._drain())
            return
        self._drain_task = loop.create_task(self._drain())

    async def _drain(self) -> None:
        self._draining = True
        try:
            while self._queue:
                entry = self._queue.popleft()
                await self._write_to_transports(entry)
        finally:
            self._draining = False
            self._drain_task = None

    async def _drain_remaining(self) -> None:
        while self._queue or self._drain_active():
            if self._draining:
                await asyncio.sleep(_DRAIN_POLL_SECONDS)
            else:
                await self._drain()

    async def _write_to_transports(self, entry: LogEntry) -> None:
        """Deliver ``entry`` to every transport in order, isolating failures."""

        for transport in list(self._transports):
            try:
                result = transport.log(entry)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:  # noqa: BLE001
                self._report_transport_error(transport, entry, exc)

    # ------------------------------------------------------------------
    # Failure reporting
    # ------------------------------------------------------------------
    async def _close_transport(self, transport: TransportPort) -> None:
        close = getattr(transport, "close", None)
        if not callable(close):
            return
        try:
            result = close()
            if inspect.isawaitable(result):
                await result
        except Exception as exc:  # noqa: BLE001
            self._report_close_error(transport, exc)

    def _report_transport_error(self, transport: TransportPort, entry: LogEntry | None, exc: Exception) -> None:
        LOGGER.error("Transport write error in %s", type(transport).__name__, exc_info=exc)
        self._emit(
            "transport_error",
            {
                "transport": type(transport).__name__,
                "level": entry.level.severity if entry is not None else None,
                "exception": repr(exc),
            },
        )

    def _report_close_error(self, transport: TransportPort, exc: Exception) -> None:
        LOGGER.error("Transport close error in %s", type(transport).__name__, exc_info=exc)
        self._emit("transport_close_error", {"transport": type(transport).__name__, "exception": repr(exc)})


__all__ = ["Logger"]
