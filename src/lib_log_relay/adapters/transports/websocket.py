"""WebSocket transport with buffering and fixed-interval reconnects.

Purpose
-------
Stream entries to a live collector over one persistent connection and keep
them in a bounded buffer while the connection is down.

Contents
--------
* :class:`SocketState` – connection lifecycle states.
* :class:`WebSocketTransport` – ``websockets`` based sender.

System Role
-----------
Optional remote sink. The connection is opened on the event loop that first
uses the transport (at construction when a loop is running, otherwise on the
first ``log`` call inside a loop, or through :meth:`WebSocketTransport.connect`).

Alignment Notes
---------------
Each entry is sent as one text frame containing its wire JSON object. Entries
buffered while disconnected are sent in order as soon as the connection opens
and before any newer entry.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable, Iterable, Sequence
from enum import Enum
from functools import partial
from typing import Any, Deque

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import WebSocketException

from lib_log_relay.application.diagnostics import build_diagnostic_emitter
from lib_log_relay.application.ports.diagnostics import DiagnosticHook
from lib_log_relay.application.ports.filter import FilterPort
from lib_log_relay.domain.entry import LogEntry
from lib_log_relay.domain.levels import LogLevel

from .base import LevelGate

LOGGER = logging.getLogger(__name__)

Connector = Callable[[str], Awaitable[Any]]

_SEND_ERRORS = (WebSocketException, OSError)
_CONNECT_ERRORS = (WebSocketException, OSError, asyncio.TimeoutError)


class SocketState(Enum):
    """Lifecycle of the underlying connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class WebSocketTransport:
    """Send entries over a WebSocket connection.

    Parameters
    ----------
    url:
        ``ws://`` or ``wss://`` endpoint; required.
    protocols:
        Optional subprotocols offered during the handshake.
    reconnect:
        Reconnect after unexpected closes and failed attempts.
    max_reconnect_attempts:
        Consecutive attempts before giving up; ``0`` retries forever.
    reconnect_interval:
        Seconds between a close and the next attempt.
    buffer_when_disconnected:
        Keep entries logged while the connection is not open.
    max_buffer_size:
        Buffer capacity; the oldest entry is dropped when full. ``0`` means
        unbounded.
    connector:
        Coroutine factory returning a connection with ``send``, ``close`` and
        ``wait_closed``; defaults to :func:`websockets.asyncio.client.connect`.
    """

    def __init__(
        self,
        url: str,
        *,
        protocols: Sequence[str] | None = None,
        reconnect: bool = True,
        max_reconnect_attempts: int = 5,
        reconnect_interval: float = 5.0,
        buffer_when_disconnected: bool = True,
        max_buffer_size: int = 100,
        min_level: LogLevel | str | None = None,
        filters: Iterable[FilterPort] = (),
        diagnostic: DiagnosticHook = None,
        connector: Connector | None = None,
    ) -> None:
        if not url:
            raise ValueError("URL must be specified for WebSocketTransport")
        if max_reconnect_attempts < 0:
            raise ValueError("max_reconnect_attempts must be >= 0")
        if max_buffer_size < 0:
            raise ValueError("max_buffer_size must be >= 0")
        self.gate = LevelGate.build(min_level, filters)
        self.url = url
        self.reconnect = reconnect
        self.max_reconnect_attempts = max_reconnect_attempts
        self.reconnect_interval = reconnect_interval
        self.buffer_when_disconnected = buffer_when_disconnected
        self.max_buffer_size = max_buffer_size
        self._connector: Connector = connector or partial(ws_connect, subprotocols=list(protocols) if protocols else None)
        self._emit = build_diagnostic_emitter(diagnostic)
        self._buffer: Deque[LogEntry] = deque()
        self._state = SocketState.DISCONNECTED
        self._socket: Any = None
        self._attempts = 0
        self._started = False
        self._connect_task: asyncio.Task[None] | None = None
        self._reconnect_task: asyncio.Task[None] | None = None
        self._watch_task: asyncio.Task[None] | None = None
        self._start_in_background()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def state(self) -> SocketState:
        return self._state

    @property
    def buffered(self) -> tuple[LogEntry, ...]:
        """Entries waiting for an open connection, oldest first."""

        return tuple(self._buffer)

    @property
    def reconnect_attempts(self) -> int:
        return self._attempts

    # ------------------------------------------------------------------
    # Transport API
    # ------------------------------------------------------------------
    def log(self, entry: LogEntry) -> Awaitable[None] | None:
        if not self.gate.admits(entry):
            return None
        if self._state is SocketState.OPEN:
            return self._send(entry)
        if self._state is not SocketState.CLOSED and self.buffer_when_disconnected:
            self._buffer_entry(entry)
        self._start_in_background()
        return None

    async def connect(self) -> None:
        """Open the connection now, or wait for the attempt already under way."""

        if self._state in (SocketState.OPEN, SocketState.CLOSED):
            return
        loop = asyncio.get_running_loop()
        for task in (self._connect_task, self._reconnect_task):
            if task is not None and not task.done() and task.get_loop() is loop and task is not asyncio.current_task():
                await asyncio.shield(task)
                return
        if self._state is SocketState.CONNECTING:
            return
        self._started = True
        await self._connect_once()

    async def close(self) -> None:
        """Disable reconnection, cancel timers, and close the connection."""

        self.reconnect = False
        self._state = SocketState.CLOSED
        for task in (self._reconnect_task, self._connect_task, self._watch_task):
            await _cancel(task)
        self._reconnect_task = self._connect_task = self._watch_task = None
        socket, self._socket = self._socket, None
        if socket is not None:
            try:
                await socket.close()
            except _SEND_ERRORS as exc:
                LOGGER.debug("Error while closing WebSocket %s: %s", self.url, exc)

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------
    def _start_in_background(self) -> None:
        if self._started or self._state is not SocketState.DISCONNECTED:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._started = True
        self._connect_task = loop.create_task(self._connect_once())

    async def _connect_once(self) -> None:
        self._state = SocketState.CONNECTING
        try:
            socket = await self._connector(self.url)
        except _CONNECT_ERRORS as exc:
            LOGGER.error("Could not open WebSocket connection to %s: %s", self.url, exc)
            self._emit("socket_connect_failed", {"url": self.url, "exception": repr(exc)})
            self._on_connection_lost()
            return
        if self._state is SocketState.CLOSED:
            await socket.close()
            return
        self._socket = socket
        self._attempts = 0
        LOGGER.info("WebSocket connection established: %s", self.url)
        if not await self._flush_buffer(socket):
            return
        self._state = SocketState.OPEN
        self._emit("socket_open", {"url": self.url})
        self._watch_task = asyncio.get_running_loop().create_task(self._watch(socket))

    async def _flush_buffer(self, socket: Any) -> bool:
        if self._buffer:
            LOGGER.debug("Sending %d buffered entries to %s", len(self._buffer), self.url)
        while self._buffer:
            entry = self._buffer.popleft()
            try:
                await socket.send(entry.to_json())
            except _SEND_ERRORS as exc:
                LOGGER.error("Error sending buffered entry via WebSocket: %s", exc)
                self._buffer.appendleft(entry)
                self._on_connection_lost()
                return False
            if self._state is SocketState.CLOSED:
                return False
        return True

    async def _watch(self, socket: Any) -> None:
        await socket.wait_closed()
        if socket is self._socket and self._state is not SocketState.CLOSED:
            LOGGER.info("WebSocket connection to %s closed", self.url)
            self._on_connection_lost()

    def _on_connection_lost(self) -> None:
        if self._state is SocketState.CLOSED:
            return
        self._socket = None
        self._state = SocketState.DISCONNECTED
        unlimited = self.max_reconnect_attempts == 0
        if self.reconnect and (unlimited or self._attempts < self.max_reconnect_attempts):
            self._schedule_reconnect()
        elif self.reconnect:
            LOGGER.error("Giving up on WebSocket %s after %d reconnect attempts", self.url, self._attempts)
            self._emit("socket_reconnect_exhausted", {"url": self.url, "attempts": self._attempts})

    def _schedule_reconnect(self) -> None:
        self._attempts += 1
        self._emit(
            "socket_reconnect_scheduled",
            {"url": self.url, "attempt": self._attempts, "delay": self.reconnect_interval},
        )
        self._reconnect_task = asyncio.get_running_loop().create_task(self._reconnect_later())

    async def _reconnect_later(self) -> None:
        await asyncio.sleep(self.reconnect_interval)
        if self._state is not SocketState.DISCONNECTED:
            return
        LOGGER.info("WebSocket reconnection attempt (%d/%d) to %s", self._attempts, self.max_reconnect_attempts, self.url)
        await self._connect_once()

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------
    async def _send(self, entry: LogEntry) -> None:
        socket = self._socket
        if self._state is not SocketState.OPEN or socket is None:
            if self.buffer_when_disconnected and self._state is not SocketState.CLOSED:
                self._buffer_entry(entry)
            return
        try:
            await socket.send(entry.to_json())
        except _SEND_ERRORS as exc:
            LOGGER.error("Error sending log via WebSocket: %s", exc)
            if self.buffer_when_disconnected:
                self._buffer_entry(entry)

    def _buffer_entry(self, entry: LogEntry) -> None:
        if self.max_buffer_size and len(self._buffer) >= self.max_buffer_size:
            dropped = self._buffer.popleft()
            self._emit("socket_buffer_evicted", {"url": self.url, "level": dropped.level.severity})
        self._buffer.append(entry)


async def _cancel(task: asyncio.Task[None] | None) -> None:
    if task is None or task.done():
        return
    task.cancel()
    if task.get_loop() is not asyncio.get_running_loop() or task is asyncio.current_task():
        return
    try:
        await task
    except asyncio.CancelledError:
        pass


__all__ = ["Connector", "SocketState", "WebSocketTransport"]
