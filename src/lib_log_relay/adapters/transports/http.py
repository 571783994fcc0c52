"""HTTP transport posting entries as JSON.

Purpose
-------
Ship entries to a remote collector, either one request per entry with a
fixed-delay retry, or in batches flushed by size and by a periodic deadline.

Contents
--------
* :class:`HttpTransport` – ``httpx`` based sender.

System Role
-----------
Optional remote sink. ``log`` returns a coroutine whenever network I/O is
needed; the logger awaits it (async mode) or schedules it (sync mode).

Alignment Notes
---------------
Single entries are posted as the wire object, batches as a JSON array of wire
objects, both with ``Content-Type: application/json``. Any 2xx status counts
as success; every other outcome, including unexpected exceptions, is a
failure. Failed batches are put back in front of the queue and retried on
the next flush.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable, Mapping

import httpx

from lib_log_relay.application.diagnostics import build_diagnostic_emitter
from lib_log_relay.application.ports.diagnostics import DiagnosticHook
from lib_log_relay.application.ports.filter import FilterPort
from lib_log_relay.domain.entry import LogEntry
from lib_log_relay.domain.levels import LogLevel

from .base import LevelGate

LOGGER = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


class HttpTransport:
    """POST entries to ``url``.

    Parameters
    ----------
    url:
        Collector endpoint; required.
    headers:
        Extra request headers merged over the JSON content type.
    retry_count:
        Extra attempts per entry in immediate mode.
    retry_delay:
        Seconds between attempts (fixed, no backoff).
    batch_logs:
        Enable batching.
    batch_size:
        Queue length that triggers an immediate batch send.
    batch_timeout:
        Seconds between periodic batch flushes.
    timeout:
        Per-request timeout handed to ``httpx``.
    transport:
        Optional ``httpx`` transport, e.g. :class:`httpx.MockTransport`.
    sleep:
        Coroutine used between retries.
    """

    def __init__(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        retry_count: int = 3,
        retry_delay: float = 1.0,
        batch_logs: bool = False,
        batch_size: int = 10,
        batch_timeout: float = 5.0,
        timeout: float = 10.0,
        min_level: LogLevel | str | None = None,
        filters: Iterable[FilterPort] = (),
        diagnostic: DiagnosticHook = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        if not url:
            raise ValueError("URL must be specified for HttpTransport")
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as exc:
            raise ValueError(f"Invalid URL for HttpTransport: {url!r} ({exc})") from exc
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ValueError(f"Invalid URL for HttpTransport: {url!r} (absolute http(s) URL required)")
        if retry_count < 0:
            raise ValueError("retry_count must be >= 0")
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if batch_timeout <= 0:
            raise ValueError("batch_timeout must be positive")
        self.gate = LevelGate.build(min_level, filters)
        self.url = url
        self.headers = {"Content-Type": "application/json", **dict(headers or {})}
        self.retry_count = retry_count
        self.retry_delay = retry_delay
        self.batch_logs = batch_logs
        self.batch_size = batch_size
        self.batch_timeout = batch_timeout
        self.timeout = timeout
        self._http_transport = transport
        self._sleep = sleep
        self._emit = build_diagnostic_emitter(diagnostic)
        self._queue: list[LogEntry] = []
        self._deadline = time.monotonic() + batch_timeout
        self._timer: asyncio.Task[None] | None = None
        self._closed = False
        self._ensure_timer()

    @property
    def queued(self) -> tuple[LogEntry, ...]:
        """Entries waiting for the next batch send."""

        return tuple(self._queue)

    # ------------------------------------------------------------------
    # Transport API
    # ------------------------------------------------------------------
    def log(self, entry: LogEntry) -> Awaitable[None] | None:
        if not self.gate.admits(entry):
            return None
        if not self.batch_logs:
            return self._send_entry(entry)
        self._ensure_timer()
        self._queue.append(entry)
        if len(self._queue) >= self.batch_size:
            self._deadline = time.monotonic() + self.batch_timeout
            return self.flush()
        return None

    async def flush(self) -> None:
        """Send every queued entry as one batch; failures requeue them."""

        if not self._queue:
            return
        batch, self._queue = self._queue, []
        try:
            await self._post("[" + ",".join(entry.to_json() for entry in batch) + "]")
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("HTTP transport batch sending failed: %s", exc)
            self._queue = batch + self._queue
            self._emit("batch_requeued", {"url": self.url, "size": len(batch), "queued": len(self._queue)})

    async def close(self) -> None:
        """Flush pending entries and stop the batch timer."""

        self._closed = True
        if self.batch_logs and self._queue:
            await self.flush()
        timer, self._timer = self._timer, None
        if timer is not None and not timer.done():
            timer.cancel()
            if timer.get_loop() is asyncio.get_running_loop():
                try:
                    await timer
                except asyncio.CancelledError:
                    pass

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _send_entry(self, entry: LogEntry) -> None:
        body = entry.to_json()
        attempts = self.retry_count + 1
        for attempt in range(1, attempts + 1):
            try:
                await self._post(body)
                return
            except Exception as exc:  # noqa: BLE001
                LOGGER.error("HTTP transport log sending failed (attempt %d/%d): %s", attempt, attempts, exc)
                if attempt < attempts:
                    self._emit("http_retry", {"url": self.url, "attempt": attempt, "delay": self.retry_delay})
                    await self._sleep(self.retry_delay)
        self._emit("http_dropped", {"url": self.url, "level": entry.level.severity, "attempts": attempts})

    async def _post(self, body: str) -> None:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._http_transport) as client:
            response = await client.post(self.url, content=body.encode("utf-8"), headers=self.headers)
            response.raise_for_status()

    def _ensure_timer(self) -> None:
        if not self.batch_logs or self._closed:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        timer = self._timer
        if timer is not None and not timer.done() and timer.get_loop() is loop:
            return
        self._deadline = time.monotonic() + self.batch_timeout
        self._timer = loop.create_task(self._run_timer())

    async def _run_timer(self) -> None:
        while True:
            remaining = self._deadline - time.monotonic()
            if remaining > 0:
                await asyncio.sleep(remaining)
                continue
            self._deadline = time.monotonic() + self.batch_timeout
            try:
                await self.flush()
            except Exception as exc:  # noqa: BLE001
                LOGGER.error("HTTP transport batch timer failed", exc_info=exc)


__all__ = ["HttpTransport"]
