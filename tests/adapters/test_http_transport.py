from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from lib_log_relay.adapters.transports import HttpTransport
from lib_log_relay.application.logger import Logger
from lib_log_relay.domain.entry import LogEntry
from lib_log_relay.domain.levels import LogLevel
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]

URL = "https://collector.test/logs"


def entry(message: str, level: LogLevel = LogLevel.INFO) -> LogEntry:
    return LogEntry("2025-09-30T12:00:00.000Z", level, message)


class Collector:
    """``httpx.MockTransport`` handler recording requests and replaying statuses."""

    def __init__(self, statuses: list[int | Exception] | None = None) -> None:
        self.statuses = list(statuses or [])
        self.requests: list[httpx.Request] = []

    @property
    def bodies(self) -> list[object]:
        return [json.loads(request.content) for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.statuses.pop(0) if self.statuses else 200
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(outcome)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.mark.asyncio
async def test_single_entry_is_posted_as_wire_json() -> None:
    collector = Collector()
    transport = HttpTransport(URL, headers={"X-Api-Key": "k"}, transport=collector.transport())

    await transport.log(entry("hello"))  # type: ignore[misc]

    request = collector.requests[0]
    assert request.method == "POST"
    assert str(request.url) == URL
    assert request.headers["content-type"] == "application/json"
    assert request.headers["x-api-key"] == "k"
    assert collector.bodies == [{"timestamp": "2025-09-30T12:00:00.000Z", "level": "info", "message": "hello"}]


@pytest.mark.asyncio
async def test_failed_send_is_retried_with_fixed_delay() -> None:
    collector = Collector([500, 503])
    sleeper = SleepRecorder()
    events: list[str] = []
    transport = HttpTransport(
        URL,
        retry_delay=0.5,
        transport=collector.transport(),
        sleep=sleeper,
        diagnostic=lambda name, payload: events.append(name),
    )

    await transport.log(entry("eventually"))  # type: ignore[misc]

    assert len(collector.requests) == 3
    assert sleeper.delays == [0.5, 0.5]
    assert events == ["http_retry", "http_retry"]


@pytest.mark.asyncio
async def test_entry_is_dropped_after_retry_count_attempts() -> None:
    collector = Collector([500, httpx.ConnectError("refused"), 502, 500])
    sleeper = SleepRecorder()
    events: list[tuple[str, dict]] = []
    transport = HttpTransport(
        URL,
        retry_count=2,
        transport=collector.transport(),
        sleep=sleeper,
        diagnostic=lambda name, payload: events.append((name, payload)),
    )

    await transport.log(entry("lost", LogLevel.ERROR))  # type: ignore[misc]

    assert len(collector.requests) == 3
    assert sleeper.delays == [1.0, 1.0]
    assert events[-1] == ("http_dropped", {"url": URL, "level": "error", "attempts": 3})


@pytest.mark.asyncio
async def test_batch_is_sent_when_size_is_reached() -> None:
    collector = Collector()
    transport = HttpTransport(URL, batch_logs=True, batch_size=3, batch_timeout=60, transport=collector.transport())

    assert transport.log(entry("a")) is None
    assert transport.log(entry("b")) is None
    pending = transport.log(entry("c"))
    assert pending is not None
    await pending

    assert [[item["message"] for item in body] for body in collector.bodies] == [["a", "b", "c"]]  # type: ignore[union-attr]
    assert transport.queued == ()
    await transport.close()


@pytest.mark.asyncio
async def test_batch_timer_flushes_partial_batches() -> None:
    collector = Collector()
    transport = HttpTransport(URL, batch_logs=True, batch_size=100, batch_timeout=0.05, transport=collector.transport())

    transport.log(entry("a"))
    transport.log(entry("b"))
    await asyncio.sleep(0.2)

    assert [[item["message"] for item in body] for body in collector.bodies] == [["a", "b"]]  # type: ignore[union-attr]
    await transport.close()


@pytest.mark.asyncio
async def test_timer_keeps_running_after_an_empty_tick() -> None:
    collector = Collector()
    transport = HttpTransport(URL, batch_logs=True, batch_size=100, batch_timeout=0.05, transport=collector.transport())
    transport.log(entry("first"))
    await asyncio.sleep(0.2)

    transport.log(entry("second"))
    await asyncio.sleep(0.2)

    assert [[item["message"] for item in body] for body in collector.bodies] == [["first"], ["second"]]  # type: ignore[union-attr]
    await transport.close()


@pytest.mark.asyncio
async def test_failed_batch_is_requeued_in_front() -> None:
    collector = Collector([500])
    events: list[str] = []
    transport = HttpTransport(
        URL,
        batch_logs=True,
        batch_size=2,
        batch_timeout=60,
        transport=collector.transport(),
        diagnostic=lambda name, payload: events.append(name),
    )

    transport.log(entry("a"))
    await transport.log(entry("b"))  # type: ignore[misc]
    assert [item.message for item in transport.queued] == ["a", "b"]
    await transport.log(entry("c"))  # type: ignore[misc]

    assert events == ["batch_requeued"]
    assert [item["message"] for item in collector.bodies[-1]] == ["a", "b", "c"]  # type: ignore[union-attr]
    await transport.close()


@pytest.mark.asyncio
async def test_unexpected_errors_also_requeue_the_batch() -> None:
    collector = Collector([RuntimeError("handler crashed")])
    transport = HttpTransport(URL, batch_logs=True, batch_size=2, batch_timeout=60, transport=collector.transport())

    transport.log(entry("a"))
    await transport.log(entry("b"))  # type: ignore[misc]

    assert [item.message for item in transport.queued] == ["a", "b"]
    await transport.close()
    assert [item["message"] for item in collector.bodies[-1]] == ["a", "b"]  # type: ignore[union-attr]


@pytest.mark.asyncio
async def test_unexpected_errors_are_retried_in_immediate_mode() -> None:
    collector = Collector([RuntimeError("handler crashed")])
    sleeper = SleepRecorder()
    transport = HttpTransport(URL, transport=collector.transport(), sleep=sleeper)

    await transport.log(entry("second try"))  # type: ignore[misc]

    assert len(collector.requests) == 2
    assert sleeper.delays == [1.0]


@pytest.mark.asyncio
async def test_close_flushes_pending_entries() -> None:
    collector = Collector()
    transport = HttpTransport(URL, batch_logs=True, batch_size=10, batch_timeout=60, transport=collector.transport())

    transport.log(entry("a"))
    transport.log(entry("b"))
    await transport.close()

    assert len(collector.requests) == 1
    assert transport.queued == ()


@pytest.mark.asyncio
async def test_logger_awaits_http_delivery_on_close() -> None:
    collector = Collector()
    http = HttpTransport(URL, transport=collector.transport())
    logger = Logger(console=False, transports=[http])

    logger.info("one")
    logger.warn("two")
    await logger.close()

    assert [body["message"] for body in collector.bodies] == ["one", "two"]  # type: ignore[index]


@pytest.mark.asyncio
async def test_retried_entry_still_arrives_before_later_ones() -> None:
    collector = Collector([503])
    logger = Logger(console=False, transports=[HttpTransport(URL, retry_delay=0.01, transport=collector.transport())])

    logger.info("first")
    logger.info("second")
    await logger.close()

    assert [body["message"] for body in collector.bodies] == ["first", "first", "second"]  # type: ignore[index]


def test_immediate_mode_without_loop_through_logger() -> None:
    collector = Collector()
    logger = Logger(console=False, transports=[HttpTransport(URL, transport=collector.transport())])

    logger.error("sync caller")
    logger.shutdown()

    assert [body["message"] for body in collector.bodies] == ["sync caller"]  # type: ignore[index]


def test_level_threshold_skips_requests() -> None:
    collector = Collector()
    transport = HttpTransport(URL, min_level="error", transport=collector.transport())

    assert transport.log(entry("debug noise", LogLevel.DEBUG)) is None
    assert collector.requests == []


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"url": ""}, "URL must be specified"),
        ({"url": "https://collector.test:port/logs"}, "Invalid URL"),
        ({"url": "collector.test/logs"}, "absolute http"),
        ({"url": "ftp://collector.test/logs"}, "absolute http"),
        ({"url": URL, "batch_size": 0}, "batch_size"),
        ({"url": URL, "batch_timeout": 0}, "batch_timeout"),
        ({"url": URL, "retry_count": -1}, "retry_count"),
    ],
)
def test_invalid_configuration_is_rejected(kwargs: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        HttpTransport(**kwargs)
