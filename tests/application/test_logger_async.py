"""Queued delivery: FIFO order, single drain, bounded capacity, draining close."""

from __future__ import annotations

import asyncio

import pytest

from lib_log_relay.application.logger import Logger
from tests.doubles import FailingTransport, RecordingTransport, SlowTransport
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def build_async_logger(*transports: object, **options: object) -> Logger:
    return Logger(console=False, async_logging=True, transports=list(transports), **options)


@pytest.mark.asyncio
async def test_queue_is_drained_in_fifo_order() -> None:
    slow = SlowTransport()
    logger = build_async_logger(slow)

    for index in range(20):
        logger.info(f"m{index}")
    await logger.flush()

    assert slow.messages == [f"m{index}" for index in range(20)]
    await logger.close()


@pytest.mark.asyncio
async def test_log_returns_before_delivery() -> None:
    recorder = RecordingTransport()
    logger = build_async_logger(recorder)

    logger.info("queued")

    assert recorder.messages == []
    assert logger.pending == 1
    assert logger.draining
    await logger.close()
    assert recorder.messages == ["queued"]


@pytest.mark.asyncio
async def test_at_most_one_drain_runs_at_a_time() -> None:
    slow = SlowTransport(delay=0.001)
    logger = build_async_logger(slow)

    for index in range(10):
        logger.info(f"m{index}")
        await asyncio.sleep(0)
    await logger.flush()

    assert slow.max_active == 1
    assert slow.messages == [f"m{index}" for index in range(10)]
    await logger.close()


@pytest.mark.asyncio
async def test_full_queue_evicts_the_oldest_entry() -> None:
    events: list[tuple[str, dict]] = []
    recorder = RecordingTransport()
    logger = build_async_logger(recorder, log_queue=3, diagnostic=lambda name, payload: events.append((name, payload)))

    for index in range(5):
        logger.info(f"m{index}")

    assert logger.pending == 3
    assert logger.dropped == 2
    assert [payload["message"] for name, payload in events if name == "queue_evicted"] == ["m0", "m1"]
    await logger.close()
    assert recorder.messages == ["m2", "m3", "m4"]


@pytest.mark.asyncio
async def test_close_drains_everything_before_closing_transports() -> None:
    slow = SlowTransport(delay=0.001)
    logger = build_async_logger(slow)

    for index in range(5):
        logger.warn(f"m{index}")
    await logger.close()

    assert slow.messages == [f"m{index}" for index in range(5)]
    assert slow.closed == 1
    assert logger.pending == 0
    assert not logger.draining


@pytest.mark.asyncio
async def test_failing_transport_does_not_stop_the_drain() -> None:
    recorder = RecordingTransport()
    logger = build_async_logger(FailingTransport(), recorder)

    logger.info("a")
    logger.info("b")
    await logger.close()

    assert recorder.messages == ["a", "b"]


def test_async_mode_without_running_loop_delivers_inline() -> None:
    recorder = RecordingTransport()
    logger = build_async_logger(recorder)

    logger.info("no loop")

    assert recorder.messages == ["no loop"]
    assert logger.pending == 0
    logger.shutdown()


def test_invalid_queue_capacity_is_rejected() -> None:
    with pytest.raises(ValueError, match="log_queue"):
        build_async_logger(log_queue=0)
