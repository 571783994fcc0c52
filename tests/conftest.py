"""Shared fixtures: a recording transport and a clean ``LOG_*`` environment."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from tests.doubles import RecordingTransport

_LOG_ENV_VARS = (
    "LOG_LEVEL",
    "LOG_APP_NAME",
    "LOG_ENVIRONMENT",
    "LOG_ASYNC",
    "LOG_QUEUE_SIZE",
    "LOG_TIMESTAMP_FORMAT",
    "LOG_INCLUDE_TIMESTAMP",
    "LOG_STACK_TRACE",
    "LOG_STACK_TRACE_LIMIT",
    "LOG_CONSOLE",
    "LOG_FILE",
    "LOG_HTTP_URL",
    "LOG_WEBSOCKET_URL",
    "LIB_LOG_RELAY_USE_DOTENV",
)


@pytest.fixture(autouse=True)
def _clean_log_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _LOG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def recorder() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def diagnostics() -> list[tuple[str, dict]]:
    return []
