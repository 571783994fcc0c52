from __future__ import annotations

from pathlib import Path

import pytest

from lib_log_relay import create_logger
from lib_log_relay.adapters.transports import ConsoleTransport, FileTransport, HttpTransport, WebSocketTransport
from lib_log_relay.domain.levels import LogLevel
from lib_log_relay.domain.timestamps import TimestampFormat
from tests.doubles import RecordingTransport
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def kinds(logger: object) -> list[type]:
    return [type(transport) for transport in logger.transports]  # type: ignore[attr-defined]


def test_defaults_give_a_console_logger() -> None:
    logger = create_logger()

    assert kinds(logger) == [ConsoleTransport]
    assert logger.options.level is LogLevel.DEBUG
    logger.shutdown()


def test_keyword_options_are_honoured(recorder: RecordingTransport) -> None:
    logger = create_logger(console=False, transports=[recorder], level="warn", include_timestamp=False)

    logger.info("recorded")
    logger.shutdown()

    assert logger.options.level is LogLevel.WARN
    assert recorder.entries[0].timestamp is None


def test_environment_overrides_keyword_options(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "error")
    monkeypatch.setenv("LOG_ASYNC", "yes")
    monkeypatch.setenv("LOG_QUEUE_SIZE", "42")
    monkeypatch.setenv("LOG_APP_NAME", "billing")
    monkeypatch.setenv("LOG_TIMESTAMP_FORMAT", "unix")
    monkeypatch.setenv("LOG_CONSOLE", "0")

    logger = create_logger(level="debug", app_name="ignored")

    options = logger.options
    assert (options.level, options.async_logging, options.log_queue, options.app_name) == (LogLevel.ERROR, True, 42, "billing")
    assert options.timestamp_format is TimestampFormat.UNIX
    assert logger.transports == ()
    logger.shutdown()


def test_console_mapping_survives_an_enabling_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_CONSOLE", "true")

    logger = create_logger(console={"format": "json", "colorize": False})

    console = logger.transports[0]
    assert isinstance(console, ConsoleTransport)
    assert console.colorize is False
    logger.shutdown()


def test_file_transport_defaults_to_logs_directory(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_FILE", "1")

    logger = create_logger(console=False, app_name="svc")
    logger.warn("to disk")
    logger.shutdown()

    assert kinds(logger) == [FileTransport]
    assert "to disk" in (tmp_path / "logs" / "svc.log").read_text(encoding="utf-8")


def test_file_options_pass_through(tmp_path: Path) -> None:
    logger = create_logger(console=False, file={"filename": "custom.log", "directory": tmp_path, "min_level": "error"})
    logger.info("below threshold")
    logger.error("kept")
    logger.shutdown()

    content = (tmp_path / "custom.log").read_text(encoding="utf-8")
    assert "kept" in content
    assert "below threshold" not in content


def test_remote_endpoints_from_arguments_and_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_HTTP_URL", "https://collector.test/env")

    logger = create_logger(console=False, http_url="https://collector.test/arg", websocket_url="ws://collector.test/ws")

    http, socket = logger.transports
    assert isinstance(http, HttpTransport) and http.url == "https://collector.test/env"
    assert isinstance(socket, WebSocketTransport) and socket.url == "ws://collector.test/ws"


def test_remote_transports_follow_explicit_ones(recorder: RecordingTransport) -> None:
    logger = create_logger(console=False, transports=[recorder], http_url="https://collector.test")

    assert kinds(logger) == [RecordingTransport, HttpTransport]


@pytest.mark.parametrize(
    "name, value",
    [
        ("LOG_ASYNC", "maybe"),
        ("LOG_QUEUE_SIZE", "lots"),
        ("LOG_QUEUE_SIZE", "0"),
        ("LOG_LEVEL", "loud"),
        ("LOG_ENVIRONMENT", "staging"),
    ],
)
def test_invalid_environment_values_are_rejected(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        create_logger(console=False)


def test_unknown_options_are_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown logger option"):
        create_logger(colour=True)


def test_every_call_returns_an_independent_logger(recorder: RecordingTransport) -> None:
    first = create_logger(console=False, transports=[recorder])
    second = create_logger(console=False)

    first.shutdown()

    assert first is not second
    assert first.closed and not second.closed
    second.shutdown()
