from __future__ import annotations

import json
from io import StringIO

import pytest
from rich.console import Console

from lib_log_relay.adapters.filters import MetadataFilter
from lib_log_relay.adapters.transports import ConsoleTransport
from lib_log_relay.domain.entry import LogEntry
from lib_log_relay.domain.levels import LogLevel
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]

TIMESTAMP = "2025-09-30T12:00:00.000Z"


def recording_console(**kwargs: object) -> Console:
    return Console(file=StringIO(), record=True, width=200, **kwargs)


def test_simple_output_contains_level_and_meta() -> None:
    console = recording_console()
    transport = ConsoleTransport(console=console, colorize=False)

    transport.log(LogEntry(TIMESTAMP, LogLevel.WARN, "disk low", {"free": 3}))

    assert console.export_text().strip() == '[2025-09-30T12:00:00.000Z] [WARN] disk low {"free": 3}'


def test_json_output_is_parseable() -> None:
    console = recording_console()
    transport = ConsoleTransport(console=console, format="json", colorize=False)

    transport.log(LogEntry(TIMESTAMP, LogLevel.INFO, "ready"))

    assert json.loads(console.export_text()) == {"timestamp": TIMESTAMP, "level": "info", "message": "ready"}


def test_detailed_output_without_timestamp() -> None:
    console = recording_console()
    transport = ConsoleTransport(console=console, format="detailed", show_timestamp=False, colorize=False)

    transport.log(LogEntry(TIMESTAMP, LogLevel.ERROR, "boom"))

    assert console.export_text().splitlines() == ["LEVEL: ERROR", "MESSAGE: boom"]


def test_markup_in_messages_is_not_interpreted() -> None:
    console = recording_console()
    transport = ConsoleTransport(console=console, colorize=False, show_timestamp=False)

    transport.log(LogEntry(None, LogLevel.INFO, "[bold]literal[/bold]"))

    assert "[bold]literal[/bold]" in console.export_text()


def test_level_threshold_and_filters_gate_output() -> None:
    console = recording_console()
    transport = ConsoleTransport(console=console, min_level="warn", filters=[MetadataFilter("audit", exists=True)], colorize=False)

    transport.log(LogEntry(None, LogLevel.INFO, "too low", {"audit": True}))
    transport.log(LogEntry(None, LogLevel.ERROR, "unaudited"))
    transport.log(LogEntry(None, LogLevel.ERROR, "shown", {"audit": True}))

    text = console.export_text()
    assert "shown" in text
    assert "too low" not in text
    assert "unaudited" not in text


def test_colorized_output_uses_level_styles() -> None:
    console = recording_console(force_terminal=True, color_system="truecolor")
    transport = ConsoleTransport(console=console, styles={"error": "bold red"})

    transport.log(LogEntry(None, LogLevel.ERROR, "red alert"))

    assert "\x1b[" in console.export_text(styles=True)


def test_unknown_format_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown console format"):
        ConsoleTransport(format="xml")
