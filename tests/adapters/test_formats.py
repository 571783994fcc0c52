from __future__ import annotations

import json

import pytest

from lib_log_relay.adapters.formats import DetailedFormat, JsonFormat, SimpleFormat
from lib_log_relay.domain.entry import LogEntry
from lib_log_relay.domain.levels import LogLevel
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]

TIMESTAMP = "2025-09-30T12:00:00.000Z"


@pytest.fixture
def entry() -> LogEntry:
    return LogEntry(TIMESTAMP, LogLevel.ERROR, "boom", {"code": 7}, "    at main (app.py:3)")


def test_simple_format_renders_one_line_plus_stack(entry: LogEntry) -> None:
    rendered = SimpleFormat().format(entry)

    assert rendered == '[2025-09-30T12:00:00.000Z] [ERROR] boom {"code": 7}\n    at main (app.py:3)'


def test_simple_format_honours_toggles_and_separators(entry: LogEntry) -> None:
    formatter = SimpleFormat(show_timestamp=False, show_meta=False, level_separator=" | ", stack_trace_separator=" :: ")

    assert formatter.format(entry) == "[ERROR] | boom ::     at main (app.py:3)"


def test_simple_format_can_render_meta_as_repr(entry: LogEntry) -> None:
    formatter = SimpleFormat(meta_format="repr", show_timestamp=False)

    assert "{'code': 7}" in formatter.format(entry)


def test_simple_format_rerenders_timestamps(entry: LogEntry) -> None:
    formatter = SimpleFormat(timestamp_format="unix")

    assert formatter.format(entry).startswith("[1759233600000] ")


def test_unknown_meta_format_is_rejected() -> None:
    with pytest.raises(ValueError, match="meta_format"):
        SimpleFormat(meta_format="yaml")


def test_detailed_format_labels_every_part(entry: LogEntry) -> None:
    lines = DetailedFormat().format(entry).splitlines()

    assert lines[0] == f"TIME: {TIMESTAMP}"
    assert lines[1] == "LEVEL: ERROR"
    assert lines[2] == "MESSAGE: boom"
    assert lines[3] == "META: {"
    assert "STACK TRACE:" in lines


def test_detailed_format_is_pure(entry: LogEntry) -> None:
    formatter = DetailedFormat()

    assert formatter.format(entry) == formatter.format(entry)
    assert formatter.json_indent == 2


def test_json_format_round_trips_with_default_keys(entry: LogEntry) -> None:
    formatter = JsonFormat()

    assert formatter.parse(formatter.format(entry)) == entry


def test_json_format_round_trips_with_custom_keys(entry: LogEntry) -> None:
    formatter = JsonFormat(
        timestamp_key="@timestamp",
        level_key="severity",
        message_key="msg",
        meta_key="context",
        stack_trace_key="trace",
        indent=2,
    )

    document = json.loads(formatter.format(entry))

    assert set(document) == {"@timestamp", "severity", "msg", "context", "trace"}
    assert formatter.parse(formatter.format(entry)) == entry


def test_json_format_adds_constant_fields_and_unix_timestamps(entry: LogEntry) -> None:
    formatter = JsonFormat(additional_fields={"service": "billing"}, use_unix_timestamps=True)

    document = json.loads(formatter.format(entry))

    assert document["service"] == "billing"
    assert document["timestamp"] == 1759233600000


def test_json_parse_rejects_non_objects() -> None:
    with pytest.raises(ValueError, match="must be an object"):
        JsonFormat().parse("[1, 2]")


def test_json_parse_defaults_missing_level_to_info() -> None:
    parsed = JsonFormat().parse('{"message": "bare"}')

    assert parsed.level is LogLevel.INFO
    assert parsed.timestamp is None
