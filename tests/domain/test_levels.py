from __future__ import annotations


import pytest

from lib_log_relay.domain.levels import LogLevel
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


@pytest.mark.parametrize(
    "name, expected",
    [
        ("debug", LogLevel.DEBUG),
        ("INFO", LogLevel.INFO),
        ("warn", LogLevel.WARN),
        ("Warning", LogLevel.WARN),
        ("error", LogLevel.ERROR),
        ("fatal", LogLevel.FATAL),
        ("CRITICAL", LogLevel.FATAL),
    ],
)
def test_from_name_accepts_case_insensitive_matches(name: str, expected: LogLevel) -> None:
    assert LogLevel.from_name(name) is expected


def test_from_name_rejects_unknown_level() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        LogLevel.from_name("verbose")


def test_levels_are_totally_ordered() -> None:
    ordered = [LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN, LogLevel.ERROR, LogLevel.FATAL]
    for lower, higher in zip(ordered, ordered[1:]):
        assert higher.at_least(lower)
        assert not lower.at_least(higher)


def test_every_level_passes_an_unset_threshold() -> None:
    assert all(level.at_least(None) for level in LogLevel)


def test_severity_is_the_lowercase_wire_name() -> None:
    assert [level.severity for level in LogLevel] == ["debug", "info", "warn", "error", "fatal"]


def test_only_error_and_fatal_capture_stacks() -> None:
    assert {level for level in LogLevel if level.captures_stack} == {LogLevel.ERROR, LogLevel.FATAL}


def test_coerce_passes_members_through() -> None:
    assert LogLevel.coerce(LogLevel.ERROR) is LogLevel.ERROR
    assert LogLevel.coerce("error") is LogLevel.ERROR
