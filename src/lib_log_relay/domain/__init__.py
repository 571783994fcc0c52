"""Domain value objects used by the relay logging core."""

from __future__ import annotations

from .entry import LogEntry
from .levels import LogLevel
from .stack import capture_stack
from .timestamps import TimestampFormat

__all__ = [
    "LogEntry",
    "LogLevel",
    "TimestampFormat",
    "capture_stack",
]
