"""Public package surface of lib_log_relay.

Import the logger, its options, and the bundled transports, formats, and
filters from here; :func:`create_logger` wires them from keyword options and
``LOG_*`` environment variables.
"""

from __future__ import annotations

from .adapters import (
    ConsoleTransport,
    DetailedFormat,
    FileTransport,
    HttpTransport,
    JsonFormat,
    LevelFilter,
    LevelGate,
    MetadataFilter,
    SimpleFormat,
    SocketState,
    WebSocketTransport,
    all_of,
    any_of,
    negate,
)
from .application import ChildLogger, Logger, LoggerOptions
from .application.ports import FilterPort, FormatPort, TransportPort
from .domain import LogEntry, LogLevel, TimestampFormat
from .runtime import create_logger

__all__ = [
    "ChildLogger",
    "ConsoleTransport",
    "DetailedFormat",
    "FileTransport",
    "FilterPort",
    "FormatPort",
    "HttpTransport",
    "JsonFormat",
    "LevelFilter",
    "LevelGate",
    "LogEntry",
    "LogLevel",
    "Logger",
    "LoggerOptions",
    "MetadataFilter",
    "SimpleFormat",
    "SocketState",
    "TimestampFormat",
    "TransportPort",
    "WebSocketTransport",
    "all_of",
    "any_of",
    "create_logger",
    "negate",
]
