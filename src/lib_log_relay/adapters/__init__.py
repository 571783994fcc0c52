"""Adapters implementing the application ports.

Transports deliver entries, formats render them, filters admit them.
"""

from __future__ import annotations

from .filters import BaseFilter, LevelFilter, MetadataFilter, all_of, any_of, negate
from .formats import BaseFormat, DetailedFormat, JsonFormat, SimpleFormat
from .transports import ConsoleTransport, FileTransport, HttpTransport, LevelGate, SocketState, WebSocketTransport

__all__ = [
    "BaseFilter",
    "BaseFormat",
    "ConsoleTransport",
    "DetailedFormat",
    "FileTransport",
    "HttpTransport",
    "JsonFormat",
    "LevelFilter",
    "LevelGate",
    "MetadataFilter",
    "SimpleFormat",
    "SocketState",
    "WebSocketTransport",
    "all_of",
    "any_of",
    "negate",
]
