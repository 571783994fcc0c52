"""Bundled transports: console, rotating file, HTTP, and WebSocket."""

from __future__ import annotations

from .base import LevelGate
from .console import ConsoleTransport
from .file import FileTransport
from .http import HttpTransport
from .websocket import SocketState, WebSocketTransport

__all__ = [
    "ConsoleTransport",
    "FileTransport",
    "HttpTransport",
    "LevelGate",
    "SocketState",
    "WebSocketTransport",
]
