"""Factories turning logger options into concrete transports.

Contents
--------
* :func:`build_default_transports` – console/file transports requested by
  :class:`LoggerOptions`; used by every :class:`Logger` as its default factory.
* :func:`build_remote_transports` – HTTP/WebSocket transports for the
  composition root.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lib_log_relay.adapters.transports import ConsoleTransport, FileTransport, HttpTransport, WebSocketTransport
from lib_log_relay.application.options import LoggerOptions
from lib_log_relay.application.ports.diagnostics import DiagnosticHook
from lib_log_relay.application.ports.transport import TransportPort

from ._settings import RemoteEndpoints

DEFAULT_LOG_DIRECTORY = "logs"


def _enabled(value: bool | Mapping[str, Any]) -> bool:
    return isinstance(value, Mapping) or bool(value)


def _with_level(options: LoggerOptions, value: bool | Mapping[str, Any]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"min_level": options.level}
    if isinstance(value, Mapping):
        kwargs.update(value)
    return kwargs


def build_default_transports(options: LoggerOptions) -> list[TransportPort]:
    """Return the console and file transports enabled in ``options``.

    Both use ``options.level`` as their threshold unless the option mapping
    names its own ``min_level``. The file defaults to ``logs/<app_name>.log``.
    """

    transports: list[TransportPort] = []
    if _enabled(options.console):
        transports.append(ConsoleTransport(**_with_level(options, options.console)))
    if _enabled(options.file):
        kwargs = _with_level(options, options.file)
        kwargs.setdefault("filename", f"{options.app_name or 'app'}.log")
        kwargs.setdefault("directory", DEFAULT_LOG_DIRECTORY)
        transports.append(FileTransport(**kwargs))
    return transports


def build_remote_transports(
    options: LoggerOptions,
    endpoints: RemoteEndpoints,
    *,
    diagnostic: DiagnosticHook = None,
) -> list[TransportPort]:
    """Return HTTP/WebSocket transports for the configured endpoints."""

    transports: list[TransportPort] = []
    if endpoints.http_url:
        transports.append(HttpTransport(endpoints.http_url, min_level=options.level, diagnostic=diagnostic))
    if endpoints.websocket_url:
        transports.append(WebSocketTransport(endpoints.websocket_url, min_level=options.level, diagnostic=diagnostic))
    return transports


__all__ = ["DEFAULT_LOG_DIRECTORY", "build_default_transports", "build_remote_transports"]
