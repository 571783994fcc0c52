"""Composition root building explicitly owned loggers.

Purpose
-------
Offer one call that turns keyword options plus ``LOG_*`` environment
overrides into a ready :class:`~lib_log_relay.application.logger.Logger`
with its console, file, HTTP, and WebSocket transports wired.

Contents
--------
* :func:`create_logger` – the factory used by the CLI and host applications.

System Role
-----------
Outer shell of the package. There is no process-wide logger: every call
returns a new instance owned by the caller, who is responsible for closing it
(``await logger.close()`` or ``logger.shutdown()``).
"""

from __future__ import annotations

from typing import Any

from lib_log_relay.application.logger import Logger
from lib_log_relay.application.ports.diagnostics import DiagnosticHook

from ._composition import build_default_transports, build_remote_transports
from ._settings import RemoteEndpoints, resolve_endpoints, resolve_options


def create_logger(
    *,
    diagnostic: DiagnosticHook = None,
    http_url: str | None = None,
    websocket_url: str | None = None,
    **options: Any,
) -> Logger:
    """Build a :class:`Logger` from ``options`` and the environment.

    Parameters
    ----------
    diagnostic:
        Optional hook receiving named events from the logger and the remote
        transports.
    http_url, websocket_url:
        Add an HTTP or WebSocket transport; ``LOG_HTTP_URL`` and
        ``LOG_WEBSOCKET_URL`` override them.
    **options:
        :class:`~lib_log_relay.application.options.LoggerOptions` fields.

    Raises
    ------
    ValueError
        For unknown options and unparsable environment values.

    Examples
    --------
    >>> logger = create_logger(console=False, app_name="doc")
    >>> logger.options.app_name
    'doc'
    >>> logger.shutdown()
    """

    resolved = resolve_options(options)
    endpoints = resolve_endpoints(http_url, websocket_url)
    remote = build_remote_transports(resolved, endpoints, diagnostic=diagnostic)
    if remote:
        resolved = resolved.merged({"transports": (*resolved.transports, *remote)})
    return Logger(resolved, diagnostic=diagnostic, default_transports=build_default_transports)


__all__ = ["RemoteEndpoints", "build_default_transports", "create_logger"]
