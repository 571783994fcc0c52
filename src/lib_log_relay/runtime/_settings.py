"""Environment overrides for :func:`lib_log_relay.runtime.create_logger`.

Purpose
-------
Translate ``LOG_*`` environment variables into logger option overrides so
deployments can tune logging without code changes.

Contents
--------
* :data:`ENV_OPTION_MAP` – environment variable to option name mapping.
* :func:`resolve_options` – merge keyword options with environment values.
* ``_env_bool``/``_env_int`` – parsing helpers.

System Role
-----------
Called once by the composition root. Environment values win over keyword
arguments, mirroring how operators expect overrides to behave.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from lib_log_relay.application.options import LoggerOptions

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class RemoteEndpoints:
    """Remote sinks requested through the environment."""

    http_url: str | None = None
    websocket_url: str | None = None


def _env_bool(name: str, default: bool) -> bool:
    """Return the boolean value of an environment variable with fallback.

    Examples
    --------
    >>> _ = os.environ.pop('LOG_EXAMPLE_BOOL', None)
    >>> _env_bool('LOG_EXAMPLE_BOOL', default=True)
    True
    >>> os.environ['LOG_EXAMPLE_BOOL'] = 'off'
    >>> _env_bool('LOG_EXAMPLE_BOOL', default=True)
    False
    >>> _ = os.environ.pop('LOG_EXAMPLE_BOOL')
    """

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag (1/0, true/false, yes/no, on/off), got {value!r}")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _env_str(name: str, default: Any) -> Any:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_toggle(name: str, current: bool | Mapping[str, Any]) -> bool | Mapping[str, Any]:
    """Switch a default transport on or off while keeping mapping options."""

    active = isinstance(current, Mapping) or bool(current)
    if not _env_bool(name, active):
        return False
    return current if active else True


def resolve_options(options: Mapping[str, Any]) -> LoggerOptions:
    """Return :class:`LoggerOptions` built from ``options`` plus ``LOG_*`` overrides.

    Raises
    ------
    ValueError
        When an option name is unknown or an environment value cannot be parsed.
    """

    base = LoggerOptions.from_mapping(options)
    overrides: dict[str, Any] = {
        "level": _env_str("LOG_LEVEL", base.level),
        "app_name": _env_str("LOG_APP_NAME", base.app_name),
        "environment": _env_str("LOG_ENVIRONMENT", base.environment),
        "async_logging": _env_bool("LOG_ASYNC", base.async_logging),
        "log_queue": _env_int("LOG_QUEUE_SIZE", base.log_queue),
        "timestamp_format": _env_str("LOG_TIMESTAMP_FORMAT", base.timestamp_format),
        "include_timestamp": _env_bool("LOG_INCLUDE_TIMESTAMP", base.include_timestamp),
        "include_stack_trace": _env_bool("LOG_STACK_TRACE", base.include_stack_trace),
        "stack_trace_limit": _env_int("LOG_STACK_TRACE_LIMIT", base.stack_trace_limit),
    }
    overrides["console"] = _env_toggle("LOG_CONSOLE", base.console)
    overrides["file"] = _env_toggle("LOG_FILE", base.file)
    try:
        return base.merged(overrides)
    except ValueError as exc:
        raise ValueError(f"Invalid logging environment configuration: {exc}") from exc


def resolve_endpoints(http_url: str | None = None, websocket_url: str | None = None) -> RemoteEndpoints:
    """Return remote endpoints, ``LOG_HTTP_URL``/``LOG_WEBSOCKET_URL`` winning."""

    return RemoteEndpoints(
        http_url=_env_str("LOG_HTTP_URL", http_url),
        websocket_url=_env_str("LOG_WEBSOCKET_URL", websocket_url),
    )


__all__ = ["RemoteEndpoints", "resolve_endpoints", "resolve_options"]
