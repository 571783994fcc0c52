"""Guarded diagnostic hook used by the logger and the resilient transports."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .ports.diagnostics import DiagnosticHook

LOGGER = logging.getLogger(__name__)

Emitter = Callable[[str, dict[str, Any]], None]


def build_diagnostic_emitter(hook: DiagnosticHook) -> Emitter:
    """Return a callable forwarding named events to ``hook``.

    Failures raised by the hook are logged and swallowed so instrumentation can
    never break delivery.

    Examples
    --------
    >>> seen = []
    >>> emit = build_diagnostic_emitter(lambda name, payload: seen.append((name, payload)))
    >>> emit("queued", {"pending": 1})
    >>> seen
    [('queued', {'pending': 1})]
    >>> build_diagnostic_emitter(None)("ignored", {})
    """

    if hook is None:

        def _noop(name: str, payload: dict[str, Any]) -> None:
            return None

        return _noop

    def _emit(name: str, payload: dict[str, Any]) -> None:
        try:
            hook(name, payload)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Diagnostic hook raised while reporting %s", name, exc_info=exc)

    return _emit


__all__ = ["Emitter", "build_diagnostic_emitter"]
