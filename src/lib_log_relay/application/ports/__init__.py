"""Protocols separating the logging core from concrete adapters."""

from __future__ import annotations

from .diagnostics import DiagnosticHook
from .filter import FilterPort
from .format import FormatPort
from .time import ClockPort
from .transport import ClosableTransportPort, TransportPort

__all__ = [
    "ClockPort",
    "ClosableTransportPort",
    "DiagnosticHook",
    "FilterPort",
    "FormatPort",
    "TransportPort",
]
