"""Bundled :class:`~lib_log_relay.application.ports.format.FormatPort` implementations."""

from __future__ import annotations

from .base import BaseFormat
from .detailed import DetailedFormat
from .json import JsonFormat
from .simple import SimpleFormat

__all__ = ["BaseFormat", "DetailedFormat", "JsonFormat", "SimpleFormat"]
