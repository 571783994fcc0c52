"""Application layer: the logger orchestrator, its options, and its ports."""

from __future__ import annotations

from .child import ChildLogger
from .logger import Logger
from .options import LoggerOptions

__all__ = ["ChildLogger", "Logger", "LoggerOptions"]
