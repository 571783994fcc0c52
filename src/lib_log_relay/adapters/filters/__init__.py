"""Bundled :class:`~lib_log_relay.application.ports.filter.FilterPort` implementations."""

from __future__ import annotations

from .base import BaseFilter, all_of, any_of, negate
from .level import LevelFilter
from .metadata import MetadataFilter

__all__ = ["BaseFilter", "LevelFilter", "MetadataFilter", "all_of", "any_of", "negate"]
