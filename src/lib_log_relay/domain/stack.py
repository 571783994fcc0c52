"""Best-effort call-chain capture for error entries.

The capture walks outward from the caller, skips every frame that belongs to
this package (the logger plumbing doing the capturing), and renders at most
``limit`` frames, most recent call first. Frame availability depends on the
interpreter; callers must treat the result as diagnostic text only.
"""

from __future__ import annotations

import sys
import traceback
from types import FrameType

_PACKAGE = __name__.split(".", 1)[0]


def _is_internal(frame: FrameType) -> bool:
    module = frame.f_globals.get("__name__", "")
    return module == _PACKAGE or module.startswith(_PACKAGE + ".")


def capture_stack(limit: int) -> str | None:
    """Return up to ``limit`` caller frames as text, or ``None`` when empty."""

    if limit <= 0:
        return None
    frame: FrameType | None = sys._getframe(1)
    while frame is not None and _is_internal(frame):
        frame = frame.f_back
    if frame is None:
        return None
    summary = traceback.extract_stack(frame, limit=limit)
    summary.reverse()
    lines = [f"    at {item.name} ({item.filename}:{item.lineno})" for item in summary]
    return "\n".join(lines) or None


__all__ = ["capture_stack"]
