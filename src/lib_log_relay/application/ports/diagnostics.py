"""Port for the diagnostic event hook.

Adapters and the logger report internal events (transport failures,
retries, dropped entries) by calling the hook with an event name and a
payload dictionary. ``None`` disables reporting.
"""

from __future__ import annotations

from typing import Callable

DiagnosticHook = Callable[[str, dict], None] | None


__all__ = ["DiagnosticHook"]
