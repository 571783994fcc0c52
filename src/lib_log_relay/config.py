"""Optional ``.env`` loading for the CLI and host applications.

Purpose
-------
Let operators keep ``LOG_*`` settings in a ``.env`` file next to their
project. Loading is opt-in through ``--use-dotenv`` or
``LIB_LOG_RELAY_USE_DOTENV`` and never overrides variables that are already
set in the process environment.

Contents
--------
* :data:`DOTENV_ENV_VAR` – environment toggle name.
* :func:`should_use_dotenv` – precedence between CLI flag and toggle.
* :func:`enable_dotenv` – locate and load the nearest ``.env`` once.
"""

from __future__ import annotations

import logging
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

LOGGER = logging.getLogger(__name__)

DOTENV_ENV_VAR = "LIB_LOG_RELAY_USE_DOTENV"

_TRUTHY = {"1", "true", "yes", "on"}

_loaded_path: Path | None = None
_attempted = False


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Return whether ``.env`` loading is requested.

    An explicit CLI choice wins; otherwise the environment toggle decides.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    >>> should_use_dotenv(env_value="yes")
    True
    >>> should_use_dotenv()
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv(search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` walking upwards from ``search_from`` (or the cwd).

    Returns the resolved path of the loaded file or ``None`` when none exists.
    Subsequent calls return the first result without reloading.
    """

    global _loaded_path, _attempted
    if _attempted:
        return _loaded_path
    _attempted = True
    if search_from is not None:
        candidate = _search_upwards(search_from)
    else:
        found = find_dotenv(usecwd=True)
        candidate = Path(found).resolve() if found else None
    if candidate is None:
        LOGGER.debug("No .env file found")
        return None
    load_dotenv(candidate, override=False)
    LOGGER.debug("Loaded environment from %s", candidate)
    _loaded_path = candidate
    return candidate


def _search_upwards(start: Path) -> Path | None:
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _loaded_path, _attempted
    _loaded_path = None
    _attempted = False


__all__ = ["DOTENV_ENV_VAR", "enable_dotenv", "should_use_dotenv"]
