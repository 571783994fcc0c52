"""Click command line interface for lib_log_relay.

Purpose
-------
Give operators a quick way to inspect the package, try the transports against
real endpoints, and push single entries from shell scripts.

Contents
--------
* :func:`cli` – command group with the global ``--use-dotenv`` and
  ``--traceback`` toggles.
* ``info``, ``logdemo``, ``send`` – subcommands.
* :func:`main` – entry point used by the console script and ``python -m``.

System Role
-----------
Presentation layer only: every logger is built through
:func:`lib_log_relay.runtime.create_logger`, so the CLI honours the same
environment overrides as host applications.
"""

from __future__ import annotations

import asyncio
import json
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import click
import lib_cli_exit_tools

from . import __init__conf__
from . import config as log_config
from .adapters.transports.console import CONSOLE_FORMATS
from .adapters.transports.websocket import WebSocketTransport
from .domain.levels import LogLevel
from .runtime import create_logger

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

_LEVEL_CHOICES = click.Choice([level.severity for level in LogLevel], case_sensitive=False)


def summary_info() -> str:
    """Return the metadata banner printed by ``info``.

    Examples
    --------
    >>> "version" in summary_info()
    True
    """

    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


def parse_meta(pairs: Sequence[str]) -> dict[str, Any] | None:
    """Turn ``key=value`` pairs into metadata; JSON literals are decoded.

    Examples
    --------
    >>> parse_meta(["user=alice", "attempt=3", "ok=true"])
    {'user': 'alice', 'attempt': 3, 'ok': True}
    >>> parse_meta([]) is None
    True
    """

    if not pairs:
        return None
    meta: dict[str, Any] = {}
    for pair in pairs:
        key, separator, raw = pair.partition("=")
        if not separator or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--meta")
        try:
            meta[key] = json.loads(raw)
        except json.JSONDecodeError:
            meta[key] = raw
    return meta


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help="Load LOG_* settings from the nearest .env before running commands.",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python tracebacks on errors.",
)
@click.pass_context
def cli(ctx: click.Context, use_dotenv: bool, traceback: bool) -> None:
    """Root command storing global flags."""

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    if log_config.should_use_dotenv(explicit=explicit, env_value=os.getenv(log_config.DOTENV_ENV_VAR)):
        log_config.enable_dotenv()

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback
    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


@cli.command("logdemo", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--level", type=_LEVEL_CHOICES, default="debug", show_default=True, help="Minimum level for the default transports.")
@click.option("--format", "console_format", type=click.Choice(CONSOLE_FORMATS), default="simple", show_default=True, help="Console rendering.")
@click.option("--file", "file_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Also write entries to this file.")
@click.option("--http-url", default=None, help="Also POST entries to this URL.")
@click.option("--websocket-url", default=None, help="Also stream entries to this WebSocket URL.")
@click.option("--async/--sync", "async_logging", default=False, help="Deliver through the background queue.")
def cli_logdemo(
    level: str,
    console_format: str,
    file_path: Path | None,
    http_url: str | None,
    websocket_url: str | None,
    async_logging: bool,
) -> None:
    """Emit one sample entry per level through the configured transports."""

    emitted = asyncio.run(
        _logdemo(
            level=level,
            console_format=console_format,
            file_path=file_path,
            http_url=http_url,
            websocket_url=websocket_url,
            async_logging=async_logging,
        )
    )
    click.echo(f"emitted {emitted} entries")


async def _logdemo(
    *,
    level: str,
    console_format: str,
    file_path: Path | None,
    http_url: str | None,
    websocket_url: str | None,
    async_logging: bool,
) -> int:
    file_options: bool | dict[str, Any] = False
    if file_path is not None:
        file_options = {"filename": file_path.name, "directory": str(file_path.parent)}
    logger = create_logger(
        level=level,
        console={"format": console_format},
        file=file_options,
        async_logging=async_logging,
        include_stack_trace=True,
        app_name="logdemo",
        http_url=http_url,
        websocket_url=websocket_url,
    )
    for transport in logger.transports:
        if isinstance(transport, WebSocketTransport):
            await transport.connect()
    minimum = LogLevel.from_name(level)
    emitted = 0
    for index, current in enumerate(LogLevel):
        logger.log(current, f"{current.severity} sample", {"request_id": "demo-1", "index": index})
        if current.at_least(minimum):
            emitted += 1
    await logger.close()
    return emitted


@cli.command("send", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("level", type=_LEVEL_CHOICES)
@click.argument("message")
@click.option("--meta", "meta_pairs", multiple=True, metavar="KEY=VALUE", help="Metadata entry; repeatable.")
def cli_send(level: str, message: str, meta_pairs: tuple[str, ...]) -> None:
    """Log a single MESSAGE at LEVEL through the environment-configured logger."""

    meta = parse_meta(meta_pairs)
    logger = create_logger()
    try:
        logger.log(level, message, meta)
    finally:
        logger.shutdown()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and restore the traceback preferences afterwards."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        lib_cli_exit_tools.config.traceback = previous_traceback
        lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main", "parse_meta", "summary_info"]
