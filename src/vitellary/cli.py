# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import click

from vitellary.app import run
from vitellary.defaults import SERVER_HOST, SERVER_PORT
from vitellary.errors import InvalidRevisionError, StartupError
from vitellary.game.revisions import load_revisions
from vitellary.logging import configure_logging
from vitellary.settings import Settings


def parse_bind(value: str) -> tuple[str, int]:
    """Split ``HOST:PORT`` (``[::1]:5555`` for IPv6)."""
    host, sep, port = value.rpartition(":")
    if not sep or not host:
        raise click.BadParameter(f"expected HOST:PORT, got {value!r}", param_hint="--bind")
    try:
        port_num = int(port)
    except ValueError as e:
        raise click.BadParameter(f"invalid port {port!r}", param_hint="--bind") from e
    if not 0 <= port_num <= 65535:
        raise click.BadParameter(f"port out of range: {port_num}", param_hint="--bind")
    return host.strip("[]"), port_num


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
def cli() -> None:
    """vitellary: LiveSplit One server for VVVVVV."""


@cli.command("serve")
@click.argument("pid", type=int, required=False)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging output.")
@click.option(
    "--bind",
    default=None,
    help=f"Bind address for WebSocket (default: {SERVER_HOST}:{SERVER_PORT}).",
)
@click.option(
    "--revision",
    default=None,
    help='Which revision of VVVVVV you have: a version number (e.g. "2.3") or a full commit id.',
)
@click.option(
    "--revisions-file",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    default=None,
    help="Revision table (JSON) written by the mining tool.",
)
def serve(pid: int | None, verbose: bool, bind: str | None, revision: str | None, revisions_file: Path | None) -> None:
    """Attach to a VVVVVV process and provide a LiveSplit One server.

    PID selects a specific VVVVVV process; otherwise the newest one is used.
    """
    overrides: dict[str, Any] = {}
    if verbose:
        overrides["log_level"] = "DEBUG"
    if bind is not None:
        overrides["host"], overrides["port"] = parse_bind(bind)
    if revision is not None:
        overrides["revision"] = revision
    if revisions_file is not None:
        overrides["revisions_file"] = revisions_file

    settings = Settings(**overrides)
    configure_logging(settings)

    try:
        table = load_revisions(settings.revisions_file)
        asyncio.run(run(settings, pid, table))
    except (StartupError, InvalidRevisionError) as e:
        raise click.ClickException(str(e)) from e
    except KeyboardInterrupt:
        pass


@cli.command("revisions")
@click.option(
    "--revisions-file",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    default=None,
    help="Revision table (JSON) written by the mining tool.",
)
def revisions(revisions_file: Path | None) -> None:
    """List the VVVVVV revisions vitellary knows how to read."""
    if revisions_file is None:
        revisions_file = Settings().revisions_file
    try:
        table = load_revisions(revisions_file)
    except InvalidRevisionError as e:
        raise click.ClickException(str(e)) from e
    if not table:
        click.echo("No revisions known; load a table with --revisions-file or VITELLARY_REVISIONS_FILE.", err=True)
    for name in table.names():
        click.echo(name)
