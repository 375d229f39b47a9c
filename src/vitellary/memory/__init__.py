# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Reading the game object out of a running VVVVVV process."""

from __future__ import annotations

import sys

from vitellary.defaults import DEFAULT_GAME_ADDRESS
from vitellary.errors import AddressLookupError, UnsupportedPlatformError
from vitellary.logging import get_logger
from vitellary.memory.base import AttachedProcess, SnapshotSource
from vitellary.memory.discovery import find_pid

logger = get_logger(__name__)

__all__ = ["AttachedProcess", "SnapshotSource", "attach", "find_pid", "open_source"]


def open_source(pid: int, gdb_path: str = "gdb") -> SnapshotSource:
    """Create the memory reader for the current platform."""
    if sys.platform.startswith("linux"):
        from vitellary.memory.linux import LinuxProcessSource

        return LinuxProcessSource(pid, gdb_path=gdb_path)
    raise UnsupportedPlatformError(f"reading process memory is not supported on {sys.platform}")


def attach(
    pid: int,
    source: SnapshotSource | None = None,
    default_address: int = DEFAULT_GAME_ADDRESS,
    gdb_path: str = "gdb",
) -> AttachedProcess:
    """Locate the game object in ``pid``, falling back to ``default_address``."""
    if source is None:
        source = open_source(pid, gdb_path=gdb_path)
    try:
        address = source.locate(pid)
    except AddressLookupError as exc:
        logger.warning("address_lookup_failed", error=str(exc), default=f"0x{default_address:x}")
        address = default_address
    logger.info("attached", pid=pid, address=f"0x{address:x}")
    return AttachedProcess(source=source, pid=pid, address=address)
