# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Find the game process when no pid is given."""

from __future__ import annotations

import subprocess

from vitellary.defaults import PROCESS_NAME
from vitellary.errors import DiscoveryError, ProcessNotFoundError
from vitellary.logging import get_logger

logger = get_logger(__name__)


def find_pid(name: str = PROCESS_NAME) -> int:
    """Return the pid of the newest process whose name matches ``name``."""
    try:
        result = subprocess.run(["pgrep", "-n", name], capture_output=True, check=False)
    except OSError as exc:
        raise DiscoveryError(f"failed to run pgrep: {exc}") from exc

    if result.returncode == 1:
        raise ProcessNotFoundError(f"no {name} process found")
    if result.returncode != 0:
        raise DiscoveryError(f"pgrep failed with status {result.returncode}")

    lines = result.stdout.decode("utf-8", errors="replace").split()
    if not lines:
        raise DiscoveryError("pgrep returned 0 with no output")
    try:
        pid = int(lines[0])
    except ValueError as exc:
        raise DiscoveryError(f"unexpected pgrep output: {lines[0]!r}") from exc
    logger.debug("process_discovered", name=name, pid=pid)
    return pid
