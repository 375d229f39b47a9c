# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Linux memory reader backed by ``/proc/<pid>/mem``."""

from __future__ import annotations

import os
import re
import subprocess

from vitellary.errors import AddressLookupError, MemoryReadError
from vitellary.logging import get_logger
from vitellary.memory.base import SnapshotSource

logger = get_logger(__name__)

# gdb prints the value of the first expression as `$1 = <value>`.
_GDB_RESULT = re.compile(r"^\$1 = (\d+)\s*$", re.MULTILINE)


def parse_gdb_address(output: str) -> int:
    match = _GDB_RESULT.search(output)
    if match is None:
        raise AddressLookupError("no address in gdb output")
    return int(match.group(1))


class LinuxProcessSource(SnapshotSource):
    def __init__(self, pid: int, gdb_path: str = "gdb", gdb_timeout_s: float = 30.0) -> None:
        self._pid = pid
        self._gdb_path = gdb_path
        self._gdb_timeout_s = gdb_timeout_s
        self._fd: int | None = None

    def _open(self) -> int:
        if self._fd is None:
            try:
                self._fd = os.open(f"/proc/{self._pid}/mem", os.O_RDONLY)
            except OSError as exc:
                raise MemoryReadError(f"cannot open memory of pid {self._pid}: {exc}") from exc
        return self._fd

    def locate(self, pid: int) -> int:
        """Ask gdb for ``&game``; needs ptrace permission and debug symbols."""
        cmd = [
            self._gdb_path,
            "--nw",
            "--nx",
            f"--pid={pid}",
            "--ex",
            "p (unsigned long long)&game",
            "--ex",
            "set confirm off",
            "--ex",
            "q",
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, timeout=self._gdb_timeout_s, check=False)
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise AddressLookupError(f"failed to run gdb: {exc}") from exc
        if result.returncode != 0:
            raise AddressLookupError(f"gdb failed with status {result.returncode}")
        address = parse_gdb_address(result.stdout.decode("utf-8", errors="replace"))
        logger.debug("gdb_address_found", pid=pid, address=f"0x{address:x}")
        return address

    def read(self, address: int, length: int) -> bytes:
        fd = self._open()
        try:
            data = os.pread(fd, length, address)
        except OSError as exc:
            raise MemoryReadError(f"read of {length} bytes at 0x{address:x} failed: {exc}") from exc
        if len(data) != length:
            raise MemoryReadError(f"short read at 0x{address:x}: {len(data)} of {length} bytes")
        return data

    def close(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None
