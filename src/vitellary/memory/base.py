# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Abstract base class for process memory readers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class SnapshotSource(ABC):
    """Read-only access to another process's address space."""

    @abstractmethod
    def locate(self, pid: int) -> int:
        """Find the address of the game object in ``pid``.

        Args:
            pid: Target process id

        Returns:
            Absolute address of the game object

        Raises:
            AddressLookupError: If the address can't be determined
        """

    @abstractmethod
    def read(self, address: int, length: int) -> bytes:
        """Copy ``length`` bytes starting at ``address``.

        Args:
            address: Absolute address in the target process
            length: Number of bytes to copy

        Returns:
            Exactly ``length`` bytes

        Raises:
            MemoryReadError: If the range can't be read
        """

    def close(self) -> None:
        """Release OS resources. Safe to call multiple times."""


@dataclass
class AttachedProcess:
    """A snapshot source bound to one process and its game object address."""

    source: SnapshotSource
    pid: int
    address: int

    def read_object(self, length: int) -> bytes:
        return self.source.read(self.address, length)

    def close(self) -> None:
        self.source.close()
