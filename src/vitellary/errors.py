# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy for vitellary."""


class VitellaryError(Exception):
    """Base exception for vitellary."""

    pass


class StartupError(VitellaryError):
    """Condition that stops the observer before the poll loop starts."""

    pass


class UnknownRevisionError(StartupError):
    """Requested revision is not in the revision table."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"no such revision: {name!r} (load a revision table with --revisions-file or VITELLARY_REVISIONS_FILE)"
        )
        self.name = name


class ProcessNotFoundError(StartupError):
    """No candidate process to attach to."""

    pass


class DiscoveryError(StartupError):
    """Process discovery itself failed."""

    pass


class BindError(StartupError):
    """Could not bind the WebSocket listening address."""

    pass


class UnsupportedPlatformError(StartupError):
    """No memory reader exists for this platform."""

    pass


class InvalidRevisionError(VitellaryError):
    """Revision table entry is malformed."""

    pass


class MemoryReadError(VitellaryError):
    """Reading the target process memory failed (usually transient)."""

    pass


class AddressLookupError(VitellaryError):
    """Dynamic lookup of the game object address failed."""

    pass
