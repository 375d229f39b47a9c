# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Centralized default values for vitellary."""

from __future__ import annotations

SERVER_HOST = "127.0.0.1"
SERVER_PORT = 5555

DEFAULT_REVISION = "master"
PROCESS_NAME = "VVVVVV"

# Address of the `game` object in the stock Linux build, used when gdb can't tell us.
DEFAULT_GAME_ADDRESS = 0x854DC0

POLL_INTERVAL_MS = 10
UPDATE_QUEUE_SIZE = 10
SUBSCRIBER_QUEUE_SIZE = 64
