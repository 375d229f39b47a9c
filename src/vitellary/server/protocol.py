# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""LiveSplit One server messages."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vitellary.game.tracker import Update

_ONE_SECOND = timedelta(seconds=1)


def format_game_time(time: timedelta) -> str:
    """``setgametime <seconds>.<centiseconds>``, centiseconds truncated."""
    return f"setgametime {time // _ONE_SECOND}.{time.microseconds // 10_000:02d}"


def encode(update: Update) -> tuple[str, ...]:
    """Messages to send for one update, in order."""
    if update.event is None:
        return (format_game_time(update.time),)
    return (format_game_time(update.time), update.event.command)
