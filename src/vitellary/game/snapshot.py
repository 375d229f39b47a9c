# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Decode the raw bytes of ``Game`` into a :class:`Snapshot`."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vitellary.game.revisions import RevisionDescriptor

FRAMES_PER_SECOND = 30

_U32 = struct.Struct("=I")
_TIMER = struct.Struct("=4I")


class StructSizeMismatch(AssertionError):
    """Buffer length doesn't match the revision's struct size.

    This means the wrong revision was selected for the running game. It is
    raised as an assertion because there is nothing sensible to recover.
    """


@dataclass(frozen=True)
class Timer:
    frames: int
    seconds: int
    minutes: int
    hours: int

    def to_duration(self) -> timedelta:
        return timedelta(
            hours=self.hours,
            minutes=self.minutes,
            seconds=self.seconds,
            microseconds=self.frames * 1_000_000 // FRAMES_PER_SECOND,
        )


@dataclass(frozen=True)
class Snapshot:
    room: tuple[int, int]
    state: int
    gamestate: int
    elapsed: timedelta


def decode(revision: RevisionDescriptor, data: bytes) -> Snapshot:
    """Decode one ``Game`` object read from the process.

    Raises:
        StructSizeMismatch: ``len(data)`` is not ``revision.struct_size``
    """
    if len(data) != revision.struct_size:
        raise StructSizeMismatch(
            f"game object is {len(data)} bytes, revision expects {revision.struct_size}"
        )
    offsets = revision.offsets
    (room_x,) = _U32.unpack_from(data, offsets.room_x)
    (room_y,) = _U32.unpack_from(data, offsets.room_y)
    (state,) = _U32.unpack_from(data, offsets.state)
    (gamestate,) = _U32.unpack_from(data, offsets.gamestate)
    timer = Timer(*_TIMER.unpack_from(data, offsets.timer))
    return Snapshot(
        room=(room_x, room_y),
        state=state,
        gamestate=gamestate,
        elapsed=timer.to_duration(),
    )
