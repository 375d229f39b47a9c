# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pytest configuration and fixtures."""

from __future__ import annotations

import asyncio
import json
import struct
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

from vitellary.errors import MemoryReadError
from vitellary.game.revisions import RevisionDescriptor, RevisionTable

TITLEMODE = 1

# Synthetic layout: five u32 fields then the timer. Not a real VVVVVV build.
TEST_REVISION = "test-build"
TEST_TABLE = {
    "layouts": [
        {
            "names": [TEST_REVISION],
            "struct_size": 48,
            "offsets": {"room_x": 0, "room_y": 4, "state": 8, "gamestate": 12, "timer": 32},
            "active_states": [0, 4, 5, 6, 7],
        }
    ]
}

GameBytes = Callable[..., bytes]


class FakeProcess:
    """Stands in for an attached process; serves queued game objects."""

    def __init__(self, frames: list[bytes] | None = None) -> None:
        self.frames: list[bytes | Exception] = list(frames or [])
        self.reads: list[int] = []
        self.closed = False

    def push(self, frame: bytes | Exception) -> None:
        self.frames.append(frame)

    def read_object(self, length: int) -> bytes:
        self.reads.append(length)
        if not self.frames:
            raise MemoryReadError("no frame queued")
        frame = self.frames.pop(0)
        if isinstance(frame, Exception):
            raise frame
        return frame

    def close(self) -> None:
        self.closed = True


class FakeConnection:
    """In-memory subscriber connection recording sent messages."""

    def __init__(self, fail_on: int | None = None, delay_s: float = 0.0) -> None:
        self.sent: list[str] = []
        self.fail_on = fail_on
        self.delay_s = delay_s
        self.close_calls = 0
        self._closed = asyncio.Event()

    async def send(self, message: str) -> None:
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.fail_on is not None and len(self.sent) >= self.fail_on:
            raise ConnectionResetError("peer went away")
        self.sent.append(message)

    async def close(self) -> None:
        self.close_calls += 1
        self._closed.set()

    async def wait_closed(self) -> None:
        await self._closed.wait()

    def disconnect(self) -> None:
        self._closed.set()


@pytest.fixture
def revision_table() -> RevisionTable:
    return RevisionTable.from_data(TEST_TABLE)


@pytest.fixture
def revisions_file(tmp_path: Path) -> Path:
    """The synthetic table written out the way the mining tool writes it."""
    path = tmp_path / "revisions.json"
    path.write_text(json.dumps(TEST_TABLE), encoding="utf-8")
    return path


@pytest.fixture
def revision(revision_table: RevisionTable) -> RevisionDescriptor:
    return revision_table[TEST_REVISION]


@pytest.fixture
def game_bytes(revision: RevisionDescriptor) -> GameBytes:
    """Build a raw game object for ``revision``."""

    def _build(
        *,
        room: tuple[int, int] = (0, 0),
        state: int = 0,
        gamestate: int = TITLEMODE,
        frames: int = 0,
        seconds: int = 0,
        minutes: int = 0,
        hours: int = 0,
        layout: RevisionDescriptor | None = None,
    ) -> bytes:
        layout = layout or revision
        buf = bytearray(layout.struct_size)
        offsets = layout.offsets
        struct.pack_into("=I", buf, offsets.room_x, room[0])
        struct.pack_into("=I", buf, offsets.room_y, room[1])
        struct.pack_into("=I", buf, offsets.state, state)
        struct.pack_into("=I", buf, offsets.gamestate, gamestate)
        struct.pack_into("=4I", buf, offsets.timer, frames, seconds, minutes, hours)
        return bytes(buf)

    return _build


@pytest.fixture
def fake_process() -> FakeProcess:
    return FakeProcess()


@pytest.fixture
def make_connection() -> Callable[..., FakeConnection]:
    return FakeConnection


@pytest.fixture(autouse=True)
def _reset_structlog():
    """The CLI configures structlog against a stream the test runner owns."""
    yield
    structlog.reset_defaults()
