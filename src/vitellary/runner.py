# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fixed-cadence poll loop feeding the update channel."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from vitellary.defaults import POLL_INTERVAL_MS
from vitellary.errors import MemoryReadError
from vitellary.logging import get_logger

if TYPE_CHECKING:
    from vitellary.game.tracker import GameObjectReader, StateTracker, Update
    from vitellary.server.broadcast import UpdateChannel

logger = get_logger(__name__)


class PollLoop:
    """Sole owner of the attached process; publishes one update per poll."""

    def __init__(
        self,
        tracker: StateTracker,
        process: GameObjectReader,
        channel: UpdateChannel,
        interval_s: float = POLL_INTERVAL_MS / 1000,
    ) -> None:
        self._tracker = tracker
        self._process = process
        self._channel = channel
        self._interval_s = interval_s
        self._failing = False
        self.failures = 0

    def poll_once(self) -> Update | None:
        """Poll the game once. Returns None when the read failed."""
        try:
            update = self._tracker.update(self._process)
        except MemoryReadError as exc:
            self.failures += 1
            if not self._failing:
                logger.debug("poll_failed", error=str(exc))
                self._failing = True
            return None

        if self._failing:
            logger.debug("poll_recovered", failures=self.failures)
            self._failing = False
        if update.event is not None:
            logger.info("event", event=update.event.value, command=update.event.command, time=str(update.time))
        self._channel.publish(update)
        return update

    async def run(self) -> None:
        while True:
            self.poll_once()
            await asyncio.sleep(self._interval_s)
