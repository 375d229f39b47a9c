# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Wire the observer together: revision, process, server, poll loop."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vitellary.game.revisions import RevisionTable, load_revisions
from vitellary.game.tracker import StateTracker
from vitellary.logging import get_logger
from vitellary.memory import attach, find_pid
from vitellary.runner import PollLoop
from vitellary.server.broadcast import Broadcaster, UpdateChannel, running
from vitellary.server.websocket import WebSocketServer

if TYPE_CHECKING:
    from vitellary.settings import Settings

logger = get_logger(__name__)


async def run(settings: Settings, pid: int | None = None, table: RevisionTable | None = None) -> None:
    """Run until cancelled.

    Startup failures (unknown revision, no process, bind failure) raise
    StartupError before the poll loop starts. The revision is checked before
    anything touches the process or the network.
    """
    if table is None:
        table = load_revisions(settings.revisions_file)
    revision = table.require(settings.revision)
    logger.debug("revision_selected", revision=settings.revision, struct_size=revision.struct_size)

    if pid is None:
        pid = find_pid(settings.process_name)
    process = attach(pid, default_address=settings.default_address, gdb_path=settings.gdb_path)

    try:
        channel = UpdateChannel(settings.queue_size)
        broadcaster = Broadcaster(channel, settings.subscriber_queue_size)
        server = WebSocketServer(broadcaster, settings.host, settings.port)
        await server.start()
        try:
            poll = PollLoop(StateTracker(revision), process, channel, settings.poll_interval_s)
            async with running(broadcaster):
                await poll.run()
        finally:
            await server.stop()
    finally:
        process.close()
