# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fan out timing updates to every connected subscriber.

The poll loop publishes into a bounded :class:`UpdateChannel`. A single
distribution task drains it and hands each update to every subscriber's own
bounded queue; each subscriber has a writer task of its own, so a slow or
broken client only ever hurts itself.

Both queues are lossy on purpose: when one is full the oldest pending item is
dropped to make room. A timing client only cares about the latest time.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar

from vitellary.defaults import SUBSCRIBER_QUEUE_SIZE, UPDATE_QUEUE_SIZE
from vitellary.logging import get_logger
from vitellary.server.protocol import encode

if TYPE_CHECKING:
    from vitellary.game.tracker import Update

logger = get_logger(__name__)

T = TypeVar("T")


class Connection(Protocol):
    async def send(self, message: str) -> None: ...

    async def close(self) -> None: ...

    async def wait_closed(self) -> None: ...


class DropOldestQueue(Generic[T]):
    """Bounded queue whose ``put`` never blocks; overflow evicts the oldest item."""

    def __init__(self, maxsize: int) -> None:
        if maxsize <= 0:
            raise ValueError("maxsize must be positive")
        self._queue: asyncio.Queue[T] = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def put(self, item: T) -> None:
        while True:
            try:
                self._queue.put_nowait(item)
                return
            except asyncio.QueueFull:
                self._queue.get_nowait()
                self.dropped += 1

    async def get(self) -> T:
        return await self._queue.get()

    def qsize(self) -> int:
        return self._queue.qsize()


class UpdateChannel(DropOldestQueue["Update"]):
    """Poll loop -> distribution task. Capacity defaults to 10 updates."""

    def __init__(self, maxsize: int = UPDATE_QUEUE_SIZE) -> None:
        super().__init__(maxsize)

    def publish(self, update: Update) -> None:
        self.put(update)


class Subscriber:
    def __init__(self, connection: Connection, peer: str, queue_size: int = SUBSCRIBER_QUEUE_SIZE) -> None:
        self.connection = connection
        self.peer = peer
        self._outbox: DropOldestQueue[tuple[str, ...]] = DropOldestQueue(queue_size)

    @property
    def dropped(self) -> int:
        return self._outbox.dropped

    def offer(self, messages: tuple[str, ...]) -> None:
        self._outbox.put(messages)

    async def run(self) -> None:
        """Write queued messages until the connection fails."""
        try:
            while True:
                messages = await self._outbox.get()
                for message in messages:
                    await self.connection.send(message)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.debug("subscriber_send_failed", peer=self.peer, error=str(exc))


class Broadcaster:
    def __init__(
        self,
        channel: UpdateChannel,
        subscriber_queue_size: int = SUBSCRIBER_QUEUE_SIZE,
    ) -> None:
        self._channel = channel
        self._subscriber_queue_size = subscriber_queue_size
        self._subscribers: set[Subscriber] = set()

    @property
    def subscribers(self) -> frozenset[Subscriber]:
        return frozenset(self._subscribers)

    def dispatch(self, update: Update) -> None:
        messages = encode(update)
        for subscriber in list(self._subscribers):
            subscriber.offer(messages)

    async def run(self) -> None:
        """Distribution task: drain the channel forever."""
        while True:
            update = await self._channel.get()
            self.dispatch(update)

    async def serve(self, connection: Connection, peer: str) -> None:
        """Deliver updates to ``connection`` until it closes or a send fails."""
        subscriber = Subscriber(connection, peer, self._subscriber_queue_size)
        self._subscribers.add(subscriber)
        logger.info("subscriber_connected", peer=peer, subscribers=len(self._subscribers))

        writer = asyncio.create_task(subscriber.run())
        closed = asyncio.create_task(connection.wait_closed())
        try:
            await asyncio.wait({writer, closed}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            self._subscribers.discard(subscriber)
            for task in (writer, closed):
                task.cancel()
            await asyncio.gather(writer, closed, return_exceptions=True)
            try:
                await connection.close()
            except Exception as exc:
                logger.debug("subscriber_close_failed", peer=peer, error=str(exc))
            logger.info("subscriber_disconnected", peer=peer, subscribers=len(self._subscribers))


@contextlib.asynccontextmanager
async def running(broadcaster: Broadcaster):
    """Run the distribution task for the duration of the block."""
    task = asyncio.create_task(broadcaster.run())
    try:
        yield broadcaster
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
