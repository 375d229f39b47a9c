# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""WebSocket endpoint speaking the LiveSplit One server protocol."""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

from websockets.asyncio.server import ServerConnection, serve
from websockets.exceptions import ConnectionClosed

from vitellary.defaults import SERVER_HOST, SERVER_PORT
from vitellary.errors import BindError
from vitellary.logging import get_logger

if TYPE_CHECKING:
    from websockets.asyncio.server import Server

    from vitellary.server.broadcast import Broadcaster

logger = get_logger(__name__)


class WebSocketConnection:
    """Adapts a websockets connection to the broadcaster's write-only view."""

    def __init__(self, ws: ServerConnection) -> None:
        self._ws = ws

    async def send(self, message: str) -> None:
        await self._ws.send(message)

    async def close(self) -> None:
        await self._ws.close()

    async def wait_closed(self) -> None:
        # Clients never send anything meaningful; drain so close frames get processed.
        with contextlib.suppress(ConnectionClosed):
            async for _ in self._ws:
                pass


class WebSocketServer:
    def __init__(self, broadcaster: Broadcaster, host: str = SERVER_HOST, port: int = SERVER_PORT) -> None:
        self._broadcaster = broadcaster
        self._host = host
        self._port = port
        self._server: Server | None = None

    @property
    def port(self) -> int:
        """Bound port (useful when started with port 0)."""
        if self._server is None:
            return self._port
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:
        if self._server is not None:
            return
        try:
            self._server = await serve(self._handler, self._host, self._port)
        except OSError as exc:
            raise BindError(f"failed to bind WebSocket address {self._host}:{self._port}: {exc}") from exc
        logger.info("listening", url=f"ws://{self._host}:{self.port}")

    async def stop(self) -> None:
        if self._server is None:
            return
        self._server.close()
        await self._server.wait_closed()
        self._server = None
        logger.info("server_stopped")

    async def _handler(self, ws: ServerConnection) -> None:
        await self._broadcaster.serve(WebSocketConnection(ws), str(ws.remote_address))
