# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from vitellary.server.broadcast import Broadcaster, Subscriber, UpdateChannel
from vitellary.server.websocket import WebSocketServer

__all__ = ["Broadcaster", "Subscriber", "UpdateChannel", "WebSocketServer"]
