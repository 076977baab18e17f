"""The signaling coordinator: one object holding all relay state.

The application keeps a single instance on ``app.state.signaling``; endpoints
receive it through ``get_coordinator`` so tests can swap in a fresh one.
"""
from __future__ import annotations
from typing import Dict, Optional

from starlette.requests import HTTPConnection

from config import settings
from identity import IdentityAllocator
from logging_config import get_logger
from realtime import RoomRegistry
from services.connection import Connection, Transport
from services.lifecycle import LifecycleManager
from services.router import MessageRouter

logger = get_logger(__name__)


class SignalingCoordinator:
    def __init__(
        self,
        registry: Optional[RoomRegistry] = None,
        allocator: Optional[IdentityAllocator] = None,
        default_room: Optional[str] = None,
    ) -> None:
        self.registry = registry or RoomRegistry()
        self.allocator = allocator or IdentityAllocator()
        self.lifecycle = LifecycleManager(self.registry)
        self.router = MessageRouter(self.lifecycle, default_room=default_room or settings.DEFAULT_ROOM)
        self._connections: Dict[str, Connection] = {}

    def open(self, transport: Transport) -> Connection:
        connection = Connection(self.allocator.allocate(), transport)
        self._connections[connection.identity] = connection
        logger.info("Connection %s opened", connection.identity)
        return connection

    async def receive(self, connection: Connection, raw: str) -> None:
        await self.router.dispatch(connection, raw)

    async def close(self, connection: Connection) -> None:
        """Transport is gone: leave the room (if any) and forget the connection."""
        try:
            await self.lifecycle.detach(connection)
        finally:
            self._connections.pop(connection.identity, None)
            logger.info("Connection %s closed", connection.identity)

    @property
    def connection_count(self) -> int:
        return len(self._connections)


def get_coordinator(conn: HTTPConnection) -> SignalingCoordinator:
    return conn.app.state.signaling
