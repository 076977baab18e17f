"""Binding of connections to rooms.

A connection is either Unjoined or Joined(room_id). Every transition goes
through LifecycleManager, which keeps the connection state and the registry in
step and emits the membership notifications that go with a departure.
"""
from __future__ import annotations
from typing import Dict, List, Optional

from logging_config import get_logger
from realtime import RoomRegistry
from schemas.signaling import PeerLeftMessage
from services.connection import UNJOINED, Connection, Joined, broadcast

logger = get_logger(__name__)


class LifecycleManager:
    def __init__(self, registry: RoomRegistry) -> None:
        self.registry = registry

    async def join(self, connection: Connection, room_id: str) -> Dict[str, Connection]:
        """Bind ``connection`` to ``room_id``; returns the other members at join time.

        Joining a different room first leaves the current one, so a connection
        is never a member of two rooms.
        """
        current = connection.state
        if isinstance(current, Joined) and current.room_id != room_id:
            await self.detach(connection)
        # State leads the registry insert; both settle before this coroutine returns
        connection._transition(Joined(room_id))
        others = await self.registry.join(room_id, connection.identity, connection)
        logger.info("%s joined room %s (%d other members)", connection.identity, room_id, len(others))
        return others

    async def detach(self, connection: Connection) -> bool:
        """Leave the current room and tell the remaining members.

        Safe to call any number of times: only the first call after a join
        does anything. Returns True when a departure actually happened.
        """
        current = connection.state
        if not isinstance(current, Joined):
            return False
        # Flip before the first await so a concurrent close cannot run cleanup twice
        connection._transition(UNJOINED)
        remaining = await self.registry.leave(current.room_id, connection.identity)
        logger.info("%s left room %s", connection.identity, current.room_id)
        if remaining:
            await broadcast(remaining.values(), PeerLeftMessage(id=connection.identity))
        return True

    async def resolve(self, connection: Connection, identity: str) -> Optional[Connection]:
        """Member ``identity`` of the sender's room, or None."""
        room_id = connection.room_id
        if room_id is None:
            return None
        return await self.registry.lookup(room_id, identity)

    async def peers(self, connection: Connection) -> List[Connection]:
        room_id = connection.room_id
        if room_id is None:
            return []
        return await self.registry.members(room_id, exclude=connection.identity)
