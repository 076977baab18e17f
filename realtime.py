"""Room membership registry and the WebSocket transport adapter.

In-process only: one registry per application, guarded by a single
asyncio.Lock. Network sends never happen while the lock is held; callers take
a snapshot and fan out afterwards.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Tuple
from fastapi import WebSocket
from starlette.websockets import WebSocketState
import asyncio

from services.connection import Connection


class RoomRegistry:
    def __init__(self) -> None:
        # room_id -> identity -> connection; a room key exists only while it has members
        self._rooms: Dict[str, Dict[str, Connection]] = {}
        self._lock = asyncio.Lock()

    async def join(self, room_id: str, identity: str, connection: Connection) -> Dict[str, Connection]:
        """Add ``connection`` under ``identity`` and return the other members present at call time."""
        async with self._lock:
            members = self._rooms.setdefault(room_id, {})
            others = {i: c for i, c in members.items() if i != identity}
            members[identity] = connection
        return others

    async def leave(self, room_id: str, identity: str) -> Dict[str, Connection]:
        """Remove ``identity`` and return the members left behind.

        Absent room or identity is a no-op and returns an empty mapping.
        """
        async with self._lock:
            members = self._rooms.get(room_id)
            if not members or identity not in members:
                return {}
            members.pop(identity)
            if not members:
                self._rooms.pop(room_id, None)
                return {}
            return dict(members)

    async def lookup(self, room_id: str, identity: str) -> Optional[Connection]:
        async with self._lock:
            return self._rooms.get(room_id, {}).get(identity)

    async def members(self, room_id: str, exclude: Optional[str] = None) -> List[Connection]:
        async with self._lock:
            return [c for i, c in self._rooms.get(room_id, {}).items() if i != exclude]

    async def snapshot(self, room_id: str) -> List[str]:
        async with self._lock:
            return list(self._rooms.get(room_id, {}))

    async def rooms(self) -> List[Tuple[str, int]]:
        async with self._lock:
            return [(room_id, len(members)) for room_id, members in self._rooms.items()]


class WebSocketTransport:
    """Adapts a Starlette WebSocket to the send/is-open contract of the core."""

    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket

    @property
    def is_open(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send_text(self, data: str) -> None:
        await self.websocket.send_text(data)
