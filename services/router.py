from __future__ import annotations
import json
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import ValidationError

from logging_config import get_logger
from schemas.signaling import (
    ChatMessage,
    ChatRequest,
    JoinRequest,
    ParticipantsMessage,
    PeerJoinedMessage,
    SignalMessage,
    SignalRequest,
)
from services.connection import Connection, broadcast
from services.lifecycle import LifecycleManager

logger = get_logger(__name__)

Handler = Callable[[Connection, Dict[str, Any]], Awaitable[None]]


def decode_frame(raw: str) -> Optional[Dict[str, Any]]:
    try:
        message = json.loads(raw)
    except (ValueError, RecursionError):
        return None
    return message if isinstance(message, dict) else None


class MessageRouter:
    """Dispatches inbound protocol frames by their ``type``.

    Nothing is ever answered with an error: unparsable frames, unknown types,
    incomplete fields and unreachable targets all end as a silent drop.
    """

    def __init__(self, lifecycle: LifecycleManager, default_room: str = "lobby") -> None:
        self.lifecycle = lifecycle
        self.default_room = default_room
        self._handlers: Dict[str, Handler] = {
            "join": self._on_join,
            "signal": self._on_signal,
            "chat": self._on_chat,
            "leave": self._on_leave,
        }

    async def dispatch(self, connection: Connection, raw: str) -> None:
        message = decode_frame(raw)
        if message is None:
            logger.debug("Dropped unparsable frame from %s", connection.identity)
            return
        msg_type = message.get("type")
        handler = self._handlers.get(msg_type) if isinstance(msg_type, str) else None
        if handler is None:
            logger.debug("Dropped frame of type %r from %s", msg_type, connection.identity)
            return
        try:
            await handler(connection, message)
        except ValidationError as exc:
            logger.debug("Dropped malformed %s from %s: %d errors", msg_type, connection.identity, exc.error_count())

    async def _on_join(self, connection: Connection, message: Dict[str, Any]) -> None:
        room_id = JoinRequest.model_validate(message).roomId or self.default_room
        others = await self.lifecycle.join(connection, room_id)
        # participants is a snapshot taken under the lock; a peer-left for one of
        # these ids may follow it, and clients see them in transport write order
        await connection.send(ParticipantsMessage(ids=list(others)))
        await broadcast(others.values(), PeerJoinedMessage(id=connection.identity))

    async def _on_signal(self, connection: Connection, message: Dict[str, Any]) -> None:
        if connection.room_id is None:
            return
        req = SignalRequest.model_validate(message)
        target = await self.lifecycle.resolve(connection, req.target)
        if target is None:
            logger.debug("Signal from %s to unknown %s dropped", connection.identity, req.target)
            return
        await target.send(SignalMessage(from_=connection.identity, data=req.data))

    async def _on_chat(self, connection: Connection, message: Dict[str, Any]) -> None:
        if connection.room_id is None:
            return
        req = ChatRequest.model_validate(message)
        peers = await self.lifecycle.peers(connection)
        await broadcast(peers, ChatMessage(from_=connection.identity, text=req.text))

    async def _on_leave(self, connection: Connection, message: Dict[str, Any]) -> None:
        await self.lifecycle.detach(connection)
