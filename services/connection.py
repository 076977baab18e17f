from __future__ import annotations
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Protocol, Union

from pydantic import BaseModel

from logging_config import get_logger

logger = get_logger(__name__)


class Transport(Protocol):
    """What the core needs from a live text-frame connection."""

    @property
    def is_open(self) -> bool: ...

    async def send_text(self, data: str) -> None: ...


@dataclass(frozen=True)
class Unjoined:
    pass

@dataclass(frozen=True)
class Joined:
    room_id: str

UNJOINED = Unjoined()
ConnectionState = Union[Unjoined, Joined]


def encode(message: Union[BaseModel, Dict[str, Any]]) -> str:
    if isinstance(message, BaseModel):
        message = message.model_dump(by_alias=True)
    # Same encoding Starlette uses for send_json; keeps non-ASCII text as-is
    return json.dumps(message, separators=(",", ":"), ensure_ascii=False)


class Connection:
    """One accepted transport session.

    ``state`` is read-only from the outside; only the lifecycle manager moves
    a connection between Unjoined and Joined.
    """

    def __init__(self, identity: str, transport: Transport) -> None:
        self.identity = identity
        self.transport = transport
        self._state: ConnectionState = UNJOINED

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def room_id(self) -> str | None:
        return self._state.room_id if isinstance(self._state, Joined) else None

    def _transition(self, state: ConnectionState) -> None:
        self._state = state

    @property
    def is_open(self) -> bool:
        return self.transport.is_open

    async def send(self, message: Union[BaseModel, Dict[str, Any]]) -> bool:
        """Best-effort delivery. Returns False when the frame was not sent."""
        if not self.is_open:
            return False
        try:
            await self.transport.send_text(encode(message))
        except Exception as exc:
            logger.debug("Send to %s failed: %r", self.identity, exc)
            return False
        return True

    def __repr__(self) -> str:
        return f"Connection({self.identity!r}, {self._state!r})"


async def broadcast(connections: Iterable[Connection], message: Union[BaseModel, Dict[str, Any]]) -> int:
    """Send to every connection; a failed recipient never stops the rest."""
    payload = message.model_dump(by_alias=True) if isinstance(message, BaseModel) else message
    delivered = 0
    for conn in list(connections):
        if await conn.send(payload):
            delivered += 1
    return delivered
