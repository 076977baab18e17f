from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Literal, Optional

# Inbound (client -> server). Unknown fields are ignored.

class JoinRequest(BaseModel):
    roomId: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("roomId", mode="before")
    @classmethod
    def _blank_is_absent(cls, v: Any) -> Optional[str]:
        # A join is never rejected: anything but a non-empty string means "use the default room"
        if isinstance(v, str) and v:
            return v
        return None

class SignalRequest(BaseModel):
    target: str
    data: Any

    model_config = ConfigDict(extra="ignore")

class ChatRequest(BaseModel):
    text: str

    model_config = ConfigDict(extra="ignore")

# Outbound (server -> client)

class ParticipantsMessage(BaseModel):
    type: Literal["participants"] = "participants"
    ids: List[str]

class PeerJoinedMessage(BaseModel):
    type: Literal["peer-joined"] = "peer-joined"
    id: str

class PeerLeftMessage(BaseModel):
    type: Literal["peer-left"] = "peer-left"
    id: str

class SignalMessage(BaseModel):
    type: Literal["signal"] = "signal"
    from_: str = Field(alias="from")
    data: Any

    model_config = ConfigDict(populate_by_name=True)

class ChatMessage(BaseModel):
    type: Literal["chat"] = "chat"
    from_: str = Field(alias="from")
    text: str

    model_config = ConfigDict(populate_by_name=True)
