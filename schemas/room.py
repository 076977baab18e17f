from pydantic import BaseModel
from typing import List

class RoomSummary(BaseModel):
    roomId: str
    memberCount: int

class RoomDetail(RoomSummary):
    members: List[str]

class HealthOut(BaseModel):
    status: str
    rooms: int
    connections: int
