from fastapi import APIRouter, Depends, HTTPException
from typing import List
from schemas.room import RoomSummary, RoomDetail, HealthOut
from services.coordinator import SignalingCoordinator, get_coordinator

router = APIRouter()

@router.get("/rooms", response_model=List[RoomSummary])
async def list_rooms(coordinator: SignalingCoordinator = Depends(get_coordinator)):
    rooms = await coordinator.registry.rooms()
    return [RoomSummary(roomId=room_id, memberCount=count) for room_id, count in sorted(rooms)]

@router.get("/rooms/{room_id}", response_model=RoomDetail)
async def get_room(room_id: str, coordinator: SignalingCoordinator = Depends(get_coordinator)):
    members = await coordinator.registry.snapshot(room_id)
    if not members:
        raise HTTPException(status_code=404, detail="Room not found")
    return RoomDetail(roomId=room_id, memberCount=len(members), members=members)

@router.get("/health", response_model=HealthOut)
async def health(coordinator: SignalingCoordinator = Depends(get_coordinator)):
    rooms = await coordinator.registry.rooms()
    return HealthOut(status="ok", rooms=len(rooms), connections=coordinator.connection_count)
