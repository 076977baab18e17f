from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Depends
from realtime import WebSocketTransport
from services.coordinator import SignalingCoordinator, get_coordinator

router = APIRouter()


async def _serve(websocket: WebSocket, coordinator: SignalingCoordinator):
    await websocket.accept()
    connection = coordinator.open(WebSocketTransport(websocket))
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            text = message.get("text")
            if text is None:
                # Binary frames are not part of the protocol
                continue
            await coordinator.receive(connection, text)
    except WebSocketDisconnect:
        pass
    finally:
        await coordinator.close(connection)


# Browsers connect to the page origin itself; /ws is kept for explicit clients
@router.websocket("/")
async def signaling_root(websocket: WebSocket, coordinator: SignalingCoordinator = Depends(get_coordinator)):
    await _serve(websocket, coordinator)


@router.websocket("/ws")
async def signaling_ws(websocket: WebSocket, coordinator: SignalingCoordinator = Depends(get_coordinator)):
    await _serve(websocket, coordinator)
