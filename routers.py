from fastapi import APIRouter
from endpoints.rooms import router as rooms_router
from endpoints.signaling_ws import router as signaling_ws_router

api_router = APIRouter()
api_router.include_router(rooms_router, tags=["rooms"])

# WebSocket routes live at the application root, not under the API prefix
ws_router = APIRouter()
ws_router.include_router(signaling_ws_router, tags=["signaling"])
