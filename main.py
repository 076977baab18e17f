from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from endpoints.static import PublicFiles
from routers import api_router, ws_router
from config import settings
from logging_config import setup_logging, get_logger
from services.coordinator import SignalingCoordinator
import os

setup_logging()
logger = get_logger(__name__)


def create_app(coordinator: SignalingCoordinator | None = None, public_dir: str | None = None) -> FastAPI:
    app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.signaling = coordinator or SignalingCoordinator()

    # Include API routers
    app.include_router(api_router, prefix=settings.API_V1_STR)
    app.include_router(ws_router)

    # The static mount catches every remaining HTTP path, so it must come last
    public_dir = public_dir if public_dir is not None else settings.PUBLIC_DIR
    if os.path.isdir(public_dir):
        app.mount("/", PublicFiles(directory=public_dir, html=True), name="public")
    else:
        logger.warning("Static directory %s not found; serving signaling and API only", public_dir)

        @app.get("/")
        async def root():
            return {"message": "Signaling relay is running", "websocket": "/ws"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    scheme = "https" if settings.tls_enabled else "http"
    logger.info("Server running at %s://localhost:%d/", scheme, settings.PORT)
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        ssl_certfile=settings.SSL_CERTFILE if settings.tls_enabled else None,
        ssl_keyfile=settings.SSL_KEYFILE if settings.tls_enabled else None,
        log_level=settings.LOG_LEVEL.lower(),
    )
