from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from typing import Optional
import logging

from .config import Settings
from .errors import GameError
from .routers import game, users
from .services.room_manager import RoomManager
from .services.room_registry import RoomRegistry
from .services.session_registry import SessionRegistry
from .services.user_registry import UserRegistry
from .store.user_store import UserStore, build_user_store
from .tasks.sweeper import RoomSweeper

settings = Settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None, store: Optional[UserStore] = None) -> FastAPI:
    """
    Build the API with its own registries

    Args:
        app_settings: Settings to use (defaults to the environment)
        store: Durable user store; built from the settings when omitted

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load users and run the room sweeper for the lifetime of the server"""
        logger.info(f"Starting up Tic Tac Toe API with {app_settings!r}")
        count = app.state.users.load()
        logger.info(f"Loaded {count} users from {app.state.users.store.describe()}")
        app.state.sweeper.start()
        try:
            yield
        finally:
            logger.info("Shutting down Tic Tac Toe API")
            app.state.sweeper.stop()
            app.state.users.save()

    app = FastAPI(
        title="Tic Tac Toe API",
        description="Accounts, scores and online multiplayer rooms",
        version="0.1.0",
        lifespan=lifespan,
    )

    user_registry = UserRegistry(store or build_user_store(app_settings))
    room_manager = RoomManager(
        RoomRegistry(),
        user_registry,
        room_ttl_seconds=app_settings.room_ttl_seconds,
        emote_duration_seconds=app_settings.emote_duration_seconds,
    )

    app.state.settings = app_settings
    app.state.users = user_registry
    app.state.sessions = SessionRegistry()
    app.state.room_manager = room_manager
    app.state.sweeper = RoomSweeper(room_manager, app_settings.sweep_interval_seconds)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origin_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(GameError)
    async def game_error_handler(request: Request, exc: GameError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.debug(f"Rejected request body on {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/api/health")
    def health_check():
        """Detailed health check endpoint"""
        store = app.state.users.store
        if app.state.users.load_failed:
            store_status = "unreadable"
        else:
            store_status = "ok" if store.is_available() else "unavailable"
        return {
            "status": "ok",
            "version": app.version,
            "services": {
                "user_store": f"{store.describe()} {store_status}",
                "sweeper": "running" if app.state.sweeper.is_running else "stopped",
            },
            "users": app.state.users.count(),
            "rooms": len(app.state.room_manager.rooms),
            "sessions": app.state.sessions.count(),
        }

    app.include_router(users.router)
    app.include_router(game.router)

    # The web client, when configured, is served from the root after the API routes
    if app_settings.static_dir:
        app.mount("/", StaticFiles(directory=app_settings.static_dir, html=True), name="static")
    else:
        @app.get("/")
        async def root():
            """Root endpoint for health check"""
            return {"status": "ok", "message": "Tic Tac Toe API is running"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("tictactoe.main:app", host=settings.host, port=settings.port)
