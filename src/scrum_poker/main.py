"""
Scrum Poker Backend - FastAPI Application

Main entry point for the HTTP API and the Socket.IO server.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
import logging
import sys

import socketio

from .config import settings
from .routes import feedback
from .websocket.server import sio, get_room_session_service

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)

logger = logging.getLogger(__name__)

# Quiet noisy transport loggers
logging.getLogger('engineio').setLevel(logging.WARNING)
logging.getLogger('socketio').setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Handles startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} on port {settings.PORT}")
    logger.info(f"Feedback dashboard: /feedbacks, API: {settings.API_PREFIX}/feedbacks")
    if settings.email_notifications_enabled:
        logger.info("Email notifications: Enabled (Web3Forms)")
    else:
        logger.info("Email notifications: Disabled (WEB3FORMS_KEY not set)")
    logger.info("Storage: In-memory (reset on server restart)")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await get_room_session_service().shutdown()
    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Real-time planning poker rooms",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "type": type(exc).__name__,
        }
    )


# Health check endpoint
@app.get(f"{settings.API_PREFIX}/health")
async def health_check():
    """
    Health check endpoint.

    Returns application status, version and live room counts.
    """
    service = get_room_session_service()
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "app_name": settings.APP_NAME,
        "rooms": len(service.registry),
        "participants": service.registry.participant_count,
    }


# Include API routers
app.include_router(
    feedback.router,
    prefix=settings.API_PREFIX,
    tags=["feedback"]
)
app.include_router(feedback.views_router, tags=["feedback"])

# Serve the browser client, if one is configured
static_path = settings.static_path
if static_path is not None and static_path.is_dir():
    app.mount("/", StaticFiles(directory=str(static_path), html=True), name="static")
elif static_path is not None:
    logger.warning(f"STATIC_DIR {static_path} does not exist, not serving static files")


# Mount Socket.IO
# The Socket.IO server is mounted at /socket.io by default
socket_app = socketio.ASGIApp(
    sio,
    other_asgi_app=app,
    socketio_path="socket.io"
)


# Run with: uvicorn scrum_poker.main:socket_app
# (plain `main:app` serves HTTP only and Socket.IO clients get 404)
