"""
Socket.IO server for real-time communication.

Registers the Scrum Poker client events and forwards them to the room
session service.
"""

import socketio
import logging
from typing import Any, Optional

from ..config import settings
from ..schemas.events import ClientEvent
from ..services.room_session import RoomSessionService
from .gateway import SocketIOGateway

logger = logging.getLogger(__name__)

# Create Socket.IO async server
sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins='*',
    ping_interval=settings.WEBSOCKET_PING_INTERVAL,
    ping_timeout=settings.WEBSOCKET_PING_TIMEOUT,
    logger=False,  # Disable Socket.IO verbose logging
    engineio_logger=False,  # Disable Engine.IO verbose logging
)

# All room state for this process
room_sessions = RoomSessionService(gateway=SocketIOGateway(sio))


def get_room_session_service() -> RoomSessionService:
    """Get the RoomSessionService bound to the Socket.IO server."""
    return room_sessions


# Connection events
@sio.event
async def connect(sid: str, environ: dict, auth: Optional[dict] = None):
    """Handle new WebSocket connection."""
    logger.info(f"Client connected: {sid}")


@sio.event
async def disconnect(sid: str, reason: Any = None):
    """Handle WebSocket disconnection; starts the away grace period."""
    logger.info(f"Client disconnecting: {sid}")
    await room_sessions.disconnect(sid)


# Room events
@sio.on(ClientEvent.JOIN_ROOM.value)
async def join_room(sid: str, data: Any = None):
    """
    Join or rejoin a room.

    Expected data format:
    {
        "room": "team-rocket",
        "name": "Ana",
        "isMaster": false,
        "avatar": "🦊"
    }
    """
    await room_sessions.join_room(sid, data)


@sio.on(ClientEvent.VOTE.value)
async def vote(sid: str, data: Any = None):
    """Record a vote: {"room": ..., "vote": "5"}."""
    await room_sessions.vote(sid, data)


@sio.on(ClientEvent.SHOW_VOTES.value)
async def show_votes(sid: str, data: Any = None):
    """Reveal votes. Data is the room name."""
    await room_sessions.show_votes(sid, data)


@sio.on(ClientEvent.RESET_VOTES.value)
async def reset_votes(sid: str, data: Any = None):
    """Reset votes. Data is the room name."""
    await room_sessions.reset_votes(sid, data)


@sio.on(ClientEvent.CLEAR_VOTES.value)
async def clear_votes(sid: str, data: Any = None):
    """Clear votes without hiding results. Data is the room name."""
    await room_sessions.clear_votes(sid, data)


@sio.on(ClientEvent.BREAK_REQUEST.value)
async def break_request(sid: str, data: Any = None):
    await room_sessions.break_request(sid, data)


@sio.on(ClientEvent.QUESTION.value)
async def question(sid: str, data: Any = None):
    await room_sessions.question(sid, data)


@sio.on(ClientEvent.AUTO_AWAY.value)
async def auto_away(sid: str, data: Any = None):
    await room_sessions.auto_away(sid, data)


@sio.on(ClientEvent.SEND_VIBRATION.value)
async def send_vibration(sid: str, data: Any = None):
    """Facilitator-only nudge: {"room": ..., "targetSocketId": ...}."""
    await room_sessions.send_vibration(sid, data)


@sio.on(ClientEvent.PULSE_DETECT.value)
async def pulse_detect(sid: str, data: Any = None):
    await room_sessions.pulse_detect(sid, data)


# NOTE: The ASGIApp that wraps Socket.IO is created in main.py
# so it wraps both Socket.IO and the FastAPI app
