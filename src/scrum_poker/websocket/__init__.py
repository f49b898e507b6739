"""
WebSocket (Socket.IO) server for real-time communication.

Note: socket_app is created in main.py to properly wrap both Socket.IO and FastAPI
"""

from .server import sio, get_room_session_service
from .gateway import SocketIOGateway

__all__ = ["sio", "get_room_session_service", "SocketIOGateway"]
