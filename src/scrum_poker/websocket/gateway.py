"""
Socket.IO implementation of the broadcast gateway.
"""

from enum import Enum
from typing import Any
import logging

import socketio

from ..services.gateway import BroadcastGateway

logger = logging.getLogger(__name__)


def _event_name(event: Any) -> str:
    if isinstance(event, Enum):
        return event.value
    return str(event)


class SocketIOGateway(BroadcastGateway):
    """
    Delivers events through a python-socketio AsyncServer.

    Each room maps onto a Socket.IO room of the same name; every connection
    is also implicitly in a room named after its sid, which is how targeted
    messages are addressed.
    """

    def __init__(self, sio: socketio.AsyncServer):
        self.sio = sio

    async def subscribe(self, connection_id: str, room_name: str) -> None:
        await self.sio.enter_room(connection_id, room_name)

    async def broadcast_to_room(self, room_name: str, event: str, *payload: Any) -> None:
        name = _event_name(event)
        if not payload:
            await self.sio.emit(name, room=room_name)
        elif len(payload) == 1:
            await self.sio.emit(name, payload[0], room=room_name)
        else:
            # A tuple is sent as separate event arguments
            await self.sio.emit(name, tuple(payload), room=room_name)
        logger.debug(f"Emitted {name} to room {room_name}")

    async def send_to_connection(self, connection_id: str, event: str, payload: Any = None) -> None:
        name = _event_name(event)
        await self.sio.emit(name, payload, to=connection_id)
        logger.debug(f"Emitted {name} to {connection_id}")
