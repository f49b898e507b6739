"""
Base interface for broadcast gateways.

Services push room state through a gateway rather than talking to the
transport directly, so they can run against Socket.IO in production and a
recording fake in tests.
"""

from abc import ABC, abstractmethod
from typing import Any


class BroadcastGateway(ABC):
    """
    Abstract base class for delivering events to connected clients.
    """

    @abstractmethod
    async def subscribe(self, connection_id: str, room_name: str) -> None:
        """Add a connection to a room's broadcast channel."""
        pass

    @abstractmethod
    async def broadcast_to_room(self, room_name: str, event: str, *payload: Any) -> None:
        """
        Deliver an event to every connection subscribed to the room.
        Multiple payload values are sent as separate event arguments.
        """
        pass

    @abstractmethod
    async def send_to_connection(self, connection_id: str, event: str, payload: Any = None) -> None:
        """Deliver an event to exactly one connection."""
        pass
