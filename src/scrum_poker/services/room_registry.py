"""
Room registry.

Keyed, process-local store of rooms. Rooms are created on first join and
are never reaped.
"""

from typing import Dict, List, Optional
import logging

from ..models.room import Room

logger = logging.getLogger(__name__)


class RoomRegistry:
    """
    Holds every room known to this process.

    Lookups are exact and case-sensitive on the sanitized room name.
    """

    def __init__(self):
        self._rooms: Dict[str, Room] = {}

    def get_or_create(self, room_name: str) -> Room:
        """
        Get a room by name, creating an empty one if needed.

        Args:
            room_name: Sanitized room name

        Returns:
            The existing or newly created Room
        """
        room = self._rooms.get(room_name)
        if room is None:
            room = Room(name=room_name)
            self._rooms[room_name] = room
            logger.info(f"Room created: {room_name!r}")
        return room

    def get(self, room_name: str) -> Optional[Room]:
        """Get a room by name, or None if it was never created."""
        return self._rooms.get(room_name)

    def rooms_with_participant(self, connection_id: str) -> List[Room]:
        """Get all rooms that list this connection as a participant."""
        return [
            room for room in self._rooms.values()
            if connection_id in room.participants
        ]

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_name: str) -> bool:
        return room_name in self._rooms

    @property
    def participant_count(self) -> int:
        """Total participants across all rooms."""
        return sum(len(room.participants) for room in self._rooms.values())
