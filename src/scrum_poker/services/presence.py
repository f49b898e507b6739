"""
Presence manager.

Tracks the away / grace-period lifecycle of participants:

    present --disconnect--> away (removal pending) --grace expires--> removed
                                   |
                                   +--rejoin with same name--> present

Pending removals are asyncio tasks keyed by (room name, connection id) so a
reconnect can cancel exactly the timer started for the old connection.
"""

from typing import Dict, Tuple
import asyncio
import logging

from ..schemas.events import ServerEvent
from .gateway import BroadcastGateway
from .room_registry import RoomRegistry

logger = logging.getLogger(__name__)

TimerKey = Tuple[str, str]


class PresenceManager:
    """
    Manages away flags and delayed removal of disconnected participants.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        gateway: BroadcastGateway,
        grace_period: float,
    ):
        """
        Initialize the presence manager.

        Args:
            registry: Room registry shared with the session service
            gateway: Gateway used to push room updates
            grace_period: Seconds to wait before removing a disconnected participant
        """
        self.registry = registry
        self.gateway = gateway
        self.grace_period = grace_period
        self._timers: Dict[TimerKey, asyncio.Task] = {}

    async def handle_disconnect(self, connection_id: str) -> None:
        """
        Mark a dropped connection as away in every room it belongs to.

        Each room is updated immediately and a removal is scheduled for when
        the grace period runs out.
        """
        # State changes finish before the first await; a concurrent rejoin
        # may re-key the participant while broadcasts are in flight.
        rooms = self.registry.rooms_with_participant(connection_id)
        for room in rooms:
            participant = room.participants[connection_id]
            participant.is_away = True
            self._schedule_removal(room.name, connection_id)
            logger.info(
                f"User {participant.display_name} disconnected from room {room.name}, "
                f"starting {self.grace_period:.0f}s grace period"
            )

        for room in rooms:
            await self.gateway.broadcast_to_room(
                room.name, ServerEvent.UPDATE_USERS, room.users_payload()
            )

    async def set_away(self, room_name: str, connection_id: str, is_away: bool) -> None:
        """
        Overwrite a participant's away flag at the client's request.

        Used for idle detection; does not touch pending removal timers.
        """
        room = self.registry.get(room_name)
        if room is None or connection_id not in room.participants:
            return

        room.participants[connection_id].is_away = is_away
        await self.gateway.broadcast_to_room(
            room.name, ServerEvent.UPDATE_USERS, room.users_payload()
        )

    def cancel(self, room_name: str, connection_id: str) -> bool:
        """
        Cancel a pending removal.

        Safe to call for timers that already fired or never existed.

        Returns:
            True if a pending timer was cancelled
        """
        task = self._timers.pop((room_name, connection_id), None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.debug(f"Cancelled removal of {connection_id} from room {room_name}")
        return True

    def is_pending(self, room_name: str, connection_id: str) -> bool:
        """Check whether a removal is scheduled for this participant."""
        task = self._timers.get((room_name, connection_id))
        return task is not None and not task.done()

    @property
    def pending_count(self) -> int:
        """Number of removals currently scheduled."""
        return sum(1 for task in self._timers.values() if not task.done())

    async def shutdown(self) -> None:
        """Cancel every pending removal."""
        tasks = list(self._timers.values())
        self._timers.clear()
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        if tasks:
            logger.info(f"Cancelled {len(tasks)} pending removal timers")

    def _schedule_removal(self, room_name: str, connection_id: str) -> None:
        key = (room_name, connection_id)
        # A connection can only be pending once per room
        self.cancel(room_name, connection_id)
        self._timers[key] = asyncio.create_task(
            self._remove_after_grace(room_name, connection_id)
        )

    async def _remove_after_grace(self, room_name: str, connection_id: str) -> None:
        """Sleep through the grace period, then drop the participant if still present."""
        await asyncio.sleep(self.grace_period)

        key = (room_name, connection_id)
        if self._timers.get(key) is asyncio.current_task():
            del self._timers[key]

        room = self.registry.get(room_name)
        if room is None or connection_id not in room.participants:
            return

        participant = room.remove_participant(connection_id)
        logger.info(
            f"Grace period expired for {participant.display_name}, removing from room {room_name}"
        )
        try:
            await self.gateway.broadcast_to_room(
                room_name, ServerEvent.UPDATE_USERS, room.users_payload()
            )
        except Exception as e:
            logger.error(f"Failed to broadcast removal in room {room_name}: {e}", exc_info=True)
