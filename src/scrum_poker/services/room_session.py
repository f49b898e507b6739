"""
Room session service.

Entry point for every real-time event. Each handler sanitizes its input,
applies the change through the registry, voting engine or presence manager,
and lets those components broadcast the new room state.
"""

from typing import Any, Optional
import logging

from ..config import settings
from ..models.room import Participant, Room
from ..schemas.events import (
    AutoAwayRequest,
    BreakRequest,
    JoinRoomRequest,
    QuestionRequest,
    RoomEvent,
    ServerEvent,
    VibrationRequest,
    VoteRequest,
    VoteStatistics,
)
from .gateway import BroadcastGateway
from .presence import PresenceManager
from .room_registry import RoomRegistry
from .sanitizer import sanitize
from .voting import VotingEngine

logger = logging.getLogger(__name__)


class RoomSessionService:
    """
    Owns the room state for the process and maps client events onto it.

    Usage:
        service = RoomSessionService(gateway=SocketIOGateway(sio))
        await service.join_room(sid, {"room": "team", "name": "Ana"})
    """

    def __init__(
        self,
        gateway: BroadcastGateway,
        registry: Optional[RoomRegistry] = None,
        grace_period: Optional[float] = None,
        default_avatar: Optional[str] = None,
        coffee_vote: Optional[str] = None,
    ):
        """
        Initialize the service.

        Args:
            gateway: Transport used to reach clients
            registry: Room registry (a fresh one by default)
            grace_period: Seconds before a disconnected participant is removed
            default_avatar: Avatar used when the client sends none
            coffee_vote: Card value that never counts towards statistics
        """
        self.gateway = gateway
        self.registry = registry if registry is not None else RoomRegistry()
        self.default_avatar = default_avatar or settings.DEFAULT_AVATAR
        self.presence = PresenceManager(
            self.registry,
            gateway,
            grace_period if grace_period is not None else settings.AWAY_GRACE_PERIOD_SECONDS,
        )
        self.voting = VotingEngine(gateway, coffee_vote or settings.COFFEE_VOTE)

    async def join_room(self, connection_id: str, data: Any) -> Room:
        """
        Join a room, or resume a previous seat in it.

        A participant already in the room under the same display name is
        treated as the same person reconnecting: their record moves to the
        new connection id and keeps its vote and flags.
        """
        request = JoinRoomRequest.parse(data)
        room_name = sanitize(request.room)
        display_name = sanitize(request.name)
        avatar = sanitize(request.avatar or self.default_avatar)

        await self.gateway.subscribe(connection_id, room_name)
        room = self.registry.get_or_create(room_name)

        existing = room.find_by_display_name(display_name)
        if existing is not None:
            old_id = existing.connection_id
            self.presence.cancel(room_name, old_id)

            room.remove_participant(old_id)

            existing.connection_id = connection_id
            existing.is_away = False
            existing.is_facilitator = request.is_master
            existing.avatar = avatar
            room.participants[connection_id] = existing
            logger.info(f"User {display_name} reconnected to room {room_name}")
        else:
            room.participants[connection_id] = Participant(
                connection_id=connection_id,
                display_name=display_name,
                avatar=avatar,
                is_facilitator=request.is_master,
            )
            logger.info(f"User {display_name} joined room {room_name}")

        if request.is_master:
            room.facilitator_connection_id = connection_id

        await self.gateway.broadcast_to_room(
            room_name, ServerEvent.UPDATE_USERS, room.users_payload()
        )
        return room

    async def vote(self, connection_id: str, data: Any) -> bool:
        """Record a vote for the sender."""
        request = VoteRequest.parse(data)
        room = self.registry.get(sanitize(request.room))
        return await self.voting.cast_vote(room, connection_id, sanitize(request.vote))

    async def show_votes(self, connection_id: str, data: Any) -> Optional[VoteStatistics]:
        """Reveal votes; ignored unless the sender is the facilitator."""
        request = RoomEvent.parse(data)
        room = self.registry.get(sanitize(request.room))
        return await self.voting.reveal_votes(room, connection_id)

    async def reset_votes(self, connection_id: str, data: Any) -> bool:
        """Clear all votes and hide results."""
        request = RoomEvent.parse(data)
        room = self.registry.get(sanitize(request.room))
        return await self.voting.reset_votes(room)

    async def clear_votes(self, connection_id: str, data: Any) -> bool:
        """Clear all votes, leaving the reveal flag alone."""
        request = RoomEvent.parse(data)
        room = self.registry.get(sanitize(request.room))
        return await self.voting.clear_votes_silently(room)

    async def break_request(self, connection_id: str, data: Any) -> bool:
        """Raise or lower the sender's break request."""
        request = BreakRequest.parse(data)
        participant = self._participant(sanitize(request.room), connection_id)
        if participant is None:
            return False
        participant.requesting_break = request.request_break
        await self._broadcast_users(sanitize(request.room))
        return True

    async def question(self, connection_id: str, data: Any) -> bool:
        """Raise or lower the sender's question flag."""
        request = QuestionRequest.parse(data)
        participant = self._participant(sanitize(request.room), connection_id)
        if participant is None:
            return False
        participant.has_question = request.has_question
        await self._broadcast_users(sanitize(request.room))
        return True

    async def auto_away(self, connection_id: str, data: Any) -> None:
        """Apply a client-detected idle / back state."""
        request = AutoAwayRequest.parse(data)
        await self.presence.set_away(sanitize(request.room), connection_id, request.is_away)

    async def send_vibration(self, connection_id: str, data: Any) -> bool:
        """
        Nudge a single participant.

        Only the facilitator of the room may do this; other senders are
        logged and ignored.
        """
        request = VibrationRequest.parse(data)
        room_name = sanitize(request.room)
        target_id = sanitize(request.target_socket_id)

        room = self.registry.get(room_name)
        if room is None or room.facilitator_connection_id != connection_id:
            logger.warning(f"Unauthorized vibration attempt by {connection_id} in room {room_name}")
            return False

        await self.gateway.send_to_connection(
            target_id,
            ServerEvent.RECEIVE_VIBRATION,
            {"from": connection_id, "room": room_name},
        )
        logger.info(f"Facilitator sent vibration to {target_id} in room {room_name}")
        return True

    async def pulse_detect(self, connection_id: str, data: Any) -> None:
        """Relay a pulse to everyone in the room."""
        request = RoomEvent.parse(data)
        await self.gateway.broadcast_to_room(sanitize(request.room), ServerEvent.PULSE_DETECTED)

    async def disconnect(self, connection_id: str) -> None:
        """Start the away grace period for a dropped connection."""
        await self.presence.handle_disconnect(connection_id)

    async def shutdown(self) -> None:
        """Cancel pending timers."""
        await self.presence.shutdown()

    def _participant(self, room_name: str, connection_id: str) -> Optional[Participant]:
        room = self.registry.get(room_name)
        if room is None:
            return None
        return room.participants.get(connection_id)

    async def _broadcast_users(self, room_name: str) -> None:
        room = self.registry.get(room_name)
        if room is not None:
            await self.gateway.broadcast_to_room(
                room_name, ServerEvent.UPDATE_USERS, room.users_payload()
            )
