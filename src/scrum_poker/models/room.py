"""
In-memory room and participant models.

Rooms live only for the lifetime of the process; nothing here is persisted.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class Participant:
    """A single person in a room, keyed by their current connection id."""
    connection_id: str
    display_name: str
    avatar: str
    vote: Optional[str] = None
    is_away: bool = False
    requesting_break: bool = False
    has_question: bool = False
    is_facilitator: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire format the browser client expects."""
        return {
            "name": self.display_name,
            "vote": self.vote,
            "requestBreak": self.requesting_break,
            "hasQuestion": self.has_question,
            "isAway": self.is_away,
            "isMaster": self.is_facilitator,
            "avatar": self.avatar,
            "socketId": self.connection_id,
        }


@dataclass
class Room:
    """
    A voting session identified by its (sanitized) name.

    ``facilitator_connection_id``, when set, always refers to a key of
    ``participants``.
    """
    name: str
    participants: Dict[str, Participant] = field(default_factory=dict)
    facilitator_connection_id: Optional[str] = None
    votes_revealed: bool = False

    def find_by_display_name(self, display_name: str) -> Optional[Participant]:
        """Return the first participant (insertion order) with this name."""
        for participant in self.participants.values():
            if participant.display_name == display_name:
                return participant
        return None

    def remove_participant(self, connection_id: str) -> Optional[Participant]:
        """Remove a participant and drop the facilitator pointer if it was theirs."""
        participant = self.participants.pop(connection_id, None)
        if participant is not None and self.facilitator_connection_id == connection_id:
            self.facilitator_connection_id = None
        return participant

    def clear_votes(self) -> None:
        """Set every participant's vote back to None."""
        for participant in self.participants.values():
            participant.vote = None

    def users_payload(self) -> Dict[str, Dict[str, Any]]:
        """Serialize the participant mapping for broadcasting."""
        return {
            connection_id: participant.to_dict()
            for connection_id, participant in self.participants.items()
        }

    @property
    def is_empty(self) -> bool:
        return not self.participants
