"""
Service layer for the Scrum Poker backend.

Room state (registry, presence timers, votes) is owned by a single
RoomSessionService created with the Socket.IO server; feedback has its own
store and notifier.
"""

from .sanitizer import sanitize
from .gateway import BroadcastGateway
from .room_registry import RoomRegistry
from .presence import PresenceManager
from .voting import (
    VotingEngine,
    compute_statistics,
    qualifying_votes,
    parse_vote,
)
from .room_session import RoomSessionService
from .feedback_store import (
    FeedbackStore,
    get_feedback_store,
)
from .notifier import (
    FeedbackNotifier,
    NotificationError,
    get_feedback_notifier,
)

__all__ = [
    # Rooms
    "sanitize",
    "BroadcastGateway",
    "RoomRegistry",
    "PresenceManager",
    "RoomSessionService",
    # Voting
    "VotingEngine",
    "compute_statistics",
    "qualifying_votes",
    "parse_vote",
    # Feedback
    "FeedbackStore",
    "get_feedback_store",
    "FeedbackNotifier",
    "NotificationError",
    "get_feedback_notifier",
]
