"""
Pydantic schemas for request/response and event validation.
"""

from .events import (
    ClientEvent,
    ServerEvent,
    RoomEvent,
    JoinRoomRequest,
    VoteRequest,
    BreakRequest,
    QuestionRequest,
    AutoAwayRequest,
    VibrationRequest,
    VoteStatistics,
)
from .feedback import (
    FeedbackCreate,
    FeedbackResponse,
    FeedbackSubmitted,
    FeedbackList,
)

__all__ = [
    "ClientEvent",
    "ServerEvent",
    "RoomEvent",
    "JoinRoomRequest",
    "VoteRequest",
    "BreakRequest",
    "QuestionRequest",
    "AutoAwayRequest",
    "VibrationRequest",
    "VoteStatistics",
    "FeedbackCreate",
    "FeedbackResponse",
    "FeedbackSubmitted",
    "FeedbackList",
]
