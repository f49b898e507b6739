"""
Socket.IO event names and inbound payload schemas.

Clients are browsers running the Scrum Poker page, so payloads are
loosely typed. Every schema coerces missing or odd values to defaults
instead of rejecting the event.
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator


class ClientEvent(str, Enum):
    """Events received from clients."""

    JOIN_ROOM = "joinRoom"
    VOTE = "vote"
    SHOW_VOTES = "showVotes"
    RESET_VOTES = "resetVotes"
    CLEAR_VOTES = "a"
    BREAK_REQUEST = "breakRequest"
    QUESTION = "question"
    AUTO_AWAY = "autoAway"
    SEND_VIBRATION = "sendVibration"
    PULSE_DETECT = "pulseDetect"


class ServerEvent(str, Enum):
    """Events emitted to clients."""

    UPDATE_USERS = "updateUsers"
    HIDE_VOTES = "hideVotes"
    VOTES_RESET = "votesReset"
    VOTES_CLEARED = "a"
    UPDATE_VOTES = "updateVotes"
    PULSE_DETECTED = "pulseDetected"
    RECEIVE_VIBRATION = "receiveVibration"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


class RoomEvent(BaseModel):
    """Base for events that target a room."""

    room: str = Field(default="", description="Room name as typed by the user")

    model_config = {
        "extra": "ignore",
    }

    @field_validator("room", mode="before")
    @classmethod
    def _coerce_room(cls, value: Any) -> str:
        return _as_text(value)

    @classmethod
    def parse(cls, data: Any) -> "RoomEvent":
        """
        Build the event from a raw Socket.IO payload.

        Bare strings are treated as the room name; anything that is not a
        dict or string yields the defaults.
        """
        if isinstance(data, dict):
            return cls.model_validate(data)
        if isinstance(data, str):
            return cls.model_validate({"room": data})
        return cls()


class JoinRoomRequest(RoomEvent):
    """Payload of ``joinRoom``."""

    name: str = Field(default="", description="Display name")
    is_master: bool = Field(default=False, alias="isMaster")
    avatar: Optional[str] = Field(default=None, description="Avatar glyph")

    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
    }

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("is_master", mode="before")
    @classmethod
    def _coerce_is_master(cls, value: Any) -> bool:
        return _as_flag(value)

    @field_validator("avatar", mode="before")
    @classmethod
    def _coerce_avatar(cls, value: Any) -> Optional[str]:
        # Empty avatars fall back to the default glyph
        if value is None or value == "":
            return None
        return str(value)


class VoteRequest(RoomEvent):
    """Payload of ``vote``."""

    vote: str = ""

    @field_validator("vote", mode="before")
    @classmethod
    def _coerce_vote(cls, value: Any) -> str:
        return _as_text(value)


class BreakRequest(RoomEvent):
    """Payload of ``breakRequest``."""

    request_break: bool = Field(default=False, alias="requestBreak")

    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
    }

    @field_validator("request_break", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return _as_flag(value)


class QuestionRequest(RoomEvent):
    """Payload of ``question``."""

    has_question: bool = Field(default=False, alias="hasQuestion")

    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
    }

    @field_validator("has_question", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return _as_flag(value)


class AutoAwayRequest(RoomEvent):
    """Payload of ``autoAway``."""

    is_away: bool = Field(default=False, alias="isAway")

    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
    }

    @field_validator("is_away", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return _as_flag(value)


class VibrationRequest(RoomEvent):
    """Payload of ``sendVibration``."""

    target_socket_id: str = Field(default="", alias="targetSocketId")

    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
    }

    @field_validator("target_socket_id", mode="before")
    @classmethod
    def _coerce_target(cls, value: Any) -> str:
        return _as_text(value)


class VoteStatistics(BaseModel):
    """Aggregate shown when the facilitator reveals the votes."""

    average: str = Field(..., description="Mean of qualifying votes, one decimal, or '-'")
    mode: str = Field(
        ...,
        serialization_alias="median",
        description="Most common vote(s), comma-joined on ties, or '-'",
    )
    consensus: str = Field(..., description="Share of the most common vote, e.g. '50%', or '-'")

    def to_payload(self) -> dict:
        """Serialize using the keys the browser client reads."""
        return self.model_dump(by_alias=True)
