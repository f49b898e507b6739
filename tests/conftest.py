"""
Pytest configuration and fixtures for the Scrum Poker tests.
"""

import pytest
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncGenerator, List, Tuple
from httpx import AsyncClient, ASGITransport

from scrum_poker.main import app
from scrum_poker.services.feedback_store import FeedbackStore, get_feedback_store
from scrum_poker.services.gateway import BroadcastGateway
from scrum_poker.services.notifier import FeedbackNotifier, get_feedback_notifier
from scrum_poker.services.room_session import RoomSessionService

# Short enough to wait out in a test
TEST_GRACE_PERIOD = 0.05


@dataclass
class Emitted:
    """One event pushed through the gateway."""
    target: str
    event: str
    payload: Tuple[Any, ...]


class RecordingGateway(BroadcastGateway):
    """Gateway that records everything instead of sending it."""

    def __init__(self):
        self.subscriptions: List[Tuple[str, str]] = []
        self.room_events: List[Emitted] = []
        self.direct_events: List[Emitted] = []

    async def subscribe(self, connection_id: str, room_name: str) -> None:
        self.subscriptions.append((connection_id, room_name))

    async def broadcast_to_room(self, room_name: str, event: str, *payload: Any) -> None:
        name = event.value if isinstance(event, Enum) else event
        self.room_events.append(Emitted(room_name, name, payload))

    async def send_to_connection(self, connection_id: str, event: str, payload: Any = None) -> None:
        name = event.value if isinstance(event, Enum) else event
        self.direct_events.append(Emitted(connection_id, name, (payload,)))

    def events_named(self, name: str) -> List[Emitted]:
        return [e for e in self.room_events if e.event == name]

    def last(self, name: str) -> Emitted:
        return self.events_named(name)[-1]

    def clear(self) -> None:
        self.room_events.clear()
        self.direct_events.clear()


@pytest.fixture
def gateway() -> RecordingGateway:
    """Create a fresh recording gateway for each test."""
    return RecordingGateway()


@pytest.fixture
async def service(gateway: RecordingGateway) -> AsyncGenerator[RoomSessionService, None]:
    """Create a room session service with a short grace period."""
    room_sessions = RoomSessionService(gateway=gateway, grace_period=TEST_GRACE_PERIOD)
    yield room_sessions
    await room_sessions.shutdown()


@pytest.fixture
def feedback_store() -> FeedbackStore:
    return FeedbackStore()


@pytest.fixture
def disabled_notifier() -> FeedbackNotifier:
    return FeedbackNotifier(access_key="")


@pytest.fixture
async def client(
    feedback_store: FeedbackStore,
    disabled_notifier: FeedbackNotifier,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client with isolated feedback state."""
    app.dependency_overrides[get_feedback_store] = lambda: feedback_store
    app.dependency_overrides[get_feedback_notifier] = lambda: disabled_notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def sample_feedback_data() -> dict:
    """Sample feedback submission."""
    return {
        "rating": 4,
        "email": "ana@example.com",
        "message": "Love the coffee card",
        "timestamp": "2024-05-02T10:32:00Z",
        "room": "team-rocket",
    }
