"""
Tests for the room session service (join, reconnect, flags, vibration).
"""

import pytest

from scrum_poker.services.room_session import RoomSessionService


@pytest.mark.asyncio
async def test_join_creates_room_and_participant(service: RoomSessionService, gateway):
    """Test a first join."""
    room = await service.join_room("sid1", {"room": "team", "name": "Ana", "avatar": "🦊"})

    assert gateway.subscriptions == [("sid1", "team")]
    assert room.name == "team"
    participant = room.participants["sid1"]
    assert participant.display_name == "Ana"
    assert participant.avatar == "🦊"
    assert participant.vote is None
    assert participant.is_facilitator is False
    assert room.facilitator_connection_id is None

    event = gateway.last("updateUsers")
    assert event.target == "team"
    assert event.payload[0] == {
        "sid1": {
            "name": "Ana",
            "vote": None,
            "requestBreak": False,
            "hasQuestion": False,
            "isAway": False,
            "isMaster": False,
            "avatar": "🦊",
            "socketId": "sid1",
        }
    }


@pytest.mark.asyncio
async def test_join_default_avatar(service):
    room = await service.join_room("sid1", {"room": "team", "name": "Ana"})
    assert room.participants["sid1"].avatar == "👤"


@pytest.mark.asyncio
async def test_join_with_missing_fields_degrades(service):
    """Test that malformed joins fall back to empty names."""
    room = await service.join_room("sid1", None)

    assert room.name == ""
    assert room.participants["sid1"].display_name == ""


@pytest.mark.asyncio
async def test_join_sanitizes_fields(service, gateway):
    """Test that markup never reaches other clients raw."""
    room = await service.join_room(
        "sid1",
        {"room": "<b>team</b>", "name": "<script>x</script>", "avatar": "\"'"},
    )

    assert room.name == "&lt;b&gt;team&lt;/b&gt;"
    participant = room.participants["sid1"]
    assert participant.display_name == "&lt;script&gt;x&lt;/script&gt;"
    assert participant.avatar == "&quot;&#39;"
    assert gateway.last("updateUsers").target == "&lt;b&gt;team&lt;/b&gt;"


@pytest.mark.asyncio
async def test_room_names_are_case_sensitive(service):
    await service.join_room("sid1", {"room": "Team", "name": "Ana"})
    await service.join_room("sid2", {"room": "team", "name": "Ben"})

    assert len(service.registry) == 2


@pytest.mark.asyncio
async def test_rejoin_rekeys_participant(service, gateway):
    """Test that the same name on a new connection keeps its state."""
    await service.join_room("sid1", {"room": "team", "name": "Ana"})
    await service.vote("sid1", {"room": "team", "vote": "8"})
    await service.break_request("sid1", {"room": "team", "requestBreak": True})
    await service.question("sid1", {"room": "team", "hasQuestion": True})
    await service.auto_away("sid1", {"room": "team", "isAway": True})

    room = await service.join_room("sid2", {"room": "team", "name": "Ana", "avatar": "🐼"})

    assert list(room.participants) == ["sid2"]
    participant = room.participants["sid2"]
    assert participant.connection_id == "sid2"
    assert participant.vote == "8"
    assert participant.requesting_break is True
    assert participant.has_question is True
    assert participant.is_away is False
    assert participant.avatar == "🐼"
    assert gateway.last("updateUsers").payload[0]["sid2"]["socketId"] == "sid2"


@pytest.mark.asyncio
async def test_rejoin_matches_first_participant_with_name(service):
    await service.join_room("sid1", {"room": "team", "name": "Ana"})
    await service.join_room("sid2", {"room": "team", "name": "Ben"})

    room = await service.join_room("sid3", {"room": "team", "name": "Ana"})

    assert set(room.participants) == {"sid2", "sid3"}


@pytest.mark.asyncio
async def test_facilitator_claim_transfers(service):
    """Test that the last participant claiming facilitation wins."""
    room = await service.join_room("sm1", {"room": "team", "name": "Sam", "isMaster": True})
    assert room.facilitator_connection_id == "sm1"

    await service.join_room("sm2", {"room": "team", "name": "Kim", "isMaster": True})

    assert room.facilitator_connection_id == "sm2"


@pytest.mark.asyncio
async def test_facilitator_rejoin_moves_pointer(service):
    room = await service.join_room("sm1", {"room": "team", "name": "Sam", "isMaster": True})

    await service.join_room("sm2", {"room": "team", "name": "Sam", "isMaster": True})

    assert room.facilitator_connection_id == "sm2"
    assert room.participants["sm2"].is_facilitator is True


@pytest.mark.asyncio
async def test_facilitator_rejoin_as_voter_drops_pointer(service):
    """Test the facilitator pointer never refers to a missing participant."""
    room = await service.join_room("sm1", {"room": "team", "name": "Sam", "isMaster": True})

    await service.join_room("sm2", {"room": "team", "name": "Sam", "isMaster": False})

    assert room.facilitator_connection_id is None
    assert room.participants["sm2"].is_facilitator is False


@pytest.mark.asyncio
async def test_vote_from_unknown_room_is_ignored(service, gateway):
    assert await service.vote("sid1", {"room": "nowhere", "vote": "3"}) is False
    assert gateway.room_events == []


@pytest.mark.asyncio
async def test_vote_is_sanitized(service):
    await service.join_room("sid1", {"room": "team", "name": "Ana"})

    await service.vote("sid1", {"room": "team", "vote": "<3"})

    assert service.registry.get("team").participants["sid1"].vote == "&lt;3"


@pytest.mark.asyncio
async def test_full_round(service, gateway):
    """Test vote, reveal, change vote, reset."""
    await service.join_room("sm", {"room": "team", "name": "Sam", "isMaster": True})
    for sid, vote in [("a", "1"), ("b", "2"), ("c", "2"), ("d", "3")]:
        await service.join_room(sid, {"room": "team", "name": sid})
        await service.vote(sid, {"room": "team", "vote": vote})

    stats = await service.show_votes("sm", "team")
    assert stats.average == "2.0"
    assert stats.mode == "2"
    assert stats.consensus == "50%"
    assert service.registry.get("team").votes_revealed is True

    await service.vote("a", {"room": "team", "vote": "5"})
    users = gateway.last("hideVotes").payload[0]
    assert [users[sid]["vote"] for sid in "abcd"] == ["5", "2", "2", "3"]
    assert service.registry.get("team").votes_revealed is False

    assert await service.reset_votes("a", "team") is True
    users = gateway.last("votesReset").payload[0]
    assert all(user["vote"] is None for user in users.values())


@pytest.mark.asyncio
async def test_show_votes_by_non_facilitator(service, gateway):
    await service.join_room("sm", {"room": "team", "name": "Sam", "isMaster": True})
    await service.join_room("a", {"room": "team", "name": "Ana"})

    assert await service.show_votes("a", "team") is None
    assert service.registry.get("team").votes_revealed is False
    assert gateway.events_named("updateVotes") == []


@pytest.mark.asyncio
async def test_clear_votes_accepts_bare_room(service, gateway):
    await service.join_room("a", {"room": "team", "name": "Ana"})
    await service.vote("a", {"room": "team", "vote": "3"})

    assert await service.clear_votes("a", "team") is True
    assert gateway.last("a").payload[0]["a"]["vote"] is None


@pytest.mark.asyncio
async def test_break_and_question_flags(service, gateway):
    await service.join_room("a", {"room": "team", "name": "Ana"})

    assert await service.break_request("a", {"room": "team", "requestBreak": True}) is True
    assert gateway.last("updateUsers").payload[0]["a"]["requestBreak"] is True

    assert await service.question("a", {"room": "team", "hasQuestion": True}) is True
    assert gateway.last("updateUsers").payload[0]["a"]["hasQuestion"] is True


@pytest.mark.asyncio
async def test_flags_for_unknown_participant_ignored(service, gateway):
    await service.join_room("a", {"room": "team", "name": "Ana"})
    gateway.clear()

    assert await service.break_request("stranger", {"room": "team", "requestBreak": True}) is False
    assert await service.question("a", {"room": "other", "hasQuestion": True}) is False
    assert gateway.room_events == []


@pytest.mark.asyncio
async def test_vibration_from_facilitator(service, gateway):
    """Test the facilitator can nudge one participant."""
    await service.join_room("sm", {"room": "team", "name": "Sam", "isMaster": True})
    await service.join_room("a", {"room": "team", "name": "Ana"})
    gateway.clear()

    assert await service.send_vibration("sm", {"room": "team", "targetSocketId": "a"}) is True

    assert len(gateway.direct_events) == 1
    event = gateway.direct_events[0]
    assert event.target == "a"
    assert event.event == "receiveVibration"
    assert event.payload[0] == {"from": "sm", "room": "team"}
    assert gateway.room_events == []


@pytest.mark.asyncio
async def test_vibration_from_non_facilitator_rejected(service, gateway):
    await service.join_room("sm", {"room": "team", "name": "Sam", "isMaster": True})
    await service.join_room("a", {"room": "team", "name": "Ana"})

    assert await service.send_vibration("a", {"room": "team", "targetSocketId": "sm"}) is False
    assert await service.send_vibration("sm", {"room": "nowhere", "targetSocketId": "a"}) is False
    assert gateway.direct_events == []


@pytest.mark.asyncio
async def test_pulse_detect_relays(service, gateway):
    await service.pulse_detect("a", "team")

    event = gateway.last("pulseDetected")
    assert event.target == "team"
    assert event.payload == ()
    assert len(service.registry) == 0
