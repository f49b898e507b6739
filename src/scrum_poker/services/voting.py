"""
Voting engine.

Mutates vote state for a room and computes the statistics shown on reveal.
"""

from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional
import logging
import math
import re

from ..models.room import Room
from ..schemas.events import ServerEvent, VoteStatistics
from .gateway import BroadcastGateway

logger = logging.getLogger(__name__)

PLACEHOLDER = "-"
COFFEE_VOTE = "☕"

# Decimal notation only; hex and binary literals are not card values
_NUMERIC_VOTE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def parse_vote(vote: Optional[str]) -> Optional[float]:
    """
    Parse a stored vote as a finite number.

    Returns:
        The numeric value, or None for empty, non-numeric or infinite votes
    """
    if vote is None:
        return None
    text = vote.strip()
    if not _NUMERIC_VOTE.match(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return value


def format_vote_value(value: float) -> str:
    """Render a numeric vote the way it is shown in the mode list ("2", "0.5")."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _round_half_up(value: float, places: int = 0) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    return Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def qualifying_votes(room: Room, coffee_vote: str = COFFEE_VOTE) -> List[float]:
    """
    Collect the votes that count towards the statistics.

    A vote qualifies when it is numeric and present, its owner is not away
    and is not the facilitator, and it is not the coffee card.
    """
    values: List[float] = []
    for participant in room.participants.values():
        if participant.is_away or participant.is_facilitator:
            continue
        if participant.vote is None or participant.vote == "" or participant.vote == coffee_vote:
            continue
        value = parse_vote(participant.vote)
        if value is not None:
            values.append(value)
    return values


def compute_statistics(votes: Iterable[float]) -> VoteStatistics:
    """
    Compute average, mode and consensus for a list of numeric votes.

    Args:
        votes: Qualifying votes in participant order

    Returns:
        VoteStatistics, with every field set to '-' when there are no votes
    """
    values = [float(vote) for vote in votes]
    if not values:
        return VoteStatistics(average=PLACEHOLDER, mode=PLACEHOLDER, consensus=PLACEHOLDER)

    average = _round_half_up(sum(values) / len(values), 1)

    # Counter keeps first-occurrence order, which decides how ties are listed
    counts = Counter(values)
    max_count = max(counts.values())
    most_common = [format_vote_value(value) for value, count in counts.items() if count == max_count]

    consensus = _round_half_up(max_count / len(values) * 100)

    return VoteStatistics(
        average=f"{average:.1f}",
        mode=", ".join(most_common),
        consensus=f"{consensus}%",
    )


class VotingEngine:
    """
    Applies vote changes to rooms and broadcasts the outcome.
    """

    def __init__(self, gateway: BroadcastGateway, coffee_vote: str = COFFEE_VOTE):
        """
        Initialize the voting engine.

        Args:
            gateway: Gateway used to push room updates
            coffee_vote: Card value meaning "I need a break", never counted
        """
        self.gateway = gateway
        self.coffee_vote = coffee_vote

    async def cast_vote(self, room: Optional[Room], connection_id: str, vote: str) -> bool:
        """
        Record a participant's vote.

        Voting after a reveal hides the votes again (without discarding
        anyone's vote) and sends ``hideVotes`` instead of ``updateUsers``.

        Returns:
            True if the vote was recorded
        """
        if room is None or connection_id not in room.participants:
            return False

        room.participants[connection_id].vote = vote

        if room.votes_revealed:
            room.votes_revealed = False
            await self.gateway.broadcast_to_room(
                room.name, ServerEvent.HIDE_VOTES, room.users_payload()
            )
        else:
            await self.gateway.broadcast_to_room(
                room.name, ServerEvent.UPDATE_USERS, room.users_payload()
            )
        return True

    async def reveal_votes(self, room: Optional[Room], requester_id: str) -> Optional[VoteStatistics]:
        """
        Reveal the votes and broadcast statistics.

        Only the room's facilitator may reveal.

        Returns:
            The computed statistics, or None if nothing was revealed
        """
        if room is None:
            return None
        if requester_id != room.facilitator_connection_id:
            logger.warning(f"Unauthorized reveal attempt by {requester_id} in room {room.name}")
            return None

        room.votes_revealed = True
        votes = qualifying_votes(room, self.coffee_vote)
        statistics = compute_statistics(votes)

        await self.gateway.broadcast_to_room(
            room.name,
            ServerEvent.UPDATE_VOTES,
            room.users_payload(),
            len(votes),
            statistics.to_payload(),
        )
        logger.info(f"Votes revealed in room {room.name}: {len(votes)} counted")
        return statistics

    async def reset_votes(self, room: Optional[Room]) -> bool:
        """Clear every vote, hide the results and broadcast ``votesReset``."""
        if room is None:
            return False

        room.votes_revealed = False
        room.clear_votes()
        await self.gateway.broadcast_to_room(
            room.name, ServerEvent.VOTES_RESET, room.users_payload()
        )
        return True

    async def clear_votes_silently(self, room: Optional[Room]) -> bool:
        """
        Clear every vote without touching the reveal flag.

        Broadcasts under the short ``a`` event, which clients treat
        differently from a reset.
        """
        if room is None:
            return False

        room.clear_votes()
        await self.gateway.broadcast_to_room(
            room.name, ServerEvent.VOTES_CLEARED, room.users_payload()
        )
        return True
