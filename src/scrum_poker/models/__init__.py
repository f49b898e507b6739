"""
In-memory domain models.
"""

from .room import Participant, Room
from .feedback import Feedback

__all__ = [
    "Participant",
    "Room",
    "Feedback",
]
