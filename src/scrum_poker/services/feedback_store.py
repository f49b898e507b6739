"""
Feedback store.

Keeps submitted feedback in memory; entries are lost on restart.
"""

from typing import List, Optional
import logging

from ..models.feedback import Feedback
from ..schemas.feedback import FeedbackCreate

logger = logging.getLogger(__name__)


class FeedbackStore:
    """Append-only, in-process list of feedback entries."""

    def __init__(self):
        self._entries: List[Feedback] = []

    def add(self, data: FeedbackCreate) -> Feedback:
        """
        Store a new feedback entry.

        Args:
            data: Validated submission

        Returns:
            The stored entry with its sequential id
        """
        entry = Feedback(
            id=len(self._entries) + 1,
            rating=data.rating,
            email=data.email,
            message=data.message,
            timestamp=data.timestamp,
            room=data.room,
        )
        self._entries.append(entry)
        logger.info(f"Feedback stored (Total: {len(self._entries)} feedbacks)")
        return entry

    def list_all(self) -> List[Feedback]:
        """Get all entries in submission order."""
        return list(self._entries)

    @property
    def total(self) -> int:
        return len(self._entries)

    @property
    def average_rating(self) -> Optional[float]:
        """Mean rating, or None when nothing has been submitted."""
        if not self._entries:
            return None
        return sum(entry.rating for entry in self._entries) / len(self._entries)


# Global singleton instance
_feedback_store: Optional[FeedbackStore] = None


def get_feedback_store() -> FeedbackStore:
    """Get the global FeedbackStore instance."""
    global _feedback_store
    if _feedback_store is None:
        _feedback_store = FeedbackStore()
    return _feedback_store
