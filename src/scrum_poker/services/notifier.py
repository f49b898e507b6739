"""
Feedback email notifier.

Forwards feedback to the team inbox through the Web3Forms submission API.
Sending is best effort: it runs after the HTTP response has been returned
and failures are only logged.
"""

from datetime import datetime
from typing import Optional
import logging

import httpx

from ..config import settings
from ..models.feedback import Feedback

logger = logging.getLogger(__name__)


class NotificationError(Exception):
    """Raised when a notification could not be delivered."""
    pass


def format_feedback_email(feedback: Feedback) -> str:
    """Build the plain-text email body for a feedback entry."""
    stars = "⭐" * feedback.rating
    try:
        when = datetime.fromisoformat(feedback.timestamp.replace("Z", "+00:00"))
        sent_at = when.strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    except ValueError:
        sent_at = feedback.timestamp

    return (
        "New Scrum Poker Feedback Received!\n"
        "\n"
        f"{stars} Rating: {feedback.rating} / 5 stars\n"
        "\n"
        f"📧 Contact Email: {feedback.email}\n"
        f"🏠 Room: {feedback.room}\n"
        f"🕐 Timestamp: {sent_at}\n"
        "\n"
        "💬 Message:\n"
        f"{feedback.message}\n"
        "\n"
        "---\n"
        "Sent from Scrum Poker Feedback System"
    )


class FeedbackNotifier:
    """
    Sends feedback notifications via Web3Forms.
    """

    def __init__(
        self,
        access_key: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the notifier.

        Args:
            access_key: Web3Forms access key; sending is disabled without one
            url: Submission endpoint
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.access_key = access_key if access_key is not None else settings.WEB3FORMS_KEY
        self.url = url or settings.WEB3FORMS_URL
        self.timeout = timeout or settings.NOTIFICATION_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.access_key)

    async def send(self, feedback: Feedback) -> None:
        """
        Submit a feedback email.

        Raises:
            NotificationError: If the request fails or Web3Forms rejects it
        """
        payload = {
            "access_key": self.access_key,
            "subject": f"Scrum Poker Feedback - {feedback.rating} ⭐ stars",
            "from_name": "Scrum Poker Feedback",
            "email": feedback.email,
            "message": format_feedback_email(feedback),
        }
        headers = {"Accept": "application/json"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=payload, headers=headers)
                result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise NotificationError(f"Web3Forms request failed: {e}") from e

        if not result.get("success"):
            raise NotificationError(f"Web3Forms error: {result.get('message', 'unknown error')}")

    async def notify(self, feedback: Feedback) -> bool:
        """
        Send a notification, logging instead of raising.

        Meant to run as a background task after the submission has been
        acknowledged.

        Returns:
            True if the email was sent
        """
        if not self.enabled:
            logger.info("WEB3FORMS_KEY not set - skipping email send")
            return False

        logger.info("Sending feedback email via Web3Forms...")
        try:
            await self.send(feedback)
        except NotificationError as e:
            logger.error(f"Error sending feedback email: {e}")
            return False

        logger.info("Feedback email sent successfully via Web3Forms")
        return True


# Global singleton instance
_notifier: Optional[FeedbackNotifier] = None


def get_feedback_notifier() -> FeedbackNotifier:
    """Get the global FeedbackNotifier instance."""
    global _notifier
    if _notifier is None:
        _notifier = FeedbackNotifier()
    return _notifier
