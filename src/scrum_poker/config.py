"""
Configuration management for the Scrum Poker backend.

Uses Pydantic settings for environment variable support.
"""

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional
from pathlib import Path


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Scrum Poker"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Static client bundle (index.html, js, css). Not mounted when unset.
    STATIC_DIR: Optional[str] = None

    # WebSocket
    WEBSOCKET_PING_INTERVAL: int = 25
    WEBSOCKET_PING_TIMEOUT: int = 60

    # Rooms
    AWAY_GRACE_PERIOD_SECONDS: float = Field(
        default=5 * 60,
        description="Seconds a disconnected participant stays listed as away before removal"
    )
    DEFAULT_AVATAR: str = "👤"
    COFFEE_VOTE: str = "☕"

    # Feedback notifications (Web3Forms)
    WEB3FORMS_KEY: Optional[str] = None
    WEB3FORMS_URL: str = "https://api.web3forms.com/submit"
    NOTIFICATION_TIMEOUT_SECONDS: float = 10.0

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def email_notifications_enabled(self) -> bool:
        """Whether feedback is forwarded by email."""
        return bool(self.WEB3FORMS_KEY)

    @property
    def static_path(self) -> Optional[Path]:
        """Get the static directory as a resolved Path, if configured."""
        if not self.STATIC_DIR:
            return None
        return Path(self.STATIC_DIR).resolve()


# Global settings instance
settings = Settings()
