"""
Pydantic schemas for the Feedback API.
"""

from pydantic import BaseModel, Field
from typing import List, Optional


class FeedbackCreate(BaseModel):
    """Request schema for submitting feedback."""

    rating: int = Field(..., ge=1, le=5, description="Star rating")
    email: str = Field(default="", max_length=320, description="Contact email")
    message: str = Field(default="", description="Free-form feedback text")
    timestamp: str = Field(..., description="Client-side ISO timestamp")
    room: Optional[str] = Field(None, description="Room the user was in")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "rating": 5,
                    "email": "ana@example.com",
                    "message": "Reveal animation is great",
                    "timestamp": "2024-05-02T10:32:00Z",
                    "room": "team-rocket",
                }
            ]
        }
    }


class FeedbackResponse(BaseModel):
    """Response schema for a single stored feedback entry."""

    id: int
    rating: int
    email: str
    message: str
    timestamp: str
    room: Optional[str] = None


class FeedbackSubmitted(BaseModel):
    """Acknowledgement returned after submission."""

    success: bool = True
    message: str = "Feedback received and stored"


class FeedbackList(BaseModel):
    """Response schema for listing feedback."""

    success: bool = True
    total: int = Field(..., description="Total number of feedback entries")
    feedbacks: List[FeedbackResponse] = Field(..., description="All stored feedback")
