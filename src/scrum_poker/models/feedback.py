"""
Feedback entry model.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass
class Feedback:
    """A single piece of user feedback kept in memory."""
    id: int
    rating: int
    email: str
    message: str
    timestamp: str
    room: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
