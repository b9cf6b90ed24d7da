"""
Todo API - Todo Models

Internal todo model for database operations.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
import uuid


def utcnow() -> datetime:
    """Get current UTC time, timezone-aware and at BSON (millisecond) precision."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


@dataclass
class Todo:
    """Todo entity for database storage."""

    id: str
    owner_id: str
    text: str
    completed: bool = False
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @classmethod
    def create(cls, owner_id: str, text: str) -> "Todo":
        """Create a new, not yet completed todo with generated ID."""
        now = utcnow()
        return cls(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            text=text,
            completed=False,
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict:
        """Convert todo to dictionary for MongoDB storage."""
        return {
            "_id": self.id,
            "owner_id": self.owner_id,
            "text": self.text,
            "completed": self.completed,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Todo":
        """Create todo from MongoDB document."""
        return cls(
            id=data["_id"],
            owner_id=data["owner_id"],
            text=data["text"],
            completed=data.get("completed", False),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
