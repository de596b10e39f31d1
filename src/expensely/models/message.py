"""Support chat messages."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar, Optional

from sqlmodel import Field, SQLModel


class Message(SQLModel, table=True):
    """A chat message; ``receiver_id`` of None marks a broadcast."""

    __tablename__: ClassVar[str] = "message"

    id: Optional[int] = Field(default=None, primary_key=True)
    sender_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    receiver_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)
    content: str = Field(nullable=False, max_length=2000)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
    is_read: bool = Field(default=False, nullable=False)

    @property
    def is_broadcast(self) -> bool:
        return self.receiver_id is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "sender_id": self.sender_id,
            "receiver_id": self.receiver_id,
            "content": self.content,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "is_read": self.is_read,
        }
