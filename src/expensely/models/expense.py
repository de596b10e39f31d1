"""SQLModel definition for logged expenses."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, ClassVar, Optional

from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Expense(SQLModel, table=True):
    """A single expense owned by one user."""

    __tablename__: ClassVar[str] = "expense"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    amount: float = Field(nullable=False, description="Always positive")
    category: str = Field(nullable=False, index=True, max_length=64)
    description: str = Field(default="", max_length=255)
    # Serialized as "date"; the attribute name avoids shadowing ``datetime.date``.
    spent_on: date = Field(nullable=False, index=True)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "amount": self.amount,
            "category": self.category,
            "description": self.description,
            "date": self.spent_on.isoformat(),
        }
