"""User model supporting authentication and roles."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar, Optional

from sqlmodel import Field, SQLModel

USER_ROLE = "user"
ADMIN_ROLE = "admin"


class User(SQLModel, table=True):
    """Application user with role and credentials."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(nullable=False, index=True, max_length=64)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    password_hash: str = Field(nullable=False, max_length=255)
    role: str = Field(default=USER_ROLE, nullable=False, max_length=16, index=True)
    is_active: bool = Field(default=True, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    @property
    def status(self) -> str:
        return "active" if self.is_active else "inactive"

    def to_dict(self) -> dict[str, Any]:
        """Public projection; the password hash never leaves the model."""

        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
