"""SQLModel table exports."""

from .expense import Expense
from .message import Message
from .user import User

__all__ = [
    "Expense",
    "Message",
    "User",
]
