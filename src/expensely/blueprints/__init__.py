"""Blueprint exports."""

from . import admin, analysis, auth, chat, expenses, overview

__all__ = [
    "admin",
    "analysis",
    "auth",
    "chat",
    "expenses",
    "overview",
]
