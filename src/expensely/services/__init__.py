"""Service module exports."""

from . import (
    admin_stats,
    analytics,
    auth,
    chat,
    expenses,
    export_csv,
    query_log,
    reports,
    seed,
)

__all__ = [
    "admin_stats",
    "analytics",
    "auth",
    "chat",
    "expenses",
    "export_csv",
    "query_log",
    "reports",
    "seed",
]
