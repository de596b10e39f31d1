"""Usage figures for the admin dashboard."""

from __future__ import annotations

from datetime import date
from typing import Callable, Optional

from sqlmodel import Session

from . import analytics, auth, chat, expenses

SessionFactory = Callable[[], Session]


def user_rows(session_factory: SessionFactory, *, search: Optional[str] = None) -> list[dict]:
    """User table rows: public fields plus each user's expense count."""

    counts = expenses.count_by_user(session_factory=session_factory)
    rows = []
    for user in auth.list_users(session_factory, search=search):
        row = user.to_dict()
        row["expenses"] = counts.get(user.id, 0)
        rows.append(row)
    return rows


def dashboard_stats(*, admin_id: int, session_factory: SessionFactory, today: date) -> dict:
    """Headline numbers for the admin overview."""

    rows = user_rows(session_factory)
    all_expenses = expenses.all_expenses(session_factory=session_factory)
    top_user = max(rows, key=lambda row: row["expenses"], default=None)

    users = auth.list_users(session_factory)
    return {
        "total_users": len(rows),
        "active_users": sum(1 for row in rows if row["status"] == "active"),
        "total_expenses": len(all_expenses),
        "unread_messages": chat.unread_count(admin_id, session_factory=session_factory),
        "top_user": (
            {"username": top_user["username"], "expenses": top_user["expenses"]}
            if top_user and top_user["expenses"]
            else None
        ),
        "top_category": analytics.top_category(all_expenses),
        "category_totals": analytics.category_totals(all_expenses),
        "registrations": analytics.registrations_by_day(
            (user.created_at for user in users), today=today
        ),
    }


def support_inbox(*, session_factory: SessionFactory) -> list[dict]:
    """Conversations grouped per user with unread counts for admins."""

    users = {user.id: user for user in auth.list_users(session_factory)}
    admin_ids = [user_id for user_id, user in users.items() if user.is_admin]
    grouped = chat.group_by_user(
        chat.all_messages(session_factory=session_factory), admin_ids=admin_ids
    )

    inbox = []
    for user_id, messages in grouped.items():
        user = users.get(user_id)
        inbox.append(
            {
                "user_id": user_id,
                "username": user.username if user else f"User #{user_id}",
                "unread": sum(
                    1 for m in messages if not m.is_read and m.receiver_id in admin_ids
                ),
                "messages": [m.to_dict() for m in messages],
            }
        )
    return inbox
