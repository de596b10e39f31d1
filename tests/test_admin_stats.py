"""Admin dashboard figures and support inbox."""

from __future__ import annotations

from datetime import datetime, timezone

from expensely.services import admin_stats


def _utc_today():
    return datetime.now(timezone.utc).date()


def test_user_rows_include_expense_counts(session_factory, user, user_factory, expense_factory):
    idle = user_factory("idle", is_active=False)
    expense_factory(10)
    expense_factory(20)

    rows = {row["username"]: row for row in admin_stats.user_rows(session_factory)}

    assert rows["tester"]["expenses"] == 2
    assert rows["idle"]["expenses"] == 0
    assert rows["idle"]["status"] == "inactive"
    assert set(rows["tester"]) == {"id", "username", "email", "role", "status", "created_at", "expenses"}
    assert [r["id"] for r in admin_stats.user_rows(session_factory, search="idl")] == [idle.id]


def test_dashboard_stats(session_factory, user, user_factory, expense_factory, message_factory):
    admin = user_factory("boss", role="admin")
    user_factory("idle", is_active=False)
    expense_factory(1500, "Food")
    expense_factory(3000, "Shopping")
    expense_factory(1800, "Food", owner=admin)
    message_factory(user, "Help", receiver=admin)
    message_factory(user, "Still there?", receiver=admin, is_read=True)

    stats = admin_stats.dashboard_stats(
        admin_id=admin.id, session_factory=session_factory, today=_utc_today()
    )

    assert stats["total_users"] == 3
    assert stats["active_users"] == 2
    assert stats["total_expenses"] == 3
    assert stats["unread_messages"] == 1
    assert stats["top_user"] == {"username": "tester", "expenses": 2}
    assert stats["top_category"] == {"category": "Food", "amount": 3300.0}
    assert stats["category_totals"] == [
        {"category": "Food", "amount": 3300.0},
        {"category": "Shopping", "amount": 3000.0},
    ]
    assert len(stats["registrations"]) == 7
    assert stats["registrations"][-1] == {"date": _utc_today().isoformat(), "count": 3}


def test_dashboard_stats_empty(session_factory, user_factory):
    admin = user_factory("boss", role="admin")

    stats = admin_stats.dashboard_stats(admin_id=admin.id, session_factory=session_factory, today=_utc_today())

    assert stats["total_expenses"] == 0
    assert stats["top_user"] is None
    assert stats["top_category"] is None


def test_support_inbox_groups_per_user(session_factory, user, user_factory, message_factory):
    admin = user_factory("boss", role="admin")
    message_factory(admin, "Welcome!")
    message_factory(user, "Question", receiver=admin)
    message_factory(admin, "Answer", receiver=user)
    message_factory(user, "Thanks", receiver=admin, is_read=True)

    inbox = admin_stats.support_inbox(session_factory=session_factory)

    assert len(inbox) == 1
    thread = inbox[0]
    assert thread["user_id"] == user.id
    assert thread["username"] == "tester"
    assert thread["unread"] == 1
    assert [m["content"] for m in thread["messages"]] == ["Question", "Answer", "Thanks"]
