"""Data loader for the user dashboard."""

from __future__ import annotations

from datetime import date

from ...extensions import session_scope
from ...services import analytics
from ...services import expenses as expense_service


def load_overview_summary(*, user_id: int, today: date, currency_symbol: str, recent_limit: int = 5) -> dict:
    """Gather the dashboard cards: totals, recent entries and the prediction."""

    expenses = expense_service.list_expenses(
        user_id, session_factory=session_scope, newest_first=False
    )
    recent = sorted(expenses, key=lambda item: (item.spent_on, item.id or 0), reverse=True)
    weekly = analytics.weekly_expenses(expenses, today=today)
    week_total = sum(float(day["amount"]) for day in weekly)
    total = analytics.total_amount(expenses)

    return {
        "total": total,
        "formatted_total": analytics.format_currency(total, currency_symbol),
        "count": len(expenses),
        "week_total": week_total,
        "formatted_week_total": analytics.format_currency(week_total, currency_symbol),
        "top_category": analytics.top_category(expenses),
        "prediction": analytics.predict_next_day(expenses, today=today),
        "is_increasing": analytics.is_increasing(weekly),
        "daily_average": analytics.daily_average(weekly),
        "weekly": weekly,
        "recent": [expense.to_dict() for expense in recent[:recent_limit]],
    }
