"""Expense aggregation and trend helpers.

Everything here is pure: callers pass the owner's expenses (any objects with
``amount``, ``category`` and ``spent_on``) and an explicit ``today`` so results
are deterministic under test.
"""

from __future__ import annotations

import math
import random
from datetime import date, datetime, timedelta
from typing import Iterable, Mapping, Optional, Protocol, Sequence

WEEK_DAYS = 7
PREDICTION_WINDOW = 3
PREDICTION_JITTER = (0.9, 1.1)


class ExpenseLike(Protocol):
    amount: float
    category: str
    spent_on: date


def total_amount(expenses: Iterable[ExpenseLike]) -> float:
    """Return the sum of all expense amounts."""

    return sum((float(expense.amount) for expense in expenses), 0.0)


def category_totals(expenses: Iterable[ExpenseLike]) -> list[dict[str, object]]:
    """Group-by-sum on category, preserving first-seen category order."""

    totals: dict[str, float] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, 0.0) + float(expense.amount)
    return [{"category": category, "amount": amount} for category, amount in totals.items()]


def top_category(expenses: Iterable[ExpenseLike]) -> Optional[dict[str, object]]:
    """Return the highest-spend category entry, or None when there is no spend."""

    totals = category_totals(expenses)
    if not totals:
        return None
    # max() keeps the first maximal entry, so ties resolve by insertion order.
    return max(totals, key=lambda item: item["amount"])


def trailing_week(today: date) -> list[date]:
    """Return the seven calendar days ending at ``today``, oldest first."""

    return [today - timedelta(days=offset) for offset in range(WEEK_DAYS - 1, -1, -1)]


def weekly_expenses(expenses: Iterable[ExpenseLike], *, today: date) -> list[dict[str, object]]:
    """Per-day totals for the trailing week; days without spend report 0."""

    daily: dict[date, float] = {day: 0.0 for day in trailing_week(today)}
    for expense in expenses:
        if expense.spent_on in daily:
            daily[expense.spent_on] += float(expense.amount)
    return [{"date": day.isoformat(), "amount": amount} for day, amount in daily.items()]


def predict_next_day(
    expenses: Sequence[ExpenseLike],
    *,
    today: date,
    rng: Optional[random.Random] = None,
) -> int:
    """Naive next-day spend: trailing 3-day average with +/-10% jitter, rounded half-up.

    Returns 0 when ``expenses`` is empty. The jitter makes this decorative
    rather than a forecast.
    """

    if not expenses:
        return 0

    recent_days = weekly_expenses(expenses, today=today)[-PREDICTION_WINDOW:]
    average = sum(float(day["amount"]) for day in recent_days) / len(recent_days)

    low, high = PREDICTION_JITTER
    factor = (rng or random).uniform(low, high)
    # Half-up: 2.5 -> 3.
    return math.floor(average * factor + 0.5)


def daily_average(weekly: Sequence[Mapping[str, object]]) -> float:
    """Mean spend per day over a weekly rollup, quiet days included."""

    if not weekly:
        return 0.0
    return sum(float(day["amount"]) for day in weekly) / len(weekly)


def busiest_day(weekly: Sequence[Mapping[str, object]]) -> Optional[Mapping[str, object]]:
    """The rollup entry with the highest spend; None when nothing was spent.

    Ties keep the earliest day.
    """

    best: Optional[Mapping[str, object]] = None
    for day in weekly:
        if float(day["amount"]) > (float(best["amount"]) if best else 0.0):
            best = day
    return best


def trend(weekly: Sequence[Mapping[str, object]], prediction: int) -> list[dict[str, object]]:
    """The last three rolled-up days followed by a ``Tomorrow`` prediction point."""

    points = [dict(day) for day in weekly[-PREDICTION_WINDOW:]]
    points.append({"date": "Tomorrow", "amount": prediction})
    return points


def prediction_direction(trend_points: Sequence[Mapping[str, object]]) -> Optional[str]:
    """``"increase"`` when tomorrow's point beats today's, otherwise ``"decrease"``."""

    if len(trend_points) < 2:
        return None
    tomorrow, latest = trend_points[-1], trend_points[-2]
    return "increase" if float(tomorrow["amount"]) > float(latest["amount"]) else "decrease"


def is_increasing(weekly: Sequence[Mapping[str, object]]) -> bool:
    """True when the last day of the rollup outspent the day before it."""

    return len(weekly) >= 2 and float(weekly[-1]["amount"]) > float(weekly[-2]["amount"])


def format_currency(value: float, symbol: str = "₹") -> str:
    """Render ``value`` for display, e.g. ``₹ 1,500.00``."""

    prefix = "-" if value < 0 else ""
    return f"{prefix}{symbol} {abs(value):,.2f}"


def registrations_by_day(created: Iterable[date], *, today: date) -> list[dict[str, object]]:
    """Count timestamps (``date`` or ``datetime``) per day over the trailing week."""

    counts: dict[date, int] = {day: 0 for day in trailing_week(today)}
    for stamp in created:
        day = stamp.date() if isinstance(stamp, datetime) else stamp
        if day in counts:
            counts[day] += 1
    return [{"date": day.isoformat(), "count": count} for day, count in counts.items()]


def summarize(
    expenses: Sequence[ExpenseLike],
    *,
    today: date,
    currency_symbol: str = "₹",
    rng: Optional[random.Random] = None,
) -> Mapping[str, object]:
    """Bundle the analysis figures served to the dashboard and analysis views."""

    total = total_amount(expenses)
    weekly = weekly_expenses(expenses, today=today)
    prediction = predict_next_day(expenses, today=today, rng=rng)
    average = daily_average(weekly)
    trend_points = trend(weekly, prediction)
    return {
        "total": total,
        "formatted_total": format_currency(total, currency_symbol),
        "count": len(expenses),
        "category_totals": category_totals(expenses),
        "top_category": top_category(expenses),
        "weekly": weekly,
        "prediction": prediction,
        "daily_average": average,
        "formatted_daily_average": format_currency(average, currency_symbol),
        "busiest_day": busiest_day(weekly),
        "trend": trend_points,
        "prediction_direction": prediction_direction(trend_points),
        "is_increasing": is_increasing(weekly),
    }
