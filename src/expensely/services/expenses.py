"""Expense persistence operations scoped to the owning user."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Callable, Optional

from sqlalchemy import String, cast, func, or_
from sqlmodel import Session, select

from ..logging_config import get_logger
from ..models.expense import Expense

SessionFactory = Callable[[], Session]

logger = get_logger("services.expenses")

_UPDATABLE_FIELDS = ("amount", "category", "description", "spent_on")


def _search_clause(term: str):
    # autoescape: "%" and "_" in the term match literally.
    return or_(
        Expense.description.icontains(term, autoescape=True),
        Expense.category.icontains(term, autoescape=True),
        cast(Expense.amount, String).contains(term, autoescape=True),
    )


def list_expenses(
    user_id: int,
    *,
    session_factory: SessionFactory,
    search: Optional[str] = None,
    newest_first: bool = True,
) -> list[Expense]:
    """Return the owner's expenses.

    ``newest_first`` orders by date for display; otherwise rows come back in
    insertion order, which the category aggregation relies on.
    """

    statement = select(Expense).where(Expense.user_id == user_id)
    term = (search or "").strip()
    if term:
        statement = statement.where(_search_clause(term))
    if newest_first:
        statement = statement.order_by(Expense.spent_on.desc(), Expense.id.desc())
    else:
        statement = statement.order_by(Expense.id)

    with session_factory() as session:
        expenses = list(session.exec(statement).all())
        session.expunge_all()
    return expenses


def get_expense(expense_id: int, user_id: int, *, session_factory: SessionFactory) -> Optional[Expense]:
    """Fetch one expense when it belongs to ``user_id``."""

    with session_factory() as session:
        expense = session.exec(
            select(Expense).where(Expense.id == expense_id, Expense.user_id == user_id)
        ).first()
        if expense is not None:
            session.expunge(expense)
        return expense


def add_expense(
    *,
    user_id: int,
    amount: float,
    category: str,
    description: str,
    spent_on: date,
    session_factory: SessionFactory,
) -> Expense:
    """Insert an expense and return it with its generated id."""

    if amount <= 0:
        raise ValueError("Amount must be greater than 0")
    category = category.strip()
    if not category:
        raise ValueError("Category is required")

    with session_factory() as session:
        expense = Expense(
            user_id=user_id,
            amount=float(amount),
            category=category,
            description=description.strip(),
            spent_on=spent_on,
        )
        session.add(expense)
        session.commit()
        session.refresh(expense)
        session.expunge(expense)

    logger.info("Expense added", extra={"expense_id": expense.id, "user_id": user_id})
    return expense


def update_expense(
    expense_id: int,
    user_id: int,
    *,
    session_factory: SessionFactory,
    **fields: Any,
) -> Optional[Expense]:
    """Apply a partial update; returns None when the owner has no such expense."""

    unknown = set(fields) - set(_UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
    if "amount" in fields and fields["amount"] is not None and fields["amount"] <= 0:
        raise ValueError("Amount must be greater than 0")

    with session_factory() as session:
        expense = session.exec(
            select(Expense).where(Expense.id == expense_id, Expense.user_id == user_id)
        ).first()
        if expense is None:
            return None

        for key, value in fields.items():
            if value is None:
                continue
            setattr(expense, key, value.strip() if isinstance(value, str) else value)
        expense.updated_at = datetime.now(timezone.utc)
        session.add(expense)
        session.commit()
        session.refresh(expense)
        session.expunge(expense)

    logger.info("Expense updated", extra={"expense_id": expense_id, "user_id": user_id})
    return expense


def delete_expense(expense_id: int, user_id: int, *, session_factory: SessionFactory) -> bool:
    """Delete an owned expense; unknown ids are a no-op returning False."""

    with session_factory() as session:
        expense = session.exec(
            select(Expense).where(Expense.id == expense_id, Expense.user_id == user_id)
        ).first()
        if expense is None:
            return False
        session.delete(expense)
        session.commit()

    logger.info("Expense deleted", extra={"expense_id": expense_id, "user_id": user_id})
    return True


def count_by_user(*, session_factory: SessionFactory) -> dict[int, int]:
    """Return ``{user_id: expense_count}`` for users with at least one expense."""

    with session_factory() as session:
        rows = session.exec(
            select(Expense.user_id, func.count(Expense.id)).group_by(Expense.user_id)
        ).all()
    return {user_id: int(count) for user_id, count in rows}


def count_all(*, session_factory: SessionFactory) -> int:
    with session_factory() as session:
        total = session.exec(select(func.count()).select_from(Expense)).one()
    return int(total or 0)


def all_expenses(*, session_factory: SessionFactory) -> list[Expense]:
    """Every expense in insertion order, for system-wide admin figures."""

    with session_factory() as session:
        expenses = list(session.exec(select(Expense).order_by(Expense.id)).all())
        session.expunge_all()
    return expenses
