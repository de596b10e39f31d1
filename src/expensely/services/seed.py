"""Demo data seeding for Expensely."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional

from sqlmodel import Session, select

from ..logging_config import get_logger
from ..models import Expense, Message, User
from .analytics import trailing_week
from .auth import hash_password

SessionFactory = Callable[[], Session]

logger = get_logger("services.seed")

DEMO_USERS = (
    {"username": "admin", "email": "admin@example.com", "password": "admin@123", "role": "admin"},
    {"username": "user1", "email": "user1@example.com", "password": "password123", "role": "user"},
)

# (owner email, amount, category, description)
DEMO_EXPENSES = (
    ("user1@example.com", 1500.0, "Food", "Dinner with friends"),
    ("user1@example.com", 500.0, "Transportation", "Taxi fare"),
    ("user1@example.com", 3000.0, "Shopping", "New clothes"),
    ("user1@example.com", 1000.0, "Entertainment", "Movie tickets"),
    ("user1@example.com", 2000.0, "Groceries", "Weekly groceries"),
    ("admin@example.com", 2500.0, "Office supplies", "New keyboard"),
    ("admin@example.com", 1800.0, "Food", "Team lunch"),
)

# (sender email, receiver email or None for broadcast, content, is_read, hours before now)
DEMO_MESSAGES = (
    ("admin@example.com", None,
     "Welcome to the new expense management system! Let us know if you have any questions.",
     False, 26),
    ("user1@example.com", "admin@example.com", "How do I add a new expense?", True, 3),
    ("admin@example.com", "user1@example.com",
     'You can add a new expense by clicking on the "Add Expense" button in the dashboard.',
     False, 2),
    ("user1@example.com", "admin@example.com", "How do I view my expense trends?", True, 1),
)


def run_demo_seed(*, session_factory: SessionFactory, today: Optional[date] = None) -> bool:
    """Seed demo users, expenses and messages.

    Expense dates cycle through the trailing week ending ``today`` so the
    weekly views always have data. Demo users are reused when their email is
    already registered. Returns False (and writes nothing) when any expense
    already exists.
    """

    today = today or date.today()
    week = trailing_week(today)
    now = datetime.now(timezone.utc)

    with session_factory() as session:
        if session.exec(select(Expense.id)).first() is not None:
            logger.info("Demo seed skipped; expenses already exist")
            return False

        users: dict[str, User] = {}
        for payload in DEMO_USERS:
            existing = session.exec(select(User).where(User.email == payload["email"])).first()
            if existing:
                users[existing.email] = existing
                continue
            user = User(
                username=payload["username"],
                email=payload["email"],
                password_hash=hash_password(payload["password"]),
                role=payload["role"],
            )
            session.add(user)
            session.flush()
            users[user.email] = user

        for index, (owner, amount, category, description) in enumerate(DEMO_EXPENSES):
            session.add(
                Expense(
                    user_id=users[owner].id,
                    amount=amount,
                    category=category,
                    description=description,
                    spent_on=week[index % len(week)],
                )
            )

        for sender, receiver, content, is_read, hours_ago in DEMO_MESSAGES:
            session.add(
                Message(
                    sender_id=users[sender].id,
                    receiver_id=users[receiver].id if receiver else None,
                    content=content,
                    is_read=is_read,
                    timestamp=now - timedelta(hours=hours_ago),
                )
            )
        session.commit()

    logger.info(
        "Demo data seeded",
        extra={"users": len(DEMO_USERS), "expenses": len(DEMO_EXPENSES), "messages": len(DEMO_MESSAGES)},
    )
    return True
