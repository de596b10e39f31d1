"""Pytest configuration and shared fixtures for Expensely tests.

Provides isolated SQLite databases, a session factory matching the services'
``Callable[[], Session]`` contract, data factories, and Flask client fixtures
that run against a temp-file database.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine, select

from expensely.models import Expense, Message, User
from expensely.services import query_log
from expensely.services.auth import create_user

# Fixed "today" for anything that depends on the trailing week.
TODAY = date(2024, 6, 19)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for a single test."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Return a factory producing sessions usable as context managers."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user(db_session) -> User:
    """Create a default user for scoping data."""

    existing = db_session.exec(select(User).where(User.email == "tester@example.com")).first()
    if existing:
        return existing
    u = User(username="tester", email="tester@example.com", password_hash="dummy-hash", role="user")
    db_session.add(u)
    db_session.commit()
    db_session.refresh(u)
    return u


@pytest.fixture
def user_factory(db_session):
    """Factory for users with placeholder password hashes."""

    def _create_user(
        username: str,
        email: str | None = None,
        role: str = "user",
        is_active: bool = True,
    ) -> User:
        u = User(
            username=username,
            email=email or f"{username}@example.com",
            password_hash="dummy-hash",
            role=role,
            is_active=is_active,
        )
        db_session.add(u)
        db_session.commit()
        db_session.refresh(u)
        return u

    return _create_user


@pytest.fixture
def expense_factory(db_session, user):
    """Factory for creating test expenses.

    Returns:
        Callable: Function that creates and persists Expense instances
    """

    def _create_expense(
        amount: float,
        category: str = "Food",
        description: str = "Test expense",
        spent_on: date | None = None,
        owner: User | None = None,
    ) -> Expense:
        owner = owner or user
        expense = Expense(
            user_id=owner.id,
            amount=amount,
            category=category,
            description=description,
            spent_on=spent_on or TODAY,
        )
        db_session.add(expense)
        db_session.commit()
        db_session.refresh(expense)
        return expense

    return _create_expense


@pytest.fixture
def message_factory(db_session):
    """Factory for chat messages."""

    def _create_message(
        sender: User,
        content: str = "Hello",
        receiver: User | None = None,
        is_read: bool = False,
    ) -> Message:
        message = Message(
            sender_id=sender.id,
            receiver_id=receiver.id if receiver else None,
            content=content,
            is_read=is_read,
        )
        db_session.add(message)
        db_session.commit()
        db_session.refresh(message)
        return message

    return _create_message


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Application wired to a temp-file database with two known accounts."""

    from expensely import create_app
    from expensely.extensions import session_scope

    monkeypatch.setenv("EXPENSELY_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("EXPENSELY_DATABASE_URL", f"sqlite:///{tmp_path / 'app.db'}")
    query_log.clear_queries()

    app = create_app("testing")
    app.config.update(TESTING=True, EXPENSELY_TODAY=TODAY)

    app.test_accounts = {
        "admin": create_user(
            username="admin",
            email="admin@example.com",
            password="admin@123",
            role="admin",
            session_factory=session_scope,
        ),
        "user": create_user(
            username="user1",
            email="user1@example.com",
            password="password123",
            session_factory=session_scope,
        ),
    }
    return app


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


def login(client, email: str, password: str, role: str = "user"):
    return client.post("/auth/login", json={"email": email, "password": password, "role": role})


@pytest.fixture()
def user_client(client):
    response = login(client, "user1@example.com", "password123")
    assert response.status_code == 200
    return client


@pytest.fixture()
def admin_client(client):
    response = login(client, "admin@example.com", "admin@123", role="admin")
    assert response.status_code == 200
    return client
