"""Authentication and user management services."""

from __future__ import annotations

from typing import Callable, Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlalchemy import or_
from sqlmodel import Session, select

from ..logging_config import get_logger
from ..models.user import ADMIN_ROLE, USER_ROLE, User

SessionFactory = Callable[[], Session]

_hasher = PasswordHasher()
_ALLOWED_ROLES = {USER_ROLE, ADMIN_ROLE}

logger = get_logger("services.auth")


def _normalize_role(role: str) -> str:
    role = (role or USER_ROLE).strip().lower()
    if role not in _ALLOWED_ROLES:
        raise ValueError(f"Invalid role: {role}")
    return role


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def _verify(password_hash: str, password: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHash, VerificationError):
        return False


def list_users(session_factory: SessionFactory, *, search: Optional[str] = None) -> list[User]:
    """Return users ordered by creation time, optionally filtered by username/email."""

    statement = select(User)
    term = (search or "").strip()
    if term:
        statement = statement.where(
            or_(
                User.username.icontains(term, autoescape=True),
                User.email.icontains(term, autoescape=True),
            )
        )
    with session_factory() as session:
        users = list(session.exec(statement.order_by(User.created_at, User.id)).all())
        session.expunge_all()
    return users


def get_user(user_id: int, session_factory: SessionFactory) -> Optional[User]:
    with session_factory() as session:
        user = session.get(User, user_id)
        if user:
            session.expunge(user)
        return user


def get_user_by_email(email: str, session_factory: SessionFactory) -> Optional[User]:
    """Fetch a user by email (case-insensitive)."""
    with session_factory() as session:
        user = session.exec(select(User).where(User.email == _normalize_email(email))).first()
        if user:
            session.expunge(user)
        return user


def any_users_exist(session_factory: SessionFactory) -> bool:
    with session_factory() as session:
        return session.exec(select(User.id)).first() is not None


def create_user(
    *,
    username: str,
    email: str,
    password: str,
    role: str = USER_ROLE,
    session_factory: SessionFactory,
) -> User:
    """Create a new user with hashed password."""

    normalized_role = _normalize_role(role)
    username = (username or "").strip()
    email = _normalize_email(email)
    if not username:
        raise ValueError("Username is required")
    if not email:
        raise ValueError("Email is required")
    if not password:
        raise ValueError("Password cannot be empty")

    password_hash = hash_password(password)
    with session_factory() as session:
        existing = session.exec(select(User).where(User.email == email)).first()
        if existing:
            raise ValueError("User with this email already exists.")
        user = User(username=username, email=email, password_hash=password_hash, role=normalized_role)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)

    logger.info("User created", extra={"user_id": user.id, "role": normalized_role})
    return user


def register(*, username: str, email: str, password: str, session_factory: SessionFactory) -> User:
    """Self-service registration always yields a regular user."""

    return create_user(
        username=username,
        email=email,
        password=password,
        role=USER_ROLE,
        session_factory=session_factory,
    )


def authenticate(
    *,
    email: str,
    password: str,
    role: str,
    session_factory: SessionFactory,
) -> Optional[User]:
    """Return the user when email, password and requested role all match."""

    email = _normalize_email(email)
    if not email or not password:
        return None
    with session_factory() as session:
        user = session.exec(select(User).where(User.email == email)).first()
        if user is None or not user.is_active:
            return None
        if user.role != (role or "").strip().lower():
            return None
        if not _verify(user.password_hash, password):
            return None
        session.expunge(user)

    logger.info("User authenticated", extra={"user_id": user.id})
    return user


def update_profile(
    *,
    user_id: int,
    username: Optional[str] = None,
    email: Optional[str] = None,
    session_factory: SessionFactory,
) -> User:
    """Change display name and/or email; emails stay unique."""

    with session_factory() as session:
        user = session.get(User, user_id)
        if user is None:
            raise ValueError("User not found")
        if username is not None:
            username = username.strip()
            if not username:
                raise ValueError("Username is required")
            user.username = username
        if email is not None:
            email = _normalize_email(email)
            if not email:
                raise ValueError("Email is required")
            clash = session.exec(
                select(User).where(User.email == email, User.id != user_id)
            ).first()
            if clash:
                raise ValueError("User with this email already exists.")
            user.email = email
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


def change_password(
    *,
    user_id: int,
    current_password: str,
    new_password: str,
    session_factory: SessionFactory,
) -> User:
    """Replace the password after verifying the current one."""

    if not new_password:
        raise ValueError("Password cannot be empty")
    with session_factory() as session:
        user = session.get(User, user_id)
        if user is None:
            raise ValueError("User not found")
        if not _verify(user.password_hash, current_password):
            raise ValueError("Current password is incorrect")
        user.password_hash = hash_password(new_password)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


def set_role(*, user_id: int, role: str, session_factory: SessionFactory) -> User:
    """Update the role for a user."""

    normalized_role = _normalize_role(role)
    with session_factory() as session:
        user = session.get(User, user_id)
        if user is None:
            raise ValueError("User not found")
        user.role = normalized_role
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


def set_active(*, user_id: int, active: bool, session_factory: SessionFactory) -> User:
    """Activate or deactivate an account; inactive users cannot log in."""

    with session_factory() as session:
        user = session.get(User, user_id)
        if user is None:
            raise ValueError("User not found")
        user.is_active = bool(active)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user
