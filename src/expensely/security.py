"""Session-backed login state and route guards."""

from __future__ import annotations

from functools import wraps
from typing import Callable, Optional, TypeVar

from flask import Flask, g, session
from werkzeug.exceptions import Forbidden, Unauthorized

from .extensions import session_scope
from .models.user import User
from .services import auth as auth_service

F = TypeVar("F", bound=Callable)

_SESSION_KEY = "user_id"


def login_user(user: User) -> None:
    session.clear()
    session[_SESSION_KEY] = user.id
    g.user = user


def logout_user() -> None:
    session.clear()
    g.user = None


def current_user() -> Optional[User]:
    return g.get("user")


def _load_logged_in_user() -> None:
    user_id = session.get(_SESSION_KEY)
    if user_id is None:
        g.user = None
        return
    user = auth_service.get_user(user_id, session_scope)
    # Deactivated or deleted accounts drop out of their session.
    if user is None or not user.is_active:
        session.pop(_SESSION_KEY, None)
        user = None
    g.user = user


def login_required(view: F) -> F:
    @wraps(view)
    def wrapped_view(*args, **kwargs):
        if g.get("user") is None:
            raise Unauthorized("You must be logged in.")
        return view(*args, **kwargs)

    return wrapped_view  # type: ignore[return-value]


def admin_required(view: F) -> F:
    @wraps(view)
    def wrapped_view(*args, **kwargs):
        user = g.get("user")
        if user is None:
            raise Unauthorized("You must be logged in.")
        if not user.is_admin:
            raise Forbidden("You do not have permission to access the admin dashboard.")
        return view(*args, **kwargs)

    return wrapped_view  # type: ignore[return-value]


def init_app(app: Flask) -> None:
    app.before_request(_load_logged_in_user)
