"""Login, registration and account settings routes."""

from __future__ import annotations

from flask import g, jsonify
from werkzeug.exceptions import Unauthorized

from ...extensions import session_scope
from ...logging_config import get_logger
from ...security import login_required, login_user, logout_user
from ...services import auth as auth_service
from .._helpers import operation_failed, request_data, validation_error
from . import bp
from .forms import LoginForm, PasswordChangeForm, RegistrationForm

logger = get_logger("blueprints.auth")


@bp.post("/login")
def login():
    """Start a session when email, password and selected role match."""

    form = LoginForm.from_mapping(request_data())
    if not form.validate():
        return validation_error(form.errors)

    user = auth_service.authenticate(
        email=form.email,
        password=form.password,
        role=form.role,
        session_factory=session_scope,
    )
    if user is None:
        raise Unauthorized("Invalid credentials. Please try again.")

    login_user(user)
    return jsonify({"user": user.to_dict(), "message": f"Welcome back, {user.username}!"})


@bp.post("/register")
def register():
    """Create a regular account and log it in."""

    form = RegistrationForm.from_mapping(request_data())
    if not form.validate():
        return validation_error(form.errors)

    try:
        user = auth_service.register(
            username=form.username,
            email=form.email,
            password=form.password,
            session_factory=session_scope,
        )
    except ValueError as exc:
        return jsonify({"error": "registration_failed", "message": str(exc)}), 409
    except Exception:
        logger.exception("Registration failed for %s", form.email)
        return operation_failed("An error occurred during registration.")

    login_user(user)
    return jsonify({"user": user.to_dict(), "message": "Registration successful!"}), 201


@bp.post("/logout")
def logout():
    logout_user()
    return jsonify({"message": "You have been logged out."})


@bp.get("/me")
@login_required
def me():
    return jsonify({"user": g.user.to_dict(), "is_admin": g.user.is_admin})


@bp.post("/profile")
@login_required
def update_profile():
    """Change username and/or email for the current user."""

    data = request_data()
    username = data.get("username")
    email = data.get("email")
    if username is None and email is None:
        return validation_error({"__all__": ["No fields to update"]})

    try:
        user = auth_service.update_profile(
            user_id=g.user.id,
            username=username,
            email=email,
            session_factory=session_scope,
        )
    except ValueError as exc:
        return jsonify({"error": "update_failed", "message": str(exc)}), 400

    g.user = user
    return jsonify({"user": user.to_dict(), "message": "Profile updated successfully!"})


@bp.post("/password")
@login_required
def change_password():
    form = PasswordChangeForm.from_mapping(request_data())
    if not form.validate():
        return validation_error(form.errors)

    try:
        auth_service.change_password(
            user_id=g.user.id,
            current_password=form.current_password,
            new_password=form.new_password,
            session_factory=session_scope,
        )
    except ValueError as exc:
        return jsonify({"error": "update_failed", "message": str(exc)}), 400

    return jsonify({"message": "Password updated successfully!"})
