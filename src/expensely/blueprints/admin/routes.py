"""Admin routes for Expensely."""

from __future__ import annotations

from flask import g, jsonify, request
from werkzeug.exceptions import NotFound

from ...extensions import session_scope
from ...logging_config import get_logger
from ...security import admin_required
from ...services import admin_stats, query_log, seed
from ...services import auth as auth_service
from .._helpers import operation_failed, request_data, today
from . import bp

logger = get_logger("blueprints.admin")


def _parse_bool(value) -> bool | None:
    if isinstance(value, bool):
        return value
    text = str(value or "").strip().lower()
    if text in {"1", "true", "yes", "on", "active"}:
        return True
    if text in {"0", "false", "no", "off", "inactive"}:
        return False
    return None


@bp.get("/")
@admin_required
def dashboard():
    """Usage overview: user counts, spend leaders, registrations, unread support."""

    stats = admin_stats.dashboard_stats(
        admin_id=g.user.id, session_factory=session_scope, today=today()
    )
    return jsonify({"stats": stats})


@bp.get("/users")
@admin_required
def users():
    search = request.args.get("q", "")
    rows = admin_stats.user_rows(session_scope, search=search)
    return jsonify({"users": rows, "q": search})


@bp.post("/users/<int:user_id>/role")
@admin_required
def change_role(user_id: int):
    role = str(request_data().get("role") or "")
    try:
        user = auth_service.set_role(user_id=user_id, role=role, session_factory=session_scope)
    except ValueError as exc:
        if str(exc) == "User not found":
            raise NotFound(f"User {user_id} was not found") from exc
        return jsonify({"error": "invalid_role", "message": str(exc)}), 400
    return jsonify({"user": user.to_dict()})


@bp.post("/users/<int:user_id>/status")
@admin_required
def change_status(user_id: int):
    active = _parse_bool(request_data().get("active"))
    if active is None:
        return jsonify({"error": "invalid_status", "message": "Provide active=true|false"}), 400
    if user_id == g.user.id and not active:
        return jsonify({"error": "invalid_status", "message": "You cannot deactivate yourself"}), 400
    try:
        user = auth_service.set_active(user_id=user_id, active=active, session_factory=session_scope)
    except ValueError as exc:
        raise NotFound(f"User {user_id} was not found") from exc
    return jsonify({"user": user.to_dict()})


@bp.get("/messages")
@admin_required
def support_inbox():
    return jsonify({"conversations": admin_stats.support_inbox(session_factory=session_scope)})


@bp.get("/queries")
@admin_required
def recent_queries():
    """Recently executed SQL, rendered with parameters, newest first."""

    limit = request.args.get("limit", type=int)
    return jsonify({"queries": query_log.recent_queries(limit=limit)})


@bp.post("/seed-demo")
@admin_required
def seed_demo():
    """Seed demo data into the database."""
    # Require an explicit confirmation value to avoid accidental seeding.
    if _parse_bool(request_data().get("confirm")) is not True:
        return jsonify({"error": "confirmation_required"}), 400

    try:
        seeded = seed.run_demo_seed(session_factory=session_scope, today=today())
    except Exception:
        logger.exception("Demo seed failed")
        return operation_failed("Failed to seed demo data.")

    return jsonify({"seeded": seeded})
