"""Support chat routes."""

from __future__ import annotations

from flask import g, jsonify
from werkzeug.exceptions import NotFound

from ...extensions import session_scope
from ...logging_config import get_logger
from ...security import login_required
from ...services import chat as chat_service
from .._helpers import operation_failed, request_data, validation_error
from . import bp

logger = get_logger("blueprints.chat")


@bp.get("/")
@login_required
def list_messages():
    """Messages the current user sent or received, plus broadcasts."""

    messages = chat_service.messages_for_user(g.user.id, session_factory=session_scope)
    unread = chat_service.unread_count(g.user.id, session_factory=session_scope)
    return jsonify({"messages": [m.to_dict() for m in messages], "unread": unread})


@bp.post("/")
@login_required
def send_message():
    """Send a message; omit ``receiver_id`` to broadcast."""

    data = request_data()
    content = str(data.get("content") or "").strip()
    errors: dict[str, list[str]] = {}
    if not content:
        errors["content"] = ["Message cannot be empty"]

    receiver_raw = data.get("receiver_id")
    receiver_id = None
    if receiver_raw not in (None, ""):
        try:
            receiver_id = int(receiver_raw)
        except (TypeError, ValueError):
            errors["receiver_id"] = ["Receiver must be a user id"]
    if errors:
        return validation_error(errors)

    try:
        message = chat_service.send_message(
            sender_id=g.user.id,
            content=content,
            receiver_id=receiver_id,
            session_factory=session_scope,
        )
    except Exception:
        logger.exception("Failed to send message from user %s", g.user.id)
        return operation_failed("Failed to send message.")

    return jsonify({"message": message.to_dict(), "notice": "Message sent successfully!"}), 201


@bp.post("/<int:message_id>/read")
@login_required
def mark_read(message_id: int):
    message = chat_service.mark_as_read(message_id, g.user.id, session_factory=session_scope)
    if message is None:
        raise NotFound(f"Message {message_id} was not found")
    return jsonify({"message": message.to_dict()})
