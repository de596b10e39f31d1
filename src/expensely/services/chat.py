"""Support chat between users and admins."""

from __future__ import annotations

from collections import defaultdict
from typing import Callable, Iterable, Optional

from sqlalchemy import func, or_
from sqlmodel import Session, select

from ..logging_config import get_logger
from ..models.message import Message

SessionFactory = Callable[[], Session]

logger = get_logger("services.chat")


def _visible_to(user_id: int):
    return or_(
        Message.sender_id == user_id,
        Message.receiver_id == user_id,
        Message.receiver_id.is_(None),
    )


def send_message(
    *,
    sender_id: int,
    content: str,
    receiver_id: Optional[int] = None,
    session_factory: SessionFactory,
) -> Message:
    """Store a message; a ``receiver_id`` of None broadcasts to everyone."""

    content = (content or "").strip()
    if not content:
        raise ValueError("Message content cannot be empty")

    with session_factory() as session:
        message = Message(sender_id=sender_id, receiver_id=receiver_id, content=content)
        session.add(message)
        session.commit()
        session.refresh(message)
        session.expunge(message)

    logger.info(
        "Message sent",
        extra={"message_id": message.id, "sender_id": sender_id, "broadcast": receiver_id is None},
    )
    return message


def messages_for_user(user_id: int, *, session_factory: SessionFactory) -> list[Message]:
    """Messages the user sent or received, plus broadcasts, oldest first."""

    with session_factory() as session:
        messages = list(
            session.exec(
                select(Message)
                .where(_visible_to(user_id))
                .order_by(Message.timestamp, Message.id)
            ).all()
        )
        session.expunge_all()
    return messages


def all_messages(*, session_factory: SessionFactory) -> list[Message]:
    with session_factory() as session:
        messages = list(session.exec(select(Message).order_by(Message.timestamp, Message.id)).all())
        session.expunge_all()
    return messages


def mark_as_read(message_id: int, user_id: int, *, session_factory: SessionFactory) -> Optional[Message]:
    """Flag a visible message as read; unknown or foreign ids return None."""

    with session_factory() as session:
        message = session.exec(
            select(Message).where(Message.id == message_id, _visible_to(user_id))
        ).first()
        if message is None:
            return None
        if not message.is_read:
            message.is_read = True
            session.add(message)
            session.commit()
            session.refresh(message)
        session.expunge(message)
        return message


def unread_count(receiver_id: int, *, session_factory: SessionFactory) -> int:
    """Count unread messages addressed directly to ``receiver_id``."""

    with session_factory() as session:
        total = session.exec(
            select(func.count())
            .select_from(Message)
            .where(Message.receiver_id == receiver_id, Message.is_read == False)  # noqa: E712
        ).one()
    return int(total or 0)


def group_by_user(messages: Iterable[Message], *, admin_ids: Iterable[int]) -> dict[int, list[Message]]:
    """Bucket conversations by their non-admin participant.

    Broadcasts and admin-to-admin traffic have no such participant and are skipped.
    """

    admins = set(admin_ids)
    grouped: dict[int, list[Message]] = defaultdict(list)
    for message in messages:
        party = message.sender_id if message.sender_id not in admins else message.receiver_id
        if party is None or party in admins:
            continue
        grouped[party].append(message)
    return dict(grouped)
