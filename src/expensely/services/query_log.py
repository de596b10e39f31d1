"""Executed-SQL notifications for the admin query panel."""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Deque, Dict, Iterable, List, Mapping, Optional
from uuid import uuid4

from sqlalchemy import event
from sqlalchemy.engine import Engine

from ..logging_config import get_logger

__all__ = [
    "QueryRecord",
    "attach_to_engine",
    "clear_queries",
    "format_query",
    "recent_queries",
    "register_query_listener",
]

QueryListener = Callable[[str], None]

logger = get_logger("services.query_log")


@dataclass(frozen=True)
class QueryRecord:
    """A rendered statement captured from the engine."""

    id: str
    query: str
    executed_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "query": self.query,
            "executed_at": self.executed_at.isoformat(),
        }


_LISTENERS: List[QueryListener] = []
_RECENT: Deque[QueryRecord] = deque(maxlen=50)
_LOCK = Lock()
_NAMED_PARAM = re.compile(r":(\w+)")


def _render_param(value: Any) -> str:
    if isinstance(value, str):
        return f"'{value}'"
    return str(value)


def format_query(statement: str, parameters: Any = None) -> str:
    """Substitute ``parameters`` into ``statement`` for display only.

    Positional parameters replace ``?`` / ``%s`` / ``$n`` placeholders in order;
    mapping parameters replace ``:name`` placeholders.
    """

    text = " ".join(statement.split())
    if not parameters:
        return text

    if isinstance(parameters, Mapping):
        # Single pass, so substituted values are never rescanned.
        def _named(match: re.Match) -> str:
            key = match.group(1)
            return _render_param(parameters[key]) if key in parameters else match.group(0)

        return _NAMED_PARAM.sub(_named, text)

    values = list(parameters)
    pieces: list[str] = []
    index = 0
    position = 0
    while position < len(text):
        char = text[position]
        placeholder_len = 0
        if char == "?":
            placeholder_len = 1
        elif text.startswith("%s", position):
            placeholder_len = 2
        elif char == "$" and position + 1 < len(text) and text[position + 1].isdigit():
            placeholder_len = 1
            while position + placeholder_len < len(text) and text[position + placeholder_len].isdigit():
                placeholder_len += 1

        if placeholder_len and index < len(values):
            pieces.append(_render_param(values[index]))
            index += 1
            position += placeholder_len
            continue
        pieces.append(char)
        position += 1
    return "".join(pieces)


def register_query_listener(listener: QueryListener) -> Callable[[], None]:
    """Subscribe ``listener`` to rendered statements; returns an unsubscribe callable."""

    with _LOCK:
        _LISTENERS.append(listener)

    def unregister() -> None:
        with _LOCK:
            if listener in _LISTENERS:
                _LISTENERS.remove(listener)

    return unregister


def notify_query_execution(query: str) -> QueryRecord:
    """Record ``query`` and fan it out to every registered listener."""

    record = QueryRecord(id=uuid4().hex[:7], query=query, executed_at=datetime.now(timezone.utc))
    with _LOCK:
        _RECENT.append(record)
        listeners = list(_LISTENERS)
    for listener in listeners:
        try:
            listener(query)
        except Exception:
            logger.exception("Query listener %r failed", listener)
    return record


def recent_queries(limit: Optional[int] = None) -> Iterable[Dict[str, Any]]:
    """Return captured statements, most recent first."""

    with _LOCK:
        records = list(_RECENT)
    records.reverse()
    if limit is not None:
        records = records[:limit]
    return [record.to_dict() for record in records]


def clear_queries() -> None:
    """Drop captured statements (useful for tests)."""

    with _LOCK:
        _RECENT.clear()


def set_buffer_size(size: int) -> None:
    """Resize the recent-statements buffer, keeping the newest entries."""

    global _RECENT
    with _LOCK:
        _RECENT = deque(_RECENT, maxlen=max(size, 1))


def attach_to_engine(engine: Engine) -> None:
    """Hook ``engine`` so every executed statement is captured."""

    if event.contains(engine, "before_cursor_execute", _before_cursor_execute):
        return
    event.listen(engine, "before_cursor_execute", _before_cursor_execute)


def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany) -> None:
    if executemany:
        for params in parameters:
            notify_query_execution(format_query(statement, params))
        return
    notify_query_execution(format_query(statement, parameters))
