"""Executed-SQL capture and listener fan-out."""

from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlmodel import create_engine

from expensely.services import query_log


@pytest.fixture(autouse=True)
def _fresh_buffer():
    query_log.set_buffer_size(50)
    query_log.clear_queries()
    yield
    query_log.clear_queries()


def test_format_query_positional_parameters():
    rendered = query_log.format_query(
        "SELECT *\n  FROM expense WHERE user_id = ? AND category = ?", (3, "Food")
    )

    assert rendered == "SELECT * FROM expense WHERE user_id = 3 AND category = 'Food'"


def test_format_query_named_parameters():
    rendered = query_log.format_query(
        "UPDATE expense SET amount = :amount WHERE id = :id AND user_id = :id_1",
        {"amount": 12.5, "id": 4, "id_1": 7},
    )

    assert rendered == "UPDATE expense SET amount = 12.5 WHERE id = 4 AND user_id = 7"


def test_format_query_other_placeholder_styles():
    assert query_log.format_query("SELECT %s, %s", ("a", None)) == "SELECT 'a', None"
    assert query_log.format_query("SELECT $1 + $2", (1, 2)) == "SELECT 1 + 2"
    assert query_log.format_query("SELECT 1") == "SELECT 1"


def test_listener_receives_statements_until_unsubscribed():
    seen: list[str] = []
    unsubscribe = query_log.register_query_listener(seen.append)

    query_log.notify_query_execution("SELECT 1")
    unsubscribe()
    query_log.notify_query_execution("SELECT 2")
    unsubscribe()

    assert seen == ["SELECT 1"]


def test_failing_listener_does_not_block_others():
    seen: list[str] = []

    def boom(_query):
        raise RuntimeError("listener down")

    unsubscribe_bad = query_log.register_query_listener(boom)
    unsubscribe_good = query_log.register_query_listener(seen.append)
    try:
        query_log.notify_query_execution("SELECT 1")
    finally:
        unsubscribe_bad()
        unsubscribe_good()

    assert seen == ["SELECT 1"]


def test_recent_queries_newest_first_and_bounded():
    query_log.set_buffer_size(3)
    for n in range(5):
        query_log.notify_query_execution(f"SELECT {n}")

    queries = [q["query"] for q in query_log.recent_queries()]

    assert queries == ["SELECT 4", "SELECT 3", "SELECT 2"]
    assert [q["query"] for q in query_log.recent_queries(limit=1)] == ["SELECT 4"]
    assert set(query_log.recent_queries()[0]) == {"id", "query", "executed_at"}


def test_attached_engine_reports_rendered_sql():
    engine = create_engine("sqlite://")
    query_log.attach_to_engine(engine)
    query_log.attach_to_engine(engine)
    seen: list[str] = []
    unsubscribe = query_log.register_query_listener(seen.append)
    try:
        with engine.begin() as conn:
            conn.execute(text("CREATE TABLE t (name TEXT)"))
            conn.execute(text("INSERT INTO t (name) VALUES (:name)"), [{"name": "a"}, {"name": "b"}])
            conn.execute(text("SELECT name FROM t WHERE name = :name"), {"name": "a"})
    finally:
        unsubscribe()
        engine.dispose()

    assert "INSERT INTO t (name) VALUES ('a')" in seen
    assert "INSERT INTO t (name) VALUES ('b')" in seen
    assert "SELECT name FROM t WHERE name = 'a'" in seen
    # Attaching twice must not double-report.
    assert seen.count("SELECT name FROM t WHERE name = 'a'") == 1
    assert not any(q.upper().startswith(("BEGIN", "COMMIT")) for q in seen)


def test_format_query_does_not_rescan_substituted_values():
    rendered = query_log.format_query(
        "INSERT INTO message (content, sender_id) VALUES (:content, :sender_id)",
        {"content": "see :sender_id", "sender_id": 3},
    )

    assert rendered == "INSERT INTO message (content, sender_id) VALUES ('see :sender_id', 3)"


def test_format_query_leaves_unknown_names():
    assert query_log.format_query("SELECT :missing, :id", {"id": 1}) == "SELECT :missing, 1"
