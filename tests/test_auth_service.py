"""Account creation, login checks and admin user management."""

from __future__ import annotations

import pytest

from expensely.services import auth


def _register(session_factory, email="ana@example.com", password="secret1", username="ana"):
    return auth.register(username=username, email=email, password=password, session_factory=session_factory)


def test_register_hashes_password_and_defaults_to_user_role(session_factory):
    user = _register(session_factory)

    assert user.id is not None
    assert user.role == "user"
    assert user.password_hash != "secret1"
    assert user.password_hash.startswith("$argon2")
    assert "password_hash" not in user.to_dict()


def test_register_normalizes_email_and_rejects_duplicates(session_factory):
    user = _register(session_factory, email="  Ana@Example.COM ")
    assert user.email == "ana@example.com"

    with pytest.raises(ValueError, match="already exists"):
        _register(session_factory, email="ANA@example.com", username="other")


def test_create_user_validates_input(session_factory):
    with pytest.raises(ValueError, match="Invalid role"):
        auth.create_user(
            username="x", email="x@example.com", password="pw", role="root", session_factory=session_factory
        )
    with pytest.raises(ValueError, match="Password"):
        auth.create_user(username="x", email="x@example.com", password="", session_factory=session_factory)


def test_authenticate_requires_matching_role_and_password(session_factory):
    _register(session_factory)

    assert auth.authenticate(
        email="ana@example.com", password="secret1", role="user", session_factory=session_factory
    ) is not None
    assert auth.authenticate(
        email="ANA@example.com", password="secret1", role="user", session_factory=session_factory
    ) is not None
    assert auth.authenticate(
        email="ana@example.com", password="wrong", role="user", session_factory=session_factory
    ) is None
    assert auth.authenticate(
        email="ana@example.com", password="secret1", role="admin", session_factory=session_factory
    ) is None
    assert auth.authenticate(
        email="nobody@example.com", password="secret1", role="user", session_factory=session_factory
    ) is None


def test_inactive_user_cannot_authenticate(session_factory):
    user = _register(session_factory)
    auth.set_active(user_id=user.id, active=False, session_factory=session_factory)

    assert auth.authenticate(
        email="ana@example.com", password="secret1", role="user", session_factory=session_factory
    ) is None
    assert auth.get_user(user.id, session_factory).status == "inactive"


def test_list_users_search(session_factory, user_factory):
    user_factory("alice", email="alice@corp.io")
    user_factory("bob", email="bob@example.com")

    assert [u.username for u in auth.list_users(session_factory)] == ["alice", "bob"]
    assert [u.username for u in auth.list_users(session_factory, search="CORP")] == ["alice"]
    assert [u.username for u in auth.list_users(session_factory, search="bo")] == ["bob"]


def test_update_profile(session_factory, user_factory):
    user_factory("taken", email="taken@example.com")
    user = _register(session_factory)

    updated = auth.update_profile(user_id=user.id, username="Ana B", session_factory=session_factory)
    assert updated.username == "Ana B"
    assert updated.email == "ana@example.com"

    with pytest.raises(ValueError, match="already exists"):
        auth.update_profile(user_id=user.id, email="taken@example.com", session_factory=session_factory)


def test_change_password(session_factory):
    user = _register(session_factory)

    with pytest.raises(ValueError, match="Current password is incorrect"):
        auth.change_password(
            user_id=user.id, current_password="nope", new_password="fresh-pass", session_factory=session_factory
        )

    auth.change_password(
        user_id=user.id, current_password="secret1", new_password="fresh-pass", session_factory=session_factory
    )
    assert auth.authenticate(
        email="ana@example.com", password="fresh-pass", role="user", session_factory=session_factory
    ) is not None


def test_set_role(session_factory):
    user = _register(session_factory)

    promoted = auth.set_role(user_id=user.id, role="Admin", session_factory=session_factory)

    assert promoted.is_admin
    with pytest.raises(ValueError, match="User not found"):
        auth.set_role(user_id=9999, role="user", session_factory=session_factory)


def test_lookup_helpers(session_factory):
    assert auth.any_users_exist(session_factory) is False
    user = _register(session_factory)

    assert auth.any_users_exist(session_factory) is True
    assert auth.get_user_by_email("ANA@example.com", session_factory).id == user.id
    assert auth.get_user_by_email("missing@example.com", session_factory) is None
    assert auth.get_user(9999, session_factory) is None


def test_list_users_search_is_literal(session_factory, user_factory):
    user_factory("ana")
    user_factory("first_last", email="first_last@example.com")

    assert [u.username for u in auth.list_users(session_factory, search="_")] == ["first_last"]
    assert auth.list_users(session_factory, search="a%a") == []
