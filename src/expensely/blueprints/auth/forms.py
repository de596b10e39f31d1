"""Login, registration and settings form validation."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _clean(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value).strip()


@dataclass(slots=True)
class _Form:
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)

    def _add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def _check_email(self, email: str) -> None:
        if not email:
            self._add_error("email", "Email is required")
        elif not _EMAIL_RE.match(email):
            self._add_error("email", "Enter a valid email address")


@dataclass(slots=True)
class LoginForm(_Form):
    email: str = ""
    password: str = ""
    role: str = "user"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LoginForm:
        return cls(
            email=_clean(data, "email"),
            password=str(data.get("password") or ""),
            role=_clean(data, "role").lower() or "user",
        )

    def validate(self) -> bool:
        self.errors.clear()
        self._check_email(self.email)
        if not self.password:
            self._add_error("password", "Password is required")
        if self.role not in {"user", "admin"}:
            self._add_error("role", "Role must be 'user' or 'admin'")
        return not self.errors


@dataclass(slots=True)
class RegistrationForm(_Form):
    username: str = ""
    email: str = ""
    password: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RegistrationForm:
        return cls(
            username=_clean(data, "username"),
            email=_clean(data, "email"),
            password=str(data.get("password") or ""),
        )

    def validate(self) -> bool:
        self.errors.clear()
        if not self.username:
            self._add_error("username", "Username is required")
        elif len(self.username) > 64:
            self._add_error("username", "Username must be 64 characters or fewer")
        self._check_email(self.email)
        if len(self.password) < 6:
            self._add_error("password", "Password must be at least 6 characters")
        return not self.errors


@dataclass(slots=True)
class PasswordChangeForm(_Form):
    current_password: str = ""
    new_password: str = ""
    confirm_password: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> PasswordChangeForm:
        return cls(
            current_password=str(data.get("current_password") or ""),
            new_password=str(data.get("new_password") or ""),
            confirm_password=str(data.get("confirm_password") or ""),
        )

    def validate(self) -> bool:
        self.errors.clear()
        if not self.current_password:
            self._add_error("current_password", "Current password is required")
        if len(self.new_password) < 6:
            self._add_error("new_password", "Password must be at least 6 characters")
        if self.new_password != self.confirm_password:
            self._add_error("confirm_password", "Passwords do not match")
        return not self.errors
