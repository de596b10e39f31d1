"""Request/response helpers shared by the JSON blueprints."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

from flask import current_app, jsonify, request


def request_data() -> Mapping[str, Any]:
    """Return the submitted payload whether it arrived as JSON or form data."""

    if request.is_json:
        payload = request.get_json(silent=True)
        return payload if isinstance(payload, Mapping) else {}
    return request.form


def validation_error(errors: Mapping[str, list[str]]):
    return jsonify({"error": "validation_failed", "errors": dict(errors)}), 400


def operation_failed(message: str):
    """Transient failure notice after the caller logged the exception."""

    return jsonify({"error": "operation_failed", "message": message}), 500


def today() -> date:
    """Return the app's notion of today; tests pin it via ``EXPENSELY_TODAY``."""

    pinned = current_app.config.get("EXPENSELY_TODAY")
    if pinned:
        return pinned if isinstance(pinned, date) else date.fromisoformat(str(pinned))
    return date.today()


def currency_symbol() -> str:
    return current_app.config["EXPENSELY_CONFIG"].CURRENCY_SYMBOL
