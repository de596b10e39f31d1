"""Dashboard routes."""

from __future__ import annotations

from flask import current_app, g, jsonify

from ...security import login_required
from .._helpers import currency_symbol, today
from . import bp
from .services import load_overview_summary


def _resolve_summary_loader():
    state = current_app.extensions.get("overview", {})
    loader = state.get("summary_loader")
    if callable(loader):
        return loader
    return load_overview_summary


@bp.get("/")
@login_required
def dashboard():
    """Render the current user's spend overview."""

    summary_loader = _resolve_summary_loader()
    summary = summary_loader(
        user_id=g.user.id,
        today=today(),
        currency_symbol=currency_symbol(),
        recent_limit=current_app.config.get("RECENT_EXPENSES_LIMIT", 5),
    )
    return jsonify({"user": g.user.to_dict(), "summary": summary})
