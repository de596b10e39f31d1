"""Spend analysis routes: aggregates, prediction and charts."""

from __future__ import annotations

from flask import Response, g, jsonify

from ...extensions import session_scope
from ...security import login_required
from ...services import analytics, reports
from ...services import expenses as expense_service
from .._helpers import currency_symbol, today
from . import bp


def _owned_expenses():
    # Insertion order keeps category totals in first-seen order.
    return expense_service.list_expenses(
        g.user.id, session_factory=session_scope, newest_first=False
    )


@bp.get("/")
@login_required
def summary():
    """Category totals, trailing-week rollup and next-day prediction."""

    expenses = _owned_expenses()
    return jsonify(
        analytics.summarize(expenses, today=today(), currency_symbol=currency_symbol())
    )


@bp.get("/charts/categories.png")
@login_required
def category_chart():
    fig = reports.build_category_chart(_owned_expenses(), currency_symbol=currency_symbol())
    return Response(reports.render_png(fig), mimetype="image/png")


@bp.get("/charts/weekly.png")
@login_required
def weekly_chart():
    fig = reports.build_weekly_chart(_owned_expenses(), today=today())
    return Response(reports.render_png(fig), mimetype="image/png")
