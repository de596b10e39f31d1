"""Expense routes."""

from __future__ import annotations

from flask import Response, g, jsonify, request
from werkzeug.exceptions import NotFound

from ...constants.categories import EXPENSE_CATEGORIES
from ...extensions import session_scope
from ...logging_config import get_logger
from ...security import login_required
from ...services import expenses as expense_service
from ...services import export_csv
from .._helpers import operation_failed, request_data, today, validation_error
from . import bp
from .forms import ExpenseForm

logger = get_logger("blueprints.expenses")


@bp.get("/")
@login_required
def list_expenses():
    """List the current user's expenses, newest first, filtered by ``?q=``."""

    search = request.args.get("q", "")
    rows = expense_service.list_expenses(g.user.id, session_factory=session_scope, search=search)
    return jsonify({"expenses": [expense.to_dict() for expense in rows], "q": search})


@bp.get("/categories")
@login_required
def categories():
    return jsonify({"categories": EXPENSE_CATEGORIES})


@bp.post("/")
@login_required
def create_expense():
    """Persist a new expense from submitted data."""

    form = ExpenseForm.from_mapping(request_data())
    if not form.validate():
        return validation_error(form.errors)

    try:
        expense = expense_service.add_expense(
            user_id=g.user.id,
            amount=form.amount,
            category=form.category,
            description=form.description,
            spent_on=form.spent_on,
            session_factory=session_scope,
        )
    except Exception:
        logger.exception("Failed to add expense for user %s", g.user.id)
        return operation_failed("Failed to add expense.")

    return jsonify({"expense": expense.to_dict(), "message": "Expense added successfully!"}), 201


@bp.get("/<int:expense_id>")
@login_required
def get_expense(expense_id: int):
    expense = expense_service.get_expense(expense_id, g.user.id, session_factory=session_scope)
    if expense is None:
        raise NotFound(f"Expense {expense_id} was not found")
    return jsonify({"expense": expense.to_dict()})


@bp.route("/<int:expense_id>", methods=["POST", "PATCH"])
@login_required
def update_expense(expense_id: int):
    """Apply a partial update to an owned expense."""

    form = ExpenseForm.from_mapping(request_data(), partial=True)
    if not form.validate():
        return validation_error(form.errors)

    try:
        expense = expense_service.update_expense(
            expense_id, g.user.id, session_factory=session_scope, **form.changes()
        )
    except Exception:
        logger.exception("Failed to update expense %s", expense_id)
        return operation_failed("Failed to update expense.")

    if expense is None:
        raise NotFound(f"Expense {expense_id} was not found")
    return jsonify({"expense": expense.to_dict(), "message": "Expense updated successfully!"})


@bp.delete("/<int:expense_id>")
@login_required
def delete_expense(expense_id: int):
    """Delete an owned expense; unknown ids succeed without changes."""

    try:
        deleted = expense_service.delete_expense(expense_id, g.user.id, session_factory=session_scope)
    except Exception:
        logger.exception("Failed to delete expense %s", expense_id)
        return operation_failed("Failed to delete expense.")

    return jsonify({"deleted": deleted, "message": "Expense deleted successfully!"})


@bp.get("/export.csv")
@login_required
def export_expenses():
    """Download the (optionally filtered) expense list as CSV."""

    search = request.args.get("q", "")
    rows = expense_service.list_expenses(g.user.id, session_factory=session_scope, search=search)
    if not rows:
        return jsonify({"error": "nothing_to_export", "message": "No expenses to export"}), 400

    body = export_csv.render_expenses_csv(rows)
    filename = export_csv.export_filename(today())
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
