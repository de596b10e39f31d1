"""CSV export helpers for Expensely."""

from __future__ import annotations

import csv
import io
from datetime import date
from pathlib import Path
from typing import Sequence, TextIO

from ..models.expense import Expense

HEADERS = ["Date", "Description", "Category", "Amount"]


def export_filename(today: date) -> str:
    return f"expenses_{today.isoformat()}.csv"


def _amount_cell(amount: float) -> int | float:
    """Whole amounts are written without a trailing ``.0``."""

    value = float(amount)
    return int(value) if value.is_integer() else value


def write_expenses_csv(expenses: Sequence[Expense], fh: TextIO) -> int:
    """Write ``expenses`` as CSV to ``fh`` and return the row count.

    Text columns are always quoted with embedded quotes doubled; the amount is
    left bare so spreadsheets read it as a number.
    """

    if not expenses:
        raise ValueError("No expenses to export")

    fh.write(",".join(HEADERS) + "\n")
    writer = csv.writer(fh, lineterminator="\n", quoting=csv.QUOTE_NONNUMERIC)
    for expense in expenses:
        writer.writerow(
            [
                expense.spent_on.isoformat(),
                expense.description or "",
                expense.category,
                _amount_cell(expense.amount),
            ]
        )
    return len(expenses)


def render_expenses_csv(expenses: Sequence[Expense]) -> str:
    """Return the CSV document as a string for HTTP downloads."""

    buffer = io.StringIO()
    write_expenses_csv(expenses, buffer)
    return buffer.getvalue()


def export_expenses_csv(*, expenses: Sequence[Expense], output_path: Path) -> Path:
    """Write the CSV document to ``output_path`` and return the path written."""

    if not expenses:
        raise ValueError("No expenses to export")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        write_expenses_csv(expenses, fh)
    return output_path
