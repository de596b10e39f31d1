"""Tests for CSV export helpers."""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path

import pytest

from expensely.models import Expense
from expensely.services import export_csv


def _expenses():
    return [
        Expense(id=1, user_id=1, amount=1500.0, category="Food", description="Dinner with friends",
                spent_on=date(2024, 6, 18)),
        Expense(id=2, user_id=1, amount=12.5, category="Shopping", description='Socks, "wool"',
                spent_on=date(2024, 6, 19)),
    ]


def test_render_quotes_text_columns_and_leaves_amount_bare():
    text = export_csv.render_expenses_csv(_expenses())

    assert text.splitlines() == [
        "Date,Description,Category,Amount",
        '"2024-06-18","Dinner with friends","Food",1500',
        '"2024-06-19","Socks, ""wool""","Shopping",12.5',
    ]


def test_export_creates_readable_file(tmp_path):
    output_path = Path(tmp_path) / "nested" / "expenses.csv"

    written = export_csv.export_expenses_csv(expenses=_expenses(), output_path=output_path)

    assert written == output_path
    with output_path.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert len(rows) == 2
    assert rows[1]["Description"] == 'Socks, "wool"'
    assert {row["Category"] for row in rows} == {"Food", "Shopping"}


def test_empty_export_is_an_error(tmp_path):
    with pytest.raises(ValueError, match="No expenses to export"):
        export_csv.render_expenses_csv([])
    with pytest.raises(ValueError, match="No expenses to export"):
        export_csv.export_expenses_csv(expenses=[], output_path=tmp_path / "x.csv")


def test_export_filename():
    assert export_csv.export_filename(date(2024, 6, 19)) == "expenses_2024-06-19.csv"


def test_whole_amounts_drop_trailing_zero():
    expenses = [
        Expense(id=1, user_id=1, amount=1500.0, category="Food", description="a", spent_on=date(2024, 6, 18)),
        Expense(id=2, user_id=1, amount=0.75, category="Food", description="b", spent_on=date(2024, 6, 18)),
    ]

    amounts = [line.rsplit(",", 1)[1] for line in export_csv.render_expenses_csv(expenses).splitlines()[1:]]

    assert amounts == ["1500", "0.75"]
