"""Expense form validation helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

_FIELDS = ("amount", "category", "description", "date")


@dataclass(slots=True)
class ExpenseForm:
    """Represents expense input prior to validation.

    With ``partial=True`` only submitted fields are validated, which is how
    edits send just the fields that changed.
    """

    amount: Optional[float] = None
    category: Optional[str] = None
    description: Optional[str] = None
    spent_on: Optional[date] = None
    partial: bool = False
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, str] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, partial: bool = False) -> ExpenseForm:
        """Create a form populated from request data."""

        form = cls(partial=partial)
        form.load(data)
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        """Bind incoming mapping data to the form state."""

        self.raw_data = {}
        for key in _FIELDS:
            if key not in data:
                continue
            value = data.get(key)
            self.raw_data[key] = "" if value is None else str(value)

    def _submitted(self, key: str) -> bool:
        return not self.partial or key in self.raw_data

    def validate(self) -> bool:
        """Validate the bound data and populate typed attributes."""

        self.errors.clear()

        if self._submitted("amount"):
            amount_raw = self.raw_data.get("amount", "").strip()
            self.amount = None
            if not amount_raw:
                self._add_error("amount", "Amount is required")
            else:
                try:
                    parsed = float(amount_raw)
                except (TypeError, ValueError):
                    self._add_error("amount", "Please enter a valid amount greater than 0")
                else:
                    if parsed <= 0 or parsed != parsed:
                        self._add_error("amount", "Please enter a valid amount greater than 0")
                    else:
                        self.amount = parsed

        if self._submitted("category"):
            self.category = self.raw_data.get("category", "").strip() or None
            if not self.category:
                self._add_error("category", "Category is required")
            elif len(self.category) > 64:
                self._add_error("category", "Category must be 64 characters or fewer")

        if self._submitted("description"):
            self.description = self.raw_data.get("description", "").strip() or None
            if not self.description:
                self._add_error("description", "Description is required")
            elif len(self.description) > 255:
                self._add_error("description", "Description must be 255 characters or fewer")

        if self._submitted("date"):
            date_raw = self.raw_data.get("date", "").strip()
            self.spent_on = None
            if not date_raw:
                self._add_error("date", "Date is required")
            else:
                try:
                    self.spent_on = datetime.strptime(date_raw[:10], "%Y-%m-%d").date()
                except ValueError:
                    self._add_error("date", "Enter a valid date (YYYY-MM-DD)")

        if self.partial and not self.raw_data:
            self._add_error("__all__", "No fields to update")

        return not self.errors

    def changes(self) -> dict[str, Any]:
        """Validated values keyed by service field name, submitted fields only."""

        values = {
            "amount": self.amount,
            "category": self.category,
            "description": self.description,
            "date": self.spent_on,
        }
        return {
            ("spent_on" if key == "date" else key): value
            for key, value in values.items()
            if self._submitted(key)
        }

    def _add_error(self, field: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field, []).append(message)
