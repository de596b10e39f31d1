"""
Centralized category definitions for the add-expense picker.
Stored expenses may carry any label; this list only seeds the dropdown.
"""

EXPENSE_CATEGORIES = [
    "Food",
    "Transportation",
    "Entertainment",
    "Shopping",
    "Utilities",
    "Housing",
    "Health",
    "Education",
    "Travel",
    "Personal Care",
    "Gifts",
    "Other",
]
