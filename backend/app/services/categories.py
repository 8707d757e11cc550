"""Fixed spending category enumeration."""

from typing import Optional

UNCATEGORIZED = "Uncategorized"

CATEGORIES = [
    "Food",
    "Groceries",
    "Transport",
    "Fuel",
    "Shopping",
    "Rent",
    "EMI",
    "Bills & Utilities",
    "Entertainment",
    "Subscriptions",
    "Health",
    "Education",
    "Travel",
    "Personal Care",
    "Investments",
    "Insurance",
    "Transfers",
    UNCATEGORIZED,
]

_BY_LOWER = {name.lower(): name for name in CATEGORIES}


def snap_category(value: Optional[str]) -> str:
    """
    Map a category string onto the canonical spelling when it matches one
    case-insensitively. Anything else is returned stripped but otherwise
    untouched so model output is never silently discarded.
    """
    text = (value or "").strip()
    if not text:
        return UNCATEGORIZED
    return _BY_LOWER.get(text.lower(), text)
