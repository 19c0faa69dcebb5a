"""Fixed category taxonomy for income and expense transactions.

The registry is loaded once at import time and is read-only for the life of
the process, so it is safe to read from any number of concurrent requests.
Membership checks are exact and case-sensitive: "Food & Dining" is valid,
"food & dining" is not.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class TransactionKind(str, Enum):
    """Transaction polarity."""

    INCOME = "income"
    EXPENSE = "expense"


# Display order matters for clients; membership is all the server checks.
CATEGORIES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        TransactionKind.INCOME.value: (
            "Salary",
            "Freelance",
            "Investment",
            "Gift",
            "Bonus",
            "Other Income",
        ),
        TransactionKind.EXPENSE.value: (
            "Food & Dining",
            "Shopping",
            "Transportation",
            "Entertainment",
            "Bills & Utilities",
            "Healthcare",
            "Education",
            "Travel",
            "Other",
        ),
    }
)


def _kind_key(kind: TransactionKind | str | None) -> str | None:
    if isinstance(kind, TransactionKind):
        return kind.value
    return kind


def categories_for(kind: TransactionKind | str | None) -> tuple[str, ...]:
    """Return the display list of categories for a kind.

    Unknown kinds yield an empty tuple.
    """
    return CATEGORIES.get(_kind_key(kind), ())


def is_valid_category(kind: TransactionKind | str | None, category: str | None) -> bool:
    """Check whether ``category`` belongs to the set configured for ``kind``."""
    if category is None:
        return False
    return category in categories_for(kind)


def all_categories() -> dict[str, list[str]]:
    """Return the full taxonomy as plain lists, keyed by kind."""
    return {kind: list(labels) for kind, labels in CATEGORIES.items()}
