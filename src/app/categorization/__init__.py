"""Transaction category taxonomy.

A small, fixed set of labels per transaction kind. Transactions are validated
against it on every write.
"""

from .registry import (
    CATEGORIES,
    TransactionKind,
    all_categories,
    categories_for,
    is_valid_category,
)

__all__ = [
    "CATEGORIES",
    "TransactionKind",
    "all_categories",
    "categories_for",
    "is_valid_category",
]
