"""Read-side aggregation over a user's transactions.

Everything in this module is a pure function of its arguments: no database
access, no clock reads unless ``today`` is omitted, no shared state. The
service layer fetches the owner-scoped collection and hands it in.

Amounts are summed as ``Decimal`` so balances are exact to the cent.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from app.categorization.registry import TransactionKind
from app.models.transaction import Transaction

ZERO = Decimal("0")
ALL_KINDS = "all"


@dataclass(frozen=True)
class MonthSummary:
    """Income/expense totals for one calendar month."""

    year: int
    month: int
    month_income: Decimal
    month_expense: Decimal
    month_balance: Decimal
    expense_ratio: Decimal
    transaction_count: int
    transactions: tuple[Transaction, ...]


@dataclass(frozen=True)
class Summary:
    """All-time totals plus the current calendar month."""

    total_income: Decimal
    total_expense: Decimal
    total_balance: Decimal
    month_income: Decimal
    month_expense: Decimal
    month_balance: Decimal
    expense_ratio: Decimal


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a calendar month (both inclusive)."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def sort_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Most recent activity first: date descending, then creation time descending."""
    return sorted(
        transactions, key=lambda t: (t.txn_date, t.created_at), reverse=True
    )


def filter_by_kind(
    transactions: Iterable[Transaction], kind: TransactionKind | str
) -> list[Transaction]:
    """Keep transactions of one kind, preserving input order.

    ``"all"`` returns every transaction.
    """
    kind_value = kind.value if isinstance(kind, TransactionKind) else kind
    if kind_value == ALL_KINDS:
        return list(transactions)
    return [t for t in transactions if t.kind == kind_value]


def _total(transactions: Iterable[Transaction], kind: TransactionKind) -> Decimal:
    return sum(
        (Decimal(str(t.amount)) for t in transactions if t.kind == kind.value), ZERO
    )


def expense_ratio(income: Decimal, expense: Decimal) -> Decimal:
    """Expense as a percentage of income.

    A period without income has ratio 0, even when it has expenses.
    """
    if income > 0:
        return (expense / income) * 100
    return ZERO


def compute_monthly_summary(
    transactions: Iterable[Transaction], year: int, month: int
) -> MonthSummary:
    """Summarize the transactions dated within the given calendar month."""
    start, end = month_bounds(year, month)
    in_month = sort_transactions(t for t in transactions if start <= t.txn_date <= end)

    income = _total(in_month, TransactionKind.INCOME)
    expense = _total(in_month, TransactionKind.EXPENSE)

    return MonthSummary(
        year=year,
        month=month,
        month_income=income,
        month_expense=expense,
        month_balance=income - expense,
        expense_ratio=expense_ratio(income, expense),
        transaction_count=len(in_month),
        transactions=tuple(in_month),
    )


def compute_summary(
    transactions: Sequence[Transaction], today: date | None = None
) -> Summary:
    """All-time income, expense and balance, folded with the current month."""
    today = today or date.today()
    income = _total(transactions, TransactionKind.INCOME)
    expense = _total(transactions, TransactionKind.EXPENSE)
    current = compute_monthly_summary(transactions, today.year, today.month)

    return Summary(
        total_income=income,
        total_expense=expense,
        total_balance=income - expense,
        month_income=current.month_income,
        month_expense=current.month_expense,
        month_balance=current.month_balance,
        expense_ratio=current.expense_ratio,
    )
