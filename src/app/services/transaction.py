"""Transaction service: validated, owner-scoped CRUD plus summaries.

Every public method takes the owner id resolved by the identity gate and
passes it down to the repository. Validation runs before any write, so a
rejected call never leaves a partial change behind.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, TypeVar
from uuid import UUID

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.categorization.registry import TransactionKind, categories_for, is_valid_category
from app.config import settings
from app.core.exceptions import NotFound, ValidationError
from app.models.transaction import Transaction
from app.repositories.transaction import TransactionFilter, TransactionRepository
from app.schemas.transaction import TransactionCreate, TransactionUpdate
from app.services.aggregation import (
    ALL_KINDS,
    MonthSummary,
    Summary,
    compute_monthly_summary,
    compute_summary,
    month_bounds,
)

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

_KIND_VALUES = tuple(kind.value for kind in TransactionKind)


@dataclass(frozen=True)
class TransactionPage:
    """A page of transactions and what is needed to render pagination."""

    items: list[Transaction]
    total: int
    limit: int
    offset: int

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def current_page(self) -> int:
        return self.offset // self.limit + 1


def _parse(schema: type[SchemaT], data: SchemaT | Mapping[str, Any]) -> SchemaT:
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic(exc.errors()) from exc


def _check_category(kind: str, category: str) -> None:
    if not is_valid_category(kind, category):
        allowed = ", ".join(categories_for(kind))
        raise ValidationError.single(
            "category", f"Invalid category for {kind}. Valid categories: {allowed}"
        )


def _column_value(value: Any) -> Any:
    return value.value if isinstance(value, TransactionKind) else value


class TransactionService:
    """Service layer for transaction operations."""

    def __init__(self, db: AsyncSession):
        """Initialize transaction service with database session.

        Args:
            db: Database session
        """
        self.db = db
        self.transaction_repo = TransactionRepository(db)

    async def create_transaction(
        self, user_id: UUID, data: TransactionCreate | Mapping[str, Any]
    ) -> Transaction:
        """Validate and persist a new transaction owned by ``user_id``.

        Raises:
            ValidationError: If any field is missing or out of policy
        """
        payload = _parse(TransactionCreate, data)
        _check_category(payload.kind.value, payload.category)

        transaction = await self.transaction_repo.create(
            Transaction(
                user_id=user_id,
                title=payload.title,
                amount=payload.amount,
                kind=payload.kind.value,
                category=payload.category,
                txn_date=payload.txn_date,
            )
        )
        logger.info(
            "Transaction created",
            extra={"transaction_id": str(transaction.id), "user_id": str(user_id)},
        )
        return transaction

    async def get_transaction(self, user_id: UUID, transaction_id: UUID) -> Transaction:
        """Get one of the user's transactions.

        Raises:
            NotFound: If the id does not exist or belongs to another user
        """
        transaction = await self.transaction_repo.get_by_user(user_id, transaction_id)
        if transaction is None:
            raise NotFound(details={"transaction_id": str(transaction_id)})
        return transaction

    async def list_transactions(
        self,
        user_id: UUID,
        *,
        kind: str | None = None,
        category: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        limit: int | None = None,
        offset: int = 0,
        page: int | None = None,
    ) -> TransactionPage:
        """List the user's transactions, newest first, one page at a time.

        Args:
            kind: "income", "expense" or "all" (case-insensitive)
            category: Case-insensitive substring of the category label
            date_from: Inclusive lower date bound
            date_to: Inclusive upper date bound
            limit: Page size (defaults to settings.default_page_size)
            offset: Records to skip
            page: 1-based page number; overrides ``offset`` when given

        Raises:
            ValidationError: If a filter value is out of range
        """
        filters = self._build_filter(kind, category, date_from, date_to, limit, offset, page)
        items, total = await self.transaction_repo.list_by_user(user_id, filters)
        return TransactionPage(
            items=items, total=total, limit=filters.limit, offset=filters.offset
        )

    @staticmethod
    def _build_filter(
        kind: str | None,
        category: str | None,
        date_from: date | None,
        date_to: date | None,
        limit: int | None,
        offset: int,
        page: int | None,
    ) -> TransactionFilter:
        errors: list[dict[str, str]] = []

        kind_value = kind.strip().lower() if kind else None
        if kind_value == ALL_KINDS:
            kind_value = None
        elif kind_value is not None and kind_value not in _KIND_VALUES:
            errors.append(
                {"field": "kind", "message": "must be one of income, expense, all"}
            )

        if limit is None:
            limit = settings.default_page_size
        if not 1 <= limit <= settings.max_page_size:
            errors.append(
                {"field": "limit", "message": f"must be between 1 and {settings.max_page_size}"}
            )
        if offset < 0:
            errors.append({"field": "offset", "message": "must be zero or greater"})
        if page is not None and page < 1:
            errors.append({"field": "page", "message": "must be 1 or greater"})

        if errors:
            raise ValidationError(errors)

        if page is not None:
            offset = (page - 1) * limit

        return TransactionFilter(
            kind=kind_value,
            category=(category or "").strip() or None,
            date_from=date_from,
            date_to=date_to,
            limit=limit,
            offset=offset,
        )

    async def update_transaction(
        self,
        user_id: UUID,
        transaction_id: UUID,
        data: TransactionUpdate | Mapping[str, Any],
    ) -> Transaction:
        """Apply a partial update to one of the user's transactions.

        The category is always checked against the effective kind, so a
        kind-only change is rejected when the stored category does not fit.

        Raises:
            NotFound: If the id does not exist or belongs to another user
            ValidationError: If a supplied field is out of policy
        """
        payload = _parse(TransactionUpdate, data)
        transaction = await self.get_transaction(user_id, transaction_id)

        changes = {field: _column_value(value) for field, value in payload.changes().items()}
        if not changes:
            return transaction

        if "kind" in changes or "category" in changes:
            _check_category(
                changes.get("kind", transaction.kind),
                changes.get("category", transaction.category),
            )

        for field, value in changes.items():
            setattr(transaction, field, value)

        transaction = await self.transaction_repo.save(transaction)
        logger.info(
            "Transaction updated",
            extra={
                "transaction_id": str(transaction.id),
                "user_id": str(user_id),
                "fields": sorted(changes),
            },
        )
        return transaction

    async def delete_transaction(self, user_id: UUID, transaction_id: UUID) -> dict[str, Any]:
        """Hard delete one of the user's transactions.

        Returns:
            ``{"id", "title"}`` of the removed record

        Raises:
            NotFound: If the id does not exist or belongs to another user
        """
        transaction = await self.get_transaction(user_id, transaction_id)
        removed = {"id": transaction.id, "title": transaction.title}
        await self.transaction_repo.delete(transaction)
        logger.info(
            "Transaction deleted",
            extra={"transaction_id": str(removed["id"]), "user_id": str(user_id)},
        )
        return removed

    async def get_summary(self, user_id: UUID, today: date | None = None) -> Summary:
        """All-time balance for the user, with the current month folded in."""
        transactions = await self.transaction_repo.get_all_by_user(user_id)
        return compute_summary(transactions, today=today)

    async def get_monthly_summary(
        self,
        user_id: UUID,
        year: int | None = None,
        month: int | None = None,
        today: date | None = None,
    ) -> MonthSummary:
        """Summary of one calendar month (defaults to the current one).

        Raises:
            ValidationError: If ``year`` is outside 1..9999 or ``month`` outside 1..12
        """
        today = today or date.today()
        year = today.year if year is None else year
        month = today.month if month is None else month
        if not 1 <= year <= 9999:
            raise ValidationError.single("year", "must be between 1 and 9999")
        try:
            start, end = month_bounds(year, month)
        except ValueError as exc:
            raise ValidationError.single("month", "must be between 1 and 12") from exc

        transactions = await self.transaction_repo.get_by_date_range(user_id, start, end)
        return compute_monthly_summary(transactions, year, month)
