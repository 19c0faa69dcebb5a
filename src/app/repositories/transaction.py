"""Transaction repository with owner-scoped filtering queries.

Every query built here starts from ``_owned(user_id)``; there is no method
that can read or modify a transaction without naming its owner.
"""
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.transaction import Transaction
from app.repositories.base import BaseRepository, translate_store_errors


@dataclass(frozen=True)
class TransactionFilter:
    """Already-validated list filter."""

    kind: str | None = None
    category: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    limit: int = 100
    offset: int = 0


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model with user-scoped security."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    @staticmethod
    def _owned(user_id: UUID) -> Select:
        return select(Transaction).where(Transaction.user_id == user_id)

    @staticmethod
    def _newest_first(query: Select) -> Select:
        return query.order_by(Transaction.txn_date.desc(), Transaction.created_at.desc())

    @translate_store_errors
    async def get_by_user(self, user_id: UUID, transaction_id: UUID) -> Transaction | None:
        """Get a transaction only if it belongs to the specified user."""
        result = await self.db.execute(
            self._owned(user_id).where(Transaction.id == transaction_id)
        )
        return result.scalar_one_or_none()

    @translate_store_errors
    async def list_by_user(
        self, user_id: UUID, filters: TransactionFilter
    ) -> tuple[list[Transaction], int]:
        """Get one page of a user's transactions plus the unpaginated total."""
        query = self._owned(user_id)

        if filters.kind:
            query = query.where(Transaction.kind == filters.kind)

        if filters.category:
            query = query.where(
                Transaction.category.icontains(filters.category, autoescape=True)
            )

        if filters.date_from:
            query = query.where(Transaction.txn_date >= filters.date_from)

        if filters.date_to:
            query = query.where(Transaction.txn_date <= filters.date_to)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.db.execute(count_query)).scalar() or 0

        query = self._newest_first(query).offset(filters.offset).limit(filters.limit)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    @translate_store_errors
    async def get_all_by_user(self, user_id: UUID) -> list[Transaction]:
        """Get every transaction a user owns, newest first."""
        result = await self.db.execute(self._newest_first(self._owned(user_id)))
        return list(result.scalars().all())

    @translate_store_errors
    async def get_by_date_range(
        self, user_id: UUID, start_date: date, end_date: date
    ) -> list[Transaction]:
        """Get transactions dated within [start_date, end_date], newest first."""
        result = await self.db.execute(
            self._newest_first(
                self._owned(user_id).where(
                    Transaction.txn_date >= start_date,
                    Transaction.txn_date <= end_date,
                )
            )
        )
        return list(result.scalars().all())
