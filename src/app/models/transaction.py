"""Transaction model: one dated, typed, categorized amount owned by a user."""
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel


class Transaction(BaseModel):
    """A single income or expense record.

    ``user_id`` is the owner. It is set once at creation and every query in
    the repository layer filters on it.
    """

    __tablename__ = "transactions"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    kind: Mapped[str] = mapped_column(String(10), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    txn_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
        CheckConstraint("kind IN ('income', 'expense')", name="ck_transactions_kind"),
        Index("ix_transactions_user_id_kind", "user_id", "kind"),
        Index("ix_transactions_user_id_txn_date", "user_id", "txn_date"),
        Index("ix_transactions_user_id_category", "user_id", "category"),
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="transactions")

    def __repr__(self) -> str:
        return f"<Transaction(id={self.id}, kind={self.kind}, amount={self.amount})>"
