"""User model for authentication and data ownership."""
from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel


class User(BaseModel):
    """An authenticated principal. Owns every transaction it creates."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Never loaded through the user; queries go through the owner id.
    # ON DELETE CASCADE in the database removes rows, SQLAlchemy never NULLs FKs.
    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction", back_populates="user", lazy="raise", passive_deletes="all"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, is_active={self.is_active})>"
