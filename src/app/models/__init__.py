"""Database models."""
from app.models.user import User
from app.models.transaction import Transaction

__all__ = ["User", "Transaction"]
