"""User repository for authentication queries."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.base import BaseRepository, translate_store_errors


class UserRepository(BaseRepository[User]):
    """Repository for User model with authentication queries."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    @translate_store_errors
    async def get_by_email(self, email: str) -> User | None:
        """Find user by email address (used for login)."""
        result = await self.db.execute(
            select(User).where(User.email == self.normalize_email(email))
        )
        return result.scalar_one_or_none()

    @translate_store_errors
    async def email_exists(self, email: str) -> bool:
        """Check if email is already registered."""
        result = await self.db.execute(
            select(User.id).where(User.email == self.normalize_email(email))
        )
        return result.scalar_one_or_none() is not None

    async def deactivate(self, user: User) -> User:
        """Soft-disable a user; their credentials stop resolving."""
        user.is_active = False
        return await self.save(user)
