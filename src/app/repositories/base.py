"""Base repository with generic CRUD operations."""
import functools
import logging
from typing import Any, Awaitable, Callable, Generic, Type, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StoreUnavailable
from app.models.base import BaseModel

T = TypeVar("T", bound=BaseModel)
F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

logger = logging.getLogger(__name__)


def translate_store_errors(func: F) -> F:
    """Surface connectivity failures from the database as StoreUnavailable.

    asyncpg raises connection refusals and timeouts as plain OSError
    (TimeoutError included), not wrapped by SQLAlchemy.

    Nothing is retried here; pooling and timeouts belong to the engine.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (OperationalError, InterfaceError, OSError) as exc:
            logger.error(
                "Record store unavailable",
                extra={"operation": func.__qualname__, "error_type": type(exc).__name__},
            )
            raise StoreUnavailable(details={"operation": func.__qualname__}) from exc

    return wrapper  # type: ignore[return-value]


class BaseRepository(Generic[T]):
    """Generic repository providing CRUD operations for any model."""

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    @translate_store_errors
    async def get_by_id(self, id: UUID) -> T | None:
        """Get a single record by ID."""
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    @translate_store_errors
    async def create(self, obj: T) -> T:
        """Create a new record."""
        self.db.add(obj)
        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    @translate_store_errors
    async def save(self, obj: T) -> T:
        """Commit pending changes on an already-loaded record."""
        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    @translate_store_errors
    async def delete(self, obj: T) -> None:
        """Hard delete a loaded record."""
        await self.db.delete(obj)
        await self.db.commit()
