"""FastAPI dependency injection for authentication and database."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.models.user import User
from app.repositories.user import UserRepository
from app.services.auth import AuthService
from app.services.transaction import TransactionService

# auto_error=False so a missing header falls through to the cookie and then
# to our own Unauthorized (401) instead of FastAPI's default response.
security = HTTPBearer(auto_error=False)

TOKEN_COOKIE = "token"


async def get_user_repository(
    db: AsyncSession = Depends(get_db),
) -> UserRepository:
    """Get user repository instance."""
    return UserRepository(db)


async def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
) -> AuthService:
    """Get authentication service instance."""
    return AuthService(user_repo)


async def get_transaction_service(
    db: AsyncSession = Depends(get_db),
) -> TransactionService:
    """Get transaction service instance bound to the request session."""
    return TransactionService(db)


def _credential(
    request: Request, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    # The bearer header wins; the cookie is a fallback for browser clients.
    if credentials:
        return credentials.credentials
    return request.cookies.get(TOKEN_COOKIE)


async def get_owner_id(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth_service: AuthService = Depends(get_auth_service),
) -> UUID:
    """
    Resolve the request's credential to the owner id that scopes data access.

    Raises:
        Unauthorized: If the credential is missing, invalid, or expired
        AccountDisabled: If the user is deactivated
    """
    owner_id = await auth_service.resolve(_credential(request, credentials))
    request.state.user_id = str(owner_id)
    return owner_id


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Resolve the request's credential to the full user record.

    Raises:
        Unauthorized: If the credential is missing, invalid, or expired
        AccountDisabled: If the user is deactivated
    """
    user = await auth_service.authenticate(_credential(request, credentials))
    request.state.user_id = str(user.id)
    return user
