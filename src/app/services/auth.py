"""Authentication service: registration, login, and credential resolution."""

import logging
from uuid import UUID

from jose import JWTError

from app.core.exceptions import (
    AccountDisabled,
    EmailAlreadyRegistered,
    InvalidCredentials,
    Unauthorized,
)
from app.core.security import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    get_user_id_from_token,
    hash_password,
    verify_password,
)
from app.models.user import User
from app.repositories.user import UserRepository
from app.schemas.auth import TokenPair

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, user_repo: UserRepository):
        """
        Initialize authentication service.

        Args:
            user_repo: User repository for database operations
        """
        self.user_repo = user_repo

    async def register(self, email: str, password: str, full_name: str) -> User:
        """
        Register a new user.

        Raises:
            EmailAlreadyRegistered: If email already exists
        """
        if await self.user_repo.email_exists(email):
            raise EmailAlreadyRegistered()

        user = await self.user_repo.create(
            User(
                email=UserRepository.normalize_email(email),
                password_hash=hash_password(password),
                full_name=full_name.strip(),
            )
        )
        logger.info("User registered", extra={"user_id": str(user.id)})
        return user

    async def login(self, email: str, password: str) -> TokenPair:
        """
        Authenticate user and return JWT tokens.

        Raises:
            InvalidCredentials: If the email is unknown or the password is wrong
            AccountDisabled: If the account is deactivated
        """
        user = await self.user_repo.get_by_email(email)
        # Same error for unknown email and wrong password.
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentials()

        if not user.is_active:
            raise AccountDisabled()

        return self.issue_tokens(user.id)

    async def refresh_tokens(self, refresh_token: str) -> TokenPair:
        """
        Generate new token pair using refresh token.

        Raises:
            Unauthorized: If the refresh token is invalid or the user is gone
        """
        user = await self._load_active_user(refresh_token, REFRESH_TOKEN_TYPE)
        return self.issue_tokens(user.id)

    async def resolve(self, credential: str | None) -> UUID:
        """Resolve a bearer credential to the owner id that scopes all data access.

        Raises:
            Unauthorized: If the credential is missing, invalid or expired
            AccountDisabled: If the account is deactivated
        """
        user = await self.authenticate(credential)
        return user.id

    async def authenticate(self, credential: str | None) -> User:
        """Like ``resolve`` but returns the full user record."""
        if not credential:
            raise Unauthorized(details={"reason": "missing credential"})
        return await self._load_active_user(credential, ACCESS_TOKEN_TYPE)

    async def _load_active_user(self, token: str, token_type: str) -> User:
        try:
            user_id = get_user_id_from_token(token, expected_type=token_type)
        except (JWTError, ValueError) as exc:
            raise Unauthorized(details={"reason": "invalid token"}) from exc

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise Unauthorized(details={"reason": "unknown user"})

        if not user.is_active:
            raise AccountDisabled()

        return user

    @staticmethod
    def issue_tokens(user_id: UUID) -> TokenPair:
        """Mint an access and a refresh token for the user."""
        return TokenPair(
            access_token=create_access_token(user_id),
            refresh_token=create_refresh_token(user_id),
        )
