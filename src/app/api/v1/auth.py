"""Authentication endpoints for user registration, login, and token management."""

from fastapi import APIRouter, Depends, status

from app.api.deps import get_auth_service, get_current_user
from app.models.user import User
from app.schemas.auth import (
    LoginRequest,
    RefreshRequest,
    RegisterResponse,
    TokenPair,
    UserRegister,
    UserResponse,
)
from app.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create a new user account and sign it in, returning the profile and JWT tokens.",
)
async def register(
    data: UserRegister,
    auth_service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    """
    Register a new user account and issue its first token pair.

    Raises:
        400: Email already registered, or validation error
    """
    user = await auth_service.register(
        email=data.email,
        password=data.password,
        full_name=data.full_name,
    )
    tokens = auth_service.issue_tokens(user.id)
    return RegisterResponse(
        **UserResponse.model_validate(user).model_dump(),
        **tokens.model_dump(),
    )


@router.post(
    "/login",
    response_model=TokenPair,
    summary="User login",
    description="Authenticate with email and password to receive JWT tokens.",
)
async def login(
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenPair:
    """
    Authenticate user and return an access and a refresh token.

    Raises:
        401: Invalid credentials
        403: User account deactivated
    """
    return await auth_service.login(email=data.email, password=data.password)


@router.post(
    "/refresh",
    response_model=TokenPair,
    summary="Refresh access token",
    description="Get new token pair using a valid refresh token.",
)
async def refresh(
    data: RefreshRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenPair:
    return await auth_service.refresh_tokens(data.refresh_token)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
    description="Get authenticated user's profile information.",
)
async def get_me(
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    return UserResponse.model_validate(current_user)
