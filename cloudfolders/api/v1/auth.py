"""Auth API endpoints: sign-up, sign-in and the current principal.

Endpoints:
    POST /api/v1/auth/register  Create an account
    POST /api/v1/auth/login     Verify credentials, return an access token
    GET  /api/v1/auth/me        Return who the request acts as
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cloudfolders.auth.dependencies import get_current_principal
from cloudfolders.auth.jwt_handler import Principal, create_access_token
from cloudfolders.auth.passwords import hash_password, verify_password
from cloudfolders.auth.schemas import (
    LoginRequest,
    PrincipalResponse,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from cloudfolders.config import get_settings
from cloudfolders.database import get_db_session
from cloudfolders.errors import DuplicateNameError
from cloudfolders.models_auth import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    session: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    """Create an account. Usernames are unique."""
    result = await session.execute(select(User).where(User.username == request.username))
    if result.scalar_one_or_none() is not None:
        raise DuplicateNameError("Username already taken", username=request.username)

    user = User(username=request.username, password_hash=hash_password(request.password))
    session.add(user)
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise DuplicateNameError("Username already taken", username=request.username)

    await session.commit()
    logger.info(f"User registered: {user.id} ({user.username})")
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    """Verify credentials and return a bearer access token."""
    result = await session.execute(select(User).where(User.username == request.username.strip()))
    user = result.scalar_one_or_none()

    if user is None or not user.is_active or not verify_password(request.password, user.password_hash):
        logger.info(f"Failed login for {request.username!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    settings = get_settings()
    return TokenResponse(
        access_token=create_access_token(user.id),
        expires_in=settings.JWT_ACCESS_EXPIRE_MINUTES * 60,
    )


@router.get("/me", response_model=PrincipalResponse)
async def me(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
) -> PrincipalResponse:
    """Return the user and scope behind the current credentials."""
    user = await session.get(User, principal.user_id)
    return PrincipalResponse(
        user=UserResponse.model_validate(user),
        scope=principal.scope.value,
        expires_at=principal.expires_at,
    )
