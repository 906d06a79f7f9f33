"""FastAPI dependencies for authentication.

A request authenticates with ``Authorization: Bearer <jwt>`` or, after
redeeming a share link, with the session cookie. Share-scoped principals
may read; mutating routes depend on require_owner_session.
"""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from cloudfolders.auth.jwt_handler import Principal, decode_token
from cloudfolders.config import get_settings
from cloudfolders.database import get_db_session
from cloudfolders.models_auth import User

logger = logging.getLogger(__name__)


def _extract_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[len("Bearer "):]
    return request.cookies.get(get_settings().SESSION_COOKIE_NAME)


async def get_current_principal(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
) -> Principal:
    """Resolve the calling principal.

    Raises:
        HTTPException 401: Missing, invalid or expired credentials, or the
            user no longer exists.
    """
    token = _extract_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        principal = decode_token(token)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await session.get(User, principal.user_id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or deactivated",
        )

    return principal


async def require_owner_session(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """Reject share-link sessions for operations that change the tree.

    Raises:
        HTTPException 403: The caller is acting through a share link.
    """
    if principal.is_shared:
        logger.warning(f"Share session for user {principal.user_id} attempted a mutation")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Shared sessions are read-only",
        )
    return principal
