"""Share link endpoints.

A share link grants read access to the issuing user's whole tree until
it expires. Redeeming it sets a read-only session cookie.

Endpoints:
    POST /api/v1/share           Issue a share link
    GET  /api/v1/share/{token}   Redeem a share link
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from cloudfolders.auth.dependencies import require_owner_session
from cloudfolders.auth.jwt_handler import Principal, create_share_session_token
from cloudfolders.auth.schemas import ShareResponse
from cloudfolders.auth.share import issue_share_token, resolve_share_token
from cloudfolders.config import get_settings
from cloudfolders.database import get_db_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/share", tags=["share"])

LANDING_PATH = "/api/v1/folders"


@router.post("", response_model=ShareResponse, status_code=status.HTTP_201_CREATED)
async def create_share_link(
    principal: Principal = Depends(require_owner_session),
    session: AsyncSession = Depends(get_db_session),
) -> ShareResponse:
    """Issue a share link for the caller's tree."""
    issued = await issue_share_token(session, principal.user_id)
    await session.commit()
    return ShareResponse(token=issued.token, url=issued.url, expires_at=issued.expires_at)


@router.get("/{token}")
async def redeem_share_link(
    token: str,
    session: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    """Resolve a share token and start a read-only session for its owner's tree.

    Raises:
        ExpiredOrInvalidTokenError: Unknown or expired token.
    """
    grant = await resolve_share_token(session, token)
    settings = get_settings()

    response = RedirectResponse(LANDING_PATH, status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_share_session_token(grant.user.id, grant.expires_at),
        expires=grant.expires_at,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    logger.info(f"Share link redeemed for user {grant.user.id}")
    return response
