"""Share links: issue and redeem capability tokens.

A share token is 128 bits from ``secrets``, hex encoded, handed to the
issuer once. Only its SHA-256 hash is stored. Tokens expire after
SHARE_TOKEN_TTL_HOURS and are never revoked or swept here.

Redeeming never reveals why a token was refused: unknown, expired and
deactivated-owner tokens all raise the same ExpiredOrInvalidTokenError.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cloudfolders.config import get_settings
from cloudfolders.errors import ExpiredOrInvalidTokenError, NotFoundError
from cloudfolders.models_auth import ShareToken, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedShare:
    """A freshly minted share link."""

    token: str
    url: str
    expires_at: datetime


@dataclass(frozen=True)
class ShareGrant:
    """Scoped, time-boxed access to ``user``'s tree."""

    user: User
    expires_at: datetime


def hash_share_token(token: str) -> str:
    """SHA-256 hash a share token string."""
    return hashlib.sha256(token.encode()).hexdigest()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


async def issue_share_token(
    session: AsyncSession,
    user_id: str,
    *,
    now: datetime | None = None,
) -> IssuedShare:
    """Mint a share token for ``user_id``.

    Args:
        session: DB session (caller must commit).
        user_id: Owner whose tree becomes reachable.
        now: Clock override.

    Returns:
        IssuedShare with the raw token, its URL and expiry.

    Raises:
        NotFoundError: If the user does not exist.
    """
    settings = get_settings()
    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError("User does not exist", user_id=user_id)

    now = _as_utc(now) if now else datetime.now(timezone.utc)
    expires_at = now + timedelta(hours=settings.SHARE_TOKEN_TTL_HOURS)
    raw_token = secrets.token_hex(settings.SHARE_TOKEN_BYTES)

    session.add(
        ShareToken(
            token_hash=hash_share_token(raw_token),
            user_id=user.id,
            expires_at=expires_at,
        )
    )
    await session.flush()

    logger.info(f"Share token issued for user {user.id}, expires {expires_at.isoformat()}")
    return IssuedShare(
        token=raw_token,
        url=f"{settings.share_url_prefix}/{raw_token}",
        expires_at=expires_at,
    )


async def resolve_share_token(
    session: AsyncSession,
    token: str,
    *,
    now: datetime | None = None,
) -> ShareGrant:
    """Redeem a share token.

    Args:
        session: DB session.
        token: Raw token from the share URL.
        now: Clock override.

    Returns:
        ShareGrant for the issuing user. Establishing a session from it is
        the caller's job.

    Raises:
        ExpiredOrInvalidTokenError: Unknown token, expired token, or the
            owner is gone or deactivated.
    """
    now = _as_utc(now) if now else datetime.now(timezone.utc)

    result = await session.execute(
        select(ShareToken).where(ShareToken.token_hash == hash_share_token(token))
    )
    share = result.scalar_one_or_none()
    if share is None:
        logger.warning("Share token redemption refused")
        raise ExpiredOrInvalidTokenError()

    expires_at = _as_utc(share.expires_at)
    if now > expires_at:
        logger.warning("Share token redemption refused")
        raise ExpiredOrInvalidTokenError()

    user = await session.get(User, share.user_id)
    if user is None or not user.is_active:
        logger.warning("Share token redemption refused")
        raise ExpiredOrInvalidTokenError()

    return ShareGrant(user=user, expires_at=expires_at)
