"""JWT session tokens.

Access tokens: HS256, short-lived, full owner rights.
Share tokens: HS256, expire together with the share link that minted them,
read-only. Both decode to a Principal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

import jwt

from cloudfolders.config import get_settings

logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"


class TokenScope(str, Enum):
    """What a session token allows."""

    ACCESS = "access"
    SHARE = "share"


@dataclass(frozen=True)
class Principal:
    """The identity a request acts as."""

    user_id: str
    scope: TokenScope
    expires_at: datetime

    @property
    def is_shared(self) -> bool:
        """True when acting through a share link."""
        return self.scope == TokenScope.SHARE


def _encode(user_id: str, scope: TokenScope, expires_at: datetime) -> str:
    settings = get_settings()
    payload = {
        "sub": user_id,
        "iat": datetime.now(timezone.utc),
        "exp": expires_at,
        "type": scope.value,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=_ALGORITHM)


def create_access_token(user_id: str) -> str:
    """Create a short-lived access token for the account owner.

    Args:
        user_id: The user's UUID.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    expires_at = datetime.now(timezone.utc) + timedelta(
        minutes=settings.JWT_ACCESS_EXPIRE_MINUTES
    )
    return _encode(user_id, TokenScope.ACCESS, expires_at)


def create_share_session_token(user_id: str, expires_at: datetime) -> str:
    """Create a read-only session token bounded by a share link's expiry."""
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return _encode(user_id, TokenScope.SHARE, expires_at)


def decode_token(token: str) -> Principal:
    """Decode and validate a session token.

    Args:
        token: The encoded JWT.

    Returns:
        Principal with user id and scope.

    Raises:
        ValueError: If token is invalid, expired or of an unknown type.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise ValueError("Session token has expired")
    except jwt.InvalidTokenError as e:
        raise ValueError(f"Invalid session token: {e}")

    try:
        scope = TokenScope(payload.get("type"))
    except ValueError:
        raise ValueError("Token is not a session token")

    sub = payload.get("sub")
    if not sub:
        raise ValueError("Token missing subject")

    return Principal(
        user_id=sub,
        scope=scope,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
