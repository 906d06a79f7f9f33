"""Auth module: passwords, session tokens and share links."""

from cloudfolders.auth.dependencies import get_current_principal, require_owner_session
from cloudfolders.auth.jwt_handler import (
    Principal,
    TokenScope,
    create_access_token,
    create_share_session_token,
    decode_token,
)
from cloudfolders.auth.passwords import hash_password, verify_password
from cloudfolders.auth.share import (
    IssuedShare,
    ShareGrant,
    issue_share_token,
    resolve_share_token,
)

__all__ = [
    "IssuedShare",
    "Principal",
    "ShareGrant",
    "TokenScope",
    "create_access_token",
    "create_share_session_token",
    "decode_token",
    "get_current_principal",
    "hash_password",
    "issue_share_token",
    "require_owner_session",
    "resolve_share_token",
    "verify_password",
]
