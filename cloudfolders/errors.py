"""Error hierarchy for tree, file and share operations.

Every public operation raises one of these; the HTTP layer maps them to
status codes in cloudfolders.main.

Hierarchy:
    CloudFoldersError
    ├── NotFoundError               (folder/file/user absent)
    ├── DuplicateNameError          (slug or path collision)
    ├── UnauthorizedError           (ownership mismatch)
    ├── InvalidParametersError      (missing or malformed input)
    ├── ExpiredOrInvalidTokenError  (share token absent or expired)
    └── UpstreamStorageError        (blob store failure)
"""

from __future__ import annotations

from typing import Any


class CloudFoldersError(Exception):
    """Base error. Carries a message plus serializable context."""

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context: dict[str, Any] = context
        self.error_type: str = self.__class__.__name__
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize error to a JSON-compatible dict."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "context": {k: str(v) for k, v in self.context.items()},
        }

    def __repr__(self) -> str:
        return f"{self.error_type}: {self.message}"


class NotFoundError(CloudFoldersError):
    """Folder, file or user does not exist."""


class DuplicateNameError(CloudFoldersError):
    """Slug or path already taken."""


class UnauthorizedError(CloudFoldersError):
    """Caller does not own the entity."""


class InvalidParametersError(CloudFoldersError):
    """Required field missing or value rejected."""


class ExpiredOrInvalidTokenError(CloudFoldersError):
    """Share token unknown or expired.

    Deliberately a single error so callers cannot tell the two apart.
    """

    def __init__(self, message: str = "Share link is invalid or has expired", **context: Any):
        super().__init__(message, **context)


class UpstreamStorageError(CloudFoldersError):
    """Blob store rejected or failed the transfer."""
