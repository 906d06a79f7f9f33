"""Abstract base class for blob stores."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BlobStore(ABC):
    """Abstract blob store.

    Implementations accept bytes under a key and hand back an opaque URL
    from which the bytes can be retrieved. Callers never parse that URL.
    """

    @abstractmethod
    async def upload(self, key: str, data: bytes, content_type: str | None = None) -> str:
        """Store bytes.

        Args:
            key: Storage key, unique per upload.
            data: File content.
            content_type: MIME type reported by the client, if any.

        Returns:
            Retrieval URL.

        Raises:
            UpstreamStorageError: If the transfer fails.
        """
