"""Local filesystem blob store using pathlib."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import quote

from cloudfolders.errors import UpstreamStorageError
from cloudfolders.storage.backends.base import BlobStore

logger = logging.getLogger(__name__)

BLOB_ROUTE = "/blobs"


class LocalBlobStore(BlobStore):
    """Writes blobs under ``root``; the app serves them at ``/blobs``."""

    def __init__(self, root: str, public_base_url: str) -> None:
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def url_for(self, key: str) -> str:
        """Public URL of a stored key."""
        return f"{self.public_base_url}{BLOB_ROUTE}/{quote(key)}"

    async def upload(self, key: str, data: bytes, content_type: str | None = None) -> str:
        """Write bytes to ``root/key`` and return the blob URL."""
        p = self.root / key
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_bytes(data)
        except OSError as e:
            logger.error(f"Local blob write failed for {key}: {e}")
            raise UpstreamStorageError("Failed to store file", key=key) from e
        return self.url_for(key)
