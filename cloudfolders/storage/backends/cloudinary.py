"""Cloudinary blob store over the REST upload API.

Uploads are signed: SHA-1 over the alphabetically sorted upload
parameters joined as ``k=v&...`` followed by the API secret.
"""

from __future__ import annotations

import hashlib
import logging
import time

import httpx

from cloudfolders.errors import UpstreamStorageError
from cloudfolders.storage.backends.base import BlobStore

logger = logging.getLogger(__name__)

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"


def sign_params(params: dict[str, str], api_secret: str) -> str:
    """Compute a Cloudinary request signature."""
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] != "")
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryBlobStore(BlobStore):
    """Uploads to Cloudinary and returns the asset's ``secure_url``."""

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "cloudfolders",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.timeout = timeout
        self._transport = transport

    @property
    def upload_url(self) -> str:
        return f"{CLOUDINARY_API_BASE}/{self.cloud_name}/auto/upload"

    async def upload(self, key: str, data: bytes, content_type: str | None = None) -> str:
        """Upload bytes; ``key`` without extension becomes the public id."""
        public_id = key.rsplit(".", 1)[0]
        params = {
            "folder": self.folder,
            "public_id": public_id,
            "timestamp": str(int(time.time())),
        }
        form = {
            **params,
            "api_key": self.api_key,
            "signature": sign_params(params, self.api_secret),
        }
        files = {"file": (key.rsplit("/", 1)[-1], data, content_type or "application/octet-stream")}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.upload_url, data=form, files=files)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Cloudinary rejected upload {key}: {e.response.status_code}")
            raise UpstreamStorageError(
                "Blob store rejected the upload",
                key=key,
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Cloudinary upload failed for {key}: {e}")
            raise UpstreamStorageError("Blob store transfer failed", key=key) from e

        url = payload.get("secure_url") or payload.get("url")
        if not url:
            raise UpstreamStorageError("Blob store returned no URL", key=key)
        return url
