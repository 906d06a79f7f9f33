"""Storage service: accepts uploads and hands back physical references.

Examples:
    >>> from cloudfolders.storage.service import BlobStorageService
    >>> service = BlobStorageService.from_config(config)
    >>> stored = await service.store_upload("scan.png", data, "image/png")
    >>> stored.physical_ref
    'http://localhost:8000/blobs/2026/10/scan_1a2b3c4d.png'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath

from cloudfolders.config import BlobBackend
from cloudfolders.errors import InvalidParametersError
from cloudfolders.storage.backends.base import BlobStore
from cloudfolders.storage.backends.cloudinary import CloudinaryBlobStore
from cloudfolders.storage.backends.local import LocalBlobStore
from cloudfolders.storage.config import StorageConfig
from cloudfolders.storage.naming import generate_blob_key, split_extension

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredBlob:
    """Result of a successful upload."""

    original_name: str
    physical_ref: str
    size_bytes: int


class BlobStorageService:
    """Validates uploads and forwards them to a blob store.

    Attributes:
        config: Storage configuration.
        backend: Blob store for I/O.
    """

    def __init__(self, config: StorageConfig, backend: BlobStore | None = None) -> None:
        self.config = config
        self.backend = backend or LocalBlobStore(config.local_root, config.public_base_url)

    @classmethod
    def from_config(cls, config: StorageConfig) -> "BlobStorageService":
        """Create a service with the backend the config selects."""
        if config.backend == BlobBackend.CLOUDINARY:
            backend: BlobStore = CloudinaryBlobStore(
                cloud_name=config.cloudinary_cloud_name or "",
                api_key=config.cloudinary_api_key or "",
                api_secret=config.cloudinary_api_secret or "",
                folder=config.cloudinary_folder,
            )
        else:
            backend = LocalBlobStore(config.local_root, config.public_base_url)
        return cls(config=config, backend=backend)

    def validate_upload(self, filename: str, size_bytes: int) -> str:
        """Check name, extension and size; return the bare file name.

        Raises:
            InvalidParametersError: Missing name, empty file, disallowed
                extension, or too large.
        """
        # Some clients send a full client-side path
        name = PurePosixPath((filename or "").replace("\\", "/")).name.strip()
        if not name:
            raise InvalidParametersError("No file uploaded")
        if size_bytes == 0:
            raise InvalidParametersError("Uploaded file is empty", filename=name)
        if size_bytes > self.config.max_upload_bytes:
            raise InvalidParametersError(
                f"File exceeds the {self.config.max_upload_bytes} byte limit",
                filename=name,
                size_bytes=size_bytes,
            )

        allowed = self.config.allowed_extensions
        _, ext = split_extension(name)
        if allowed and ext not in allowed:
            raise InvalidParametersError(
                f"File type not allowed. Allowed: {', '.join(allowed)}",
                filename=name,
            )
        return name

    async def store_upload(
        self,
        filename: str,
        data: bytes,
        content_type: str | None = None,
    ) -> StoredBlob:
        """Validate and upload a file.

        Args:
            filename: Original client file name.
            data: File content.
            content_type: MIME type reported by the client.

        Returns:
            StoredBlob with the original name and retrieval URL.

        Raises:
            InvalidParametersError: Upload rejected before transfer.
            UpstreamStorageError: Transfer failed.
        """
        name = self.validate_upload(filename, len(data))
        key = generate_blob_key(name)
        physical_ref = await self.backend.upload(key, data, content_type)

        logger.info(f"Blob stored: {name!r} -> {physical_ref} ({len(data)} bytes)")
        return StoredBlob(original_name=name, physical_ref=physical_ref, size_bytes=len(data))
