"""Blob storage package.

Uploaded bytes go to an opaque blob store; the tree only keeps the URL
it returns.

Examples:
    >>> from cloudfolders.storage import BlobStorageService, StorageConfig
    >>> service = BlobStorageService.from_config(StorageConfig())
    >>> stored = await service.store_upload("scan.png", data)
"""

from cloudfolders.storage.config import StorageConfig
from cloudfolders.storage.naming import generate_blob_key, sanitize_slug, split_extension
from cloudfolders.storage.service import BlobStorageService, StoredBlob

__all__ = [
    "BlobStorageService",
    "StorageConfig",
    "StoredBlob",
    "generate_blob_key",
    "sanitize_slug",
    "split_extension",
]
