"""Blob store backends."""

from cloudfolders.storage.backends.base import BlobStore
from cloudfolders.storage.backends.cloudinary import CloudinaryBlobStore
from cloudfolders.storage.backends.local import LocalBlobStore

__all__ = ["BlobStore", "CloudinaryBlobStore", "LocalBlobStore"]
