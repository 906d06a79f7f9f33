"""Storage configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from cloudfolders.config import BlobBackend, Settings


class StorageConfig(BaseModel):
    """Configuration for the blob store.

    Attributes:
        backend: Which blob store receives uploads.
        local_root: Root directory for the local backend.
        public_base_url: Base URL the local backend's blobs are served under.
        allowed_extensions: Accepted upload extensions; empty accepts anything.
        max_upload_bytes: Upload size limit.
    """

    backend: BlobBackend = Field(default=BlobBackend.LOCAL)
    local_root: str = Field(default="./output/blobs", description="Local blob root directory")
    public_base_url: str = Field(default="http://localhost:8000")
    allowed_extensions: list[str] = Field(default_factory=lambda: ["jpg", "jpeg", "png"])
    max_upload_bytes: int = Field(default=10 * 1024 * 1024)
    cloudinary_cloud_name: str | None = None
    cloudinary_api_key: str | None = None
    cloudinary_api_secret: str | None = None
    cloudinary_folder: str = "cloudfolders"

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageConfig":
        """Build the storage config from application settings."""
        return cls(
            backend=settings.BLOB_BACKEND,
            local_root=settings.BLOB_LOCAL_ROOT,
            public_base_url=settings.PUBLIC_BASE_URL,
            allowed_extensions=settings.ALLOWED_UPLOAD_EXTENSIONS,
            max_upload_bytes=settings.MAX_UPLOAD_BYTES,
            cloudinary_cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            cloudinary_api_key=settings.CLOUDINARY_API_KEY,
            cloudinary_api_secret=settings.CLOUDINARY_API_SECRET,
            cloudinary_folder=settings.CLOUDINARY_FOLDER,
        )
