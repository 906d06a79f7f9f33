"""Tests for cloudfolders.storage.service module.

Covers:
    - BlobStorageService.validate_upload(): name, size and extension checks
    - BlobStorageService.store_upload(): backend delegation
    - BlobStorageService.from_config(): backend selection
"""

from unittest.mock import AsyncMock

import pytest

from cloudfolders.config import BlobBackend
from cloudfolders.errors import InvalidParametersError, UpstreamStorageError
from cloudfolders.storage import BlobStorageService, StorageConfig
from cloudfolders.storage.backends import CloudinaryBlobStore, LocalBlobStore


@pytest.fixture
def config():
    return StorageConfig(local_root="/tmp/test_blobs", max_upload_bytes=1024)


@pytest.fixture
def mock_backend():
    backend = AsyncMock()
    backend.upload = AsyncMock(return_value="https://cdn.example/2026/10/scan_1a2b3c4d.png")
    return backend


@pytest.fixture
def service(config, mock_backend):
    return BlobStorageService(config=config, backend=mock_backend)


class TestValidateUpload:
    """Tests for BlobStorageService.validate_upload()."""

    def test_accepts_allowed_image(self, service):
        assert service.validate_upload("scan.PNG", 10) == "scan.PNG"

    def test_strips_client_path(self, service):
        assert service.validate_upload("C:\\Users\\me\\scan.jpg", 10) == "scan.jpg"
        assert service.validate_upload("/home/me/scan.jpg", 10) == "scan.jpg"

    def test_missing_name(self, service):
        with pytest.raises(InvalidParametersError, match="No file"):
            service.validate_upload("", 10)

    def test_empty_file(self, service):
        with pytest.raises(InvalidParametersError, match="empty"):
            service.validate_upload("scan.png", 0)

    def test_too_large(self, service):
        with pytest.raises(InvalidParametersError, match="1024 byte limit"):
            service.validate_upload("scan.png", 1025)

    def test_disallowed_extension(self, service):
        with pytest.raises(InvalidParametersError, match="not allowed"):
            service.validate_upload("report.pdf", 10)

    def test_empty_allow_list_accepts_anything(self, mock_backend):
        service = BlobStorageService(
            config=StorageConfig(allowed_extensions=[]), backend=mock_backend
        )
        assert service.validate_upload("report.pdf", 10) == "report.pdf"


class TestStoreUpload:
    """Tests for BlobStorageService.store_upload()."""

    @pytest.mark.asyncio
    async def test_returns_backend_reference(self, service, mock_backend):
        stored = await service.store_upload("scan.png", b"\x89PNG", "image/png")

        assert stored.original_name == "scan.png"
        assert stored.physical_ref == "https://cdn.example/2026/10/scan_1a2b3c4d.png"
        assert stored.size_bytes == 4

        key, data, content_type = mock_backend.upload.await_args.args
        assert key.endswith(".png")
        assert "/scan_" in key
        assert data == b"\x89PNG"
        assert content_type == "image/png"

    @pytest.mark.asyncio
    async def test_rejected_upload_never_reaches_backend(self, service, mock_backend):
        with pytest.raises(InvalidParametersError):
            await service.store_upload("report.pdf", b"%PDF")
        mock_backend.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_backend_failure_propagates(self, service, mock_backend):
        mock_backend.upload.side_effect = UpstreamStorageError("down")
        with pytest.raises(UpstreamStorageError):
            await service.store_upload("scan.png", b"data")


class TestFromConfig:
    def test_local_backend(self):
        service = BlobStorageService.from_config(StorageConfig())
        assert isinstance(service.backend, LocalBlobStore)

    def test_cloudinary_backend(self):
        service = BlobStorageService.from_config(
            StorageConfig(
                backend=BlobBackend.CLOUDINARY,
                cloudinary_cloud_name="demo",
                cloudinary_api_key="key",
                cloudinary_api_secret="secret",
            )
        )
        assert isinstance(service.backend, CloudinaryBlobStore)
        assert service.backend.upload_url.endswith("/demo/auto/upload")
