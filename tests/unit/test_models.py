"""Unit tests for database models and the error hierarchy.

Run with:
    pytest tests/unit/test_models.py -v
    pytest tests/unit/test_models.py -v -m fast
"""

from datetime import datetime, timezone

import pytest

from cloudfolders.errors import CloudFoldersError, UpstreamStorageError
from cloudfolders.models import File, Folder, utcnow


@pytest.mark.fast
class TestFolder:
    """Tests for Folder model."""

    def test_is_root(self):
        """Test a folder without parent is a root."""
        assert Folder(user_id="u-1", name="A", slug="a", path="A").is_root
        assert not Folder(user_id="u-1", name="B", slug="b", path="A/B", parent_id=1).is_root

    def test_to_dict(self):
        """Test dictionary conversion."""
        created = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        folder = Folder(
            id=7,
            user_id="u-1",
            name="Reports",
            slug="reports",
            path="Reports",
            created_at=created,
        )

        assert folder.to_dict() == {
            "id": 7,
            "name": "Reports",
            "slug": "reports",
            "path": "Reports",
            "parent_id": None,
            "created_at": "2026-01-02T03:04:05+00:00",
        }

    def test_repr(self):
        folder = Folder(id=7, user_id="u-1", name="A", slug="a", path="A")
        assert repr(folder) == "<Folder(id=7, path='A')>"


@pytest.mark.fast
class TestFile:
    """Tests for File model."""

    def test_to_dict_without_timestamp(self):
        """Test unsaved files serialize with no timestamp."""
        file = File(
            id=3,
            folder_id=7,
            name="scan.png",
            slug="scanpng",
            path="A/scan.png",
            physical_ref="https://cdn.example/scan.png",
        )

        data = file.to_dict()
        assert data["path"] == "A/scan.png"
        assert data["physical_ref"] == "https://cdn.example/scan.png"
        assert data["created_at"] is None


@pytest.mark.fast
def test_utcnow_is_aware():
    assert utcnow().tzinfo is not None


@pytest.mark.fast
class TestErrors:
    """Tests for CloudFoldersError serialization."""

    def test_to_dict(self):
        error = UpstreamStorageError("Blob store transfer failed", key="abc", attempt=2)

        assert error.to_dict() == {
            "error_type": "UpstreamStorageError",
            "message": "Blob store transfer failed",
            "context": {"key": "abc", "attempt": "2"},
        }

    def test_subclass_and_repr(self):
        error = UpstreamStorageError("boom")
        assert isinstance(error, CloudFoldersError)
        assert str(error) == "boom"
        assert repr(error) == "UpstreamStorageError: boom"
