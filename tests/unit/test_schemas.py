"""Tests for API request schemas.

Tests:
    - CreateFolderRequest root sentinels and aliases
    - DeleteFileRequest optional identifiers
    - ManualFileRequest required reference
    - RegisterRequest password confirmation
"""

import pytest
from pydantic import ValidationError

from cloudfolders.api.v1.schemas import (
    CreateFolderRequest,
    DeleteFileRequest,
    DeleteFolderRequest,
    ManualFileRequest,
)
from cloudfolders.auth.schemas import RegisterRequest


@pytest.mark.fast
class TestCreateFolderRequest:
    """Tests for CreateFolderRequest schema."""

    @pytest.mark.parametrize("sentinel", [None, "", "/", " / "])
    def test_root_sentinels(self, sentinel):
        request = CreateFolderRequest.model_validate({"name": "A", "folderId": sentinel})
        assert request.folder_id is None

    def test_numeric_string(self):
        request = CreateFolderRequest.model_validate({"name": "A", "folderId": "12"})
        assert request.folder_id == 12

    def test_snake_case_name(self):
        request = CreateFolderRequest(name="A", folder_id=3)
        assert request.folder_id == 3

    def test_rejects_garbage_parent(self):
        with pytest.raises(ValidationError):
            CreateFolderRequest.model_validate({"name": "A", "folderId": "abc"})

    def test_requires_name(self):
        with pytest.raises(ValidationError):
            CreateFolderRequest.model_validate({"name": ""})


@pytest.mark.fast
class TestFileRequests:
    """Tests for the file request bodies."""

    def test_delete_file_identifiers_optional(self):
        request = DeleteFileRequest.model_validate({})
        assert request.file_id is None
        assert request.file_name is None

    def test_delete_file_aliases(self):
        request = DeleteFileRequest.model_validate({"fileId": 4, "fileName": "a.png"})
        assert request.file_id == 4
        assert request.file_name == "a.png"

    def test_manual_file_requires_reference(self):
        with pytest.raises(ValidationError):
            ManualFileRequest.model_validate({"name": "a.pdf"})

    def test_delete_folder_requires_id(self):
        with pytest.raises(ValidationError):
            DeleteFolderRequest.model_validate({})


@pytest.mark.fast
class TestRegisterRequest:
    """Tests for RegisterRequest schema."""

    def test_strips_username(self):
        request = RegisterRequest(username=" carol ", password="pw", confirm_password="pw")
        assert request.username == "carol"

    def test_password_mismatch(self):
        with pytest.raises(ValidationError, match="Passwords do not match"):
            RegisterRequest(username="carol", password="pw", confirm_password="other")

    def test_whitespace_username(self):
        with pytest.raises(ValidationError):
            RegisterRequest(username="   ", password="pw", confirm_password="pw")
