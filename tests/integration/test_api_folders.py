"""Integration tests for the folder API.

Tests:
    - Authentication requirement
    - Create folders (root sentinels, nested, validation, conflicts)
    - Path resolution and listing
    - Delete with cascade and ownership checks
"""

import pytest

API = "/api/v1/folders"


async def mkdir(client, headers, name, parent=None):
    body = {"name": name}
    if parent is not None:
        body["folderId"] = parent
    response = await client.post(API, json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.integration
class TestAuthentication:
    @pytest.mark.asyncio
    async def test_requires_credentials(self, test_client):
        response = await test_client.get(API)
        assert response.status_code == 401
        assert response.json()["error"] == "Authentication required"

    @pytest.mark.asyncio
    async def test_rejects_garbage_token(self, test_client):
        response = await test_client.get(API, headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401


@pytest.mark.integration
class TestCreateFolder:
    """Tests for POST /api/v1/folders."""

    @pytest.mark.asyncio
    async def test_create_root(self, test_client, auth_headers):
        data = await mkdir(test_client, auth_headers, "Reports")

        assert data["name"] == "Reports"
        assert data["slug"] == "reports"
        assert data["path"] == "Reports"
        assert data["parent_id"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sentinel", ["", "/", None])
    async def test_root_sentinels(self, test_client, auth_headers, sentinel):
        response = await test_client.post(
            API, json={"name": "Top", "folderId": sentinel}, headers=auth_headers
        )
        assert response.status_code == 201
        assert response.json()["parent_id"] is None

    @pytest.mark.asyncio
    async def test_create_nested(self, test_client, auth_headers):
        reports = await mkdir(test_client, auth_headers, "Reports")
        year = await mkdir(test_client, auth_headers, "2024", reports["id"])
        q1 = await mkdir(test_client, auth_headers, "Q1", str(year["id"]))

        assert year["path"] == "Reports/2024"
        assert q1["path"] == "Reports/2024/Q1"
        assert q1["parent_id"] == year["id"]

    @pytest.mark.asyncio
    async def test_non_numeric_parent(self, test_client, auth_headers):
        response = await test_client.post(
            API, json={"name": "X", "folderId": "abc"}, headers=auth_headers
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_parent(self, test_client, auth_headers):
        response = await test_client.post(
            API, json={"name": "Orphan", "folderId": 999}, headers=auth_headers
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "NotFoundError"

    @pytest.mark.asyncio
    async def test_duplicate(self, test_client, auth_headers):
        await mkdir(test_client, auth_headers, "Reports")
        response = await test_client.post(API, json={"name": "reports"}, headers=auth_headers)

        assert response.status_code == 409
        assert "already exists" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_name_too_long(self, test_client, auth_headers):
        response = await test_client.post(API, json={"name": "x" * 31}, headers=auth_headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_blank_name(self, test_client, auth_headers):
        response = await test_client.post(API, json={"name": "   "}, headers=auth_headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_inside_foreign_folder(self, test_client, auth_headers, other_auth_headers):
        reports = await mkdir(test_client, auth_headers, "Reports")
        response = await test_client.post(
            API, json={"name": "Mine", "folderId": reports["id"]}, headers=other_auth_headers
        )
        assert response.status_code == 403


@pytest.mark.integration
class TestResolveAndList:
    """Tests for GET /api/v1/folders and GET /api/v1/folders/{path}."""

    @pytest.mark.asyncio
    async def test_root_listing(self, test_client, auth_headers, other_auth_headers):
        a = await mkdir(test_client, auth_headers, "A")
        await mkdir(test_client, auth_headers, "B")
        await mkdir(test_client, auth_headers, "Inner", a["id"])
        await mkdir(test_client, other_auth_headers, "C")

        response = await test_client.get(API, headers=auth_headers)
        assert response.status_code == 200
        assert [f["name"] for f in response.json()["folders"]] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_resolve_nested_path(self, test_client, auth_headers):
        reports = await mkdir(test_client, auth_headers, "Reports")
        year = await mkdir(test_client, auth_headers, "2024", reports["id"])
        await mkdir(test_client, auth_headers, "Q1", year["id"])
        await mkdir(test_client, auth_headers, "Q2", year["id"])

        response = await test_client.get(f"{API}/Reports/2024", headers=auth_headers)
        assert response.status_code == 200

        data = response.json()
        assert data["folder"]["id"] == year["id"]
        assert [(e["kind"], e["name"], e["path"]) for e in data["contents"]] == [
            ("folder", "Q1", "Reports/2024/Q1"),
            ("folder", "Q2", "Reports/2024/Q2"),
        ]

    @pytest.mark.asyncio
    async def test_resolve_encoded_path(self, test_client, auth_headers):
        folder = await mkdir(test_client, auth_headers, "Tax Returns")

        response = await test_client.get(f"{API}/Tax%20Returns", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["folder"]["id"] == folder["id"]

    @pytest.mark.asyncio
    async def test_resolve_name_with_percent(self, test_client, auth_headers):
        folder = await mkdir(test_client, auth_headers, "50% off")

        response = await test_client.get(f"{API}/50%25%20off", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["folder"]["id"] == folder["id"]

    @pytest.mark.asyncio
    async def test_percent_escape_in_name(self, test_client, auth_headers):
        response = await test_client.post(API, json={"name": "Q1%202024"}, headers=auth_headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_path(self, test_client, auth_headers):
        await mkdir(test_client, auth_headers, "Reports")

        response = await test_client.get(f"{API}/Reports/2099", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "Folder not found"

    @pytest.mark.asyncio
    async def test_foreign_folder(self, test_client, auth_headers, other_auth_headers):
        await mkdir(test_client, auth_headers, "Private")

        response = await test_client.get(f"{API}/Private", headers=other_auth_headers)
        assert response.status_code == 403


@pytest.mark.integration
class TestDeleteFolder:
    """Tests for POST /api/v1/folders/delete."""

    @pytest.mark.asyncio
    async def test_cascade(self, test_client, auth_headers):
        reports = await mkdir(test_client, auth_headers, "Reports")
        await mkdir(test_client, auth_headers, "2024", reports["id"])
        await test_client.post(
            f"{API}/Reports/2024/files/manual",
            json={"name": "scan.png", "physicalRef": "https://cdn/scan.png"},
            headers=auth_headers,
        )

        response = await test_client.post(
            f"{API}/delete", json={"folderId": reports["id"]}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json() == {"deleted": True, "id": reports["id"]}

        for path in ("Reports", "Reports/2024"):
            response = await test_client.get(f"{API}/{path}", headers=auth_headers)
            assert response.status_code == 404

        # Slugs of deleted entries are free again
        again = await mkdir(test_client, auth_headers, "2024")
        assert again["path"] == "2024"
        assert again["parent_id"] is None

    @pytest.mark.asyncio
    async def test_foreign_delete(self, test_client, auth_headers, other_auth_headers):
        reports = await mkdir(test_client, auth_headers, "Reports")

        response = await test_client.post(
            f"{API}/delete", json={"folderId": reports["id"]}, headers=other_auth_headers
        )
        assert response.status_code == 403

        response = await test_client.get(f"{API}/Reports", headers=auth_headers)
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_missing_folder(self, test_client, auth_headers):
        response = await test_client.post(
            f"{API}/delete", json={"folderId": 12345}, headers=auth_headers
        )
        assert response.status_code == 404
