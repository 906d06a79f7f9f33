"""Tests for the command-line client.

HTTP calls are intercepted; no server is started.
"""

import httpx
import pytest
from click.testing import CliRunner

from cloudfolders import cli


class FakeHTTP:
    """Records requests and replies with canned responses."""

    def __init__(self, response: httpx.Response):
        self.response = response
        self.calls = []

    def __call__(self, method, url, headers=None, timeout=None, **kwargs):
        self.calls.append((method, url, headers or {}, kwargs))
        self.response.request = httpx.Request(method, url)
        return self.response


@pytest.fixture
def runner():
    return CliRunner()


def _patch(monkeypatch, status_code=200, json=None):
    fake = FakeHTTP(httpx.Response(status_code, json=json if json is not None else {}))
    monkeypatch.setattr(cli.httpx, "request", fake)
    return fake


class TestCommands:
    def test_mkdir(self, runner, monkeypatch):
        fake = _patch(monkeypatch, 201, {"id": 3, "path": "Reports/2024"})

        result = runner.invoke(cli.main, ["mkdir", "2024", "--parent", "1", "--token", "t0k"])

        assert result.exit_code == 0, result.output
        assert "Reports/2024" in result.output
        method, url, headers, kwargs = fake.calls[0]
        assert method == "POST"
        assert url.endswith("/api/v1/folders")
        assert headers["Authorization"] == "Bearer t0k"
        assert kwargs["json"] == {"name": "2024", "folderId": 1}

    def test_ls_path_is_quoted(self, runner, monkeypatch):
        fake = _patch(
            monkeypatch,
            200,
            {"folder": {"id": 1, "path": "Tax Returns"}, "contents": []},
        )

        result = runner.invoke(cli.main, ["ls", "Tax Returns", "--token", "t0k"])

        assert result.exit_code == 0, result.output
        assert fake.calls[0][1].endswith("/api/v1/folders/Tax%20Returns")

    def test_token_from_environment(self, runner, monkeypatch):
        fake = _patch(monkeypatch, 200, {"folders": []})

        result = runner.invoke(cli.main, ["ls"], env={"CLOUDFOLDERS_TOKEN": "from-env"})

        assert result.exit_code == 0, result.output
        assert fake.calls[0][2]["Authorization"] == "Bearer from-env"

    def test_missing_token(self, runner, monkeypatch):
        monkeypatch.delenv("CLOUDFOLDERS_TOKEN", raising=False)

        result = runner.invoke(cli.main, ["ls"])

        assert result.exit_code == 1
        assert "Not logged in" in result.output

    def test_server_error_message(self, runner, monkeypatch):
        _patch(monkeypatch, 409, {"error": "A folder named like this already exists."})

        result = runner.invoke(cli.main, ["mkdir", "Reports", "--token", "t0k"])

        assert result.exit_code == 1
        assert "409" in result.output
        assert "already exists" in result.output

    def test_rm_requires_identifier(self, runner, monkeypatch):
        _patch(monkeypatch)

        result = runner.invoke(cli.main, ["rm", "A/B", "--token", "t0k"])

        assert result.exit_code == 1
        assert "--name or --id" in result.output
