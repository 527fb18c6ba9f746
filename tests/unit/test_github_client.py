"""
Tests unitarios para GitHubClient (sin red).
"""
from __future__ import annotations

from typing import Any

import pytest

from airtable_export.export.github_client import GitHubClient
from airtable_export.shared.exceptions import GitHubApiError


class _DummyResponse:
    def __init__(self, status_code: int, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload if payload is not None else {}
        self.text = str(self._payload)

    def json(self) -> Any:
        return self._payload


class _DummySession:
    def __init__(self, response: _DummyResponse) -> None:
        self._response = response
        self.gets: list[dict[str, Any]] = []
        self.puts: list[dict[str, Any]] = []

    def get(self, url, headers=None, params=None, timeout=None):
        self.gets.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        return self._response

    def put(self, url, headers=None, json=None, timeout=None):
        self.puts.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        return self._response


CONTENTS_URL = "https://api.github.com/repos/zoul/airtable-export/contents/data.json"


class TestGitHubClient:
    """Tests para lectura de SHA y escritura de archivos."""

    def test_get_file_sha_returns_blob_sha(self):
        session = _DummySession(_DummyResponse(200, {"sha": "abc123", "path": "data.json"}))
        client = GitHubClient("tok", "zoul", "airtable-export", session=session)

        assert client.get_file_sha("data.json") == "abc123"
        call = session.gets[0]
        assert call["url"] == CONTENTS_URL
        assert call["headers"]["Authorization"] == "Bearer tok"
        assert call["params"] is None

    def test_get_file_sha_passes_branch_as_ref(self):
        session = _DummySession(_DummyResponse(200, {"sha": "abc123"}))
        client = GitHubClient("tok", "zoul", "airtable-export", branch="data", session=session)

        client.get_file_sha("exports/my table.json")
        assert session.gets[0]["params"] == {"ref": "data"}
        assert session.gets[0]["url"].endswith("/contents/exports/my%20table.json")

    def test_missing_file_raises(self):
        session = _DummySession(_DummyResponse(404, {"message": "Not Found"}))
        client = GitHubClient("tok", "zoul", "airtable-export", session=session)

        with pytest.raises(GitHubApiError) as exc_info:
            client.get_file_sha("data.json")
        assert exc_info.value.status_code == 404

    def test_directory_listing_without_sha_raises(self):
        session = _DummySession(_DummyResponse(200, [{"name": "data.json", "sha": "abc"}]))
        client = GitHubClient("tok", "zoul", "airtable-export", session=session)

        with pytest.raises(GitHubApiError):
            client.get_file_sha("exports")

    def test_create_or_update_sends_sha_precondition(self):
        session = _DummySession(_DummyResponse(200, {"commit": {"sha": "commit789"}}))
        client = GitHubClient("tok", "zoul", "airtable-export", session=session)

        commit_sha = client.create_or_update_file(
            "data.json", message="Update data", content="W10=", sha="abc123"
        )

        assert commit_sha == "commit789"
        call = session.puts[0]
        assert call["url"] == CONTENTS_URL
        assert call["json"] == {"message": "Update data", "content": "W10=", "sha": "abc123"}

    def test_create_or_update_includes_branch(self):
        session = _DummySession(_DummyResponse(201, {"commit": {"sha": "c1"}}))
        client = GitHubClient("tok", "zoul", "airtable-export", branch="data", session=session)

        client.create_or_update_file("data.json", message="m", content="W10=", sha="s")
        assert session.puts[0]["json"]["branch"] == "data"

    def test_stale_sha_is_rejected(self):
        session = _DummySession(_DummyResponse(409, {"message": "data.json does not match abc123"}))
        client = GitHubClient("tok", "zoul", "airtable-export", session=session)

        with pytest.raises(GitHubApiError) as exc_info:
            client.create_or_update_file("data.json", message="m", content="W10=", sha="abc123")
        assert exc_info.value.status_code == 409
