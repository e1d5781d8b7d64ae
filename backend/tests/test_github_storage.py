"""Upload naming, the GitHub contents API calls and Overleaf links."""

import asyncio
import base64
import json
from datetime import datetime

import httpx
import pytest

from app.core.config import settings
from app.services import github_storage
from app.services.github_storage import (
    GitHubError,
    MissingGitHubConfig,
    build_overleaf_url,
    build_resume_filename,
    build_upload_path,
    check_repository,
    normalize_part,
    upload_latex,
)

DOWNLOAD_URL = "https://raw.githubusercontent.com/jane/cv/main/custom/file.tex"


def _mock_async_client(monkeypatch, handler):
    real_client = httpx.AsyncClient

    def factory(*args, **kwargs):
        return real_client(transport=httpx.MockTransport(handler))

    monkeypatch.setattr(github_storage.httpx, "AsyncClient", factory)


class TestNaming:
    @pytest.mark.parametrize("value,expected", [
        ("Acme Corp.", "Acme_Corp"),
        ("  --Senior / Staff Engineer--  ", "Senior_Staff_Engineer"),
        ("R-1234", "R_1234"),
        ("", "fallback"),
        (None, "fallback"),
        ("!!!", "fallback"),
    ])
    def test_normalize_part(self, value, expected):
        assert normalize_part(value, "fallback") == expected

    def test_filename_parts(self, monkeypatch):
        monkeypatch.setattr(github_storage, "random_suffix", lambda length=5: "ab12c")

        name = build_resume_filename("Jane Doe", "Acme Corp", "Backend Engineer", "R-42")

        assert name == "Jane_Doe_Acme_Corp_Backend_Engineer_R_42_ab12c"

    def test_filename_fallbacks_and_empty_job_id(self, monkeypatch):
        monkeypatch.setattr(github_storage, "random_suffix", lambda length=5: "zzzzz")

        assert build_resume_filename(None, "", None, "") == "User_Company_Role_zzzzz"

    def test_random_suffix(self):
        suffix = github_storage.random_suffix()
        assert len(suffix) == 5
        assert suffix.isalnum() and suffix == suffix.lower()

    def test_upload_path_uses_date_folder(self):
        path = build_upload_path("Jane_Doe_Acme", now=datetime(2026, 3, 7, 9, 30))
        assert path == "custom/Mar 07, 2026/Jane_Doe_Acme.tex"

    def test_overleaf_url_encodes_everything(self):
        url = build_overleaf_url("https://raw.example.com/a b/c.tex?x=1")
        assert url == (
            "https://www.overleaf.com/docs?snip_uri="
            "https%3A%2F%2Fraw.example.com%2Fa%20b%2Fc.tex%3Fx%3D1"
        )


class TestUpload:
    def test_put_contents(self, monkeypatch):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(201, json={"content": {"download_url": DOWNLOAD_URL}})

        _mock_async_client(monkeypatch, handler)

        result = asyncio.run(upload_latex("\\documentclass{article}", "ghp_x", "jane", "cv", "Jane_Doe"))

        assert result.download_url == DOWNLOAD_URL
        assert result.path.startswith("custom/") and result.path.endswith("/Jane_Doe.tex")
        sent = requests[0]
        assert sent.method == "PUT"
        assert sent.url.path.startswith("/repos/jane/cv/contents/custom/")
        assert sent.headers["Authorization"] == "Bearer ghp_x"
        body = json.loads(sent.content)
        assert body["message"] == "Resume upload"
        assert base64.b64decode(body["content"]).decode("utf-8") == "\\documentclass{article}"

    def test_environment_fallback(self, monkeypatch):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(201, json={"content": {"download_url": DOWNLOAD_URL}})

        _mock_async_client(monkeypatch, handler)
        monkeypatch.setattr(settings, "GITHUB_TOKEN", "ghp_env")
        monkeypatch.setattr(settings, "GITHUB_OWNER", "env-owner")
        monkeypatch.setattr(settings, "GITHUB_REPO", "env-repo")

        asyncio.run(upload_latex("content", repo="own-repo", filename="f"))

        assert requests[0].url.path.startswith("/repos/env-owner/own-repo/")
        assert requests[0].headers["Authorization"] == "Bearer ghp_env"

    def test_missing_configuration(self):
        with pytest.raises(MissingGitHubConfig, match="Missing GitHub configuration."):
            asyncio.run(upload_latex("content", filename="f"))

    def test_rejected_upload(self, monkeypatch):
        _mock_async_client(monkeypatch, lambda request: httpx.Response(401, text='{"message":"Bad credentials"}'))

        with pytest.raises(GitHubError, match="Bad credentials"):
            asyncio.run(upload_latex("content", "ghp_x", "jane", "cv", "f"))


class TestCheckRepository:
    def test_ok(self, monkeypatch):
        _mock_async_client(monkeypatch, lambda request: httpx.Response(200, json={"full_name": "jane/cv"}))
        asyncio.run(check_repository("ghp_x", "jane", "cv"))

    def test_not_found(self, monkeypatch):
        _mock_async_client(monkeypatch, lambda request: httpx.Response(404, text='{"message":"Not Found"}'))

        with pytest.raises(GitHubError, match="Not Found"):
            asyncio.run(check_repository("ghp_x", "jane", "missing"))
